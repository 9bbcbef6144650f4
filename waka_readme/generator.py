"""
Report Generation Module

This module contains the ReportGenerator class responsible for rendering
the aggregated activity data into the markdown blocks spliced into the
profile README.
"""

import datetime
from typing import Iterable, List, Optional

from .aggregator import CommitDistributions, LanguageDistribution
from .formatter import format_row, ratio
from .models import Issue, TimeBucket, UserData, WakaTimeStats, Weekday

UNKNOWN_PROJECT = "Unknown Project"


class ReportGenerator:
    """
    Compose the activity report from aggregated data.

    Each ``render_*`` method returns one self-contained text block; ``assemble``
    joins them in their fixed order.

    Args:
        now: Moment the report is generated, used for the contribution year.
    """

    def __init__(self, now: Optional[datetime.datetime] = None) -> None:
        self.now = now or datetime.datetime.now()

    def render_issues(self, issues: Iterable[Issue]) -> str:
        """
        Render recent issues as markdown links, newest first.

        Issues arrive ordered by ascending update time and each one is placed
        in front of those already rendered.
        """
        content = "\n"
        for issue in issues:
            content = f"[{issue.title}]({issue.url})\n\n" + content
        return content

    def render_profile(self, user: UserData, languages: LanguageDistribution) -> str:
        """
        Render the GitHub profile summary block.

        Args:
            user: User-level data (contributions, hireable flag, disk usage)
            languages: Aggregated repositories, for the visibility counts

        Returns:
            Formatted profile block
        """
        disk_usage_kb = user.total_disk_usage_kb
        if disk_usage_kb is None:
            disk_usage_kb = sum(repo.disk_usage_kb for repo in user.repositories)

        lines = ["**🐱 My Github Data**\n"]
        lines.append(f"> 🏆 {user.total_contributions} Contributions in the Year {self.now.year}\n >\n")
        lines.append(f"> 📦 package {disk_usage_kb / 1024:.2f} MB Used in Github's Storage\n >\n")
        if user.is_hireable:
            lines.append("> 💼 Opted to Hire\n >\n")
        else:
            lines.append("> 🚫 Not Opted to Hire\n >\n")
        lines.append(f"> 🚪 {languages.public} Public Repositories\n >\n")
        lines.append(f"> 🔑 {languages.private} Private Repositories\n >\n")
        return "".join(lines)

    def render_commits(self, commits: CommitDistributions) -> str:
        """
        Render the time-of-day, weekday and repository blocks.

        Time buckets and weekdays are listed in their fixed order; repositories
        are sorted by name and those without commits are left out.
        """
        total = commits.total
        lines: List[str] = ["\n", "**I'm an Early 🐤** \n", "```text\n"]
        for bucket in TimeBucket:
            lines.append(self._commit_row(bucket.value, commits.by_time.count(bucket), total))
        lines.append("```\n")

        max_day = commits.by_weekday.max_key
        lines.append("\n")
        lines.append(f"**📅 I'm Most Productive on {max_day.value if max_day else ''}**\n")
        lines.append("```text\n")
        for day in Weekday:
            lines.append(self._commit_row(day.value, commits.by_weekday.count(day), total))
        lines.append("```\n")

        lines.append("\n")
        lines.append(f"**📽 I'm Most Contribute to {commits.by_repository.max_key or ''}**\n")
        lines.append("```text\n")
        for repo in sorted(commits.by_repository.keys()):
            count = commits.by_repository.count(repo)
            if count == 0:
                continue
            lines.append(self._commit_row(repo, count, total))
        lines.append("```\n")
        lines.append("\n")
        return "".join(lines)

    def render_languages(self, languages: LanguageDistribution, repository_count: int = 0) -> str:
        """
        Render the primary-language block.

        Args:
            languages: Aggregated language counts
            repository_count: Total repositories owned; defaults to the number aggregated

        Returns:
            Formatted language block, languages sorted by name
        """
        total = repository_count or languages.total
        lines = ["\n", f"**❤ I Mostly Code in {languages.languages.max_key or ''}**\n", "\n", "```text\n"]
        for name in sorted(languages.languages.keys()):
            count = languages.languages.count(name)
            share = ratio(count, total)
            lines.append(format_row(name, f"{count} repos", share, share * 100))
        lines.append("```\n")
        return "".join(lines)

    def render_wakatime(self, stats: WakaTimeStats) -> str:
        """Render the weekly per-project coding time from WakaTime."""
        lines = ["\n", "**📊 This Week I Spent My Time On**\n", "```text\n"]
        for project in stats.projects:
            if project.name == UNKNOWN_PROJECT:
                continue
            fraction = min(max(project.percent / 100, 0.0), 1.0)
            lines.append(format_row(project.name, project.text, fraction, project.percent))
        lines.append("```\n")
        return "".join(lines)

    def assemble(
        self,
        user: UserData,
        commits: CommitDistributions,
        languages: LanguageDistribution,
        wakatime: Optional[WakaTimeStats] = None,
    ) -> str:
        """
        Build the full report body.

        Sections are concatenated as issues, profile, commits, languages and,
        when stats are given, WakaTime.
        """
        sections = [
            self.render_issues(user.issues),
            self.render_profile(user, languages),
            self.render_commits(commits),
            self.render_languages(languages, user.repository_count),
        ]
        if wakatime is not None:
            sections.append(self.render_wakatime(wakatime))
        return "".join(sections)

    @staticmethod
    def _commit_row(label: str, count: int, total: int) -> str:
        share = ratio(count, total)
        return format_row(label, f"{count} commits", share, share * 100)
