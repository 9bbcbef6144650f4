#!/usr/bin/env python3
"""
Main driver script for the activity report.

This script provides the command-line interface and coordinates all modules
to render the weekly GitHub/WakaTime report into the profile README.

Usage (example):
    GH_TOKEN=... python -m waka_readme.main --timezone Europe/Berlin
"""

import argparse
import datetime
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from .aggregator import aggregate_commits, aggregate_languages
from .config import ConfigError, ReportConfig
from .fetcher import GitHubFetcher, WakaTimeFetcher, first_day_of_week
from .generator import ReportGenerator
from .models import UserProfile
from .publisher import ReadmePublisher

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("waka-readme")


@dataclass
class Report:
    """A rendered report and the viewer it belongs to."""
    viewer: UserProfile
    body: str


def build_report(
    config: ReportConfig,
    fetcher: Optional[GitHubFetcher] = None,
    wakatime: Optional[WakaTimeFetcher] = None,
    now: Optional[datetime.datetime] = None,
) -> Report:
    """
    Fetch, aggregate and render the report for the configured user.

    GitHub failures propagate and abort the run. A WakaTime failure is logged
    and the time-tracking section is left out.

    Args:
        config: Run configuration
        fetcher: GitHub data source; built from the config when omitted
        wakatime: WakaTime data source; built from the config when omitted
        now: Current moment, for tests

    Returns:
        The rendered Report
    """
    tz = config.tzinfo
    now = now or datetime.datetime.now(datetime.timezone.utc).astimezone(tz)
    fetcher = fetcher or GitHubFetcher(config.github_token)

    logger.info("Fetching user info...")
    viewer = fetcher.fetch_viewer()

    logger.info("Fetching user data for %s...", viewer.login)
    user = fetcher.fetch_user_data(viewer.login, now=now)

    stats = None
    if config.wakatime_enabled:
        wakatime = wakatime or WakaTimeFetcher(config.wakatime_api_key)
        try:
            stats = wakatime.fetch_stats()
        except RuntimeError as e:
            logger.error("%s; omitting the WakaTime section", e)

    since = first_day_of_week(now, tz)
    events = fetcher.fetch_all_commits(viewer, user.repositories, since, max_workers=config.max_workers)

    logger.info("Aggregating %d commits in timezone %s...", len(events), config.timezone_label)
    commits = aggregate_commits(events, [repo.name for repo in user.repositories], tz)
    languages = aggregate_languages(user.repositories)

    generator = ReportGenerator(now=now)
    body = generator.assemble(user, commits, languages, stats)
    return Report(viewer=viewer, body=body)


def main(argv: Optional[list] = None) -> None:
    """
    Main entry point for the activity report.

    Parses command line arguments, builds the report and commits it to the
    viewer's profile README.
    """
    parser = argparse.ArgumentParser(description="Render weekly GitHub activity into your profile README.")
    parser.add_argument("--token", "-t", help="GitHub token (defaults to $GH_TOKEN)")
    parser.add_argument("--wakatime-key", "-w", help="WakaTime API key (defaults to $WAKATIME_API_KEY)")
    parser.add_argument("--timezone", "-z", help="IANA timezone name (defaults to $TIMEZONE or local time)")
    parser.add_argument("--max-workers", type=int, help="Concurrent commit-history requests")
    parser.add_argument("--output", "-o", help="Also write the report body to this file")
    parser.add_argument("--dry-run", action="store_true", default=None, help="Render without committing")
    args = parser.parse_args(argv)

    try:
        config = ReportConfig.from_env(
            github_token=args.token,
            wakatime_api_key=args.wakatime_key,
            timezone_name=args.timezone,
            max_workers=args.max_workers,
            dry_run=args.dry_run,
        )

        report = build_report(config)

        if args.output:
            logger.info("Writing report to %s", args.output)
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(report.body)

        logger.info("Updating README for %s...", report.viewer.login)
        publisher = ReadmePublisher(config.github_token, dry_run=config.dry_run)
        publisher.publish(report.viewer.login, report.body, config.commit_message)

        print(report.body)
        print("build readme successful!")

    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        print(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Report generation interrupted by user")
        print("\nOperation cancelled by user")
        sys.exit(1)
    except Exception as e:
        logger.error("Report generation failed: %s", e)
        print(f"Error: report generation failed - {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
