"""
Activity data fetching module.

This module handles the GitHub GraphQL queries that collect the viewer's
profile, repositories, issues and weekly commit history, and the WakaTime
request for weekly coding-time statistics.
"""

import datetime
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

import requests

from .models import (
    CommitEvent,
    Issue,
    IssueComment,
    RepositorySummary,
    UserData,
    UserProfile,
    WakaTimeProject,
    WakaTimeStats,
)

# Set up logging
logger = logging.getLogger("waka-readme.fetcher")

GRAPHQL_ENDPOINT = "https://api.github.com/graphql"
WAKATIME_BASE_URL = "https://wakatime.com/api/v1/"
REQUEST_TIMEOUT = 30
HISTORY_LIMIT = 100

VIEWER_QUERY = """
query {
  viewer {
    login
    id
  }
}
"""

USER_DATA_QUERY = """
query($login: String!, $from: DateTime!, $sinceOneMonth: DateTime!) {
  user(login: $login) {
    name
    email
    isHireable
    contributionsCollection(from: $from) {
      contributionCalendar {
        totalContributions
      }
    }
    repositories(last: 100, isFork: false) {
      totalCount
      totalDiskUsage
      edges {
        node {
          owner { login }
          name
          diskUsage
          isPrivate
          defaultBranchRef { name }
          primaryLanguage { name }
        }
      }
    }
    issues(last: 5, filterBy: {since: $sinceOneMonth}, orderBy: {direction: ASC, field: UPDATED_AT}) {
      edges {
        node {
          url
          title
          updatedAt
          state
        }
      }
    }
    issueComments(last: 10, orderBy: {direction: ASC, field: UPDATED_AT}) {
      edges {
        node {
          url
          issue { title }
        }
      }
    }
  }
}
"""

COMMIT_HISTORY_QUERY = """
query($owner: String!, $name: String!, $branch: String!, $id: ID!, $since: GitTimestamp!, $last: Int!) {
  repository(owner: $owner, name: $name) {
    name
    ref(qualifiedName: $branch) {
      target {
        ... on Commit {
          history(first: $last, author: {id: $id}, since: $since) {
            edges {
              node {
                committedDate
              }
            }
          }
        }
      }
    }
  }
}
"""


def parse_timestamp(value: str) -> datetime.datetime:
    """Parse a GitHub ISO 8601 timestamp (``Z`` suffix allowed)."""
    return datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))


def first_day_of_week(now: Optional[datetime.datetime] = None,
                      tz: Optional[datetime.tzinfo] = None) -> datetime.datetime:
    """
    Return the most recent Monday at 00:00 in ``tz``.

    When ``now`` already falls on a Monday that same day is returned.
    """
    now = now.astimezone(tz) if now is not None else datetime.datetime.now(tz)
    monday = now.date() - datetime.timedelta(days=now.weekday())
    start = datetime.datetime(monday.year, monday.month, monday.day)
    if tz is not None:
        return start.replace(tzinfo=tz)
    return start.astimezone()


class GitHubFetcher:
    """
    Query the GitHub GraphQL API for the data the report needs.

    Args:
        token: Personal access token for the authenticated viewer.
        session: Optional requests session shared by every thread, mainly for tests.
            When omitted each worker thread opens its own session.
    """

    def __init__(self, token: str, session: Optional[requests.Session] = None) -> None:
        self._headers = {
            "Authorization": f"Bearer {token}",
            "User-Agent": "waka-readme",
        }
        self._shared_session = session
        self._local = threading.local()
        if session is not None:
            session.headers.update(self._headers)

    def _session(self) -> requests.Session:
        """Return the session for the calling thread."""
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self._headers)
            self._local.session = session
        return session

    def query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a GraphQL query and return its ``data`` payload.

        Raises:
            RuntimeError: On transport failures, non-200 responses or GraphQL errors
        """
        try:
            response = self._session().post(
                GRAPHQL_ENDPOINT,
                json={"query": query, "variables": variables or {}},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise RuntimeError(f"GitHub GraphQL request failed: {e}") from e

        if response.status_code != 200:
            raise RuntimeError(f"GitHub GraphQL request failed: {response.status_code} {response.text[:300]}")

        payload = response.json()
        if payload.get("errors"):
            messages = " | ".join(err.get("message", "") for err in payload["errors"])
            raise RuntimeError(f"GitHub GraphQL errors: {messages}")
        return payload.get("data") or {}

    def fetch_viewer(self) -> UserProfile:
        """Fetch the login and node id of the authenticated user."""
        try:
            viewer = self.query(VIEWER_QUERY)["viewer"]
        except (RuntimeError, KeyError, TypeError, ValueError) as e:
            error_msg = f"get user info failed with error: {e}"
            logger.error(error_msg)
            raise RuntimeError(error_msg) from e
        logger.info("Authenticated as %s", viewer["login"])
        return UserProfile(login=viewer["login"], viewer_id=viewer["id"])

    def fetch_user_data(self, login: str, now: Optional[datetime.datetime] = None) -> UserData:
        """
        Fetch contributions, repositories, issues and issue comments.

        Contributions are counted from January 1st of the current year and
        issues are limited to those updated within the last month.
        """
        now = now or datetime.datetime.now(datetime.timezone.utc)
        variables = {
            "login": login,
            "from": datetime.datetime(now.year, 1, 1, tzinfo=datetime.timezone.utc).isoformat(),
            "sinceOneMonth": (now - datetime.timedelta(days=30)).isoformat(),
        }
        try:
            user = self.query(USER_DATA_QUERY, variables)["user"]
            data = self._parse_user_data(login, user)
        except (RuntimeError, KeyError, TypeError, ValueError) as e:
            error_msg = f"get user data failed with error: {e}"
            logger.error(error_msg)
            raise RuntimeError(error_msg) from e

        logger.info("Fetched %d repositories and %d issues for %s",
                    len(data.repositories), len(data.issues), login)
        return data

    @staticmethod
    def _parse_user_data(login: str, user: Dict[str, Any]) -> UserData:
        repos_conn = user.get("repositories") or {}
        repositories = []
        for edge in repos_conn.get("edges") or []:
            node = edge["node"]
            repositories.append(RepositorySummary(
                name=node["name"],
                owner_login=(node.get("owner") or {}).get("login", login),
                primary_language=(node.get("primaryLanguage") or {}).get("name"),
                is_private=bool(node.get("isPrivate")),
                disk_usage_kb=node.get("diskUsage") or 0,
                default_branch=(node.get("defaultBranchRef") or {}).get("name"),
            ))

        issues = [
            Issue(
                title=edge["node"]["title"],
                url=edge["node"]["url"],
                updated_at=parse_timestamp(edge["node"]["updatedAt"]),
                state=edge["node"].get("state", "OPEN"),
            )
            for edge in (user.get("issues") or {}).get("edges") or []
        ]
        comments = [
            IssueComment(
                url=edge["node"]["url"],
                issue_title=(edge["node"].get("issue") or {}).get("title", ""),
            )
            for edge in (user.get("issueComments") or {}).get("edges") or []
        ]

        calendar = (user.get("contributionsCollection") or {}).get("contributionCalendar") or {}
        return UserData(
            login=login,
            name=user.get("name"),
            email=user.get("email"),
            is_hireable=bool(user.get("isHireable")),
            total_contributions=calendar.get("totalContributions", 0),
            repository_count=repos_conn.get("totalCount", len(repositories)),
            total_disk_usage_kb=repos_conn.get("totalDiskUsage"),
            repositories=repositories,
            issues=issues,
            issue_comments=comments,
        )

    def fetch_commit_history(self, viewer: UserProfile, repo: RepositorySummary,
                             since: datetime.datetime) -> List[CommitEvent]:
        """
        Fetch the viewer's commits on a repository's default branch since ``since``.

        Repositories without a default branch have no history and yield no commits.

        Raises:
            RuntimeError: If the history cannot be fetched
        """
        if not repo.default_branch:
            logger.debug("Skipping %s/%s: no default branch", repo.owner_login, repo.name)
            return []

        variables = {
            "owner": repo.owner_login,
            "name": repo.name,
            "branch": repo.default_branch,
            "id": viewer.viewer_id,
            "since": since.isoformat(),
            "last": HISTORY_LIMIT,
        }
        try:
            repository = self.query(COMMIT_HISTORY_QUERY, variables)["repository"] or {}
            target = (repository.get("ref") or {}).get("target") or {}
            edges = (target.get("history") or {}).get("edges") or []
            events = [
                CommitEvent(repository_name=repo.name,
                            timestamp=parse_timestamp(edge["node"]["committedDate"]))
                for edge in edges
            ]
        except (RuntimeError, KeyError, TypeError, ValueError) as e:
            error_msg = f"Failed to fetch commits for {repo.owner_login}/{repo.name}: {e}"
            logger.error(error_msg)
            raise RuntimeError(error_msg) from e

        logger.debug("Fetched %d commits from %s/%s", len(events), repo.owner_login, repo.name)
        return events

    def fetch_all_commits(self, viewer: UserProfile, repositories: Sequence[RepositorySummary],
                          since: datetime.datetime, max_workers: int = 4) -> List[CommitEvent]:
        """
        Fetch commit histories for every repository using a bounded thread pool.

        Results are concatenated in the order of ``repositories`` regardless of
        completion order. The first failure cancels the fetches that have not
        started yet and is re-raised, aborting the run.
        """
        logger.info("Fetching commit history for %d repositories since %s",
                    len(repositories), since.isoformat())
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(self.fetch_commit_history, viewer, repo, since)
                       for repo in repositories]
            events: List[CommitEvent] = []
            try:
                for future in futures:
                    events.extend(future.result())
            except BaseException:
                pool.shutdown(wait=False, cancel_futures=True)
                raise
        logger.info("Fetched %d commits in total", len(events))
        return events


class WakaTimeFetcher:
    """
    Fetch weekly coding statistics from the WakaTime API.

    Args:
        api_key: WakaTime secret API key.
        session: Optional requests session, mainly for tests.
    """

    def __init__(self, api_key: str, session: Optional[requests.Session] = None) -> None:
        self.api_key = api_key
        self._session = session or requests.Session()

    def fetch_stats(self) -> WakaTimeStats:
        """
        Fetch stats for the trailing seven days.

        Raises:
            RuntimeError: On network, HTTP or decoding failures
        """
        try:
            response = self._session.get(
                WAKATIME_BASE_URL + "users/current/stats/last_7_days",
                params={"api_key": self.api_key},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            data = response.json()["data"]
            if not isinstance(data, dict):
                raise TypeError(f"expected an object for 'data', got {type(data).__name__}")
            projects = [
                WakaTimeProject(
                    name=project["name"],
                    text=project.get("text", ""),
                    percent=float(project.get("percent", 0.0)),
                )
                for project in data.get("projects") or []
            ]
            stats = WakaTimeStats(
                projects=projects,
                human_readable_total=data.get("human_readable_total"),
                range=data.get("range"),
            )
        except (requests.RequestException, KeyError, TypeError, ValueError, AttributeError) as e:
            raise RuntimeError(f"get wakatime stats failed with error: {e}") from e

        logger.info("Fetched WakaTime stats for %d projects", len(projects))
        return stats
