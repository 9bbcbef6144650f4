"""
Data models for the activity report.

This module contains the shared data structures used across all modules.
"""

import datetime
import enum
from dataclasses import dataclass, field
from typing import List, Optional


class TimeBucket(enum.Enum):
    """Hour-of-day ranges a commit falls into, declared in display order."""
    MORNING = "Morning"
    DAYTIME = "Daytime"
    EVENING = "Evening"
    NIGHT = "Night"

    @classmethod
    def from_hour(cls, hour: int) -> "TimeBucket":
        """Classify an hour in [0, 24) into its bucket."""
        if not 0 <= hour < 24:
            raise ValueError(f"hour out of range: {hour}")
        if hour < 6:
            return cls.NIGHT
        if hour < 12:
            return cls.MORNING
        if hour < 18:
            return cls.DAYTIME
        return cls.EVENING


class Weekday(enum.Enum):
    """Calendar weekdays in Monday to Sunday order, matching ``date.weekday()``."""
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def from_datetime(cls, moment: datetime.datetime) -> "Weekday":
        return list(cls)[moment.weekday()]


@dataclass(frozen=True)
class CommitEvent:
    """A single commit authored by the viewer, tagged with its repository."""
    repository_name: str
    timestamp: datetime.datetime


@dataclass(frozen=True)
class RepositorySummary:
    """Repository metadata from GitHub."""
    name: str
    owner_login: str
    primary_language: Optional[str]
    is_private: bool
    disk_usage_kb: int
    default_branch: Optional[str] = None


@dataclass(frozen=True)
class Issue:
    title: str
    url: str
    updated_at: datetime.datetime
    state: str = "OPEN"


@dataclass(frozen=True)
class IssueComment:
    url: str
    issue_title: str


@dataclass(frozen=True)
class UserProfile:
    """The authenticated viewer."""
    login: str
    viewer_id: str


@dataclass
class UserData:
    """Everything the user-level query returns for one report run."""
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    is_hireable: bool = False
    total_contributions: int = 0
    repository_count: int = 0
    total_disk_usage_kb: Optional[int] = None
    repositories: List[RepositorySummary] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)
    issue_comments: List[IssueComment] = field(default_factory=list)


@dataclass(frozen=True)
class WakaTimeProject:
    name: str
    text: str
    percent: float


@dataclass
class WakaTimeStats:
    """Weekly coding-time statistics from WakaTime."""
    projects: List[WakaTimeProject] = field(default_factory=list)
    human_readable_total: Optional[str] = None
    range: Optional[str] = None
