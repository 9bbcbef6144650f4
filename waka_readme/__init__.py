"""
waka-readme - Render weekly GitHub and WakaTime activity into a profile README.
"""

from .models import CommitEvent, RepositorySummary, TimeBucket, Weekday
from .config import ConfigError, ReportConfig
from .aggregator import Distribution, aggregate_commits, aggregate_languages
from .fetcher import GitHubFetcher, WakaTimeFetcher
from .generator import ReportGenerator
from .publisher import ReadmePublisher, splice_section
from .main import build_report, main

__all__ = [
    'CommitEvent',
    'RepositorySummary',
    'TimeBucket',
    'Weekday',
    'ConfigError',
    'ReportConfig',
    'Distribution',
    'aggregate_commits',
    'aggregate_languages',
    'GitHubFetcher',
    'WakaTimeFetcher',
    'ReportGenerator',
    'ReadmePublisher',
    'splice_section',
    'build_report',
    'main'
]
