"""
Run configuration for the activity report.

Values come from the environment (``GH_TOKEN``, ``WAKATIME_API_KEY``,
``TIMEZONE``) and may be overridden from the command line.
"""

import datetime
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger("waka-readme.config")

DEFAULT_COMMIT_MESSAGE = "update README.md."


class ConfigError(ValueError):
    """Raised for missing or invalid configuration values."""


@dataclass
class ReportConfig:
    """
    Explicit configuration passed to the report pipeline.

    Args:
        github_token: Personal access token used for every GitHub call.
        wakatime_api_key: WakaTime key; empty disables the time-tracking section.
        timezone_name: IANA zone name; empty means the system local timezone.
        max_workers: Upper bound on concurrent commit-history requests.
        commit_message: Message used when committing the patched README.
        dry_run: Render the report without committing it.
    """
    github_token: str
    wakatime_api_key: str = ""
    timezone_name: str = ""
    max_workers: int = 4
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    dry_run: bool = False

    def __post_init__(self) -> None:
        if not self.github_token:
            raise ConfigError("a GitHub token is required (set GH_TOKEN or pass --token)")
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")
        self.tzinfo  # unknown zone names fail here

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ReportConfig":
        """
        Build a config from environment variables.

        Keyword overrides whose value is None are ignored so that unset
        command-line options fall back to the environment.
        """
        env = os.environ if environ is None else environ
        values = {
            "github_token": env.get("GH_TOKEN", ""),
            "wakatime_api_key": env.get("WAKATIME_API_KEY", ""),
            "timezone_name": env.get("TIMEZONE", ""),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def wakatime_enabled(self) -> bool:
        return bool(self.wakatime_api_key)

    @property
    def tzinfo(self) -> Optional[datetime.tzinfo]:
        """
        Resolve the report timezone, raising ConfigError for unknown names.

        None stands for the system local zone, which ``astimezone(None)``
        applies per instant with its own DST rules.
        """
        if not self.timezone_name:
            return None
        try:
            return ZoneInfo(self.timezone_name)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ConfigError(f"unknown timezone {self.timezone_name!r}") from e

    @property
    def timezone_label(self) -> str:
        return self.timezone_name or "local (%s)" % datetime.datetime.now().astimezone().tzname()
