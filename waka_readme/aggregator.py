"""
Aggregation of raw GitHub activity into count distributions.

Commit timestamps are bucketed by time of day, weekday and repository in a
single pass; repositories are bucketed by primary language. Every
distribution tracks its leading key as the events stream in.
"""

import datetime
import logging
from dataclasses import dataclass, field
from typing import Dict, Generic, Hashable, Iterable, List, Optional, TypeVar

from .formatter import ratio
from .models import CommitEvent, RepositorySummary, TimeBucket, Weekday

logger = logging.getLogger("waka-readme.aggregator")

K = TypeVar("K", bound=Hashable)

OTHER_LANGUAGE = "Other"


class Distribution(Generic[K]):
    """
    Ordered mapping of bucket keys to counts with a running maximum.

    The leading key is replaced only when another key's count becomes
    strictly greater, so on ties the key that reached the count first wins.

    Args:
        keys: Buckets to pre-seed with a count of zero, in iteration order.
    """

    def __init__(self, keys: Iterable[K] = ()) -> None:
        self._counts: Dict[K, int] = {key: 0 for key in keys}
        self._best_key: Optional[K] = None
        self._best_count = 0
        self._total = 0

    def add(self, key: K) -> None:
        count = self._counts.get(key, 0) + 1
        self._counts[key] = count
        self._total += 1
        if count > self._best_count:
            self._best_key = key
            self._best_count = count

    def count(self, key: K) -> int:
        return self._counts.get(key, 0)

    def share(self, key: K) -> float:
        """Fraction of the total held by ``key``; 0.0 for an empty distribution."""
        return ratio(self.count(key), self._total)

    @property
    def total(self) -> int:
        return self._total

    @property
    def max_key(self) -> Optional[K]:
        """First key to reach the highest count, or None when nothing was added."""
        return self._best_key

    def keys(self) -> List[K]:
        return list(self._counts)

    def items(self):
        return self._counts.items()

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"Distribution({self._counts!r}, max_key={self._best_key!r})"


@dataclass
class CommitDistributions:
    """The three views of one week of commits."""
    by_time: Distribution = field(default_factory=lambda: Distribution(TimeBucket))
    by_weekday: Distribution = field(default_factory=lambda: Distribution(Weekday))
    by_repository: Distribution = field(default_factory=Distribution)

    @property
    def total(self) -> int:
        return self.by_time.total


@dataclass
class LanguageDistribution:
    """Repository counts per primary language plus visibility counters."""
    languages: Distribution = field(default_factory=Distribution)
    public: int = 0
    private: int = 0

    @property
    def total(self) -> int:
        return self.public + self.private


def aggregate_commits(
    events: Iterable[CommitEvent],
    repository_names: Iterable[str] = (),
    tz: Optional[datetime.tzinfo] = None,
) -> CommitDistributions:
    """
    Bucket commits by time of day, weekday and repository.

    Args:
        events: Commits in the order they were fetched
        repository_names: Repositories to list even when they have no commits
        tz: Timezone the timestamps are converted to before classification;
            None means the system local zone

    Returns:
        CommitDistributions built in one pass over ``events``
    """
    result = CommitDistributions(by_repository=Distribution(repository_names))
    for event in events:
        moment = event.timestamp.astimezone(tz)
        result.by_time.add(TimeBucket.from_hour(moment.hour))
        result.by_weekday.add(Weekday.from_datetime(moment))
        result.by_repository.add(event.repository_name)

    logger.debug("Aggregated %d commits across %d repositories",
                 result.total, len(result.by_repository))
    return result


def aggregate_languages(repositories: Iterable[RepositorySummary]) -> LanguageDistribution:
    """
    Count repositories per primary language.

    Repositories without a primary language are counted as ``"Other"``.
    """
    result = LanguageDistribution()
    for repo in repositories:
        result.languages.add(repo.primary_language or OTHER_LANGUAGE)
        if repo.is_private:
            result.private += 1
        else:
            result.public += 1
    return result
