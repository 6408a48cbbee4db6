"""Sliding time window of recently seen (repository, commit) pairs.

Used to skip reprocessing a commit that was already handled within the
window. Timestamps come from the monotonic clock and records are only ever
evicted from the front, so the deque stays sorted by timestamp even when the
wall clock steps backwards.
"""

from __future__ import annotations

import logging
import os
import time
from collections import deque
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitRecord:
    """A (repository, commit) pair and the time it was seen."""

    timestamp: float
    repository_uri: str
    commit_hash: str


class RecentCommits:
    """In-memory window of commits seen in the last ``timespan`` seconds.

    Not thread-safe; callers sharing an instance must lock around it.
    """

    def __init__(self, timespan_seconds: float) -> None:
        self._timespan = timespan_seconds
        self._queue: deque[CommitRecord] = deque()

    @classmethod
    def from_env(cls) -> RecentCommits:
        """Create RecentCommits with the window from environment variables."""
        timespan = float(os.environ.get("RECENT_COMMITS_WINDOW_SECONDS", "300"))
        return cls(timespan_seconds=timespan)

    @property
    def timespan(self) -> float:
        return self._timespan

    def add(self, repository_uri: str, commit_hash: str) -> None:
        """Record a commit as seen now. Duplicates are appended, not merged."""
        now = time.monotonic()
        self._queue.append(CommitRecord(now, repository_uri, commit_hash))
        self.clean(now)

    def has(self, repository_uri: str, commit_hash: str) -> bool:
        """Return True if the pair was added within the window."""
        self.clean(time.monotonic())
        for record in self._queue:
            if (
                record.repository_uri == repository_uri
                and record.commit_hash == commit_hash
            ):
                return True
        return False

    def clean(self, now: float) -> None:
        """Evict records older than the window (age == timespan is kept)."""
        evicted = 0
        while self._queue and now - self._queue[0].timestamp > self._timespan:
            self._queue.popleft()
            evicted += 1
        if evicted:
            logger.debug("Evicted %d expired commit record(s)", evicted)

    def __len__(self) -> int:
        return len(self._queue)
