"""
Holder for the currently loaded BuildStats.

A load is a whole, independent transform: it takes a ticket, normalizes
with no lock held, then publishes. The newest ticket wins. A load that
finishes after a newer one was published is discarded whole, so readers
always see one complete BuildStats or none.
"""
import itertools
import logging
import threading

from fastapi import HTTPException

from models import BuildStats

logger = logging.getLogger(__name__)


class StatsStore:
    def __init__(self):
        self._lock      = threading.Lock()
        self._tickets   = itertools.count(1)
        self._stats     = None
        self._source    = None
        self._published = 0

    def begin_load(self) -> int:
        with self._lock:
            return next(self._tickets)

    def publish(self, ticket: int, stats: BuildStats, source: str = "") -> bool:
        """Install stats if ticket is newer than what is loaded. Returns whether it was."""
        with self._lock:
            if ticket < self._published:
                logger.info("Discarding load #%d from %s: superseded by #%d", ticket, source or "request", self._published)
                return False
            self._stats     = stats
            self._source    = source
            self._published = ticket
        logger.info(
            "Loaded #%d from %s: %d modules, %d assets, %d chunks",
            ticket, source or "request", len(stats.modules), len(stats.assets), len(stats.chunks),
        )
        return True

    def current(self) -> BuildStats | None:
        with self._lock:
            return self._stats

    @property
    def source(self) -> str | None:
        with self._lock:
            return self._source

    def clear(self) -> None:
        with self._lock:
            self._stats     = None
            self._source    = None
            self._published = 0


STORE = StatsStore()


def get_stats() -> BuildStats:
    stats = STORE.current()
    if stats is None:
        raise HTTPException(
            status_code=404,
            detail="No build stats loaded. POST a stats object to /api/stats first.",
        )
    return stats
