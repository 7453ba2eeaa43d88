"""Connection-success ledger and working-URL cache.

Holds two pieces of process-lifetime state that always move together:

- ``stats``: candidate URL -> number of confirmed successful connections.
  Counts only ever grow until ``reset()``.
- ``working_url``: the last candidate confirmed reachable. Every write goes
  through ``record_success`` so a set working URL always has a count >= 1.

Counts reorder future candidate lists (most reliable first).
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class ConnectionCache:
    """In-memory success ledger plus the cached working URL."""

    def __init__(self) -> None:
        self._stats: dict[str, int] = {}
        self._working_url: str | None = None

    # ------------------------------------------------------------------
    # Working URL
    # ------------------------------------------------------------------

    @property
    def working_url(self) -> str | None:
        return self._working_url

    def clear_working_url(self) -> None:
        """Forget the working URL so the next resolution regenerates candidates."""
        self._working_url = None
        logger.info("Connection cache cleared")

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    def record_success(self, url: str) -> int:
        """Count a confirmed connection to ``url`` and make it the working URL.

        Returns the updated count.
        """
        count = self._stats.get(url, 0) + 1
        self._stats[url] = count
        self._working_url = url
        logger.info(
            "Connection stats updated for %s: %d successful connections",
            url,
            count,
            extra={"candidate_url": url},
        )
        return count

    def success_count(self, url: str) -> int:
        return self._stats.get(url, 0)

    def get_stats(self) -> dict[str, int]:
        """Return a copy of the success counts."""
        return dict(self._stats)

    def reset(self) -> None:
        """Clear all success counts. The working URL is left in place."""
        self._stats.clear()
        logger.info("Connection stats reset")

    def prioritize(self, urls: list[str]) -> list[str]:
        """Order ``urls`` by descending success count.

        ``sorted`` is stable, so equally counted URLs keep their input order.
        The input list is not modified.
        """
        return sorted(urls, key=lambda url: -self._stats.get(url, 0))

    def snapshot(self) -> dict:
        """State summary for the control API."""
        return {
            "working_url": self._working_url,
            "stats": self.get_stats(),
            "total_successes": sum(self._stats.values()),
        }
