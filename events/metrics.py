"""
EventMetrics: Tracks simple statistics for the event log.
"""

from typing import Dict

from .message import EventKind


class EventMetrics:
    """
    Counts logged events per :class:`EventKind`.

    Attributes:
        total (int): Number of events recorded since construction or the last reset.
        dropped (int): Events evicted because the log reached its capacity.
    """

    def __init__(self):
        """Initialize all counters to zero."""
        self.total = 0
        self.dropped = 0
        self._by_kind: Dict[EventKind, int] = {}

    def record(self, kind: EventKind) -> None:
        self.total += 1
        self._by_kind[kind] = self._by_kind.get(kind, 0) + 1

    def count(self, kind: EventKind) -> int:
        return self._by_kind.get(kind, 0)

    def reset(self) -> None:
        self.total = 0
        self.dropped = 0
        self._by_kind.clear()

    def report(self) -> dict:
        """
        Return a snapshot of current metrics.

        Returns:
            dict: 'total', 'dropped' and one counter per event kind seen so far.
        """
        snapshot = {"total": self.total, "dropped": self.dropped}
        for kind, value in self._by_kind.items():
            snapshot[kind.value] = value
        return snapshot
