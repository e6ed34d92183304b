"""
EventLog: In-memory, newest-first log of drive simulation events.

Supports:
    - Timestamped entries tagged with an :class:`EventKind`
    - Newest-first listing for the UI panel
    - Incremental polling of entries added since the last poll
    - Per-kind counters via :class:`EventMetrics`

Every entry is also forwarded to the standard ``logging`` module so the
rotating log file keeps the full history after the UI list is cleared.
"""

import time
import uuid
import logging
from collections import deque
from typing import Callable, Deque, List, Optional

from .message import EventKind, SimEvent
from .metrics import EventMetrics

log = logging.getLogger(__name__)


class EventLog:
    """
    Bounded event store shared by the engine listener and the UI.

    Attributes:
        capacity (int): Maximum number of entries kept in memory.
        metrics (EventMetrics): Per-kind counters.
    """

    def __init__(self, capacity: int = 200, clock: Optional[Callable[[], float]] = None):
        """
        Initialize an EventLog instance.

        Args:
            capacity (int): Maximum entries kept before the oldest ones are evicted.
            clock (callable): Returns the current time in seconds (defaults to ``time.time``).
        """
        self.capacity = max(1, int(capacity))
        self._clock = clock or time.time
        self._entries: Deque[SimEvent] = deque()
        self._unread: Deque[SimEvent] = deque(maxlen=self.capacity)
        self.metrics = EventMetrics()

    def add(self, kind: EventKind, text: str) -> SimEvent:
        """
        Record a new event.

        Args:
            kind (EventKind): Event category.
            text (str): Message shown to the user.

        Returns:
            SimEvent: The stored entry.
        """
        event = SimEvent(id=str(uuid.uuid4()), kind=kind, text=text, ts=self._clock())
        self.append(event)
        return event

    def append(self, event: SimEvent) -> None:
        """Store an event created elsewhere (e.g. by the engine)."""
        self._entries.append(event)
        self._unread.append(event)
        self.metrics.record(event.kind)
        if len(self._entries) > self.capacity:
            self._entries.popleft()
            self.metrics.dropped += 1
        log.info("event kind=%s text=%s", event.kind.value, event.text)

    def entries(self, limit: Optional[int] = None) -> List[SimEvent]:
        """
        Return stored events, newest first.

        Args:
            limit (int): Optional maximum number of entries to return.
        """
        newest_first = list(reversed(self._entries))
        if limit is not None:
            return newest_first[:limit]
        return newest_first

    def poll(self) -> List[SimEvent]:
        """
        Retrieve and clear the events added since the previous poll.
        At most ``capacity`` of the newest ones are kept between polls.

        Returns:
            List[SimEvent]: Oldest first.
        """
        unread = list(self._unread)
        self._unread.clear()
        return unread

    def clear(self) -> None:
        """Drop every stored entry (the logging history is unaffected)."""
        self._entries.clear()
        self._unread.clear()

    def __len__(self) -> int:
        return len(self._entries)
