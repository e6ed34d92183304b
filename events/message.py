"""
SimEvent: Data structure representing one entry of the drive event log.
"""

from dataclasses import dataclass
from enum import Enum


class EventKind(str, Enum):
    """Discrete event categories emitted by the engine and the bridge."""

    SYSTEM = "system"
    ROUTE_PLANNING = "route_planning"
    ROUTE_PLANNED = "route_planned"
    ROUTE_FAILED = "route_failed"
    STARTED = "started"
    PAUSED = "paused"
    RESUMED = "resumed"
    ZONE_ENTERED = "zone_entered"
    ZONE_EXITED = "zone_exited"
    COMPLETED = "completed"
    RESET = "reset"
    ERROR = "error"


@dataclass(frozen=True)
class SimEvent:
    """
    Represents a single event shown in the event log.

    Attributes:
        id (str): Unique identifier for the event.
        kind (EventKind): Category of the event.
        text (str): Human-readable message.
        ts (float): Timestamp (in seconds) when the event was created.
    """
    id: str
    kind: EventKind
    text: str
    ts: float
