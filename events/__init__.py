"""
events: In-memory drive event log
==================================

Records the discrete events of a simulated drive (route planning, zone
transitions, start / pause / resume / completion / reset) for the UI
event panel and the log file.

Modules
-------
message
    :class:`SimEvent` dataclass and :class:`EventKind` enum.
event_log
    :class:`EventLog` newest-first store with polling.
metrics
    :class:`EventMetrics` per-kind counters.
"""

from .message import EventKind, SimEvent
from .event_log import EventLog
from .metrics import EventMetrics

__all__ = [
    "EventKind",
    "SimEvent",
    "EventLog",
    "EventMetrics",
]
