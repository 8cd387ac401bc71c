"""Typed event bus — lifecycle notifications from the replay controller.

Hosts subscribe to these to update UI (e.g. "new best!" banners) or to
persist a finished run without polling the controller.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Type

T = TypeVar("T")


# -- Run events ----------------------------------------------------------

@dataclass(frozen=True)
class RunStarted:
    """A new capture session began."""
    snapshot_stride: int
    max_duration: float


@dataclass(frozen=True)
class RunFinished:
    """A capture session was saved into the registry."""
    duration: float
    new_best: bool


@dataclass(frozen=True)
class RunDiscarded:
    """A capture session was thrown away (e.g. restart)."""
    duration: float


# -- Replay events -------------------------------------------------------

@dataclass(frozen=True)
class ReplayStarted:
    """A ghost began playing a stored run."""
    kind: str
    duration: float


@dataclass(frozen=True)
class ReplayCompleted:
    """A ghost reached the end of its run."""
    kind: str


@dataclass(frozen=True)
class ReplayStopped:
    """A ghost was stopped before reaching the end."""
    kind: str


# -- Event Bus -----------------------------------------------------------

class EventBus:
    """Simple synchronous event bus with typed events.

    Usage:
        bus = EventBus()
        bus.on(RunFinished, lambda e: print(e.new_best))
        bus.emit(RunFinished(duration=12.5, new_best=True))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for an event type."""
        self._handlers[event_type].append(handler)

    def emit(self, event: object) -> None:
        """Emit an event to all registered handlers."""
        for handler in self._handlers.get(type(event), []):
            handler(event)
