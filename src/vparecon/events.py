"""Typed progress and outcome events.

Components emit these to an injected sink instead of writing free-text log
lines, so callers can observe progress (or collect events in tests) without
parsing messages.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional, Protocol


@dataclass(frozen=True)
class RowRejected:
    """A source row failed validation."""

    row_number: int
    reason: str


@dataclass(frozen=True)
class BatchCompleted:
    """An import batch finished (successfully or not)."""

    batch_index: int
    batch_count: int
    size: int
    written_count: int
    status: str
    error: Optional[str] = None


@dataclass(frozen=True)
class MatchProgress:
    """A matching chunk finished."""

    processed_count: int
    total_count: int
    matched_count: int


@dataclass(frozen=True)
class DeleteProgress:
    """A bulk-delete batch finished."""

    batch_index: int
    batch_count: int
    deleted_count: int
    total_requested: int
    succeeded: bool
    error: Optional[str] = None

    @property
    def percent(self) -> float:
        if self.total_requested == 0:
            return 100.0
        return self.deleted_count / self.total_requested * 100


Event = RowRejected | BatchCompleted | MatchProgress | DeleteProgress


class EventSink(Protocol):
    """Receiver of typed events."""

    def emit(self, event: Event) -> None: ...


class NullEventSink:
    """Sink that discards every event."""

    def emit(self, event: Event) -> None:
        pass


class CollectingEventSink:
    """Sink that keeps events in memory."""

    def __init__(self):
        self.events: list[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list[Event]:
        return [e for e in self.events if isinstance(e, event_type)]


class LoggingEventSink:
    """Sink that writes each event as a key=value log line."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("vparecon.events")

    def emit(self, event: Event) -> None:
        level = logging.INFO
        if isinstance(event, RowRejected):
            level = logging.WARNING
        elif isinstance(event, (BatchCompleted, DeleteProgress)) and event.error:
            level = logging.ERROR
        elif isinstance(event, MatchProgress):
            level = logging.DEBUG
        fields = " ".join(f"{key}={value}" for key, value in asdict(event).items())
        self.logger.log(level, "event=%s %s", type(event).__name__, fields)
