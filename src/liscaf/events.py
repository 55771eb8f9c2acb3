"""Structured progress events and per-entry traversal reports."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, TextIO, Union

from pydantic import BaseModel, ConfigDict, Field

AttributeValue = Union[str, int, float, bool, None]

LOGGER = logging.getLogger(__name__)


class EventLevel(str, Enum):
    """Severity levels for :class:`ScaffoldEvent`."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class EventTag(str, Enum):
    """Fixed line prefixes for console output."""

    INFO = "INFO"
    WARN = "WARN"
    REPL = "REPL"
    DRY_REPL = "DRY REPL"
    RENAME = "RENAME"
    DRY_RENAME = "DRY RENAME"
    ADD = "ADD"
    DRY_ADD = "DRY ADD"
    MERGE = "MERGE"
    DRY_MERGE = "DRY MERGE"
    BIN_CONFLICT = "BIN CONFLICT"
    DRY_BIN_CONFLICT = "DRY BIN CONFLICT"


_LOGGING_LEVELS = {
    EventLevel.DEBUG: logging.DEBUG,
    EventLevel.INFO: logging.INFO,
    EventLevel.WARNING: logging.WARNING,
    EventLevel.ERROR: logging.ERROR,
}


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class ScaffoldEvent(BaseModel):
    """A single progress record emitted by a scaffolding component."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tag: EventTag = Field(..., description="Console prefix identifying the action.")
    message: str = Field(..., description="Human-readable description of the action.")
    level: EventLevel = Field(default=EventLevel.INFO, description="Severity of the event.")
    origin: str = Field(default="liscaf", description="Component that emitted the event.")
    path: Path | None = Field(None, description="Primary filesystem path the event refers to.")
    timestamp: datetime = Field(default_factory=_utcnow, description="Emission time in UTC.")
    attributes: Dict[str, AttributeValue] = Field(default_factory=dict, description="Structured details.")

    def line(self) -> str:
        """Render the event as a single tagged console line."""

        return f"{self.tag.value}: {self.message}"


class EventSink(ABC):
    """Consumer of :class:`ScaffoldEvent` records."""

    @abstractmethod
    def emit(self, event: ScaffoldEvent) -> None:
        """Handle a single event."""


class LoggingSink(EventSink):
    """Forward events to the standard :mod:`logging` machinery."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or LOGGER

    def emit(self, event: ScaffoldEvent) -> None:
        self._logger.log(_LOGGING_LEVELS[event.level], event.line())


class StreamSink(EventSink):
    """Write each event as a tagged line to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def emit(self, event: ScaffoldEvent) -> None:
        stream = self._stream or sys.stdout
        stream.write(event.line() + "\n")
        stream.flush()


class NullSink(EventSink):
    """Discard every event."""

    def emit(self, event: ScaffoldEvent) -> None:
        return None


class MemorySink(EventSink):
    """Keep emitted events in memory, in order."""

    def __init__(self) -> None:
        self.events: list[ScaffoldEvent] = []

    def emit(self, event: ScaffoldEvent) -> None:
        self.events.append(event)

    def lines(self) -> list[str]:
        return [event.line() for event in self.events]

    def tagged(self, tag: EventTag) -> list[ScaffoldEvent]:
        return [event for event in self.events if event.tag is tag]


class EventEmitter:
    """Small helper that stamps events with an origin before sinking them."""

    def __init__(self, origin: str, sink: EventSink | None = None) -> None:
        self.origin = origin
        self.sink = sink or LoggingSink()

    def emit(
        self,
        tag: EventTag,
        message: str,
        *,
        level: EventLevel = EventLevel.INFO,
        path: Path | None = None,
        **attributes: AttributeValue,
    ) -> ScaffoldEvent:
        event = ScaffoldEvent(
            tag=tag,
            message=message,
            level=level,
            origin=self.origin,
            path=path,
            attributes=attributes,
        )
        self.sink.emit(event)
        return event

    def info(self, message: str, **attributes: AttributeValue) -> ScaffoldEvent:
        return self.emit(EventTag.INFO, message, **attributes)

    def warn(self, message: str, *, path: Path | None = None, **attributes: AttributeValue) -> ScaffoldEvent:
        return self.emit(EventTag.WARN, message, level=EventLevel.WARNING, path=path, **attributes)


class EntryStatus(str, Enum):
    """Outcome of visiting a single filesystem entry."""

    APPLIED = "applied"
    PLANNED = "planned"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"


class EntryResult(BaseModel):
    """What happened to one path during a traversal."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: Path = Field(..., description="Entry that was visited.")
    status: EntryStatus = Field(..., description="Outcome for the entry.")
    action: str = Field(..., description="Name of the action attempted, e.g. 'replace' or 'merge'.")
    target: Path | None = Field(None, description="Destination path, where the action has one.")
    detail: str | None = Field(None, description="Reason for a skip or failure.")


class TraversalReport(BaseModel):
    """Collected per-entry results of one traversal."""

    model_config = ConfigDict(extra="forbid")

    operation: str = Field(..., description="Traversal that produced the report.")
    dry_run: bool = Field(default=False, description="Whether the traversal ran without writing.")
    results: List[EntryResult] = Field(default_factory=list, description="Per-entry results in visit order.")

    def record(
        self,
        path: Path,
        status: EntryStatus,
        action: str,
        *,
        target: Path | None = None,
        detail: str | None = None,
    ) -> EntryResult:
        result = EntryResult(path=path, status=status, action=action, target=target, detail=detail)
        self.results.append(result)
        return result

    def count(self, status: EntryStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    def with_status(self, status: EntryStatus) -> list[EntryResult]:
        return [result for result in self.results if result.status is status]

    @property
    def applied(self) -> list[EntryResult]:
        return self.with_status(EntryStatus.APPLIED)

    @property
    def planned(self) -> list[EntryResult]:
        return self.with_status(EntryStatus.PLANNED)

    @property
    def failed(self) -> list[EntryResult]:
        return self.with_status(EntryStatus.FAILED)

    def actions(self, action: str) -> list[EntryResult]:
        return [result for result in self.results if result.action == action]


__all__ = [
    "EntryResult",
    "EntryStatus",
    "EventEmitter",
    "EventLevel",
    "EventSink",
    "EventTag",
    "LoggingSink",
    "MemorySink",
    "NullSink",
    "ScaffoldEvent",
    "StreamSink",
    "TraversalReport",
]
