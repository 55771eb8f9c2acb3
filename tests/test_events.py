from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from liscaf.events import (
    EntryStatus,
    EventEmitter,
    EventLevel,
    EventTag,
    LoggingSink,
    MemorySink,
    ScaffoldEvent,
    StreamSink,
    TraversalReport,
)


def test_event_renders_tagged_line():
    event = ScaffoldEvent(tag=EventTag.DRY_BIN_CONFLICT, message="Would flag binary conflict for logo.png")
    assert event.line() == "DRY BIN CONFLICT: Would flag binary conflict for logo.png"
    assert event.level is EventLevel.INFO


def test_event_is_frozen():
    event = ScaffoldEvent(tag=EventTag.ADD, message="Added x")
    with pytest.raises(ValidationError):
        event.message = "changed"  # type: ignore[misc]


def test_stream_sink_writes_one_line_per_event():
    stream = io.StringIO()
    emitter = EventEmitter("test", StreamSink(stream))

    emitter.emit(EventTag.REPL, "Updated file: a.txt")
    emitter.warn("Failed to read file b.txt")

    assert stream.getvalue() == "REPL: Updated file: a.txt\nWARN: Failed to read file b.txt\n"


def test_logging_sink_uses_event_level(caplog: pytest.LogCaptureFixture):
    emitter = EventEmitter("test", LoggingSink())

    with caplog.at_level(logging.INFO, logger="liscaf.events"):
        emitter.info("Starting")
        emitter.warn("careful", path=Path("x"))

    assert [(record.levelno, record.getMessage()) for record in caplog.records] == [
        (logging.INFO, "INFO: Starting"),
        (logging.WARNING, "WARN: careful"),
    ]


def test_emitter_stamps_origin_and_attributes():
    sink = MemorySink()
    event = EventEmitter("merge", sink).emit(EventTag.MERGE, "m", path=Path("a"), incoming="b")

    assert sink.events == [event]
    assert event.origin == "merge"
    assert event.path == Path("a")
    assert event.attributes == {"incoming": "b"}


def test_traversal_report_helpers():
    report = TraversalReport(operation="rename")
    report.record(Path("a"), EntryStatus.APPLIED, "rename", target=Path("b"))
    report.record(Path("c"), EntryStatus.FAILED, "rename", detail="busy")
    report.record(Path("d"), EntryStatus.APPLIED, "rename")

    assert report.count(EntryStatus.APPLIED) == 2
    assert [result.path for result in report.failed] == [Path("c")]
    assert report.planned == []
    assert len(report.actions("rename")) == 3
    assert report.model_dump(mode="json")["results"][1]["detail"] == "busy"
