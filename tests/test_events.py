"""Tests for event sinks."""

import logging

from vparecon.events import (
    BatchCompleted,
    CollectingEventSink,
    DeleteProgress,
    LoggingEventSink,
    MatchProgress,
    NullEventSink,
    RowRejected,
)


def test_collecting_sink_filters_by_type():
    sink = CollectingEventSink()
    sink.emit(RowRejected(3, "Missing vpa"))
    sink.emit(MatchProgress(10, 20, 4))

    assert len(sink.events) == 2
    assert sink.of_type(RowRejected) == [RowRejected(3, "Missing vpa")]


def test_null_sink_accepts_events():
    NullEventSink().emit(RowRejected(2, "x"))


def test_delete_progress_percent():
    assert DeleteProgress(1, 3, 500, 2000, True).percent == 25.0
    assert DeleteProgress(1, 1, 0, 0, True).percent == 100.0


def test_logging_sink_levels(caplog):
    sink = LoggingEventSink()
    with caplog.at_level(logging.DEBUG, logger="vparecon.events"):
        sink.emit(RowRejected(4, "Missing vpa"))
        sink.emit(BatchCompleted(1, 2, 10, 0, "failed", error="boom"))
        sink.emit(BatchCompleted(2, 2, 10, 10, "written"))
        sink.emit(MatchProgress(5, 10, 2))

    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.WARNING, logging.ERROR, logging.INFO, logging.DEBUG]
    assert "event=RowRejected" in caplog.records[0].getMessage()
    assert "row_number=4" in caplog.records[0].getMessage()
    assert "written_count=10" in caplog.records[2].getMessage()
