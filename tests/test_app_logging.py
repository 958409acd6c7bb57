"""Tests for logging configuration and resolution events."""

import logging

import pytest

from calorie_tracker.app_logging import configure_logging
from calorie_tracker.services.events import (
    LoggingEventSink,
    ResolutionEvent,
    ResolutionStage,
)


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("calorie_tracker")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_logging_event_sink_attaches_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.resolution")
    sink = LoggingEventSink(logger=logger)

    with caplog.at_level(logging.INFO, logger="tests.resolution"):
        sink.emit(
            ResolutionEvent(
                stage=ResolutionStage.LOOKUP_FAILED,
                food_name="white rice",
                level=logging.WARNING,
                fields={"reason": "no_candidates"},
            )
        )

    record = caplog.records[0]
    assert record.levelno == logging.WARNING
    assert record.resolution_stage == "lookup_failed"
    assert record.food_name == "white rice"
    assert record.resolution_fields == {"reason": "no_candidates"}
    assert "reason=no_candidates" in record.getMessage()
