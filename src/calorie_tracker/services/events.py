"""Structured events emitted while resolving nutrients."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol


class ResolutionStage(StrEnum):
    """Stage transitions in nutrient resolution."""

    LOOKUP_ATTEMPTED = "lookup_attempted"
    LOOKUP_FAILED = "lookup_failed"
    LOOKUP_SCORED = "lookup_scored"
    FALLBACK_TRIGGERED = "fallback_triggered"
    ESTIMATION_ATTEMPTED = "estimation_attempted"
    ESTIMATION_FAILED = "estimation_failed"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class ResolutionEvent:
    """One stage transition for a single food item."""

    stage: ResolutionStage
    food_name: str
    level: int = logging.INFO
    fields: dict[str, object] = field(default_factory=dict)


class EventSink(Protocol):
    """Destination for resolution events."""

    def emit(self, event: ResolutionEvent) -> None:
        """Record a resolution event."""


@dataclass
class LoggingEventSink(EventSink):
    """Writes resolution events to a logger."""

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("calorie_tracker.resolution")
    )

    def emit(self, event: ResolutionEvent) -> None:
        """Log the event at its level with fields attached as extra."""
        self.logger.log(
            event.level,
            "Resolution %s: food=%s %s",
            event.stage.value,
            event.food_name,
            " ".join(f"{key}={value}" for key, value in event.fields.items()),
            extra={
                "resolution_stage": event.stage.value,
                "food_name": event.food_name,
                "resolution_fields": event.fields,
            },
        )
