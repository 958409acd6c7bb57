"""Nutrient resolution against USDA FDC with ordered fallbacks."""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from calorie_tracker.adapters.fdc_client import DEFAULT_DATA_TYPES, FdcClient
from calorie_tracker.domain.foods import (
    DEFAULT_QUANTITY,
    CandidateNutrient,
    DataType,
    ExtractedFoodItem,
    NutrientCandidate,
    NutrientSource,
    ResolvedNutrientProfile,
    empty_profile,
    round_calories,
    round_grams,
)
from calorie_tracker.services.cache import Cache
from calorie_tracker.services.events import (
    EventSink,
    LoggingEventSink,
    ResolutionEvent,
    ResolutionStage,
)
from calorie_tracker.services.scoring import (
    CARBOHYDRATE,
    ENERGY,
    PROTEIN,
    TOTAL_FAT,
    select_best_candidate,
)

KJ_PER_KCAL = 4.184

_logger = logging.getLogger(__name__)


class DatabaseLookupFailure(Exception):
    """Raised when the database cannot supply a usable profile."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class NutrientResolver(Protocol):
    """One strategy in the resolution chain."""

    name: str

    async def resolve(self, item: ExtractedFoodItem) -> ResolvedNutrientProfile:
        """Return a profile, or raise to pass the item to the next strategy."""


@dataclass
class DatabaseResolver(NutrientResolver):
    """Resolves items from the best-scoring FDC search candidate."""

    fdc_client: FdcClient
    events: EventSink = field(default_factory=LoggingEventSink)
    cache: Cache | None = None
    page_size: int = 10
    data_types: Sequence[DataType] = DEFAULT_DATA_TYPES
    search_ttl_seconds: int = 3600
    name: str = "database"

    async def resolve(self, item: ExtractedFoodItem) -> ResolvedNutrientProfile:
        """Look up the item, score candidates and derive a profile."""
        self.events.emit(
            ResolutionEvent(
                stage=ResolutionStage.LOOKUP_ATTEMPTED,
                food_name=item.food_name,
                fields={"page_size": self.page_size},
            )
        )
        candidates = await self._search(item.food_name)
        if not candidates:
            raise self._failure(item, "no_candidates")

        best, score = select_best_candidate(candidates)
        self.events.emit(
            ResolutionEvent(
                stage=ResolutionStage.LOOKUP_SCORED,
                food_name=item.food_name,
                fields={
                    "candidates": len(candidates),
                    "description": best.description,
                    "data_type": best.data_type.value if best.data_type else None,
                    "score": score,
                },
            )
        )
        profile = profile_from_candidate(best, item)
        if profile.calories <= 0:
            raise self._failure(item, "zero_calories")
        return profile

    async def _search(self, query: str) -> list[NutrientCandidate]:
        cache_key = f"fdc:search:{query.strip().lower()}:{self.page_size}"
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if isinstance(cached, list):
                return cached

        try:
            payload = await self.fdc_client.search_foods(
                query, page_size=self.page_size, data_types=self.data_types
            )
        except Exception as exc:
            raise self._failure(
                query,
                "request_failed",
                status=_status_code_from_exception(exc),
                error=str(exc) or type(exc).__name__,
            ) from exc

        candidates = parse_candidates(payload)
        if candidates and self.cache is not None:
            self.cache.set(cache_key, candidates, ttl_seconds=self.search_ttl_seconds)
        return candidates

    def _failure(
        self, item: ExtractedFoodItem | str, reason: str, **fields: object
    ) -> DatabaseLookupFailure:
        food_name = item.food_name if isinstance(item, ExtractedFoodItem) else item
        self.events.emit(
            ResolutionEvent(
                stage=ResolutionStage.LOOKUP_FAILED,
                food_name=food_name,
                level=logging.WARNING,
                fields={"reason": reason, **fields},
            )
        )
        return DatabaseLookupFailure(reason)


@dataclass
class NutritionService:
    """Runs resolver strategies in order until one yields a profile."""

    resolvers: Sequence[NutrientResolver]
    events: EventSink = field(default_factory=LoggingEventSink)

    async def resolve(self, item: ExtractedFoodItem) -> ResolvedNutrientProfile:
        """Resolve one item; failures degrade to the next strategy."""
        reason = "no resolvers configured"
        previous: str | None = None
        for resolver in self.resolvers:
            if previous is not None:
                self.events.emit(
                    ResolutionEvent(
                        stage=ResolutionStage.FALLBACK_TRIGGERED,
                        food_name=item.food_name,
                        level=logging.WARNING,
                        fields={
                            "from": previous,
                            "to": resolver.name,
                            "reason": reason,
                        },
                    )
                )
            try:
                profile = await resolver.resolve(item)
            except DatabaseLookupFailure as exc:
                reason = exc.reason
                previous = resolver.name
                continue
            except Exception as exc:
                _logger.exception(
                    "Resolver %s raised unexpectedly for %s",
                    resolver.name,
                    item.food_name,
                )
                reason = str(exc) or type(exc).__name__
                previous = resolver.name
                continue
            self._emit_resolved(item, resolver.name, profile)
            return profile

        profile = empty_profile(
            item.food_name,
            item.quantity,
            NutrientSource.AI_ESTIMATE,
            f"Unable to resolve nutrients: {reason}",
        )
        self._emit_resolved(item, previous, profile)
        return profile

    def _emit_resolved(
        self,
        item: ExtractedFoodItem,
        resolver_name: str | None,
        profile: ResolvedNutrientProfile,
    ) -> None:
        self.events.emit(
            ResolutionEvent(
                stage=ResolutionStage.RESOLVED,
                food_name=item.food_name,
                level=logging.WARNING if profile.error else logging.INFO,
                fields={
                    "resolver": resolver_name,
                    "source": profile.source.value,
                    "calories": profile.calories,
                    "error": profile.error,
                },
            )
        )


def parse_candidates(payload: object) -> list[NutrientCandidate]:
    """Convert a raw FDC search payload into candidates, skipping junk."""
    if not isinstance(payload, dict):
        return []
    foods = payload.get("foods")
    if not isinstance(foods, list):
        return []
    candidates: list[NutrientCandidate] = []
    for food in foods:
        if not isinstance(food, dict):
            continue
        description = food.get("description")
        candidates.append(
            NutrientCandidate(
                description=description.strip() if isinstance(description, str) else "",
                data_type=DataType.parse(food.get("dataType")),
                nutrients=_parse_nutrients(food.get("foodNutrients")),
            )
        )
    return candidates


def profile_from_candidate(
    candidate: NutrientCandidate, item: ExtractedFoodItem
) -> ResolvedNutrientProfile:
    """Derive a rounded database profile from the chosen candidate."""
    values: dict[str, float] = {}
    for nutrient in candidate.nutrients:
        values[nutrient.name] = nutrient.value
    return ResolvedNutrientProfile(
        food_name=candidate.description or item.food_name,
        quantity=item.quantity or DEFAULT_QUANTITY,
        calories=round_calories(_energy_kcal(candidate.nutrients)),
        protein=round_grams(values.get(PROTEIN, 0.0)),
        carbs=round_grams(values.get(CARBOHYDRATE, 0.0)),
        fat=round_grams(values.get(TOTAL_FAT, 0.0)),
        source=NutrientSource.DATABASE,
    )


def _energy_kcal(nutrients: Sequence[CandidateNutrient]) -> float:
    """Return energy in kcal, preferring a kcal-reported value over kJ."""
    energy = [nutrient for nutrient in nutrients if nutrient.name == ENERGY]
    for nutrient in energy:
        if nutrient.unit.upper() == "KCAL":
            return nutrient.value
    for nutrient in energy:
        if nutrient.unit.upper() != "KJ":
            return nutrient.value
    for nutrient in energy:
        return nutrient.value / KJ_PER_KCAL
    return 0.0


def _parse_nutrients(raw: object) -> tuple[CandidateNutrient, ...]:
    """Parse search-style and detail-style nutrient rows."""
    if not isinstance(raw, list):
        return ()
    nutrients: list[CandidateNutrient] = []
    for row in raw:
        if not isinstance(row, dict):
            continue
        nested = row.get("nutrient")
        nested = nested if isinstance(nested, dict) else {}
        name = row.get("nutrientName", nested.get("name"))
        value = row.get("value", row.get("amount"))
        unit = row.get("unitName", nested.get("unitName"))
        if not isinstance(name, str) or not name:
            continue
        if isinstance(value, bool) or not isinstance(value, int | float):
            continue
        if not math.isfinite(value):
            continue
        nutrients.append(
            CandidateNutrient(
                name=name,
                value=float(value),
                unit=unit if isinstance(unit, str) else "",
            )
        )
    return tuple(nutrients)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
