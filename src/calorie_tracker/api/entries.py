"""Food entry endpoints for authenticated patients."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.models import SaveEntriesRequest
from calorie_tracker.services.entries import summarize

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer
    from calorie_tracker.domain.entries import FoodEntry, MealTotals

router = APIRouter(prefix="/api/food-entries", tags=["food-entries"])


def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Resolve the caller's user id from the Authorization header."""
    container: AppContainer = request.app.state.container
    return container.identity_service.authenticate(authorization)


@router.post("")
async def save_entries(
    body: SaveEntriesRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> JSONResponse:
    """Log analyzed foods for the caller."""
    if not body.foods:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "No foods to save"},
        )
    container: AppContainer = request.app.state.container
    profiles = [food.to_profile() for food in body.foods]
    entries = container.food_entry_service.save_entries(user_id, profiles)
    return JSONResponse(
        content={
            "entries": [_entry_response(entry) for entry in entries],
            "totals": _totals_response(summarize(profiles)),
        }
    )


@router.get("")
async def daily_totals(
    request: Request,
    start: date,
    end: date,
    timezone: str | None = None,
    user_id: UUID = Depends(require_user),
) -> JSONResponse:
    """Return the caller's per-day totals for a date range."""
    container: AppContainer = request.app.state.container
    timezone_name = timezone or container.settings.default_timezone
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": f"Unknown timezone: {timezone_name}"},
        )
    if end < start:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "end must not be before start"},
        )
    days = container.food_entry_service.daily_totals(
        user_id, start, end, timezone_name
    )
    return JSONResponse(
        content={
            "days": [
                {
                    "day": day.day.isoformat(),
                    **_totals_response(day.totals),
                    "entryCount": day.entry_count,
                }
                for day in days
            ]
        }
    )


def _entry_response(entry: FoodEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "foodName": entry.food_name,
        "quantity": entry.quantity,
        "calories": entry.calories,
        "protein": entry.protein,
        "carbs": entry.carbs,
        "fat": entry.fat,
        "createdAt": entry.created_at.isoformat(),
    }


def _totals_response(totals: MealTotals) -> dict[str, object]:
    return {
        "calories": totals.calories,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fat": totals.fat,
    }
