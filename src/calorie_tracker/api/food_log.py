"""Food log, favorites and goals endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from calorie_tracker.api.schemas import EntryRequest, FoodItemsRequest, GoalsRequest
from calorie_tracker.services.food_log import EntryNotFoundError, InvalidEntryError
from calorie_tracker.services.goals import InvalidGoalsError

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer
    from calorie_tracker.domain.food_log import (
        DailySummary,
        FoodFrequency,
        FoodLogEntry,
        Goals,
    )

router = APIRouter(prefix="/api", tags=["food-log"])


async def require_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """Return the caller's user id supplied by the auth layer."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from None


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _resolve_timezone(request: Request, timezone: str | None) -> str:
    resolved = timezone or _container(request).settings.default_timezone
    try:
        ZoneInfo(resolved)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown timezone: {resolved}",
        ) from None
    return resolved


@router.get("/food-log")
async def list_today(
    request: Request,
    timezone: str | None = None,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Return today's logged foods."""
    tz = _resolve_timezone(request, timezone)
    entries = _container(request).food_log_service.list_today(user_id, tz)
    return {"entries": [_serialize_entry(entry) for entry in entries]}


@router.post("/food-log", status_code=status.HTTP_201_CREATED)
async def add_entry(
    body: EntryRequest, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Log a food."""
    service = _container(request).food_log_service
    try:
        entry = service.add_entry(user_id, body.name, body.calories, body.protein)
    except InvalidEntryError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _serialize_entry(entry)


@router.post("/food-log/items", status_code=status.HTTP_201_CREATED)
async def add_items(
    body: FoodItemsRequest, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Log every item returned by the meal parser."""
    service = _container(request).food_log_service
    try:
        entries = service.add_items(user_id, body.items)
    except InvalidEntryError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"entries": [_serialize_entry(entry) for entry in entries]}


@router.put("/food-log/{entry_id}")
async def update_entry(
    entry_id: UUID,
    body: EntryRequest,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Edit a logged food."""
    service = _container(request).food_log_service
    try:
        entry = service.update_entry(
            user_id, entry_id, body.name, body.calories, body.protein
        )
    except EntryNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND) from exc
    except InvalidEntryError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _serialize_entry(entry)


@router.delete("/food-log/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_entry(
    entry_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> None:
    """Delete a logged food."""
    try:
        _container(request).food_log_service.remove_entry(user_id, entry_id)
    except EntryNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND) from exc


@router.get("/favorites")
async def list_favorites(
    request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Return the user's favorites."""
    favorites = _container(request).food_log_service.list_favorites(user_id)
    return {"favorites": [_serialize_entry(entry) for entry in favorites]}


@router.post("/favorites", status_code=status.HTTP_201_CREATED)
async def add_favorite(
    body: EntryRequest, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Save a favorite."""
    service = _container(request).food_log_service
    try:
        favorite = service.add_favorite(
            user_id, body.name, body.calories, body.protein
        )
    except InvalidEntryError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _serialize_entry(favorite)


@router.put("/favorites/{favorite_id}")
async def update_favorite(
    favorite_id: UUID,
    body: EntryRequest,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Edit a favorite."""
    service = _container(request).food_log_service
    try:
        favorite = service.update_favorite(
            user_id, favorite_id, body.name, body.calories, body.protein
        )
    except EntryNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND) from exc
    except InvalidEntryError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _serialize_entry(favorite)


@router.delete("/favorites/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    favorite_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> None:
    """Delete a favorite."""
    try:
        _container(request).food_log_service.remove_favorite(user_id, favorite_id)
    except EntryNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND) from exc


@router.post("/favorites/{favorite_id}/log", status_code=status.HTTP_201_CREATED)
async def log_favorite(
    favorite_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Log a new entry from a favorite."""
    try:
        entry = _container(request).food_log_service.log_favorite(
            user_id, favorite_id
        )
    except EntryNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND) from exc
    return _serialize_entry(entry)


@router.get("/foods/frequent")
async def frequent_foods(
    request: Request, limit: int = 10, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Return the most frequently logged foods."""
    foods = _container(request).food_log_service.top_frequent_foods(
        user_id, limit=max(limit, 0)
    )
    return {"foods": [_serialize_frequency(food) for food in foods]}


@router.get("/goals")
async def get_goals(
    request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Return the user's goals."""
    return _serialize_goals(_container(request).goals_service.get_goals(user_id))


@router.put("/goals")
async def update_goals(
    body: GoalsRequest, request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Replace the user's goals."""
    try:
        goals = _container(request).goals_service.update_goals(
            user_id, body.daily_calories_goal, body.daily_protein_goal
        )
    except InvalidGoalsError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _serialize_goals(goals)


@router.get("/summary/today")
async def today_summary(
    request: Request,
    timezone: str | None = None,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Return today's totals and progress toward goals."""
    tz = _resolve_timezone(request, timezone)
    summary = _container(request).food_log_service.daily_summary(user_id, tz)
    return _serialize_summary(summary)


def _serialize_entry(entry: FoodLogEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "name": entry.name,
        "calories": entry.calories,
        "protein": entry.protein,
        "timestamp": entry.timestamp.isoformat(),
        "is_favorite": entry.is_favorite,
    }


def _serialize_frequency(food: FoodFrequency) -> dict[str, object]:
    return {
        "name": food.name,
        "count": food.count,
        "calories": food.calories,
        "protein": food.protein,
    }


def _serialize_goals(goals: Goals) -> dict[str, object]:
    return {
        "daily_calories_goal": goals.daily_calories_goal,
        "daily_protein_goal": goals.daily_protein_goal,
        "updated_at": goals.updated_at.isoformat() if goals.updated_at else None,
    }


def _serialize_summary(summary: DailySummary) -> dict[str, object]:
    return {
        "entries": [_serialize_entry(entry) for entry in summary.entries],
        "goals": _serialize_goals(summary.goals),
        "total_calories": summary.total_calories,
        "total_protein": summary.total_protein,
        "calories_remaining": summary.calories_remaining,
        "protein_remaining": summary.protein_remaining,
        "calorie_progress": summary.calorie_progress,
        "protein_progress": summary.protein_progress,
    }
