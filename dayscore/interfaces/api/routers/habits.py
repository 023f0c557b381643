"""
Habits API router - points-affecting events.

Endpoints:
- POST /api/users/{owner_id}/habits/daily - Daily habits form saved
- POST /api/users/{owner_id}/habits/explicit - Meditation/microlearn done
- POST /api/users/{owner_id}/habits/core/refresh - Reaction/comment state changed
- POST /api/users/{owner_id}/habits/core/action - Share/goal update

AICODE-NOTE: "Already done" comes back as 200 with applied=false.
Errors are mapped to 4xx/5xx in main.py and never reported as success.
"""

from fastapi import APIRouter

from dayscore.core.use_cases import track_points
from dayscore.core.use_cases.track_points import PointsUpdateResult
from dayscore.interfaces.api.schemas import (
    CoreHabitRefreshRequest,
    ExplicitHabitRequest,
    OneShotActionRequest,
    PointsBreakdownResponse,
    PointsUpdateResponse,
    SaveDailyHabitsRequest,
)

router = APIRouter(prefix="/api/users/{owner_id}/habits", tags=["habits"])


def to_response(result: PointsUpdateResult) -> PointsUpdateResponse:
    return PointsUpdateResponse(
        applied=result.applied,
        reason=result.reason.value if result.reason else None,
        bucket=result.bucket,
        bonus_awarded=result.bonus_awarded,
        breakdown=PointsBreakdownResponse.model_validate(result.breakdown),
    )


@router.post("/daily", response_model=PointsUpdateResponse)
async def save_daily_habits(
    owner_id: str, payload: SaveDailyHabitsRequest
) -> PointsUpdateResponse:
    if payload.entry is not None:
        snapshot = payload.entry.to_snapshot()
    else:
        snapshot = payload.snapshot or {}
    result = await track_points.save_daily_habits(
        owner_id, snapshot, timestamp=payload.timestamp
    )
    return to_response(result)


@router.post("/explicit", response_model=PointsUpdateResponse)
async def complete_explicit_habit(
    owner_id: str, payload: ExplicitHabitRequest
) -> PointsUpdateResponse:
    result = await track_points.complete_explicit_habit(
        owner_id, payload.habit, timestamp=payload.timestamp
    )
    return to_response(result)


@router.post("/core/refresh", response_model=PointsUpdateResponse)
async def refresh_core_habit(
    owner_id: str, payload: CoreHabitRefreshRequest
) -> PointsUpdateResponse:
    result = await track_points.refresh_core_habit_state(
        owner_id, payload.habit, payload.is_active, timestamp=payload.timestamp
    )
    return to_response(result)


@router.post("/core/action", response_model=PointsUpdateResponse)
async def record_one_shot_action(
    owner_id: str, payload: OneShotActionRequest
) -> PointsUpdateResponse:
    result = await track_points.record_one_shot_action(
        owner_id, payload.habit, timestamp=payload.timestamp
    )
    return to_response(result)
