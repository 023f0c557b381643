"""
Points API router.

Endpoints:
- GET /api/users/{owner_id}/points/total - Live cumulative total
- GET /api/users/{owner_id}/level - Level and progress bar
- GET /api/users/{owner_id}/points/{bucket} - Breakdown for one day
- GET /api/users/{owner_id}/points/{bucket}/core-status - Core habit flags
"""

from datetime import date

from fastapi import APIRouter

from dayscore.core.use_cases import queries
from dayscore.interfaces.api.schemas import (
    CoreHabitStatusResponse,
    CumulativeTotalResponse,
    LevelResponse,
    PointsBreakdownResponse,
)

router = APIRouter(prefix="/api/users/{owner_id}", tags=["points"])


@router.get("/points/total", response_model=CumulativeTotalResponse)
async def get_total(owner_id: str) -> CumulativeTotalResponse:
    return CumulativeTotalResponse(total_points=await queries.get_display_total(owner_id))


@router.get("/level", response_model=LevelResponse)
async def get_level(owner_id: str) -> LevelResponse:
    progress = await queries.get_level(owner_id)
    return LevelResponse.model_validate(progress)


@router.get("/points/{bucket}", response_model=PointsBreakdownResponse)
async def get_breakdown(owner_id: str, bucket: date) -> PointsBreakdownResponse:
    breakdown = await queries.get_points_breakdown(owner_id, bucket)
    return PointsBreakdownResponse.model_validate(breakdown)


@router.get("/points/{bucket}/core-status", response_model=CoreHabitStatusResponse)
async def get_core_status(owner_id: str, bucket: date) -> CoreHabitStatusResponse:
    status = await queries.get_core_habit_status(owner_id, bucket)
    return CoreHabitStatusResponse.model_validate(status)
