"""
Content API router.

Endpoints:
- POST   /api/users/{owner_id}/content - Submit photos/captions/habit tags
- GET    /api/users/{owner_id}/content/{bucket} - One day of content (null if none)
- DELETE /api/users/{owner_id}/content/{bucket} - Delete a whole day
- GET    /api/users/{owner_id}/days - Recent days, newest first
- GET    /api/users/{owner_id}/days/stats - Journey statistics
"""

from datetime import date

from fastapi import APIRouter, Query

from dayscore.core.use_cases import queries
from dayscore.core.use_cases.submit_content import content_submitter, day_deleter
from dayscore.interfaces.api.schemas import (
    ContentResponse,
    ContentStatsResponse,
    DeleteDayResponse,
    RecentDaysResponse,
    SubmitContentRequest,
    SubmitContentResponse,
)

router = APIRouter(prefix="/api/users/{owner_id}", tags=["content"])


@router.post("/content", response_model=SubmitContentResponse)
async def submit_content(
    owner_id: str, payload: SubmitContentRequest
) -> SubmitContentResponse:
    """Merge a submission into the day bucket of its timestamp."""
    result = await content_submitter.execute(
        owner_id,
        photos=payload.photos,
        captions=payload.captions,
        habit_tags=payload.habit_tags,
        timestamp=payload.timestamp,
    )
    return SubmitContentResponse(
        created=result.created,
        content=ContentResponse.model_validate(result.content),
    )


@router.get("/content/{bucket}", response_model=ContentResponse | None)
async def get_content(owner_id: str, bucket: date) -> ContentResponse | None:
    content = await queries.get_content_aggregate(owner_id, bucket)
    if content is None:
        return None
    return ContentResponse.model_validate(content)


@router.delete("/content/{bucket}", response_model=DeleteDayResponse)
async def delete_day(owner_id: str, bucket: date) -> DeleteDayResponse:
    result = await day_deleter.execute(owner_id, bucket)
    return DeleteDayResponse(applied=result.applied, bucket=result.bucket)


@router.get("/days", response_model=RecentDaysResponse)
async def get_days(
    owner_id: str,
    limit: int | None = Query(default=None, ge=0, le=366),
) -> RecentDaysResponse:
    """
    Recent days of content, newest bucket first.

    Without `limit` the full journey is returned.
    """
    if limit is None:
        days = await queries.get_all_days(owner_id)
    else:
        days = await queries.get_recent_days(owner_id, limit)
    return RecentDaysResponse(
        days=[ContentResponse.model_validate(d) for d in days],
        total=len(days),
    )


@router.get("/days/stats", response_model=ContentStatsResponse)
async def get_days_stats(owner_id: str) -> ContentStatsResponse:
    stats = await queries.get_content_stats(owner_id)
    return ContentStatsResponse(
        total_days=stats.total_days,
        total_photos=stats.total_photos,
        total_habits=stats.total_habits,
        average_photos_per_day=stats.average_photos_per_day,
        average_habits_per_day=stats.average_habits_per_day,
        most_active_day=stats.most_active_day,
    )
