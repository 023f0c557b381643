"""
Read-side queries for content, points and levels.

AICODE-NOTE: Missing data is never an error here. A bucket with no row
reads as None / an empty list / zero points, so callers treat absence as
default. Queries take no write locks: they are point-in-time snapshots.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from dayscore.core.domain.buckets import bucket_for, parse_bucket
from dayscore.core.domain.levels import LevelProgress, level_for
from dayscore.core.domain.points import PointsBreakdown, PointsState
from dayscore.core.domain.validation import validate_limit, validate_owner_id
from dayscore.core.errors import PersistenceError
from dayscore.database.models import DailyContent
from dayscore.storage import content_repo, points_repo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoreHabitStatus:
    liked: bool = False
    commented: bool = False
    shared: bool = False
    updated_goal: bool = False
    bonus: bool = False


@dataclass(frozen=True)
class ContentStats:
    total_days: int = 0
    total_photos: int = 0
    total_habits: int = 0
    average_photos_per_day: float = 0.0
    average_habits_per_day: float = 0.0
    most_active_day: date | None = None


# ============ Content ============


async def get_content_aggregate(owner_id: str, bucket: date | str) -> DailyContent | None:
    """Content for one bucket, or None."""
    validate_owner_id(owner_id)
    return await content_repo.get_content(owner_id, parse_bucket(bucket))


async def get_recent_days(owner_id: str, limit: int = 3) -> list[DailyContent]:
    """Newest `limit` days of content, newest bucket first."""
    validate_owner_id(owner_id)
    if validate_limit(limit) == 0:
        return []
    return await content_repo.get_recent_content(owner_id, limit)


async def get_all_days(owner_id: str) -> list[DailyContent]:
    """Full journey, newest bucket first."""
    validate_owner_id(owner_id)
    return await content_repo.get_all_content(owner_id)


async def has_submitted_today(owner_id: str, now: datetime | None = None) -> bool:
    """Check if the owner has content in the current bucket."""
    return await get_content_aggregate(owner_id, bucket_for(now)) is not None


async def get_content_stats(owner_id: str) -> ContentStats:
    """Totals and per-day averages over all of the owner's days."""
    days = await get_all_days(owner_id)
    if not days:
        return ContentStats()

    total_days = len(days)
    total_photos = sum(d.total_photos for d in days)
    total_habits = sum(d.total_habits for d in days)
    # Ties go to the newest day
    most_active = max(days, key=lambda d: (d.total_photos, d.bucket))

    return ContentStats(
        total_days=total_days,
        total_photos=total_photos,
        total_habits=total_habits,
        average_photos_per_day=round(total_photos / total_days, 1),
        average_habits_per_day=round(total_habits / total_days, 1),
        most_active_day=most_active.bucket,
    )


# ============ Points ============


async def _get_state(owner_id: str, bucket: date | str) -> PointsState:
    validate_owner_id(owner_id)
    record = await points_repo.get_points(owner_id, parse_bucket(bucket))
    return PointsState.from_record(record) if record else PointsState()


async def get_points_breakdown(owner_id: str, bucket: date | str) -> PointsBreakdown:
    """Daily/core/bonus/total for one bucket (zeros if nothing recorded)."""
    return (await _get_state(owner_id, bucket)).breakdown()


async def get_todays_points(owner_id: str, now: datetime | None = None) -> PointsBreakdown:
    return await get_points_breakdown(owner_id, bucket_for(now))


async def get_core_habit_status(owner_id: str, bucket: date | str) -> CoreHabitStatus:
    """Core habit flags for one bucket plus whether the bonus was awarded."""
    state = await _get_state(owner_id, bucket)
    return CoreHabitStatus(
        liked=state.flags["like"],
        commented=state.flags["comment"],
        shared=state.flags["share"],
        updated_goal=state.flags["goal_update"],
        bonus=state.bonus_points > 0,
    )


async def get_cumulative_total(owner_id: str) -> int:
    """
    Live sum of total_points over every DailyPoints row of the owner.

    Never served from PointsTotalCache.
    """
    validate_owner_id(owner_id)
    return sum(await points_repo.get_daily_totals(owner_id))


async def get_cached_total(owner_id: str) -> int:
    """Advisory running total (0 if never written). Not for levels."""
    validate_owner_id(owner_id)
    return await points_repo.get_cached_total(owner_id) or 0


async def get_display_total(owner_id: str) -> int:
    """
    Cumulative total for display.

    A failed fetch shows zero, never a stale cached number.
    """
    try:
        return await get_cumulative_total(owner_id)
    except PersistenceError as e:
        logger.error(f"Cumulative total unavailable for {owner_id}: {e}")
        return 0


async def get_level(owner_id: str) -> LevelProgress:
    """Level progress from a fresh cumulative total (level 1 if it can't be read)."""
    return level_for(await get_display_total(owner_id))
