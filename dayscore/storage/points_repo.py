"""
Points Repository - CRUD operations for DailyPoints and PointsTotalCache.

AICODE-NOTE: Repository is data access only, NO business logic.
Flag/point rules live in core/domain/points.py.
"""

from datetime import date
from typing import Any

from tortoise import timezone
from tortoise.expressions import F

from dayscore.core.errors import ConflictError
from dayscore.database.models import DailyPoints, PointsTotalCache
from dayscore.storage.db_errors import db_errors


async def get_points(owner_id: str, bucket: date) -> DailyPoints | None:
    """Get the points row for a day bucket."""
    async with db_errors("read daily points"):
        return await DailyPoints.get_or_none(owner_id=owner_id, bucket=bucket)


async def create_points(
    owner_id: str, bucket: date, values: dict[str, Any]
) -> DailyPoints:
    """Create the points row for a day bucket (ConflictError if it already exists)."""
    async with db_errors("create daily points"):
        return await DailyPoints.create(owner_id=owner_id, bucket=bucket, **values)


async def update_points(points: DailyPoints, values: dict[str, Any]) -> DailyPoints:
    """
    Write new values if nobody else changed the row since it was read.

    Raises:
        ConflictError: row version moved on
    """
    new_version = points.version + 1
    now = timezone.now()
    async with db_errors("update daily points"):
        updated = await DailyPoints.filter(
            id=points.id, version=points.version
        ).update(**values, version=new_version, updated_at=now)

    if not updated:
        raise ConflictError(
            "Daily points changed by another writer",
            details={"owner_id": points.owner_id, "bucket": points.bucket.isoformat()},
        )

    for key, value in values.items():
        setattr(points, key, value)
    points.version = new_version
    points.updated_at = now
    return points


async def get_daily_totals(owner_id: str) -> list[int]:
    """total_points of every day bucket for a user."""
    async with db_errors("read daily totals"):
        return await DailyPoints.filter(owner_id=owner_id).values_list(
            "total_points", flat=True
        )


async def get_owner_ids() -> list[str]:
    """Every user that has at least one points row."""
    async with db_errors("list point owners"):
        return await DailyPoints.all().distinct().values_list("owner_id", flat=True)


async def get_cached_total(owner_id: str) -> int | None:
    """Advisory running total, or None if never written."""
    async with db_errors("read cached total"):
        cache = await PointsTotalCache.get_or_none(owner_id=owner_id)
    return cache.total_points if cache else None


async def add_to_cached_total(owner_id: str, delta: int) -> None:
    """Atomically add to the advisory running total."""
    async with db_errors("update cached total"):
        await PointsTotalCache.get_or_create(owner_id=owner_id)
        await PointsTotalCache.filter(owner_id=owner_id).update(
            total_points=F("total_points") + delta
        )


async def set_cached_total(owner_id: str, total: int) -> None:
    """Overwrite the advisory running total (used when rebuilding from live sums)."""
    async with db_errors("write cached total"):
        await PointsTotalCache.update_or_create(
            defaults={"total_points": total}, owner_id=owner_id
        )
