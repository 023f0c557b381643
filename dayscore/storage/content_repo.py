"""
DailyContent Repository - CRUD operations for DailyContent model.

AICODE-NOTE: Repository is data access only, NO business logic.
Merging lives in core/domain/content_merge.py. Updates are conditional on
the row version so a lost race raises ConflictError instead of overwriting.
"""

from datetime import date
from typing import Any

from tortoise import timezone

from dayscore.core.errors import ConflictError
from dayscore.database.models import DailyContent
from dayscore.storage.db_errors import db_errors


async def get_content(owner_id: str, bucket: date) -> DailyContent | None:
    """Get the content row for a day bucket."""
    async with db_errors("read daily content"):
        return await DailyContent.get_or_none(owner_id=owner_id, bucket=bucket)


async def create_content(
    owner_id: str, bucket: date, values: dict[str, Any]
) -> DailyContent:
    """Create the content row for a day bucket (ConflictError if it already exists)."""
    async with db_errors("create daily content"):
        return await DailyContent.create(owner_id=owner_id, bucket=bucket, **values)


async def update_content(
    content: DailyContent, values: dict[str, Any]
) -> DailyContent:
    """
    Write new values if nobody else changed the row since it was read.

    Raises:
        ConflictError: row version moved on (or row was deleted)
    """
    new_version = content.version + 1
    now = timezone.now()
    async with db_errors("update daily content"):
        updated = await DailyContent.filter(
            id=content.id, version=content.version
        ).update(**values, version=new_version, updated_at=now)

    if not updated:
        raise ConflictError(
            "Daily content changed by another writer",
            details={"owner_id": content.owner_id, "bucket": content.bucket.isoformat()},
        )

    for key, value in values.items():
        setattr(content, key, value)
    content.version = new_version
    content.updated_at = now
    return content


async def delete_content(owner_id: str, bucket: date) -> bool:
    """Delete the whole day. Returns True if a row was removed."""
    async with db_errors("delete daily content"):
        deleted = await DailyContent.filter(owner_id=owner_id, bucket=bucket).delete()
    return deleted > 0


async def get_recent_content(owner_id: str, limit: int) -> list[DailyContent]:
    """Get the newest `limit` days, newest bucket first."""
    async with db_errors("list recent daily content"):
        return (
            await DailyContent.filter(owner_id=owner_id)
            .order_by("-bucket")
            .limit(limit)
            .all()
        )


async def get_all_content(owner_id: str) -> list[DailyContent]:
    """Get every day for a user, newest bucket first."""
    async with db_errors("list daily content"):
        return await DailyContent.filter(owner_id=owner_id).order_by("-bucket").all()
