"""
Submit Content Use Case - merges a photo/caption/habit-tag batch into the day.

AICODE-NOTE: Use-case combines repositories + domain rules.
Handlers call the use-case and get a result back.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from dayscore.core.domain.buckets import bucket_for, parse_bucket
from dayscore.core.domain.content_merge import (
    ContentSnapshot,
    Submission,
    merge_submission,
    validate_submission,
)
from dayscore.core.domain.points import UpdateStatus
from dayscore.core.domain.validation import validate_owner_id
from dayscore.database.models import DailyContent
from dayscore.services.write_guard import conflict_retrying, write_locks
from dayscore.storage import content_repo

logger = logging.getLogger(__name__)


@dataclass
class ContentSubmitResult:
    """Result of merging a submission."""

    bucket: date
    content: DailyContent
    created: bool


@dataclass
class DeleteDayResult:
    """Result of deleting a day."""

    status: UpdateStatus
    bucket: date

    @property
    def applied(self) -> bool:
        return self.status is UpdateStatus.APPLIED


def snapshot_of(content: DailyContent) -> ContentSnapshot:
    return ContentSnapshot(
        photos=list(content.photos or []),
        captions=list(content.captions or []),
        habit_tags=list(content.habit_tags or []),
        submission_count=content.submission_count,
    )


class SubmitContentUseCase:
    """Use-case for content submissions."""

    async def execute(
        self,
        owner_id: str,
        photos: list[str],
        captions: list[str] | None = None,
        habit_tags: list[str] | None = None,
        timestamp: datetime | None = None,
        bucket: date | None = None,
    ) -> ContentSubmitResult:
        """
        Merge a submission into the owner's content for its bucket.

        Args:
            owner_id: External user id
            photos: Media references of this batch
            captions: One per photo, one for the batch, or none
            habit_tags: Habits shown in this batch
            timestamp: Submission time (default: now)
            bucket: Explicit bucket, overrides timestamp

        Returns:
            ContentSubmitResult with the stored row

        Raises:
            ValidationError: bad owner id or submission, nothing written
            ConflictError: lost the race MAX_WRITE_ATTEMPTS times
            PersistenceError: storage failed
        """
        validate_owner_id(owner_id)
        submission = validate_submission(
            Submission(
                photos=list(photos or []),
                captions=list(captions or []),
                habit_tags=list(habit_tags or []),
            )
        )
        if bucket is None:
            bucket = bucket_for(timestamp)

        async with write_locks.hold(("content", owner_id, bucket)):
            async for attempt in conflict_retrying():
                with attempt:
                    content, created = await self._merge_once(owner_id, bucket, submission)

        logger.info(
            f"Content {'created' if created else 'merged'} for {owner_id} on {bucket}: "
            f"{content.total_photos} photos, {content.submission_count} submissions"
        )
        return ContentSubmitResult(bucket=bucket, content=content, created=created)

    async def _merge_once(
        self, owner_id: str, bucket: date, submission: Submission
    ) -> tuple[DailyContent, bool]:
        existing = await content_repo.get_content(owner_id, bucket)
        merged = merge_submission(snapshot_of(existing) if existing else None, submission)

        if existing is None:
            content = await content_repo.create_content(owner_id, bucket, merged.to_fields())
            return content, True

        content = await content_repo.update_content(existing, merged.to_fields())
        return content, False


class DeleteDayUseCase:
    """Use-case for an owner deleting a whole day of content."""

    async def execute(self, owner_id: str, bucket: date | str) -> DeleteDayResult:
        """
        Delete the owner's content for a bucket.

        Points for the bucket are kept. Deleting a day that has no content
        is a NOOP, not an error.
        """
        validate_owner_id(owner_id)
        bucket = parse_bucket(bucket)

        async with write_locks.hold(("content", owner_id, bucket)):
            deleted = await content_repo.delete_content(owner_id, bucket)

        if deleted:
            logger.info(f"Content deleted for {owner_id} on {bucket}")
            return DeleteDayResult(status=UpdateStatus.APPLIED, bucket=bucket)
        return DeleteDayResult(status=UpdateStatus.NOOP, bucket=bucket)


# Singleton instances
content_submitter = SubmitContentUseCase()
day_deleter = DeleteDayUseCase()
