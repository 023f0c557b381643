"""
Content Merge Rules - pure functions for merging submissions into a day.

AICODE-NOTE: No DB access. The submit_content use-case
reads the stored DailyContent, calls merge_submission() and writes back.

Invariants after every merge:
- photos are ordered most recent submission first
- captions[i] describes photos[i] (len(captions) == len(photos))
- habit_tags is an ordered set union (existing tags first)
- total_photos/total_habits equal the real list lengths
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from dayscore.core.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Submission:
    """One content submission (a batch of photos with captions and habit tags)."""

    photos: list[str] = field(default_factory=list)
    captions: list[str] = field(default_factory=list)
    habit_tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ContentSnapshot:
    """In-memory view of a DailyContent row."""

    photos: list[str]
    captions: list[str]
    habit_tags: list[str]
    submission_count: int

    @property
    def total_photos(self) -> int:
        return len(self.photos)

    @property
    def total_habits(self) -> int:
        return len(self.habit_tags)

    def to_fields(self) -> dict:
        """Column values for persisting this snapshot."""
        return {
            "photos": list(self.photos),
            "captions": list(self.captions),
            "habit_tags": list(self.habit_tags),
            "total_photos": self.total_photos,
            "total_habits": self.total_habits,
            "submission_count": self.submission_count,
        }


def _unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def align_captions(photos: list[str], captions: list[str]) -> list[str]:
    """
    Give every photo of a batch exactly one caption slot.

    - one caption per photo: kept as is
    - a single caption for a multi-photo batch: goes on the first photo
    - fewer captions than photos: missing slots are empty strings

    Raises:
        ValidationError: more captions than photos
    """
    if len(captions) > len(photos):
        raise ValidationError(
            "More captions than photos in submission",
            details={"photos": len(photos), "captions": len(captions)},
        )
    return list(captions) + [""] * (len(photos) - len(captions))


def validate_submission(submission: Submission) -> Submission:
    """
    Check and normalise a submission before it touches storage.

    Raises:
        ValidationError: empty submission, blank photo refs or bad captions
    """
    if not submission.photos and not submission.habit_tags:
        raise ValidationError("Submission has no photos and no habit tags")

    if any(not isinstance(p, str) or not p.strip() for p in submission.photos):
        raise ValidationError("Photo references must be non-empty strings")

    if any(not isinstance(t, str) or not t.strip() for t in submission.habit_tags):
        raise ValidationError("Habit tags must be non-empty strings")

    captions = align_captions(submission.photos, submission.captions)
    return Submission(
        photos=list(submission.photos),
        captions=captions,
        habit_tags=_unique(t.strip() for t in submission.habit_tags),
    )


def fit_stored_captions(existing: ContentSnapshot) -> list[str]:
    """
    Stored captions cut or padded to one slot per stored photo.

    Rows edited outside the merge path (e.g. a photo removed by another
    service) can drift; the trailing slots are the ones adjusted.
    """
    captions = list(existing.captions)[: len(existing.photos)]
    captions += [""] * (len(existing.photos) - len(captions))
    if len(existing.captions) != len(existing.photos):
        logger.warning(
            f"Stored captions out of step with photos "
            f"({len(existing.captions)} captions, {len(existing.photos)} photos), realigning"
        )
    return captions


def merge_submission(
    existing: ContentSnapshot | None, submission: Submission
) -> ContentSnapshot:
    """
    Merge a submission into the day's content.

    Args:
        existing: Current content for the bucket, or None for the first submission
        submission: New batch

    Returns:
        New ContentSnapshot (existing is not modified)
    """
    batch = validate_submission(submission)

    if existing is None:
        return ContentSnapshot(
            photos=batch.photos,
            captions=batch.captions,
            habit_tags=batch.habit_tags,
            submission_count=1,
        )

    existing_captions = fit_stored_captions(existing)

    # Newest batch first; captions follow the same order as their photos
    return ContentSnapshot(
        photos=batch.photos + list(existing.photos),
        captions=batch.captions + existing_captions,
        habit_tags=_unique([*existing.habit_tags, *batch.habit_tags]),
        submission_count=existing.submission_count + 1,
    )


def captions_aligned(snapshot: ContentSnapshot) -> bool:
    """Check that every photo has exactly one caption slot."""
    return len(snapshot.captions) == len(snapshot.photos)
