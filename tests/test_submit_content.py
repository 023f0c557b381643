"""Tests for content submission and day deletion use-cases."""

import asyncio
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from dayscore.core.domain.points import UpdateStatus
from dayscore.core.errors import ConflictError, ValidationError
from dayscore.core.use_cases.submit_content import content_submitter, day_deleter
from dayscore.core.use_cases.track_points import record_one_shot_action
from dayscore.database.models import DailyContent, DailyPoints
from dayscore.storage import content_repo

LONDON = ZoneInfo("Europe/London")


@pytest.mark.asyncio
async def test_first_submission_creates_day(db, owner_id, bucket):
    result = await content_submitter.execute(
        owner_id, photos=["p1"], captions=["c1"], habit_tags=["gym"], bucket=bucket
    )

    assert result.created is True
    assert result.bucket == bucket
    content = await DailyContent.get(owner_id=owner_id, bucket=bucket)
    assert content.photos == ["p1"]
    assert content.captions == ["c1"]
    assert content.habit_tags == ["gym"]
    assert content.submission_count == 1


@pytest.mark.asyncio
async def test_second_submission_merges_newest_first(db, owner_id, bucket):
    await content_submitter.execute(owner_id, photos=["p1"], captions=["c1"], bucket=bucket)
    result = await content_submitter.execute(
        owner_id, photos=["p2"], captions=["c2"], habit_tags=["run"], bucket=bucket
    )

    assert result.created is False
    content = await DailyContent.get(owner_id=owner_id, bucket=bucket)
    assert content.photos == ["p2", "p1"]
    assert content.captions == ["c2", "c1"]
    assert content.total_photos == 2
    assert content.total_habits == 1
    assert content.submission_count == 2
    assert content.version == 1


@pytest.mark.asyncio
async def test_submission_bucket_follows_cutoff(db, owner_id):
    await content_submitter.execute(
        owner_id, photos=["late"], timestamp=datetime(2024, 3, 16, 2, 0, tzinfo=LONDON)
    )
    await content_submitter.execute(
        owner_id, photos=["early"], timestamp=datetime(2024, 3, 16, 5, 0, tzinfo=LONDON)
    )

    late = await DailyContent.get(owner_id=owner_id, bucket=date(2024, 3, 15))
    early = await DailyContent.get(owner_id=owner_id, bucket=date(2024, 3, 16))
    assert late.photos == ["late"]
    assert early.photos == ["early"]


@pytest.mark.asyncio
async def test_invalid_submission_writes_nothing(db, owner_id, bucket):
    with pytest.raises(ValidationError):
        await content_submitter.execute(owner_id, photos=[], bucket=bucket)
    with pytest.raises(ValidationError):
        await content_submitter.execute(
            owner_id, photos=["p1"], captions=["a", "b"], bucket=bucket
        )

    assert await DailyContent.all().count() == 0


@pytest.mark.asyncio
async def test_concurrent_submissions_lose_nothing(db, owner_id, bucket):
    await asyncio.gather(
        *[
            content_submitter.execute(owner_id, photos=[f"p{i}"], bucket=bucket)
            for i in range(8)
        ]
    )

    content = await DailyContent.get(owner_id=owner_id, bucket=bucket)
    assert sorted(content.photos) == [f"p{i}" for i in range(8)]
    assert content.total_photos == 8
    assert content.submission_count == 8
    assert len(content.captions) == 8


@pytest.mark.asyncio
async def test_merge_race_is_retried(db, owner_id, bucket, monkeypatch):
    await content_submitter.execute(owner_id, photos=["p1"], bucket=bucket)
    real_update = content_repo.update_content
    calls = 0

    async def racing_update(content, values):
        nonlocal calls
        calls += 1
        if calls == 1:
            await DailyContent.filter(id=content.id).update(
                photos=["other", "p1"],
                captions=["", ""],
                total_photos=2,
                submission_count=2,
                version=content.version + 1,
            )
        return await real_update(content, values)

    monkeypatch.setattr(content_repo, "update_content", racing_update)

    await content_submitter.execute(owner_id, photos=["p2"], bucket=bucket)

    content = await DailyContent.get(owner_id=owner_id, bucket=bucket)
    assert content.photos == ["p2", "other", "p1"]
    assert content.submission_count == 3


@pytest.mark.asyncio
async def test_merge_after_external_photo_removal(db, owner_id, bucket):
    await content_submitter.execute(
        owner_id, photos=["p1", "p2"], captions=["c1", "c2"], bucket=bucket
    )
    # Another service drops a photo but leaves its caption behind
    await DailyContent.filter(owner_id=owner_id, bucket=bucket).update(
        photos=["p1"], total_photos=1
    )

    result = await content_submitter.execute(
        owner_id, photos=["p3"], captions=["c3"], bucket=bucket
    )

    assert result.created is False
    content = await DailyContent.get(owner_id=owner_id, bucket=bucket)
    assert content.photos == ["p3", "p1"]
    assert content.captions == ["c3", "c1"]
    assert content.total_photos == 2
    assert content.submission_count == 2


@pytest.mark.asyncio
async def test_update_after_delete_is_a_conflict(db, owner_id, bucket):
    await content_submitter.execute(owner_id, photos=["p1"], bucket=bucket)
    content = await content_repo.get_content(owner_id, bucket)
    await content_repo.delete_content(owner_id, bucket)

    with pytest.raises(ConflictError):
        await content_repo.update_content(content, {"photos": ["p2", "p1"]})


# ============ Delete day ============


@pytest.mark.asyncio
async def test_delete_day_removes_content_only(db, owner_id, bucket):
    await content_submitter.execute(owner_id, photos=["p1"], bucket=bucket)
    await record_one_shot_action(owner_id, "share", bucket=bucket)

    result = await day_deleter.execute(owner_id, bucket)

    assert result.status is UpdateStatus.APPLIED
    assert not await DailyContent.filter(owner_id=owner_id).exists()
    points = await DailyPoints.get(owner_id=owner_id, bucket=bucket)
    assert points.total_points == 15


@pytest.mark.asyncio
async def test_delete_missing_day_is_noop(db, owner_id, bucket):
    result = await day_deleter.execute(owner_id, bucket.isoformat())

    assert result.status is UpdateStatus.NOOP
    assert result.applied is False
    assert result.bucket == bucket


@pytest.mark.asyncio
async def test_submission_after_delete_starts_fresh(db, owner_id, bucket):
    await content_submitter.execute(owner_id, photos=["p1"], bucket=bucket)
    await day_deleter.execute(owner_id, bucket)

    result = await content_submitter.execute(owner_id, photos=["p2"], bucket=bucket)

    assert result.created is True
    assert result.content.photos == ["p2"]
    assert result.content.submission_count == 1


@pytest.mark.asyncio
async def test_delete_rejects_bad_bucket(db, owner_id):
    with pytest.raises(ValidationError):
        await day_deleter.execute(owner_id, "yesterday")
