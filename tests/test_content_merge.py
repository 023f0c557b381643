"""Tests for merging content submissions into a day."""

import pytest

from dayscore.core.domain.content_merge import (
    ContentSnapshot,
    Submission,
    align_captions,
    captions_aligned,
    merge_submission,
    validate_submission,
)
from dayscore.core.errors import ValidationError


def test_first_submission_creates_snapshot():
    result = merge_submission(
        None, Submission(photos=["p1", "p2"], captions=["c1", "c2"], habit_tags=["gym"])
    )

    assert result.photos == ["p1", "p2"]
    assert result.captions == ["c1", "c2"]
    assert result.habit_tags == ["gym"]
    assert result.submission_count == 1
    assert result.total_photos == 2
    assert result.total_habits == 1


def test_newest_batch_goes_first():
    first = merge_submission(None, Submission(photos=["p1"], captions=["c1"]))
    second = merge_submission(first, Submission(photos=["p2"], captions=["c2"]))

    assert second.photos == ["p2", "p1"]
    assert second.captions == ["c2", "c1"]
    assert second.submission_count == 2


def test_multi_photo_batches_keep_captions_aligned():
    existing = ContentSnapshot(
        photos=["a1", "a2"], captions=["ca1", "ca2"], habit_tags=[], submission_count=1
    )

    result = merge_submission(existing, Submission(photos=["b1", "b2", "b3"], captions=["cb"]))

    assert result.photos == ["b1", "b2", "b3", "a1", "a2"]
    assert result.captions == ["cb", "", "", "ca1", "ca2"]
    assert captions_aligned(result)


def test_habit_tags_are_an_ordered_union():
    existing = ContentSnapshot(
        photos=["p1"], captions=[""], habit_tags=["gym", "water"], submission_count=1
    )

    result = merge_submission(
        existing, Submission(photos=["p2"], habit_tags=["water", "run", "run"])
    )

    assert result.habit_tags == ["gym", "water", "run"]
    assert result.total_habits == 3


def test_totals_match_list_lengths():
    snapshot = None
    for i in range(4):
        snapshot = merge_submission(
            snapshot, Submission(photos=[f"p{i}a", f"p{i}b"], habit_tags=[f"h{i % 2}"])
        )

    fields = snapshot.to_fields()
    assert fields["total_photos"] == len(fields["photos"]) == 8
    assert fields["total_habits"] == len(fields["habit_tags"]) == 2
    assert fields["submission_count"] == 4
    assert len(fields["captions"]) == 8


def test_merge_does_not_modify_existing():
    existing = ContentSnapshot(
        photos=["p1"], captions=["c1"], habit_tags=["gym"], submission_count=1
    )

    merge_submission(existing, Submission(photos=["p2"], habit_tags=["run"]))

    assert existing.photos == ["p1"]
    assert existing.captions == ["c1"]
    assert existing.habit_tags == ["gym"]


def test_stored_rows_missing_caption_slots_are_padded():
    existing = ContentSnapshot(
        photos=["p1", "p2"], captions=["c1"], habit_tags=[], submission_count=1
    )

    result = merge_submission(existing, Submission(photos=["p3"], captions=["c3"]))

    assert result.captions == ["c3", "c1", ""]


def test_stored_rows_with_extra_captions_are_trimmed():
    # A photo was removed from the row without its caption
    existing = ContentSnapshot(
        photos=["p1"], captions=["c1", "c2"], habit_tags=[], submission_count=1
    )

    result = merge_submission(existing, Submission(photos=["p3"], captions=["c3"]))

    assert result.photos == ["p3", "p1"]
    assert result.captions == ["c3", "c1"]
    assert captions_aligned(result)


def test_tags_only_submission_is_allowed():
    result = merge_submission(None, Submission(habit_tags=["meditation"]))

    assert result.photos == []
    assert result.habit_tags == ["meditation"]
    assert result.submission_count == 1


def test_empty_submission_is_rejected():
    with pytest.raises(ValidationError):
        merge_submission(None, Submission())


def test_more_captions_than_photos_is_rejected():
    with pytest.raises(ValidationError):
        validate_submission(Submission(photos=["p1"], captions=["c1", "c2"]))


@pytest.mark.parametrize(
    "submission",
    [
        Submission(photos=[""]),
        Submission(photos=["  "]),
        Submission(photos=["p1"], habit_tags=[""]),
    ],
)
def test_blank_references_are_rejected(submission):
    with pytest.raises(ValidationError):
        validate_submission(submission)


def test_align_captions():
    assert align_captions(["a", "b"], ["x", "y"]) == ["x", "y"]
    assert align_captions(["a", "b", "c"], ["x"]) == ["x", "", ""]
    assert align_captions(["a"], []) == [""]
    assert align_captions([], []) == []
