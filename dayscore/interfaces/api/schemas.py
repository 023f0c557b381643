"""
Pydantic schemas for the DayScore API.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dayscore.core.domain.habits import DailyHabitsEntry

# ============ Content Schemas ============


class SubmitContentRequest(BaseModel):
    """A batch of photos with captions and habit tags."""

    photos: list[str] = []
    captions: list[str] = []
    habit_tags: list[str] = []
    timestamp: datetime | None = None


class ContentResponse(BaseModel):
    """One day of content."""

    model_config = ConfigDict(from_attributes=True)

    owner_id: str
    bucket: date
    photos: list[str]
    captions: list[str]
    habit_tags: list[str]
    total_photos: int
    total_habits: int
    submission_count: int
    created_at: datetime
    updated_at: datetime


class SubmitContentResponse(BaseModel):
    created: bool
    content: ContentResponse


class RecentDaysResponse(BaseModel):
    days: list[ContentResponse]
    total: int


class ContentStatsResponse(BaseModel):
    total_days: int
    total_photos: int
    total_habits: int
    average_photos_per_day: float
    average_habits_per_day: float
    most_active_day: date | None = None


class DeleteDayResponse(BaseModel):
    applied: bool
    bucket: date


# ============ Habit Event Schemas ============


class SaveDailyHabitsRequest(BaseModel):
    """
    Either a ready snapshot (habit -> value) or the raw daily habits form.
    The raw form wins if both are sent.
    """

    snapshot: dict[str, Any] | None = None
    entry: DailyHabitsEntry | None = None
    timestamp: datetime | None = None


class ExplicitHabitRequest(BaseModel):
    habit: str = Field(description="meditation | microlearn")
    timestamp: datetime | None = None


class CoreHabitRefreshRequest(BaseModel):
    habit: str = Field(description="like | comment")
    is_active: bool
    timestamp: datetime | None = None


class OneShotActionRequest(BaseModel):
    habit: str = Field(description="share | goal_update")
    timestamp: datetime | None = None


# ============ Points Schemas ============


class PointsBreakdownResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    daily: int
    core: int
    bonus: int
    total: int


class PointsUpdateResponse(BaseModel):
    """
    applied=False with a reason means nothing changed because it was already
    done (or the state did not change); failures are returned as errors.
    """

    applied: bool
    reason: str | None = None
    bucket: date
    bonus_awarded: bool
    breakdown: PointsBreakdownResponse


class CoreHabitStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    liked: bool
    commented: bool
    shared: bool
    updated_goal: bool
    bonus: bool


class CumulativeTotalResponse(BaseModel):
    total_points: int


class LevelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_points: int
    level: int
    next_level: int
    points_into_level: int
    points_to_next: int
    segments_filled: int
    max_segments: int
