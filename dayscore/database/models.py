"""
Database models for DayScore.

Structure:
- DailyContent: photos/captions/habit tags a user submitted within one day bucket
- DailyPoints: habit flags and point breakdown for one day bucket
- PointsTotalCache: advisory running total (never the source of truth)

AICODE-NOTE: owner_id is an external user id. Users, auth and the social
graph live in other services; this schema only knows the id.
"""

from tortoise import fields, models


class DailyContent(models.Model):
    """All content a user submitted within one day bucket."""

    id = fields.IntField(primary_key=True)
    owner_id = fields.CharField(max_length=64, db_index=True)
    bucket = fields.DateField()

    # Most recent submission first; captions are index-aligned with photos
    photos: list[str] = fields.JSONField(default=list)
    captions: list[str] = fields.JSONField(default=list)
    habit_tags: list[str] = fields.JSONField(default=list)

    # Derived from the lists above, recomputed on every merge
    total_photos = fields.IntField(default=0)
    total_habits = fields.IntField(default=0)
    submission_count = fields.IntField(default=0)

    # Optimistic concurrency token
    version = fields.IntField(default=0)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "daily_content"
        unique_together = (("owner_id", "bucket"),)


class DailyPoints(models.Model):
    """
    Habit flags and points for one day bucket.

    total_points == daily_points + core_points + bonus_points after every write.
    """

    id = fields.IntField(primary_key=True)
    owner_id = fields.CharField(max_length=64, db_index=True)
    bucket = fields.DateField()

    # Daily habits: inferred from saved values
    gym_completed = fields.BooleanField(default=False)
    sleep_completed = fields.BooleanField(default=False)
    water_completed = fields.BooleanField(default=False)
    run_completed = fields.BooleanField(default=False)
    reflect_completed = fields.BooleanField(default=False)
    cold_shower_completed = fields.BooleanField(default=False)
    # Daily habits: explicitly marked complete
    meditation_completed = fields.BooleanField(default=False)
    microlearn_completed = fields.BooleanField(default=False)

    # Core habits
    liked_today = fields.BooleanField(default=False)
    commented_today = fields.BooleanField(default=False)
    shared_today = fields.BooleanField(default=False)
    updated_goal_today = fields.BooleanField(default=False)

    daily_points = fields.IntField(default=0)
    core_points = fields.IntField(default=0)
    bonus_points = fields.IntField(default=0)
    total_points = fields.IntField(default=0)

    version = fields.IntField(default=0)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "daily_points"
        unique_together = (("owner_id", "bucket"),)


class PointsTotalCache(models.Model):
    """
    Running cumulative total (sum of DailyPoints.total_points) for other consumers.

    AICODE-NOTE: Advisory only. Every applied points write adds its total
    delta here best-effort; recalc_totals rebuilds it from the same sum.
    Levels and totals are always computed from DailyPoints rows.
    """

    id = fields.IntField(primary_key=True)
    owner_id = fields.CharField(max_length=64, unique=True)
    total_points = fields.IntField(default=0)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "user_points_total"
