"""
Habit catalogue - the fixed set of scored habits and their kinds.

Four kinds of habit, each with one handler in points.py:
- VALUE_DERIVED: daily habits inferred from saved values (sleep hours, water...)
- EXPLICIT: daily habits the user marks complete (meditation, microlearn)
- STATE_REFRESHED: core habits mirrored from live reaction/comment rows
- ONE_SHOT: core actions that count once per bucket (share, goal update)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict

from dayscore.core.errors import ValidationError

DAILY_HABIT_POINTS = 15
LIKE_POINTS = 10
COMMENT_POINTS = 10
SHARE_POINTS = 15
GOAL_UPDATE_POINTS = 25
BONUS_POINTS = 20


class HabitKind(str, Enum):
    VALUE_DERIVED = "value_derived"
    EXPLICIT = "explicit"
    STATE_REFRESHED = "state_refreshed"
    ONE_SHOT = "one_shot"


class HabitGroup(str, Enum):
    DAILY = "daily"
    CORE = "core"


@dataclass(frozen=True)
class Habit:
    """A scored habit: its kind, point group, value and DailyPoints flag column."""

    name: str
    kind: HabitKind
    group: HabitGroup
    points: int
    flag_field: str


HABITS: dict[str, Habit] = {
    h.name: h
    for h in (
        Habit("gym", HabitKind.VALUE_DERIVED, HabitGroup.DAILY, DAILY_HABIT_POINTS, "gym_completed"),
        Habit("sleep", HabitKind.VALUE_DERIVED, HabitGroup.DAILY, DAILY_HABIT_POINTS, "sleep_completed"),
        Habit("water", HabitKind.VALUE_DERIVED, HabitGroup.DAILY, DAILY_HABIT_POINTS, "water_completed"),
        Habit("run", HabitKind.VALUE_DERIVED, HabitGroup.DAILY, DAILY_HABIT_POINTS, "run_completed"),
        Habit("reflect", HabitKind.VALUE_DERIVED, HabitGroup.DAILY, DAILY_HABIT_POINTS, "reflect_completed"),
        Habit("cold_shower", HabitKind.VALUE_DERIVED, HabitGroup.DAILY, DAILY_HABIT_POINTS, "cold_shower_completed"),
        Habit("meditation", HabitKind.EXPLICIT, HabitGroup.DAILY, DAILY_HABIT_POINTS, "meditation_completed"),
        Habit("microlearn", HabitKind.EXPLICIT, HabitGroup.DAILY, DAILY_HABIT_POINTS, "microlearn_completed"),
        Habit("like", HabitKind.STATE_REFRESHED, HabitGroup.CORE, LIKE_POINTS, "liked_today"),
        Habit("comment", HabitKind.STATE_REFRESHED, HabitGroup.CORE, COMMENT_POINTS, "commented_today"),
        Habit("share", HabitKind.ONE_SHOT, HabitGroup.CORE, SHARE_POINTS, "shared_today"),
        Habit("goal_update", HabitKind.ONE_SHOT, HabitGroup.CORE, GOAL_UPDATE_POINTS, "updated_goal_today"),
    )
}

# Names used by other clients for the same habits
HABIT_ALIASES = {
    "reaction": "like",
    "update_goal": "goal_update",
    "goalUpdate": "goal_update",
    "coldShower": "cold_shower",
}

DAILY_HABITS = tuple(h for h in HABITS.values() if h.group is HabitGroup.DAILY)
CORE_HABITS = tuple(h for h in HABITS.values() if h.group is HabitGroup.CORE)
VALUE_DERIVED_HABITS = tuple(
    h for h in HABITS.values() if h.kind is HabitKind.VALUE_DERIVED
)
FLAG_FIELDS = tuple(h.flag_field for h in HABITS.values())


def get_habit(name: str, kind: HabitKind | None = None) -> Habit:
    """
    Look up a habit by name (aliases allowed).

    Raises:
        ValidationError: unknown habit, or habit of a different kind
    """
    habit = HABITS.get(HABIT_ALIASES.get(name, name))
    if habit is None:
        raise ValidationError(f"Unknown habit: {name!r}", details={"habit": name})
    if kind is not None and habit.kind is not kind:
        raise ValidationError(
            f"Habit {habit.name!r} is {habit.kind.value}, expected {kind.value}",
            details={"habit": habit.name, "kind": habit.kind.value},
        )
    return habit


def completions_from_snapshot(snapshot: Mapping[str, Any]) -> dict[str, bool]:
    """
    Turn a value snapshot into completion flags for the value-derived habits.

    A habit counts as done when its value is non-empty. Habits missing from
    the snapshot count as not done.

    Raises:
        ValidationError: snapshot names a habit that is not value-derived
    """
    if not isinstance(snapshot, Mapping):
        raise ValidationError("Daily habits snapshot must be a mapping of habit -> value")

    values = {
        get_habit(name, HabitKind.VALUE_DERIVED).name: value
        for name, value in snapshot.items()
    }
    return {h.name: bool(values.get(h.name)) for h in VALUE_DERIVED_HABITS}


class DailyHabitsEntry(BaseModel):
    """
    Raw daily habits form as saved by the habits service.

    Only the fields that decide completion are modelled; the rest are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    gym_day_type: str | None = None
    gym_training_types: list[str] | None = None
    sleep_hours: float | None = None
    sleep_quality: int | None = None
    water_intake: float | None = None
    run_day_type: str | None = None
    run_activity_type: str | None = None
    reflect_mood: int | None = None
    reflect_energy: int | None = None
    reflect_what_went_well: str | None = None
    cold_shower_completed: bool | None = None

    def to_snapshot(self) -> dict[str, Any]:
        """Snapshot for SaveDailyHabits: habit name -> deciding value."""
        return {
            "gym": self.gym_day_type or self.gym_training_types,
            "sleep": self.sleep_hours or self.sleep_quality,
            "water": self.water_intake,
            "run": self.run_day_type or self.run_activity_type,
            "reflect": self.reflect_mood or self.reflect_energy or self.reflect_what_went_well,
            "cold_shower": self.cold_shower_completed,
        }
