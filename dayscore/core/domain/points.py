"""
Points Domain Rules - pure state machine for a day's points.

AICODE-NOTE: No DB access, no side effects. Every event is applied to an
in-memory PointsState copy; the track_points use-case persists the result
with one conditional write, so a failed write never leaves half an update.

Totals are only ever set in recompute_totals():
    total_points == daily_points + core_points + bonus_points
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Mapping, Union

from dayscore.core.domain.habits import (
    BONUS_POINTS,
    CORE_HABITS,
    DAILY_HABITS,
    HABITS,
    Habit,
    HabitKind,
    completions_from_snapshot,
    get_habit,
)


class UpdateStatus(str, Enum):
    APPLIED = "applied"
    NOOP = "noop"


class NoOpReason(str, Enum):
    ALREADY_COMPLETED = "already_completed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class PointsBreakdown:
    daily: int = 0
    core: int = 0
    bonus: int = 0
    total: int = 0


@dataclass
class PointsState:
    """In-memory view of a DailyPoints row. Flags are keyed by habit name."""

    flags: dict[str, bool] = field(
        default_factory=lambda: {name: False for name in HABITS}
    )
    daily_points: int = 0
    core_points: int = 0
    bonus_points: int = 0
    total_points: int = 0

    @classmethod
    def from_record(cls, record: Any) -> "PointsState":
        """Build from a DailyPoints row (or anything with the same attributes)."""
        return cls(
            flags={h.name: bool(getattr(record, h.flag_field)) for h in HABITS.values()},
            daily_points=record.daily_points,
            core_points=record.core_points,
            bonus_points=record.bonus_points,
            total_points=record.total_points,
        )

    def copy(self) -> "PointsState":
        return replace(self, flags=dict(self.flags))

    def to_fields(self) -> dict[str, Any]:
        """Column values for persisting this state."""
        values: dict[str, Any] = {
            h.flag_field: self.flags[h.name] for h in HABITS.values()
        }
        values.update(
            daily_points=self.daily_points,
            core_points=self.core_points,
            bonus_points=self.bonus_points,
            total_points=self.total_points,
        )
        return values

    def breakdown(self) -> PointsBreakdown:
        return PointsBreakdown(
            daily=self.daily_points,
            core=self.core_points,
            bonus=self.bonus_points,
            total=self.total_points,
        )

    @property
    def all_daily_complete(self) -> bool:
        return all(self.flags[h.name] for h in DAILY_HABITS)

    @property
    def all_core_complete(self) -> bool:
        return all(self.flags[h.name] for h in CORE_HABITS)


# ============ Events ============


@dataclass(frozen=True)
class SaveDailyHabits:
    """Daily habits form saved; snapshot maps value-derived habit -> value."""

    snapshot: Mapping[str, Any]


@dataclass(frozen=True)
class CompleteExplicitHabit:
    habit: str


@dataclass(frozen=True)
class RefreshCoreHabitState:
    """
    Caller reports whether the user currently has an active reaction/comment
    created inside the bucket window. The flag mirrors that, never the action.
    """

    habit: str
    is_active: bool


@dataclass(frozen=True)
class RecordOneShotAction:
    habit: str


PointsEvent = Union[
    SaveDailyHabits, CompleteExplicitHabit, RefreshCoreHabitState, RecordOneShotAction
]


@dataclass(frozen=True)
class Transition:
    """Outcome of applying one event."""

    state: PointsState
    status: UpdateStatus
    reason: NoOpReason | None = None
    bonus_awarded: bool = False

    @property
    def applied(self) -> bool:
        return self.status is UpdateStatus.APPLIED


# ============ Rules ============


def recompute_totals(state: PointsState) -> PointsState:
    """Re-establish the sum invariant. The only place totals are written."""
    state.daily_points = max(0, state.daily_points)
    state.core_points = max(0, state.core_points)
    state.bonus_points = max(0, state.bonus_points)
    state.total_points = state.daily_points + state.core_points + state.bonus_points
    return state


def evaluate_bonus(state: PointsState) -> bool:
    """
    Award the completion bonus if every daily and core habit is done.

    The bonus is sticky: once awarded for a bucket it is never revoked,
    even if a state-refreshed flag later turns off.

    Returns:
        True if the bonus was awarded by this call
    """
    if state.bonus_points > 0:
        return False
    if not (state.all_daily_complete and state.all_core_complete):
        return False
    state.bonus_points = BONUS_POINTS
    recompute_totals(state)
    return True


def _noop(state: PointsState, reason: NoOpReason) -> Transition:
    return Transition(state=state, status=UpdateStatus.NOOP, reason=reason)


def _applied(state: PointsState) -> Transition:
    recompute_totals(state)
    awarded = evaluate_bonus(state)
    return Transition(state=state, status=UpdateStatus.APPLIED, bonus_awarded=awarded)


def _apply_daily_snapshot(state: PointsState, event: SaveDailyHabits) -> Transition:
    completions = completions_from_snapshot(event.snapshot)

    new = state.copy()
    new.flags.update(completions)
    new.daily_points = sum(h.points for h in DAILY_HABITS if new.flags[h.name])

    if new.flags == state.flags and new.daily_points == state.daily_points:
        return _noop(state, NoOpReason.UNCHANGED)
    return _applied(new)


def _apply_explicit(state: PointsState, event: CompleteExplicitHabit) -> Transition:
    habit = get_habit(event.habit, HabitKind.EXPLICIT)
    if state.flags[habit.name]:
        return _noop(state, NoOpReason.ALREADY_COMPLETED)

    new = state.copy()
    new.flags[habit.name] = True
    new.daily_points += habit.points
    return _applied(new)


def _apply_core_refresh(state: PointsState, event: RefreshCoreHabitState) -> Transition:
    habit = get_habit(event.habit, HabitKind.STATE_REFRESHED)
    is_active = bool(event.is_active)
    if state.flags[habit.name] == is_active:
        return _noop(state, NoOpReason.UNCHANGED)

    new = state.copy()
    new.flags[habit.name] = is_active
    if is_active:
        new.core_points += habit.points
    else:
        new.core_points = max(0, new.core_points - habit.points)
    return _applied(new)


def _apply_one_shot(state: PointsState, event: RecordOneShotAction) -> Transition:
    habit = get_habit(event.habit, HabitKind.ONE_SHOT)
    if state.flags[habit.name]:
        return _noop(state, NoOpReason.ALREADY_COMPLETED)

    new = state.copy()
    new.flags[habit.name] = True
    new.core_points += habit.points
    return _applied(new)


_HANDLERS: dict[type, Callable[[PointsState, Any], Transition]] = {
    SaveDailyHabits: _apply_daily_snapshot,
    CompleteExplicitHabit: _apply_explicit,
    RefreshCoreHabitState: _apply_core_refresh,
    RecordOneShotAction: _apply_one_shot,
}


def validate_event(event: PointsEvent) -> Habit | None:
    """
    Check an event before any storage access.

    Raises:
        ValidationError: unknown habit or habit of the wrong kind
    """
    if isinstance(event, SaveDailyHabits):
        completions_from_snapshot(event.snapshot)
        return None
    if isinstance(event, CompleteExplicitHabit):
        return get_habit(event.habit, HabitKind.EXPLICIT)
    if isinstance(event, RefreshCoreHabitState):
        return get_habit(event.habit, HabitKind.STATE_REFRESHED)
    if isinstance(event, RecordOneShotAction):
        return get_habit(event.habit, HabitKind.ONE_SHOT)
    raise TypeError(f"Unsupported points event: {type(event).__name__}")


def apply_event(state: PointsState, event: PointsEvent) -> Transition:
    """
    Apply one event to a day's points.

    The input state is never modified; the transition carries a new state.
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unsupported points event: {type(event).__name__}")
    return handler(state, event)
