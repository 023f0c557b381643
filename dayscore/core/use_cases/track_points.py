"""
Track Points Use Case - applies habit events to a day's DailyPoints row.

AICODE-NOTE: Use-case combines repositories + domain rules.
Flow per event: validate -> resolve bucket -> lock key -> read row ->
apply_event() in memory -> one conditional write (retried on conflict) ->
add the total delta to PointsTotalCache (best-effort).
A NOOP result means "already done / nothing changed"; failures raise.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping

from dayscore.core.domain.buckets import bucket_for
from dayscore.core.domain.points import (
    CompleteExplicitHabit,
    NoOpReason,
    PointsBreakdown,
    PointsEvent,
    PointsState,
    RecordOneShotAction,
    RefreshCoreHabitState,
    SaveDailyHabits,
    Transition,
    UpdateStatus,
    apply_event,
    validate_event,
)
from dayscore.core.domain.validation import validate_owner_id
from dayscore.core.errors import DayScoreError
from dayscore.services.write_guard import conflict_retrying, write_locks
from dayscore.storage import points_repo

logger = logging.getLogger(__name__)


@dataclass
class PointsUpdateResult:
    """Result of one points event."""

    status: UpdateStatus
    bucket: date
    breakdown: PointsBreakdown
    reason: NoOpReason | None = None
    bonus_awarded: bool = False

    @property
    def applied(self) -> bool:
        return self.status is UpdateStatus.APPLIED


class TrackPointsUseCase:
    """Use-case for every points-affecting event."""

    async def execute(
        self,
        owner_id: str,
        event: PointsEvent,
        timestamp: datetime | None = None,
        bucket: date | None = None,
    ) -> PointsUpdateResult:
        """
        Apply an event to the owner's points for the event's bucket.

        Args:
            owner_id: External user id
            event: One of the points events from core/domain/points.py
            timestamp: When the event happened (default: now)
            bucket: Explicit bucket, overrides timestamp (backfills, tests)

        Returns:
            PointsUpdateResult (APPLIED or NOOP)

        Raises:
            ValidationError: bad owner id or event, nothing read or written
            ConflictError: lost the race MAX_WRITE_ATTEMPTS times
            PersistenceError: storage failed, stored row unchanged
        """
        validate_owner_id(owner_id)
        validate_event(event)
        if bucket is None:
            bucket = bucket_for(timestamp)

        async with write_locks.hold(("points", owner_id, bucket)):
            async for attempt in conflict_retrying():
                with attempt:
                    transition, delta = await self._apply_once(owner_id, bucket, event)

        if delta:
            await self._propagate_total(owner_id, delta)

        if transition.applied:
            logger.info(
                f"{type(event).__name__} applied for {owner_id} on {bucket}: "
                f"total={transition.state.total_points}"
                + (" (+bonus)" if transition.bonus_awarded else "")
            )
        else:
            logger.debug(
                f"{type(event).__name__} no-op for {owner_id} on {bucket}: "
                f"{transition.reason.value if transition.reason else ''}"
            )

        return PointsUpdateResult(
            status=transition.status,
            bucket=bucket,
            breakdown=transition.state.breakdown(),
            reason=transition.reason,
            bonus_awarded=transition.bonus_awarded,
        )

    async def _apply_once(
        self, owner_id: str, bucket: date, event: PointsEvent
    ) -> tuple[Transition, int]:
        """Read, apply and write once. Returns the transition and its total delta."""
        record = await points_repo.get_points(owner_id, bucket)
        state = PointsState.from_record(record) if record else PointsState()

        transition = apply_event(state, event)
        if not transition.applied:
            return transition, 0

        values = transition.state.to_fields()
        if record is None:
            await points_repo.create_points(owner_id, bucket, values)
        else:
            await points_repo.update_points(record, values)
        return transition, transition.state.total_points - state.total_points

    async def _propagate_total(self, owner_id: str, delta: int) -> None:
        """
        Apply a day's total change (bonus included) to the advisory running total.

        Best-effort: the change is already stored on the day row, and levels
        are computed from live sums, so a cache failure is only logged.
        recalc_totals rebuilds the same number from live sums.
        """
        try:
            await points_repo.add_to_cached_total(owner_id, delta)
        except DayScoreError as e:
            logger.warning(f"Failed to update cached total for {owner_id}: {e}")


# Singleton instance
points_engine = TrackPointsUseCase()


async def save_daily_habits(
    owner_id: str,
    snapshot: Mapping[str, Any],
    timestamp: datetime | None = None,
    bucket: date | None = None,
) -> PointsUpdateResult:
    """Daily habits form saved: recompute the six value-derived flags."""
    return await points_engine.execute(
        owner_id, SaveDailyHabits(snapshot=snapshot), timestamp, bucket
    )


async def complete_explicit_habit(
    owner_id: str,
    habit: str,
    timestamp: datetime | None = None,
    bucket: date | None = None,
) -> PointsUpdateResult:
    """Meditation or microlearn finished."""
    return await points_engine.execute(
        owner_id, CompleteExplicitHabit(habit=habit), timestamp, bucket
    )


async def refresh_core_habit_state(
    owner_id: str,
    habit: str,
    is_active: bool,
    timestamp: datetime | None = None,
    bucket: date | None = None,
) -> PointsUpdateResult:
    """Mirror whether the user currently has an active reaction/comment in the bucket."""
    return await points_engine.execute(
        owner_id,
        RefreshCoreHabitState(habit=habit, is_active=is_active),
        timestamp,
        bucket,
    )


async def record_one_shot_action(
    owner_id: str,
    habit: str,
    timestamp: datetime | None = None,
    bucket: date | None = None,
) -> PointsUpdateResult:
    """Share or goal update (counts once per bucket)."""
    return await points_engine.execute(
        owner_id, RecordOneShotAction(habit=habit), timestamp, bucket
    )
