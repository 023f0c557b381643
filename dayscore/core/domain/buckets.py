"""
Day Bucket Rules - pure functions that map instants to day buckets.

A day bucket is a calendar date naming the 24h window that starts at the
cutoff hour (04:00 by default) in the reference timezone (Europe/London).
An instant before the cutoff belongs to the previous date's bucket:

- Mar 16, 02:00 London -> bucket Mar 15
- Mar 16, 05:00 London -> bucket Mar 16
- Mar 16, 23:00 London -> bucket Mar 16

AICODE-NOTE: Conversion goes through zoneinfo, never a fixed offset, so BST
transitions still yield exactly one bucket per instant.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dayscore.config import config
from dayscore.core.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BucketResolution:
    """Bucket for an instant, plus whether the timezone fallback was used."""

    bucket: date
    degraded: bool = False


@lru_cache(maxsize=16)
def _load_zone(tz_name: str) -> tzinfo | None:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(f"Reference timezone {tz_name!r} unavailable: {e}")
        return None


def _as_instant(timestamp: datetime) -> datetime:
    # Naive timestamps are UTC instants
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def _host_local_date(instant: datetime) -> date:
    try:
        return instant.astimezone().date()
    except (OverflowError, OSError, ValueError):
        return instant.date()


def resolve_bucket(
    timestamp: datetime | None = None,
    *,
    tz_name: str | None = None,
    cutoff_hour: int | None = None,
) -> BucketResolution:
    """
    Resolve the day bucket for an instant.

    If the reference timezone cannot be loaded or the conversion fails,
    falls back to the host-local calendar date without the cutoff shift
    and marks the result as degraded.

    Args:
        timestamp: Instant to resolve (default: now). Naive values are UTC.
        tz_name: Reference timezone (default: config.REFERENCE_TIMEZONE)
        cutoff_hour: First hour of a bucket (default: config.DAY_CUTOFF_HOUR)

    Returns:
        BucketResolution
    """
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)
    if tz_name is None:
        tz_name = config.REFERENCE_TIMEZONE
    if cutoff_hour is None:
        cutoff_hour = config.DAY_CUTOFF_HOUR

    instant = _as_instant(timestamp)
    zone = _load_zone(tz_name)

    try:
        if zone is None:
            raise ValueError(f"unknown timezone {tz_name!r}")
        local = instant.astimezone(zone)
    except (ValueError, OverflowError) as e:
        fallback = _host_local_date(instant)
        logger.warning(
            f"Bucket conversion failed for {timestamp!r}, using local date {fallback}: {e}"
        )
        return BucketResolution(bucket=fallback, degraded=True)

    if local.hour >= cutoff_hour:
        return BucketResolution(bucket=local.date())
    return BucketResolution(bucket=local.date() - timedelta(days=1))


def bucket_for(timestamp: datetime | None = None) -> date:
    """Day bucket for an instant (see resolve_bucket)."""
    return resolve_bucket(timestamp).bucket


def bucket_bounds(bucket: date) -> tuple[datetime, datetime]:
    """
    Start (inclusive) and end (exclusive) instants of a bucket.

    Used by collaborators that decide whether a reaction or comment row was
    created inside the bucket window.
    """
    zone = _load_zone(config.REFERENCE_TIMEZONE) or timezone.utc
    cutoff = time(hour=config.DAY_CUTOFF_HOUR)
    start = datetime.combine(bucket, cutoff, tzinfo=zone)
    end = datetime.combine(bucket + timedelta(days=1), cutoff, tzinfo=zone)
    return start, end


def is_in_current_bucket(timestamp: datetime, now: datetime | None = None) -> bool:
    """Check if an instant falls in the same bucket as now."""
    return bucket_for(timestamp) == bucket_for(now)


def time_until_next_bucket(now: datetime | None = None) -> timedelta:
    """Time left until the next bucket starts."""
    now = _as_instant(now or datetime.now(timezone.utc))
    _, end = bucket_bounds(bucket_for(now))
    return end - now


def day_number(first_bucket: date, bucket: date) -> int:
    """1-based day of a user's journey (first bucket is day 1)."""
    return (bucket - first_bucket).days + 1


def parse_bucket(value: date | str) -> date:
    """
    Parse a bucket from a date or an ISO 'YYYY-MM-DD' string.

    Raises:
        ValidationError: value is not a calendar date
    """
    if isinstance(value, datetime):
        raise ValidationError(
            "Bucket must be a calendar date, not a timestamp",
            details={"value": value.isoformat()},
        )
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Invalid bucket {value!r}, expected YYYY-MM-DD",
            details={"value": str(value)},
        ) from e
