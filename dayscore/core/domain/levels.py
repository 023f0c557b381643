"""
Level Rules - pure functions for level and progress bar.

AICODE-NOTE: Callers must pass the live cumulative total (sum over all
DailyPoints rows), never the advisory PointsTotalCache value.

Ladder:
- Level 1: 0-3999
- Level 2: 4000-7999
- Level 3: 8000-11999
- Level 4: 12000+ (max)
"""

from dataclasses import dataclass

POINTS_PER_LEVEL = 4000
MAX_LEVEL = 4
POINTS_PER_SEGMENT = 200
MAX_SEGMENTS = 20


@dataclass(frozen=True)
class LevelProgress:
    """Level and progress within it."""

    total_points: int
    level: int
    next_level: int
    points_into_level: int
    points_to_next: int
    segments_filled: int
    max_segments: int = MAX_SEGMENTS


def calculate_level(total_points: int) -> int:
    """Level for a cumulative total (1-based, capped at MAX_LEVEL)."""
    total_points = max(0, total_points)
    return min(total_points // POINTS_PER_LEVEL + 1, MAX_LEVEL)


def level_start(level: int) -> int:
    """Points at which a level starts."""
    return (level - 1) * POINTS_PER_LEVEL


def level_for(total_points: int) -> LevelProgress:
    """
    Level progress for a cumulative total.

    At the max level the progress bar saturates at MAX_SEGMENTS instead of
    overflowing, and there is nothing left to the next level.
    """
    total_points = max(0, total_points)
    level = calculate_level(total_points)
    points_into_level = total_points - level_start(level)
    is_max = level >= MAX_LEVEL

    return LevelProgress(
        total_points=total_points,
        level=level,
        next_level=level if is_max else level + 1,
        points_into_level=points_into_level,
        points_to_next=0 if is_max else POINTS_PER_LEVEL - points_into_level,
        segments_filled=min(points_into_level // POINTS_PER_SEGMENT, MAX_SEGMENTS),
    )
