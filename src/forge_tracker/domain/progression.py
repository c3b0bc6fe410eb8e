"""
Pure function progression engine for Forge XP and levels.

This module converts invested seconds into XP, XP into levels along an
exponential cost curve, and XP into fractional progress toward the next level.
Every function is stateless and deterministic; negative inputs are clamped to
zero before any computation.
"""

from dataclasses import dataclass
from typing import Iterable

from .models import Domain

BASE_LEVEL_XP = 30
SECONDS_PER_XP = 60


@dataclass(frozen=True)
class ProgressionSnapshot:
    """XP, level and progress derived from a number of seconds."""

    xp: int
    level: int
    progress: float


def xp_for_seconds(seconds: int) -> int:
    """One XP per full minute invested."""
    return max(0, int(seconds)) // SECONDS_PER_XP


def total_xp(domains: Iterable[Domain]) -> int:
    """
    XP across all domains.

    Seconds are summed before converting, so partial minutes in different
    domains still add up to whole XP.
    """
    return xp_for_seconds(sum(max(0, domain.total_seconds) for domain in domains))


def xp_required_for_level(level: int) -> int:
    """
    XP needed to advance from ``level - 1`` to ``level``.

    Level 1 is the starting level and costs nothing. From level 2 onward the
    cost doubles each level: 30, 60, 120, ...
    """
    if level <= 1:
        return 0
    return BASE_LEVEL_XP * 2 ** (level - 2)


def cumulative_xp_for_level(level: int) -> int:
    """Total XP needed to reach ``level`` from zero."""
    return sum(xp_required_for_level(current) for current in range(2, level + 1))


def level_for_xp(xp: int) -> int:
    """
    Highest level whose cumulative cost does not exceed ``xp``.

    Args:
        xp: Experience points, negative values are treated as zero

    Returns:
        Level, always >= 1
    """
    remaining = max(0, int(xp))
    level = 1
    while remaining >= xp_required_for_level(level + 1):
        remaining -= xp_required_for_level(level + 1)
        level += 1
    return level


def progress_to_next_level(xp: int) -> float:
    """
    Fraction of the way from the current level threshold to the next one.

    Args:
        xp: Experience points, negative values are treated as zero

    Returns:
        Progress in [0.0, 1.0]; 0.0 exactly at a level-up
    """
    xp = max(0, int(xp))
    level = level_for_xp(xp)
    required = xp_required_for_level(level + 1)
    if required == 0:
        return 0.0

    used = xp - cumulative_xp_for_level(level)
    return min(1.0, max(0.0, used / required))


def snapshot_for_xp(xp: int) -> ProgressionSnapshot:
    xp = max(0, int(xp))
    return ProgressionSnapshot(
        xp=xp, level=level_for_xp(xp), progress=progress_to_next_level(xp)
    )


def snapshot_for_seconds(seconds: int) -> ProgressionSnapshot:
    """Progression of a single domain with ``seconds`` invested."""
    return snapshot_for_xp(xp_for_seconds(seconds))


def snapshot_for_domains(domains: Iterable[Domain]) -> ProgressionSnapshot:
    """Overall progression across every domain."""
    return snapshot_for_xp(total_xp(domains))


def format_duration(seconds: int) -> str:
    """Format seconds as zero-padded ``HH:MM:SS``."""
    seconds = max(0, int(seconds))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    remaining_seconds = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{remaining_seconds:02d}"
