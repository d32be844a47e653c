"""Level curve: cumulative XP thresholds, level lookup and level titles."""

import math
from typing import Dict, Optional

from ..models.gamification import LevelInfo
from ..utils.numbers import coerce_number, round_half_up

CURVE_VERSION = "geometric-1000x1.15-v1"
BASE_XP = 1000
SCALING_FACTOR = 1.15

LEVEL_TITLES: Dict[int, str] = {
    1: "Pixel Sprite",
    5: "Arcade Warrior",
    10: "Retro Champion",
    15: "8-Bit Hero",
    20: "Console Master",
    25: "Digital Legend",
    30: "Virtual Champion",
    35: "Cyber Warrior",
    40: "Neon Knight",
    45: "Turbo Titan",
    50: "Quantum Hero",
    55: "Glitch Slayer",
    60: "Pixel Paladin",
    65: "Joystick Juggernaut",
    70: "Synthwave Sentinel",
    75: "Binary Overlord",
    80: "Mainframe Monarch",
    85: "Cartridge Conqueror",
    90: "High Score Immortal",
    95: "Final Boss",
    100: "Digital Deity",
}


def xp_required_for_level(level: int) -> float:
    """
    Calculate the cumulative XP required to reach a given level.

    Uses a geometric curve: XP = round(1000 * 1.15^(level - 1))
    Level 1: 0 XP (starting point)
    Level 2: 1150 XP
    Level 3: ~1322 XP
    Level 10: ~3518 XP

    Each threshold is at least 15% above the previous one, so the curve is
    strictly increasing from level 2 on.

    Args:
        level: The target level

    Returns:
        Total XP required to reach that level as an int, or math.inf once
        the threshold is beyond float range
    """
    if level <= 1:
        return 0
    try:
        return round_half_up(BASE_XP * SCALING_FACTOR ** (level - 1))
    except OverflowError:
        return math.inf


def _estimate_level(total_xp: float) -> int:
    """Closed-form inverse of the curve, used to seed the exact search."""
    if total_xp < xp_required_for_level(2):
        return 1
    estimate = 1 + math.log(total_xp / BASE_XP) / math.log(SCALING_FACTOR)
    return max(1, min(MAX_LEVEL, int(estimate)))


def _find_level(total_xp: float) -> int:
    level = _estimate_level(total_xp)
    # Float error in the logarithm can put the estimate one step off either way.
    while level > 1 and xp_required_for_level(level) > total_xp:
        level -= 1
    while level < MAX_LEVEL and xp_required_for_level(level + 1) <= total_xp:
        level += 1
    return level


def level_from_xp(total_xp: Optional[float]) -> LevelInfo:
    """
    Calculate level information from total XP.

    Args:
        total_xp: Total XP earned; missing, negative or NaN values count as 0

    Returns:
        LevelInfo with current level and progress
    """
    xp = coerce_number(total_xp)
    if xp is None:
        xp = float(MAX_LEVEL_XP) if total_xp == math.inf else 0.0
    xp = max(xp, 0.0)

    level = _find_level(xp)
    current_threshold = xp_required_for_level(level)

    if level >= MAX_LEVEL:
        return LevelInfo(
            level=MAX_LEVEL,
            title=title_for_level(MAX_LEVEL),
            current_level_xp=current_threshold,
            next_level_xp=current_threshold,
            xp_to_next=0,
            xp_in_level=xp - current_threshold,
            progress_percent=100.0,
        )

    next_threshold = xp_required_for_level(level + 1)
    xp_needed = next_threshold - current_threshold
    xp_in_level = xp - current_threshold
    progress = (xp_in_level / xp_needed * 100) if xp_needed > 0 else 0.0

    return LevelInfo(
        level=level,
        title=title_for_level(level),
        current_level_xp=current_threshold,
        next_level_xp=next_threshold,
        xp_to_next=next_threshold - xp,
        xp_in_level=xp_in_level,
        progress_percent=round(progress, 2),
    )


def title_for_level(level: int) -> str:
    """
    Get the title for a level.

    Milestone levels have their own title; levels in between keep the title
    of the nearest lower milestone.

    Args:
        level: User's level

    Returns:
        Title string, or "Level {n}" below the first milestone
    """
    for milestone in sorted(LEVEL_TITLES, reverse=True):
        if level >= milestone:
            return LEVEL_TITLES[milestone]
    return f"Level {level}"


def is_milestone(level: int) -> bool:
    return level in LEVEL_TITLES


def next_milestone(level: int) -> Optional[int]:
    """Next milestone level above ``level``, or None past the last one."""
    for milestone in sorted(LEVEL_TITLES):
        if milestone > level:
            return milestone
    return None


def _last_finite_level() -> int:
    """Highest level whose threshold is still a finite number."""
    high = 2
    while math.isfinite(xp_required_for_level(high)):
        high *= 2
    low = high // 2
    while high - low > 1:
        mid = (low + high) // 2
        if math.isfinite(xp_required_for_level(mid)):
            low = mid
        else:
            high = mid
    return low


MAX_LEVEL = _last_finite_level()
MAX_LEVEL_XP = xp_required_for_level(MAX_LEVEL)
