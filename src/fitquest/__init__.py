"""
FitQuest gamification engine.

Turns exercise and food log events into XP, levels, streak bonuses,
personal-best records and time-windowed per-muscle training load.
"""

from .config import Settings, get_settings
from .exceptions import FitQuestError
from .scoring.leveling import CURVE_VERSION, level_from_xp, title_for_level, xp_required_for_level
from .services.progress import ProgressService

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "FitQuestError",
    "CURVE_VERSION",
    "level_from_xp",
    "title_for_level",
    "xp_required_for_level",
    "ProgressService",
]
