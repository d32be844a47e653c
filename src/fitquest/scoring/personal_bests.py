"""Personal-best tracking across rolling windows.

For every exercise the profile keeps the best value seen in four windows:
the trailing ~30 days (``current``), ~90 days (``quarter``), ~365 days
(``year``) and all time. The representative value of a logged entry depends
on what was recorded:

- duration only -> ``duration`` (minutes, higher is better)
- duration and distance -> ``pace`` (duration / distance, lower is better)
- reps only -> ``reps``
- weight and reps -> ``1rm`` via the Epley formula, or the weight itself for
  a single rep

Bonuses are computed against the records as they were before the entry was
folded in, so a new all-time best also collects the shorter-window bonuses.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..config import Settings, get_settings
from ..models.gamification import (
    ExercisePersonalBests,
    PersonalBestRecord,
    PersonalBestType,
    PersonalBestWindow,
)
from ..models.logs import WorkoutLogEntry
from ..utils.timeutils import align_to_reference

logger = logging.getLogger(__name__)

# Type chosen for an exercise that has no records yet, when an entry mixes types.
_TYPE_PRIORITY: List[PersonalBestType] = [
    PersonalBestType.ONE_REP_MAX,
    PersonalBestType.REPS,
    PersonalBestType.PACE,
    PersonalBestType.DURATION,
]


@dataclass(frozen=True)
class ExerciseValue:
    """Representative measurement of one set or entry."""
    value: float
    type: PersonalBestType
    unit: str

    def beats(self, other: "ExerciseValue") -> bool:
        if self.type.lower_is_better:
            return self.value < other.value
        return self.value > other.value


def epley_one_rep_max(weight: float, reps: float) -> float:
    """Estimated one-rep max: weight * (1 + reps / 30), or weight for one rep."""
    if reps == 1:
        return weight
    return weight * (1 + reps / 30)


def exercise_value(
    weight: Optional[float] = None,
    reps: Optional[float] = None,
    duration: Optional[float] = None,
    distance: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> Optional[ExerciseValue]:
    """Derive the measurement for a set or a duration-based entry.

    Returns None when nothing usable was recorded (for example a weight with
    no reps).
    """
    settings = settings or get_settings()
    has_weight = bool(weight) and weight > 0
    has_reps = bool(reps) and reps > 0

    if not has_weight and not has_reps:
        if duration and duration > 0:
            if distance and distance > 0:
                return ExerciseValue(duration / distance, PersonalBestType.PACE, "min/unit")
            return ExerciseValue(duration, PersonalBestType.DURATION, "minutes")
        return None

    if has_reps and not has_weight:
        return ExerciseValue(reps, PersonalBestType.REPS, "reps")

    if has_weight and has_reps:
        return ExerciseValue(
            epley_one_rep_max(weight, reps),
            PersonalBestType.ONE_REP_MAX,
            settings.weight_unit,
        )

    return None


def _entry_candidates(entry: WorkoutLogEntry, settings: Settings) -> List[ExerciseValue]:
    candidates = []
    for set_entry in entry.sets:
        value = exercise_value(set_entry.weight, set_entry.reps, settings=settings)
        if value is not None:
            candidates.append(value)
    if not candidates:
        value = exercise_value(duration=entry.duration, distance=entry.distance, settings=settings)
        if value is not None:
            candidates.append(value)
    return candidates


def best_entry_value(
    entry: WorkoutLogEntry,
    established_type: Optional[PersonalBestType] = None,
    settings: Optional[Settings] = None,
) -> Optional[ExerciseValue]:
    """Pick the best measurement within a single logged entry.

    Args:
        entry: The just-logged workout entry
        established_type: Type already recorded for this exercise, if any;
            only candidates of that type are considered
        settings: Scoring settings

    Returns:
        Best ExerciseValue, or None if the entry has nothing comparable
    """
    settings = settings or get_settings()
    candidates = _entry_candidates(entry, settings)

    if established_type is not None:
        candidates = [c for c in candidates if c.type is established_type]
    else:
        for pb_type in _TYPE_PRIORITY:
            typed = [c for c in candidates if c.type is pb_type]
            if typed:
                candidates = typed
                break

    best: Optional[ExerciseValue] = None
    for candidate in candidates:
        if best is None or candidate.beats(best):
            best = candidate
    return best


def window_span(window: PersonalBestWindow, settings: Settings) -> Optional[timedelta]:
    """Length of a window; None for all-time."""
    days = settings.personal_best_window_days.get(PersonalBestWindow(window).value)
    return timedelta(days=days) if days is not None else None


def _live_record(
    bests: ExercisePersonalBests,
    window: PersonalBestWindow,
    now: datetime,
    settings: Settings,
) -> Optional[PersonalBestRecord]:
    """Record for a window, or None once it has aged out of the window."""
    record = bests.get(window)
    if record is None:
        return None
    span = window_span(window, settings)
    if span is not None and align_to_reference(record.date, now) < now - span:
        return None
    return record


def _measure(
    bests: ExercisePersonalBests,
    entry: WorkoutLogEntry,
    exercise_id: str,
    settings: Settings,
) -> Optional[ExerciseValue]:
    established = bests.established_type
    value = best_entry_value(entry, established, settings)
    if value is None and established is not None and _entry_candidates(entry, settings):
        logger.debug(
            "Entry for %s does not match its established %s records; skipping",
            exercise_id,
            established.value,
        )
    return value


def calculate_personal_best_bonus(
    personal_bests: Mapping[str, ExercisePersonalBests],
    exercise_id: str,
    entry: WorkoutLogEntry,
    now: datetime,
    settings: Optional[Settings] = None,
) -> int:
    """
    Bonus XP for beating existing personal bests.

    Each window whose live record is beaten adds its bonus (current +50,
    quarter +150, year +200, all-time +300 by default). Windows without a
    record award nothing, so a first-ever entry earns no bonus.

    Args:
        personal_bests: Records keyed by exercise id, before this entry
        exercise_id: Exercise being logged
        entry: The just-logged entry
        now: Reference time for window expiry
        settings: Scoring settings

    Returns:
        Total bonus XP
    """
    settings = settings or get_settings()
    bests = personal_bests.get(exercise_id)
    if bests is None:
        return 0

    value = _measure(bests, entry, exercise_id, settings)
    if value is None:
        return 0

    bonus = 0
    for window in PersonalBestWindow:
        record = _live_record(bests, window, now, settings)
        if record is not None and record.is_beaten_by(value.value):
            bonus += settings.personal_best_bonuses.get(window.value, 0)
    return bonus


def update_personal_bests(
    personal_bests: Mapping[str, ExercisePersonalBests],
    exercise_id: str,
    entry: WorkoutLogEntry,
    now: datetime,
    settings: Optional[Settings] = None,
) -> Dict[str, ExercisePersonalBests]:
    """
    Fold a logged entry into the personal-best records.

    A window's record is replaced when it is missing, has aged out of the
    window, or is beaten by the entry's value. The input mapping is not
    modified.

    Returns:
        New mapping of records keyed by exercise id
    """
    settings = settings or get_settings()
    updated = dict(personal_bests)
    bests = personal_bests.get(exercise_id) or ExercisePersonalBests()

    value = _measure(bests, entry, exercise_id, settings)
    if value is None:
        return updated

    new_record = PersonalBestRecord(value=value.value, type=value.type, unit=value.unit, date=now)
    changes = {}
    for window in PersonalBestWindow:
        record = _live_record(bests, window, now, settings)
        if record is None or record.is_beaten_by(value.value):
            changes[window.value] = new_record

    if changes:
        updated[exercise_id] = bests.model_copy(update=changes)
    return updated


def apply_personal_best(
    personal_bests: Mapping[str, ExercisePersonalBests],
    exercise_id: str,
    entry: WorkoutLogEntry,
    now: datetime,
    settings: Optional[Settings] = None,
) -> Tuple[Dict[str, ExercisePersonalBests], int]:
    """Compute the bonus against the old records, then update them."""
    bonus = calculate_personal_best_bonus(personal_bests, exercise_id, entry, now, settings)
    return update_personal_bests(personal_bests, exercise_id, entry, now, settings), bonus


def rebuild_personal_bests(
    logs: Iterable[WorkoutLogEntry],
    now: datetime,
    settings: Optional[Settings] = None,
) -> Dict[str, ExercisePersonalBests]:
    """Rebuild every exercise's records from a log history.

    An exercise's type is fixed by its earliest measurable entry. Each
    window then holds the best value among the entries inside it relative
    to ``now``; on ties the earlier entry keeps the record.
    """
    settings = settings or get_settings()
    values: Dict[str, List[Tuple[datetime, ExerciseValue]]] = {}
    established: Dict[str, PersonalBestType] = {}

    for entry in sorted(logs, key=lambda log: align_to_reference(log.timestamp, now)):
        value = best_entry_value(entry, established.get(entry.exercise_id), settings)
        if value is None:
            continue
        established.setdefault(entry.exercise_id, value.type)
        values.setdefault(entry.exercise_id, []).append((entry.timestamp, value))

    result: Dict[str, ExercisePersonalBests] = {}
    for exercise_id, measured in values.items():
        records = {}
        for window in PersonalBestWindow:
            span = window_span(window, settings)
            best: Optional[Tuple[datetime, ExerciseValue]] = None
            for timestamp, value in measured:
                if span is not None and align_to_reference(timestamp, now) < now - span:
                    continue
                if best is None or value.beats(best[1]):
                    best = (timestamp, value)
            if best is not None:
                timestamp, value = best
                records[window.value] = PersonalBestRecord(
                    value=value.value, type=value.type, unit=value.unit, date=timestamp
                )
        result[exercise_id] = ExercisePersonalBests(**records)
    return result
