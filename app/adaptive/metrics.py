"""
Metric aggregator: weekly volume load and derived summaries.

Volume load (sets × reps × load) is the workload proxy used by every
rule in the adaptive engine.  This module turns completed sessions into
weekly buckets and derives the scalar summaries the classifiers and the
history digest consume.

Key design choices
------------------

1. **Never raise on dirty input**: reps are free text ("8", "8-10",
   "AMRAP"); anything that does not start with digits contributes 0.
   Missing sets, reps or load also contribute 0, never a default.
2. **ISO 8601 weeks**: Monday start, week 1 holds the first Thursday.
3. **Caller filters the window**: the aggregator assumes every session
   it receives is in range.  A window passed to :func:`weekly_volumes`
   only zero-fills weeks without sessions.
4. **ACWR needs history**: fewer than 4 weeks with recorded volume
   yields ``None``, not a ratio built on guesswork.
"""

from __future__ import annotations

import datetime
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional, Union

from app.schemas.history import ExerciseFrequency, VolumeTrend
from app.schemas.training import CompletedSession, ExerciseOutcome

# ======================================================================
# Constants
# ======================================================================

ACWR_MIN_WEEKS = 4
TOP_EXERCISES_LIMIT = 8

# Half-over-half change (percent) beyond which volume is trending.
_TREND_THRESHOLD_PCT = 10.0
_TREND_MIN_POINTS = 4

_LEADING_INT = re.compile(r"^\s*\+?(\d+)")

WeeklySeries = Union[Mapping[str, float], Sequence[float]]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves up: 2.5 -> 3, 7.25 -> 7.3 (``round()`` gives 2 and 7.2)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


# ======================================================================
# Volume load
# ======================================================================


def parse_reps(value: object) -> int:
    """Extract the leading integer of a free-text reps value.

    ``"10"`` → 10, ``"8-10"`` → 8, ``"AMRAP"`` → 0, ``None`` → 0.
    """
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return int(match.group(1))


def outcome_volume(outcome: ExerciseOutcome) -> float:
    """Volume load of a single exercise outcome (0 if any factor missing)."""
    sets = outcome.sets_completed or 0
    reps = parse_reps(outcome.reps_completed)
    load = outcome.weight_used_kg or 0.0
    if sets <= 0 or reps <= 0 or load <= 0:
        return 0.0
    return float(sets * reps * load)


def session_volume(session: CompletedSession) -> float:
    """Volume load of a whole session."""
    return sum(outcome_volume(r) for r in session.results)


# ======================================================================
# Weekly buckets
# ======================================================================


def iso_week_key(day: datetime.date) -> str:
    """ISO 8601 week key, e.g. ``2026-W03``."""
    if isinstance(day, datetime.datetime):
        day = day.date()
    iso_year, iso_week, _ = day.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def _iter_week_keys(start: datetime.date, end: datetime.date) -> Iterable[str]:
    monday = start - datetime.timedelta(days=start.weekday())
    while monday <= end:
        yield iso_week_key(monday)
        monday += datetime.timedelta(days=7)


def weekly_volumes(
    sessions: Iterable[CompletedSession],
    window_start: Optional[datetime.date] = None,
    window_end: Optional[datetime.date] = None,
) -> dict[str, float]:
    """Sum session volume per ISO week.

    Args:
        sessions: Completed sessions, already filtered to the window.
        window_start: Optional first day of the window.  When both
            bounds are given every week in the window is present,
            zero-filled if it has no sessions.
        window_end: Optional last day of the window.

    Returns:
        Week key → total volume load, in chronological order.
    """
    buckets: dict[str, float] = {}
    if window_start is not None and window_end is not None:
        for key in _iter_week_keys(window_start, window_end):
            buckets[key] = 0.0

    for s in sessions:
        key = iso_week_key(s.completed_at)
        buckets[key] = buckets.get(key, 0.0) + session_volume(s)

    return dict(sorted(buckets.items()))


def _as_utc_naive(moment: datetime.datetime) -> datetime.datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(datetime.timezone.utc).replace(tzinfo=None)


def rolling_weekly_volumes(
    sessions: Iterable[CompletedSession],
    as_of: datetime.datetime,
    weeks: int = ACWR_MIN_WEEKS,
) -> list[float]:
    """Volume in complete 7-day buckets ending at ``as_of``.

    Returns:
        ``weeks`` values, oldest first; the last value is the most
        recent full week (the acute load).
    """
    ref = _as_utc_naive(as_of)
    session_list = [(_as_utc_naive(s.completed_at), session_volume(s)) for s in sessions]

    volumes: list[float] = []
    for offset in range(weeks):
        end = ref - datetime.timedelta(days=7 * offset)
        start = end - datetime.timedelta(days=7)
        volumes.append(sum(v for at, v in session_list if start <= at < end))

    volumes.reverse()
    return volumes


def _series_values(weekly: WeeklySeries) -> list[float]:
    if isinstance(weekly, Mapping):
        return [float(v) for v in weekly.values()]
    return [float(v) for v in weekly]


# ======================================================================
# Derived summaries
# ======================================================================


def acwr(weekly: WeeklySeries) -> Optional[float]:
    """Acute:Chronic Workload Ratio.

    Acute is the most recent week; chronic is the mean of the last four
    weeks with non-zero volume.

    Returns:
        The ratio, or ``None`` if fewer than four weeks carry volume.
    """
    values = _series_values(weekly)
    loaded = [v for v in values if v > 0]
    if len(loaded) < ACWR_MIN_WEEKS:
        return None

    chronic = sum(loaded[-ACWR_MIN_WEEKS:]) / ACWR_MIN_WEEKS
    if chronic == 0:
        return None

    return values[-1] / chronic


def volume_trend(weekly: WeeklySeries) -> VolumeTrend:
    """Compare mean volume of the first and second half of the series.

    Fewer than four points is always ``stable`` (not enough data to
    claim a trend).
    """
    values = _series_values(weekly)
    if len(values) < _TREND_MIN_POINTS:
        return "stable"

    mid = len(values) // 2
    first = sum(values[:mid]) / mid
    second = sum(values[mid:]) / (len(values) - mid)
    change_pct = (second - first) / first * 100 if first > 0 else 0.0

    if change_pct > _TREND_THRESHOLD_PCT:
        return "increasing"
    if change_pct < -_TREND_THRESHOLD_PCT:
        return "decreasing"
    return "stable"


def _outcome_name(outcome: ExerciseOutcome) -> Optional[str]:
    if outcome.exercise_name:
        return outcome.exercise_name
    if outcome.prescribed is not None:
        return outcome.prescribed.name
    return None


def exercise_frequency(
    sessions: Iterable[CompletedSession],
    limit: int = TOP_EXERCISES_LIMIT,
) -> list[ExerciseFrequency]:
    """Most frequent exercises with their best load.

    Sorted by frequency descending; ties keep first-seen order.
    """
    seen: dict[str, list[float]] = {}  # name -> [count, best_load]
    for s in sessions:
        for r in s.results:
            name = _outcome_name(r)
            if not name:
                continue
            entry = seen.setdefault(name, [0, 0.0])
            entry[0] += 1
            load = r.weight_used_kg or 0.0
            if load > entry[1]:
                entry[1] = load

    ranked = sorted(seen.items(), key=lambda item: -item[1][0])
    return [
        ExerciseFrequency(name=name, frequency=int(count), best_load=best if best > 0 else None)
        for name, (count, best) in ranked[:limit]
    ]


def rounded_mean(values: Iterable[Optional[float]], digits: int = 1) -> Optional[float]:
    """Mean of the non-null values, rounded; ``None`` if there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round_half_up(sum(present) / len(present), digits)
