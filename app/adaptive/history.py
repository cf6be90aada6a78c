"""
Athlete history summarizer.

Builds a compact picture of an athlete's recent training for downstream
text generation: a structured :class:`AthleteHistorySummary` and the
same data flattened into ``context_text``, one labelled line per metric.

Windows
-------

- Sessions: configurable lookback, ``HISTORY_WEEKS_DEFAULT`` weeks.
- Readiness: fixed 14 days (recent trend only).

Flags are raised for ACWR > 1.3, 0 < ACWR < 0.8, average RPE ≥ 8.5,
average readiness ≤ 4, a decreasing volume trend and average soreness
≥ 3.5/5.
"""

from __future__ import annotations

import datetime
from typing import Optional

from loguru import logger

from app.adaptive.classifiers import ACWR_HIGH_RISK, ACWR_LOW_RISK
from app.adaptive.datasource import TrainingDataSource
from app.adaptive.errors import AthleteAccessDenied
from app.adaptive.metrics import (
    acwr,
    exercise_frequency,
    round_half_up,
    rounded_mean,
    volume_trend,
    weekly_volumes,
)
from app.core.config import settings
from app.schemas.history import AthleteHistorySummary, ExerciseFrequency

READINESS_TREND_DAYS = 14

HIGH_RPE_FLAG = 8.5
LOW_READINESS_FLAG = 4.0
HIGH_SORENESS_FLAG = 3.5

_CONTEXT_TOP_EXERCISES = 5


def _fmt(value: float) -> str:
    return f"{value:g}"


def build_flags(
    acwr_value: Optional[float],
    avg_session_rpe: Optional[float],
    avg_readiness: Optional[float],
    trend: str,
    avg_soreness: Optional[float],
) -> list[str]:
    """Qualitative overtraining / detraining flags."""
    flags: list[str] = []
    if acwr_value is not None and acwr_value > ACWR_HIGH_RISK:
        flags.append(f"High ACWR ({_fmt(acwr_value)}) — injury risk")
    if acwr_value is not None and 0 < acwr_value < ACWR_LOW_RISK:
        flags.append(f"Low ACWR ({_fmt(acwr_value)}) — possible detraining")
    if avg_session_rpe is not None and avg_session_rpe >= HIGH_RPE_FLAG:
        flags.append(f"High avg RPE ({_fmt(avg_session_rpe)}) — possible overreaching")
    if avg_readiness is not None and avg_readiness <= LOW_READINESS_FLAG:
        flags.append(f"Low readiness trend ({_fmt(avg_readiness)}/10)")
    if trend == "decreasing":
        flags.append("Volume trend: decreasing")
    if avg_soreness is not None and avg_soreness >= HIGH_SORENESS_FLAG:
        flags.append(f"Elevated soreness (avg {avg_soreness:.1f}/5)")
    return flags


def build_context_text(
    display_name: str,
    level: Optional[str],
    injuries: Optional[str],
    weeks_analyzed: int,
    avg_weekly_volume: int,
    trend: str,
    avg_session_rpe: Optional[float],
    avg_readiness: Optional[float],
    acwr_value: Optional[float],
    top_exercises: list[ExerciseFrequency],
    flags: list[str],
) -> str:
    """Flatten the summary into labelled lines.

    Order is fixed: identity, level, injury notes, data span, volume,
    RPE, readiness, ACWR, top exercises, flags.  Lines with no value are
    omitted.
    """
    lines = [f"Athlete: {display_name}"]

    if level:
        lines.append(f"Level: {level}")
    if injuries:
        lines.append(f"Injuries/Notes: {injuries}")
    lines.append(f"Training data: {weeks_analyzed} weeks analyzed")
    lines.append(f"Avg weekly volume: {avg_weekly_volume / 1000:.1f} tonnes ({trend})")
    if avg_session_rpe is not None:
        lines.append(f"Avg session RPE: {_fmt(avg_session_rpe)}/10")
    if avg_readiness is not None:
        lines.append(f"Recent readiness: {_fmt(avg_readiness)}/10")
    if acwr_value is not None:
        lines.append(f"ACWR: {_fmt(acwr_value)}")

    if top_exercises:
        names = ", ".join(
            f"{e.name} (best: {_fmt(e.best_load)}kg)" if e.best_load else e.name
            for e in top_exercises[:_CONTEXT_TOP_EXERCISES]
        )
        lines.append(f"Top exercises: {names}")

    if flags:
        lines.append(f"⚠ Flags: {'; '.join(flags)}")

    return "\n".join(lines)


class AthleteHistoryService:
    """Summarises an athlete's recent training history."""

    def __init__(self, data: TrainingDataSource):
        self.data = data

    def get_athlete_summary(
        self,
        athlete_id: int,
        coach_id: Optional[int] = None,
        weeks_back: Optional[int] = None,
        as_of: Optional[datetime.datetime] = None,
    ) -> AthleteHistorySummary:
        """Compute the summary over the last ``weeks_back`` weeks.

        Args:
            athlete_id: Athlete to summarise.
            coach_id: Requesting coach.  When given, an active
                coach-athlete relationship is required.
            weeks_back: Session lookback in weeks.
            as_of: Reference moment (defaults to now, UTC).

        Raises:
            AthleteAccessDenied: ``coach_id`` given without an active
                relationship to the athlete.
        """
        if coach_id is not None and not self.data.has_active_relationship(coach_id, athlete_id):
            logger.warning(f"[HISTORY] coach {coach_id} denied history for athlete {athlete_id}")
            raise AthleteAccessDenied(coach_id, athlete_id)

        weeks = weeks_back or settings.HISTORY_WEEKS_DEFAULT
        ref = as_of or datetime.datetime.now(datetime.timezone.utc)
        start = ref - datetime.timedelta(days=weeks * 7)
        day = as_of.date() if as_of is not None else datetime.date.today()

        profile = self.data.athlete_profile(athlete_id)
        completions = self.data.completions_between(start, ref, athlete_id)
        readiness_logs = self.data.readiness_between(
            athlete_id, day - datetime.timedelta(days=READINESS_TREND_DAYS), day,
        )

        # --- Volume ---
        weekly = weekly_volumes(completions)
        week_values = list(weekly.values())
        total_volume = sum(week_values)
        avg_weekly = int(round_half_up(total_volume / len(week_values))) if week_values else 0
        trend = volume_trend(weekly)

        # --- RPE / readiness ---
        avg_rpe = rounded_mean(c.overall_rpe for c in completions)
        avg_readiness = rounded_mean(r.subjective_score for r in readiness_logs)
        # Days without a soreness rating count as 0.
        soreness_total = sum(r.muscle_soreness or 0 for r in readiness_logs)
        avg_soreness = round_half_up(soreness_total / len(readiness_logs), 2) if readiness_logs else 0.0

        # --- Load ratio ---
        ratio = acwr(weekly)
        acwr_value = round_half_up(ratio, 2) if ratio is not None else None

        top = exercise_frequency(completions)
        flags = build_flags(acwr_value, avg_rpe, avg_readiness, trend, avg_soreness)

        display_name = profile.display_name if profile and profile.display_name else None
        level = profile.competition_level if profile else None
        injuries = profile.injury_notes if profile else None

        context_text = build_context_text(
            display_name=display_name or "Athlete",
            level=level,
            injuries=injuries,
            weeks_analyzed=len(week_values),
            avg_weekly_volume=avg_weekly,
            trend=trend,
            avg_session_rpe=avg_rpe,
            avg_readiness=avg_readiness,
            acwr_value=acwr_value,
            top_exercises=top,
            flags=flags,
        )

        logger.debug(f"[HISTORY] athlete {athlete_id}: {len(completions)} sessions, {len(week_values)} weeks")

        return AthleteHistorySummary(
            athlete_id=athlete_id,
            display_name=display_name or "Unknown",
            level=level,
            weeks_analyzed=len(week_values),
            total_volume_load=int(round_half_up(total_volume)),
            avg_weekly_volume=avg_weekly,
            volume_trend=trend,
            avg_session_rpe=avg_rpe,
            avg_readiness=avg_readiness,
            top_exercises=top,
            acwr=acwr_value,
            flags=flags,
            context_text=context_text,
        )
