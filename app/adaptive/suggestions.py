"""
Suggestion orchestrator: runs the classifiers for a coaching context.

Two entry points:

- :meth:`AdaptiveSuggestionService.get_suggestions_for_plan` runs the
  overload and deload checks, plus readiness and compliance when an
  athlete is given.
- :meth:`AdaptiveSuggestionService.get_suggestions_for_session` runs the
  readiness check and per-exercise progression for one upcoming session.

Each classifier fetches its own inputs and runs on a worker thread.  Its
outcome is wrapped in a :class:`ClassifierResult`; a failing classifier
contributes nothing and is logged, so callers always get a list.  A
missing coach-athlete relationship is not a silent failure: it is
logged at WARNING and flagged on the :class:`SuggestionReport`.
"""

from __future__ import annotations

import datetime
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from loguru import logger

from app.adaptive import classifiers
from app.adaptive.datasource import TrainingDataSource
from app.adaptive.errors import AthleteAccessDenied, ClassifierError
from app.adaptive.metrics import ACWR_MIN_WEEKS, rolling_weekly_volumes
from app.core.config import settings
from app.schemas.suggestion import ActionTaken, Suggestion, SuggestionReport

# Lookback sizes for the classifier fetches.
_DELOAD_RECENT_COMPLETIONS = 10
_PLAN_ASSIGNMENT_LIMIT = 20
_PLAN_COMPLETION_LIMIT = 5
_PROGRESSION_HISTORY = 3

_shared_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def _default_executor() -> ThreadPoolExecutor:
    global _shared_executor
    if _shared_executor is None:
        with _executor_lock:
            if _shared_executor is None:
                _shared_executor = ThreadPoolExecutor(
                    max_workers=max(settings.ADAPTIVE_MAX_WORKERS, 1),
                    thread_name_prefix="adaptive",
                )
    return _shared_executor


@dataclass
class ClassifierResult:
    """Outcome of a single classifier run: suggestions or an error."""

    name: str
    suggestions: list[Suggestion] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def denied(self) -> bool:
        return isinstance(self.error, AthleteAccessDenied)

    def unwrap_or_empty(self) -> list[Suggestion]:
        return self.suggestions if self.ok else []


def build_log_entry(
    coach_id: int,
    suggestion: Suggestion,
    action_taken: ActionTaken = "pending",
    notes: Optional[str] = None,
) -> dict[str, Any]:
    """Audit record for "suggestion shown → action taken"."""
    return {
        "coach_id": coach_id,
        "context_type": suggestion.context_type,
        "context_id": suggestion.context_id,
        "prompt_summary": f"[Tier 1 / Rules] {suggestion.type}: {suggestion.title}",
        "suggestion": suggestion.model_dump(
            mode="json",
            include={"type", "priority", "description", "rationale", "recommendation", "confidence"},
        ),
        "action_taken": action_taken,
        "coach_notes": notes,
    }


class AdaptiveSuggestionService:
    """Runs the rule classifiers against injected training data."""

    def __init__(
        self,
        data: TrainingDataSource,
        executor: Optional[ThreadPoolExecutor] = None,
        parallel: bool = True,
    ):
        self.data = data
        self.executor = executor or _default_executor()
        self.parallel = parallel

    def require_athlete_access(self, caller_id: int, athlete_id: int) -> None:
        """Callers may read their own data or that of an athlete they actively coach.

        Raises:
            AthleteAccessDenied: neither condition holds.
        """
        if caller_id != athlete_id and not self.data.has_active_relationship(caller_id, athlete_id):
            raise AthleteAccessDenied(caller_id, athlete_id)

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    def check_progressive_overload(self, plan_id: int) -> list[Suggestion]:
        completions = self.data.recent_plan_completions(
            plan_id, _PLAN_ASSIGNMENT_LIMIT, _PLAN_COMPLETION_LIMIT,
        )
        return classifiers.progressive_overload_suggestions(completions)

    def check_deload_needed(
        self,
        plan_id: int,
        athlete_id: Optional[int] = None,
        as_of: Optional[datetime.datetime] = None,
    ) -> list[Suggestion]:
        """RPE overreach streak, then ACWR spike / under-load."""
        ref = as_of or datetime.datetime.now(datetime.timezone.utc)
        suggestions: list[Suggestion] = []

        recent = self.data.recent_completions(athlete_id, _DELOAD_RECENT_COMPLETIONS)
        if len(recent) < classifiers.RPE_OVERREACH_WINDOW:
            return suggestions

        overreach = classifiers.rpe_overreach_suggestion(recent, plan_id)
        if overreach:
            suggestions.append(overreach)

        window_start = ref - datetime.timedelta(days=7 * ACWR_MIN_WEEKS)
        window = self.data.completions_between(window_start, ref, athlete_id)
        weekly = rolling_weekly_volumes(window, ref, ACWR_MIN_WEEKS)
        spike = classifiers.acwr_suggestion(weekly, plan_id)
        if spike:
            suggestions.append(spike)

        return suggestions

    def check_readiness_adjustment(
        self, athlete_id: int, today: Optional[datetime.date] = None,
    ) -> list[Suggestion]:
        day = today or datetime.date.today()
        entry = self.data.readiness_on(athlete_id, day)
        return classifiers.readiness_suggestions(entry, athlete_id)

    def check_compliance_alerts(
        self,
        plan_id: int,
        athlete_id: int,
        coach_id: Optional[int] = None,
        today: Optional[datetime.date] = None,
    ) -> list[Suggestion]:
        """Compliance alert for one athlete on one plan.

        Raises:
            AthleteAccessDenied: ``coach_id`` given without an active
                relationship to the athlete.
        """
        if coach_id is not None and not self.data.has_active_relationship(coach_id, athlete_id):
            raise AthleteAccessDenied(coach_id, athlete_id)

        day = today or datetime.date.today()
        assignments = self.data.assignments_for(plan_id, athlete_id)
        return classifiers.compliance_suggestions(assignments, athlete_id, day)

    def get_exercise_progression_suggestions(self, workout_id: int, athlete_id: int) -> list[Suggestion]:
        exercises = self.data.workout_exercises(workout_id)
        history = {
            ex.id: self.data.recent_exercise_results(ex.id, athlete_id, _PROGRESSION_HISTORY)
            for ex in exercises
        }
        return classifiers.exercise_progression_suggestions(exercises, history)

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def evaluate_plan(
        self,
        plan_id: int,
        coach_id: int,
        athlete_id: Optional[int] = None,
        as_of: Optional[datetime.datetime] = None,
        log_shown: bool = False,
    ) -> SuggestionReport:
        """Run every plan-level classifier and merge their outputs."""
        try:
            ref = as_of or datetime.datetime.now(datetime.timezone.utc)
            day = as_of.date() if as_of is not None else datetime.date.today()
            jobs: list[tuple[str, Callable[[], list[Suggestion]]]] = [
                ("progressive_overload", lambda: self.check_progressive_overload(plan_id)),
                ("deload", lambda: self.check_deload_needed(plan_id, athlete_id, ref)),
            ]
            if athlete_id is not None:
                jobs.append(("readiness", lambda: self.check_readiness_adjustment(athlete_id, day)))
                jobs.append(("compliance", lambda: self.check_compliance_alerts(
                    plan_id, athlete_id, coach_id, day,
                )))

            report = self._merge(self._run_all(jobs))
        except Exception:
            logger.exception(f"Error generating adaptive suggestions for plan {plan_id}")
            return SuggestionReport()

        if log_shown and report.suggestions:
            self.log_suggestions_async(coach_id, report.suggestions)
        return report

    def get_suggestions_for_plan(
        self,
        plan_id: int,
        coach_id: int,
        athlete_id: Optional[int] = None,
        as_of: Optional[datetime.datetime] = None,
    ) -> list[Suggestion]:
        return self.evaluate_plan(plan_id, coach_id, athlete_id, as_of).suggestions

    def get_suggestions_for_session(
        self,
        workout_id: int,
        athlete_id: int,
        today: Optional[datetime.date] = None,
    ) -> list[Suggestion]:
        try:
            jobs: list[tuple[str, Callable[[], list[Suggestion]]]] = [
                ("readiness", lambda: self.check_readiness_adjustment(athlete_id, today)),
                ("exercise_progression", lambda: self.get_exercise_progression_suggestions(workout_id, athlete_id)),
            ]
            return self._merge(self._run_all(jobs)).suggestions
        except Exception:
            logger.exception(f"Error generating session suggestions for workout {workout_id}")
            return []

    def _run_one(self, name: str, job: Callable[[], list[Suggestion]]) -> ClassifierResult:
        try:
            return ClassifierResult(name=name, suggestions=job())
        except AthleteAccessDenied as exc:
            logger.warning(f"[ADAPTIVE] {name} rejected: {exc}")
            return ClassifierResult(name=name, error=exc)
        except Exception as exc:
            logger.exception(f"[ADAPTIVE] {name} classifier failed")
            return ClassifierResult(name=name, error=ClassifierError(name, exc))

    def _run_all(self, jobs: list[tuple[str, Callable[[], list[Suggestion]]]]) -> list[ClassifierResult]:
        if not self.parallel or len(jobs) < 2:
            return [self._run_one(name, job) for name, job in jobs]

        futures = [self.executor.submit(self._run_one, name, job) for name, job in jobs]
        return [f.result() for f in futures]

    @staticmethod
    def _merge(results: list[ClassifierResult]) -> SuggestionReport:
        merged: list[Suggestion] = []
        for r in results:
            merged.extend(r.unwrap_or_empty())

        return SuggestionReport(
            suggestions=classifiers.sort_suggestions(merged),
            failed_classifiers=[r.name for r in results if not r.ok and not r.denied],
            denied=any(r.denied for r in results),
        )

    # ------------------------------------------------------------------
    # Audit log
    # ------------------------------------------------------------------

    def log_suggestion(
        self,
        coach_id: int,
        suggestion: Suggestion,
        action_taken: ActionTaken = "pending",
        notes: Optional[str] = None,
    ) -> None:
        """Append an audit record.  Failures are logged, never raised."""
        try:
            self.data.append_suggestion_log(build_log_entry(coach_id, suggestion, action_taken, notes))
        except Exception:
            logger.exception(f"Error logging suggestion '{suggestion.type}' for coach {coach_id}")

    def log_suggestions_async(
        self,
        coach_id: int,
        suggestions: list[Suggestion],
        action_taken: ActionTaken = "pending",
    ) -> Future:
        """Fire-and-forget audit writes; the returned future is never required."""

        def _write() -> None:
            for s in suggestions:
                self.log_suggestion(coach_id, s, action_taken)

        return self.executor.submit(_write)
