"""
Adaptive suggestion schemas.

A suggestion is an ephemeral coaching hint produced by the rule engine.
The ``recommendation`` payload is a tagged union keyed by ``action`` so
that each suggestion kind carries a known, validated set of fields.

Priority ordering (most urgent first):

- ``critical``: act before the next session
- ``high``: act this week
- ``medium``: worth a check-in
- ``low``: optimisation opportunity
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

SuggestionType = Literal[
    "progressive_overload",
    "deload_recommended",
    "readiness_adjustment",
    "compliance_alert",
    "volume_check",
    "recovery_needed",
]

SuggestionPriority = Literal["critical", "high", "medium", "low"]

ContextType = Literal["plan", "block", "week", "session", "exercise", "athlete"]

ActionTaken = Literal["accepted", "modified", "rejected", "pending"]

PRIORITY_RANK: dict[str, int] = {
    "critical": 0,
    "high": 1,
    "medium": 2,
    "low": 3,
}


# ---------------------------------------------------------------------------
# Recommendation payloads
# ---------------------------------------------------------------------------

class IncreaseWeight(BaseModel):
    action: Literal["increase_weight"] = "increase_weight"
    exercise_id: Optional[int] = None
    exercise_name: str
    current_weight: float
    suggested_weight: float
    rpe_basis: float = Field(..., description="RPE of the result the progression is based on")


class InsertDeload(BaseModel):
    action: Literal["insert_deload"] = "insert_deload"
    duration_days_min: int = 3
    duration_days_max: int = 5
    volume_reduction_pct: int = 40
    intensity_cap_pct: int = 70


class ReduceVolume(BaseModel):
    action: Literal["reduce_volume"] = "reduce_volume"
    acwr: float
    acute_load: int
    chronic_avg: int
    suggested_reduction_pct: int


class IncreaseVolume(BaseModel):
    action: Literal["increase_volume"] = "increase_volume"
    acwr: float
    suggested_increase_pct: int


class SwapToRecovery(BaseModel):
    action: Literal["swap_to_recovery"] = "swap_to_recovery"
    readiness_score: float
    suggested_session_type: str = "recovery"
    volume_reduction: int = 60
    intensity_cap: int = 50


class ReduceSession(BaseModel):
    action: Literal["reduce_session"] = "reduce_session"
    readiness_score: float
    volume_reduction: int
    intensity_cap: int


class SimplifyProgram(BaseModel):
    action: Literal["simplify_program"] = "simplify_program"
    compliance_rate: int = Field(..., ge=0, le=100, description="Percent of sessions completed")
    sessions_missed: int
    reduce_frequency: bool = True
    suggested_sessions_per_week: int = 3


class CheckIn(BaseModel):
    action: Literal["check_in"] = "check_in"
    compliance_rate: int = Field(..., ge=0, le=100)
    sessions_missed: int


Recommendation = Annotated[
    Union[
        IncreaseWeight,
        InsertDeload,
        ReduceVolume,
        IncreaseVolume,
        SwapToRecovery,
        ReduceSession,
        SimplifyProgram,
        CheckIn,
    ],
    Field(discriminator="action"),
]


# ---------------------------------------------------------------------------
# Suggestion
# ---------------------------------------------------------------------------

class Suggestion(BaseModel):
    """A single prioritised coaching suggestion."""

    type: SuggestionType
    priority: SuggestionPriority
    title: str
    description: str
    rationale: str
    recommendation: Recommendation
    confidence: int = Field(..., ge=0, le=100, description="Heuristic confidence, not a probability")
    context_type: ContextType
    context_id: Optional[int] = None

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self.priority]


class SuggestionReport(BaseModel):
    """Merged orchestrator output with per-classifier failure bookkeeping."""

    suggestions: list[Suggestion] = Field(default_factory=list)
    failed_classifiers: list[str] = Field(
        default_factory=list,
        description="Classifiers whose run raised and were treated as empty",
    )
    denied: bool = Field(
        False,
        description="True if per-athlete checks were rejected for lack of an active relationship",
    )


class SuggestionLogRequest(BaseModel):
    """Request body for recording what the coach did with a suggestion."""

    suggestion: Suggestion
    action_taken: ActionTaken = "pending"
    coach_notes: Optional[str] = Field(None, max_length=2000)
