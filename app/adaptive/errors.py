"""Error types for the adaptive engine."""


class AdaptiveError(Exception):
    """Base exception for adaptive engine errors."""

    pass


class AthleteAccessDenied(AdaptiveError):
    """Raised when a coach has no active relationship with the athlete.

    Attributes:
        coach_id: Coach requesting the data
        athlete_id: Athlete the data belongs to
    """

    def __init__(self, coach_id: int, athlete_id: int) -> None:
        self.coach_id = coach_id
        self.athlete_id = athlete_id
        super().__init__(f"No active coach-athlete relationship (coach={coach_id}, athlete={athlete_id})")


class ClassifierError(AdaptiveError):
    """Raised when a classifier run fails.

    Attributes:
        classifier: Classifier name that failed
        original_error: Original exception that caused the failure
    """

    def __init__(self, classifier: str, original_error: Exception) -> None:
        self.classifier = classifier
        self.original_error = original_error
        super().__init__(f"Classifier '{classifier}' failed: {original_error}")
