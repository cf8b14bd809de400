# /app/core/exceptions.py

"""
The error taxonomy for the grading backend.

Every domain error derives from `GradingError` and carries the HTTP status the
API layer should answer with. Validation-style errors also derive from
`ValueError` so that callers written against plain `ValueError` keep working.
"""

from fastapi import status


class GradingError(Exception):
    """Base class for all expected, user-reportable failures."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GradingValidationError(GradingError, ValueError):
    """Input was rejected before any network or database call was made."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class ScoreOutOfRangeError(GradingValidationError):
    """A score fell outside the closed range [0, max_score]."""

    def __init__(self, score: float, max_score: int):
        super().__init__(f"Score {score} is outside the allowed range 0-{max_score}.")
        self.score = score
        self.max_score = max_score


class RecordNotFoundError(GradingError, LookupError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStatusTransitionError(GradingError, ValueError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current_status: str, target_status: str, message: str = ""):
        super().__init__(message or f"Submission cannot move from '{current_status}' to '{target_status}'.")
        self.current_status = current_status
        self.target_status = target_status


class EvaluationInProgressError(InvalidStatusTransitionError):
    """Raised when a second AI evaluation is started for a submission that is already being evaluated."""

    def __init__(self, submission_id: str):
        super().__init__(
            "evaluating", "evaluating",
            f"Submission {submission_id} is already being evaluated."
        )
        self.submission_id = submission_id


class UnsupportedFormatError(GradingError, ValueError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE


class UpstreamError(GradingError, RuntimeError):
    """Object storage, database or AI provider failed."""
    status_code = status.HTTP_502_BAD_GATEWAY


class FetchError(UpstreamError):
    """A submission file could not be downloaded."""


class ConfigurationError(GradingError, RuntimeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class TemplateAlreadyPromotedError(GradingError, ValueError):
    """A template can back at most one assignment."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, template_id: str, assignment_id: str):
        super().__init__(f"Template {template_id} was already promoted to assignment {assignment_id}.")
        self.template_id = template_id
        self.assignment_id = assignment_id
