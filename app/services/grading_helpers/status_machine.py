# /app/services/grading_helpers/status_machine.py

"""
The submission lifecycle.

    submitted ──> evaluating ──> graded
        │             │            ^
        │             v            │
        │     evaluation_failed ───┤
        │             │            │
        │             └─> evaluating (retry)
        └──────────────────────────┘  (manual grade)

`graded` is terminal and nothing ever moves back to `submitted`.
"""

from typing import Set, List

from ...models.assignment_model import SubmissionStatus

ALLOWED_TRANSITIONS = {
    SubmissionStatus.SUBMITTED: {SubmissionStatus.EVALUATING, SubmissionStatus.GRADED},
    SubmissionStatus.EVALUATING: {SubmissionStatus.GRADED, SubmissionStatus.EVALUATION_FAILED},
    SubmissionStatus.EVALUATION_FAILED: {SubmissionStatus.EVALUATING, SubmissionStatus.GRADED},
    SubmissionStatus.GRADED: set(),
}


def allowed_targets(current: str) -> Set[SubmissionStatus]:
    return ALLOWED_TRANSITIONS.get(SubmissionStatus(current), set())


def can_transition(current: str, target: str) -> bool:
    return SubmissionStatus(target) in allowed_targets(current)


def sources_for(target: str) -> List[str]:
    """Every status from which `target` may be entered, as plain strings for a SQL `IN`."""
    target_status = SubmissionStatus(target)
    return sorted(s.value for s, targets in ALLOWED_TRANSITIONS.items() if target_status in targets)
