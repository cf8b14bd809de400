# /app/services/grading_helpers/evaluation_resolution.py

from typing import Iterable, Optional


def resolve_current_evaluation(evaluations: Iterable, submission_id: str, published_only: bool = False):
    """
    Picks the evaluation to show for a submission.

    Evaluations are scanned newest first; the first one belonging to the
    submission wins. For student-facing views pass `published_only=True` so
    that unpublished attempts are skipped. This means a fresh unpublished AI
    evaluation hides an older published manual one in the faculty view, but
    not in the student view.
    """
    newest_first = sorted(evaluations, key=lambda e: e.created_at, reverse=True)
    for evaluation in newest_first:
        if evaluation.submission_id != submission_id:
            continue
        if published_only and not evaluation.is_published:
            continue
        return evaluation
    return None


def find_evaluation_by_id(evaluations: Iterable, evaluation_id: Optional[str]):
    if not evaluation_id:
        return None
    return next((e for e in evaluations if e.id == evaluation_id), None)
