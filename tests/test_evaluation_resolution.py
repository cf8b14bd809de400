# /tests/test_evaluation_resolution.py

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from app.services.grading_helpers.evaluation_resolution import (
    find_evaluation_by_id, resolve_current_evaluation
)

BASE_TIME = datetime(2025, 3, 1, 9, 0, 0)


def _evaluation(eval_id, submission_id, minutes, is_published=False):
    return SimpleNamespace(
        id=eval_id,
        submission_id=submission_id,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        is_published=is_published,
    )


@pytest.fixture
def mock_evaluations():
    """An older published manual grade and a newer unpublished AI grade for sub_1."""
    return [
        _evaluation("eval_manual", "sub_1", minutes=0, is_published=True),
        _evaluation("eval_other", "sub_2", minutes=30, is_published=True),
        _evaluation("eval_ai", "sub_1", minutes=10, is_published=False),
    ]


def test_newest_evaluation_wins_for_faculty(mock_evaluations):
    current = resolve_current_evaluation(mock_evaluations, "sub_1")
    assert current.id == "eval_ai"


def test_student_view_skips_unpublished(mock_evaluations):
    """
    GIVEN: A newer unpublished evaluation and an older published one.
    WHEN:  The student-facing view is resolved.
    THEN:  The older published evaluation is shown.
    """
    current = resolve_current_evaluation(mock_evaluations, "sub_1", published_only=True)
    assert current.id == "eval_manual"


def test_no_matching_evaluation_returns_none(mock_evaluations):
    assert resolve_current_evaluation(mock_evaluations, "sub_missing") is None
    assert resolve_current_evaluation([], "sub_1") is None


def test_find_evaluation_by_id(mock_evaluations):
    assert find_evaluation_by_id(mock_evaluations, "eval_other").submission_id == "sub_2"
    assert find_evaluation_by_id(mock_evaluations, "eval_missing") is None
    assert find_evaluation_by_id(mock_evaluations, None) is None
