# /app/services/database_helpers/assignment_repository_sql.py

"""
This module contains the raw SQLAlchemy queries for the Assignment, Submission
and Evaluation tables. It is the only code that talks to those tables directly.

Every write commits immediately. A failed commit rolls the session back and is
surfaced as an `UpstreamError`, so callers never see a half-applied write or a
raw driver exception.
"""

from typing import List, Dict, Optional, Iterable
from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import UpstreamError
from app.db.models.assignment_models import Assignment, Submission, Evaluation
# Imported so the Assignment.template relationship can resolve its target.
from app.db.models.template_models import AssessmentTemplate


class AssignmentRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def _commit(self, context: str):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            print(f"ERROR committing {context}: {e}")
            raise UpstreamError(f"Database error while saving {context}: {e}")

    def _add(self, obj, context: str):
        self.db.add(obj)
        self._commit(context)
        self.db.refresh(obj)
        return obj

    # --- Assignment Methods ---

    def add_assignment(self, record: Dict) -> Assignment:
        return self._add(Assignment(**record), "assignment")

    def get_assignment(self, assignment_id: str) -> Optional[Assignment]:
        return self.db.query(Assignment).filter(Assignment.id == assignment_id).first()

    def get_all_assignments(self) -> List[Assignment]:
        """Retrieves all assignments, newest first."""
        return self.db.query(Assignment).order_by(Assignment.created_at.desc()).all()

    # --- Submission Methods ---

    def add_submission(self, record: Dict) -> Submission:
        return self._add(Submission(**record), "submission")

    def get_submission(self, submission_id: str) -> Optional[Submission]:
        return self.db.query(Submission).filter(Submission.id == submission_id).first()

    def get_submissions(self, assignment_id: Optional[str] = None) -> List[Submission]:
        """Retrieves submissions, optionally for one assignment, most recently submitted first."""
        query = self.db.query(Submission)
        if assignment_id:
            query = query.filter(Submission.assignment_id == assignment_id)
        return query.order_by(Submission.submission_date.desc()).all()

    def transition_submission_status(self, submission_id: str, from_statuses: Iterable[str], to_status: str) -> bool:
        """
        Atomically moves a submission to `to_status`, but only if its current
        status is one of `from_statuses`. This is a compare-and-set at the row
        level, so two concurrent callers cannot both win the same transition.

        Returns:
            True if the row was updated, False if the submission does not exist
            or was not in an allowed source status.
        """
        stmt = (
            update(Submission)
            .where(Submission.id == submission_id, Submission.status.in_(list(from_statuses)))
            .values(status=to_status)
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as e:
            self.db.rollback()
            print(f"ERROR updating status of submission {submission_id}: {e}")
            raise UpstreamError(f"Database error while updating submission status: {e}")
        self._commit("submission status")
        return result.rowcount == 1

    def set_current_evaluation(self, submission_id: str, evaluation_id: str):
        submission = self.get_submission(submission_id)
        if submission:
            submission.current_evaluation_id = evaluation_id
            self._commit("current evaluation pointer")

    # --- Evaluation Methods ---

    def add_evaluation(self, record: Dict) -> Evaluation:
        return self._add(Evaluation(**record), "evaluation")

    def get_evaluation(self, evaluation_id: str) -> Optional[Evaluation]:
        return self.db.query(Evaluation).filter(Evaluation.id == evaluation_id).first()

    def get_evaluations(self, submission_id: Optional[str] = None) -> List[Evaluation]:
        """Retrieves evaluations, optionally for one submission, newest first."""
        query = self.db.query(Evaluation)
        if submission_id:
            query = query.filter(Evaluation.submission_id == submission_id)
        return query.order_by(Evaluation.created_at.desc()).all()

    def publish_evaluation(self, evaluation_id: str) -> Optional[Evaluation]:
        """
        Marks an evaluation as visible to the student. Publishing an evaluation
        that is already published is a no-op.
        """
        evaluation = self.get_evaluation(evaluation_id)
        if not evaluation:
            return None
        if not evaluation.is_published:
            evaluation.is_published = True
            self._commit("evaluation publish flag")
            self.db.refresh(evaluation)
        return evaluation
