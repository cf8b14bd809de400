# /app/services/grading_service.py

"""
This module defines the GradingService, the high-level orchestrator for the
evaluation pipeline: a submitted file is extracted to text, scored by the
language model, persisted as an Evaluation and finally published to the
student.

Every step runs sequentially. The submission's status is the only
coordination point between concurrent requests: entering `evaluating` is an
atomic compare-and-set, so two AI evaluations of the same submission can never
run at once, and any failure after that point moves the submission to
`evaluation_failed` so it can be retried.
"""

import math
import uuid
from typing import Dict, List, Optional, Tuple

from fastapi import Depends

from app.core.exceptions import (
    EvaluationInProgressError, GradingValidationError, InvalidStatusTransitionError,
    RecordNotFoundError, ScoreOutOfRangeError,
)
from ..models.assignment_model import (
    AssignmentCreate, EvaluationType, ScoringResult, SubmissionStatus,
)
from .database_service import DatabaseService, get_db_service
from . import scoring_service, text_extraction_service
from .grading_helpers import data_assembly, evaluation_resolution, status_machine, submission_intake

DEFAULT_MAX_SCORE = 100
PLACEHOLDER_CREATOR = "faculty"


class GradingService:
    def __init__(self, db: DatabaseService = Depends(get_db_service)):
        self.db = db

    # --- LOOKUPS ---
    def _require_assignment(self, assignment_id: str):
        assignment = self.db.get_assignment(assignment_id)
        if not assignment:
            raise RecordNotFoundError(f"Assignment {assignment_id} not found.")
        return assignment

    def _require_submission(self, submission_id: str):
        submission = self.db.get_submission(submission_id)
        if not submission:
            raise RecordNotFoundError(f"Submission {submission_id} not found.")
        return submission

    def _require_evaluation(self, evaluation_id: str):
        evaluation = self.db.get_evaluation(evaluation_id)
        if not evaluation:
            raise RecordNotFoundError(f"Evaluation {evaluation_id} not found.")
        return evaluation

    def _resolve_assignment_context(self, submission) -> Tuple[int, Optional[str], Optional[str]]:
        """Returns (max_score, description, title) for a submission's assignment, with defaults."""
        assignment = self.db.get_assignment(submission.assignment_id)
        if not assignment:
            print(f"[WARNING] Assignment {submission.assignment_id} not found, defaulting max score to {DEFAULT_MAX_SCORE}.")
            return DEFAULT_MAX_SCORE, None, None
        return assignment.max_score or DEFAULT_MAX_SCORE, assignment.description, assignment.title

    # --- ASSIGNMENTS ---
    def create_assignment(self, payload: AssignmentCreate):
        return self.db.add_assignment({
            "id": f"asg_{uuid.uuid4().hex[:16]}",
            "title": payload.title,
            "description": payload.description,
            "max_score": payload.max_score,
            "created_by": payload.created_by or PLACEHOLDER_CREATOR,
        })

    def get_assignment(self, assignment_id: str):
        return self._require_assignment(assignment_id)

    def get_assignment_summaries(self) -> Dict:
        all_assignments = self.db.get_all_assignments()
        all_submissions = self.db.get_submissions()
        return {"assignments": data_assembly._assemble_assignment_summaries(all_assignments, all_submissions)}

    # --- SUBMIT ---
    def submit(
        self,
        assignment_id: str,
        student_name: str,
        file_name: str,
        file_type: Optional[str],
        file_bytes: bytes,
        student_id: Optional[str] = None,
    ):
        """
        Stores a student's file and records the Submission.
        All validation happens before the upload; the upload happens before the insert.
        """
        clean_name = submission_intake.validate_submission_input(student_name, file_name, file_bytes)
        self._require_assignment(assignment_id)
        submission = submission_intake.create_submission_record(
            self.db, assignment_id, clean_name, file_name, file_type, file_bytes, student_id
        )
        print(f"[PIPELINE] Submission {submission.id} created for assignment {assignment_id}.")
        return submission

    def get_submission(self, submission_id: str):
        return self._require_submission(submission_id)

    def get_submissions(self, assignment_id: Optional[str] = None) -> List:
        return self.db.get_submissions(assignment_id)

    # --- EVALUATE WITH AI ---
    def _begin_ai_evaluation(self, submission):
        """Moves the submission to `evaluating`, refusing a second concurrent evaluation."""
        target = SubmissionStatus.EVALUATING.value
        if self.db.transition_submission_status(submission.id, status_machine.sources_for(target), target):
            return

        current = self._require_submission(submission.id).status
        if current == SubmissionStatus.EVALUATING.value:
            raise EvaluationInProgressError(submission.id)
        raise InvalidStatusTransitionError(current, target)

    def _mark_evaluation_failed(self, submission_id: str):
        failed = SubmissionStatus.EVALUATION_FAILED.value
        moved = self.db.transition_submission_status(submission_id, [SubmissionStatus.EVALUATING.value], failed)
        if not moved:
            print(f"[WARNING] Submission {submission_id} was no longer 'evaluating' when marking it failed.")

    async def _score_and_persist(self, submission, extracted_text: str, assignment_title: Optional[str]) -> Tuple[ScoringResult, str]:
        if not extracted_text or not extracted_text.strip():
            raise GradingValidationError("No text could be extracted from the submission.")

        max_score, description, stored_title = self._resolve_assignment_context(submission)
        result = await scoring_service.score_submission(
            extracted_text=extracted_text,
            assignment_title=assignment_title or stored_title,
            assignment_description=description,
            max_score=max_score,
        )
        if result.is_fallback:
            print(f"[WARNING] Submission {submission.id} received a fallback evaluation: {result.fallback_reason}")

        evaluation = self.db.add_evaluation({
            "id": f"eval_{uuid.uuid4().hex[:16]}",
            "submission_id": submission.id,
            "score": result.score,
            "max_score": max_score,
            "evaluation_type": EvaluationType.AI.value,
            "ai_feedback": result.model_dump(),
            "evaluator_id": None,
            "is_published": False,
            "is_fallback": result.is_fallback,
        })
        self.db.set_current_evaluation(submission.id, evaluation.id)

        graded = SubmissionStatus.GRADED.value
        if not self.db.transition_submission_status(submission.id, [SubmissionStatus.EVALUATING.value], graded):
            raise InvalidStatusTransitionError(self._require_submission(submission.id).status, graded)
        return result, evaluation.id

    async def _run_guarded(self, submission, extracted_text: Optional[str], assignment_title: Optional[str]) -> Tuple[ScoringResult, str]:
        self._begin_ai_evaluation(submission)
        try:
            if extracted_text is None:
                extracted_text = await text_extraction_service.extract_text(submission.file_path, submission.file_type)
            return await self._score_and_persist(submission, extracted_text, assignment_title)
        except Exception as e:
            print(f"ERROR evaluating submission {submission.id}: {e}")
            self._mark_evaluation_failed(submission.id)
            raise

    async def evaluate_with_ai(self, submission_id: str, assignment_title: Optional[str] = None) -> Tuple[ScoringResult, str]:
        """
        Runs the full AI pipeline for one submission: extract, score, persist, grade.

        Returns:
            The scoring result and the id of the Evaluation that stores it.
        """
        submission = self._require_submission(submission_id)
        if not submission.file_path:
            raise GradingValidationError("Submission file not found.")
        print(f"[PIPELINE] Starting AI evaluation for submission {submission_id}.")
        return await self._run_guarded(submission, None, assignment_title)

    async def evaluate_extracted_text(self, submission_id: str, extracted_text: str, assignment_title: Optional[str] = None) -> Tuple[ScoringResult, str]:
        """Same as `evaluate_with_ai`, but for text that was already extracted by the caller."""
        if not submission_id or not extracted_text or not extracted_text.strip():
            raise GradingValidationError("Submission ID and extracted text are required.")
        submission = self._require_submission(submission_id)
        return await self._run_guarded(submission, extracted_text, assignment_title)

    # --- MANUAL EVALUATION ---
    def create_manual_evaluation(
        self,
        submission_id: str,
        score: float,
        max_score: Optional[int] = None,
        remarks: str = "",
        evaluator_id: Optional[str] = None,
    ):
        """
        Records a faculty grade. The score must be a finite number in [0, max_score]; the
        submission's status is left untouched (see `sync_status_after_grading`).
        """
        submission = self._require_submission(submission_id)
        if max_score is None:
            max_score, _, _ = self._resolve_assignment_context(submission)
        if max_score <= 0:
            raise GradingValidationError("The maximum score must be greater than zero.")
        if score is None or not math.isfinite(score) or score < 0 or score > max_score:
            raise ScoreOutOfRangeError(score, max_score)

        evaluation = self.db.add_evaluation({
            "id": f"eval_{uuid.uuid4().hex[:16]}",
            "submission_id": submission_id,
            "score": score,
            "max_score": max_score,
            "evaluation_type": EvaluationType.MANUAL.value,
            "manual_remarks": remarks,
            "evaluator_id": evaluator_id or str(uuid.uuid4()),
            "is_published": False,
        })
        self.db.set_current_evaluation(submission_id, evaluation.id)
        return evaluation

    def sync_status_after_grading(self, submission_id: str):
        """
        Moves a submission to `graded` once at least one Evaluation exists for
        it. A submission that is mid-evaluation or already graded is left as is.
        """
        submission = self._require_submission(submission_id)
        if not self.db.get_evaluations(submission_id):
            return submission
        graded = SubmissionStatus.GRADED.value
        if status_machine.can_transition(submission.status, graded):
            self.db.transition_submission_status(submission_id, status_machine.sources_for(graded), graded)
        return self._require_submission(submission_id)

    # --- PUBLISH ---
    def publish_evaluation(self, evaluation_id: str):
        """Makes an evaluation visible to the student. Idempotent."""
        evaluation = self.db.publish_evaluation(evaluation_id)
        if not evaluation:
            raise RecordNotFoundError(f"Evaluation {evaluation_id} not found.")
        return evaluation

    # --- READS ---
    def get_evaluations(self, submission_id: Optional[str] = None) -> List:
        if submission_id:
            self._require_submission(submission_id)
        return self.db.get_evaluations(submission_id)

    def get_current_evaluation(self, submission_id: str, published_only: bool = False):
        """
        Faculty view: the evaluation the submission points at (the newest one).
        Student view (`published_only`): the newest published evaluation.
        """
        submission = self._require_submission(submission_id)
        evaluations = self.db.get_evaluations(submission_id)
        if not published_only:
            pointed = evaluation_resolution.find_evaluation_by_id(evaluations, submission.current_evaluation_id)
            if pointed:
                return pointed
        return evaluation_resolution.resolve_current_evaluation(evaluations, submission_id, published_only)


# --- DEPENDENCY PROVIDER ---
def get_grading_service(db: DatabaseService = Depends(get_db_service)):
    """Dependency provider for the GradingService."""
    return GradingService(db=db)
