# /app/services/database_service.py

from typing import List, Dict, Optional, Iterable, Generator
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db

# --- Repository Imports ---
from .database_helpers.assignment_repository_sql import AssignmentRepositorySQL
from .database_helpers.template_repository_sql import TemplateRepositorySQL


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        The single facade the services use for persistence. Every method
        delegates to the repository that owns the table in question.
        """
        if db_session is None:
            raise ValueError("A database session is required.")
        self.session = db_session
        self.assignment_repo = AssignmentRepositorySQL(db_session)
        self.template_repo = TemplateRepositorySQL(db_session)

    # --- ASSIGNMENT METHODS (DELEGATED) ---
    def add_assignment(self, record: Dict): return self.assignment_repo.add_assignment(record)
    def get_assignment(self, assignment_id: str): return self.assignment_repo.get_assignment(assignment_id)
    def get_all_assignments(self) -> List: return self.assignment_repo.get_all_assignments()

    # --- SUBMISSION METHODS (DELEGATED) ---
    def add_submission(self, record: Dict): return self.assignment_repo.add_submission(record)
    def get_submission(self, submission_id: str): return self.assignment_repo.get_submission(submission_id)
    def get_submissions(self, assignment_id: Optional[str] = None) -> List: return self.assignment_repo.get_submissions(assignment_id)
    def transition_submission_status(self, submission_id: str, from_statuses: Iterable[str], to_status: str) -> bool:
        return self.assignment_repo.transition_submission_status(submission_id, from_statuses, to_status)
    def set_current_evaluation(self, submission_id: str, evaluation_id: str): self.assignment_repo.set_current_evaluation(submission_id, evaluation_id)

    # --- EVALUATION METHODS (DELEGATED) ---
    def add_evaluation(self, record: Dict): return self.assignment_repo.add_evaluation(record)
    def get_evaluation(self, evaluation_id: str): return self.assignment_repo.get_evaluation(evaluation_id)
    def get_evaluations(self, submission_id: Optional[str] = None) -> List: return self.assignment_repo.get_evaluations(submission_id)
    def publish_evaluation(self, evaluation_id: str): return self.assignment_repo.publish_evaluation(evaluation_id)

    # --- TEMPLATE METHODS (DELEGATED) ---
    def add_template_with_questions(self, template_record: Dict, question_records: List[Dict]):
        return self.template_repo.add_template_with_questions(template_record, question_records)
    def get_template(self, template_id: str): return self.template_repo.get_template(template_id)
    def get_all_templates(self) -> List: return self.template_repo.get_all_templates()
    def get_questions_for_template(self, template_id: str) -> List: return self.template_repo.get_questions_for_template(template_id)
    def get_assignment_for_template(self, template_id: str): return self.template_repo.get_assignment_for_template(template_id)


# --- DEPENDENCY PROVIDER ---
def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService bound to the request's session."""
    yield DatabaseService(db_session=db)
