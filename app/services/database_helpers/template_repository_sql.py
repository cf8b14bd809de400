# /app/services/database_helpers/template_repository_sql.py

from typing import List, Dict, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import UpstreamError
from app.db.models.template_models import AssessmentTemplate, Question
from app.db.models.assignment_models import Assignment


class TemplateRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add_template_with_questions(self, template_record: Dict, question_records: List[Dict]) -> AssessmentTemplate:
        """
        Creates a template and all of its questions in a single transaction,
        so a template is never stored without its questions.
        """
        new_template = AssessmentTemplate(**template_record)
        new_template.questions = [Question(**q) for q in question_records]
        self.db.add(new_template)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            print(f"ERROR saving assessment template: {e}")
            raise UpstreamError(f"Database error while saving the assessment template: {e}")
        self.db.refresh(new_template)
        return new_template

    def get_template(self, template_id: str) -> Optional[AssessmentTemplate]:
        return self.db.query(AssessmentTemplate).filter(AssessmentTemplate.id == template_id).first()

    def get_all_templates(self) -> List[AssessmentTemplate]:
        return self.db.query(AssessmentTemplate).order_by(AssessmentTemplate.created_at.desc()).all()

    def get_questions_for_template(self, template_id: str) -> List[Question]:
        return (
            self.db.query(Question)
            .filter(Question.assessment_template_id == template_id)
            .order_by(Question.order_index)
            .all()
        )

    def get_assignment_for_template(self, template_id: str) -> Optional[Assignment]:
        return self.db.query(Assignment).filter(Assignment.template_id == template_id).first()
