# /app/services/assessment_service.py

"""
This module defines the AssessmentService, which turns generated question
sets into stored templates and promotes templates into gradable assignments.
"""

import uuid
from typing import Dict, Optional

from fastapi import Depends

from app.core.exceptions import GradingValidationError, RecordNotFoundError, TemplateAlreadyPromotedError
from ..models import assessment_model
from .database_service import DatabaseService, get_db_service
from . import assessment_generation_service

PLACEHOLDER_CREATOR = "faculty"


class AssessmentService:
    def __init__(self, db: DatabaseService = Depends(get_db_service)):
        self.db = db

    # --- GENERATION ---
    async def generate(self, request: assessment_model.GenerateAssessmentRequest) -> assessment_model.GeneratedAssessment:
        return await assessment_generation_service.generate_assessment(
            topic=request.topic,
            total_questions=request.totalQuestions,
            difficulty_level=request.difficultyLevel,
            title=request.title,
            description=request.description,
        )

    # --- TEMPLATES ---
    def save_template(
        self,
        assessment: assessment_model.GeneratedAssessment,
        topic: Optional[str] = None,
        difficulty_level: assessment_model.DifficultyLevel = assessment_model.DifficultyLevel.MEDIUM,
        created_by: Optional[str] = None,
        is_published: bool = False,
    ):
        """Stores a generated (and possibly faculty-edited) assessment as a template with its questions."""
        template_id = f"tpl_{uuid.uuid4().hex[:16]}"
        ordered_questions = sorted(assessment.questions, key=lambda q: q.order_index)
        template_record = {
            "id": template_id,
            "title": assessment.title,
            "description": assessment.description,
            "topic": (topic or "").strip() or assessment.title,
            "difficulty_level": assessment_model.DifficultyLevel(difficulty_level).value,
            "total_questions": len(ordered_questions),
            "is_published": is_published,
            "created_by": created_by or PLACEHOLDER_CREATOR,
        }
        question_records = [
            {
                "id": f"q_{uuid.uuid4().hex[:8]}",
                "question_text": q.question_text,
                "question_type": q.question_type.value,
                "marks": q.marks,
                "order_index": q.order_index,
                "sample_answer": q.sample_answer,
            }
            for q in ordered_questions
        ]
        return self.db.add_template_with_questions(template_record, question_records)

    def get_template_detail(self, template_id: str):
        template = self.db.get_template(template_id)
        if not template:
            raise RecordNotFoundError(f"Assessment template {template_id} not found.")
        return template

    def list_templates(self) -> Dict:
        return {"templates": self.db.get_all_templates()}

    def promote_template(self, template_id: str, created_by: Optional[str] = None):
        """
        Creates an Assignment backed by a template. The assignment's maximum
        score is the sum of the template's question marks. A template backs at
        most one assignment.
        """
        template = self.get_template_detail(template_id)
        existing = self.db.get_assignment_for_template(template_id)
        if existing:
            raise TemplateAlreadyPromotedError(template_id, existing.id)
        questions = self.db.get_questions_for_template(template_id)
        total_marks = sum(q.marks for q in questions)
        if total_marks <= 0:
            raise GradingValidationError("A template needs questions worth more than zero marks to become an assignment.")

        return self.db.add_assignment({
            "id": f"asg_{uuid.uuid4().hex[:16]}",
            "title": template.title,
            "description": template.description,
            "max_score": total_marks,
            "total_marks": total_marks,
            "template_id": template.id,
            "created_by": created_by or template.created_by or PLACEHOLDER_CREATOR,
        })

    def publish_generated_assessment(self, payload: assessment_model.TemplateCreate):
        """Saves a generated assessment as a published template and immediately promotes it."""
        template = self.save_template(
            payload.assessment,
            topic=payload.topic,
            difficulty_level=payload.difficultyLevel,
            created_by=payload.created_by,
            is_published=True,
        )
        return self.promote_template(template.id, created_by=payload.created_by)


# --- DEPENDENCY PROVIDER ---
def get_assessment_service(db: DatabaseService = Depends(get_db_service)):
    """Dependency provider for the AssessmentService."""
    return AssessmentService(db=db)
