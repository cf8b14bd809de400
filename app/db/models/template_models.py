# /app/db/models/template_models.py

"""
ORM models for generated or curated assessment templates and their questions.
A template may later be promoted into an `Assignment`.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from ..base_class import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssessmentTemplate(Base):
    __tablename__ = "assessment_templates"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    topic = Column(String, nullable=False)
    difficulty_level = Column(String, nullable=False, default="medium")
    total_questions = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=False)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    questions = relationship(
        "Question",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="Question.order_index",
    )
    assignments = relationship("Assignment", back_populates="template")


class Question(Base):
    id = Column(String, primary_key=True, index=True)
    assessment_template_id = Column(String, ForeignKey("assessment_templates.id"), nullable=True, index=True)
    question_text = Column(String, nullable=False)
    question_type = Column(String, nullable=False, default="essay")
    marks = Column(Integer, nullable=False, default=10)
    order_index = Column(Integer, nullable=False, default=1)
    sample_answer = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    template = relationship("AssessmentTemplate", back_populates="questions")
