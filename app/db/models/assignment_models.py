# /app/db/models/assignment_models.py

"""
This module defines the SQLAlchemy ORM models for the `Assignment`,
`Submission` and `Evaluation` entities.

An Assignment owns its Submissions, and a Submission owns every Evaluation
attempt recorded against it (AI and manual). Evaluations are deliberately not
unique per submission; the submission's `current_evaluation_id` points at the
most recently created one.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Float, Boolean, JSON, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from ..base_class import Base


def _utcnow() -> datetime:
    # Python-side timestamps keep microsecond precision, which the
    # newest-first ordering of evaluations relies on.
    return datetime.now(timezone.utc)


class Assignment(Base):
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    max_score = Column(Integer, nullable=False, default=100)
    total_marks = Column(Integer, nullable=True)
    template_id = Column(String, ForeignKey("assessment_templates.id"), nullable=True)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    template = relationship("AssessmentTemplate", back_populates="assignments")
    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")


class Submission(Base):
    id = Column(String, primary_key=True, index=True)
    assignment_id = Column(String, ForeignKey("assignments.id"), nullable=False, index=True)
    student_id = Column(String, nullable=False, index=True)
    student_name = Column(String, nullable=False)

    # The public URL of the uploaded file plus the metadata needed to extract it.
    file_path = Column(String, nullable=True)
    file_name = Column(String, nullable=True)
    file_type = Column(String, nullable=True)

    submission_date = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    status = Column(String, index=True, nullable=False, default="submitted")
    current_evaluation_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    assignment = relationship("Assignment", back_populates="submissions")
    evaluations = relationship("Evaluation", back_populates="submission", cascade="all, delete-orphan")


class Evaluation(Base):
    id = Column(String, primary_key=True, index=True)
    submission_id = Column(String, ForeignKey("submissions.id"), nullable=False, index=True)
    score = Column(Float, nullable=False)
    max_score = Column(Integer, nullable=False)
    evaluation_type = Column(String, nullable=False)

    # Structured AI output (strengths, improvements, detailed_feedback, ...).
    ai_feedback = Column(JSON, nullable=True)
    manual_remarks = Column(String, nullable=True)
    evaluator_id = Column(String, nullable=True)

    is_published = Column(Boolean, nullable=False, default=False)
    is_fallback = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    submission = relationship("Submission", back_populates="evaluations")
