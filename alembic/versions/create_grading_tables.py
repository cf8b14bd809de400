"""Create assignment, submission, evaluation and template tables

Revision ID: 3f1c9a7e5b20
Revises:
Create Date: 2025-06-02 10:15:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e5b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the grading schema."""
    op.create_table(
        'assessment_templates',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('topic', sa.String(), nullable=False),
        sa.Column('difficulty_level', sa.String(), nullable=False),
        sa.Column('total_questions', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_assessment_templates_id', 'assessment_templates', ['id'])

    op.create_table(
        'questions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('assessment_template_id', sa.String(), sa.ForeignKey('assessment_templates.id'), nullable=True),
        sa.Column('question_text', sa.String(), nullable=False),
        sa.Column('question_type', sa.String(), nullable=False),
        sa.Column('marks', sa.Integer(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('sample_answer', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_questions_id', 'questions', ['id'])
    op.create_index('ix_questions_assessment_template_id', 'questions', ['assessment_template_id'])

    op.create_table(
        'assignments',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('max_score', sa.Integer(), nullable=False),
        sa.Column('total_marks', sa.Integer(), nullable=True),
        sa.Column('template_id', sa.String(), sa.ForeignKey('assessment_templates.id'), nullable=True),
        sa.Column('created_by', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_assignments_id', 'assignments', ['id'])

    op.create_table(
        'submissions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('assignment_id', sa.String(), sa.ForeignKey('assignments.id'), nullable=False),
        sa.Column('student_id', sa.String(), nullable=False),
        sa.Column('student_name', sa.String(), nullable=False),
        sa.Column('file_path', sa.String(), nullable=True),
        sa.Column('file_name', sa.String(), nullable=True),
        sa.Column('file_type', sa.String(), nullable=True),
        sa.Column('submission_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('current_evaluation_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_submissions_id', 'submissions', ['id'])
    op.create_index('ix_submissions_assignment_id', 'submissions', ['assignment_id'])
    op.create_index('ix_submissions_student_id', 'submissions', ['student_id'])
    op.create_index('ix_submissions_status', 'submissions', ['status'])

    op.create_table(
        'evaluations',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('submission_id', sa.String(), sa.ForeignKey('submissions.id'), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('max_score', sa.Integer(), nullable=False),
        sa.Column('evaluation_type', sa.String(), nullable=False),
        sa.Column('ai_feedback', sa.JSON(), nullable=True),
        sa.Column('manual_remarks', sa.String(), nullable=True),
        sa.Column('evaluator_id', sa.String(), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('is_fallback', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_evaluations_id', 'evaluations', ['id'])
    op.create_index('ix_evaluations_submission_id', 'evaluations', ['submission_id'])


def downgrade() -> None:
    """Drop the grading schema."""
    op.drop_table('evaluations')
    op.drop_table('submissions')
    op.drop_table('assignments')
    op.drop_table('questions')
    op.drop_table('assessment_templates')
