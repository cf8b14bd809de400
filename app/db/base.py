# /app/db/base.py

# Central registry for all SQLAlchemy models. Importing them here ensures the
# Base metadata knows about every table when Alembic or `create_all` runs.

from .base_class import Base

from .models.assignment_models import Assignment, Submission, Evaluation
from .models.template_models import AssessmentTemplate, Question
