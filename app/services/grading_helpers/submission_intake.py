# /app/services/grading_helpers/submission_intake.py

"""
Helpers for receiving a student's file: storing it first and only then
creating the Submission row, so no row ever references a file that failed to
upload.
"""

import uuid
from typing import Dict, Optional

from app.core.exceptions import GradingValidationError, UpstreamError
from ...models.assignment_model import SubmissionStatus
from ..database_service import DatabaseService
from .. import storage_service


def validate_submission_input(student_name: Optional[str], file_name: Optional[str], file_bytes: Optional[bytes]) -> str:
    clean_name = (student_name or "").strip()
    if not clean_name:
        raise GradingValidationError("Please enter the student's name.")
    if not file_name:
        raise GradingValidationError("Please choose a file to submit.")
    if not file_bytes:
        raise GradingValidationError("The submitted file is empty.")
    return clean_name


def _store_submission_file(file_name: str, file_bytes: bytes) -> tuple:
    object_path = storage_service.build_object_name(storage_service.SUBMISSIONS_PREFIX, file_name)
    public_url = storage_service.upload(storage_service.SUBMISSIONS_BUCKET, object_path, file_bytes)
    return object_path, public_url


def create_submission_record(
    db: DatabaseService,
    assignment_id: str,
    student_name: str,
    file_name: str,
    file_type: Optional[str],
    file_bytes: bytes,
    student_id: Optional[str] = None,
):
    """
    Uploads the file, then inserts the Submission with status `submitted`.

    If the insert fails after a successful upload, the uploaded object is
    removed again before the error is re-raised.
    """
    object_path, public_url = _store_submission_file(file_name, file_bytes)

    record: Dict = {
        "id": f"sub_{uuid.uuid4().hex[:16]}",
        "assignment_id": assignment_id,
        # No authentication yet: a random placeholder identity is used unless one is supplied.
        "student_id": student_id or str(uuid.uuid4()),
        "student_name": student_name,
        "file_path": public_url,
        "file_name": file_name,
        "file_type": file_type,
        "status": SubmissionStatus.SUBMITTED.value,
    }
    try:
        return db.add_submission(record)
    except UpstreamError:
        print(f"ERROR creating submission row, removing orphaned upload {object_path}")
        try:
            storage_service.delete(storage_service.SUBMISSIONS_BUCKET, object_path)
        except UpstreamError as cleanup_error:
            print(f"ERROR removing orphaned upload {object_path}: {cleanup_error}")
        raise
