# /app/services/grading_helpers/data_assembly.py

from typing import List, Dict
import pandas as pd

from ...models.assignment_model import SubmissionStatus


def _assemble_assignment_summaries(all_assignments: List['Assignment'], all_submissions: List['Submission']) -> List[Dict]:
    """
    Specialist for the faculty dashboard list: every assignment with its
    total, graded and ungraded submission counts.
    """
    submissions_df = pd.DataFrame(
        [{"assignment_id": s.assignment_id, "status": s.status} for s in all_submissions],
        columns=["assignment_id", "status"],
    )
    graded_mask = submissions_df["status"] == SubmissionStatus.GRADED.value
    totals = submissions_df.groupby("assignment_id").size()
    graded = submissions_df[graded_mask].groupby("assignment_id").size()

    summaries = []
    for assignment in all_assignments:
        total = int(totals.get(assignment.id, 0))
        graded_count = int(graded.get(assignment.id, 0))
        summaries.append({
            "id": assignment.id,
            "title": assignment.title,
            "description": assignment.description,
            "max_score": assignment.max_score,
            "total_marks": assignment.total_marks,
            "template_id": assignment.template_id,
            "created_by": assignment.created_by,
            "created_at": assignment.created_at,
            "updated_at": assignment.updated_at,
            "progress": {"total": total, "graded": graded_count, "ungraded": total - graded_count},
        })
    return summaries
