"""Aggregate writer, audit trail reads and list-style operations."""

from __future__ import annotations

from .bulk import (
    DateRange,
    DeleteResult,
    delete_by_status,
    export_filtered,
    parse_status_filter,
)
from .create import CreateResult, build_submission, create_submission, generate_reference_code
from .edit import BENEFICIAL_OWNER_CLEARED, EditResult, edit_submission
from .history import ApproverStamp, SubmissionHistory, get_history
from .status import parse_status, set_submission_status

__all__ = [
    "BENEFICIAL_OWNER_CLEARED",
    "ApproverStamp",
    "CreateResult",
    "DateRange",
    "DeleteResult",
    "EditResult",
    "SubmissionHistory",
    "build_submission",
    "create_submission",
    "delete_by_status",
    "edit_submission",
    "export_filtered",
    "generate_reference_code",
    "get_history",
    "parse_status",
    "parse_status_filter",
    "set_submission_status",
]
