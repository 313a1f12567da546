"""Batch reconciliation of external records against existing submissions.

Flow:
1) normalize each record through the field catalogue
2) classify it by identity number (new, replaceable, blocked, invalid)
3) preview: count classes and flag cross-branch records without writing
4) apply: create new records, overwrite rejected ones on request, skip the rest
"""

from __future__ import annotations

from .apply import SESSION_NOT_FOUND, BatchImporter, default_progress_snapshot
from .classify import canonicalize, classify, classify_record
from .contracts import (
    Classification,
    ClassifiedRecord,
    CrossBranchWarning,
    ImportPreview,
    ImportResult,
    ProgressSnapshot,
    SkippedRecord,
)
from .preview import preview_import
from .progress import InMemoryProgressLedger

__all__ = [
    "SESSION_NOT_FOUND",
    "BatchImporter",
    "Classification",
    "ClassifiedRecord",
    "CrossBranchWarning",
    "ImportPreview",
    "ImportResult",
    "InMemoryProgressLedger",
    "ProgressSnapshot",
    "SkippedRecord",
    "canonicalize",
    "classify",
    "classify_record",
    "default_progress_snapshot",
    "preview_import",
]
