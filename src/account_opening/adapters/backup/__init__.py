"""JSON backup envelope: export of complete aggregates and parsing for re-import."""

from __future__ import annotations

from .schema import BACKUP_VERSION, BackupEnvelope, BackupMetadata, parse_backup
from .serialize import build_backup, dump_backup, submission_to_record

__all__ = [
    "BACKUP_VERSION",
    "BackupEnvelope",
    "BackupMetadata",
    "build_backup",
    "dump_backup",
    "parse_backup",
    "submission_to_record",
]
