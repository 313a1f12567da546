"""Application entry points wired to the configured adapters."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from account_opening.adapters.notifications import LoggingNotifier, WhatsAppNotifier
from account_opening.adapters.sqlalchemy import (
    SqlAlchemyProgressLedger,
    SqlAlchemySubmissionUnitOfWork,
    configured_engine,
    is_started,
    startup,
)
from account_opening.config import get_import_config, get_runtime_config, is_whatsapp_configured
from account_opening.domain import submissions
from account_opening.domain.errors import ErrorReport, describe_error
from account_opening.domain.reconciliation import BatchImporter
from account_opening.domain.reconciliation import preview_import as preview_batch

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from account_opening.domain.model import Actor, Submission, SubmissionStatus
    from account_opening.domain.ports import (
        Notifier,
        ProgressLedger,
        SubmissionUnitOfWorkFactory,
    )
    from account_opening.domain.reconciliation import (
        ImportPreview,
        ImportResult,
        ProgressSnapshot,
    )
    from account_opening.domain.submissions import (
        CreateResult,
        DateRange,
        DeleteResult,
        EditResult,
        SubmissionHistory,
    )

log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def _unit_of_work_factory(
    factory: SubmissionUnitOfWorkFactory | None,
) -> SubmissionUnitOfWorkFactory:
    if factory is not None:
        return factory
    _ensure_started()
    return SqlAlchemySubmissionUnitOfWork


def build_notifier() -> Notifier:
    """WhatsApp when a gateway token is configured, otherwise a logging stand-in."""

    if is_whatsapp_configured():
        return WhatsAppNotifier()
    log.info("FONNTE_TOKEN not set; status notifications are only logged")
    return LoggingNotifier()


def build_progress_ledger() -> ProgressLedger:
    _ensure_started()
    engine = configured_engine()
    if engine is None:
        raise RuntimeError("Database engine is not configured")
    return SqlAlchemyProgressLedger(engine)


def build_importer(
    *,
    ledger: ProgressLedger | None = None,
    unit_of_work_factory: SubmissionUnitOfWorkFactory | None = None,
) -> BatchImporter:
    config = get_import_config()
    return BatchImporter(
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        ledger=ledger or build_progress_ledger(),
        progress_ttl=config.progress_ttl,
        progress_grace=config.progress_grace,
        progress_interval=config.progress_interval,
    )


def create_submission(
    payload: Mapping[str, object],
    actor: Actor | None = None,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory | None = None,
) -> CreateResult:
    return submissions.create_submission(
        payload, actor, unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory)
    )


def set_status(
    submission_id: int,
    status: str | SubmissionStatus,
    actor: Actor,
    *,
    notify: bool = False,
    message: str | None = None,
    notifier: Notifier | None = None,
    unit_of_work_factory: SubmissionUnitOfWorkFactory | None = None,
) -> Submission:
    """Change the status; the customer is only messaged when ``notify`` is set."""

    if not notify:
        log.debug(f"Status change of submission {submission_id} without customer notification")
    return submissions.set_submission_status(
        submission_id,
        status,
        actor,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        notifier=(notifier or build_notifier()) if notify else None,
        message=message,
    )


def edit_submission(
    submission_id: int,
    changes: Mapping[str, object],
    actor: Actor,
    reason: str | None = None,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory | None = None,
) -> EditResult:
    return submissions.edit_submission(
        submission_id,
        changes,
        actor,
        reason,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
    )


def get_history(
    submission_id: int,
    *,
    actor: Actor | None = None,
    unit_of_work_factory: SubmissionUnitOfWorkFactory | None = None,
) -> SubmissionHistory:
    return submissions.get_history(
        submission_id,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        actor=actor,
    )


def preview_import(
    records: Sequence[Mapping[str, object]],
    actor: Actor,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory | None = None,
) -> ImportPreview:
    return preview_batch(
        records, actor, unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory)
    )


def apply_import(
    records: Sequence[Mapping[str, object]],
    actor: Actor,
    *,
    overwrite: bool = False,
    progress_key: str | None = None,
    ledger: ProgressLedger | None = None,
    unit_of_work_factory: SubmissionUnitOfWorkFactory | None = None,
) -> ImportResult:
    importer = build_importer(ledger=ledger, unit_of_work_factory=unit_of_work_factory)
    return importer.apply(records, actor, overwrite=overwrite, progress_key=progress_key)


def get_progress(progress_key: str, *, ledger: ProgressLedger | None = None) -> ProgressSnapshot:
    return build_importer(ledger=ledger).get_progress(progress_key)


def export_filtered(
    actor: Actor,
    date_range: DateRange | None = None,
    branch_filter: int | None = None,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory | None = None,
) -> list[Submission]:
    return submissions.export_filtered(
        actor,
        date_range,
        branch_filter,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
    )


def delete_by_status(
    status_filter: str | SubmissionStatus,
    branch_filter: int | None,
    actor: Actor,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory | None = None,
) -> DeleteResult:
    return submissions.delete_by_status(
        status_filter,
        branch_filter,
        actor,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
    )


def describe_failure(exc: BaseException) -> ErrorReport:
    """Structured error for callers; store detail only in development mode."""

    return describe_error(exc, debug=get_runtime_config().is_development)
