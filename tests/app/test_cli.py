from __future__ import annotations

import json
from datetime import UTC, date, datetime
from types import SimpleNamespace
from typing import TYPE_CHECKING

import pytest

from account_opening.domain.errors import AccessDeniedError
from account_opening.domain.model import ActorRole, SubmissionStatus
from account_opening.domain.reconciliation import ImportResult, ProgressSnapshot, SkippedRecord
from account_opening.ui import cli as cli_module
from tests.helpers.submissions import make_payload

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from account_opening.adapters.sqlalchemy import SqlAlchemySubmissionUnitOfWork

    UnitOfWorkFactory = Callable[[], SqlAlchemySubmissionUnitOfWork]


def _write_backup(path: Path, records: list[dict[str, object]]) -> Path:
    path.write_text(json.dumps({"data": records}), encoding="utf-8")
    return path


def test_import_passes_flags_and_prints_counts(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_apply(
        records: list[dict[str, object]], actor: object, **kwargs: object
    ) -> ImportResult:
        captured.update(kwargs, records=records, actor=actor)
        return ImportResult(
            imported=1,
            skipped=1,
            total=2,
            skipped_records=[
                SkippedRecord(index=1, identity_number="2", reason="conflict_blocked")
            ],
        )

    monkeypatch.setattr(cli_module, "apply_import", fake_apply)
    backup = _write_backup(tmp_path / "backup.json", [make_payload("1"), make_payload("2")])

    cli_module.main(
        [
            "import",
            str(backup),
            "--overwrite",
            "--progress-key",
            "batch-7",
            "--actor-role",
            "branch_admin",
            "--actor-branch",
            "2",
            "--actor-name",
            "admin.cabang2",
        ]
    )

    assert captured["overwrite"] is True
    assert captured["progress_key"] == "batch-7"
    assert len(captured["records"]) == 2  # type: ignore[arg-type]
    actor = captured["actor"]
    assert actor.role is ActorRole.BRANCH_ADMIN  # type: ignore[attr-defined]
    assert actor.branch_id == 2  # type: ignore[attr-defined]
    output = json.loads(capsys.readouterr().out)
    assert output["imported"] == 1
    assert output["skipped_records"] == [
        {"index": 1, "identity_number": "2", "reason": "conflict_blocked"}
    ]


def test_progress_prints_snapshot(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    snapshot = ProgressSnapshot(50, "Processed 2 of 4", datetime(2025, 3, 1, 9, 0, tzinfo=UTC))
    monkeypatch.setattr(cli_module, "get_progress", lambda key: snapshot)

    cli_module.main(["progress", "batch-7"])

    output = json.loads(capsys.readouterr().out)
    assert output["progress"] == 50
    assert output["message"] == "Processed 2 of 4"


def test_export_parses_date_range(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: dict[str, object] = {}

    def fake_export(actor: object, date_range: object, branch: int | None) -> list[object]:
        captured.update(date_range=date_range, branch=branch)
        return []

    monkeypatch.setattr(cli_module, "export_filtered", fake_export)
    output = tmp_path / "export.json"

    cli_module.main(
        [
            "export",
            "--start",
            "2025-01-01",
            "--end",
            "2025-01-31",
            "--branch",
            "3",
            "--output",
            str(output),
        ]
    )

    date_range = captured["date_range"]
    assert date_range.start == date(2025, 1, 1)  # type: ignore[attr-defined]
    assert date_range.end == date(2025, 1, 31)  # type: ignore[attr-defined]
    assert captured["branch"] == 3
    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["metadata"]["totalRecords"] == 0
    assert document["data"] == []


def test_invalid_date_exits_with_usage_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli_module, "export_filtered", lambda *_: [])

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["export", "--start", "not-a-date"])

    assert excinfo.value.code == 2
    assert "Invalid date" in capsys.readouterr().err


def test_branch_roles_need_a_branch() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["purge", "--status", "rejected", "--actor-role", "staff"])

    assert excinfo.value.code == 2


def test_domain_errors_are_reported_as_json(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fake_delete(*_: object) -> object:
        raise AccessDeniedError("Branch admins can only delete their own branch")

    monkeypatch.setattr(cli_module, "delete_by_status", fake_delete)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            [
                "purge",
                "--status",
                "all",
                "--branch",
                "3",
                "--actor-role",
                "branch_admin",
                "--actor-branch",
                "2",
            ]
        )

    assert excinfo.value.code == 1
    report = json.loads(capsys.readouterr().err)
    assert report == {
        "kind": "access_denied",
        "message": "Branch admins can only delete their own branch",
    }


def test_unexpected_errors_hide_details(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("APP_ENV", raising=False)

    def fake_history(*_: object, **__: object) -> object:
        raise RuntimeError("connection string with password")

    monkeypatch.setattr(cli_module, "get_history", fake_history)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["history", "1"])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "password" not in err
    assert json.loads(err)["kind"] == "internal"


def test_import_then_history_against_database(
    sqlite_unit_of_work: UnitOfWorkFactory,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    backup = _write_backup(
        tmp_path / "backup.json",
        [make_payload("1", status="approved", approvedBy="supervisor.pusat")],
    )

    cli_module.main(["import", str(backup), "--actor-name", "supervisor.pusat"])
    imported = json.loads(capsys.readouterr().out)
    assert (imported["imported"], imported["total"]) == (1, 1)

    with sqlite_unit_of_work() as uow:
        (submission,) = uow.repositories.submissions.find_by_identity_number("1")

    cli_module.main(["history", str(submission.id)])
    history = json.loads(capsys.readouterr().out)
    assert history["submission_id"] == submission.id
    assert history["current_approver"]["name"] == "supervisor.pusat"
    assert history["entries"] == []


@pytest.mark.parametrize(("flags", "expected"), [([], False), (["--notify"], True)])
def test_status_notifies_only_with_flag(
    monkeypatch: pytest.MonkeyPatch, flags: list[str], expected: bool
) -> None:
    captured: dict[str, object] = {}

    def fake_set_status(
        submission_id: int, status: str, actor: object, **kwargs: object
    ) -> SimpleNamespace:
        captured.update(kwargs, submission_id=submission_id, status=status)
        return SimpleNamespace(
            id=submission_id,
            status=SubmissionStatus.APPROVED,
            approved_by="supervisor.pusat",
            approved_at=None,
        )

    monkeypatch.setattr(cli_module, "set_status", fake_set_status)

    cli_module.main(["status", "1", "approved", *flags])

    assert captured["notify"] is expected
    assert captured["submission_id"] == 1
