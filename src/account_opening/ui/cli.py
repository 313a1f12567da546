# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import date
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from account_opening.adapters.backup import build_backup, dump_backup, parse_backup
from account_opening.app import (
    apply_import,
    delete_by_status,
    describe_failure,
    export_filtered,
    get_history,
    get_progress,
    preview_import,
    set_status,
)
from account_opening.config import configure_logging
from account_opening.domain.errors import AccountOpeningError
from account_opening.domain.model import Actor, ActorRole
from account_opening.domain.submissions import DateRange

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType
    from typing import Any

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    actor = argparse.ArgumentParser(add_help=False)
    actor.add_argument("--actor-id", type=int, help="Id of the acting staff account")
    actor.add_argument(
        "--actor-role",
        type=str,
        choices=[role.value for role in ActorRole],
        default=ActorRole.GLOBAL_ADMIN.value,
        help="Role of the acting staff account (default: %(default)s)",
    )
    actor.add_argument(
        "--actor-branch",
        type=int,
        help="Branch of the acting staff account (required for branch admins and staff)",
    )
    actor.add_argument(
        "--actor-name",
        type=str,
        help="Username written into approval stamps and audit rows",
    )

    parser = argparse.ArgumentParser(description="Manage account-opening submissions")
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser(
        "preview", parents=[actor], help="Classify a backup file without writing"
    )
    preview.add_argument("file", type=Path, help="Backup JSON (envelope or bare array)")

    import_ = subparsers.add_parser("import", parents=[actor], help="Apply a backup file")
    import_.add_argument("file", type=Path, help="Backup JSON (envelope or bare array)")
    import_.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace rejected submissions that share an identity number",
    )
    import_.add_argument(
        "--progress-key",
        type=str,
        help="Key under which progress snapshots are published",
    )

    progress = subparsers.add_parser("progress", help="Show the progress of an import")
    progress.add_argument("key", type=str, help="Progress key passed to the import")

    export = subparsers.add_parser("export", parents=[actor], help="Export a backup file")
    export.add_argument("--start", type=str, help="First creation day (YYYY-MM-DD, inclusive)")
    export.add_argument("--end", type=str, help="Last creation day (YYYY-MM-DD, inclusive)")
    export.add_argument("--branch", type=int, help="Only export this branch")
    export.add_argument("--output", type=Path, help="Write to this file instead of stdout")

    history = subparsers.add_parser(
        "history", parents=[actor], help="Show approvers and edit audit of a submission"
    )
    history.add_argument("submission_id", type=int)

    purge = subparsers.add_parser(
        "purge", parents=[actor], help="Delete submissions by status and branch"
    )
    purge.add_argument(
        "--status",
        type=str,
        required=True,
        help="pending, approved, rejected or all",
    )
    purge.add_argument("--branch", type=int, help="Only purge this branch")

    status = subparsers.add_parser("status", parents=[actor], help="Approve or reject")
    status.add_argument("submission_id", type=int)
    status.add_argument("status", type=str, help="pending, approved or rejected")
    status.add_argument("--message", type=str, help="Custom notification text")
    status.add_argument(
        "--notify", action="store_true", help="Send the customer a WhatsApp message"
    )

    return parser.parse_args(list(argv))


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value}") from exc


def _build_actor(args: argparse.Namespace) -> Actor:
    role = ActorRole(args.actor_role)
    if role is not ActorRole.GLOBAL_ADMIN and args.actor_branch is None:
        raise ValueError(f"--actor-branch is required for role {role.value}")
    return Actor(
        id=args.actor_id,
        role=role,
        branch_id=args.actor_branch,
        username=args.actor_name,
    )


def _read_records(path: Path) -> list[dict[str, Any]]:
    return parse_backup(path.read_bytes())


def _emit(payload: object) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _run_command(args: argparse.Namespace, actor: Actor | None) -> None:
    match args.command:
        case "preview":
            assert actor is not None
            _emit(asdict(preview_import(_read_records(args.file), actor)))
        case "import":
            assert actor is not None
            result = apply_import(
                _read_records(args.file),
                actor,
                overwrite=args.overwrite,
                progress_key=args.progress_key,
            )
            payload: dict[str, object] = dict(result.as_dict())
            payload["skipped_records"] = [asdict(record) for record in result.skipped_records]
            _emit(payload)
        case "progress":
            _emit(asdict(get_progress(args.key)))
        case "export":
            assert actor is not None
            date_range = DateRange(start=_parse_date(args.start), end=_parse_date(args.end))
            submissions = export_filtered(actor, date_range, args.branch)
            text = dump_backup(build_backup(submissions, exported_by=actor.label))
            if args.output is None:
                print(text)
            else:
                args.output.write_text(text, encoding="utf-8")
                log.info(f"Exported {len(submissions)} submission(s) to {args.output}")
        case "history":
            _emit(asdict(get_history(args.submission_id, actor=actor)))
        case "purge":
            assert actor is not None
            deleted = delete_by_status(args.status, args.branch, actor)
            _emit({"deleted_count": deleted.deleted_count})
        case "status":
            assert actor is not None
            submission = set_status(
                args.submission_id,
                args.status,
                actor,
                notify=args.notify,
                message=args.message,
            )
            _emit(
                {
                    "id": submission.id,
                    "status": submission.status.value,
                    "approved_by": submission.approved_by,
                    "approved_at": submission.approved_at,
                }
            )
        case _:
            raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        actor = _build_actor(parsed_args) if parsed_args.command != "progress" else None
        if parsed_args.command == "export":
            _parse_date(parsed_args.start)
            _parse_date(parsed_args.end)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        _run_command(parsed_args, actor)
    except AccountOpeningError as exc:
        print(json.dumps(describe_failure(exc).as_dict()), file=sys.stderr)
        sys.exit(1)
    except Exception as exc:
        log.exception("Fatal error while running command")
        print(json.dumps(describe_failure(exc).as_dict()), file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
