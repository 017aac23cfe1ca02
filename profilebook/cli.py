"""
Command-line interface for profilebook.

Notes
-----
The CLI is intentionally thin. It parses arguments, loads the record store and
delegates to engine operations. Selection is not persisted, so commands that
act on "the selected record" select it by list position first.

Exit codes
----------
- 0: success
- 2: validation, lookup, or configuration error (nothing was written)
- 3: the change was applied but could not be saved
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Final

from profile_engine.data_models import ProfileRecord, with_field
from profile_engine.errors import ProfileEngineError
from profile_engine.init_store import init_store, store_paths_as_text
from profile_engine.logging_setup import setup_logging
from profile_engine.paths import StorePaths, resolve_store_paths
from profile_engine.record_store.backends import open_record_store
from profile_engine.record_store.errors import NoSelectionError, PersistenceError, ValidationError
from profile_engine.record_store.service import RecordStore
from profile_engine.settings import BACKENDS, EngineSettings, load_settings, with_overrides

EXIT_OK: Final[int] = 0
EXIT_ERROR: Final[int] = 2
EXIT_NOT_SAVED: Final[int] = 3

# CLI option dest -> record attribute.
_FIELD_OPTIONS: Final[dict[str, str]] = {
    "first_name": "first_name",
    "last_name": "last_name",
    "dob": "date_of_birth",
    "nationality": "nationality",
    "short_bio": "short_bio",
    "picture": "picture",
}


def _add_common_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--data-root",
        default=None,
        help="Override the data root (primarily for testing). If omitted, defaults are used.",
    )
    p.add_argument(
        "--backend",
        choices=sorted(BACKENDS),
        default=None,
        help="Storage backend for this invocation (default: from settings.json).",
    )
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level for this invocation (default: from settings.json).",
    )


def _add_field_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--first-name", default=None, help="First name")
    p.add_argument("--last-name", default=None, help="Last name")
    p.add_argument("--dob", default=None, help="Date of birth (YYYY-MM-DD)")
    p.add_argument("--nationality", default=None, help="Nationality")
    p.add_argument("--short-bio", default=None, help="Short biography")
    pic = p.add_mutually_exclusive_group(required=False)
    pic.add_argument("--picture", default=None, help="Picture URI")
    pic.add_argument("--no-picture", action="store_true", help="Clear the picture")


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="profilebook",
        description="Local profile records manager",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init_p = sub.add_parser("init", help="Create the data root layout and default settings")
    _add_common_options(init_p)
    init_p.add_argument(
        "--print-paths",
        action="store_true",
        help="Print resolved paths after initialization",
    )

    list_p = sub.add_parser("list", help="List records in display order")
    _add_common_options(list_p)

    show_p = sub.add_parser("show", help="Render one profile (default: the first record)")
    _add_common_options(show_p)
    show_p.add_argument("--index", type=int, default=None, help="Position of the record to show")

    create_p = sub.add_parser(
        "create",
        help="Create a record. Unspecified fields keep the built-in default values.",
    )
    _add_common_options(create_p)
    _add_field_options(create_p)

    edit_p = sub.add_parser("edit", help="Edit a record. Unspecified fields keep their values.")
    _add_common_options(edit_p)
    edit_p.add_argument("--index", type=int, required=True, help="Position of the record to edit")
    _add_field_options(edit_p)

    delete_p = sub.add_parser("delete", help="Delete a record")
    _add_common_options(delete_p)
    delete_p.add_argument("--index", type=int, required=True, help="Position of the record to delete")

    return parser


def render_profile(record: ProfileRecord) -> str:
    """
    Render a profile as readable text.

    Parameters
    ----------
    record:
        Record to render.

    Returns
    -------
    str
        Multi-line profile text.
    """
    return "\n".join(
        [
            f"Picture: {record.picture or 'No Image'}",
            record.display_name,
            f"Date of Birth: {record.date_of_birth}",
            f"Nationality: {record.nationality}",
            "Short Bio:",
            record.short_bio,
        ]
    )


def _apply_field_options(draft: ProfileRecord, args: argparse.Namespace) -> ProfileRecord:
    for dest, attr in _FIELD_OPTIONS.items():
        value = getattr(args, dest)
        if value is not None:
            draft = with_field(draft, attr, value)
    if args.no_picture:
        draft = with_field(draft, "picture", None)
    return draft


async def _run_store_command(args: argparse.Namespace, paths: StorePaths, settings: EngineSettings) -> int:
    store: RecordStore = open_record_store(paths, settings)
    await store.initialize()

    if args.command == "list":
        if not store.records:
            print("No records.")
        for index, record in enumerate(store.records):
            marker = "*" if record is store.selected else " "
            print(f"{marker} {index}: {record.display_name}")
        return EXIT_OK

    if args.command == "show":
        if args.index is not None:
            store.select_index(args.index)
        if store.selected is None:
            raise NoSelectionError("No record is selected.")
        print(render_profile(store.selected))
        return EXIT_OK

    if args.command == "create":
        draft = _apply_field_options(store.begin_create(), args)
        record = await store.commit_create(draft)
        print(f"Created {len(store.records) - 1}: {record.display_name}")
        return EXIT_OK

    if args.command == "edit":
        target = store.select_index(args.index)
        draft = _apply_field_options(store.begin_edit(target), args)
        record = await store.commit_edit(draft, target)
        print(f"Updated {args.index}: {record.display_name}")
        return EXIT_OK

    if args.command == "delete":
        store.select_index(args.index)
        removed = await store.delete_selected()
        print(f"Deleted: {removed.display_name}")
        return EXIT_OK

    raise AssertionError(f"unhandled command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Parameters
    ----------
    argv:
        Optional argument vector. If None, argparse uses sys.argv.

    Returns
    -------
    int
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    data_root = Path(args.data_root) if args.data_root else None

    try:
        settings = with_overrides(
            load_settings(data_root=data_root), backend=args.backend, log_level=args.log_level
        )

        if args.command == "init":
            paths = init_store(data_root=data_root, settings=settings)
            if args.print_paths:
                print(store_paths_as_text(paths))
            return EXIT_OK

        paths = resolve_store_paths(data_root)
        setup_logging(settings.log_level, log_file=paths.logs_root / "profilebook.jsonl")
        return asyncio.run(_run_store_command(args, paths, settings))
    except ValidationError as exc:
        for field_name, message in exc.field_errors.items():
            print(f"ERROR: {field_name}: {message}")
        return EXIT_ERROR
    except PersistenceError as exc:
        print(f"WARNING: saved copy may be stale: {exc.cause}")
        return EXIT_NOT_SAVED
    except ProfileEngineError as exc:
        print(f"ERROR: {exc}")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
