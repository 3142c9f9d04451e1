"""Command line entry point: check vehicle files or open the editor."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from roster_editor.document import strict_problems
from roster_editor.files import find_json_files
from roster_editor.runtime import telemetry


def check_file(path: Path) -> List[str]:
    """Problems found in one vehicle file; empty when it is valid."""

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        return [f"unreadable: {exc.strerror or exc}"]
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return [f"not valid JSON: {exc}"]
    return strict_problems(data)


def validate_tree(root: Path, *, out: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    files = find_json_files(root)
    failures = 0
    with telemetry.span("cli::validate", component="cli", metadata={"root": str(root)}) as handle:
        for path in files:
            print(f"Checking file {path}", file=out)
            problems = check_file(path)
            if problems:
                failures += 1
                print(f"File {path} is invalid:", file=out)
                for problem in problems:
                    print(f"  - {problem}", file=out)
            else:
                print(f"File {path} is valid", file=out)
        handle.add_metadata("files", len(files))
        handle.add_metadata("failures", failures)
    if not files:
        print(f"No .json files found under {root}", file=out)
    return 1 if failures else 0


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="roster-editor", description="Edit and check vehicle roster files."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser(
        "validate", help="Check every .json file under a directory"
    )
    validate.add_argument(
        "root",
        nargs="?",
        default=os.environ.get("ROSTER_EDITOR_VEHICLES_DIR", "vehicles"),
        help="Directory to scan recursively (default: vehicles)",
    )

    edit = commands.add_parser("edit", help="Open the interactive editor")
    edit.add_argument("file", nargs="?", help="Vehicle file to load on start")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.command == "validate":
        return validate_tree(Path(args.root))

    from roster_editor.adapters.textual.app import run

    run(Path(args.file) if args.file else None)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual entry
    raise SystemExit(main())
