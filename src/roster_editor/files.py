"""Filename acceptance and discovery of vehicle files on disk."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from roster_editor.document import FileTypeRejected

ACCEPTED_SUFFIX = ".json"


def is_accepted_filename(filename: Optional[str]) -> bool:
    return bool(filename) and str(filename).lower().endswith(ACCEPTED_SUFFIX)


def ensure_accepted_filename(filename: Optional[str]) -> str:
    if not is_accepted_filename(filename):
        raise FileTypeRejected(filename)
    return str(filename)


def find_json_files(root: Path) -> List[Path]:
    """Every ``.json`` file under ``root``, depth first, in a stable order."""

    if not root.is_dir():
        return []
    found: List[Path] = []
    for path in sorted(root.iterdir()):
        if path.is_dir():
            found.extend(find_json_files(path))
        elif path.is_file() and is_accepted_filename(path.name):
            found.append(path)
    return found


__all__ = [
    "ACCEPTED_SUFFIX",
    "ensure_accepted_filename",
    "find_json_files",
    "is_accepted_filename",
]
