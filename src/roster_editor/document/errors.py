"""Error and warning types raised at the document boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class DocumentError(RuntimeError):
    """Base class for errors surfaced by the document layer."""


class FormatError(DocumentError):
    """Raised when imported text is unparseable or lacks the ``vehicles`` list."""

    def __init__(self, message: str, *, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source


class FileTypeRejected(DocumentError):
    """Raised when a picked or dropped file is not a ``.json`` file."""

    def __init__(self, filename: Optional[str]) -> None:
        super().__init__(f"Rejected file '{filename or ''}': expected a .json file")
        self.filename = filename


@dataclass(frozen=True, slots=True)
class ValidationWarning:
    """Soft constraint failure. The stored value is kept; only display flags it."""

    field: str
    message: str
    vehicle_index: int
    entry_id: Optional[str] = None
