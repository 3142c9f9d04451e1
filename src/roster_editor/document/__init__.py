"""Vehicle document model, canonical codec, and undo/redo history."""

from .codec import MEDIA_TYPE, encode_export, parse_document, serialize
from .errors import DocumentError, FileTypeRejected, FormatError, ValidationWarning
from .history import DEFAULT_MAX_DEPTH, EditHistory, HistorySnapshot
from .model import (
    FleetSelection,
    RosterEntry,
    Vehicle,
    VehicleDocument,
    coerce_number,
    parse_years,
)
from .store import DocumentStore, Transaction
from .validation import (
    strict_problems,
    validate_document,
    validate_entry,
    validate_vehicle,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DocumentError",
    "DocumentStore",
    "EditHistory",
    "FileTypeRejected",
    "FleetSelection",
    "FormatError",
    "HistorySnapshot",
    "MEDIA_TYPE",
    "RosterEntry",
    "Transaction",
    "ValidationWarning",
    "Vehicle",
    "VehicleDocument",
    "coerce_number",
    "encode_export",
    "parse_document",
    "parse_years",
    "serialize",
    "strict_problems",
    "validate_document",
    "validate_entry",
    "validate_vehicle",
]
