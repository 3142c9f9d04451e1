"""Canonical text form of a vehicle document."""

from __future__ import annotations

import json
import math

from .errors import FormatError
from .model import VehicleDocument

MEDIA_TYPE = "application/json"
INDENT = 2


def serialize(document: VehicleDocument) -> str:
    """Deterministic two-space-indented JSON with a fixed key order."""

    return json.dumps(
        document.to_dict(), indent=INDENT, ensure_ascii=False, allow_nan=False
    )


def _finite_float(text: str) -> float:
    number = float(text)
    if math.isinf(number):
        raise FormatError(f"Number out of range: {text}")
    return number


def _reject_constant(name: str) -> float:
    raise FormatError(f"Non-standard number: {name}")


def parse_document(text: str | bytes, *, source: str | None = None) -> VehicleDocument:
    """Parse imported text; any problem surfaces as :class:`FormatError`."""

    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise FormatError(f"File is not UTF-8 text ({exc.reason})", source=source) from exc
    try:
        data = json.loads(
            text, parse_float=_finite_float, parse_constant=_reject_constant
        )
        return VehicleDocument.from_dict(data)
    except json.JSONDecodeError as exc:
        raise FormatError(exc.msg, source=source) from exc
    except FormatError as exc:
        exc.source = source
        raise


def encode_export(document: VehicleDocument) -> bytes:
    return serialize(document).encode("utf-8")


__all__ = ["MEDIA_TYPE", "encode_export", "parse_document", "serialize"]
