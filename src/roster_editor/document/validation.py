"""Soft field checks for display, plus the strict shape check used by ``validate``."""

from __future__ import annotations

from typing import Any, List, Mapping

from .errors import ValidationWarning
from .model import RosterEntry, Vehicle, VehicleDocument


def validate_vehicle(vehicle: Vehicle, index: int) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    if not vehicle.manufacturer.strip():
        warnings.append(ValidationWarning("manufacturer", "Manufacturer is empty", index))
    if not vehicle.model.strip():
        warnings.append(ValidationWarning("model", "Model is empty", index))
    for entry in vehicle.roster:
        warnings.extend(validate_entry(entry, index))
    return warnings


def validate_entry(entry: RosterEntry, vehicle_index: int) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    fleet = entry.fleet_selection
    for name in ("start_number", "end_number"):
        if getattr(fleet, name) is None:
            warnings.append(
                ValidationWarning(name, f"{name} is not a number", vehicle_index, entry.entry_id)
            )
    if not entry.years:
        warnings.append(
            ValidationWarning("years", "No years listed", vehicle_index, entry.entry_id)
        )
    return warnings


def validate_document(document: VehicleDocument) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    for index, vehicle in enumerate(document.vehicles):
        warnings.extend(validate_vehicle(vehicle, index))
    return warnings


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _optional_str(data: Mapping[str, Any], key: str) -> bool:
    return data.get(key) is None or isinstance(data[key], str)


def strict_problems(data: Any) -> List[str]:
    """Shape problems of raw parsed JSON; an empty list means the file is valid."""

    if not isinstance(data, Mapping):
        return ["top level is not an object"]
    vehicles = data.get("vehicles")
    if not isinstance(vehicles, list):
        return ["missing or invalid 'vehicles' array"]

    problems: List[str] = []
    for v_index, vehicle in enumerate(vehicles):
        where = f"vehicles[{v_index}]"
        if not isinstance(vehicle, Mapping):
            problems.append(f"{where}: not an object")
            continue
        for key in ("manufacturer", "model"):
            if not isinstance(vehicle.get(key), str):
                problems.append(f"{where}.{key}: expected a string")
        roster = vehicle.get("roster")
        if not isinstance(roster, list):
            problems.append(f"{where}.roster: expected an array")
            continue
        for r_index, entry in enumerate(roster):
            problems.extend(_entry_problems(entry, f"{where}.roster[{r_index}]"))
    return problems


def _entry_problems(entry: Any, where: str) -> List[str]:
    if not isinstance(entry, Mapping):
        return [f"{where}: not an object"]
    problems: List[str] = []
    for key in ("engine", "transmission", "notes", "division"):
        if not _optional_str(entry, key):
            problems.append(f"{where}.{key}: expected a string")
    years = entry.get("years")
    if years is not None and not (
        isinstance(years, list) and all(_is_int(y) and 0 <= y <= 0xFFFF for y in years)
    ):
        problems.append(f"{where}.years: expected an array of integers")

    fleet = entry.get("fleet_selection")
    if not isinstance(fleet, Mapping):
        problems.append(f"{where}.fleet_selection: expected an object")
        return problems
    for key in ("start_number", "end_number"):
        value = fleet.get(key)
        if value is not None and not (_is_int(value) and value >= 0):
            problems.append(f"{where}.fleet_selection.{key}: expected a non-negative integer")
    for key in ("start_text", "end_text"):
        if not _optional_str(fleet, key):
            problems.append(f"{where}.fleet_selection.{key}: expected a string")
    if not isinstance(fleet.get("use_numeric_sorting"), bool):
        problems.append(f"{where}.fleet_selection.use_numeric_sorting: expected a boolean")
    return problems


__all__ = [
    "strict_problems",
    "validate_document",
    "validate_entry",
    "validate_vehicle",
]
