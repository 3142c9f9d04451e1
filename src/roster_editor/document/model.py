"""Vehicle document records and their plain-data conversions."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .errors import FormatError

Number = Union[int, float]

_FLEET_KEYS = ("start_number", "end_number", "use_numeric_sorting", "start_text", "end_text")
_ENTRY_KEYS = ("fleet_selection", "engine", "transmission", "years", "notes", "division")
_VEHICLE_KEYS = ("manufacturer", "model", "roster")


def _new_entry_id() -> str:
    return uuid.uuid4().hex


def _extras(data: Mapping[str, Any], known: Iterable[str]) -> Dict[str, Any]:
    skip = set(known)
    return {key: value for key, value in data.items() if key not in skip}


def _finite(number: float) -> Optional[float]:
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def _optional_text(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (Mapping, list)):
        raise FormatError(f"'{key}' must be a string")
    return str(value)


def coerce_number(value: Any) -> Optional[Number]:
    """Coerce user input to a finite number; anything else becomes ``None``."""

    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _finite(value)
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return _finite(float(text))
    except ValueError:
        return None


def parse_years(value: Any) -> List[int]:
    """Accept ``"1998, 1999"`` or a sequence; drop non-integers and repeats."""

    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    years: List[int] = []
    for item in items:
        number = coerce_number(item)
        if number is None or int(number) != number:
            continue
        year = int(number)
        if year not in years:
            years.append(year)
    return years


@dataclass(slots=True)
class FleetSelection:
    """Inclusive range of fleet numbers a roster entry applies to."""

    start_number: Optional[Number] = 0
    end_number: Optional[Number] = 0
    use_numeric_sorting: bool = True
    start_text: Optional[str] = None
    end_text: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FleetSelection":
        return cls(
            start_number=coerce_number(data.get("start_number")),
            end_number=coerce_number(data.get("end_number")),
            use_numeric_sorting=bool(data.get("use_numeric_sorting", True)),
            start_text=_optional_text(data, "start_text"),
            end_text=_optional_text(data, "end_text"),
            extras=_extras(data, _FLEET_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "start_number": self.start_number,
            "end_number": self.end_number,
            "use_numeric_sorting": self.use_numeric_sorting,
        }
        if self.start_text is not None:
            data["start_text"] = self.start_text
        if self.end_text is not None:
            data["end_text"] = self.end_text
        data.update(self.extras)
        return data


@dataclass(slots=True)
class RosterEntry:
    """One roster line of a vehicle.

    ``entry_id`` is synthetic: it never reaches the serialized form and does
    not take part in equality, so two entries with the same content compare
    equal while deletion can still target one of them.
    """

    fleet_selection: FleetSelection = field(default_factory=FleetSelection)
    engine: Optional[str] = ""
    transmission: Optional[str] = ""
    years: Optional[List[int]] = field(default_factory=list)
    notes: Optional[str] = ""
    division: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)
    entry_id: str = field(default_factory=_new_entry_id, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RosterEntry":
        if not isinstance(data, Mapping):
            raise FormatError("Roster entries must be objects")
        fleet = data.get("fleet_selection")
        if fleet is not None and not isinstance(fleet, Mapping):
            raise FormatError("'fleet_selection' must be an object")
        years = data.get("years")
        if years is not None and not isinstance(years, (list, str)):
            raise FormatError("'years' must be an array")
        return cls(
            fleet_selection=FleetSelection.from_dict(fleet or {}),
            engine=_optional_text(data, "engine"),
            transmission=_optional_text(data, "transmission"),
            years=None if years is None else parse_years(years),
            notes=_optional_text(data, "notes"),
            division=_optional_text(data, "division"),
            extras=_extras(data, _ENTRY_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"fleet_selection": self.fleet_selection.to_dict()}
        for key in ("engine", "transmission", "years", "notes", "division"):
            value = getattr(self, key)
            if value is not None:
                data[key] = list(value) if key == "years" else value
        data.update(self.extras)
        return data

    @property
    def start_key(self) -> Number:
        return self.fleet_selection.start_number or 0


@dataclass(slots=True)
class Vehicle:
    manufacturer: str = ""
    model: str = ""
    roster: List[RosterEntry] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Vehicle":
        if not isinstance(data, Mapping):
            raise FormatError("Vehicles must be objects")
        roster = data.get("roster") or []
        if not isinstance(roster, list):
            raise FormatError("'roster' must be an array")
        return cls(
            manufacturer=str(data.get("manufacturer") or ""),
            model=str(data.get("model") or ""),
            roster=[RosterEntry.from_dict(item) for item in roster],
            extras=_extras(data, _VEHICLE_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "manufacturer": self.manufacturer,
            "model": self.model,
            "roster": [entry.to_dict() for entry in self.roster],
        }
        data.update(self.extras)
        return data

    def find_entry(self, entry_id: str) -> Optional[RosterEntry]:
        for entry in self.roster:
            if entry.entry_id == entry_id:
                return entry
        return None


@dataclass(slots=True)
class VehicleDocument:
    """Root aggregate: the ordered vehicle list. Order is the display index."""

    vehicles: List[Vehicle] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "VehicleDocument":
        if not isinstance(data, Mapping):
            raise FormatError("Top-level value must be an object")
        vehicles = data.get("vehicles")
        if not isinstance(vehicles, list):
            raise FormatError("Missing or invalid 'vehicles' array")
        return cls(
            vehicles=[Vehicle.from_dict(item) for item in vehicles],
            extras=_extras(data, ("vehicles",)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"vehicles": [v.to_dict() for v in self.vehicles]}
        data.update(self.extras)
        return data

    def vehicle_at(self, index: int) -> Optional[Vehicle]:
        if 0 <= index < len(self.vehicles):
            return self.vehicles[index]
        return None


__all__ = [
    "FleetSelection",
    "Number",
    "RosterEntry",
    "Vehicle",
    "VehicleDocument",
    "coerce_number",
    "parse_years",
]
