"""Pure derivations of the vehicle document: ordering, autocomplete, filtering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from roster_editor.document import Vehicle, VehicleDocument, serialize
from roster_editor.document.model import Number


def sort_rosters(document: VehicleDocument) -> VehicleDocument:
    """Return a copy whose rosters are ordered by start number (missing = 0).

    ``sorted`` is stable, so equal start numbers keep their input order. The
    copy shares its ``RosterEntry`` objects with ``document``.
    """

    return VehicleDocument(
        vehicles=[
            Vehicle(
                manufacturer=vehicle.manufacturer,
                model=vehicle.model,
                roster=sorted(vehicle.roster, key=lambda entry: entry.start_key),
                extras=vehicle.extras,
            )
            for vehicle in document.vehicles
        ],
        extras=document.extras,
    )


@dataclass(frozen=True, slots=True)
class AutocompleteIndex:
    manufacturers: Tuple[str, ...] = ()
    models: Tuple[str, ...] = ()
    engines: Tuple[str, ...] = ()
    transmissions: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, Tuple[str, ...]]:
        return {
            "manufacturers": self.manufacturers,
            "models": self.models,
            "engines": self.engines,
            "transmissions": self.transmissions,
        }


def _sorted_unique(values: Iterable[Optional[str]]) -> Tuple[str, ...]:
    unique: Set[str] = {value for value in values if value}
    return tuple(sorted(unique))


def build_autocomplete_index(document: VehicleDocument) -> AutocompleteIndex:
    vehicles = document.vehicles
    entries = [entry for vehicle in vehicles for entry in vehicle.roster]
    return AutocompleteIndex(
        manufacturers=_sorted_unique(v.manufacturer for v in vehicles),
        models=_sorted_unique(v.model for v in vehicles),
        engines=_sorted_unique(e.engine for e in entries),
        transmissions=_sorted_unique(e.transmission for e in entries),
    )


def _number_text(number: Number) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def vehicle_matches(vehicle: Vehicle, needle: str) -> bool:
    """``needle`` must already be stripped and lower-cased."""

    if needle in vehicle.manufacturer.lower() or needle in vehicle.model.lower():
        return True
    for entry in vehicle.roster:
        fleet = entry.fleet_selection
        for number in (fleet.start_number, fleet.end_number):
            if number is not None and needle in _number_text(number):
                return True
    return False


def filter_indexed(document: VehicleDocument, term: str) -> List[Tuple[int, Vehicle]]:
    """Matching vehicles paired with their index in the document."""

    needle = (term or "").strip().lower()
    return [
        (index, vehicle)
        for index, vehicle in enumerate(document.vehicles)
        if not needle or vehicle_matches(vehicle, needle)
    ]


def filter_vehicles(document: VehicleDocument, term: str) -> List[Vehicle]:
    """Vehicle-level match; included vehicles keep their whole roster."""

    return [vehicle for _, vehicle in filter_indexed(document, term)]


@dataclass(slots=True)
class DerivedViews:
    """Everything the view layer renders, computed in one pass."""

    ordered: VehicleDocument = field(default_factory=VehicleDocument)
    autocomplete: AutocompleteIndex = field(default_factory=AutocompleteIndex)
    filtered: List[Tuple[int, Vehicle]] = field(default_factory=list)
    preview_text: str = ""


def derive(document: VehicleDocument, term: str = "") -> DerivedViews:
    ordered = sort_rosters(document)
    return DerivedViews(
        ordered=ordered,
        autocomplete=build_autocomplete_index(document),
        filtered=filter_indexed(ordered, term),
        preview_text=serialize(ordered),
    )


__all__ = [
    "AutocompleteIndex",
    "DerivedViews",
    "build_autocomplete_index",
    "derive",
    "filter_indexed",
    "filter_vehicles",
    "sort_rosters",
    "vehicle_matches",
]
