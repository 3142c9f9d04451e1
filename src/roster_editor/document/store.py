"""Mutation façade over the vehicle document and its edit history."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, ContextManager, Optional

from roster_editor.runtime import telemetry

from .history import EditHistory
from .model import RosterEntry, Vehicle, VehicleDocument, coerce_number, parse_years

VEHICLE_FIELDS = frozenset({"manufacturer", "model"})
FLEET_NUMBER_FIELDS = frozenset({"start_number", "end_number"})
FLEET_TEXT_FIELDS = frozenset({"start_text", "end_text"})
ENTRY_TEXT_FIELDS = frozenset({"engine", "transmission", "notes", "division"})
ROSTER_FIELDS = (
    FLEET_NUMBER_FIELDS
    | FLEET_TEXT_FIELDS
    | ENTRY_TEXT_FIELDS
    | {"use_numeric_sorting", "years"}
)


class DocumentStore:
    """Owns the canonical document.

    Structural edits (add/delete of vehicles and roster entries) checkpoint
    the pre-edit state synchronously. Field setters do not; their history is
    coalesced by the preview synchronizer.
    """

    def __init__(
        self,
        *,
        name: str = "vehicles",
        document: Optional[VehicleDocument] = None,
        history: Optional[EditHistory] = None,
    ) -> None:
        self.name = name
        self.document = document or VehicleDocument()
        self.history = history or EditHistory()
        self.version = 0

    def add_vehicle(self) -> int:
        with Transaction(self, "add_vehicle"):
            self.document.vehicles.append(Vehicle())
            return len(self.document.vehicles) - 1

    def delete_vehicle(self, index: int) -> bool:
        if self.document.vehicle_at(index) is None:
            return False
        with Transaction(self, "delete_vehicle", index=index):
            del self.document.vehicles[index]
        return True

    def add_roster_entry(self, vehicle_index: int) -> Optional[RosterEntry]:
        vehicle = self.document.vehicle_at(vehicle_index)
        if vehicle is None:
            return None
        with Transaction(self, "add_roster_entry", index=vehicle_index):
            entry = RosterEntry()
            vehicle.roster.append(entry)
        return entry

    def delete_roster_entry(self, vehicle_index: int, entry_id: str) -> bool:
        vehicle = self.document.vehicle_at(vehicle_index)
        if vehicle is None or vehicle.find_entry(entry_id) is None:
            return False
        with Transaction(self, "delete_roster_entry", index=vehicle_index):
            vehicle.roster = [e for e in vehicle.roster if e.entry_id != entry_id]
        return True

    def set_vehicle_field(self, index: int, field: str, value: Any) -> bool:
        if field not in VEHICLE_FIELDS:
            raise ValueError(f"Unknown vehicle field '{field}'")
        vehicle = self.document.vehicle_at(index)
        if vehicle is None:
            return False
        setattr(vehicle, field, "" if value is None else str(value))
        self.version += 1
        return True

    def set_roster_field(
        self, vehicle_index: int, entry_id: str, field: str, value: Any
    ) -> bool:
        if field not in ROSTER_FIELDS:
            raise ValueError(f"Unknown roster field '{field}'")
        vehicle = self.document.vehicle_at(vehicle_index)
        entry = vehicle.find_entry(entry_id) if vehicle else None
        if entry is None:
            return False

        fleet = entry.fleet_selection
        if field in FLEET_NUMBER_FIELDS:
            # Non-numeric input is stored as None; validation flags it.
            setattr(fleet, field, coerce_number(value))
        elif field in FLEET_TEXT_FIELDS:
            setattr(fleet, field, None if value is None else str(value))
        elif field == "use_numeric_sorting":
            fleet.use_numeric_sorting = bool(value)
        elif field == "years":
            entry.years = parse_years(value)
        else:
            setattr(entry, field, "" if value is None else str(value))
        self.version += 1
        return True

    def replace_document(self, document: VehicleDocument, *, reset_history: bool) -> None:
        """Swap the whole document without checkpointing.

        Imports pass ``reset_history=True`` for a fresh baseline; undo/redo
        must keep the stacks they just moved between.
        """

        self.document = document
        if reset_history:
            self.history.clear()
        self.version += 1

    def undo(self) -> bool:
        restored = self.history.undo(self.document)
        if restored is None:
            return False
        self.replace_document(restored, reset_history=False)
        return True

    def redo(self) -> bool:
        restored = self.history.redo(self.document)
        if restored is None:
            return False
        self.replace_document(restored, reset_history=False)
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()


class Transaction(AbstractContextManager["Transaction"]):
    """Checkpoints the pre-edit document and profiles one structural edit."""

    def __init__(self, store: DocumentStore, label: str, *, index: int | None = None) -> None:
        self.store = store
        self.label = label
        self.index = index
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        metadata: dict[str, object] = {"document": self.store.name}
        if self.index is not None:
            metadata["index"] = self.index
        self.store.history.checkpoint(self.store.document, label=self.label)
        self._span_cm = telemetry.span(
            name=f"document::{self.label}",
            component=True,
            metadata=metadata,
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.store.version += 1
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["DocumentStore", "ROSTER_FIELDS", "Transaction", "VEHICLE_FIELDS"]
