import pytest

from roster_editor.document import (
    DocumentStore,
    FleetSelection,
    RosterEntry,
    Vehicle,
    VehicleDocument,
)


def make_store(*vehicles: Vehicle) -> DocumentStore:
    return DocumentStore(document=VehicleDocument(vehicles=list(vehicles)))


def test_add_vehicle_checkpoints_previous_state() -> None:
    store = DocumentStore()

    index = store.add_vehicle()

    assert index == 0
    assert store.document.vehicles == [Vehicle()]
    assert store.can_undo() is True
    assert store.history.past[0].restore() == VehicleDocument()


def test_delete_vehicle_out_of_range_is_silent() -> None:
    store = make_store(Vehicle(manufacturer="Ford"))

    assert store.delete_vehicle(3) is False
    assert store.delete_vehicle(-1) is False
    assert store.can_undo() is False
    assert len(store.document.vehicles) == 1


def test_delete_vehicle_removes_and_undo_restores() -> None:
    store = make_store(Vehicle(manufacturer="Ford"), Vehicle(manufacturer="Audi"))

    assert store.delete_vehicle(0) is True
    assert [v.manufacturer for v in store.document.vehicles] == ["Audi"]

    assert store.undo() is True
    assert [v.manufacturer for v in store.document.vehicles] == ["Ford", "Audi"]
    assert store.can_redo() is True

    assert store.redo() is True
    assert [v.manufacturer for v in store.document.vehicles] == ["Audi"]


def test_add_roster_entry_uses_defaults() -> None:
    store = make_store(Vehicle())

    entry = store.add_roster_entry(0)

    assert entry is not None
    assert entry.fleet_selection == FleetSelection(
        start_number=0, end_number=0, use_numeric_sorting=True
    )
    assert (entry.engine, entry.transmission, entry.notes) == ("", "", "")
    assert entry.years == []
    assert store.add_roster_entry(5) is None


def test_delete_roster_entry_targets_identity_not_content() -> None:
    first = RosterEntry(notes="same")
    second = RosterEntry(notes="same")
    store = make_store(Vehicle(roster=[first, second]))
    assert first == second

    assert store.delete_roster_entry(0, first.entry_id) is True

    remaining = store.document.vehicles[0].roster
    assert [e.entry_id for e in remaining] == [second.entry_id]
    assert store.delete_roster_entry(0, "missing") is False


def test_field_setters_do_not_checkpoint() -> None:
    entry = RosterEntry()
    store = make_store(Vehicle(roster=[entry]))

    store.set_vehicle_field(0, "manufacturer", "Volvo")
    store.set_roster_field(0, entry.entry_id, "engine", "D13")

    assert store.document.vehicles[0].manufacturer == "Volvo"
    assert entry.engine == "D13"
    assert store.can_undo() is False


def test_numeric_fields_are_coerced_leniently() -> None:
    entry = RosterEntry()
    store = make_store(Vehicle(roster=[entry]))

    store.set_roster_field(0, entry.entry_id, "start_number", "12")
    store.set_roster_field(0, entry.entry_id, "end_number", "abc")

    assert entry.fleet_selection.start_number == 12
    assert entry.fleet_selection.end_number is None

    store.set_roster_field(0, entry.entry_id, "end_number", "1.5")
    assert entry.fleet_selection.end_number == 1.5


def test_years_are_parsed_from_text() -> None:
    entry = RosterEntry()
    store = make_store(Vehicle(roster=[entry]))

    store.set_roster_field(0, entry.entry_id, "years", "1998, 1999, x, 1998, ")

    assert entry.years == [1998, 1999]


def test_unknown_fields_are_rejected() -> None:
    entry = RosterEntry()
    store = make_store(Vehicle(roster=[entry]))

    with pytest.raises(ValueError):
        store.set_vehicle_field(0, "colour", "red")
    with pytest.raises(ValueError):
        store.set_roster_field(0, entry.entry_id, "colour", "red")


def test_replace_document_history_reset_is_explicit() -> None:
    store = DocumentStore()
    store.add_vehicle()

    store.replace_document(VehicleDocument(), reset_history=False)
    assert store.can_undo() is True

    store.replace_document(VehicleDocument(), reset_history=True)
    assert store.can_undo() is False
    assert store.can_redo() is False


def test_version_advances_on_every_mutation() -> None:
    store = DocumentStore()
    start = store.version

    store.add_vehicle()
    store.set_vehicle_field(0, "model", "Civic")

    assert store.version == start + 2


def test_failed_checkpoint_never_opens_the_edit_span(monkeypatch: pytest.MonkeyPatch) -> None:
    from roster_editor.runtime import telemetry

    store = DocumentStore()
    opened = []

    def broken_checkpoint(*_args, **_kwargs):
        raise RuntimeError("history unavailable")

    monkeypatch.setattr(store.history, "checkpoint", broken_checkpoint)
    monkeypatch.setattr(telemetry, "span", lambda *args, **kwargs: opened.append(kwargs))

    with pytest.raises(RuntimeError):
        store.add_vehicle()

    assert opened == []
    assert store.document.vehicles == []
    assert store.version == 0
