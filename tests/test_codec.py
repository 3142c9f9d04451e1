import json

import pytest

from roster_editor.document import (
    FleetSelection,
    FormatError,
    RosterEntry,
    Vehicle,
    VehicleDocument,
    coerce_number,
    encode_export,
    parse_document,
    serialize,
    strict_problems,
    validate_document,
)

FULL_RECORD = {
    "vehicles": [
        {
            "manufacturer": "Alexander Dennis",
            "model": "Enviro400",
            "roster": [
                {
                    "fleet_selection": {
                        "start_number": 1,
                        "end_number": 20,
                        "use_numeric_sorting": False,
                        "start_text": "1A",
                    },
                    "engine": "Cummins",
                    "years": [2014, 2015],
                    "division": "North",
                    "livery": "red",
                }
            ],
            "operator": "Metro",
        }
    ],
    "source": "depot export",
}


def test_round_trip_preserves_optional_and_unknown_keys() -> None:
    document = parse_document(json.dumps(FULL_RECORD))

    assert json.loads(serialize(document)) == FULL_RECORD
    entry = document.vehicles[0].roster[0]
    assert entry.division == "North"
    assert entry.transmission is None
    assert entry.extras == {"livery": "red"}


def test_serialize_uses_two_space_indent_and_fixed_key_order() -> None:
    document = VehicleDocument(
        vehicles=[Vehicle(manufacturer="Ford", model="Transit", roster=[RosterEntry()])]
    )

    text = serialize(document)

    assert text.splitlines()[1] == '  "vehicles": ['
    keys = list(json.loads(text)["vehicles"][0]["roster"][0])
    assert keys == ["fleet_selection", "engine", "transmission", "years", "notes"]
    assert serialize(document) == text


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[1, 2]",
        '{"foo": 1}',
        '{"vehicles": {"a": 1}}',
        '{"vehicles": [1]}',
        '{"vehicles": [{"roster": "none"}]}',
        '{"vehicles": [{"roster": [{"years": 1999}]}]}',
        '{"vehicles": [{"roster": [{"engine": {"cc": 1600}}]}]}',
        '{"vehicles": [], "weight": 1e400}',
        '{"vehicles": [], "weight": NaN}',
    ],
)
def test_malformed_input_raises_format_error(text: str) -> None:
    with pytest.raises(FormatError):
        parse_document(text)


def test_missing_vehicles_message_is_user_readable() -> None:
    with pytest.raises(FormatError) as excinfo:
        parse_document('{"foo": 1}', source="bad.json")

    assert excinfo.value.message == "Missing or invalid 'vehicles' array"
    assert excinfo.value.source == "bad.json"


def test_bytes_with_bom_are_accepted() -> None:
    document = parse_document('\ufeff{"vehicles": []}'.encode("utf-8"))

    assert document == VehicleDocument()


def test_export_bytes_are_utf8_text() -> None:
    document = VehicleDocument(vehicles=[Vehicle(manufacturer="Škoda")])

    assert "Škoda" in encode_export(document).decode("utf-8")


def test_soft_validation_flags_but_keeps_values() -> None:
    entry = RosterEntry()
    entry.fleet_selection.start_number = None
    document = VehicleDocument(vehicles=[Vehicle(manufacturer=" ", model="Civic", roster=[entry])])

    warnings = validate_document(document)

    assert {(w.field, w.vehicle_index) for w in warnings} == {
        ("manufacturer", 0),
        ("start_number", 0),
        ("years", 0),
    }
    assert all(w.entry_id in (None, entry.entry_id) for w in warnings)
    assert document.vehicles[0].manufacturer == " "


def test_strict_problems_accepts_a_valid_file() -> None:
    assert strict_problems(FULL_RECORD) == []


def test_strict_problems_reports_each_shape_issue() -> None:
    data = {
        "vehicles": [
            {
                "manufacturer": "Volvo",
                "roster": [
                    {"fleet_selection": {"start_number": -1}, "years": ["1999"]},
                    "oops",
                ],
            }
        ]
    }

    problems = strict_problems(data)

    assert "vehicles[0].model: expected a string" in problems
    assert any("start_number" in p for p in problems)
    assert any("use_numeric_sorting" in p for p in problems)
    assert any(p.startswith("vehicles[0].roster[0].years") for p in problems)
    assert "vehicles[0].roster[1]: not an object" in problems
    assert strict_problems({"foo": 1}) == ["missing or invalid 'vehicles' array"]


def test_scalar_entry_text_is_stored_as_string() -> None:
    document = parse_document(
        '{"vehicles": [{"roster": [{"engine": 5, "notes": 1.5, "division": true}]}]}'
    )
    entry = document.vehicles[0].roster[0]

    assert (entry.engine, entry.notes, entry.division) == ("5", "1.5", "True")


def test_non_finite_numbers_never_reach_the_export() -> None:
    assert coerce_number(float("inf")) is None
    assert coerce_number(float("nan")) is None
    assert coerce_number("1e400") is None

    document = VehicleDocument(
        vehicles=[Vehicle(roster=[RosterEntry(fleet_selection=FleetSelection(start_number=float("inf")))])]
    )
    with pytest.raises(ValueError):
        serialize(document)
