from __future__ import annotations

from typing import List, Sequence, Tuple

import pytest

from roster_editor.adapters.textual import TextualEditorAdapter, TextualUIHooks
from roster_editor.config import EditorSettings
from roster_editor.document import Vehicle
from roster_editor.session import EditorMessage, EditorSession
from roster_editor.sync import ManualClock


def make_session() -> tuple[EditorSession, ManualClock]:
    clock = ManualClock()
    return EditorSession(settings=EditorSettings(), clock=clock), clock


def test_adapter_pushes_initial_state() -> None:
    session, _clock = make_session()
    listings: List[Sequence[Tuple[int, Vehicle]]] = []
    previews: List[str] = []
    history: List[Tuple[bool, bool]] = []
    hooks = TextualUIHooks(
        update_listing=listings.append,
        update_preview=previews.append,
        update_history=lambda can_undo, can_redo: history.append((can_undo, can_redo)),
    )

    TextualEditorAdapter(session, hooks)

    assert listings == [[]]
    assert previews == [session.preview_text]
    assert history == [(False, False)]


def test_dispatch_add_vehicle_updates_listing_and_history() -> None:
    session, _clock = make_session()
    listings: List[Sequence[Tuple[int, Vehicle]]] = []
    history: List[Tuple[bool, bool]] = []
    hooks = TextualUIHooks(
        update_listing=listings.append,
        update_history=lambda can_undo, can_redo: history.append((can_undo, can_redo)),
    )
    adapter = TextualEditorAdapter(session, hooks)

    assert adapter.dispatch("add_vehicle") == 0

    assert [index for index, _ in listings[-1]] == [0]
    assert history[-1] == (True, False)

    adapter.dispatch("undo")
    assert history[-1] == (False, True)
    assert listings[-1] == []


def test_preview_hook_fires_after_debounce() -> None:
    session, clock = make_session()
    previews: List[str] = []
    hooks = TextualUIHooks(update_listing=lambda rows: None, update_preview=previews.append)
    adapter = TextualEditorAdapter(session, hooks)
    adapter.dispatch("add_vehicle")
    session.edit_vehicle_field(0, "manufacturer", "Scania")
    count = len(previews)

    clock.advance(350)
    fired = adapter.process_timeouts()

    assert "preview" in fired
    assert len(previews) == count + 1
    assert '"Scania"' in previews[-1]


def test_messages_are_relayed_and_cleared() -> None:
    session, clock = make_session()
    shown: List[EditorMessage] = []
    cleared: List[bool] = []
    logs: List[str] = []
    hooks = TextualUIHooks(
        update_listing=lambda rows: None,
        show_message=shown.append,
        clear_message=lambda: cleared.append(True),
        log=logs.append,
    )
    adapter = TextualEditorAdapter(session, hooks)

    session.load_file("notes.txt", "{}")
    clock.advance(3100)
    adapter.process_timeouts()

    assert [m.kind.value for m in shown] == ["error"]
    assert cleared == [True]
    assert any(line.startswith("message ->") for line in logs)


def test_search_goes_through_session() -> None:
    session, _clock = make_session()
    listings: List[Sequence[Tuple[int, Vehicle]]] = []
    adapter = TextualEditorAdapter(session, TextualUIHooks(update_listing=listings.append))
    adapter.dispatch("add_vehicle")
    session.edit_vehicle_field(0, "manufacturer", "Volvo")

    adapter.search("scania")

    assert listings[-1] == []
    assert session.search_term == "scania"


def test_unknown_action_is_rejected() -> None:
    session, _clock = make_session()
    adapter = TextualEditorAdapter(session, TextualUIHooks(update_listing=lambda rows: None))

    with pytest.raises(KeyError):
        adapter.dispatch("explode")
