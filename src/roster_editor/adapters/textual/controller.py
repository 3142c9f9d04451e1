"""Hook-based adapter that relays editor session events to a Textual host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from roster_editor.derive import DerivedViews
from roster_editor.document import Vehicle
from roster_editor.session import EditorMessage, EditorSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_listing: Callable[[Sequence[Tuple[int, Vehicle]]], None]
    update_preview: Callable[[str], None] = _noop
    update_history: Callable[[bool, bool], None] = _noop
    show_message: Callable[[EditorMessage], None] = _noop
    clear_message: Callable[[], None] = _noop
    log: Callable[[str], None] = _noop


class TextualEditorAdapter:
    """Pushes the session's views into the hooks and maps named actions."""

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._actions: Dict[str, Callable[[], object]] = {
            "undo": session.undo,
            "redo": session.redo,
            "add_vehicle": session.add_vehicle,
        }
        self._subscribe_events()
        self._push_views(session.views)
        self.hooks.update_history(session.can_undo(), session.can_redo())

    def dispatch(self, action: str) -> object:
        handler = self._actions.get(action)
        if handler is None:
            raise KeyError(f"Unknown editor action '{action}'")
        self._log_state("action ->", action=action)
        return handler()

    def search(self, term: str) -> None:
        self.session.set_search(term)

    def process_timeouts(self) -> List[str]:
        fired = self.session.process_timeouts()
        if fired:
            self._log_state("timeout ->", fired=",".join(fired))
        return fired

    def _subscribe_events(self) -> None:
        bus = self.session.bus
        bus.subscribe("views.refresh", self._on_views)
        bus.subscribe("listing.changed", self._on_listing)
        bus.subscribe("history.changed", self._on_history)
        bus.subscribe("message", self._on_message)
        bus.subscribe("message.clear", lambda _payload: self.hooks.clear_message())

    def _on_views(self, payload: object) -> None:
        if isinstance(payload, DerivedViews):
            self._push_views(payload)

    def _on_listing(self, payload: object) -> None:
        if isinstance(payload, list):
            self.hooks.update_listing(payload)

    def _on_history(self, payload: object) -> None:
        if isinstance(payload, tuple) and len(payload) == 2:
            can_undo, can_redo = payload
            self.hooks.update_history(bool(can_undo), bool(can_redo))

    def _on_message(self, payload: object) -> None:
        if isinstance(payload, EditorMessage):
            self._log_state("message ->", kind=payload.kind.value, text=payload.text)
            self.hooks.show_message(payload)

    def _push_views(self, views: DerivedViews) -> None:
        self.hooks.update_listing(views.filtered)
        self.hooks.update_preview(views.preview_text)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "vehicles": len(self.session.document.vehicles),
            "version": self.session.store.version,
            "state": self.session.state.value,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["TextualEditorAdapter", "TextualUIHooks"]
