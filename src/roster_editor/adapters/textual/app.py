"""Textual app hosting the roster editor session."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, VerticalScroll
    from textual.widgets import Footer, Header, Input, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use roster_editor.adapters.textual.app"
    ) from exc

from roster_editor.config import EditorSettings
from roster_editor.document import Vehicle
from roster_editor.runtime import telemetry
from roster_editor.session import EditorMessage, EditorSession, MessageKind

from .controller import TextualEditorAdapter, TextualUIHooks


def render_listing(rows: Sequence[Tuple[int, Vehicle]], session: EditorSession) -> str:
    lines = []
    for index, vehicle in rows:
        marker = "[+]" if session.is_collapsed(index) else "[-]"
        title = " ".join(part for part in (vehicle.manufacturer, vehicle.model) if part)
        lines.append(f"{marker} Vehicle {index + 1}: {title or '(unnamed)'}")
        if session.is_collapsed(index):
            continue
        for entry in vehicle.roster:
            fleet = entry.fleet_selection
            years = ", ".join(str(year) for year in entry.years or [])
            lines.append(
                f"    #{fleet.start_number}-{fleet.end_number}"
                f"  {entry.engine or ''}  {entry.transmission or ''}  {years}".rstrip()
            )
    return "\n".join(lines) or "No vehicles"


class RosterEditorApp(App[None]):
    """Listing, preview and status line around one :class:`EditorSession`."""

    CSS = """
	#search { dock: top; }
	#listing, #preview {
		width: 1fr;
		border: round $accent;
		padding: 0 1;
	}
	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+z", "undo", "Undo"),
        ("ctrl+y", "redo", "Redo"),
        ("ctrl+n", "add_vehicle", "Add vehicle"),
        ("ctrl+s", "export", "Export"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self, *, path: Optional[Path] = None, settings: Optional[EditorSettings] = None
    ) -> None:
        super().__init__()
        self.session = EditorSession(settings=settings or EditorSettings.from_env())
        self.adapter: TextualEditorAdapter | None = None
        self._path = path
        self._listing: Static | None = None
        self._preview: Static | None = None
        self._status: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Input(placeholder="Search manufacturer, model or fleet number", id="search")
        with Horizontal():
            with VerticalScroll():
                self._listing = Static("", id="listing")
                yield self._listing
            with VerticalScroll():
                self._preview = Static("", id="preview")
                yield self._preview
        self._status = Static("", id="status-line")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_listing=self._update_listing,
            update_preview=self._update_preview,
            update_history=self._update_history,
            show_message=self._show_message,
            clear_message=lambda: self._set_status(""),
        )
        self.adapter = TextualEditorAdapter(self.session, hooks)
        if self._path is not None:
            self.session.load_path(self._path)
        self.set_interval(0.05, self.adapter.process_timeouts)

    def on_input_changed(self, event: Input.Changed) -> None:
        if self.adapter:
            self.adapter.search(event.value)

    def action_undo(self) -> None:
        if self.adapter:
            self.adapter.dispatch("undo")

    def action_redo(self) -> None:
        if self.adapter:
            self.adapter.dispatch("redo")

    def action_add_vehicle(self) -> None:
        if self.adapter:
            self.adapter.dispatch("add_vehicle")

    def action_export(self) -> None:
        self.session.save_export(self._path.parent if self._path else Path.cwd())

    def _update_listing(self, rows: Sequence[Tuple[int, Vehicle]]) -> None:
        if self._listing:
            self._listing.update(Text(render_listing(rows, self.session)))

    def _update_preview(self, text: str) -> None:
        if self._preview:
            self._preview.update(Text(text))

    def _update_history(self, can_undo: bool, can_redo: bool) -> None:
        self.sub_title = f"undo {'on' if can_undo else 'off'} | redo {'on' if can_redo else 'off'}"

    def _show_message(self, message: EditorMessage) -> None:
        style = "bold red" if message.kind is MessageKind.ERROR else "green"
        self._set_status(message.text, style)

    def _set_status(self, text: str, style: str = "") -> None:
        if self._status:
            self._status.update(Text(text, style=style))


def run(path: Optional[Path] = None) -> None:
    telemetry.configure(preset="quiet")
    RosterEditorApp(path=path).run()


__all__ = ["RosterEditorApp", "render_listing", "run"]
