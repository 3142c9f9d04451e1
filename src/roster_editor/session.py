"""Editor session: the single object a host owns to drive the document engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from roster_editor.config import EditorSettings
from roster_editor.derive import AutocompleteIndex, DerivedViews, derive, sort_rosters
from roster_editor.document import (
    MEDIA_TYPE,
    DocumentStore,
    EditHistory,
    FileTypeRejected,
    FormatError,
    RosterEntry,
    ValidationWarning,
    Vehicle,
    VehicleDocument,
    encode_export,
    parse_document,
    validate_document,
)
from roster_editor.events import EventBus
from roster_editor.files import ensure_accepted_filename
from roster_editor.runtime import telemetry
from roster_editor.sync import (
    HISTORY_TASK,
    Clock,
    DeferredScheduler,
    PreviewSynchronizer,
    SyncState,
)

MESSAGE_TASK = "message"

LOADED_TEXT = "JSON loaded successfully"
EXPORTED_TEXT = "JSON file downloaded"
INVALID_PREFIX = "Invalid JSON file: "
REJECTED_PICKED_TEXT = "Please choose a valid JSON file"
REJECTED_DROPPED_TEXT = "Please drop a valid .json file"


class MessageKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class EditorMessage:
    text: str
    kind: MessageKind
    timeout_ms: int


@dataclass(frozen=True, slots=True)
class ExportArtifact:
    filename: str
    media_type: str
    data: bytes


class EditorSession:
    """Owns the store, its history, the timers and the view-facing state.

    Events published on :attr:`bus`:

    ``listing.changed``   filtered ``(index, vehicle)`` pairs after a structural edit
    ``views.refresh``     fresh :class:`DerivedViews`
    ``history.changed``   ``(can_undo, can_redo)``
    ``document.replaced`` the label of the replacement (import/undo/redo)
    ``message``           an :class:`EditorMessage`
    ``message.clear``     ``None``, once the message timeout elapses
    """

    def __init__(
        self,
        *,
        settings: Optional[EditorSettings] = None,
        clock: Optional[Clock] = None,
        document: Optional[VehicleDocument] = None,
    ) -> None:
        self.settings = settings or EditorSettings()
        self.bus = EventBus()
        self.scheduler = DeferredScheduler(clock=clock)
        self.store = DocumentStore(
            document=document,
            history=EditHistory(max_depth=self.settings.history_depth),
        )
        self.sync = PreviewSynchronizer(
            self.store,
            self.scheduler,
            preview_delay_ms=self.settings.preview_delay_ms,
            history_delay_ms=self.settings.history_delay_ms,
            on_refresh=self._on_refresh,
        )
        self.filename = self.settings.default_filename
        self.message: Optional[EditorMessage] = None
        self._collapsed: Dict[int, bool] = {}

    # -- view-facing state -------------------------------------------------

    @property
    def document(self) -> VehicleDocument:
        return self.store.document

    @property
    def views(self) -> DerivedViews:
        return self.sync.views

    @property
    def filtered(self) -> List[Tuple[int, Vehicle]]:
        return self.sync.views.filtered

    @property
    def autocomplete(self) -> AutocompleteIndex:
        return self.sync.views.autocomplete

    @property
    def preview_text(self) -> str:
        return self.sync.views.preview_text

    @property
    def state(self) -> SyncState:
        return self.sync.state

    @property
    def search_term(self) -> str:
        return self.sync.search_term

    def can_undo(self) -> bool:
        return self.store.can_undo()

    def can_redo(self) -> bool:
        return self.store.can_redo()

    def warnings(self) -> List[ValidationWarning]:
        return validate_document(self.store.document)

    # -- structural edits --------------------------------------------------

    def add_vehicle(self) -> int:
        self.sync.flush_history()
        index = self.store.add_vehicle()
        self._after_structural_edit()
        return index

    def delete_vehicle(self, index: int) -> bool:
        self.sync.flush_history()
        if not self.store.delete_vehicle(index):
            return False
        self._forget_collapsed(index)
        self._after_structural_edit()
        return True

    def add_roster_entry(self, vehicle_index: int) -> Optional[RosterEntry]:
        self.sync.flush_history()
        entry = self.store.add_roster_entry(vehicle_index)
        if entry is not None:
            self._after_structural_edit()
        return entry

    def delete_roster_entry(self, vehicle_index: int, entry_id: str) -> bool:
        self.sync.flush_history()
        if not self.store.delete_roster_entry(vehicle_index, entry_id):
            return False
        self._after_structural_edit()
        return True

    def _after_structural_edit(self) -> None:
        self.sync.structural_edit()
        self.bus.emit("listing.changed", self.sync.views.filtered)
        self._emit_history()

    # -- field edits -------------------------------------------------------

    def edit_vehicle_field(self, index: int, field: str, value: Any) -> bool:
        return self.sync.field_edit(
            lambda: self.store.set_vehicle_field(index, field, value)
        )

    def edit_roster_field(
        self, vehicle_index: int, entry_id: str, field: str, value: Any
    ) -> bool:
        return self.sync.field_edit(
            lambda: self.store.set_roster_field(vehicle_index, entry_id, field, value)
        )

    # -- history -----------------------------------------------------------

    def undo(self) -> bool:
        self.sync.flush_history()
        if not self.store.undo():
            return False
        self._after_replace("undo")
        return True

    def redo(self) -> bool:
        self.sync.flush_history()
        if not self.store.redo():
            return False
        self._after_replace("redo")
        return True

    def _after_replace(self, label: str, views: Optional[DerivedViews] = None) -> None:
        self.sync.cancel_pending()
        if views is None:
            self.sync.refresh_now()
        else:
            self.sync.publish(views)
        self.bus.emit("document.replaced", label)
        self._emit_history()

    def _emit_history(self) -> None:
        self.bus.emit("history.changed", (self.can_undo(), self.can_redo()))

    # -- search and per-vehicle UI flags -------------------------------------

    def set_search(self, term: str) -> List[Tuple[int, Vehicle]]:
        self.sync.set_search_term(term)
        return self.sync.views.filtered

    def is_collapsed(self, index: int) -> bool:
        return self._collapsed.get(index, False)

    def toggle_collapsed(self, index: int) -> bool:
        collapsed = not self.is_collapsed(index)
        self._collapsed[index] = collapsed
        return collapsed

    def _forget_collapsed(self, index: int) -> None:
        self._collapsed = {
            (key - 1 if key > index else key): value
            for key, value in self._collapsed.items()
            if key != index
        }

    # -- timers --------------------------------------------------------------

    def process_timeouts(self) -> List[str]:
        fired = self.scheduler.process_timeouts()
        if HISTORY_TASK in fired:
            self._emit_history()
        return fired

    def flush(self) -> List[str]:
        fired = self.scheduler.force()
        if HISTORY_TASK in fired:
            self._emit_history()
        return fired

    # -- import / export -----------------------------------------------------

    def import_text(self, text: str | bytes, *, filename: Optional[str] = None) -> bool:
        """Replace the document with ``text``; a failure leaves everything as is."""

        with telemetry.span(
            "session::import", component="session", metadata={"file": filename or "-"}
        ) as handle:
            try:
                document = parse_document(text, source=filename)
                views = derive(document, self.sync.search_term)
            except FormatError as exc:
                handle.add_metadata("error", exc.message)
                self._notify(INVALID_PREFIX + exc.message, MessageKind.ERROR)
                return False

            self.sync.cancel_pending()
            self.store.replace_document(document, reset_history=True)
            self._collapsed.clear()
            if filename:
                self.filename = Path(filename).name
            handle.add_metadata("vehicles", len(document.vehicles))

        self._after_replace("import", views)
        self._notify(LOADED_TEXT, MessageKind.SUCCESS)
        return True

    def load_file(
        self, filename: Optional[str], content: str | bytes, *, dropped: bool = False
    ) -> bool:
        """Import a picked (or ``dropped``) file; only picked files rename the export."""

        if not self._accept(filename, dropped=dropped):
            return False
        return self.import_text(content, filename=None if dropped else filename)

    def load_path(self, path: Path) -> bool:
        if not self._accept(path.name, dropped=False):
            return False
        try:
            content = path.read_bytes()
        except OSError as exc:
            self._notify(f"Could not read {path.name}: {exc.strerror or exc}", MessageKind.ERROR)
            return False
        return self.import_text(content, filename=path.name)

    def _accept(self, filename: Optional[str], *, dropped: bool) -> bool:
        try:
            ensure_accepted_filename(filename)
        except FileTypeRejected as exc:
            telemetry.record_event(
                "session.file_rejected", level="warning", data={"file": exc.filename}
            )
            self._notify(
                REJECTED_DROPPED_TEXT if dropped else REJECTED_PICKED_TEXT,
                MessageKind.ERROR,
            )
            return False
        return True

    def export(self, filename: Optional[str] = None) -> ExportArtifact:
        """Canonical bytes of the document with rosters in start-number order."""

        artifact = self._artifact(filename)
        self._notify(EXPORTED_TEXT, MessageKind.SUCCESS)
        return artifact

    def save_export(
        self, directory: Path, filename: Optional[str] = None
    ) -> Optional[Path]:
        """Write the export into ``directory``; a failed write becomes an ERROR message."""

        artifact = self._artifact(filename)
        target = directory / artifact.filename
        try:
            target.write_bytes(artifact.data)
        except OSError as exc:
            self._notify(
                f"Could not write {artifact.filename}: {exc.strerror or exc}",
                MessageKind.ERROR,
            )
            return None
        self._notify(EXPORTED_TEXT, MessageKind.SUCCESS)
        return target

    def _artifact(self, filename: Optional[str]) -> ExportArtifact:
        name = (filename or "").strip() or self.filename
        self.filename = name
        artifact = ExportArtifact(
            filename=name,
            media_type=MEDIA_TYPE,
            data=encode_export(sort_rosters(self.store.document)),
        )
        telemetry.record_event(
            "session.export", data={"file": name, "bytes": len(artifact.data)}
        )
        return artifact

    # -- messages --------------------------------------------------------------

    def _notify(self, text: str, kind: MessageKind) -> None:
        message = EditorMessage(text=text, kind=kind, timeout_ms=self.settings.message_timeout_ms)
        self.message = message
        self.bus.emit("message", message)
        self.scheduler.arm(MESSAGE_TASK, message.timeout_ms, self._clear_message)

    def _clear_message(self) -> None:
        self.message = None
        self.bus.emit("message.clear", None)

    def _on_refresh(self, views: DerivedViews) -> None:
        self.bus.emit("views.refresh", views)


__all__ = [
    "EXPORTED_TEXT",
    "EditorMessage",
    "EditorSession",
    "ExportArtifact",
    "INVALID_PREFIX",
    "LOADED_TEXT",
    "MESSAGE_TASK",
    "MessageKind",
    "REJECTED_DROPPED_TEXT",
    "REJECTED_PICKED_TEXT",
]
