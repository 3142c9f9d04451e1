"""Bounded undo/redo history built from whole-document snapshots."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from roster_editor.runtime import telemetry

from .codec import parse_document, serialize
from .model import VehicleDocument

DEFAULT_MAX_DEPTH = 50


@dataclass(frozen=True, slots=True)
class HistorySnapshot:
    """Immutable canonical text of a document at one point in time."""

    text: str
    label: str = "edit"

    @classmethod
    def capture(cls, document: VehicleDocument, *, label: str = "edit") -> "HistorySnapshot":
        return cls(text=serialize(document), label=label)

    def restore(self) -> VehicleDocument:
        return parse_document(self.text)


class EditHistory:
    """Two stacks of snapshots: ``past`` (bounded, FIFO eviction) and ``future``."""

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth
        self._past: Deque[HistorySnapshot] = deque(maxlen=max_depth)
        self._future: List[HistorySnapshot] = []

    @property
    def past(self) -> tuple[HistorySnapshot, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[HistorySnapshot, ...]:
        return tuple(self._future)

    def can_undo(self) -> bool:
        return bool(self._past)

    def can_redo(self) -> bool:
        return bool(self._future)

    def checkpoint(self, document: VehicleDocument, *, label: str = "edit") -> bool:
        return self.push(HistorySnapshot.capture(document, label=label))

    def push(self, snapshot: HistorySnapshot) -> bool:
        """Record ``snapshot``; returns ``False`` when it repeats the top of ``past``.

        The redo stack is dropped either way: a checkpoint marks a new edit.
        """

        self._future.clear()
        if self._past and self._past[-1].text == snapshot.text:
            return False
        evicting = len(self._past) == self.max_depth
        self._past.append(snapshot)
        telemetry.record_event(
            "history.push",
            level="debug",
            data={"label": snapshot.label, "depth": len(self._past), "evicted": evicting},
        )
        return True

    def undo(self, document: VehicleDocument) -> Optional[VehicleDocument]:
        if not self._past:
            return None
        self._future.append(HistorySnapshot.capture(document, label="undo"))
        previous = self._past.pop()
        telemetry.record_event("history.undo", data={"label": previous.label})
        return previous.restore()

    def redo(self, document: VehicleDocument) -> Optional[VehicleDocument]:
        if not self._future:
            return None
        self._past.append(HistorySnapshot.capture(document, label="redo"))
        following = self._future.pop()
        telemetry.record_event("history.redo", data={"label": following.label})
        return following.restore()

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()


__all__ = ["DEFAULT_MAX_DEPTH", "EditHistory", "HistorySnapshot"]
