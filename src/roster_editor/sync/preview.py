"""Debounced recompute of derived views and coalesced history checkpoints."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from roster_editor.derive import DerivedViews, derive, filter_indexed, sort_rosters
from roster_editor.document import DocumentStore, HistorySnapshot
from roster_editor.runtime import telemetry

from .scheduler import DeferredScheduler

PREVIEW_TASK = "preview"
HISTORY_TASK = "history"
DEFAULT_PREVIEW_DELAY_MS = 300
DEFAULT_HISTORY_DELAY_MS = 400


class SyncState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class PreviewSynchronizer:
    """Keeps :class:`DerivedViews` in step with the store.

    Two independent trailing-edge timers: ``preview`` recomputes the views,
    ``history`` pushes one checkpoint for a burst of field edits. The
    checkpoint holds the document as it was before the first edit of the
    burst, so a single undo reverts the whole burst.
    """

    def __init__(
        self,
        store: DocumentStore,
        scheduler: DeferredScheduler,
        *,
        preview_delay_ms: int = DEFAULT_PREVIEW_DELAY_MS,
        history_delay_ms: int = DEFAULT_HISTORY_DELAY_MS,
        on_refresh: Optional[Callable[[DerivedViews], None]] = None,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.preview_delay_ms = preview_delay_ms
        self.history_delay_ms = history_delay_ms
        self.on_refresh = on_refresh
        self.search_term = ""
        self._baseline: Optional[HistorySnapshot] = None
        self.views = derive(store.document, self.search_term)

    @property
    def state(self) -> SyncState:
        if self.scheduler.is_pending(PREVIEW_TASK) or self.scheduler.is_pending(HISTORY_TASK):
            return SyncState.PENDING
        return SyncState.IDLE

    def field_edit(self, apply: Callable[[], bool]) -> bool:
        """Run a field-level mutation and (re)start both timers if it applied."""

        baseline = self._baseline or HistorySnapshot.capture(self.store.document, label="field_edit")
        if not apply():
            return False
        self._baseline = baseline
        self.scheduler.arm(HISTORY_TASK, self.history_delay_ms, self._commit_history)
        self.scheduler.arm(PREVIEW_TASK, self.preview_delay_ms, self._refresh)
        return True

    def structural_edit(self) -> None:
        """List membership changed: update the listing now, the rest later."""

        self.views.filtered = filter_indexed(sort_rosters(self.store.document), self.search_term)
        self.scheduler.arm(PREVIEW_TASK, self.preview_delay_ms, self._refresh)

    def flush_history(self) -> None:
        """Commit a pending coalesced checkpoint immediately."""

        if self.scheduler.cancel(HISTORY_TASK):
            self._commit_history()

    def cancel_pending(self) -> None:
        self.scheduler.cancel(PREVIEW_TASK)
        self.scheduler.cancel(HISTORY_TASK)
        self._baseline = None

    def set_search_term(self, term: str) -> None:
        self.search_term = term
        self.refresh_now()

    def refresh_now(self) -> DerivedViews:
        self.scheduler.cancel(PREVIEW_TASK)
        return self._refresh()

    def publish(self, views: DerivedViews) -> DerivedViews:
        """Adopt views derived ahead of a document swap."""

        self.scheduler.cancel(PREVIEW_TASK)
        return self._publish(views)

    def _commit_history(self) -> None:
        baseline, self._baseline = self._baseline, None
        if baseline is None:
            return
        pushed = self.store.history.push(baseline)
        telemetry.record_event(
            "sync.history_commit", level="debug", data={"pushed": pushed}
        )

    def _refresh(self) -> DerivedViews:
        return self._publish(derive(self.store.document, self.search_term))

    def _publish(self, views: DerivedViews) -> DerivedViews:
        self.views = views
        if self.on_refresh is not None:
            self.on_refresh(views)
        return views


__all__ = [
    "DEFAULT_HISTORY_DELAY_MS",
    "DEFAULT_PREVIEW_DELAY_MS",
    "HISTORY_TASK",
    "PREVIEW_TASK",
    "PreviewSynchronizer",
    "SyncState",
]
