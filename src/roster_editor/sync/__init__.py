"""Deferred-task scheduling and the debounced preview synchronizer."""

from .preview import (
    DEFAULT_HISTORY_DELAY_MS,
    DEFAULT_PREVIEW_DELAY_MS,
    HISTORY_TASK,
    PREVIEW_TASK,
    PreviewSynchronizer,
    SyncState,
)
from .scheduler import Clock, DeferredScheduler, ManualClock, PendingTask

__all__ = [
    "Clock",
    "DEFAULT_HISTORY_DELAY_MS",
    "DEFAULT_PREVIEW_DELAY_MS",
    "DeferredScheduler",
    "HISTORY_TASK",
    "ManualClock",
    "PREVIEW_TASK",
    "PendingTask",
    "PreviewSynchronizer",
    "SyncState",
]
