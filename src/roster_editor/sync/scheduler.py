"""Named, cancellable deferred tasks driven by an injectable clock."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from roster_editor.runtime import telemetry

Clock = Callable[[], float]


@dataclass
class PendingTask:
    name: str
    deadline: float
    delay_ms: int
    generation: int
    callback: Callable[[], None]


class ManualClock:
    """Clock that only moves when told to; lets hosts and tests step time."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms / 1000.0
        return self.now


class DeferredScheduler:
    """At most one pending task per name; arming again restarts the delay.

    Nothing runs on its own. Hosts call :meth:`process_timeouts` from their
    event loop (a Textual interval, a test step) and expired tasks fire in
    deadline order.
    """

    def __init__(self, *, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock or time.monotonic
        self._pending: Dict[str, PendingTask] = {}
        self._counter = 0

    def arm(self, name: str, delay_ms: int, callback: Callable[[], None]) -> None:
        self._counter += 1
        self._pending[name] = PendingTask(
            name=name,
            deadline=self.clock() + (delay_ms / 1000.0),
            delay_ms=delay_ms,
            generation=self._counter,
            callback=callback,
        )

    def cancel(self, name: str) -> bool:
        return self._pending.pop(name, None) is not None

    def cancel_all(self) -> None:
        if self._pending:
            telemetry.record_event(
                "scheduler.cancel_all",
                level="debug",
                data={"tasks": ",".join(sorted(self._pending))},
            )
        self._pending.clear()

    def is_pending(self, name: str) -> bool:
        return name in self._pending

    def pending_names(self) -> List[str]:
        return sorted(self._pending)

    def process_timeouts(self) -> List[str]:
        now = self.clock()
        expired = sorted(
            (task for task in self._pending.values() if task.deadline <= now),
            key=lambda task: (task.deadline, task.generation),
        )
        return [task.name for task in expired if self._trigger(task.name, task.generation)]

    def force(self, name: Optional[str] = None) -> List[str]:
        """Fire ``name`` (or every pending task) now, regardless of deadline."""

        if name is not None:
            task = self._pending.get(name)
            if task is None:
                return []
            return [name] if self._trigger(name, task.generation) else []

        current = sorted(self._pending.values(), key=lambda task: task.generation)
        return [task.name for task in current if self._trigger(task.name, task.generation)]

    def _trigger(self, name: str, generation: int) -> bool:
        task = self._pending.get(name)
        if task is None or task.generation != generation:
            return False
        self._pending.pop(name, None)
        with telemetry.span(
            name=f"timer::{name}",
            component="scheduler",
            metadata={"delay_ms": task.delay_ms},
        ):
            task.callback()
        return True


__all__ = ["Clock", "DeferredScheduler", "ManualClock", "PendingTask"]
