from typing import List

from roster_editor.document import DocumentStore, Vehicle, VehicleDocument
from roster_editor.sync import (
    HISTORY_TASK,
    PREVIEW_TASK,
    DeferredScheduler,
    ManualClock,
    PreviewSynchronizer,
    SyncState,
)


def make_sync(*vehicles: Vehicle) -> tuple[PreviewSynchronizer, DocumentStore, ManualClock]:
    clock = ManualClock()
    store = DocumentStore(document=VehicleDocument(vehicles=list(vehicles)))
    sync = PreviewSynchronizer(store, DeferredScheduler(clock=clock))
    return sync, store, clock


def test_task_fires_only_after_its_delay() -> None:
    clock = ManualClock()
    scheduler = DeferredScheduler(clock=clock)
    fired: List[str] = []
    scheduler.arm("a", 300, lambda: fired.append("a"))

    clock.advance(299)
    assert scheduler.process_timeouts() == []

    clock.advance(10)
    assert scheduler.process_timeouts() == ["a"]
    assert fired == ["a"]
    assert scheduler.is_pending("a") is False


def test_rearming_restarts_the_delay() -> None:
    clock = ManualClock()
    scheduler = DeferredScheduler(clock=clock)
    fired: List[int] = []
    scheduler.arm("a", 300, lambda: fired.append(1))
    clock.advance(200)
    scheduler.arm("a", 300, lambda: fired.append(2))

    clock.advance(200)
    assert scheduler.process_timeouts() == []

    clock.advance(200)
    scheduler.process_timeouts()
    assert fired == [2]


def test_cancel_and_force() -> None:
    scheduler = DeferredScheduler(clock=ManualClock())
    fired: List[str] = []
    scheduler.arm("a", 300, lambda: fired.append("a"))
    scheduler.arm("b", 300, lambda: fired.append("b"))

    assert scheduler.cancel("a") is True
    assert scheduler.cancel("a") is False
    assert scheduler.force() == ["b"]
    assert fired == ["b"]
    assert scheduler.pending_names() == []


def test_field_edit_runs_two_independent_timers() -> None:
    sync, store, clock = make_sync(Vehicle(manufacturer="Ford"))
    before = sync.views.preview_text

    sync.field_edit(lambda: store.set_vehicle_field(0, "manufacturer", "Audi"))

    assert sync.state is SyncState.PENDING
    assert sync.views.preview_text == before

    clock.advance(310)
    assert sync.scheduler.process_timeouts() == [PREVIEW_TASK]
    assert '"Audi"' in sync.views.preview_text
    assert store.can_undo() is False
    assert sync.state is SyncState.PENDING

    clock.advance(100)
    assert sync.scheduler.process_timeouts() == [HISTORY_TASK]
    assert sync.state is SyncState.IDLE
    assert len(store.history.past) == 1


def test_burst_of_edits_coalesces_into_one_checkpoint_of_prior_state() -> None:
    sync, store, clock = make_sync(Vehicle(manufacturer=""))

    for text in ("F", "Fo", "For", "Ford"):
        sync.field_edit(lambda text=text: store.set_vehicle_field(0, "manufacturer", text))
        clock.advance(100)
    clock.advance(400)
    sync.scheduler.process_timeouts()

    past = store.history.past
    assert len(past) == 1
    assert past[0].restore().vehicles[0].manufacturer == ""


def test_field_edit_that_does_not_apply_schedules_nothing() -> None:
    sync, store, _clock = make_sync()

    assert sync.field_edit(lambda: store.set_vehicle_field(4, "model", "x")) is False
    assert sync.state is SyncState.IDLE


def test_flush_history_commits_immediately() -> None:
    sync, store, _clock = make_sync(Vehicle(model="A"))
    sync.field_edit(lambda: store.set_vehicle_field(0, "model", "B"))

    sync.flush_history()

    assert sync.scheduler.is_pending(HISTORY_TASK) is False
    assert store.history.past[0].restore().vehicles[0].model == "A"


def test_cancel_pending_drops_both_timers() -> None:
    sync, store, clock = make_sync(Vehicle(model="A"))
    refreshed: List[str] = []
    sync.on_refresh = lambda views: refreshed.append(views.preview_text)
    sync.field_edit(lambda: store.set_vehicle_field(0, "model", "B"))

    sync.cancel_pending()
    clock.advance(1000)

    assert sync.scheduler.process_timeouts() == []
    assert refreshed == []
    assert store.can_undo() is False


def test_structural_edit_updates_listing_before_preview() -> None:
    sync, store, _clock = make_sync()
    store.add_vehicle()

    sync.structural_edit()

    assert [index for index, _ in sync.views.filtered] == [0]
    assert sync.scheduler.is_pending(PREVIEW_TASK) is True
    assert '"vehicles": []' in sync.views.preview_text
