from __future__ import annotations

from datetime import datetime, timedelta, timezone

from taskboard.services.board import BoardView
from taskboard.services.realtime import RealtimePatchApplier
from taskboard.services.task_store import TaskStore


def test_update_for_unknown_task_is_noop(make_task, notifier) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    version = store.version
    applier = RealtimePatchApplier(store, notifier)

    assert applier.on_remote_update(make_task("2", status="Completed")) is False
    assert store.version == version
    assert [task.id for task in store.tasks] == ["1"]
    assert notifier.messages == []


def test_update_for_known_task_is_applied_exactly(make_task, notifier) -> None:
    store = TaskStore()
    store.replace([make_task("1"), make_task("2")])
    applier = RealtimePatchApplier(store, notifier)
    pushed = make_task("2", title="From Alice", status="In Process", category="high")

    assert applier.on_remote_update(pushed) is True
    assert store.get("2") == pushed
    assert notifier.of("info") == ["Task updated in real-time"]


def test_update_rederives_board(make_task, notifier) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    board = BoardView(store, notifier)

    RealtimePatchApplier(store, notifier).on_remote_update(make_task("1", status="Completed"))

    assert [task.id for task in board.columns.completed] == ["1"]
    assert board.columns.not_started == []


def test_stale_update_is_dropped(make_task, notifier) -> None:
    now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    store = TaskStore()
    store.replace([make_task("1", title="new", updated_at=now)])
    applier = RealtimePatchApplier(store, notifier)

    stale = make_task("1", title="old", updated_at=now - timedelta(minutes=5))

    assert applier.on_remote_update(stale) is False
    assert store.get("1").title == "new"


def test_update_during_pending_drag_keeps_optimistic_status(make_task, notifier) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    store.set_status("1", "Completed")
    applier = RealtimePatchApplier(store, notifier)

    lagging = make_task("1", title="Edited", status="Not Started")
    assert applier.on_remote_update(lagging) is True

    assert store.get("1").status == "Completed"
    assert store.get("1").title == "Edited"


def test_newer_update_during_pending_drag_wins(make_task, notifier) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    store.set_status("1", "Completed")
    applier = RealtimePatchApplier(store, notifier)
    later = datetime.now(timezone.utc) + timedelta(minutes=1)

    applier.on_remote_update(make_task("1", status="In Process", updated_at=later))

    assert store.get("1").status == "In Process"


def test_drain_applies_queued_updates_in_arrival_order(make_task, notifier) -> None:
    store = TaskStore()
    store.replace([make_task("1"), make_task("2")])
    applier = RealtimePatchApplier(store, notifier)

    store.post(make_task("1", title="first"))
    store.post(make_task("404"))
    store.post(make_task("1", title="second"))
    store.post(make_task("2", status="Completed"))

    assert applier.drain() == 3
    assert store.get("1").title == "second"
    assert store.get("2").status == "Completed"
    assert applier.drain() == 0


def test_naive_and_aware_timestamps_compare(make_task, notifier) -> None:
    store = TaskStore()
    store.replace([make_task("1", updated_at=datetime(2026, 3, 1, 12, 0))])
    applier = RealtimePatchApplier(store, notifier)

    newer = make_task("1", title="newer", updated_at=datetime(2026, 3, 1, 12, 1, tzinfo=timezone.utc))

    assert applier.on_remote_update(newer) is True
    assert store.get("1").title == "newer"
