from __future__ import annotations

from datetime import datetime, timedelta, timezone

from taskboard.services.task_store import TaskStore


def _ids(tasks) -> list[str]:
    return [task.id for task in tasks]


def test_replace_keeps_server_order_and_drops_duplicates(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("b"), make_task("a"), make_task("b", title="dup")])

    assert _ids(store.tasks) == ["b", "a"]
    assert store.get("b").title == "Task b"


def test_replace_clears_previous_snapshot(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1"), make_task("2")])
    store.replace([make_task("3")])

    assert _ids(store.tasks) == ["3"]
    assert store.get("1") is None


def test_apply_patch_replaces_in_place(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1"), make_task("2"), make_task("3")])

    applied = store.apply_patch(make_task("2", title="Renamed", status="Completed"))

    assert applied is True
    assert _ids(store.tasks) == ["1", "2", "3"]
    assert store.get("2").title == "Renamed"
    assert store.get("1") == make_task("1")


def test_apply_patch_for_unknown_id_is_noop(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    version = store.version
    calls = []
    store.subscribe(lambda: calls.append(1))

    assert store.apply_patch(make_task("404")) is False
    assert store.version == version
    assert calls == []
    assert _ids(store.tasks) == ["1"]


def test_every_write_gets_a_newer_revision(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1"), make_task("2")])
    first = store.revision("1")

    store.apply_patch(make_task("1", title="x"))
    second = store.revision("1")
    write = store.set_status("1", "Completed")

    assert first < second < write.revision
    assert store.revision("2") == first
    assert store.version == write.revision


def test_set_status_pins_task_until_released(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1")])

    write = store.set_status("1", "Completed")

    assert write.previous_status == "Not Started"
    assert store.get("1").status == "Completed"
    assert store.pinned_at("1") is not None
    store.release("1")
    assert store.pinned_at("1") is None


def test_set_status_for_unknown_task_returns_none() -> None:
    store = TaskStore()

    assert store.set_status("missing", "Completed") is None


def test_restore_status_reverts_when_not_superseded(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    store.set_status("1", "In Process")

    assert store.restore_status("1") is True
    assert store.get("1").status == "Not Started"
    assert store.pinned_at("1") is None


def test_restore_status_skips_when_newer_write_landed(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    store.set_status("1", "In Process")
    later = datetime.now(timezone.utc) + timedelta(minutes=1)
    store.apply_patch(make_task("1", status="Completed", updated_at=later))

    assert store.restore_status("1") is False
    assert store.get("1").status == "Completed"
    assert store.pinned_at("1") is None


def test_unsubscribe_stops_notifications(make_task) -> None:
    store = TaskStore()
    calls = []
    unsubscribe = store.subscribe(lambda: calls.append(1))

    store.replace([make_task("1")])
    unsubscribe()
    store.replace([make_task("2")])

    assert calls == [1]


def test_post_queues_updates_without_touching_tasks(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1")])

    store.post(make_task("1", status="Completed"))

    assert store.get("1").status == "Not Started"
    assert store.inbox.get_nowait().status == "Completed"


def test_restore_status_without_pin_is_noop(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    version = store.version

    assert store.restore_status("1") is False
    assert store.version == version


def test_lagging_patch_keeps_optimistic_status_and_moves_rollback_target(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    store.set_status("1", "Completed")

    store.apply_patch(make_task("1", title="Edited", status="In Process"))

    assert store.get("1").status == "Completed"
    assert store.get("1").title == "Edited"
    assert store.pin("1").previous_status == "In Process"
    assert store.restore_status("1") is True
    assert store.get("1").status == "In Process"
    assert store.get("1").title == "Edited"


def test_replace_keeps_optimistic_status_of_pinned_task(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1"), make_task("2")])
    store.set_status("1", "Completed")

    store.replace([make_task("1"), make_task("2")])

    assert store.get("1").status == "Completed"
    assert store.get("2").status == "Not Started"
    assert store.pin("1").previous_status == "Not Started"


def test_replace_with_newer_snapshot_overrides_pinned_task(make_task) -> None:
    store = TaskStore()
    store.replace([make_task("1")])
    store.set_status("1", "Completed")
    later = datetime.now(timezone.utc) + timedelta(minutes=1)

    store.replace([make_task("1", status="In Process", updated_at=later)])

    assert store.get("1").status == "In Process"
    assert store.restore_status("1") is False
    assert store.get("1").status == "In Process"
