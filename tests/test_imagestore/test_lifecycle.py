"""
Tests for LifecycleCoordinator.

Test Categories:
1. Save flow (abort, after-save only for new records)
2. Delete flow (snapshot, abort, unconditional after-delete)
3. Superseded file cleanup
4. Hook-set composition
"""

from typing import List

import pytest

from imagestore.domain.events import (
    AfterDeleteEvent,
    AfterSaveEvent,
    BeforeDeleteEvent,
    BeforeSaveEvent,
)
from imagestore.domain.models import AdapterNotFoundError, StoredFileRecord
from imagestore.application.services.lifecycle import LifecycleCoordinator


def _collect(bus, event_type) -> List:
    received: List = []
    bus.subscribe(event_type, received.append)
    return received


# ═══════════════════════════════════════════════════════════════════════════════
# Save
# ═══════════════════════════════════════════════════════════════════════════════


class TestSave:
    """before-save may abort; after-save fires for new records only."""

    def test_save_new_record(self, coordinator, event_bus, repository, memory_adapter, avatar_record):
        before = _collect(event_bus, BeforeSaveEvent)
        after = _collect(event_bus, AfterSaveEvent)

        assert coordinator.save(avatar_record) is True

        assert repository.get("42") == avatar_record
        assert len(before) == 1
        assert len(after) == 1
        assert after[0].record == avatar_record
        assert after[0].storage is memory_adapter

    def test_save_assigns_id(self, coordinator, event_bus, repository):
        after = _collect(event_bus, AfterSaveEvent)
        assert coordinator.save(StoredFileRecord(model="Avatar")) is True
        assert len(repository) == 1
        assert after[0].record.has_id

    def test_update_does_not_fire_after_save(self, coordinator, event_bus, repository, avatar_record):
        coordinator.save(avatar_record)
        after = _collect(event_bus, AfterSaveEvent)
        before = _collect(event_bus, BeforeSaveEvent)

        renamed = avatar_record.with_changes(filename="new.jpg")
        assert coordinator.save(renamed) is True

        assert repository.get("42").filename == "new.jpg"
        assert len(before) == 1
        assert after == []

    def test_after_save_fires_exactly_once_per_new_record(self, coordinator, event_bus, avatar_record):
        after = _collect(event_bus, AfterSaveEvent)
        coordinator.save(avatar_record)
        coordinator.save(avatar_record.with_changes(size=10))
        coordinator.save(avatar_record.with_changes(size=20))
        assert len(after) == 1

    def test_aborted_save_writes_nothing(self, coordinator, event_bus, repository, avatar_record):
        after = _collect(event_bus, AfterSaveEvent)
        event_bus.subscribe(BeforeSaveEvent, lambda e: e.stop())

        assert coordinator.save(avatar_record) is False

        assert repository.get("42") is None
        assert after == []

    def test_aborted_update_leaves_record_unchanged(self, coordinator, event_bus, repository, avatar_record):
        coordinator.save(avatar_record)
        event_bus.subscribe(BeforeSaveEvent, lambda e: False)

        assert coordinator.save(avatar_record.with_changes(filename="x.jpg")) is False
        assert repository.get("42").filename == "me.jpg"

    def test_unknown_adapter_raises(self, coordinator):
        with pytest.raises(AdapterNotFoundError):
            coordinator.save(StoredFileRecord(id="1", model="Avatar", adapter="S3"))


# ═══════════════════════════════════════════════════════════════════════════════
# Delete
# ═══════════════════════════════════════════════════════════════════════════════


class TestDelete:
    """before-delete sees a snapshot; after-delete always follows a delete."""

    def test_delete_flow(self, coordinator, event_bus, repository, memory_adapter, avatar_record):
        coordinator.save(avatar_record)
        before = _collect(event_bus, BeforeDeleteEvent)
        after = _collect(event_bus, AfterDeleteEvent)

        assert coordinator.delete("42") is True

        assert repository.get("42") is None
        assert before[0].record == avatar_record
        assert before[0].storage is memory_adapter
        assert after[0].record == avatar_record
        assert after[0].storage is memory_adapter

    def test_after_delete_snapshot_outlives_row(self, coordinator, event_bus, repository, avatar_record):
        coordinator.save(avatar_record)
        seen_in_store: List = []
        event_bus.subscribe(
            AfterDeleteEvent,
            lambda e: seen_in_store.append(repository.get(e.record.id)),
        )

        coordinator.delete("42")

        assert seen_in_store == [None]

    def test_aborted_delete_keeps_record(self, coordinator, event_bus, repository, avatar_record):
        coordinator.save(avatar_record)
        after = _collect(event_bus, AfterDeleteEvent)
        event_bus.subscribe(BeforeDeleteEvent, lambda e: e.stop())

        assert coordinator.delete("42") is False

        assert repository.get("42") == avatar_record
        assert after == []

    def test_delete_missing_record(self, coordinator, event_bus):
        before = _collect(event_bus, BeforeDeleteEvent)
        assert coordinator.delete("nope") is False
        assert before == []


# ═══════════════════════════════════════════════════════════════════════════════
# Superseded Files
# ═══════════════════════════════════════════════════════════════════════════════


class TestOldFileCleanup:
    """A new record naming old_file_id replaces the old record."""

    def test_old_file_deleted_after_save(self, coordinator, event_bus, repository, avatar_record):
        coordinator.save(avatar_record)
        deleted = _collect(event_bus, AfterDeleteEvent)

        replacement = StoredFileRecord(id="43", model="Avatar", old_file_id="42")
        assert coordinator.save(replacement) is True

        assert repository.get("42") is None
        assert repository.get("43") == replacement
        assert [e.record.id for e in deleted] == ["42"]

    def test_old_file_of_other_model_kept(self, coordinator, repository):
        coordinator.save(StoredFileRecord(id="1", model="Gallery"))
        coordinator.save(StoredFileRecord(id="2", model="Avatar", old_file_id="1"))
        assert repository.get("1") is not None

    def test_old_file_cleanup_respects_abort(self, coordinator, event_bus, repository, avatar_record):
        coordinator.save(avatar_record)
        event_bus.subscribe(BeforeDeleteEvent, lambda e: False)

        coordinator.save(StoredFileRecord(id="43", model="Avatar", old_file_id="42"))

        assert repository.get("42") is not None

    def test_record_naming_itself_as_old_file_kept(self, coordinator, event_bus, repository):
        deleted = _collect(event_bus, BeforeDeleteEvent)
        record = StoredFileRecord(id="7", model="Avatar", old_file_id="7")

        assert coordinator.save(record) is True

        assert repository.get("7") == record
        assert deleted == []

    def test_update_does_not_delete_old_file(self, coordinator, repository, avatar_record):
        coordinator.save(avatar_record)
        coordinator.save(StoredFileRecord(id="43", model="Avatar"))
        coordinator.save(StoredFileRecord(id="43", model="Avatar", old_file_id="42"))
        assert repository.get("42") is not None


# ═══════════════════════════════════════════════════════════════════════════════
# Hook Points and Composition
# ═══════════════════════════════════════════════════════════════════════════════


class TestHookPoints:
    """Hosts may call the hook methods around their own persistence."""

    def test_hooks_without_repository(self, event_bus, adapters, avatar_record):
        coordinator = LifecycleCoordinator(event_bus, adapters)
        after = _collect(event_bus, AfterSaveEvent)

        assert coordinator.before_save(avatar_record) is True
        coordinator.after_save(avatar_record, created=True)
        coordinator.after_save(avatar_record, created=False)

        assert len(after) == 1

    def test_driving_operations_need_repository(self, event_bus, adapters, avatar_record):
        coordinator = LifecycleCoordinator(event_bus, adapters)
        with pytest.raises(RuntimeError):
            coordinator.save(avatar_record)

    def test_save_events_disabled(self, event_bus, adapters, repository, avatar_record):
        coordinator = LifecycleCoordinator(event_bus, adapters, repository, emit_save_events=False)
        event_bus.subscribe(BeforeSaveEvent, lambda e: False)
        after = _collect(event_bus, AfterSaveEvent)

        assert coordinator.save(avatar_record) is True
        assert after == []

    def test_delete_events_disabled(self, event_bus, adapters, repository, avatar_record):
        coordinator = LifecycleCoordinator(event_bus, adapters, repository, emit_delete_events=False)
        coordinator.save(avatar_record)
        after = _collect(event_bus, AfterDeleteEvent)

        assert coordinator.delete("42") is True
        assert after == []
