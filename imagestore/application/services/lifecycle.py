"""
Lifecycle Coordinator.

Wraps the persistence layer's save/delete with image storage notifications.

Save:
    BeforeSaveEvent (stop -> abort, nothing written)
    -> repository write
    -> AfterSaveEvent, only for newly created records
    -> delete the superseded file named by record.old_file_id

Delete:
    snapshot taken before deletion
    -> BeforeDeleteEvent (stop -> abort, record stays)
    -> repository delete
    -> AfterDeleteEvent with the snapshot, unconditionally

Aborts are reported as False, never raised. Nothing is retried.

Hosts that own their persistence flow call the hook methods (before_save,
after_save, before_delete, after_delete) directly; save() and delete() drive
an IStoredFileRepository for hosts that do not.
"""

import logging
from typing import Optional

from imagestore.domain.events import (
    AfterDeleteEvent,
    AfterSaveEvent,
    BeforeDeleteEvent,
    BeforeSaveEvent,
)
from imagestore.domain.interfaces import IStorageAdapter, IStoredFileRepository
from imagestore.domain.models import StoredFileRecord
from imagestore.infrastructure.events import ImageStorageEventBus
from imagestore.infrastructure.storage import StorageAdapterRegistry

logger = logging.getLogger(__name__)


class LifecycleCoordinator:
    """
    Sequences before/after notifications around save and delete.

    Hook sets are chosen at construction: a coordinator built with
    ``emit_save_events=False`` never dispatches save notifications, instead of
    installing listeners and removing them again later.
    """

    def __init__(
        self,
        event_bus: ImageStorageEventBus,
        adapters: StorageAdapterRegistry,
        repository: Optional[IStoredFileRepository] = None,
        emit_save_events: bool = True,
        emit_delete_events: bool = True,
    ):
        """
        Args:
            event_bus: Bus receiving lifecycle events
            adapters: Resolves record.adapter to the storage handle in payloads
            repository: Record store used by save()/delete()
            emit_save_events: Dispatch BeforeSave/AfterSave
            emit_delete_events: Dispatch BeforeDelete/AfterDelete
        """
        self._bus = event_bus
        self._adapters = adapters
        self._repository = repository
        self._emit_save = emit_save_events
        self._emit_delete = emit_delete_events

    def _storage(self, record: StoredFileRecord) -> IStorageAdapter:
        return self._adapters.adapter_for(record.adapter)

    def _require_repository(self) -> IStoredFileRepository:
        if self._repository is None:
            raise RuntimeError("LifecycleCoordinator was created without a repository")
        return self._repository

    # ═══════════════════════════════════════════════════════════════════════════
    # Hook Points
    # ═══════════════════════════════════════════════════════════════════════════

    def before_save(self, record: StoredFileRecord) -> bool:
        """Returns False when a handler aborted the save."""
        if not self._emit_save:
            return True
        event = self._bus.dispatch(BeforeSaveEvent(record=record))
        if event.is_stopped:
            logger.info(f"Save of {record.model} record {record.id or '<new>'} aborted by handler")
            return False
        return True

    def after_save(self, record: StoredFileRecord, created: bool) -> None:
        """
        Notify about a completed save.

        Updates of existing records are ignored: derived files are only
        regenerated for new records.
        """
        if not created:
            return
        if self._emit_save:
            self._bus.dispatch(AfterSaveEvent(record=record, storage=self._storage(record)))
        if self._repository is not None:
            self.delete_old_file_on_save(record)

    def before_delete(self, snapshot: StoredFileRecord) -> bool:
        """
        Returns False when a handler aborted the delete.

        Args:
            snapshot: The record as it was before deletion
        """
        if not self._emit_delete:
            return True
        event = self._bus.dispatch(BeforeDeleteEvent(record=snapshot, storage=self._storage(snapshot)))
        if event.is_stopped:
            logger.info(f"Delete of {snapshot.model} record {snapshot.id} aborted by handler")
            return False
        return True

    def after_delete(self, snapshot: StoredFileRecord) -> None:
        if self._emit_delete:
            self._bus.dispatch(AfterDeleteEvent(record=snapshot, storage=self._storage(snapshot)))

    # ═══════════════════════════════════════════════════════════════════════════
    # Driving Operations
    # ═══════════════════════════════════════════════════════════════════════════

    def save(self, record: StoredFileRecord) -> bool:
        """
        Insert or update a record with notifications.

        Returns:
            True if the record was written, False if a handler aborted
        """
        repository = self._require_repository()
        created = not repository.exists(record.id)

        if not self.before_save(record):
            return False

        if created:
            stored = repository.add(record)
        else:
            stored = repository.update(record)

        self.after_save(stored, created)
        return True

    def delete(self, record_id: str) -> bool:
        """
        Delete a record with notifications.

        Returns:
            True if the record was deleted, False if it did not exist or a
            handler aborted
        """
        repository = self._require_repository()
        snapshot = repository.get(record_id)
        if snapshot is None:
            return False

        if not self.before_delete(snapshot):
            return False

        if not repository.delete(snapshot.id):
            return False

        self.after_delete(snapshot)
        return True

    def delete_old_file_on_save(self, record: StoredFileRecord) -> bool:
        """
        Delete the file superseded by a newly saved record.

        Only a record of the same model is removed, through the regular delete
        flow so its variants are cleaned up too. A record never supersedes
        itself.
        """
        if not record.old_file_id or not record.model or record.old_file_id == record.id:
            return False
        repository = self._require_repository()
        old = repository.get(record.old_file_id)
        if old is None or old.model != record.model:
            return False
        deleted = self.delete(old.id)
        if deleted:
            logger.info(f"Deleted {old.model} record {old.id} superseded by {record.id}")
        return deleted
