"""
Variant cleanup listener.

Consumer of AfterDeleteEvent: removes every derived version file of the
deleted record from its storage adapter. The original version is kept
unless ``include_original`` is set, since hosts usually delete it themselves.
"""

import logging
from typing import List

from imagestore.application.services.version_registry import ORIGINAL_VERSION
from imagestore.application.services.version_resolver import VersionResolver
from imagestore.domain.events import AfterDeleteEvent
from imagestore.infrastructure.events import ImageStorageEventBus

logger = logging.getLogger(__name__)


class VariantCleanupListener:
    """
    Deletes version files after their record was deleted.

    Usage:
        listener = VariantCleanupListener(resolver)
        listener.attach(bus)
    """

    def __init__(self, resolver: VersionResolver, include_original: bool = False):
        self._resolver = resolver
        self._include_original = include_original

    def attach(self, bus: ImageStorageEventBus) -> None:
        bus.subscribe(AfterDeleteEvent, self.on_after_delete)

    def detach(self, bus: ImageStorageEventBus) -> None:
        bus.unsubscribe(AfterDeleteEvent, self.on_after_delete)

    def on_after_delete(self, event: AfterDeleteEvent) -> None:
        self.remove_variants(event)

    def remove_variants(self, event: AfterDeleteEvent) -> List[str]:
        """
        Delete the resolved variant paths of event.record from event.storage.

        Returns:
            Paths that were actually deleted
        """
        record, storage = event.record, event.storage
        if record is None or storage is None or not record.has_id:
            return []

        deleted = []
        for label, result in self._resolver.resolve_all(record, {"url": False}).items():
            if label == ORIGINAL_VERSION and not self._include_original:
                continue
            # Overrides may point outside this adapter (e.g. CDN URLs).
            if not result.resolved or result.intercepted:
                continue
            if storage.delete(result.value):
                deleted.append(result.value)

        if deleted:
            logger.info(f"Removed {len(deleted)} variant(s) of {record.model} record {record.id}")
        return deleted
