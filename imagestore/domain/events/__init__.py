"""
Domain Events - Lifecycle and version-resolution notifications.
"""

from .storage_events import (
    ImageStorageEvent,
    BeforeSaveEvent,
    AfterSaveEvent,
    BeforeDeleteEvent,
    AfterDeleteEvent,
    VersionResolveEvent,
)

__all__ = [
    # Base
    "ImageStorageEvent",
    # Lifecycle events
    "BeforeSaveEvent",
    "AfterSaveEvent",
    "BeforeDeleteEvent",
    "AfterDeleteEvent",
    # Version events
    "VersionResolveEvent",
]
