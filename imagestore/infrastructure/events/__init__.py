"""
Infrastructure Events - Synchronous, interceptable event bus.
"""

from .storage_event_bus import (
    ImageStorageEventBus,
    EventHandler,
)

__all__ = [
    "ImageStorageEventBus",
    "EventHandler",
]
