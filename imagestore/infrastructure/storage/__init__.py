"""
Infrastructure Storage - Adapter registry and local/in-memory adapters.
"""

from .adapter_registry import StorageAdapterRegistry, AdapterFactory
from .local_adapter import LocalStorageAdapter, InMemoryStorageAdapter

__all__ = [
    "StorageAdapterRegistry",
    "AdapterFactory",
    "LocalStorageAdapter",
    "InMemoryStorageAdapter",
]
