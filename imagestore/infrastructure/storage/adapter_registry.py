"""
Storage adapter registry.

Maps the adapter tag stored on each record to an IStorageAdapter handle.
Adapters may be registered directly or as zero-argument factories, which are
called once on first use.
"""

import logging
from threading import Lock
from typing import Callable, Dict, List, Optional, Union

from imagestore.domain.interfaces import IStorageAdapter
from imagestore.domain.models import AdapterNotFoundError

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[], IStorageAdapter]


class StorageAdapterRegistry:
    """Tag -> adapter lookup used by lifecycle notifications and consumers."""

    def __init__(self, adapters: Optional[Dict[str, Union[IStorageAdapter, AdapterFactory]]] = None):
        self._lock = Lock()
        self._adapters: Dict[str, IStorageAdapter] = {}
        self._factories: Dict[str, AdapterFactory] = {}
        for tag, adapter in (adapters or {}).items():
            self.register(tag, adapter)

    def register(self, tag: str, adapter: Union[IStorageAdapter, AdapterFactory]) -> None:
        """Register an adapter instance or a lazy factory under a tag."""
        with self._lock:
            if isinstance(adapter, IStorageAdapter):
                self._adapters[tag] = adapter
                self._factories.pop(tag, None)
            elif callable(adapter):
                self._factories[tag] = adapter
                self._adapters.pop(tag, None)
            else:
                raise TypeError(f"Adapter for '{tag}' must be an IStorageAdapter or a factory")

    def adapter_for(self, tag: Optional[str]) -> IStorageAdapter:
        """
        Get the adapter for a tag.

        Raises:
            AdapterNotFoundError: If nothing is registered under tag
        """
        with self._lock:
            adapter = self._adapters.get(tag)
            if adapter is not None:
                return adapter
            factory = self._factories.pop(tag, None)
            if factory is None:
                raise AdapterNotFoundError(tag)
            adapter = factory()
            self._adapters[tag] = adapter
            logger.debug(f"Created storage adapter '{tag}' ({type(adapter).__name__})")
            return adapter

    def has(self, tag: str) -> bool:
        with self._lock:
            return tag in self._adapters or tag in self._factories

    @property
    def tags(self) -> List[str]:
        with self._lock:
            return sorted(set(self._adapters) | set(self._factories))
