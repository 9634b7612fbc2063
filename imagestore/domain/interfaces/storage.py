"""
Storage Boundary Interfaces.

Abstractions for the collaborators this package talks to but does not own:
physical byte storage (adapters) and the host's record store.

Implementations:
- LocalStorageAdapter: imagestore/infrastructure/storage/local_adapter.py
- InMemoryStoredFileRepository / SQLAlchemyStoredFileRepository:
  imagestore/infrastructure/database/repositories.py
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from imagestore.domain.models import StoredFileRecord


# ═══════════════════════════════════════════════════════════════════════════════
# Storage Adapter Interface
# ═══════════════════════════════════════════════════════════════════════════════


class IStorageAdapter(ABC):
    """
    Byte storage addressed by forward-slash paths.

    Paths are the ones produced by PathTemplateEngine (or an override handler),
    relative to the adapter's root.
    """

    @abstractmethod
    def read(self, path: str) -> bytes:
        """
        Read content at path.

        Raises:
            FileNotFoundError: If nothing is stored at path
        """
        pass

    @abstractmethod
    def write(self, path: str, content: bytes) -> None:
        """Store content at path, creating intermediate levels as needed."""
        pass

    @abstractmethod
    def delete(self, path: str) -> bool:
        """
        Delete content at path.

        Returns:
            True if something was deleted, False if path did not exist
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass


# ═══════════════════════════════════════════════════════════════════════════════
# Stored File Repository Interface
# ═══════════════════════════════════════════════════════════════════════════════


class IStoredFileRepository(ABC):
    """
    Persistence boundary for stored file records.

    LifecycleCoordinator drives save/delete through this interface so that
    notifications can wrap the actual write.
    """

    @abstractmethod
    def get(self, record_id: str) -> Optional[StoredFileRecord]:
        pass

    @abstractmethod
    def exists(self, record_id: str) -> bool:
        pass

    @abstractmethod
    def add(self, record: StoredFileRecord) -> StoredFileRecord:
        """
        Insert a new record.

        Returns:
            The stored record; an id is assigned when the input had none
        """
        pass

    @abstractmethod
    def update(self, record: StoredFileRecord) -> StoredFileRecord:
        pass

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        pass

    @abstractmethod
    def find_by_model(self, model: str) -> List[StoredFileRecord]:
        pass
