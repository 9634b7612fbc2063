"""
Pytest fixtures for imagestore tests.
"""

import pytest

from imagestore.config import ImageStoreConfig
from imagestore.domain.models import StoredFileRecord
from imagestore.application.services import (
    LifecycleCoordinator,
    PathTemplateEngine,
    VersionRegistry,
    VersionResolver,
)
from imagestore.infrastructure.database import InMemoryStoredFileRepository
from imagestore.infrastructure.events import ImageStorageEventBus
from imagestore.infrastructure.storage import InMemoryStorageAdapter, StorageAdapterRegistry


# ═══════════════════════════════════════════════════════════════════════════════
# Configuration and resolution
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def config() -> ImageStoreConfig:
    return ImageStoreConfig.for_testing()


@pytest.fixture
def registry(config) -> VersionRegistry:
    return VersionRegistry(config)


@pytest.fixture
def engine(config) -> PathTemplateEngine:
    return PathTemplateEngine(config)


@pytest.fixture
def event_bus() -> ImageStorageEventBus:
    return ImageStorageEventBus()


@pytest.fixture
def resolver(registry, engine, event_bus) -> VersionResolver:
    return VersionResolver(registry, engine, event_bus)


# ═══════════════════════════════════════════════════════════════════════════════
# Storage and persistence
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def memory_adapter() -> InMemoryStorageAdapter:
    return InMemoryStorageAdapter()


@pytest.fixture
def adapters(memory_adapter) -> StorageAdapterRegistry:
    return StorageAdapterRegistry({"Local": memory_adapter})


@pytest.fixture
def repository() -> InMemoryStoredFileRepository:
    return InMemoryStoredFileRepository()


@pytest.fixture
def coordinator(event_bus, adapters, repository) -> LifecycleCoordinator:
    return LifecycleCoordinator(event_bus, adapters, repository)


# ═══════════════════════════════════════════════════════════════════════════════
# Records
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def avatar_record() -> StoredFileRecord:
    return StoredFileRecord(
        id="42",
        model="Avatar",
        adapter="Local",
        filename="me.jpg",
        extension="jpg",
        mime_type="image/jpeg",
    )


@pytest.fixture
def record_without_id() -> StoredFileRecord:
    return StoredFileRecord(id=None, model="Avatar", adapter="Local")
