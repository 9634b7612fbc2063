"""
imagestore - File/image lifecycle hooks and image version resolution.

Attaches save/delete notifications to a host's record store and maps
(record, version, options) to storage paths or URLs:
- PathTemplateEngine: Token templates with hash-sharded directories
- VersionRegistry: Per-model image versions from configuration
- VersionResolver: Interceptable version -> path/URL resolution
- LifecycleCoordinator: Before/after save and delete notifications
- SizeValidator: Image dimension checks

Architecture follows:
- Domain-Driven Design (domain / application / infrastructure)
- Repository pattern for the record store
- Immutable configuration injected at construction
"""

__version__ = "0.1.0"

from imagestore.config import ImageStoreConfig

# Domain
from imagestore.domain.models import (
    StoredFileRecord,
    DimensionConstraint,
    VersionSpec,
    ResolutionRequest,
    ResolutionResult,
    ImageStorageError,
    ConfigurationError,
    VersionNotFound,
    NotFound,
    InvalidArgumentError,
    AdapterNotFoundError,
)
from imagestore.domain.events import (
    BeforeSaveEvent,
    AfterSaveEvent,
    BeforeDeleteEvent,
    AfterDeleteEvent,
    VersionResolveEvent,
)

# Application
from imagestore.application import (
    PathTemplateEngine,
    VersionRegistry,
    VersionResolver,
    LifecycleCoordinator,
    SizeValidator,
    VariantCleanupListener,
    ImageHelper,
    ImageStorage,
    ImageStorageFactory,
)

# Infrastructure
from imagestore.infrastructure import (
    ImageStorageEventBus,
    StorageAdapterRegistry,
    LocalStorageAdapter,
    InMemoryStorageAdapter,
    SQLAlchemyStoredFileRepository,
    InMemoryStoredFileRepository,
)

__all__ = [
    "__version__",
    "ImageStoreConfig",
    # Domain
    "StoredFileRecord",
    "DimensionConstraint",
    "VersionSpec",
    "ResolutionRequest",
    "ResolutionResult",
    "ImageStorageError",
    "ConfigurationError",
    "VersionNotFound",
    "NotFound",
    "InvalidArgumentError",
    "AdapterNotFoundError",
    "BeforeSaveEvent",
    "AfterSaveEvent",
    "BeforeDeleteEvent",
    "AfterDeleteEvent",
    "VersionResolveEvent",
    # Application
    "PathTemplateEngine",
    "VersionRegistry",
    "VersionResolver",
    "LifecycleCoordinator",
    "SizeValidator",
    "VariantCleanupListener",
    "ImageHelper",
    "ImageStorage",
    "ImageStorageFactory",
    # Infrastructure
    "ImageStorageEventBus",
    "StorageAdapterRegistry",
    "LocalStorageAdapter",
    "InMemoryStorageAdapter",
    "SQLAlchemyStoredFileRepository",
    "InMemoryStoredFileRepository",
]
