"""
Application Factories.

Wires the image storage components from one ImageStoreConfig with proper
dependency injection. Each call builds its own bus, registry and resolver;
nothing is shared process-wide.

Usage:
    with ImageStorageFactory.create(config) as storage:
        storage.lifecycle.save(record)
        storage.resolver.resolve_all(record)
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from imagestore.config import ImageStoreConfig
from imagestore.domain.interfaces import IStoredFileRepository
from imagestore.infrastructure.database import (
    InMemoryStoredFileRepository,
    SQLAlchemyStoredFileRepository,
    create_session_factory,
)
from imagestore.infrastructure.events import ImageStorageEventBus
from imagestore.infrastructure.storage import (
    InMemoryStorageAdapter,
    LocalStorageAdapter,
    StorageAdapterRegistry,
)

from .services.cleanup import VariantCleanupListener
from .services.image_helper import ImageHelper
from .services.lifecycle import LifecycleCoordinator
from .services.path_builder import PathTemplateEngine
from .services.size_validator import SizeValidator
from .services.version_registry import VersionRegistry
from .services.version_resolver import VersionResolver


@dataclass
class ImageStorage:
    """
    Fully wired set of image storage services.

    When created over a database, the session is committed on a clean exit
    and rolled back on error.
    """
    config: ImageStoreConfig
    event_bus: ImageStorageEventBus
    adapters: StorageAdapterRegistry
    registry: VersionRegistry
    engine: PathTemplateEngine
    resolver: VersionResolver
    lifecycle: LifecycleCoordinator
    validator: SizeValidator
    helper: ImageHelper
    repository: IStoredFileRepository
    session: Optional[Session] = None

    def __enter__(self) -> "ImageStorage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.session is None:
            return False
        try:
            if exc_type is None:
                self.session.commit()
            else:
                self.session.rollback()
        finally:
            self.session.close()
        return False


class ImageStorageFactory:
    """Factory for ImageStorage service sets."""

    @staticmethod
    def create(
        config: ImageStoreConfig,
        repository: Optional[IStoredFileRepository] = None,
        adapters: Optional[StorageAdapterRegistry] = None,
        event_bus: Optional[ImageStorageEventBus] = None,
        cleanup_variants: bool = True,
    ) -> ImageStorage:
        """
        Build all services from config.

        Args:
            config: Immutable configuration
            repository: Record store; defaults to SQLAlchemy when
                config.database_url is set, otherwise in-memory
            adapters: Adapter registry; defaults to a "Local" adapter rooted at
                config.storage_root
            event_bus: Bus to publish on; a new one by default
            cleanup_variants: Attach VariantCleanupListener to after-delete
        """
        bus = event_bus or ImageStorageEventBus()

        if adapters is None:
            adapters = StorageAdapterRegistry()
            adapters.register("Local", lambda: LocalStorageAdapter(config.storage_root))

        session = None
        if repository is None:
            if config.database_url:
                _, session_factory = create_session_factory(config.database_url)
                session = session_factory()
                repository = SQLAlchemyStoredFileRepository(session)
            else:
                repository = InMemoryStoredFileRepository()

        registry = VersionRegistry(config)
        engine = PathTemplateEngine(config)
        resolver = VersionResolver(registry, engine, bus)

        if cleanup_variants:
            VariantCleanupListener(resolver).attach(bus)

        return ImageStorage(
            config=config,
            event_bus=bus,
            adapters=adapters,
            registry=registry,
            engine=engine,
            resolver=resolver,
            lifecycle=LifecycleCoordinator(bus, adapters, repository),
            validator=SizeValidator(),
            helper=ImageHelper(resolver, config.placeholder_dir),
            repository=repository,
            session=session,
        )

    @staticmethod
    def create_for_testing(config: Optional[ImageStoreConfig] = None) -> ImageStorage:
        """In-memory repository and an in-memory "Local" adapter."""
        adapters = StorageAdapterRegistry({"Local": InMemoryStorageAdapter()})
        return ImageStorageFactory.create(
            config or ImageStoreConfig.for_testing(),
            repository=InMemoryStoredFileRepository(),
            adapters=adapters,
        )
