"""
Application Layer - Service implementations and their wiring.
"""

from .services import (
    PathTemplateEngine,
    VersionRegistry,
    VersionResolver,
    LifecycleCoordinator,
    SizeValidator,
    VariantCleanupListener,
    ImageHelper,
)
from .factories import ImageStorage, ImageStorageFactory

__all__ = [
    "PathTemplateEngine",
    "VersionRegistry",
    "VersionResolver",
    "LifecycleCoordinator",
    "SizeValidator",
    "VariantCleanupListener",
    "ImageHelper",
    "ImageStorage",
    "ImageStorageFactory",
]
