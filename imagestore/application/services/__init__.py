"""Application services - Path building, version resolution, lifecycle, validation."""

from .path_builder import PathTemplateEngine, build_path, hash_path, parse_template
from .version_registry import VersionRegistry, ORIGINAL_VERSION
from .version_resolver import VersionResolver
from .lifecycle import LifecycleCoordinator
from .size_validator import SizeValidator, validate_image_size
from .cleanup import VariantCleanupListener
from .image_helper import ImageHelper

__all__ = [
    "PathTemplateEngine",
    "build_path",
    "hash_path",
    "parse_template",
    "VersionRegistry",
    "ORIGINAL_VERSION",
    "VersionResolver",
    "LifecycleCoordinator",
    "SizeValidator",
    "validate_image_size",
    "VariantCleanupListener",
    "ImageHelper",
]
