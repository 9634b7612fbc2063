"""
Image Storage Domain Models.

Package Structure:
- exceptions.py: Error hierarchy (ConfigurationError, VersionNotFound, ...)
- records.py: StoredFileRecord, VersionSpec, ResolutionRequest/Result
"""

from .exceptions import (
    ImageStorageError,
    ConfigurationError,
    VersionNotFound,
    NotFound,
    InvalidArgumentError,
    AdapterNotFoundError,
    RecordNotFoundError,
)
from .records import (
    COMPARISON_OPERATORS,
    StoredFileRecord,
    DimensionConstraint,
    VersionSpec,
    ResolutionRequest,
    ResolutionResult,
)

__all__ = [
    # Exceptions
    "ImageStorageError",
    "ConfigurationError",
    "VersionNotFound",
    "NotFound",
    "InvalidArgumentError",
    "AdapterNotFoundError",
    "RecordNotFoundError",
    # Value objects
    "COMPARISON_OPERATORS",
    "StoredFileRecord",
    "DimensionConstraint",
    "VersionSpec",
    "ResolutionRequest",
    "ResolutionResult",
]
