"""
Image Storage Exceptions.

Exception hierarchy for path building, version resolution and validation.

Design Principles:
- Hierarchy: All inherit from ImageStorageError base
- Rich context: Exceptions carry the offending model/label where useful
- Unresolved is NOT an exception; see ResolutionResult
"""

from typing import Optional


class ImageStorageError(Exception):
    """
    Base exception for image storage errors.

    Allows catching all image storage errors with one handler.
    """
    pass


class ConfigurationError(ImageStorageError):
    """
    Malformed configuration.

    Raised when:
    - A path template references an unrecognized token
    - A path template omits {id} or {version}
    - An image size entry is not a valid (operator, value) pair

    Fatal at startup or first use; never retried.
    """
    pass


class VersionNotFound(ImageStorageError):
    """
    No version spec for a (model, label) pair.

    Recoverable: the resolver falls back to an empty spec.
    """

    def __init__(self, model: str, label: str):
        self.model = model
        self.label = label
        super().__init__(f"No version '{label}' configured for model '{model}'")


NotFound = VersionNotFound


class InvalidArgumentError(ImageStorageError, ValueError):
    """
    Caller supplied an unusable argument.

    Raised when:
    - Size validation gets neither a width nor a height constraint
    - A comparison operator is unknown
    - A record id or version label is empty when building a path
    """
    pass


class AdapterNotFoundError(ImageStorageError):
    """No storage adapter registered for a tag."""

    def __init__(self, tag: Optional[str]):
        self.tag = tag
        super().__init__(f"No storage adapter registered for '{tag}'")


class RecordNotFoundError(ImageStorageError):
    """Stored file record does not exist."""
    pass


__all__ = [
    "ImageStorageError",
    "ConfigurationError",
    "VersionNotFound",
    "NotFound",
    "InvalidArgumentError",
    "AdapterNotFoundError",
    "RecordNotFoundError",
]
