"""
Domain Interfaces - Boundaries to storage adapters and the record store.
"""

from .storage import (
    IStorageAdapter,
    IStoredFileRepository,
)

__all__ = [
    "IStorageAdapter",
    "IStoredFileRepository",
]
