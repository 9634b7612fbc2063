"""
Local Storage Adapters.

IStorageAdapter implementations backed by the local filesystem and by a dict.

Usage:
    adapter = LocalStorageAdapter("storage")
    adapter.write("Avatar/ab/cd/42/thumbnail", b"...")
    adapter.read("Avatar/ab/cd/42/thumbnail")
"""

import logging
from pathlib import Path
from typing import Dict, Union

from imagestore.domain.interfaces import IStorageAdapter

logger = logging.getLogger(__name__)


class LocalStorageAdapter(IStorageAdapter):
    """
    Filesystem adapter rooted at a directory.

    Paths are forward-slash relative paths; anything resolving outside the
    root is rejected.

    ACID:
    - Writes are atomic (write to temp, rename)
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, path: str) -> Path:
        """Map a storage path to a filesystem path, preventing traversal."""
        relative = str(path).replace("\\", "/").lstrip("/")
        resolved = (self.root / relative).resolve()
        if resolved != self.root and self.root not in resolved.parents:
            raise ValueError(f"Invalid storage path: {path}")
        return resolved

    def read(self, path: str) -> bytes:
        file_path = self._path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return file_path.read_bytes()

    def write(self, path: str, content: bytes) -> None:
        file_path = self._path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        temp_path = file_path.with_name(file_path.name + ".tmp")
        temp_path.write_bytes(content)
        temp_path.replace(file_path)
        logger.debug(f"Wrote {len(content)} bytes to {path}")

    def delete(self, path: str) -> bool:
        file_path = self._path(path)
        if not file_path.is_file():
            logger.warning(f"Nothing to delete at {path}")
            return False
        file_path.unlink()
        logger.debug(f"Deleted {path}")
        return True

    def exists(self, path: str) -> bool:
        return self._path(path).is_file()


class InMemoryStorageAdapter(IStorageAdapter):
    """
    In-memory adapter for testing.

    Stores content in a dictionary keyed by normalized path.
    """

    def __init__(self):
        self._files: Dict[str, bytes] = {}

    @staticmethod
    def _key(path: str) -> str:
        return str(path).replace("\\", "/").lstrip("/")

    def read(self, path: str) -> bytes:
        key = self._key(path)
        if key not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[key]

    def write(self, path: str, content: bytes) -> None:
        self._files[self._key(path)] = content

    def delete(self, path: str) -> bool:
        return self._files.pop(self._key(path), None) is not None

    def exists(self, path: str) -> bool:
        return self._key(path) in self._files

    @property
    def paths(self) -> list:
        return sorted(self._files)
