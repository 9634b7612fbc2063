"""
Image storage lifecycle and version-resolution events.

Dispatched synchronously through ImageStorageEventBus. Every event can be
intercepted: a handler calls ``stop(result)`` (or returns a value) to halt the
remaining handlers and, for before-phase events, abort the operation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional
import uuid

from imagestore.domain.models import StoredFileRecord


@dataclass
class ImageStorageEvent:
    """Base class for all image storage events."""
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    topic: ClassVar[str] = "ImageStorage"

    def __post_init__(self):
        self._stopped = False
        self._result: Any = None

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    @property
    def result(self) -> Any:
        return self._result

    def stop(self, result: Any = None) -> None:
        """Halt propagation, optionally attaching a result value."""
        self._stopped = True
        if result is not None:
            self._result = result


@dataclass
class BeforeSaveEvent(ImageStorageEvent):
    """Dispatched before a record is written. Stopping aborts the save."""
    record: Optional[StoredFileRecord] = None

    topic: ClassVar[str] = "ImageStorage.beforeSave"


@dataclass
class AfterSaveEvent(ImageStorageEvent):
    """Dispatched once after a NEW record was written."""
    record: Optional[StoredFileRecord] = None
    storage: Any = None

    topic: ClassVar[str] = "ImageStorage.afterSave"


@dataclass
class BeforeDeleteEvent(ImageStorageEvent):
    """Dispatched with a pre-delete snapshot. Stopping aborts the delete."""
    record: Optional[StoredFileRecord] = None
    storage: Any = None

    topic: ClassVar[str] = "ImageStorage.beforeDelete"


@dataclass
class AfterDeleteEvent(ImageStorageEvent):
    """Dispatched after a record was deleted, carrying its snapshot."""
    record: Optional[StoredFileRecord] = None
    storage: Any = None

    topic: ClassVar[str] = "ImageStorage.afterDelete"


@dataclass
class VersionResolveEvent(ImageStorageEvent):
    """
    Dispatched when a version path is needed.

    A handler that stops this event with a path overrides the template-based
    path entirely.
    """
    hash_salt: Optional[str] = None
    record: Optional[StoredFileRecord] = None
    version: str = ""
    options: Dict[str, Any] = field(default_factory=dict)

    topic: ClassVar[str] = "ImageVersion.getVersions"

    @property
    def path(self) -> Optional[str]:
        return self.result
