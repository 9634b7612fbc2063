"""
Image Storage Value Objects.

Immutable value objects describing stored files, image versions and
resolution requests/results.

Value Objects:
- StoredFileRecord: Identity of one persisted file (id, model, adapter)
- DimensionConstraint: (operator, value) comparison for one image axis
- VersionSpec: One named image variant for a model
- ResolutionRequest: Transient (record, version, options) triple
- ResolutionResult: Resolved path/URL or the Unresolved sentinel
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from .exceptions import InvalidArgumentError


# Operators accepted for dimension comparisons, including the word aliases
# understood by the classic validation helpers.
COMPARISON_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "equalto": operator.eq,
    "notequal": operator.ne,
    "isgreater": operator.gt,
    "greater": operator.gt,
    "greaterorequal": operator.ge,
    "isless": operator.lt,
    "less": operator.lt,
    "lessorequal": operator.le,
}


@dataclass(frozen=True)
class StoredFileRecord:
    """
    One persisted file or image.

    Owned by the persistence layer; this package only reads it. Only ``id``,
    ``model`` and ``adapter`` take part in path resolution, the remaining
    fields travel with lifecycle notifications.

    Attributes:
        id: Opaque identifier (None or "" means the record has no identity yet)
        model: Logical owner name grouping version configurations
        adapter: Tag identifying the storage backend
        old_file_id: Id of a previously stored file this one supersedes
    """
    id: Optional[str] = None
    model: str = ""
    adapter: str = "Local"
    filename: Optional[str] = None
    extension: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    path: Optional[str] = None
    foreign_key: Optional[str] = None
    old_file_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        # Opaque ids may arrive as ints from the host; keep them as strings.
        if self.id is not None and not isinstance(self.id, str):
            object.__setattr__(self, "id", str(self.id))
        if self.old_file_id is not None and not isinstance(self.old_file_id, str):
            object.__setattr__(self, "old_file_id", str(self.old_file_id))

    @property
    def has_id(self) -> bool:
        return bool(self.id)

    def with_changes(self, **changes: Any) -> "StoredFileRecord":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "model": self.model,
            "adapter": self.adapter,
            "filename": self.filename,
            "extension": self.extension,
            "mime_type": self.mime_type,
            "size": self.size,
            "path": self.path,
            "foreign_key": self.foreign_key,
            "old_file_id": self.old_file_id,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StoredFileRecord":
        """Deserialize from dictionary, ignoring unknown keys."""
        return cls(
            id=data.get("id"),
            model=data.get("model") or "",
            adapter=data.get("adapter") or "Local",
            filename=data.get("filename"),
            extension=data.get("extension"),
            mime_type=data.get("mime_type"),
            size=data.get("size"),
            path=data.get("path"),
            foreign_key=data.get("foreign_key"),
            old_file_id=data.get("old_file_id"),
            metadata=dict(data.get("metadata") or {}),
        )


def _parse_number(raw: str) -> Union[int, float]:
    """Numeric strings from forms or env vars, e.g. "100" or "12.5"."""
    try:
        number = float(raw.strip())
    except ValueError:
        raise InvalidArgumentError(f"Comparison value must be numeric, got {raw!r}") from None
    if not math.isfinite(number):
        raise InvalidArgumentError(f"Comparison value must be finite, got {raw!r}")
    return int(number) if number.is_integer() else number


@dataclass(frozen=True)
class DimensionConstraint:
    """
    Comparison for one image axis, e.g. ``DimensionConstraint(">=", 100)``.

    Raises:
        InvalidArgumentError: Unknown operator or non-numeric value
    """
    operator: str
    value: Union[int, float]

    def __post_init__(self):
        normalized = str(self.operator).replace(" ", "").lower()
        if normalized not in COMPARISON_OPERATORS:
            raise InvalidArgumentError(f"Unknown comparison operator: {self.operator!r}")
        if isinstance(self.value, str):
            object.__setattr__(self, "value", _parse_number(self.value))
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise InvalidArgumentError(
                f"Comparison value must be numeric, got {type(self.value).__name__}"
            )
        object.__setattr__(self, "operator", normalized)

    def matches(self, measured: Union[int, float]) -> bool:
        """Apply the comparison to a measured axis value."""
        return COMPARISON_OPERATORS[self.operator](measured, self.value)

    @classmethod
    def parse(cls, raw: Any) -> Optional["DimensionConstraint"]:
        """
        Build from ``[operator, value]``, ``(operator, value)`` or an existing
        constraint. ``None`` passes through.
        """
        if raw is None or isinstance(raw, DimensionConstraint):
            return raw
        if isinstance(raw, Sequence) and not isinstance(raw, str) and len(raw) == 2:
            return cls(operator=raw[0], value=raw[1])
        raise InvalidArgumentError(f"Expected (operator, value) pair, got {raw!r}")

    def to_list(self) -> list:
        return [self.operator, self.value]


@dataclass(frozen=True)
class VersionSpec:
    """
    One named image variant for a model.

    Attributes:
        label: Version label ("thumbnail", "original", ...)
        width: Optional width constraint
        height: Optional height constraint
        hash_salt: Optional salt mixed into the {hash} path token
        params: Raw transform parameters as configured, for consumers
    """
    label: str
    width: Optional[DimensionConstraint] = None
    height: Optional[DimensionConstraint] = None
    hash_salt: Optional[str] = None
    params: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def has_constraints(self) -> bool:
        return self.width is not None or self.height is not None

    def constraints(self) -> Dict[str, DimensionConstraint]:
        """Constraints keyed by axis, only those present."""
        result = {}
        if self.width is not None:
            result["width"] = self.width
        if self.height is not None:
            result["height"] = self.height
        return result


@dataclass(frozen=True)
class ResolutionRequest:
    """A single (record, version, options) resolution call."""
    record: StoredFileRecord
    version_label: str = "original"
    options: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class ResolutionResult:
    """
    Outcome of resolving one version.

    ``value`` is the path or URL; ``None`` means Unresolved, which tells the
    presentation layer to render a fallback instead.
    """
    version: str
    value: Optional[str] = None
    intercepted: bool = False

    @classmethod
    def unresolved(cls, version: str, intercepted: bool = False) -> "ResolutionResult":
        return cls(version=version, value=None, intercepted=intercepted)

    @property
    def resolved(self) -> bool:
        return self.value is not None

    def __bool__(self) -> bool:
        return self.resolved

    def __str__(self) -> str:
        return self.value or ""


__all__ = [
    "COMPARISON_OPERATORS",
    "StoredFileRecord",
    "DimensionConstraint",
    "VersionSpec",
    "ResolutionRequest",
    "ResolutionResult",
]
