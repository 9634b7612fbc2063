"""
Version Registry.

Per-model, ordered image version specs built once from configuration and
read-only afterwards, so it can be shared between threads without locking.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from imagestore.config import ImageStoreConfig
from imagestore.domain.models import (
    ConfigurationError,
    DimensionConstraint,
    InvalidArgumentError,
    VersionNotFound,
    VersionSpec,
)

logger = logging.getLogger(__name__)

ORIGINAL_VERSION = "original"


class VersionRegistry:
    """
    Lookup of VersionSpec by (model, label).

    Every model implicitly has an ``original`` version without constraints,
    appended after the configured versions unless configuration lists it.
    """

    def __init__(self, config: ImageStoreConfig):
        """
        Build specs from config.image_sizes; config.image_hashes only supplies
        salts and never adds a version.

        Raises:
            ConfigurationError: If a size entry is malformed
        """
        self._versions: Dict[str, Tuple[VersionSpec, ...]] = {}
        self._hashes = config.image_hashes

        for model, sizes in config.image_sizes.items():
            sizes = sizes or {}
            hashes = config.image_hashes.get(model) or {}
            if not isinstance(sizes, Mapping) or not isinstance(hashes, Mapping):
                raise ConfigurationError(f"Version configuration for '{model}' must be a mapping")

            self._versions[model] = tuple(
                self._build_spec(model, label, params, hashes.get(label))
                for label, params in sizes.items()
            )

        logger.debug(f"Version registry built for {len(self._versions)} model(s)")

    @staticmethod
    def _build_spec(model: str, label: str, params: Any, salt: Optional[str]) -> VersionSpec:
        params = params or {}
        if not isinstance(params, Mapping):
            raise ConfigurationError(f"Image size for {model}.{label} must be a mapping, got {params!r}")
        try:
            return VersionSpec(
                label=label,
                width=DimensionConstraint.parse(params.get("width")),
                height=DimensionConstraint.parse(params.get("height")),
                hash_salt=salt,
                params=dict(params),
            )
        except InvalidArgumentError as e:
            raise ConfigurationError(f"Invalid image size for {model}.{label}: {e}") from e

    def models(self) -> List[str]:
        """Configured model names, in configuration order."""
        return list(self._versions)

    def versions_for(self, model: str, original_label: str = ORIGINAL_VERSION) -> Tuple[VersionSpec, ...]:
        """
        All versions of a model, configured order, implicit original last.

        original_label only renames the implicit original. A model that
        configures ``original`` (or original_label) itself has no implicit
        original, so the configured entry is returned and nothing is added.

        Args:
            model: Logical model name
            original_label: Label of the implicit original version
        """
        configured = self._versions.get(model, ())
        if any(spec.label in (ORIGINAL_VERSION, original_label) for spec in configured):
            return configured
        return configured + (
            VersionSpec(label=original_label, hash_salt=self.hash_salt(model, original_label)),
        )

    def hash_salt(self, model: str, label: str) -> Optional[str]:
        """Configured salt for (model, label), whether or not it is a version."""
        return (self._hashes.get(model) or {}).get(label)

    def find(self, model: str, label: str) -> Optional[VersionSpec]:
        """Like spec_for, but returns None instead of raising."""
        for spec in self._versions.get(model, ()):
            if spec.label == label:
                return spec
        if label == ORIGINAL_VERSION:
            return VersionSpec(label=ORIGINAL_VERSION, hash_salt=self.hash_salt(model, label))
        return None

    def spec_for(self, model: str, label: str) -> VersionSpec:
        """
        Get the spec for (model, label).

        Raises:
            VersionNotFound: No configured version and no implicit default
        """
        spec = self.find(model, label)
        if spec is None:
            raise VersionNotFound(model, label)
        return spec
