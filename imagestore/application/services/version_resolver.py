"""
Version Resolver.

Resolves the path or URL of one image version:

1. A record without an id resolves to Unresolved immediately
2. The version spec comes from the registry; unknown labels get an empty spec
   carrying only their configured salt, if any
3. A VersionResolveEvent is dispatched; a handler that stops it with a path
   overrides everything else (separators normalized to "/")
4. Otherwise the PathTemplateEngine builds the path

Options understood by the resolver:
- url (default True): prefix template paths with the configured url_prefix
- originalVersion: label of the implicit original version in resolve_all
Every option is forwarded to interception handlers untouched.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from imagestore.application.services.path_builder import PathTemplateEngine, normalize_separators
from imagestore.application.services.version_registry import ORIGINAL_VERSION, VersionRegistry
from imagestore.domain.events import VersionResolveEvent
from imagestore.domain.models import (
    ResolutionRequest,
    ResolutionResult,
    StoredFileRecord,
    VersionNotFound,
    VersionSpec,
)
from imagestore.infrastructure.events import ImageStorageEventBus

logger = logging.getLogger(__name__)


class VersionResolver:
    """
    Orchestrates (record, version) -> ResolutionResult.

    Stateless apart from its collaborators; safe to share between callers.
    """

    def __init__(
        self,
        registry: VersionRegistry,
        engine: PathTemplateEngine,
        event_bus: Optional[ImageStorageEventBus] = None,
    ):
        """
        Args:
            registry: Version specs per model
            engine: Template engine used when no handler intercepts
            event_bus: Bus carrying VersionResolveEvent; None disables interception
        """
        self._registry = registry
        self._engine = engine
        self._bus = event_bus

    @property
    def registry(self) -> VersionRegistry:
        return self._registry

    def resolve(self, request: ResolutionRequest) -> ResolutionResult:
        """Resolve one version of a record."""
        record = request.record
        version = request.version_label or ORIGINAL_VERSION
        options = dict(request.options or {})

        if record is None or not record.has_id:
            return ResolutionResult.unresolved(version)

        try:
            spec = self._registry.spec_for(record.model, version)
        except VersionNotFound:
            spec = VersionSpec(label=version, hash_salt=self._registry.hash_salt(record.model, version))

        if self._bus is not None:
            event = self._bus.dispatch(VersionResolveEvent(
                hash_salt=spec.hash_salt,
                record=record,
                version=version,
                options=options,
            ))
            if event.is_stopped:
                if event.result is None:
                    logger.debug(f"Version {version} of {record.id} intercepted without a path")
                    return ResolutionResult.unresolved(version, intercepted=True)
                return ResolutionResult(
                    version=version,
                    value=normalize_separators(str(event.result)),
                    intercepted=True,
                )

        path = self._engine.build_path(record, version, hash_salt=spec.hash_salt)
        if options.get("url", True):
            path = self._engine.url_for(path)
        return ResolutionResult(version=version, value=path)

    def resolve_version(
        self,
        record: Optional[StoredFileRecord],
        version: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> ResolutionResult:
        """Convenience wrapper building the ResolutionRequest."""
        return self.resolve(ResolutionRequest(
            record=record,
            version_label=version or ORIGINAL_VERSION,
            options=dict(options or {}),
        ))

    def resolve_all(
        self,
        record: StoredFileRecord,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, ResolutionResult]:
        """
        Resolve every version of the record's model.

        Keys follow the registry order; the implicit original is included
        (last, unless configured explicitly).
        """
        options = dict(options or {})
        original_label = options.get("originalVersion") or ORIGINAL_VERSION
        return {
            spec.label: self.resolve(ResolutionRequest(record=record, version_label=spec.label, options=options))
            for spec in self._registry.versions_for(record.model, original_label)
        }
