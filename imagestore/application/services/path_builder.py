"""
Path Template Engine.

Turns a stored file record and a version label into a storage path using a
token template. Pure: no I/O, no state beyond a cache of parsed templates.

Tokens:
- {id}: Record identifier (required)
- {version}: Version label (required)
- {model}: Logical model name
- {hash}: Sharded digest of salt + id, e.g. "3f/a2" for two levels

Usage:
    engine = PathTemplateEngine(ImageStoreConfig(path_template="{model}/{hash}/{id}/{version}"))
    engine.build_path(record, "thumbnail")   # "Avatar/3f/a2/42/thumbnail"
"""

import hashlib
import re
from string import Formatter
from typing import Dict, Optional, Tuple

from imagestore.config import ImageStoreConfig
from imagestore.domain.models import ConfigurationError, InvalidArgumentError, StoredFileRecord

RECOGNIZED_TOKENS = frozenset({"id", "model", "version", "hash"})
REQUIRED_TOKENS = ("id", "version")

_DUPLICATE_SLASHES = re.compile(r"/{2,}")


def normalize_separators(path: str) -> str:
    """Turn Windows separators into forward slashes."""
    return path.replace("\\", "/")


def parse_template(template: str) -> Tuple[str, ...]:
    """
    Validate a path template and return the tokens it uses, in order.

    Raises:
        ConfigurationError: Unknown token, positional or formatted field,
            unbalanced braces, or a missing {id}/{version}
    """
    if not isinstance(template, str) or not template.strip():
        raise ConfigurationError("Path template must be a non-empty string")

    tokens = []
    try:
        for _literal, field_name, format_spec, conversion in Formatter().parse(template):
            if field_name is None:
                continue
            if field_name not in RECOGNIZED_TOKENS:
                raise ConfigurationError(
                    f"Unrecognized token {{{field_name}}} in path template {template!r}"
                )
            if format_spec or conversion:
                raise ConfigurationError(
                    f"Token {{{field_name}}} must not carry a format spec or conversion"
                )
            tokens.append(field_name)
    except ValueError as e:
        raise ConfigurationError(f"Malformed path template {template!r}: {e}") from e

    missing = [t for t in REQUIRED_TOKENS if t not in tokens]
    if missing:
        raise ConfigurationError(
            f"Path template {template!r} must contain " + " and ".join(f"{{{t}}}" for t in missing)
        )
    return tuple(tokens)


def hash_path(record_id: str, salt: Optional[str] = None, levels: int = 2, algorithm: str = "sha1") -> str:
    """
    Sharded directory path from a digest of salt + record id.

    Each level is two hex characters, so every level fans out to at most 256
    directories.
    """
    digest = hashlib.new(algorithm, f"{salt or ''}{record_id}".encode("utf-8")).hexdigest()
    return "/".join(digest[i * 2:i * 2 + 2] for i in range(levels))


class PathTemplateEngine:
    """
    Deterministic (record, version, config) -> path mapping.

    The configuration given at construction is the default; build_path accepts
    another snapshot per call. Parsed templates are cached by string.
    """

    def __init__(self, config: Optional[ImageStoreConfig] = None):
        self._config = config or ImageStoreConfig()
        self._parsed: Dict[str, Tuple[str, ...]] = {}
        # Fail fast on a bad default template.
        self._tokens(self._config.path_template)

    @property
    def config(self) -> ImageStoreConfig:
        return self._config

    def _tokens(self, template: str) -> Tuple[str, ...]:
        tokens = self._parsed.get(template)
        if tokens is None:
            tokens = parse_template(template)
            self._parsed[template] = tokens
        return tokens

    def build_path(
        self,
        record: StoredFileRecord,
        version_label: str,
        config: Optional[ImageStoreConfig] = None,
        hash_salt: Optional[str] = None,
    ) -> str:
        """
        Build the storage path for one version of a record.

        Args:
            record: Record with a non-empty id
            version_label: Non-empty version label
            config: Configuration snapshot (defaults to the engine's)
            hash_salt: Salt for {hash}; defaults to the configured image hash

        Returns:
            Forward-slash path without duplicate separators

        Raises:
            InvalidArgumentError: Empty record id or version label
            ConfigurationError: Invalid template
        """
        config = config or self._config
        if record is None or not record.has_id:
            raise InvalidArgumentError("Cannot build a path for a record without an id")
        if not isinstance(version_label, str) or not version_label:
            raise InvalidArgumentError("Version label must be a non-empty string")

        tokens = self._tokens(config.path_template)
        values = {
            "id": record.id,
            "model": record.model or "",
            "version": version_label,
        }
        if "hash" in tokens:
            if hash_salt is None:
                hash_salt = config.hash_salt(record.model, version_label)
            values["hash"] = hash_path(record.id, hash_salt, config.hash_levels, config.hash_algorithm)

        path = _DUPLICATE_SLASHES.sub("/", normalize_separators(config.path_template.format(**values)))
        if not config.path_template.startswith(("/", "\\")):
            path = path.lstrip("/")
        return path

    def url_for(self, path: str, config: Optional[ImageStoreConfig] = None) -> str:
        """Join the configured URL prefix and a path with a single separator."""
        config = config or self._config
        path = normalize_separators(path)
        if "://" in path:
            return path
        prefix = normalize_separators(config.url_prefix or "")
        if not prefix:
            return path
        return prefix.rstrip("/") + "/" + path.lstrip("/")


def build_path(record: StoredFileRecord, version_label: str, config: ImageStoreConfig) -> str:
    """Functional form of PathTemplateEngine.build_path."""
    return PathTemplateEngine(config).build_path(record, version_label)
