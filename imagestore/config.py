"""
imagestore Configuration.

Immutable configuration object passed to each component at construction.
Nothing in the package reads process-wide configuration at resolution time.

Recognized options:
- image_sizes[model][version] -> {"width": [op, value], "height": [op, value]}
- image_hashes[model][version] -> hash salt
- path_template: Token template for storage paths
- url_prefix: Prefix for generated URLs

Usage:
    from imagestore.config import ImageStoreConfig

    # For testing
    config = ImageStoreConfig.for_testing()

    # From a mapping (e.g. parsed JSON/YAML)
    config = ImageStoreConfig.from_dict({
        "path_template": "{model}/{hash}/{id}/{version}",
        "image_sizes": {"Avatar": {"thumbnail": {"width": ["<=", 100]}}},
    })

    # From environment
    config = ImageStoreConfig.from_env()
"""

import copy
import hashlib
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from imagestore.domain.models import ConfigurationError


DEFAULT_PATH_TEMPLATE = "{model}/{hash}/{id}/{version}"


@dataclass(frozen=True)
class ImageStoreConfig:
    """
    Image storage configuration.

    Attributes:
        path_template: Template with {id}, {model}, {version}, {hash} tokens
        url_prefix: Prefix joined to template paths to form URLs
        hash_levels: Directory levels produced by {hash} (1-3)
        hash_algorithm: hashlib algorithm used for {hash}
        image_sizes: Per-model, per-version dimension constraints
        image_hashes: Per-model, per-version hash salts
        placeholder_dir: Directory of fallback images, one per version
        storage_root: Root directory for the local storage adapter
        database_url: SQLAlchemy URL for the stored file repository
        log_level: Logging level name
    """
    path_template: str = DEFAULT_PATH_TEMPLATE
    url_prefix: str = "/"
    hash_levels: int = 2
    hash_algorithm: str = "sha1"
    image_sizes: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)
    image_hashes: Dict[str, Dict[str, str]] = field(default_factory=dict)
    placeholder_dir: str = "placeholder"
    storage_root: str = "storage"
    database_url: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        if not 1 <= int(self.hash_levels) <= 3:
            raise ConfigurationError(f"hash_levels must be between 1 and 3, got {self.hash_levels}")
        # shake_* digests need an explicit length, so they cannot shard paths.
        if self.hash_algorithm not in hashlib.algorithms_available or self.hash_algorithm.startswith("shake"):
            raise ConfigurationError(f"Unknown hash algorithm: {self.hash_algorithm}")
        if not isinstance(self.image_sizes, Mapping) or not isinstance(self.image_hashes, Mapping):
            raise ConfigurationError("image_sizes and image_hashes must be mappings")
        # Own private copies so later mutation by the caller cannot leak in.
        object.__setattr__(self, "image_sizes", copy.deepcopy(dict(self.image_sizes)))
        object.__setattr__(self, "image_hashes", copy.deepcopy(dict(self.image_hashes)))

    def hash_salt(self, model: str, version: str) -> Optional[str]:
        """Configured salt for (model, version), if any."""
        return self.image_hashes.get(model, {}).get(version)

    @classmethod
    def for_testing(cls, **overrides: Any) -> "ImageStoreConfig":
        """
        Create config for unit tests.

        Two models are configured: Avatar (thumbnail, medium) and Gallery
        (small). Keyword arguments override any field.
        """
        values: Dict[str, Any] = {
            "path_template": DEFAULT_PATH_TEMPLATE,
            "url_prefix": "/",
            "hash_levels": 2,
            "image_sizes": {
                "Avatar": {
                    "thumbnail": {"width": ["<=", 100], "height": ["<=", 100]},
                    "medium": {"width": ["<=", 400]},
                },
                "Gallery": {
                    "small": {"height": ["==", 50]},
                },
            },
            "image_hashes": {
                "Avatar": {"thumbnail": "a1b2c3"},
            },
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ImageStoreConfig":
        """
        Deserialize from dictionary.

        Accepts both snake_case keys and the camelCase names used by older
        configuration files (imageSizes, imageHashes, pathTemplate, urlPrefix).
        """
        def pick(name: str, legacy: str, default: Any) -> Any:
            if name in data:
                return data[name]
            return data.get(legacy, default)

        return cls(
            path_template=pick("path_template", "pathTemplate", DEFAULT_PATH_TEMPLATE),
            url_prefix=pick("url_prefix", "urlPrefix", "/"),
            hash_levels=int(pick("hash_levels", "hashLevels", 2)),
            hash_algorithm=pick("hash_algorithm", "hashAlgorithm", "sha1"),
            image_sizes=pick("image_sizes", "imageSizes", {}) or {},
            image_hashes=pick("image_hashes", "imageHashes", {}) or {},
            placeholder_dir=pick("placeholder_dir", "placeholderDir", "placeholder"),
            storage_root=pick("storage_root", "storageRoot", "storage"),
            database_url=pick("database_url", "databaseUrl", None),
            log_level=pick("log_level", "logLevel", "INFO"),
        )

    @classmethod
    def from_env(cls) -> "ImageStoreConfig":
        """
        Create config from environment variables.

        Environment Variables:
            IMAGESTORE_CONFIG_FILE: JSON file loaded first (optional)
            IMAGESTORE_PATH_TEMPLATE: Path template
            IMAGESTORE_URL_PREFIX: URL prefix (default: "/")
            IMAGESTORE_HASH_LEVELS: Sharding levels (default: "2")
            IMAGESTORE_HASH_ALGORITHM: hashlib name (default: "sha1")
            IMAGESTORE_IMAGE_SIZES: JSON-encoded image_sizes mapping
            IMAGESTORE_IMAGE_HASHES: JSON-encoded image_hashes mapping
            IMAGESTORE_STORAGE_ROOT: Local adapter root (default: "storage")
            IMAGESTORE_DATABASE_URL: SQLAlchemy URL
            IMAGESTORE_LOG_LEVEL: Logging level (default: "INFO")

        Raises:
            ConfigurationError: If a JSON value cannot be decoded
        """
        data: Dict[str, Any] = {}
        config_file = os.getenv("IMAGESTORE_CONFIG_FILE")
        if config_file:
            data.update(_load_json(Path(config_file).read_text(encoding="utf-8"), config_file))

        env_map = {
            "IMAGESTORE_PATH_TEMPLATE": "path_template",
            "IMAGESTORE_URL_PREFIX": "url_prefix",
            "IMAGESTORE_HASH_LEVELS": "hash_levels",
            "IMAGESTORE_HASH_ALGORITHM": "hash_algorithm",
            "IMAGESTORE_PLACEHOLDER_DIR": "placeholder_dir",
            "IMAGESTORE_STORAGE_ROOT": "storage_root",
            "IMAGESTORE_DATABASE_URL": "database_url",
            "IMAGESTORE_LOG_LEVEL": "log_level",
        }
        for env_name, key in env_map.items():
            value = os.getenv(env_name)
            if value is not None:
                data[key] = value

        for env_name, key in (
            ("IMAGESTORE_IMAGE_SIZES", "image_sizes"),
            ("IMAGESTORE_IMAGE_HASHES", "image_hashes"),
        ):
            value = os.getenv(env_name)
            if value:
                data[key] = _load_json(value, env_name)

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "path_template": self.path_template,
            "url_prefix": self.url_prefix,
            "hash_levels": self.hash_levels,
            "hash_algorithm": self.hash_algorithm,
            "image_sizes": copy.deepcopy(self.image_sizes),
            "image_hashes": copy.deepcopy(self.image_hashes),
            "placeholder_dir": self.placeholder_dir,
            "storage_root": self.storage_root,
            "database_url": self.database_url,
            "log_level": self.log_level,
        }


def _load_json(raw: str, source: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {source}: {e}") from e
