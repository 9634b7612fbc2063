"""
Image helper for the presentation layer.

Builds image URLs through the VersionResolver and renders ``<img>`` markup,
falling back to a placeholder when a record cannot be resolved.
"""

from html import escape
from typing import Any, Dict, Mapping, Optional

from imagestore.application.services.path_builder import normalize_separators
from imagestore.application.services.version_registry import ORIGINAL_VERSION
from imagestore.application.services.version_resolver import VersionResolver
from imagestore.domain.models import StoredFileRecord

# Options consumed by the helper/resolver and never rendered as attributes.
_RESOLVER_OPTIONS = frozenset({"fallback", "url", "originalVersion"})


class ImageHelper:
    """URL and markup helper over a VersionResolver."""

    def __init__(self, resolver: VersionResolver, placeholder_dir: str = "placeholder"):
        self._resolver = resolver
        self._placeholder_dir = placeholder_dir.rstrip("/")

    def image_url(
        self,
        record: Optional[StoredFileRecord],
        version: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """URL of a record's version, or None when it cannot be resolved."""
        if record is None or not record.has_id:
            return None
        result = self._resolver.resolve_version(record, version or ORIGINAL_VERSION, options)
        return result.value

    def display(
        self,
        record: Optional[StoredFileRecord],
        version: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """``<img>`` tag for the version, or the fallback markup."""
        options = dict(options or {})
        url = self.image_url(record, version, options)
        if url is not None:
            return self.img_tag(url, options)
        return self.fallback_image(options, record, version)

    def fallback_image(
        self,
        options: Optional[Mapping[str, Any]] = None,
        record: Optional[StoredFileRecord] = None,
        version: Optional[str] = None,
    ) -> str:
        """
        Placeholder markup.

        ``fallback=True`` renders ``placeholder/<version>.jpg``; a string is
        used as the image itself; no fallback renders nothing.
        """
        options = dict(options or {})
        fallback = options.pop("fallback", None)
        if fallback is None or fallback is False:
            return ""
        if fallback is True:
            image_file = f"{self._placeholder_dir}/{version or ORIGINAL_VERSION}.jpg"
        else:
            image_file = str(fallback)
        return self.img_tag(image_file, options)

    @staticmethod
    def normalize_path(path: str) -> str:
        """Turn Windows separators into "/" so the path can be used in a URL."""
        return normalize_separators(path)

    @staticmethod
    def img_tag(src: str, options: Optional[Mapping[str, Any]] = None) -> str:
        attributes: Dict[str, Any] = {"src": src, "alt": ""}
        for key, value in (options or {}).items():
            if key in _RESOLVER_OPTIONS or value is None or value is False:
                continue
            attributes[key] = key if value is True else value
        rendered = " ".join(f'{escape(str(k))}="{escape(str(v))}"' for k, v in attributes.items())
        return f"<img {rendered}/>"
