"""
Tests for storage adapters and the adapter registry.
"""

import pytest

from imagestore.domain.models import AdapterNotFoundError
from imagestore.infrastructure.storage import (
    InMemoryStorageAdapter,
    LocalStorageAdapter,
    StorageAdapterRegistry,
)


class TestLocalStorageAdapter:
    """Filesystem adapter rooted at a directory."""

    def test_write_read_delete(self, tmp_path):
        adapter = LocalStorageAdapter(tmp_path / "storage")
        adapter.write("Avatar/ab/cd/42/thumbnail", b"pixels")

        assert adapter.exists("Avatar/ab/cd/42/thumbnail")
        assert adapter.read("Avatar/ab/cd/42/thumbnail") == b"pixels"
        assert (tmp_path / "storage" / "Avatar" / "ab" / "cd" / "42" / "thumbnail").is_file()

        assert adapter.delete("Avatar/ab/cd/42/thumbnail") is True
        assert not adapter.exists("Avatar/ab/cd/42/thumbnail")

    def test_no_temp_file_left(self, tmp_path):
        adapter = LocalStorageAdapter(tmp_path)
        adapter.write("a/b.jpg", b"x")
        assert sorted(p.name for p in (tmp_path / "a").iterdir()) == ["b.jpg"]

    def test_leading_slash_and_backslashes(self, tmp_path):
        adapter = LocalStorageAdapter(tmp_path)
        adapter.write("/a\\b.jpg", b"x")
        assert adapter.read("a/b.jpg") == b"x"

    def test_delete_missing_returns_false(self, tmp_path):
        assert LocalStorageAdapter(tmp_path).delete("nothing/here") is False

    def test_read_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalStorageAdapter(tmp_path).read("nothing/here")

    @pytest.mark.parametrize("path", ["../escape.jpg", "a/../../escape.jpg"])
    def test_traversal_rejected(self, tmp_path, path):
        adapter = LocalStorageAdapter(tmp_path / "storage")
        with pytest.raises(ValueError, match="Invalid storage path"):
            adapter.write(path, b"x")


class TestInMemoryStorageAdapter:
    """Dict-backed adapter used in tests."""

    def test_roundtrip_and_paths(self):
        adapter = InMemoryStorageAdapter()
        adapter.write("/b.jpg", b"2")
        adapter.write("a.jpg", b"1")

        assert adapter.paths == ["a.jpg", "b.jpg"]
        assert adapter.read("b.jpg") == b"2"
        assert adapter.delete("a.jpg") is True
        assert adapter.delete("a.jpg") is False

    def test_read_missing_raises(self):
        with pytest.raises(FileNotFoundError):
            InMemoryStorageAdapter().read("x")


class TestStorageAdapterRegistry:
    """Tag -> adapter lookup."""

    def test_registered_instance(self):
        adapter = InMemoryStorageAdapter()
        registry = StorageAdapterRegistry({"Local": adapter})
        assert registry.adapter_for("Local") is adapter
        assert registry.has("Local")

    def test_factory_called_once(self):
        calls = []

        def factory():
            calls.append(1)
            return InMemoryStorageAdapter()

        registry = StorageAdapterRegistry()
        registry.register("S3", factory)

        assert registry.has("S3")
        first = registry.adapter_for("S3")
        assert registry.adapter_for("S3") is first
        assert calls == [1]

    def test_unknown_tag_raises(self):
        with pytest.raises(AdapterNotFoundError) as exc_info:
            StorageAdapterRegistry().adapter_for("Nope")
        assert exc_info.value.tag == "Nope"

    def test_rejects_non_adapter(self):
        with pytest.raises(TypeError):
            StorageAdapterRegistry().register("Local", 42)

    def test_tags(self):
        registry = StorageAdapterRegistry({"Local": InMemoryStorageAdapter()})
        registry.register("S3", InMemoryStorageAdapter)
        assert registry.tags == ["Local", "S3"]
