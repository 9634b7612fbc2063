"""
Tests for ImageStoreConfig.
"""

import json

import pytest

from imagestore.config import DEFAULT_PATH_TEMPLATE, ImageStoreConfig
from imagestore.domain.models import ConfigurationError


class TestDefaults:
    """Construction and validation."""

    def test_defaults(self):
        config = ImageStoreConfig()
        assert config.path_template == DEFAULT_PATH_TEMPLATE
        assert config.url_prefix == "/"
        assert config.hash_levels == 2
        assert config.hash_algorithm == "sha1"
        assert config.image_sizes == {}

    @pytest.mark.parametrize("levels", [0, 4])
    def test_hash_levels_range(self, levels):
        with pytest.raises(ConfigurationError):
            ImageStoreConfig(hash_levels=levels)

    @pytest.mark.parametrize("algorithm", ["nope", "shake_128"])
    def test_hash_algorithm_checked(self, algorithm):
        with pytest.raises(ConfigurationError):
            ImageStoreConfig(hash_algorithm=algorithm)

    def test_non_mapping_sizes_rejected(self):
        with pytest.raises(ConfigurationError):
            ImageStoreConfig(image_sizes=["Avatar"])

    def test_caller_mutation_does_not_leak(self):
        sizes = {"Avatar": {"small": {"width": ["<", 10]}}}
        config = ImageStoreConfig(image_sizes=sizes)
        sizes["Avatar"]["small"]["width"][1] = 999
        assert config.image_sizes["Avatar"]["small"]["width"] == ["<", 10]

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ImageStoreConfig().url_prefix = "x"

    def test_hash_salt_lookup(self, config):
        assert config.hash_salt("Avatar", "thumbnail") == "a1b2c3"
        assert config.hash_salt("Avatar", "medium") is None
        assert config.hash_salt("Nope", "thumbnail") is None

    def test_for_testing_overrides(self):
        config = ImageStoreConfig.for_testing(url_prefix="https://cdn.test/")
        assert config.url_prefix == "https://cdn.test/"
        assert "Avatar" in config.image_sizes


class TestSerialization:
    """from_dict / to_dict / from_env."""

    def test_dict_roundtrip(self, config):
        assert ImageStoreConfig.from_dict(config.to_dict()) == config

    def test_legacy_camel_case_keys(self):
        config = ImageStoreConfig.from_dict({
            "pathTemplate": "{id}/{version}",
            "urlPrefix": "",
            "hashLevels": "3",
            "imageSizes": {"Photo": {"small": {"width": ["<", 10]}}},
            "imageHashes": {"Photo": {"small": "salt"}},
        })
        assert config.path_template == "{id}/{version}"
        assert config.url_prefix == ""
        assert config.hash_levels == 3
        assert config.hash_salt("Photo", "small") == "salt"

    def test_snake_case_wins_over_legacy(self):
        config = ImageStoreConfig.from_dict({"url_prefix": "/a/", "urlPrefix": "/b/"})
        assert config.url_prefix == "/a/"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("IMAGESTORE_PATH_TEMPLATE", "{model}/{id}/{version}")
        monkeypatch.setenv("IMAGESTORE_HASH_LEVELS", "1")
        monkeypatch.setenv("IMAGESTORE_IMAGE_SIZES", json.dumps({"Avatar": {"t": {"width": ["<", 5]}}}))
        monkeypatch.setenv("IMAGESTORE_DATABASE_URL", "sqlite:///:memory:")

        config = ImageStoreConfig.from_env()

        assert config.path_template == "{model}/{id}/{version}"
        assert config.hash_levels == 1
        assert config.image_sizes == {"Avatar": {"t": {"width": ["<", 5]}}}
        assert config.database_url == "sqlite:///:memory:"

    def test_from_env_config_file(self, monkeypatch, tmp_path):
        config_file = tmp_path / "imagestore.json"
        config_file.write_text(json.dumps({"urlPrefix": "/media/", "imageHashes": {"A": {"v": "s"}}}))
        monkeypatch.setenv("IMAGESTORE_CONFIG_FILE", str(config_file))
        monkeypatch.setenv("IMAGESTORE_URL_PREFIX", "/override/")

        config = ImageStoreConfig.from_env()

        assert config.url_prefix == "/override/"
        assert config.hash_salt("A", "v") == "s"

    def test_from_env_bad_json(self, monkeypatch):
        monkeypatch.setenv("IMAGESTORE_IMAGE_HASHES", "{not json")
        with pytest.raises(ConfigurationError, match="IMAGESTORE_IMAGE_HASHES"):
            ImageStoreConfig.from_env()
