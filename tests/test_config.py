"""Tests for configuration loading and overrides."""

import argparse

import pytest

from depmeta.config import MetadataConfig, load_config, parse_duration
from depmeta.constants import Constants
from depmeta.errors import ConfigError


class TestParseDuration:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (90, 90.0),
            (1.5, 1.5),
            ("45", 45.0),
            ("30s", 30.0),
            ("30min", 1800.0),
            ("2h", 7200.0),
            ("1d", 86400.0),
            (" 3 Hours ", 10800.0),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "soon", "5 fortnights", "-3", -1, True])
    def test_invalid(self, value):
        with pytest.raises(ConfigError):
            parse_duration(value)


class TestMetadataConfig:
    def test_defaults(self):
        config = MetadataConfig()
        assert config.cache_ttl == Constants.CACHE_TTL_SEC
        assert config.cache_dir is None
        assert config.max_parent_depth == Constants.MAX_PARENT_DEPTH
        assert config.max_concurrency == Constants.MAX_CONCURRENCY

    def test_invalid_depth(self):
        with pytest.raises(ConfigError):
            MetadataConfig(max_parent_depth=0)
        with pytest.raises(ConfigError):
            MetadataConfig(max_concurrency="many")

    def test_from_mapping_ignores_unknown_keys(self, caplog):
        config = MetadataConfig.from_mapping({"cache-ttl": "1h", "colour": "blue"})
        assert config.cache_ttl == 3600.0
        assert any("colour" in r.getMessage() for r in caplog.records)

    def test_env_overrides(self):
        env = {"DEPMETA_CACHE_TTL": "10m", "DEPMETA_MAX_PARENT_DEPTH": "4", "DEPMETA_CACHE_DIR": " "}
        config = MetadataConfig().with_env(env)
        assert config.cache_ttl == 600.0
        assert config.max_parent_depth == 4
        assert config.cache_dir is None

    def test_args_override(self):
        args = argparse.Namespace(
            CACHE_TTL="5", CACHE_DIR=None, MAX_PARENT_DEPTH=None,
            MAX_CONCURRENCY=2, REQUEST_TIMEOUT=None,
        )
        config = MetadataConfig(cache_ttl=100).with_args(args)
        assert config.cache_ttl == 5.0
        assert config.max_concurrency == 2


class TestLoadConfig:
    def test_no_file(self):
        assert load_config(env={}) == MetadataConfig()

    def test_depmeta_section(self, tmp_path):
        path = tmp_path / "depmeta.yml"
        path.write_text("depmeta:\n  cache_ttl: 2h\n  max_concurrency: 3\n", encoding="utf-8")
        config = load_config(str(path), env={})
        assert config.cache_ttl == 7200.0
        assert config.max_concurrency == 3

    def test_top_level_keys_with_env_precedence(self, tmp_path):
        path = tmp_path / "depmeta.yml"
        path.write_text("cache_ttl: 2h\n", encoding="utf-8")
        config = load_config(str(path), env={"DEPMETA_CACHE_TTL": "60"})
        assert config.cache_ttl == 60.0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path), env={}) == MetadataConfig()

    @pytest.mark.parametrize("content", ["- a\n- b\n", "depmeta: [1, 2]\n", "key: [unclosed\n"])
    def test_invalid_content(self, tmp_path, content):
        path = tmp_path / "bad.yml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path), env={})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "missing.yml"), env={})
