"""
Runtime Configuration Unit Tests
Tests for trustledger/config/runtime.py
"""
import logging

import pytest

from trustledger.config.runtime import (
    CacheConfig,
    DigestConfig,
    LedgerConfig,
    LoggingConfig,
    RuntimeConfig,
    configure_logging,
    get_default_config,
    set_default_config,
)
from trustledger.schemas.errors import ConfigurationException

ENV_VARS = [
    "TRUSTLEDGER_BATCH_CAPACITY",
    "TRUSTLEDGER_STORAGE_FORMAT",
    "TRUSTLEDGER_CACHE_ENABLED",
    "TRUSTLEDGER_CACHE_MAX_ENTRIES",
    "TRUSTLEDGER_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    """Tests for default values and validation."""

    def test_defaults(self, clean_env):
        config = RuntimeConfig.from_env()
        assert config.ledger.batch_capacity == 16
        assert config.ledger.merkle_depth == 32
        assert config.ledger.neighbor_capacity == 64
        assert config.digest.storage_format == "short"
        assert config.cache.enabled is True
        assert config.logging.level == "WARNING"

    def test_fixed_dimensions(self):
        with pytest.raises(ConfigurationException):
            LedgerConfig(merkle_depth=20)
        with pytest.raises(ConfigurationException):
            LedgerConfig(neighbor_capacity=128)

    def test_invalid_values(self):
        with pytest.raises(ConfigurationException):
            LedgerConfig(batch_capacity=0)
        with pytest.raises(ConfigurationException) as exc_info:
            DigestConfig(storage_format="poseidon")
        assert exc_info.value.details["setting"] == "digest.storage_format"
        with pytest.raises(ConfigurationException):
            CacheConfig(max_entries=-1)
        with pytest.raises(ConfigurationException):
            LoggingConfig(level="chatty")

    def test_log_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"


class TestEnv:
    """Tests for environment overrides."""

    def test_from_env(self, clean_env):
        clean_env.setenv("TRUSTLEDGER_BATCH_CAPACITY", "8")
        clean_env.setenv("TRUSTLEDGER_STORAGE_FORMAT", "Chain")
        clean_env.setenv("TRUSTLEDGER_CACHE_ENABLED", "false")
        clean_env.setenv("TRUSTLEDGER_CACHE_MAX_ENTRIES", "4")
        clean_env.setenv("TRUSTLEDGER_LOG_LEVEL", "info")

        config = RuntimeConfig.from_env()

        assert config.ledger.batch_capacity == 8
        assert config.digest.storage_format == "chain"
        assert config.cache.enabled is False
        assert config.cache.max_entries == 4
        assert config.logging.level == "INFO"

    def test_bad_integer(self, clean_env):
        clean_env.setenv("TRUSTLEDGER_BATCH_CAPACITY", "lots")
        with pytest.raises(ConfigurationException):
            RuntimeConfig.from_env()

    def test_with_env_overrides(self, clean_env):
        base = RuntimeConfig.from_dict({"ledger": {"batch_capacity": 2}, "cache": {"max_entries": 9}})
        clean_env.setenv("TRUSTLEDGER_CACHE_MAX_ENTRIES", "3")

        merged = base.with_env_overrides()

        assert merged.ledger.batch_capacity == 2
        assert merged.cache.max_entries == 3

    def test_no_overrides_returns_self(self, clean_env):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config


class TestFiles:
    """Tests for YAML and dict loading."""

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "ledger.yaml"
        path.write_text(
            "ledger:\n"
            "  batch_capacity: 4\n"
            "digest:\n"
            "  storage_format: extended\n"
            "extra:\n"
            "  deployment: testnet\n"
        )
        config = RuntimeConfig.from_yaml(path)
        assert config.ledger.batch_capacity == 4
        assert config.digest.storage_format == "extended"
        assert config.extra == {"deployment": "testnet"}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert RuntimeConfig.from_yaml(path).ledger.batch_capacity == 16

    def test_missing_yaml(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_unknown_key(self):
        with pytest.raises(ConfigurationException):
            RuntimeConfig.from_dict({"ledger": {"depth": 3}})

    def test_dict_roundtrip(self):
        config = RuntimeConfig.from_dict({"cache": {"enabled": False}})
        assert RuntimeConfig.from_dict(config.to_dict()) == config


class TestGlobals:
    """Tests for the process-wide default and logging hook."""

    def test_default_is_cached(self, clean_env):
        assert get_default_config() is get_default_config()

    def test_set_default(self):
        config = RuntimeConfig(ledger=LedgerConfig(batch_capacity=2))
        set_default_config(config)
        assert get_default_config() is config

    def test_configure_logging(self):
        logger = logging.getLogger("trustledger")
        previous = logger.level
        try:
            configure_logging(RuntimeConfig(logging=LoggingConfig(level="DEBUG")))
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)
