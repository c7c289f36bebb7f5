"""
Runtime Configuration

Central configuration for batch capacity, digest selection, the
transition cache and logging.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from trustledger.schemas.constants import MERKLE_DEPTH, NEIGHBOR_CAPACITY
from trustledger.schemas.errors import ConfigurationException
from trustledger.schemas.transition import STORAGE_FORMATS

load_dotenv()


@dataclass
class LedgerConfig:
    """Circuit-fixed dimensions of the transition."""
    batch_capacity: int = 16
    merkle_depth: int = MERKLE_DEPTH
    neighbor_capacity: int = NEIGHBOR_CAPACITY

    def __post_init__(self):
        if self.batch_capacity < 1:
            raise ConfigurationException(
                f"batch_capacity must be positive, got {self.batch_capacity}",
                setting="ledger.batch_capacity",
            )
        # Depth and neighbor capacity are baked into every commitment
        if self.merkle_depth != MERKLE_DEPTH:
            raise ConfigurationException(
                f"merkle_depth is fixed at {MERKLE_DEPTH}",
                setting="ledger.merkle_depth",
            )
        if self.neighbor_capacity != NEIGHBOR_CAPACITY:
            raise ConfigurationException(
                f"neighbor_capacity is fixed at {NEIGHBOR_CAPACITY}",
                setting="ledger.neighbor_capacity",
            )


@dataclass
class DigestConfig:
    """Which storage digest path feeds the public input."""
    storage_format: str = "short"

    def __post_init__(self):
        if self.storage_format not in STORAGE_FORMATS:
            raise ConfigurationException(
                f"storage_format must be one of {STORAGE_FORMATS}, got {self.storage_format!r}",
                setting="digest.storage_format",
            )


@dataclass
class CacheConfig:
    """Memoization of accepted transitions."""
    enabled: bool = True
    max_entries: int = 256

    def __post_init__(self):
        if self.max_entries < 0:
            raise ConfigurationException(
                f"max_entries must be non-negative, got {self.max_entries}",
                setting="cache.max_entries",
            )


@dataclass
class LoggingConfig:
    """Logging settings for the trustledger package logger."""
    level: str = "WARNING"

    def __post_init__(self):
        self.level = self.level.upper()
        if not isinstance(logging.getLevelName(self.level), int):
            raise ConfigurationException(
                f"Unknown log level {self.level!r}",
                setting="logging.level",
            )


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationException(
            f"{name} must be an integer, got {value!r}",
            setting=name,
        ) from e


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the trust ledger.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    digest: DigestConfig = field(default_factory=DigestConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - TRUSTLEDGER_BATCH_CAPACITY: Slots per batch (CAP)
        - TRUSTLEDGER_STORAGE_FORMAT: short | extended | chain
        - TRUSTLEDGER_CACHE_ENABLED: Enable transition cache (true/false)
        - TRUSTLEDGER_CACHE_MAX_ENTRIES: Cache size
        - TRUSTLEDGER_LOG_LEVEL: Package log level
        """
        overrides: dict[str, Any] = {}

        if os.getenv("TRUSTLEDGER_BATCH_CAPACITY"):
            overrides.setdefault("ledger", {})["batch_capacity"] = _parse_int(
                "TRUSTLEDGER_BATCH_CAPACITY", os.getenv("TRUSTLEDGER_BATCH_CAPACITY")
            )

        if os.getenv("TRUSTLEDGER_STORAGE_FORMAT"):
            overrides.setdefault("digest", {})["storage_format"] = (
                os.getenv("TRUSTLEDGER_STORAGE_FORMAT").strip().lower()
            )

        if os.getenv("TRUSTLEDGER_CACHE_ENABLED"):
            overrides.setdefault("cache", {})["enabled"] = _parse_bool(
                os.getenv("TRUSTLEDGER_CACHE_ENABLED")
            )
        if os.getenv("TRUSTLEDGER_CACHE_MAX_ENTRIES"):
            overrides.setdefault("cache", {})["max_entries"] = _parse_int(
                "TRUSTLEDGER_CACHE_MAX_ENTRIES", os.getenv("TRUSTLEDGER_CACHE_MAX_ENTRIES")
            )

        if os.getenv("TRUSTLEDGER_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("TRUSTLEDGER_LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        try:
            ledger = LedgerConfig(**data.get("ledger", {}))
            digest = DigestConfig(**data.get("digest", {}))
            cache = CacheConfig(**data.get("cache", {}))
            log_config = LoggingConfig(**data.get("logging", {}))
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration: {e}") from e

        return cls(
            ledger=ledger,
            digest=digest,
            cache=cache,
            logging=log_config,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        merged = self.to_dict()
        for section, values in overrides.items():
            merged.setdefault(section, {}).update(values)
        return self.from_dict(merged)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "ledger": {
                "batch_capacity": self.ledger.batch_capacity,
                "merkle_depth": self.ledger.merkle_depth,
                "neighbor_capacity": self.ledger.neighbor_capacity,
            },
            "digest": {
                "storage_format": self.digest.storage_format,
            },
            "cache": {
                "enabled": self.cache.enabled,
                "max_entries": self.cache.max_entries,
            },
            "logging": {
                "level": self.logging.level,
            },
            "extra": dict(self.extra),
        }


def configure_logging(config: RuntimeConfig) -> None:
    """Apply the configured level to the trustledger package logger."""
    logging.getLogger("trustledger").setLevel(config.logging.level)


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or reset, with None) the default runtime configuration."""
    global _default_config
    _default_config = config
