"""
Configuration package.
"""

from .runtime import (
    CacheConfig,
    DigestConfig,
    LedgerConfig,
    LoggingConfig,
    RuntimeConfig,
    configure_logging,
    get_default_config,
    set_default_config,
)

__all__ = [
    "CacheConfig",
    "DigestConfig",
    "LedgerConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "configure_logging",
    "get_default_config",
    "set_default_config",
]
