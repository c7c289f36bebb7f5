"""
Schemas & Canonicalization
File: versioning.py

Purpose: Centralize protocol version constants for batch wire formats.
This file must remain tiny and have no imports from other schema files
to avoid circular dependencies.
"""

# Protocol version for batch / record wire format compatibility
PROTOCOL_VERSION: str = "v1"

SUPPORTED_PROTOCOL_VERSIONS: frozenset[str] = frozenset({"v1"})


class UnsupportedProtocolVersionError(ValueError):
    """Raised when an unsupported protocol version is encountered."""

    def __init__(self, version: str, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_PROTOCOL_VERSIONS
        super().__init__(
            f"Unsupported protocol version: '{version}'. "
            f"Supported versions: {sorted(self.supported)}"
        )


def assert_supported_protocol_version(version: str) -> None:
    """
    Validate that the given protocol version is supported.

    Raises:
        UnsupportedProtocolVersionError: If the version is not supported.
    """
    if version not in SUPPORTED_PROTOCOL_VERSIONS:
        raise UnsupportedProtocolVersionError(version)

