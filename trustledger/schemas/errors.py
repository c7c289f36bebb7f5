"""
Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the ledger state transition.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every failure is a local validation failure: a batch that raises one of
these exceptions is unprovable and must be rejected as a whole.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the transition."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Operation Errors
    INVALID_OPCODE = "INVALID_OPCODE"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    INVALID_NEIGHBOR_ACTION = "INVALID_NEIGHBOR_ACTION"
    DEGREE_INVARIANT_VIOLATION = "DEGREE_INVARIANT_VIOLATION"

    # Merkle & Commitment Errors
    INVALID_INCLUSION_PROOF = "INVALID_INCLUSION_PROOF"
    ROOT_MISMATCH = "ROOT_MISMATCH"
    DIGEST_MISMATCH = "DIGEST_MISMATCH"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class TrustLedgerError(BaseModel):
    """
    Base error model for structured error communication.

    Used as the error variant of a transition outcome so callers can
    handle rejections without catching exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.ROOT_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "TrustLedgerException":
        """Convert this error model to a raised exception."""
        return TrustLedgerException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class TrustLedgerException(Exception):
    """
    Base exception for all trust ledger errors.

    Carries structured error information and can be converted
    to/from TrustLedgerError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "TRUSTLEDGER_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> TrustLedgerError:
        """Convert this exception to a TrustLedgerError model."""
        return TrustLedgerError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(TrustLedgerException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class ConfigurationException(TrustLedgerException):
    """Exception raised when runtime configuration is invalid."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if setting:
            full_details["setting"] = setting
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
            retryable=False,
        )


class InvalidOpcodeException(TrustLedgerException):
    """Exception raised when an opcode is outside {NOP, ADD, REVOKE}."""

    def __init__(
        self,
        message: str,
        opcode: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if opcode is not None:
            full_details["opcode"] = opcode
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_OPCODE,
            details=full_details,
            retryable=False,
        )


class IndexOutOfRangeException(TrustLedgerException):
    """Exception raised when an index or integer field exceeds its range."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        value: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        if value is not None:
            full_details["value"] = value
        super().__init__(
            message=message,
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )


class InvalidInclusionProofException(TrustLedgerException):
    """Exception raised when a sibling path does not reconstruct the claimed root."""

    def __init__(
        self,
        message: str,
        key: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key is not None:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INCLUSION_PROOF,
            details=full_details,
            retryable=False,
        )


class InvalidNeighborActionException(TrustLedgerException):
    """Exception raised when an insert/remove precondition is violated."""

    def __init__(
        self,
        message: str,
        element: int | None = None,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if element is not None:
            full_details["element"] = element
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_NEIGHBOR_ACTION,
            details=full_details,
            retryable=False,
        )


class DegreeInvariantException(TrustLedgerException):
    """Exception raised when degree and neighbor array disagree."""

    def __init__(
        self,
        message: str,
        degree: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if degree is not None:
            full_details["degree"] = degree
        super().__init__(
            message=message,
            code=ErrorCodes.DEGREE_INVARIANT_VIOLATION,
            details=full_details,
            retryable=False,
        )


class RootMismatchException(TrustLedgerException):
    """Exception raised when a recomputed root differs from the claimed one."""

    def __init__(
        self,
        message: str,
        expected: int | None = None,
        actual: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if expected is not None:
            full_details["expected"] = hex(expected)
        if actual is not None:
            full_details["actual"] = hex(actual)
        super().__init__(
            message=message,
            code=ErrorCodes.ROOT_MISMATCH,
            details=full_details,
            retryable=False,
        )


class DigestMismatchException(TrustLedgerException):
    """Exception raised when batch contents disagree with their digest."""

    def __init__(
        self,
        message: str,
        slot: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if slot is not None:
            full_details["slot"] = slot
        super().__init__(
            message=message,
            code=ErrorCodes.DIGEST_MISMATCH,
            details=full_details,
            retryable=False,
        )
