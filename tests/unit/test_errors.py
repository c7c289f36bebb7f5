"""
Error Taxonomy Unit Tests
Tests for trustledger/schemas/errors.py
"""
import pytest

from trustledger.schemas.errors import (
    CanonicalizationException,
    ConfigurationException,
    DegreeInvariantException,
    DigestMismatchException,
    ErrorCodes,
    IndexOutOfRangeException,
    InvalidInclusionProofException,
    InvalidNeighborActionException,
    InvalidOpcodeException,
    RootMismatchException,
    TrustLedgerError,
    TrustLedgerException,
)


class TestCodes:
    """Each exception carries its stable code."""

    @pytest.mark.parametrize(
        "exc,code",
        [
            (CanonicalizationException("x"), ErrorCodes.CANONICALIZATION_ERROR),
            (ConfigurationException("x"), ErrorCodes.CONFIGURATION_ERROR),
            (InvalidOpcodeException("x"), ErrorCodes.INVALID_OPCODE),
            (IndexOutOfRangeException("x"), ErrorCodes.INDEX_OUT_OF_RANGE),
            (InvalidNeighborActionException("x"), ErrorCodes.INVALID_NEIGHBOR_ACTION),
            (DegreeInvariantException("x"), ErrorCodes.DEGREE_INVARIANT_VIOLATION),
            (InvalidInclusionProofException("x"), ErrorCodes.INVALID_INCLUSION_PROOF),
            (RootMismatchException("x"), ErrorCodes.ROOT_MISMATCH),
            (DigestMismatchException("x"), ErrorCodes.DIGEST_MISMATCH),
        ],
    )
    def test_code(self, exc, code):
        assert isinstance(exc, TrustLedgerException)
        assert exc.code == code
        assert exc.retryable is False


class TestDetails:
    """Structured details."""

    def test_neighbor_action_details(self):
        exc = InvalidNeighborActionException("x", element=5, index=3)
        assert exc.details == {"element": 5, "index": 3}

    def test_root_mismatch_hex(self):
        exc = RootMismatchException("x", expected=255, actual=16)
        assert exc.details == {"expected": "0xff", "actual": "0x10"}

    def test_index_zero_value_kept(self):
        exc = IndexOutOfRangeException("x", field_path="position", value=0)
        assert exc.details == {"field_path": "position", "value": 0}


class TestModels:
    """Conversion between exceptions and error models."""

    def test_to_error_model(self):
        model = DigestMismatchException("bad slot", slot=2).to_error_model()
        assert isinstance(model, TrustLedgerError)
        assert model.code == ErrorCodes.DIGEST_MISMATCH
        assert model.details == {"slot": 2}

    def test_roundtrip(self):
        model = TrustLedgerError(code=ErrorCodes.ROOT_MISMATCH, message="m")
        exc = model.to_exception()
        assert exc.code == model.code
        assert exc.to_error_model() == model

    def test_repr(self):
        assert "INVALID_OPCODE" in repr(InvalidOpcodeException("x", opcode=9))
