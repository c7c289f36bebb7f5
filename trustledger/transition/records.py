"""
Operation Record Codecs
Fixed-size big-endian serialization of batch slots.

Two layouts coexist and are both bit-exact contracts with the ledger:
- Short record (9 bytes):     lo(4) | hi(4) | op(1)
- Extended record (15 bytes): lo(4) | hi(4) | stake_index(1) |
                              duration_index(1) | op(1) | timestamp(4)

Inactive slots serialize to all-zero records.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Sequence

from trustledger.schemas.constants import (
    EXTENDED_RECORD_SIZE,
    SHORT_RECORD_SIZE,
    UINT8_MAX,
    UINT32_MAX,
)
from trustledger.schemas.errors import IndexOutOfRangeException
from trustledger.schemas.operations import EdgeOperation

_SHORT = struct.Struct(">IIB")
_EXTENDED = struct.Struct(">IIBBBI")


@dataclass(frozen=True)
class ShortRecord:
    lo: int = 0
    hi: int = 0
    op: int = 0


@dataclass(frozen=True)
class ExtendedRecord:
    lo: int = 0
    hi: int = 0
    stake_index: int = 0
    duration_index: int = 0
    op: int = 0
    timestamp: int = 0


def _check_range(name: str, value: int, maximum: int) -> None:
    if value < 0 or value > maximum:
        raise IndexOutOfRangeException(
            f"{name} out of range [0, {maximum}]: {value}",
            field_path=name,
            value=value,
        )


def encode_short_record(record: ShortRecord) -> bytes:
    _check_range("lo", record.lo, UINT32_MAX)
    _check_range("hi", record.hi, UINT32_MAX)
    _check_range("op", record.op, UINT8_MAX)
    return _SHORT.pack(record.lo, record.hi, record.op)


def decode_short_record(data: bytes) -> ShortRecord:
    if len(data) != SHORT_RECORD_SIZE:
        raise IndexOutOfRangeException(
            f"Short record must be {SHORT_RECORD_SIZE} bytes, got {len(data)}",
            field_path="record",
            value=len(data),
        )
    lo, hi, op = _SHORT.unpack(data)
    return ShortRecord(lo=lo, hi=hi, op=op)


def encode_extended_record(record: ExtendedRecord) -> bytes:
    _check_range("lo", record.lo, UINT32_MAX)
    _check_range("hi", record.hi, UINT32_MAX)
    _check_range("stake_index", record.stake_index, UINT8_MAX)
    _check_range("duration_index", record.duration_index, UINT8_MAX)
    _check_range("op", record.op, UINT8_MAX)
    _check_range("timestamp", record.timestamp, UINT32_MAX)
    return _EXTENDED.pack(
        record.lo,
        record.hi,
        record.stake_index,
        record.duration_index,
        record.op,
        record.timestamp,
    )


def decode_extended_record(data: bytes) -> ExtendedRecord:
    if len(data) != EXTENDED_RECORD_SIZE:
        raise IndexOutOfRangeException(
            f"Extended record must be {EXTENDED_RECORD_SIZE} bytes, got {len(data)}",
            field_path="record",
            value=len(data),
        )
    lo, hi, stake_index, duration_index, op, timestamp = _EXTENDED.unpack(data)
    return ExtendedRecord(
        lo=lo,
        hi=hi,
        stake_index=stake_index,
        duration_index=duration_index,
        op=op,
        timestamp=timestamp,
    )


def short_record_of(operation: EdgeOperation) -> ShortRecord:
    return ShortRecord(lo=operation.lo, hi=operation.hi, op=operation.opcode)


def extended_record_of(operation: EdgeOperation) -> ExtendedRecord:
    return ExtendedRecord(
        lo=operation.lo,
        hi=operation.hi,
        stake_index=operation.stake_index,
        duration_index=operation.duration_index,
        op=operation.opcode,
        timestamp=operation.timestamp,
    )


def encode_short_records(slots: Sequence[EdgeOperation]) -> bytes:
    """Concatenated short records of every slot, in order."""
    return b"".join(encode_short_record(short_record_of(s)) for s in slots)


def encode_extended_records(slots: Sequence[EdgeOperation]) -> bytes:
    """Concatenated extended records of every slot, in order."""
    return b"".join(encode_extended_record(extended_record_of(s)) for s in slots)


def split_records(data: bytes, size: int) -> list[bytes]:
    """Split a concatenation of fixed-size records."""
    if size <= 0 or len(data) % size != 0:
        raise IndexOutOfRangeException(
            f"Record data length {len(data)} is not a multiple of {size}",
            field_path="records",
            value=len(data),
        )
    return [data[i:i + size] for i in range(0, len(data), size)]


__all__ = [
    "ShortRecord",
    "ExtendedRecord",
    "encode_short_record",
    "decode_short_record",
    "encode_extended_record",
    "decode_extended_record",
    "short_record_of",
    "extended_record_of",
    "encode_short_records",
    "encode_extended_records",
    "split_records",
]
