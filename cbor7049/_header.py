"""Initial-byte header codec (RFC 7049 §2).

Every item starts with one byte: major type in the high 3 bits,
additional info in the low 5.  Additional info below 24 is the argument
itself; 24..27 say that 1, 2, 4 or 8 big-endian bytes follow; 31 marks
an indefinite length.  The writer always picks the shortest form, the
reader accepts all of them.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from ._constants import (
    AI_DIRECT_LIMIT,
    AI_EIGHT_BYTES,
    AI_FOUR_BYTES,
    AI_INDEFINITE,
    AI_ONE_BYTE,
    AI_TWO_BYTES,
    UINT8_LIMIT,
    UINT16_LIMIT,
    UINT32_LIMIT,
)
from ._errors import MalformedHeader
from ._reader import ByteSource
from ._writer import ByteSink


class Header(NamedTuple):
    major_type: int
    additional_info: int


def write_header(major_type: int, value: int, sink: ByteSink) -> None:
    """Write a header whose argument is *value*, using the minimal form."""
    first = major_type << 5
    if value < AI_DIRECT_LIMIT:
        sink.write_byte(first | value)
    elif value < UINT8_LIMIT:
        sink.write_byte(first | AI_ONE_BYTE)
        sink.write_byte(value)
    elif value < UINT16_LIMIT:
        sink.write_byte(first | AI_TWO_BYTES)
        sink.write_uint16(value)
    elif value < UINT32_LIMIT:
        sink.write_byte(first | AI_FOUR_BYTES)
        sink.write_uint32(value)
    else:
        sink.write_byte(first | AI_EIGHT_BYTES)
        sink.write_uint64(value)


def write_header_raw(major_type: int, additional_info: int, sink: ByteSink) -> None:
    """Write the packed initial byte only; the caller writes any payload."""
    sink.write_byte((major_type << 5) | additional_info)


def read_header_raw(source: ByteSource) -> Header:
    first = source.read_byte()
    return Header(first >> 5, first & 0x1F)


def value_from_header(header: Header, source: ByteSource) -> Optional[int]:
    """Resolve the header argument, reading follow-up bytes as needed.

    Returns None for an indefinite length.
    """
    info = header.additional_info
    if info < AI_DIRECT_LIMIT:
        return info
    if info == AI_ONE_BYTE:
        return source.read_byte()
    if info == AI_TWO_BYTES:
        return source.read_uint16()
    if info == AI_FOUR_BYTES:
        return source.read_uint32()
    if info == AI_EIGHT_BYTES:
        return source.read_uint64()
    if info == AI_INDEFINITE:
        return None
    raise MalformedHeader(
        "reserved additional info {} (major type {})".format(info, header.major_type))
