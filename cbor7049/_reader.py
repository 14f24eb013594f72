"""Byte sources for the decoder.

``ByteSource`` fixes the contract the value engine reads through: three
primitive operations plus big-endian integer and float reads built on
top of them.  ``BufferReader`` is the in-memory implementation used by
``Codec.decode``.
"""

from __future__ import annotations

import abc
import struct
from typing import Union

from ._errors import UnexpectedEndOfInput
from ._float import DOUBLE, HALF, SINGLE, unpack_float

BytesLike = Union[bytes, bytearray, memoryview]

_UINT16 = struct.Struct(">H")
_UINT32 = struct.Struct(">I")


class ByteSource(abc.ABC):
    """Sequential reader over an encoded byte sequence.

    Subclasses provide ``peek_byte``, ``read_byte`` and ``read_chunk``.
    Every read past the end of the input raises UnexpectedEndOfInput.
    """

    @abc.abstractmethod
    def peek_byte(self) -> int:
        """Return the next byte without consuming it."""

    @abc.abstractmethod
    def read_byte(self) -> int:
        """Consume and return one byte."""

    @abc.abstractmethod
    def read_chunk(self, length: int) -> bytes:
        """Consume *length* bytes and return them as an independent copy."""

    def read_uint16(self) -> int:
        return self.read_byte() * 256 + self.read_byte()

    def read_uint32(self) -> int:
        return self.read_uint16() * 65536 + self.read_uint16()

    def read_uint64(self) -> int:
        high = self.read_uint32()
        return high * 4294967296 + self.read_uint32()

    def read_float16(self) -> float:
        return unpack_float(self.read_uint16(), HALF)

    def read_float32(self) -> float:
        return unpack_float(self.read_uint32(), SINGLE)

    def read_float64(self) -> float:
        return unpack_float(self.read_uint64(), DOUBLE)


class BufferReader(ByteSource):
    """ByteSource over a complete in-memory buffer.

    The input is copied into an immutable ``bytes`` object up front, so
    chunks handed out by ``read_chunk`` can never be changed afterwards
    by the caller mutating the original buffer.
    """

    def __init__(self, data: BytesLike) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def _require(self, length: int) -> int:
        start = self._pos
        end = start + length
        if end > len(self._data):
            raise UnexpectedEndOfInput(
                "need {} byte(s) at offset {}, only {} left".format(
                    length, start, len(self._data) - start))
        self._pos = end
        return start

    def peek_byte(self) -> int:
        if self._pos >= len(self._data):
            raise UnexpectedEndOfInput("peek past end of input")
        return self._data[self._pos]

    def read_byte(self) -> int:
        return self._data[self._require(1)]

    def read_chunk(self, length: int) -> bytes:
        start = self._require(length)
        # Slicing bytes always produces a new object.
        return self._data[start:start + length]

    def read_uint16(self) -> int:
        return _UINT16.unpack_from(self._data, self._require(2))[0]

    def read_uint32(self) -> int:
        return _UINT32.unpack_from(self._data, self._require(4))[0]
