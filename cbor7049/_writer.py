"""Byte sinks for the encoder.

``ByteSink`` is the write-side counterpart of ``ByteSource``.
``ChunkedWriter`` collects output without knowing its final length: it
fills one fixed-size active buffer, parks full (or flushed) buffers in a
segment list, and joins everything exactly once in ``result()``.
"""

from __future__ import annotations

import abc
from typing import List, Union

from ._constants import DEFAULT_BUFFER_SIZE, MAX_SAFE_INTEGER
from ._errors import IntegerMagnitudeOverflow
from ._float import DOUBLE, HALF, SINGLE, pack_float

BytesLike = Union[bytes, bytearray, memoryview]


class ByteSink(abc.ABC):
    """Append-only output for encoded bytes."""

    @abc.abstractmethod
    def write_byte(self, value: int) -> None:
        """Append one byte (0..255)."""

    @abc.abstractmethod
    def write_chunk(self, chunk: BytesLike) -> None:
        """Append *chunk*.  The sink must not keep a reference to it."""

    @abc.abstractmethod
    def result(self) -> bytes:
        """Return everything written so far as one ``bytes`` object."""

    def write_uint16(self, value: int) -> None:
        self.write_byte((value >> 8) & 0xFF)
        self.write_byte(value & 0xFF)

    def write_uint32(self, value: int) -> None:
        self.write_uint16((value >> 16) & 0xFFFF)
        self.write_uint16(value & 0xFFFF)

    def write_uint64(self, value: int) -> None:
        # Above 2**53 the value could not have come from an exact double,
        # so refuse rather than emit something that won't round-trip.
        if value >= MAX_SAFE_INTEGER or value <= -MAX_SAFE_INTEGER:
            raise IntegerMagnitudeOverflow(
                "cannot encode uint64 {}: magnitude is 2**53 or more".format(value))
        self.write_uint32(value // 4294967296)
        self.write_uint32(value % 4294967296)

    def write_float16(self, value: float) -> None:
        self.write_chunk(pack_float(value, HALF))

    def write_float32(self, value: float) -> None:
        self.write_chunk(pack_float(value, SINGLE))

    def write_float64(self, value: float) -> None:
        self.write_chunk(pack_float(value, DOUBLE))


class ChunkedWriter(ByteSink):
    """ByteSink that amortizes allocation across fixed-size buffers.

    Invariant: ``len(result())`` equals the running ``byte_length``, and
    segments plus the used prefix of the active buffer are in write order.
    """

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if isinstance(buffer_size, bool) or not isinstance(buffer_size, int) or buffer_size <= 0:
            raise ValueError("buffer_size must be a positive int")
        self._buffer_size = buffer_size
        self._active = bytearray(buffer_size)
        self._offset = 0
        self._segments: List[Union[bytes, bytearray]] = []
        self._length = 0

    @property
    def byte_length(self) -> int:
        return self._length

    def _rotate(self) -> None:
        # The full buffer is retained as-is; nothing else references it.
        self._segments.append(self._active)
        self._active = bytearray(self._buffer_size)
        self._offset = 0

    def _flush(self) -> None:
        if not self._offset:
            return
        self._segments.append(bytes(self._active[:self._offset]))
        self._active = bytearray(self._buffer_size)
        self._offset = 0

    def write_byte(self, value: int) -> None:
        self._active[self._offset] = value
        self._offset += 1
        self._length += 1
        if self._offset >= self._buffer_size:
            self._rotate()

    def write_chunk(self, chunk: BytesLike) -> None:
        size = len(chunk)
        if not size:
            return
        if size <= self._buffer_size - self._offset:
            self._active[self._offset:self._offset + size] = chunk
            self._offset += size
            if self._offset >= self._buffer_size:
                self._rotate()
        else:
            self._flush()
            self._segments.append(bytes(chunk))
        self._length += size

    def result(self) -> bytes:
        out = bytearray(self._length)
        pos = 0
        for segment in self._segments:
            out[pos:pos + len(segment)] = segment
            pos += len(segment)
        if self._offset:
            out[pos:pos + self._offset] = self._active[:self._offset]
        return bytes(out)
