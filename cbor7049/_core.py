"""cbor7049 core: the recursive value engine.

``Codec`` translates between Python values and RFC 7049 items.  Each
instance owns its own semantic tag registry, so differently configured
codecs can live side by side; the module-level API in ``__init__`` uses
one shared default instance.

Type mapping:

    major 0/1  whole numbers         major 5  dict (any Mapping on encode)
    major 2    bytes                major 6  tag -> registered hook
    major 3    str                  major 7  bool, None, undefined, float
    major 4    list (tuple on encode)

Encoding always writes definite lengths.  Whole numbers from -2**53 up
to 2**53 - 1 go out as major 0/1 whether they are ints or floats, so
``1.0`` decodes as ``1`` and ``-0.0`` as ``0``; every other number is
written as an 8-byte double.  Decoding accepts every header form,
indefinite-length strings, arrays and maps, and all three float widths.

Nesting is handled by plain recursion, so the deepest document either
direction can handle is bounded by the interpreter recursion limit
(RecursionError past that).
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, Iterator, List, NamedTuple, Optional

from ._constants import (
    AI_FLOAT16,
    AI_FLOAT32,
    AI_FLOAT64,
    AI_INDEFINITE,
    BREAK_BYTE,
    DEFAULT_BUFFER_SIZE,
    MAJOR_ARRAY,
    MAJOR_BYTES,
    MAJOR_MAP,
    MAJOR_NEGATIVE,
    MAJOR_SIMPLE,
    MAJOR_TAG,
    MAJOR_TEXT,
    MAJOR_UNSIGNED,
    MAX_SAFE_INTEGER,
    SIMPLE_FALSE,
    SIMPLE_NULL,
    SIMPLE_TRUE,
    SIMPLE_UNDEFINED,
)
from ._errors import (
    IntegerMagnitudeOverflow,
    MalformedHeader,
    UnhashableMapKey,
    UnknownSimpleValue,
    UnsupportedMajorType,
    UnsupportedValueKind,
)
from ._header import Header, read_header_raw, value_from_header, write_header, write_header_raw
from ._reader import BufferReader, ByteSource, BytesLike
from ._registry import DecodeHook, EncodeProbe, SemanticRegistry, install_builtin_tags
from ._types import SupportsCbor, undefined
from ._writer import ByteSink, ChunkedWriter


# ── Decode steps ─────────────────────────────────────────────
# A break code is not a value.  The step reader tags what it found so
# container loops can tell "end of container" from any decoded item,
# including None and undefined.

class _StepKind(enum.Enum):
    ITEM = "item"
    BREAK = "break"


class _Step(NamedTuple):
    kind: _StepKind
    value: Any = None


_BREAK = _Step(_StepKind.BREAK)

_MAJOR_NAMES = ("unsigned", "negative", "bytes", "text", "array", "map", "tag", "simple")


def _as_key(key: Any) -> Any:
    """Make a decoded item usable as a dict key (arrays become tuples)."""
    if isinstance(key, list):
        return tuple(_as_key(k) for k in key)
    try:
        hash(key)
    except TypeError:
        raise UnhashableMapKey(
            "map key of type {} is not hashable".format(type(key).__name__)) from None
    return key


class Codec:
    """Encoder/decoder bound to one semantic tag registry.

    With ``builtin_tags`` (the default) the registry starts out with the
    date/time hooks for tags 0 and 1.  ``buffer_size`` is the block size
    the output writer allocates in.
    """

    def __init__(self, *, buffer_size: int = DEFAULT_BUFFER_SIZE,
                 builtin_tags: bool = True) -> None:
        if isinstance(buffer_size, bool) or not isinstance(buffer_size, int) \
                or buffer_size <= 0:
            raise ValueError("buffer_size must be a positive int")
        self.buffer_size = buffer_size
        self.registry = SemanticRegistry()
        if builtin_tags:
            install_builtin_tags(self.registry)

    def __repr__(self) -> str:
        return "<Codec encode_tags={} decode_tags={}>".format(
            self.registry.encode_tags, self.registry.decode_tags)

    # ── Registration ─────────────────────────────────────────

    def add_semantic_encode(self, tag: int, probe: EncodeProbe) -> "Codec":
        """Register *probe* for *tag*; returns the codec for chaining."""
        self.registry.add_encode(tag, probe)
        return self

    def add_semantic_decode(self, tag: int, hook: DecodeHook) -> "Codec":
        """Register the decode *hook* for *tag*; returns the codec for chaining."""
        self.registry.add_decode(tag, hook)
        return self

    # ── Encoding ─────────────────────────────────────────────

    def encode(self, value: Any) -> bytes:
        writer = ChunkedWriter(self.buffer_size)
        self.encode_to(value, writer)
        return writer.result()

    def encode_to(self, value: Any, sink: ByteSink) -> None:
        """Encode one value into *sink*, recursing into containers."""
        hit = self.registry.probe(value)
        if hit is not None:
            tag, replacement = hit
            write_header(MAJOR_TAG, tag, sink)
            self.encode_to(replacement, sink)
            return

        if isinstance(value, SupportsCbor):
            value = value.to_cbor()

        # Identity checks first: bool is an int subclass.
        if value is False:
            write_header_raw(MAJOR_SIMPLE, SIMPLE_FALSE, sink)
        elif value is True:
            write_header_raw(MAJOR_SIMPLE, SIMPLE_TRUE, sink)
        elif value is None:
            write_header_raw(MAJOR_SIMPLE, SIMPLE_NULL, sink)
        elif value is undefined:
            write_header_raw(MAJOR_SIMPLE, SIMPLE_UNDEFINED, sink)
        elif isinstance(value, int):
            self._encode_int(value, sink)
        elif isinstance(value, float):
            # Whole numbers travel as integers, like ints of the same value.
            if value.is_integer() and -MAX_SAFE_INTEGER <= value < MAX_SAFE_INTEGER:
                self._encode_int(int(value), sink)
            else:
                self._encode_float(value, sink)
        elif isinstance(value, str):
            try:
                raw = value.encode("utf-8")
            except UnicodeEncodeError as e:
                raise UnsupportedValueKind("text is not encodable as UTF-8") from e
            write_header(MAJOR_TEXT, len(raw), sink)
            sink.write_chunk(raw)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            write_header(MAJOR_BYTES, len(raw), sink)
            sink.write_chunk(raw)
        elif isinstance(value, (list, tuple)):
            write_header(MAJOR_ARRAY, len(value), sink)
            for item in value:
                self.encode_to(item, sink)
        elif isinstance(value, Mapping):
            write_header(MAJOR_MAP, len(value), sink)
            for key, item in value.items():
                self.encode_to(key, sink)
                self.encode_to(item, sink)
        else:
            raise UnsupportedValueKind(
                "cannot encode value of type {}".format(type(value).__name__))

    def _encode_int(self, value: int, sink: ByteSink) -> None:
        if -MAX_SAFE_INTEGER <= value < MAX_SAFE_INTEGER:
            if value < 0:
                write_header(MAJOR_NEGATIVE, -1 - value, sink)
            else:
                write_header(MAJOR_UNSIGNED, value, sink)
            return
        # Outside the exact-double range the value travels as a double.
        try:
            as_float = float(value)
        except OverflowError:
            raise IntegerMagnitudeOverflow(
                "integer {} does not fit in a double".format(value)) from None
        self._encode_float(as_float, sink)

    def _encode_float(self, value: float, sink: ByteSink) -> None:
        write_header_raw(MAJOR_SIMPLE, AI_FLOAT64, sink)
        sink.write_float64(value)

    # ── Decoding ─────────────────────────────────────────────

    def decode(self, data: BytesLike) -> Any:
        """Decode the first item of *data*; trailing bytes are ignored."""
        return self.decode_from(self._reader(data))

    def iterdecode(self, data: BytesLike) -> Iterator[Any]:
        """Yield consecutive top-level items until *data* is used up."""
        reader = self._reader(data)
        while not reader.at_end():
            yield self.decode_from(reader)

    def decode_all(self, data: BytesLike) -> List[Any]:
        return list(self.iterdecode(data))

    def decode_from(self, source: ByteSource) -> Any:
        """Decode one complete item from *source*."""
        step = self._decode_step(source)
        if step.kind is _StepKind.BREAK:
            raise MalformedHeader("break code outside an indefinite-length item")
        return step.value

    @staticmethod
    def _reader(data: BytesLike) -> BufferReader:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("expected a bytes-like object, got {}".format(
                type(data).__name__))
        return BufferReader(data)

    def _decode_step(self, source: ByteSource) -> _Step:
        header = read_header_raw(source)
        major = header.major_type

        if major == MAJOR_SIMPLE:
            return self._decode_simple(header, source)

        value = value_from_header(header, source)

        if major in (MAJOR_UNSIGNED, MAJOR_NEGATIVE, MAJOR_TAG) and value is None:
            raise MalformedHeader(
                "indefinite length is not allowed for major type {} ({})".format(
                    major, _MAJOR_NAMES[major]))

        if major == MAJOR_UNSIGNED:
            return _Step(_StepKind.ITEM, value)

        if major == MAJOR_NEGATIVE:
            return _Step(_StepKind.ITEM, -1 - value)

        if major == MAJOR_BYTES:
            return _Step(_StepKind.ITEM, self._read_string(major, value, source))

        if major == MAJOR_TEXT:
            raw = self._read_string(major, value, source)
            try:
                return _Step(_StepKind.ITEM, raw.decode("utf-8"))
            except UnicodeDecodeError as e:
                raise MalformedHeader("text string is not valid UTF-8") from e

        if major == MAJOR_ARRAY:
            return _Step(_StepKind.ITEM, self._read_items(value, source))

        if major == MAJOR_MAP:
            count = None if value is None else value * 2
            items = self._read_items(count, source)
            if len(items) % 2:
                raise MalformedHeader("indefinite-length map has a key without a value")
            # Later duplicates overwrite earlier keys.  Keys that compare equal
            # in Python (1, 1.0, True) count as duplicates.
            result = {}
            for i in range(0, len(items), 2):
                result[_as_key(items[i])] = items[i + 1]
            return _Step(_StepKind.ITEM, result)

        if major == MAJOR_TAG:
            inner = self.decode_from(source)
            hook = self.registry.decoder_for(value)
            if hook is not None:
                inner = hook(inner)
            return _Step(_StepKind.ITEM, inner)

        raise UnsupportedMajorType("unsupported major type {}".format(major))

    def _decode_simple(self, header: Header, source: ByteSource) -> _Step:
        info = header.additional_info
        if info == AI_FLOAT16:
            return _Step(_StepKind.ITEM, source.read_float16())
        if info == AI_FLOAT32:
            return _Step(_StepKind.ITEM, source.read_float32())
        if info == AI_FLOAT64:
            return _Step(_StepKind.ITEM, source.read_float64())
        if info == SIMPLE_FALSE:
            return _Step(_StepKind.ITEM, False)
        if info == SIMPLE_TRUE:
            return _Step(_StepKind.ITEM, True)
        if info == SIMPLE_NULL:
            return _Step(_StepKind.ITEM, None)
        if info == SIMPLE_UNDEFINED:
            return _Step(_StepKind.ITEM, undefined)
        if info == AI_INDEFINITE:
            return _BREAK
        # Raises MalformedHeader for the reserved markers 28..30.
        value = value_from_header(header, source)
        raise UnknownSimpleValue("unassigned simple value {}".format(value))

    def _read_items(self, count: Optional[int], source: ByteSource) -> List[Any]:
        if count is not None:
            return [self.decode_from(source) for _ in range(count)]
        items = []
        while True:
            step = self._decode_step(source)
            if step.kind is _StepKind.BREAK:
                return items
            items.append(step.value)

    def _read_string(self, major: int, length: Optional[int], source: ByteSource) -> bytes:
        if length is not None:
            return source.read_chunk(length)
        # Indefinite: definite chunks of the same major type, then break.
        chunks = []
        while source.peek_byte() != BREAK_BYTE:
            header = read_header_raw(source)
            if header.major_type != major:
                raise MalformedHeader(
                    "chunk of major type {} inside indefinite {} string".format(
                        header.major_type, _MAJOR_NAMES[major]))
            size = value_from_header(header, source)
            if size is None:
                raise MalformedHeader("nested indefinite-length string chunk")
            chunks.append(source.read_chunk(size))
        source.read_byte()
        return b"".join(chunks)
