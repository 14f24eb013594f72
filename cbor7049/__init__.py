"""cbor7049: RFC 7049 (CBOR) encoder/decoder.

Encode Python values to the Concise Binary Object Representation and
back, with pluggable semantic tags.

Quick start:
    >>> import cbor7049
    >>> cbor7049.encode("IETF").hex()
    '6449455446'
    >>> cbor7049.decode(bytes.fromhex("1a000f4240"))
    1000000

Semantic tags let domain types travel as tagged items.  A probe returns
a replacement value for the objects it recognizes and None otherwise:
    >>> import uuid
    >>> codec = cbor7049.Codec()
    >>> codec = codec.add_semantic_encode(
    ...     37, lambda v: v.bytes if isinstance(v, uuid.UUID) else None)

The module-level functions share one default ``Codec`` that already
knows tags 0 and 1 (date/time).  Register hooks on it during start-up,
before other threads begin encoding or decoding.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, List

from ._constants import (
    DEFAULT_BUFFER_SIZE,
    MAX_SAFE_INTEGER,
    TAG_DATETIME_STRING,
    TAG_EPOCH_DATETIME,
)
from ._core import Codec
from ._errors import (
    ERR_FLOAT_RANGE,
    ERR_INT_OVERFLOW,
    ERR_INVALID_TAG,
    ERR_MALFORMED_HEADER,
    ERR_TAG_CONTENT,
    ERR_UNEXPECTED_END,
    ERR_UNHASHABLE_KEY,
    ERR_UNKNOWN_SIMPLE,
    ERR_UNSUPPORTED_KIND,
    ERR_UNSUPPORTED_MAJOR,
    CborError,
    FloatRangeError,
    IntegerMagnitudeOverflow,
    InvalidTag,
    InvalidTagContent,
    MalformedHeader,
    UnexpectedEndOfInput,
    UnhashableMapKey,
    UnknownSimpleValue,
    UnsupportedMajorType,
    UnsupportedValueKind,
)
from ._reader import BufferReader, ByteSource
from ._registry import DecodeHook, EncodeProbe, SemanticRegistry
from ._types import SupportsCbor, UndefinedType, undefined
from ._writer import ByteSink, ChunkedWriter

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Public API functions
    "encode",
    "decode",
    "iterdecode",
    "decode_all",
    "add_semantic_encode",
    "add_semantic_decode",
    # Codec and its collaborators
    "Codec",
    "default_codec",
    "SemanticRegistry",
    "ByteSource",
    "BufferReader",
    "ByteSink",
    "ChunkedWriter",
    "SupportsCbor",
    "UndefinedType",
    "undefined",
    # Constants
    "DEFAULT_BUFFER_SIZE",
    "MAX_SAFE_INTEGER",
    "TAG_DATETIME_STRING",
    "TAG_EPOCH_DATETIME",
    # Exceptions
    "CborError",
    "UnexpectedEndOfInput",
    "MalformedHeader",
    "UnknownSimpleValue",
    "UnsupportedMajorType",
    "UnsupportedValueKind",
    "IntegerMagnitudeOverflow",
    "InvalidTag",
    "UnhashableMapKey",
    "InvalidTagContent",
    "FloatRangeError",
    # Error codes
    "ERR_UNEXPECTED_END",
    "ERR_MALFORMED_HEADER",
    "ERR_UNKNOWN_SIMPLE",
    "ERR_UNSUPPORTED_MAJOR",
    "ERR_UNSUPPORTED_KIND",
    "ERR_INT_OVERFLOW",
    "ERR_INVALID_TAG",
    "ERR_UNHASHABLE_KEY",
    "ERR_TAG_CONTENT",
    "ERR_FLOAT_RANGE",
]

default_codec = Codec()


# ── Core API ──────────────────────────────────────────────────

def encode(value: Any) -> bytes:
    """Encode *value* to CBOR bytes with the default codec."""
    return default_codec.encode(value)


def decode(data: bytes) -> Any:
    """Decode the first CBOR item in *data* with the default codec."""
    return default_codec.decode(data)


def iterdecode(data: bytes) -> Iterator[Any]:
    """Iterate over a CBOR sequence (items back to back, no framing)."""
    return default_codec.iterdecode(data)


def decode_all(data: bytes) -> List[Any]:
    return default_codec.decode_all(data)


# ── Semantic tags ─────────────────────────────────────────────

def add_semantic_encode(tag: int, probe: EncodeProbe) -> Codec:
    """Register an encode probe on the default codec.

    Returns the default codec so registrations can be chained.
    """
    return default_codec.add_semantic_encode(tag, probe)


def add_semantic_decode(tag: int, hook: DecodeHook) -> Codec:
    """Register a decode hook on the default codec."""
    return default_codec.add_semantic_decode(tag, hook)
