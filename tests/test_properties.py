"""
test_properties.py - Property-based tests with Hypothesis

Covers:
- Round trip: decode(encode(v)) == v for the natively supported kinds
- Robustness: arbitrary bytes either decode or raise a CborError
- Equivalence: indefinite-length forms decode like their definite forms

Run with:
    pytest tests/test_properties.py -v
    HYPOTHESIS_PROFILE=ci pytest tests/test_properties.py
"""

import math
import struct

from hypothesis import given
from hypothesis import strategies as st

from cbor7049 import MAX_SAFE_INTEGER, CborError, Codec, decode, decode_all, encode


# =============================================================================
# Strategies
# =============================================================================

safe_ints = st.integers(min_value=-(MAX_SAFE_INTEGER - 1), max_value=MAX_SAFE_INTEGER - 1)
finite_floats = st.floats(allow_nan=False)

scalars = st.one_of(
    st.none(),
    st.booleans(),
    safe_ints,
    finite_floats,
    st.text(max_size=40),
    st.binary(max_size=40),
)

values = st.recursive(
    scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=6),
        st.dictionaries(st.text(max_size=8), children, max_size=6),
    ),
    max_leaves=30,
)


def same(a, b):
    """Equality that also checks bool/int/float kinds and signed zero.

    *a* is the decoded value, *b* the original; whole floats come back as ints.
    """
    if type(a) is int and isinstance(b, float):
        return b.is_integer() and a == b
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    if isinstance(a, list):
        return len(a) == len(b) and all(same(x, y) for x, y in zip(a, b))
    if isinstance(a, dict):
        return list(a) == list(b) and all(same(a[k], b[k]) for k in a)
    return a == b


def indefinite(items):
    """Encode a list as an indefinite-length array."""
    return b"\x9f" + b"".join(encode(item) for item in items) + b"\xff"


def chunked(major, data, sizes):
    """Split *data* into definite chunks inside an indefinite string."""
    out = [bytes([(major << 5) | 31])]
    pos = 0
    for size in sizes:
        piece = data[pos:pos + size]
        pos += size
        out.append(bytes([(major << 5) | 24, len(piece)]) + piece)
    if pos < len(data):
        rest = data[pos:]
        out.append(bytes([(major << 5) | 25]) + struct.pack(">H", len(rest)) + rest)
    out.append(b"\xff")
    return b"".join(out)


# =============================================================================
# Properties
# =============================================================================

@given(values)
def test_round_trip(value):
    assert same(decode(encode(value)), value)


@given(values, st.integers(min_value=1, max_value=64))
def test_buffer_size_does_not_change_output(value, size):
    assert Codec(buffer_size=size).encode(value) == encode(value)


@given(safe_ints)
def test_integers_use_minimal_header(value):
    data = encode(value)
    magnitude = value if value >= 0 else -1 - value
    if magnitude < 24:
        assert len(data) == 1
    elif magnitude < 2**8:
        assert len(data) == 2
    elif magnitude < 2**16:
        assert len(data) == 3
    elif magnitude < 2**32:
        assert len(data) == 5
    else:
        assert len(data) == 9


@given(st.binary(max_size=100))
def test_arbitrary_bytes_never_crash(data):
    try:
        decode(data)
    except CborError:
        pass


@given(st.binary(max_size=100))
def test_arbitrary_sequences_never_crash(data):
    try:
        decode_all(data)
    except CborError:
        pass


@given(values, st.binary(min_size=1, max_size=16))
def test_trailing_bytes_are_ignored(value, tail):
    assert same(decode(encode(value) + tail), value)


@given(st.lists(values, max_size=6))
def test_indefinite_array_matches_definite(items):
    assert same(decode(indefinite(items)), decode(encode(items)))


@given(st.binary(max_size=200), st.lists(st.integers(min_value=0, max_value=40), max_size=6))
def test_indefinite_bytes_match_definite(data, sizes):
    assert decode(chunked(2, data, sizes)) == data


@given(st.text(alphabet="abcxyz", max_size=200),
       st.lists(st.integers(min_value=0, max_value=40), max_size=6))
def test_indefinite_text_matches_definite(text, sizes):
    assert decode(chunked(3, text.encode("ascii"), sizes)) == text
