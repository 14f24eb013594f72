"""IEEE-754 half/single/double packing (RFC 7049 §2.3, Appendix D).

Decoding composes the value from its bit fields explicitly, so the three
widths share one code path and subnormals come out exact.  For the half
width this is the formula from Appendix D of the RFC:

    exponent == 0x1f  ->  ±inf (mantissa 0) or NaN
    exponent == 0     ->  sign * 2**-24 * mantissa
    otherwise         ->  sign * 2**(exponent - 25) * (1024 + mantissa)

Encoding uses ``struct``, which reinterprets the host double directly.
"""

from __future__ import annotations

import math
import struct
from typing import NamedTuple

from ._errors import FloatRangeError


class FloatLayout(NamedTuple):
    """Bit layout of one IEEE-754 binary interchange format."""

    name: str
    exponent_bits: int
    mantissa_bits: int
    struct_format: str

    @property
    def width(self) -> int:
        return 1 + self.exponent_bits + self.mantissa_bits

    @property
    def bias(self) -> int:
        return (1 << (self.exponent_bits - 1)) - 1


HALF = FloatLayout("half", 5, 10, ">e")
SINGLE = FloatLayout("single", 8, 23, ">f")
DOUBLE = FloatLayout("double", 11, 52, ">d")


def unpack_float(bits: int, layout: FloatLayout) -> float:
    """Turn a raw bit pattern of the given layout into a Python float."""
    mantissa_bits = layout.mantissa_bits
    exponent_mask = (1 << layout.exponent_bits) - 1

    negative = (bits >> (layout.width - 1)) & 1
    exponent = (bits >> mantissa_bits) & exponent_mask
    mantissa = bits & ((1 << mantissa_bits) - 1)

    if exponent == exponent_mask:
        if mantissa:
            return math.nan
        magnitude = math.inf
    elif exponent == 0:
        # Subnormal: no implicit leading bit, exponent pinned at 1 - bias.
        magnitude = math.ldexp(mantissa, 1 - layout.bias - mantissa_bits)
    else:
        magnitude = math.ldexp((1 << mantissa_bits) + mantissa,
                               exponent - layout.bias - mantissa_bits)
    # copysign keeps the sign of zero.
    return math.copysign(magnitude, -1.0 if negative else 1.0)


def pack_float(value: float, layout: FloatLayout) -> bytes:
    """Pack *value* into big-endian bytes of the given layout."""
    try:
        return struct.pack(layout.struct_format, value)
    except OverflowError:
        raise FloatRangeError(
            "{!r} is out of range for a {} float".format(value, layout.name))


def unpack_half(bits: int) -> float:
    return unpack_float(bits, HALF)


def unpack_single(bits: int) -> float:
    return unpack_float(bits, SINGLE)


def unpack_double(bits: int) -> float:
    return unpack_float(bits, DOUBLE)
