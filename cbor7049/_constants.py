"""cbor7049 constants: major types, header markers, simple values, limits.

RFC references: §2.1 (major types), §2.2 (indefinite lengths),
§2.3 (simple values and floats), §2.4 (tags).
"""

from __future__ import annotations

__rfc__ = "7049"

# ── Major types (high 3 bits of the initial byte) ────────────
MAJOR_UNSIGNED: int = 0
MAJOR_NEGATIVE: int = 1
MAJOR_BYTES: int = 2
MAJOR_TEXT: int = 3
MAJOR_ARRAY: int = 4
MAJOR_MAP: int = 5
MAJOR_TAG: int = 6
MAJOR_SIMPLE: int = 7

# ── Additional-info markers (low 5 bits) ─────────────────────
# Values 0..23 carry the argument directly.  28..30 are reserved.
AI_DIRECT_LIMIT: int = 24
AI_ONE_BYTE: int = 24
AI_TWO_BYTES: int = 25
AI_FOUR_BYTES: int = 26
AI_EIGHT_BYTES: int = 27
AI_INDEFINITE: int = 31

# Under major type 7 the 2/4/8-byte markers select the float width.
AI_FLOAT16: int = AI_TWO_BYTES
AI_FLOAT32: int = AI_FOUR_BYTES
AI_FLOAT64: int = AI_EIGHT_BYTES

# ── Simple values (major type 7) ─────────────────────────────
SIMPLE_FALSE: int = 20
SIMPLE_TRUE: int = 21
SIMPLE_NULL: int = 22
SIMPLE_UNDEFINED: int = 23

# 0xff: major type 7, additional info 31.
BREAK_BYTE: int = (MAJOR_SIMPLE << 5) | AI_INDEFINITE

# ── Numeric limits ───────────────────────────────────────────
# Integers are only encoded as integers while a double could hold them
# exactly.  Anything at or beyond 2**53 goes out as a float64.
MAX_SAFE_INTEGER: int = 2**53
UINT8_LIMIT: int = 0x100
UINT16_LIMIT: int = 0x10000
UINT32_LIMIT: int = 0x100000000

# ── Output buffering ─────────────────────────────────────────
DEFAULT_BUFFER_SIZE: int = 16384  # 16 KiB

# ── Built-in semantic tags (§2.4.1) ──────────────────────────
TAG_DATETIME_STRING: int = 0  # RFC 3339 / ISO-8601 text
TAG_EPOCH_DATETIME: int = 1   # epoch seconds; ISO text accepted as legacy alias
