"""JSON <-> CBOR value adapter used by the command-line interface.

JSON has no byte strings, no undefined and no non-string keys, so the
mapping is lossy in one direction:

    CBOR bytes      -> {"$base64": "..."}   (and back again)
    datetime        -> ISO-8601 string
    undefined       -> null
    non-string key  -> its JSON text
    tuple (array used as a map key) -> list

Floats NaN/Infinity use Python's json extensions in both directions.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from ._types import undefined

BYTES_KEY = "$base64"

_BOM = b"\xef\xbb\xbf"


def _pairs_hook(pairs: List[Any]) -> Any:
    if len(pairs) == 1 and pairs[0][0] == BYTES_KEY and isinstance(pairs[0][1], str):
        try:
            return base64.b64decode(pairs[0][1], validate=True)
        except binascii.Error as e:
            raise ValueError("bad base64 under {!r}".format(BYTES_KEY)) from e
    # Plain dict construction: a repeated key keeps its last value.
    return dict(pairs)


def json_to_value(raw: bytes) -> Any:
    """Parse UTF-8 JSON bytes into a value ready for encoding."""
    if raw.startswith(_BOM):
        raw = raw[len(_BOM):]
    text = raw.decode("utf-8")
    return json.loads(text, object_pairs_hook=_pairs_hook)


def value_to_json(value: Any) -> Any:
    """Convert a decoded value into something ``json.dumps`` accepts."""
    if isinstance(value, dict):
        out: Dict[str, Any] = {}
        for k, v in value.items():
            key = k if isinstance(k, str) else json.dumps(value_to_json(k))
            out[key] = value_to_json(v)
        return out

    if isinstance(value, (list, tuple)):
        return [value_to_json(v) for v in value]

    if isinstance(value, (bytes, bytearray)):
        return {BYTES_KEY: base64.b64encode(bytes(value)).decode("ascii")}

    if isinstance(value, datetime):
        return value.isoformat()

    if value is undefined:
        return None

    return value


def dumps_json(value: Any, indent: Optional[int] = None) -> str:
    return json.dumps(value_to_json(value), ensure_ascii=False, indent=indent)
