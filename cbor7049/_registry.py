"""Semantic tag registry (RFC 7049 §2.4).

Encode hooks are *probes*: callables that look at a value and return a
replacement to be written under their tag, or None when the value isn't
theirs.  Probes run in registration order and the first match wins.
Decode hooks are keyed by tag and receive the already-decoded inner item.

Registration is append-only.  Finish registering before sharing a
registry between threads; lookups are safe only while no registration
is in progress.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from ._constants import TAG_DATETIME_STRING, TAG_EPOCH_DATETIME
from ._errors import InvalidTag, InvalidTagContent

logger = logging.getLogger(__name__)

EncodeProbe = Callable[[Any], Any]
DecodeHook = Callable[[Any], Any]


def validate_tag(tag: Any) -> int:
    """Return *tag* if it is a non-negative int, else raise InvalidTag."""
    # bool is an int subclass; True is not a tag.
    if isinstance(tag, bool) or not isinstance(tag, int) or tag < 0:
        raise InvalidTag("tag must be a non-negative integer, got {!r}".format(tag))
    return tag


class SemanticRegistry:
    """Ordered encode probes plus a tag -> decode hook mapping."""

    def __init__(self) -> None:
        self._encoders: List[Tuple[int, EncodeProbe]] = []
        self._decoders: Dict[int, DecodeHook] = {}

    def add_encode(self, tag: int, probe: EncodeProbe) -> "SemanticRegistry":
        validate_tag(tag)
        if not callable(probe):
            raise TypeError("encode probe for tag {} is not callable".format(tag))
        self._encoders.append((tag, probe))
        logger.debug("registered encode probe for tag %d (%d total)",
                     tag, len(self._encoders))
        return self

    def add_decode(self, tag: int, hook: DecodeHook) -> "SemanticRegistry":
        validate_tag(tag)
        if not callable(hook):
            raise TypeError("decode hook for tag {} is not callable".format(tag))
        if tag in self._decoders:
            logger.debug("replacing decode hook for tag %d", tag)
        self._decoders[tag] = hook
        logger.debug("registered decode hook for tag %d", tag)
        return self

    def probe(self, value: Any) -> Optional[Tuple[int, Any]]:
        """Return ``(tag, replacement)`` from the first matching probe."""
        for tag, fn in self._encoders:
            replacement = fn(value)
            if replacement is not None:
                return tag, replacement
        return None

    def decoder_for(self, tag: int) -> Optional[DecodeHook]:
        return self._decoders.get(tag)

    @property
    def encode_tags(self) -> List[int]:
        return [tag for tag, _ in self._encoders]

    @property
    def decode_tags(self) -> List[int]:
        return sorted(self._decoders)


# ── Built-in date/time tags ──────────────────────────────────
# Tag 0 carries an RFC 3339 string.  Python < 3.11 fromisoformat() wants
# either no fraction or exactly 3/6 digits and no "Z", so normalize first.

_FRACTION = re.compile(r"\.(\d+)")


def _parse_iso(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


def encode_datetime(value: Any) -> Optional[str]:
    """Tag 0 probe: ISO-8601 text for datetimes, None for anything else."""
    if not isinstance(value, datetime):
        return None
    text = value.isoformat()
    if value.utcoffset() is not None and text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def decode_datetime_string(inner: Any) -> datetime:
    if not isinstance(inner, str):
        raise InvalidTagContent(
            "tag 0 expects a text string, got {}".format(type(inner).__name__))
    try:
        return _parse_iso(inner)
    except ValueError as e:
        raise InvalidTagContent("tag 0: bad date/time {!r}".format(inner)) from e


def decode_epoch_datetime(inner: Any) -> datetime:
    """Tag 1: epoch seconds, or an ISO-8601 string (legacy alias of tag 0)."""
    if isinstance(inner, str):
        try:
            return _parse_iso(inner)
        except ValueError as e:
            raise InvalidTagContent("tag 1: bad date/time {!r}".format(inner)) from e
    if isinstance(inner, (int, float)) and not isinstance(inner, bool):
        try:
            return datetime.fromtimestamp(inner, timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidTagContent("tag 1: epoch {!r} out of range".format(inner)) from e
    raise InvalidTagContent(
        "tag 1 expects a number or text string, got {}".format(type(inner).__name__))


def install_builtin_tags(registry: SemanticRegistry) -> SemanticRegistry:
    """Register the date/time hooks every default codec carries."""
    return (registry
            .add_encode(TAG_DATETIME_STRING, encode_datetime)
            .add_decode(TAG_DATETIME_STRING, decode_datetime_string)
            .add_decode(TAG_EPOCH_DATETIME, decode_epoch_datetime))
