"""cbor7049 error codes and exception classes.

Every failure raised by the codec is a ``CborError``.  The ``.code``
attribute is one of the ERR_* strings below, so callers can either catch
a specific subclass or compare codes.  All of these are fatal: encode and
decode never return partial results.
"""

from __future__ import annotations

# ── Error codes ──────────────────────────────────────────────

ERR_UNEXPECTED_END: str = "ERR_UNEXPECTED_END"        # ran past the input
ERR_MALFORMED_HEADER: str = "ERR_MALFORMED_HEADER"    # bad marker or framing
ERR_UNKNOWN_SIMPLE: str = "ERR_UNKNOWN_SIMPLE"        # undefined simple value
ERR_UNSUPPORTED_MAJOR: str = "ERR_UNSUPPORTED_MAJOR"  # no handler for major type
ERR_UNSUPPORTED_KIND: str = "ERR_UNSUPPORTED_KIND"    # Python value not encodable
ERR_INT_OVERFLOW: str = "ERR_INT_OVERFLOW"            # beyond exact double range
ERR_INVALID_TAG: str = "ERR_INVALID_TAG"              # bad tag at registration
ERR_UNHASHABLE_KEY: str = "ERR_UNHASHABLE_KEY"        # map key can't key a dict
ERR_TAG_CONTENT: str = "ERR_TAG_CONTENT"              # wrong item under a tag
ERR_FLOAT_RANGE: str = "ERR_FLOAT_RANGE"              # float too big for width


class CborError(Exception):
    """Base exception for cbor7049 encode/decode/registration errors.

    The `.code` attribute is one of the ERR_* strings above.
    """

    code: str = ""

    def __init__(self, code: str = "", msg: str = "") -> None:
        code = code or type(self).code
        super().__init__(msg or code)
        self.code = code


class _CodedError(CborError):
    # Subclasses fix their code; they are raised with just a message.
    def __init__(self, msg: str = "") -> None:
        super().__init__(type(self).code, msg)


class UnexpectedEndOfInput(_CodedError):
    code = ERR_UNEXPECTED_END


class MalformedHeader(_CodedError):
    code = ERR_MALFORMED_HEADER


class UnknownSimpleValue(_CodedError):
    code = ERR_UNKNOWN_SIMPLE


class UnsupportedMajorType(_CodedError):
    code = ERR_UNSUPPORTED_MAJOR


class UnsupportedValueKind(_CodedError):
    code = ERR_UNSUPPORTED_KIND


class IntegerMagnitudeOverflow(_CodedError):
    code = ERR_INT_OVERFLOW


class InvalidTag(_CodedError):
    code = ERR_INVALID_TAG


class UnhashableMapKey(_CodedError):
    code = ERR_UNHASHABLE_KEY


class InvalidTagContent(_CodedError):
    code = ERR_TAG_CONTENT


class FloatRangeError(_CodedError):
    code = ERR_FLOAT_RANGE
