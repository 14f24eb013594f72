"""Python-side value types that have no builtin equivalent.

``undefined`` stands for the CBOR simple value 23, which is distinct
from null (``None``).  ``SupportsCbor`` is the opt-in capability for
objects that know how to turn themselves into encodable values.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class UndefinedType:
    """Type of the ``undefined`` singleton."""

    __slots__ = ()
    _instance = None

    def __new__(cls) -> "UndefinedType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "undefined"


undefined = UndefinedType()


@runtime_checkable
class SupportsCbor(Protocol):
    """Objects with a custom wire representation.

    ``to_cbor()`` returns any value the codec can encode; the codec
    encodes that value in place of the object itself.
    """

    def to_cbor(self) -> Any:
        ...
