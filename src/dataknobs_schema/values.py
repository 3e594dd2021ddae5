"""Value model: tags for the dynamic values being validated.

Validation works on native Python values. This module classifies them into
the small set of kinds the validator reasons about and provides the
``MISSING`` sentinel for absent values (a key that is not present in an input
mapping, as opposed to a key present with ``None``).
"""

from __future__ import annotations

import inspect
import math
from collections.abc import Mapping
from concurrent.futures import Future
from datetime import date
from enum import Enum
from numbers import Real
from typing import Any


class _MissingType:
    """Singleton type of the ``MISSING`` sentinel."""

    _instance: _MissingType | None = None

    def __new__(cls) -> _MissingType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _MissingType:
        return self

    def __deepcopy__(self, memo: dict) -> _MissingType:
        return self

    def __reduce__(self) -> str:
        return "MISSING"


MISSING = _MissingType()


class ValueKind(Enum):
    """Enumeration of the value tags understood by the validator."""

    STRING = "string"
    NUMBER = "number"
    NAN = "nan"
    BOOLEAN = "boolean"
    DATE = "date"
    LIST = "array"
    MAPPING = "object"
    SET = "set"
    PENDING = "promise"
    NULL = "null"
    ABSENT = "missing"
    OTHER = "other"


def kind_of(value: Any) -> ValueKind:
    """Classify a value.

    ``bool`` is checked before numbers since it is an ``int`` subclass, and
    NaN gets its own tag so it never satisfies a number schema.

    Args:
        value: Any Python value

    Returns:
        The ValueKind tag of the value
    """
    if value is MISSING:
        return ValueKind.ABSENT
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Real):
        if isinstance(value, float) and math.isnan(value):
            return ValueKind.NAN
        return ValueKind.NUMBER
    if isinstance(value, date):
        return ValueKind.DATE
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (set, frozenset)):
        return ValueKind.SET
    if isinstance(value, Future) or inspect.isawaitable(value):
        return ValueKind.PENDING
    return ValueKind.OTHER


def describe_value(value: Any) -> str:
    """Short name of a value's kind for issue messages ("received ...")."""
    kind = kind_of(value)
    if kind is ValueKind.OTHER:
        if isinstance(value, Enum):
            return type(value).__name__
        if callable(value):
            return "function"
        return type(value).__name__
    return kind.value


def is_missing(value: Any) -> bool:
    """Check whether a value is the ``MISSING`` sentinel."""
    return value is MISSING
