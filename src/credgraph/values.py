"""
Value kinds flowing through the transformation graph.

Every value threaded through a chain belongs to one closed variant:
string, wide integer, boolean, byte sequence, float, or a sequence
produced by a spreading node. Node predicates dispatch on the kind first
and only then apply their range or alphabet checks.

Python's bool is a subclass of int; kind_of() keeps them apart so that
True never passes a uint predicate and 1 never passes the boolean one.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Closed set of value kinds understood by built-in nodes."""
    STRING = "STRING"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    BYTES = "BYTES"
    FLOAT = "FLOAT"
    SEQUENCE = "SEQUENCE"
    OTHER = "OTHER"


BYTE_TYPES = (bytes, bytearray, memoryview)


def kind_of(value: Any) -> ValueKind:
    """Classify a value into its ValueKind."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, BYTE_TYPES):
        return ValueKind.BYTES
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.OTHER


def is_wide_int(value: Any) -> bool:
    return kind_of(value) is ValueKind.INTEGER


def is_numeric(value: Any) -> bool:
    return kind_of(value) in (ValueKind.INTEGER, ValueKind.FLOAT)


def is_primitive(value: Any) -> bool:
    """True for values the flattener emits as leaves (bytes excluded)."""
    return kind_of(value) in (
        ValueKind.STRING,
        ValueKind.INTEGER,
        ValueKind.BOOLEAN,
        ValueKind.FLOAT,
    )
