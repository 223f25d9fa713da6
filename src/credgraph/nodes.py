"""
Type nodes of the transformation graph.

A node is a named value kind with a membership predicate. Built-in nodes:

  strings   utf8, ascii, base64, base64url, base32, base16, base58
  unsigned  uint16, uint32, uint64, uint128, uint256
  signed    int16, int32, int64, int128, int256
  other     boolean, bytes, float32

String nodes accept a str only if it decodes losslessly under the node's
alphabet. Integer nodes accept a wide int (never a bool) inside the
width's range. float32 accepts any int or float; binary32
representability is left to the float32-bytes link.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .codec import ENCODINGS, is_encoded
from .values import BYTE_TYPES, ValueKind, is_numeric, kind_of


# ---------------------------------------------------------------------------
# Node definition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GraphNode:
    """A named value kind with a membership predicate.

    spread=True marks that a chain ending at this node yields a sequence
    whose elements are appended to the output vector one by one.
    """
    name: str
    is_type: Callable[[Any], bool]
    spread: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"node name must be a non-empty string, got {self.name!r}")
        if not callable(self.is_type):
            raise ValueError(f"node {self.name} predicate must be callable")


# ---------------------------------------------------------------------------
# Width tables
# ---------------------------------------------------------------------------

WIDTHS: tuple[int, ...] = (16, 32, 64, 128, 256)

UINT_NAMES: tuple[str, ...] = tuple(f"uint{bits}" for bits in WIDTHS)
INT_NAMES: tuple[str, ...] = tuple(f"int{bits}" for bits in WIDTHS)
NUMBER_NAMES: tuple[str, ...] = UINT_NAMES + INT_NAMES

STRING_NAMES: tuple[str, ...] = ENCODINGS
# Strings that carry human-readable text (decimal, literals, floats)
TEXT_NAMES: tuple[str, ...] = ("utf8", "ascii")


def uint_bounds(bits: int) -> tuple[int, int]:
    """Inclusive (min, max) of an unsigned integer of the given width."""
    return 0, 2 ** bits - 1


def int_bounds(bits: int) -> tuple[int, int]:
    """Inclusive (min, max) of a two's-complement integer of the given width."""
    half = 2 ** (bits - 1)
    return -half, half - 1


# ---------------------------------------------------------------------------
# Predicate factories
# ---------------------------------------------------------------------------

def is_str(encoding: str) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return kind_of(value) is ValueKind.STRING and is_encoded(value, encoding)
    return predicate


def is_in_range(low: int, high: int) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return kind_of(value) is ValueKind.INTEGER and low <= value <= high
    return predicate


def is_uint(bits: int) -> Callable[[Any], bool]:
    return is_in_range(*uint_bounds(bits))


def is_int(bits: int) -> Callable[[Any], bool]:
    return is_in_range(*int_bounds(bits))


def is_boolean(value: Any) -> bool:
    return kind_of(value) is ValueKind.BOOLEAN


def is_bytes(value: Any) -> bool:
    return isinstance(value, BYTE_TYPES)


def is_float32(value: Any) -> bool:
    return is_numeric(value)


# ---------------------------------------------------------------------------
# Built-in nodes
# ---------------------------------------------------------------------------

def _build_base_nodes() -> dict[str, GraphNode]:
    nodes: dict[str, GraphNode] = {}
    for name in STRING_NAMES:
        nodes[name] = GraphNode(name=name, is_type=is_str(name))
    for bits, name in zip(WIDTHS, UINT_NAMES):
        nodes[name] = GraphNode(name=name, is_type=is_uint(bits))
    for bits, name in zip(WIDTHS, INT_NAMES):
        nodes[name] = GraphNode(name=name, is_type=is_int(bits))
    nodes["float32"] = GraphNode(name="float32", is_type=is_float32)
    nodes["boolean"] = GraphNode(name="boolean", is_type=is_boolean)
    nodes["bytes"] = GraphNode(name="bytes", is_type=is_bytes)
    return nodes


BASE_NODES: Mapping[str, GraphNode] = MappingProxyType(_build_base_nodes())


__all__ = [
    "GraphNode",
    "BASE_NODES",
    "WIDTHS",
    "UINT_NAMES",
    "INT_NAMES",
    "NUMBER_NAMES",
    "STRING_NAMES",
    "TEXT_NAMES",
    "uint_bounds",
    "int_bounds",
    "is_str",
    "is_uint",
    "is_int",
    "is_boolean",
    "is_bytes",
    "is_float32",
]
