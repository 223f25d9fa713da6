"""
Links of the transformation graph.

A link is a named, pure, directed conversion between two registered node
types. Built-in link names follow the pattern ``<input>-<output>``.

Built-in families:
  identity          T and T-T for every built-in node (ints widened to int)
  bytes <-> uintN   little-endian base-256, minimal length
  bytes <-> intN    two's complement, width fixed by the link name
  bytes <-> string  utf8, ascii, base16, base32, base58, base64, base64url
  text  <-> boolean only "true" / "false"
  boolean <-> int   True -> 1, False -> 0; decode accepts only 0 / 1
  text  <-> int     decimal, arbitrary precision
  text  <-> float32 decimal float, ECMAScript Number#toString formatting
  bytes <-> float32 IEEE-754 binary32, little-endian, 4 bytes

"text" means the utf8 and ascii nodes.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .codec import FLOAT32_BYTES, decode, encode, read_float32, write_float32
from .exceptions import FormatError, RangeError
from .nodes import (
    BASE_NODES,
    INT_NAMES,
    NUMBER_NAMES,
    STRING_NAMES,
    TEXT_NAMES,
    UINT_NAMES,
    WIDTHS,
    int_bounds,
)


# ---------------------------------------------------------------------------
# Link definition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GraphLink:
    """A named, typed conversion step between two nodes."""
    name: str
    input_type: str
    output_type: str
    transform: Callable[[Any], Any]

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"link name must be a non-empty string, got {self.name!r}")
        if not self.input_type or not self.output_type:
            raise ValueError(f"link {self.name} must declare input_type and output_type")
        if not callable(self.transform):
            raise ValueError(f"link {self.name} transform must be callable")


# ---------------------------------------------------------------------------
# Integer <-> bytes
# ---------------------------------------------------------------------------

def bytes_to_uint(data: bytes) -> int:
    """Little-endian base-256 digits to a wide int."""
    return int.from_bytes(bytes(data), "little")


def uint_to_bytes(value: int) -> bytes:
    """Wide non-negative int to minimal little-endian bytes (0 -> b"")."""
    value = int(value)
    return value.to_bytes((value.bit_length() + 7) // 8, "little")


def bytes_to_int(bits: int) -> Callable[[bytes], int]:
    """Two's-complement decoder for a fixed width."""
    _, high = int_bounds(bits)
    max_len = bits // 8

    def transform(data: bytes) -> int:
        if len(data) > max_len:
            raise RangeError(
                f"bytes-int{bits} accepts at most {max_len} bytes, got {len(data)}",
                details={"width": bits, "length": len(data)},
            )
        magnitude = bytes_to_uint(data)
        return magnitude - 2 ** bits if magnitude > high else magnitude

    return transform


def int_to_bytes(bits: int) -> Callable[[int], bytes]:
    """Two's-complement encoder for a fixed width."""
    low, high = int_bounds(bits)

    def transform(value: int) -> bytes:
        value = int(value)
        if not low <= value <= high:
            raise RangeError(
                f"int{bits}-bytes value {value} is outside [{low}, {high}]",
                details={"width": bits},
            )
        return uint_to_bytes(value + 2 ** bits if value < 0 else value)

    return transform


# ---------------------------------------------------------------------------
# Text literals
# ---------------------------------------------------------------------------

_DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")
# Decimal floats plus the ECMAScript non-finite literals
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|Infinity)|NaN"
)


def text_to_boolean(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise FormatError(
        f'Boolean literal must be "true" or "false", got {text!r}',
        details={"value": text},
    )


def boolean_to_text(flag: bool) -> str:
    return "true" if flag else "false"


def boolean_to_number(flag: bool) -> int:
    return 1 if flag else 0


def number_to_boolean(value: int) -> bool:
    if value == 1 or value == 0:
        return value == 1
    raise FormatError(
        f"Boolean number must be 0 or 1, got {value}",
        details={"value": value},
    )


def text_to_number(text: str) -> int:
    if _DECIMAL_PATTERN.fullmatch(text) is None:
        raise FormatError(
            f"Not a decimal integer: {text!r}",
            details={"value": text},
        )
    return int(text, 10)


def number_to_text(value: int) -> str:
    return str(int(value))


def text_to_float(text: str) -> float:
    if _FLOAT_PATTERN.fullmatch(text) is None:
        raise FormatError(
            f"Not a decimal float: {text!r}",
            details={"value": text},
        )
    return float(text)


def _shortest_digits(value: float) -> tuple[str, int]:
    """Shortest round-trip digits d1..dk and exponent n, value = 0.d1..dk * 10**n."""
    mantissa, _, exponent = repr(value).partition("e")
    whole, _, fraction = mantissa.partition(".")
    digits = whole + fraction
    n = len(whole) + int(exponent or 0)
    stripped = digits.lstrip("0")
    n -= len(digits) - len(stripped)
    return stripped.rstrip("0"), n


def float_to_text(value: float) -> str:
    """Number to decimal text, formatted the way ECMAScript Number#toString does.

    Plain digits for 1e-6 <= |value| < 1e21, otherwise exponent form with an
    explicit sign and no zero padding (1e+21, 1e-7). Non-finite values are
    Infinity, -Infinity and NaN.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    if value < 0:
        return "-" + float_to_text(-value)

    digits, n = _shortest_digits(value)
    k = len(digits)
    if k <= n <= 21:
        return digits + "0" * (n - k)
    if 0 < n <= 21:
        return f"{digits[:n]}.{digits[n:]}"
    if -6 < n <= 0:
        return "0." + "0" * -n + digits
    exponent = n - 1
    sign = "+" if exponent >= 0 else "-"
    head = digits[0] if k == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{head}e{sign}{abs(exponent)}"


def bytes_to_float(data: bytes) -> float:
    if len(data) != FLOAT32_BYTES:
        raise RangeError(
            f"bytes-float32 requires exactly {FLOAT32_BYTES} bytes, got {len(data)}",
            details={"length": len(data)},
        )
    return read_float32(data, 0, little_endian=True)


def float_to_bytes(value: float) -> bytes:
    return write_float32(value, little_endian=True)


# ---------------------------------------------------------------------------
# Built-in links
# ---------------------------------------------------------------------------

def _identity(value: Any) -> Any:
    return value


def _widen(value: int) -> int:
    return int(value)


def _encoder(encoding: str) -> Callable[[bytes], str]:
    def transform(data: bytes) -> str:
        return encode(data, encoding)
    return transform


def _decoder(encoding: str) -> Callable[[str], bytes]:
    def transform(text: str) -> bytes:
        return decode(text, encoding)
    return transform


def _build_base_links() -> dict[str, GraphLink]:
    links: dict[str, GraphLink] = {}

    def add(input_type: str, output_type: str, transform: Callable[[Any], Any],
            name: str | None = None) -> None:
        link_name = name or f"{input_type}-{output_type}"
        links[link_name] = GraphLink(link_name, input_type, output_type, transform)

    # Identity / widen, registered under both "T" and "T-T"
    for node_name in BASE_NODES:
        transform = _widen if node_name in NUMBER_NAMES else _identity
        add(node_name, node_name, transform, name=node_name)
        add(node_name, node_name, transform)

    for name in UINT_NAMES:
        add("bytes", name, bytes_to_uint)
        add(name, "bytes", uint_to_bytes)

    for bits, name in zip(WIDTHS, INT_NAMES):
        add("bytes", name, bytes_to_int(bits))
        add(name, "bytes", int_to_bytes(bits))

    for encoding in STRING_NAMES:
        add("bytes", encoding, _encoder(encoding))
        add(encoding, "bytes", _decoder(encoding))

    for text in TEXT_NAMES:
        add(text, "boolean", text_to_boolean)
        add("boolean", text, boolean_to_text)
        add(text, "float32", text_to_float)
        add("float32", text, float_to_text)
        for number in NUMBER_NAMES:
            add(text, number, text_to_number)
            add(number, text, number_to_text)

    for number in NUMBER_NAMES:
        add("boolean", number, boolean_to_number)
        add(number, "boolean", number_to_boolean)

    add("bytes", "float32", bytes_to_float)
    add("float32", "bytes", float_to_bytes)
    return links


BASE_LINKS: Mapping[str, GraphLink] = MappingProxyType(_build_base_links())


__all__ = [
    "GraphLink",
    "BASE_LINKS",
    "bytes_to_uint",
    "uint_to_bytes",
    "bytes_to_int",
    "int_to_bytes",
    "text_to_boolean",
    "boolean_to_text",
    "text_to_number",
    "number_to_text",
    "text_to_float",
    "float_to_text",
]
