"""
credgraph Canonical Ordering Module

Imposes a fixed, reproducible field order on credential-shaped trees so the
flattening sequence never depends on how the input dict was built.

Canonical credential order:
    isr.id.t, isr.id.k, sch, isd, exd, sbj.id.t, sbj.id.k,
    then every other sbj property, nested keys sorted recursively

Keys are sorted by UTF-8 byte values (the RFC 8785 ordering). List element
order is preserved; dicts inside lists are sorted too.

The same canonicalize() is applied to a record and to its transformation
schema (same shape, leaves are link-name lists), which keeps both trees
congruent for lockstep traversal.

Also provides canonical_json_bytes(), a compact RFC 8785-style encoder used
to fingerprint schemas:
1. Object keys sorted by UTF-8 byte values
2. No whitespace between tokens
3. Strings with minimal escaping, literal UTF-8
4. No floats, no bytes
"""

import re
from typing import Any, Dict, List, Mapping

from .exceptions import CanonicalEncodingError, InvalidRecordError

__all__ = [
    'REQUIRED_FIELDS',
    'canonicalize',
    'sort_keys_deep',
    'canonical_json_bytes',
    'canonical_json_string',
]

# Fixed leading fields, in canonical order
REQUIRED_FIELDS = (
    ("isr", "id", "t"),
    ("isr", "id", "k"),
    ("sch",),
    ("isd",),
    ("exd",),
    ("sbj", "id", "t"),
    ("sbj", "id", "k"),
)


def _utf8_key(key: str) -> bytes:
    return key.encode('utf-8')


# ============================================================================
# KEY ORDERING
# ============================================================================

def sort_keys_deep(value: Any, path: str = "") -> Any:
    """
    Return a copy of ``value`` with every nested dict's keys sorted.

    Args:
        value: Any JSON-like value
        path: Current path for error messages

    Raises:
        InvalidRecordError: If a dict key is not a string
    """
    if isinstance(value, Mapping):
        for key in value.keys():
            if not isinstance(key, str):
                raise InvalidRecordError(
                    f"Dictionary key must be string, got {type(key).__name__} at path '{path}'",
                    details={"path": path},
                )
        result: Dict[str, Any] = {}
        for key in sorted(value.keys(), key=_utf8_key):
            key_path = f"{path}.{key}" if path else key
            result[key] = sort_keys_deep(value[key], key_path)
        return result

    if isinstance(value, list):
        return [sort_keys_deep(item, f"{path}[{i}]") for i, item in enumerate(value)]

    if isinstance(value, tuple):
        return tuple(sort_keys_deep(item, f"{path}[{i}]") for i, item in enumerate(value))

    return value


def _require_mapping(tree: Any, key: str, path: str) -> Mapping:
    if key not in tree:
        raise InvalidRecordError(
            f"Required field '{path}' is missing",
            details={"path": path},
        )
    value = tree[key]
    if not isinstance(value, Mapping):
        raise InvalidRecordError(
            f"Field '{path}' must be an object, got {type(value).__name__}",
            details={"path": path},
        )
    return value


def _require(tree: Mapping, key: str, path: str) -> Any:
    if key not in tree:
        raise InvalidRecordError(
            f"Required field '{path}' is missing",
            details={"path": path},
        )
    return sort_keys_deep(tree[key], path)


def canonicalize(tree: Mapping) -> Dict[str, Any]:
    """
    Build a new credential-shaped tree in canonical field order.

    Works for records and for schemas alike.

    Args:
        tree: Credential record or transformation schema

    Returns:
        New dict in canonical order (input is not modified)

    Raises:
        InvalidRecordError: If a required field is missing or misshapen

    Example:
        >>> list(canonicalize({
        ...     "sbj": {"b": 1, "id": {"k": "x", "t": 1}, "a": 2},
        ...     "exd": 3, "isd": 2, "sch": 1,
        ...     "isr": {"id": {"k": "y", "t": 0}},
        ... }))
        ['isr', 'sch', 'isd', 'exd', 'sbj']
    """
    if not isinstance(tree, Mapping):
        raise InvalidRecordError(
            f"Credential must be an object, got {type(tree).__name__}",
            details={"path": ""},
        )

    isr = _require_mapping(tree, "isr", "isr")
    isr_id = _require_mapping(isr, "id", "isr.id")
    sbj = _require_mapping(tree, "sbj", "sbj")
    sbj_id = _require_mapping(sbj, "id", "sbj.id")

    extras = {key: value for key, value in sbj.items() if key != "id"}

    target: Dict[str, Any] = {
        "isr": {
            "id": {
                "t": _require(isr_id, "t", "isr.id.t"),
                "k": _require(isr_id, "k", "isr.id.k"),
            },
        },
        "sch": _require(tree, "sch", "sch"),
        "isd": _require(tree, "isd", "isd"),
        "exd": _require(tree, "exd", "exd"),
        "sbj": {
            "id": {
                "t": _require(sbj_id, "t", "sbj.id.t"),
                "k": _require(sbj_id, "k", "sbj.id.k"),
            },
        },
    }
    target["sbj"].update(sort_keys_deep(extras, "sbj"))
    return target


# ============================================================================
# CANONICAL JSON
# ============================================================================

# Control characters that must be escaped (0x00-0x1F)
_SHORT_ESCAPES = {'\b': '\\b', '\t': '\\t', '\n': '\\n', '\f': '\\f', '\r': '\\r'}
_ESCAPE_PATTERN = re.compile(r'[\x00-\x1f"\\]')


def _escape_char(match: "re.Match[str]") -> str:
    char = match.group(0)
    if char in ('"', '\\'):
        return '\\' + char
    return _SHORT_ESCAPES.get(char, f'\\u{ord(char):04x}')


def _escape_string(s: str) -> str:
    return _ESCAPE_PATTERN.sub(_escape_char, s)


def _encode_value(value: Any, path: str = "") -> str:
    if value is None:
        return 'null'

    if isinstance(value, bool):
        # Must check bool before int (bool is subclass of int in Python)
        return 'true' if value else 'false'

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        raise CanonicalEncodingError(
            f"Float value {value} at path '{path}' not allowed in canonical JSON",
            details={"path": path},
        )

    if isinstance(value, str):
        return f'"{_escape_string(value)}"'

    if isinstance(value, (list, tuple)):
        elements: List[str] = [
            _encode_value(item, f"{path}[{i}]") for i, item in enumerate(value)
        ]
        return '[' + ','.join(elements) + ']'

    if isinstance(value, Mapping):
        for key in value.keys():
            if not isinstance(key, str):
                raise CanonicalEncodingError(
                    f"Dictionary key must be string, got {type(key).__name__} at path '{path}'",
                    details={"path": path},
                )
        pairs = []
        for key in sorted(value.keys(), key=_utf8_key):
            key_path = f"{path}.{key}" if path else key
            pairs.append(f'"{_escape_string(key)}":{_encode_value(value[key], key_path)}')
        return '{' + ','.join(pairs) + '}'

    raise CanonicalEncodingError(
        f"Cannot canonically encode {type(value).__name__} at path '{path}'",
        details={"path": path},
    )


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Convert object to canonical JSON bytes.

    Same input always produces identical bytes.

    Raises:
        CanonicalEncodingError: If a float, bytes or non-str key is found

    Example:
        >>> canonical_json_bytes({"b": ["x"], "a": ["y", "z"]})
        b'{"a":["y","z"],"b":["x"]}'
    """
    return _encode_value(obj).encode('utf-8')


def canonical_json_string(obj: Any) -> str:
    """Convert object to canonical JSON string (debugging helper)."""
    return _encode_value(obj)
