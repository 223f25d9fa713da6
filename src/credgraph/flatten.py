"""
Path flattening of canonical trees.

Walks a (canonicalized) record depth-first in key iteration order and emits
one PathValue per primitive leaf. Lists and tuples are treated as objects
keyed by their stringified indices, so ["a", "b"] under "tags" yields the
paths ("tags", "0") and ("tags", "1").

Leaves are str, int, float and bool. Byte sequences and None are not
expected as raw record leaves and are skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .exceptions import SchemaMismatchError
from .values import is_primitive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathValue:
    """A primitive leaf and the key path leading to it."""
    path: tuple[str, ...]
    value: Any

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


def _children(value: Any) -> list[tuple[str, Any]] | None:
    if isinstance(value, Mapping):
        return [(str(key), child) for key, child in value.items()]
    if isinstance(value, (list, tuple)):
        return [(str(index), child) for index, child in enumerate(value)]
    return None


def _collect(value: Any, path: tuple[str, ...], out: list[PathValue]) -> None:
    children = _children(value)
    if children is not None:
        for key, child in children:
            _collect(child, path + (key,), out)
    elif is_primitive(value):
        out.append(PathValue(path=path, value=value))
    else:
        logger.debug("Skipping non-primitive leaf at %s (%s)", ".".join(path), type(value).__name__)


def to_path_value_list(tree: Mapping[str, Any]) -> list[PathValue]:
    """Flatten a tree into ordered (path, primitive) pairs."""
    out: list[PathValue] = []
    for key, value in tree.items():
        _collect(value, (str(key),), out)
    return out


def _is_index(key: str) -> bool:
    # ASCII only: str.isdigit() also accepts "²" and other Unicode digits
    return key.isascii() and key.isdigit()


def get_by_path(tree: Any, path: tuple[str, ...] | list[str]) -> Any:
    """Return the value at ``path``, indexing lists by stringified position.

    Raises:
        SchemaMismatchError: If any step of the path is absent
    """
    current = tree
    for depth, key in enumerate(path):
        if isinstance(current, Mapping) and key in current:
            current = current[key]
            continue
        if isinstance(current, (list, tuple)) and _is_index(key) and int(key) < len(current):
            current = current[int(key)]
            continue
        missing = ".".join(path[:depth + 1])
        raise SchemaMismatchError(
            f"Schema has no entry for path '{'.'.join(path)}' (missing '{missing}')",
            details={"path": list(path), "missing": missing},
        )
    return current


__all__ = ["PathValue", "to_path_value_list", "get_by_path"]
