"""
Preparator: credential record to ordered output vector.

Pipeline:
  1. Canonicalize the record and the schema (same fixed field order)
  2. Flatten the canonical record into (path, primitive) pairs
  3. Look up the link chain at the same path in the canonical schema
  4. Run the chain on the transformation graph
  5. Append the result; spread it when the chain ends at a spread node

Spread rule: when the output node of the chain's LAST link has spread=True,
the chain result must be a list or tuple and each element becomes its own
output entry, in order. Any other terminal node appends the result as one
entry, whatever its shape.

Any failure aborts the whole call; no partial vector is returned.

Usage:
    preparator = Preparator()
    vector = preparator.prepare(credential, schema)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from .canonical import canonicalize
from .config import Settings
from .exceptions import SchemaMismatchError, TypeMismatchError
from .flatten import PathValue, get_by_path, to_path_value_list
from .graph import TransformationGraph
from .links import GraphLink
from .nodes import GraphNode

logger = logging.getLogger(__name__)


def _as_chain(leaf: Any, path: PathValue) -> list[str]:
    if (
        not isinstance(leaf, (list, tuple))
        or not leaf
        or not all(isinstance(name, str) for name in leaf)
    ):
        raise SchemaMismatchError(
            f"Schema entry at '{path.dotted}' must be a non-empty list of link names",
            details={"path": list(path.path)},
        )
    return list(leaf)


class Preparator:
    """Turns credential records into ordered vectors of encoded values."""

    def __init__(
        self,
        graph: TransformationGraph | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._graph = graph if graph is not None else TransformationGraph()
        self._settings = settings if settings is not None else Settings()

    @property
    def graph(self) -> TransformationGraph:
        return self._graph

    def extend_graph(
        self,
        nodes: Iterable[GraphNode] = (),
        links: Iterable[GraphLink] = (),
    ) -> None:
        """Register extra nodes and links on the owned graph."""
        self._graph.extend(nodes, links)

    def prepare(self, record: Mapping[str, Any], schema: Mapping[str, Any]) -> list[Any]:
        """Return the ordered output vector for ``record`` under ``schema``.

        Raises:
            InvalidRecordError: Record or schema lacks a required field
            SchemaMismatchError: A record leaf has no usable schema chain
            CredGraphError: Any chain step failed
        """
        return [value for _, value in self.prepare_paths(record, schema)]

    def prepare_paths(
        self,
        record: Mapping[str, Any],
        schema: Mapping[str, Any],
    ) -> list[tuple[tuple[str, ...], Any]]:
        """Like prepare(), but pairs each output entry with its record path.

        Spread entries repeat the path of the leaf they came from.
        """
        if self._settings.freeze_on_prepare:
            self._graph.freeze()

        canonical_record = canonicalize(record)
        canonical_schema = canonicalize(schema)

        output: list[tuple[tuple[str, ...], Any]] = []
        for leaf in to_path_value_list(canonical_record):
            chain = _as_chain(get_by_path(canonical_schema, leaf.path), leaf)
            result = self._graph.transform(leaf.value, chain)
            for value in self._expand(result, chain, leaf):
                output.append((leaf.path, value))
            logger.debug("Prepared %s via %s", leaf.dotted, chain)
        return output

    def _expand(self, result: Any, chain: Sequence[str], leaf: PathValue) -> list[Any]:
        terminal = self._graph.terminal_node(chain)
        if terminal is None or not terminal.spread:
            return [result]
        if not isinstance(result, (list, tuple)):
            raise TypeMismatchError(
                f"Spread node {terminal.name} produced {type(result).__name__} "
                f"at '{leaf.dotted}', expected a list or tuple",
                details={
                    "node": terminal.name,
                    "link": chain[-1],
                    "step": len(chain) - 1,
                    "direction": "output",
                },
            )
        return list(result)


__all__ = ["Preparator"]
