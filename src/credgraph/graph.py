"""
Transformation Graph: typed registry of nodes and links plus the chain
executor.

Each TransformationGraph owns its own node and link maps, seeded from the
immutable built-ins (BASE_NODES, BASE_LINKS). Extension never overrides:
a name collision raises and leaves the registry untouched.

Chain execution rules:
  1. Links run in the given order; the result of one is the input of the next.
  2. The running value is checked against the link's input node BEFORE the
     transform runs, and the result against its output node AFTER.
  3. An empty chain returns the seed value unchanged.
  4. Nothing is cached between calls.

Concurrency: extend() builds new maps and swaps them in under a lock
(copy-on-extend), so a transform() running concurrently sees either the
old or the new registry, never a partial one. freeze() turns the graph
read-only once setup is done.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from .exceptions import (
    CredGraphError,
    DuplicateLinkError,
    DuplicateNodeError,
    GraphFrozenError,
    TypeMismatchError,
    UnknownLinkError,
    UnknownNodeError,
    wrap_internal_exception,
)
from .links import BASE_LINKS, GraphLink
from .nodes import BASE_NODES, GraphNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Registry:
    """Immutable snapshot of the node and link maps."""
    nodes: Mapping[str, GraphNode]
    links: Mapping[str, GraphLink]


class TransformationGraph:
    """Registry of typed nodes and links with a validating chain executor."""

    def __init__(self) -> None:
        self._registry = _Registry(nodes=dict(BASE_NODES), links=dict(BASE_LINKS))
        self._lock = threading.Lock()
        self._frozen = False

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def extend(
        self,
        nodes: Iterable[GraphNode] = (),
        links: Iterable[GraphLink] = (),
    ) -> None:
        """Register new nodes, then new links.

        The whole batch is validated before anything is installed: nodes
        are checked first, then links, and the first collision (with the
        registry or inside the batch) raises.

        Raises:
            GraphFrozenError: If freeze() was called
            DuplicateNodeError: On a node name collision
            DuplicateLinkError: On a link name collision
        """
        nodes = list(nodes)
        links = list(links)
        with self._lock:
            if self._frozen:
                raise GraphFrozenError("Transformation graph is frozen and cannot be extended")
            current = self._registry

            new_nodes = dict(current.nodes)
            for node in nodes:
                if node.name in new_nodes:
                    raise DuplicateNodeError(
                        f'Node with name "{node.name}" already exists in transformation graph',
                        details={"node": node.name},
                    )
                new_nodes[node.name] = node

            new_links = dict(current.links)
            for link in links:
                if link.name in new_links:
                    raise DuplicateLinkError(
                        f'Link with name "{link.name}" already exists in transformation graph',
                        details={"link": link.name},
                    )
                new_links[link.name] = link

            self._registry = _Registry(nodes=new_nodes, links=new_links)

        logger.info(
            "Extended transformation graph with %d node(s) and %d link(s)",
            len(nodes), len(links),
        )

    def freeze(self) -> None:
        """Make the graph read-only. Idempotent."""
        with self._lock:
            if not self._frozen:
                self._frozen = True
                logger.info("Transformation graph frozen")

    @property
    def frozen(self) -> bool:
        return self._frozen

    def node(self, name: str) -> GraphNode:
        """Look up a node by name.

        Raises:
            UnknownNodeError: If no node has this name
        """
        return self._node(self._registry, name)

    def link(self, name: str) -> GraphLink:
        """Look up a link by name.

        Raises:
            UnknownLinkError: If no link has this name
        """
        return self._link(self._registry, name)

    def has_node(self, name: str) -> bool:
        return name in self._registry.nodes

    def has_link(self, name: str) -> bool:
        return name in self._registry.links

    def node_names(self) -> list[str]:
        return sorted(self._registry.nodes)

    def link_names(self) -> list[str]:
        return sorted(self._registry.links)

    def terminal_node(self, links: Sequence[str]) -> GraphNode | None:
        """Return the output node of the last link in a chain.

        Returns None for an empty chain.
        """
        if not links:
            return None
        registry = self._registry
        last = self._link(registry, links[-1])
        return self._node(registry, last.output_type)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def transform(self, value: Any, links: Sequence[str]) -> Any:
        """Run ``value`` through the chain of link names.

        Raises:
            UnknownLinkError: A link name is not registered
            UnknownNodeError: A link declares an unregistered node
            TypeMismatchError: A value fails an input or output predicate
            RangeError, FormatError, InternalError: A link transform failed
        """
        if isinstance(links, str):
            raise TypeError("links must be a sequence of link names, not a string")
        registry = self._registry
        result = value
        for step, link_name in enumerate(links):
            link = self._link(registry, link_name)
            input_node = self._node(registry, link.input_type)
            output_node = self._node(registry, link.output_type)

            self._check(input_node, result, link, step, "input")
            try:
                result = link.transform(result)
            except CredGraphError as e:
                e.details.setdefault("link", link.name)
                e.details.setdefault("step", step)
                raise
            except Exception as e:
                raise wrap_internal_exception(
                    e,
                    default_message=f"Link {link.name} failed at step {step}: {e}",
                    details={"link": link.name, "step": step},
                ) from e

            self._check(output_node, result, link, step, "output")
            logger.debug("step %d: %s -> %s", step, link.name, output_node.name)
        return result

    # ------------------------------------------------------------------
    # Internal checks and lookups
    # ------------------------------------------------------------------

    @staticmethod
    def _check(node: GraphNode, value: Any, link: GraphLink, step: int, direction: str) -> None:
        """Raise TypeMismatchError unless ``value`` belongs to ``node``.

        A predicate that raises counts as a mismatch.
        """
        details = {
            "node": node.name,
            "link": link.name,
            "step": step,
            "direction": direction,
        }
        message = (
            f"Invalid transformation at step {step} ({link.name}): "
            f"{direction} type {node.name} is not matched to value"
        )
        try:
            matched = node.is_type(value)
        except Exception as e:
            raise TypeMismatchError(
                f"{message} (predicate raised {type(e).__name__}: {e})",
                details=details,
            ) from e
        if not matched:
            raise TypeMismatchError(message, details=details)

    @staticmethod
    def _node(registry: _Registry, name: str) -> GraphNode:
        node = registry.nodes.get(name)
        if node is None:
            raise UnknownNodeError(
                f"Node with name {name} is not supported by transformation graph",
                details={"node": name},
            )
        return node

    @staticmethod
    def _link(registry: _Registry, name: str) -> GraphLink:
        link = registry.links.get(name)
        if link is None:
            raise UnknownLinkError(
                f"{name} link is not supported by transformation graph",
                details={"link": name},
            )
        return link


__all__ = ["TransformationGraph"]
