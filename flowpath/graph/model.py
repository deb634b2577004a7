"""
Read-only directed graph of process flow nodes.

Usage:
    from flowpath.graph.model import FlowGraph, FlowNode

    graph = FlowGraph.from_edges(
        [FlowNode("start"), FlowNode("review", kind="userTask"), FlowNode("end")],
        [("start", "review"), ("review", "end")],
    )
    graph.node_by_id("review")
    graph.successors("start")
"""

from __future__ import annotations

import logging
from collections import Counter, deque
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from flowpath.config import BPMN_ENTRY_KINDS
from flowpath.exceptions import GraphBuildError, NodeNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlowNode:
    """
    A single node of a process flow.

    Attributes:
        id: Unique identifier within the graph
        kind: Element type the node was built from (e.g. "userTask")
        name: Optional human-readable label
    """

    id: str
    kind: str = "task"
    name: str | None = None

    def __str__(self) -> str:
        return self.id


class FlowGraph:
    """
    Immutable directed graph indexed by node ID.

    Nodes are kept in insertion (document) order, and each node's successors
    keep the order they were supplied in. Successor order decides which of
    several equally short paths a traversal returns.

    There is no mutation API: everything is validated and frozen in the
    constructor, so a graph is either fully built or not built at all.
    """

    def __init__(
        self,
        nodes: Iterable[FlowNode],
        adjacency: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        """
        Build the graph.

        Args:
            nodes: All nodes of the graph
            adjacency: Mapping of node ID to the IDs of its successors

        Raises:
            GraphBuildError: On duplicate node IDs or edges touching unknown nodes
        """
        self._nodes: dict[str, FlowNode] = {}
        for node in nodes:
            if node.id in self._nodes:
                raise GraphBuildError(f"Duplicate node ID '{node.id}'")
            self._nodes[node.id] = node

        self._successors: dict[str, tuple[str, ...]] = {}
        for source_id, target_ids in (adjacency or {}).items():
            if source_id not in self._nodes:
                raise GraphBuildError(f"Edge source '{source_id}' is not a node")
            targets = tuple(target_ids)
            for target_id in targets:
                if target_id not in self._nodes:
                    raise GraphBuildError(
                        f"Edge '{source_id}' -> '{target_id}' points to an unknown node"
                    )
            self._successors[source_id] = targets

        logger.debug(f"Built graph with {len(self._nodes)} nodes, {self.edge_count()} edges")

    @classmethod
    def from_edges(
        cls,
        nodes: Iterable[FlowNode],
        edges: Iterable[tuple[str, str]],
    ) -> FlowGraph:
        """Build a graph from (source_id, target_id) pairs, keeping edge order."""
        adjacency: dict[str, list[str]] = {}
        for source_id, target_id in edges:
            adjacency.setdefault(source_id, []).append(target_id)
        return cls(nodes, adjacency)

    @classmethod
    def from_adjacency(
        cls,
        adjacency: Mapping[str, Iterable[str]],
        kind: str = "task",
    ) -> FlowGraph:
        """
        Build a graph from an adjacency mapping alone.

        Every ID that appears as a key or as a successor becomes a node of the
        given kind, in order of first appearance.
        """
        frozen = {source: tuple(targets) for source, targets in adjacency.items()}
        seen: dict[str, None] = {}
        for source, targets in frozen.items():
            seen.setdefault(source)
            for target in targets:
                seen.setdefault(target)
        return cls((FlowNode(node_id, kind=kind) for node_id in seen), frozen)

    # =========================================================================
    # Core Accessors
    # =========================================================================

    def node_by_id(self, node_id: str) -> FlowNode:
        """
        Resolve an identifier to its node.

        Raises:
            NodeNotFoundError: If no node has this ID
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def successors(self, node: FlowNode | str) -> tuple[FlowNode, ...]:
        """Nodes reachable over one outgoing edge, in document order."""
        node_id = node.id if isinstance(node, FlowNode) else node
        if node_id not in self._nodes:
            raise NodeNotFoundError(node_id)
        return tuple(self._nodes[target] for target in self._successors.get(node_id, ()))

    def has_node(self, node_id: str) -> bool:
        """Check if a node with this ID exists."""
        return node_id in self._nodes

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[FlowNode]:
        return iter(self._nodes.values())

    def edge_count(self) -> int:
        """Total number of directed edges."""
        return sum(len(targets) for targets in self._successors.values())

    def nodes_of_kind(self, kind: str) -> list[FlowNode]:
        """All nodes of one element type, in document order."""
        return [node for node in self._nodes.values() if node.kind == kind]

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _reachable_from(self, root_ids: Iterable[str]) -> set[str]:
        """IDs of every node reachable from any of the roots (roots included)."""
        seen = set(root_ids)
        queue = deque(seen)
        while queue:
            for target in self._successors.get(queue.popleft(), ()):
                if target not in seen:
                    seen.add(target)
                    queue.append(target)
        return seen

    def stats(self) -> dict:
        """Get statistics about the graph."""
        return {
            "nodes": len(self._nodes),
            "edges": self.edge_count(),
            "start_events": len(self.nodes_of_kind("startEvent")),
            "end_events": len(self.nodes_of_kind("endEvent")),
            "kinds": dict(Counter(node.kind for node in self._nodes.values())),
        }

    def validate(self) -> dict[str, bool]:
        """Run sanity checks on the process structure."""
        entry_ids = [node.id for node in self._nodes.values() if node.kind in BPMN_ENTRY_KINDS]
        return {
            "has_nodes": len(self._nodes) > 0,
            "has_start_event": bool(self.nodes_of_kind("startEvent")),
            "has_end_event": bool(self.nodes_of_kind("endEvent")),
            "all_nodes_reachable": len(self._reachable_from(entry_ids)) == len(self._nodes),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(nodes={len(self._nodes)}, edges={self.edge_count()})"
