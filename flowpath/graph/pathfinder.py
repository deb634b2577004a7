"""
Breadth-first path search over a FlowGraph.

Finds the path with the fewest edges between two nodes. When several
shortest paths exist, the one discovered first (following successor order)
wins.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from flowpath.exceptions import InvalidInputError, TargetUnreachableError
from flowpath.graph.model import FlowGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathRequest:
    """
    A validated start/target pair.

    Attributes:
        start_id: ID of the node the path starts at
        target_id: ID of the node the path must reach
    """

    start_id: str
    target_id: str

    @classmethod
    def from_ids(cls, node_ids: Sequence[str]) -> PathRequest:
        """
        Build a request from raw identifiers (e.g. command line arguments).

        Extra identifiers beyond the first two are ignored.

        Raises:
            InvalidInputError: If fewer than two identifiers are given, or one is empty
        """
        if len(node_ids) < 2:
            raise InvalidInputError("Missing argument(s). You need to provide two node IDs.")
        start_id, target_id = node_ids[0], node_ids[1]
        if not start_id or not target_id:
            raise InvalidInputError("Node IDs must be non-empty strings.")
        return cls(start_id=start_id, target_id=target_id)

    def resolve(self, graph: FlowGraph) -> list[str]:
        """Run the search for this request."""
        return find_path(graph, self.start_id, self.target_id)


def find_path(graph: FlowGraph, start_id: str, target_id: str) -> list[str]:
    """
    Find a shortest path from start to target.

    Both IDs are resolved before the search begins, so an unknown ID is
    always reported as NodeNotFoundError and never as unreachable.

    Args:
        graph: Graph to search
        start_id: ID of the first node of the path
        target_id: ID of the last node of the path

    Returns:
        List of node IDs from start to target (inclusive)

    Raises:
        InvalidInputError: If either ID is empty
        NodeNotFoundError: If either ID is not in the graph
        TargetUnreachableError: If no directed path connects start to target
    """
    if not start_id or not target_id:
        raise InvalidInputError("Both a start and a target node ID are required.")

    start = graph.node_by_id(start_id)
    graph.node_by_id(target_id)

    if start_id == target_id:
        return [start_id]

    # Nodes are marked visited when dequeued; `discovered` keeps a node from
    # being queued twice, so each node gets exactly one predecessor.
    queue = deque([start])
    discovered = {start_id}
    visited: set[str] = set()
    predecessors: dict[str, str] = {}

    while queue:
        current = queue.popleft()
        visited.add(current.id)

        if current.id == target_id:
            path = _reconstruct_path(predecessors, start_id, target_id)
            logger.info(f"Found path ({len(path) - 1} steps): {' -> '.join(path)}")
            return path

        for successor in graph.successors(current):
            if successor.id in visited or successor.id in discovered:
                continue
            discovered.add(successor.id)
            predecessors[successor.id] = current.id
            queue.append(successor)

        logger.debug(f"Expanded '{current.id}' ({len(queue)} queued, {len(visited)} visited)")

    logger.info(f"No path from '{start_id}' to '{target_id}' ({len(visited)} nodes visited)")
    raise TargetUnreachableError(start_id, target_id)


def _reconstruct_path(predecessors: dict[str, str], start_id: str, target_id: str) -> list[str]:
    """Walk predecessors back from the target, then reverse."""
    path = [target_id]
    node_id = target_id
    while node_id != start_id:
        node_id = predecessors[node_id]
        path.append(node_id)
    return list(reversed(path))
