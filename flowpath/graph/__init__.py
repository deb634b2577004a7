"""
Graph module.

Provides the process flow graph and pathfinding on it:
- FlowGraph / FlowNode: read-only graph indexed by node ID
- find_path: BFS shortest path (fewest edges)
"""

from flowpath.graph.model import FlowGraph, FlowNode
from flowpath.graph.pathfinder import PathRequest, find_path

__all__ = [
    "FlowGraph",
    "FlowNode",
    "PathRequest",
    "find_path",
]
