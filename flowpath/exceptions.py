"""
Exception hierarchy for flowpath.

Every failure the path finder or its collaborators can report is a subclass
of FlowPathError, so callers can branch on the kind of failure instead of
matching message strings.
"""

from __future__ import annotations


class FlowPathError(Exception):
    """Base class for all flowpath errors."""


class InvalidInputError(FlowPathError, ValueError):
    """Fewer than two usable node identifiers were supplied."""


class NodeNotFoundError(FlowPathError, LookupError):
    """A node identifier does not exist in the graph."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Node '{node_id}' not found in graph")
        self.node_id = node_id


class TargetUnreachableError(FlowPathError):
    """Both nodes exist, but no directed path leads from start to target."""

    def __init__(self, start_id: str, target_id: str) -> None:
        super().__init__(f"No path from '{start_id}' to '{target_id}'")
        self.start_id = start_id
        self.target_id = target_id


class GraphBuildError(FlowPathError, ValueError):
    """Graph construction input is inconsistent (duplicate IDs, dangling edges)."""


class DocumentError(FlowPathError):
    """Base class for problems with the process definition document."""


class DocumentFormatError(DocumentError):
    """The document envelope is not what we expect (bad JSON, missing field)."""


class DocumentParseError(DocumentError):
    """The BPMN XML is structurally unusable."""
