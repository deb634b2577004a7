"""
BPMN 2.0 XML parser producing a FlowGraph.

Flow nodes (events, activities, gateways) become graph nodes and sequence
flows become edges. Namespace prefixes differ between modelers (`bpmn:`,
`bpmn2:`, or a default namespace), so elements are matched by local name.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from flowpath.config import BPMN_FLOW_NODE_TAGS, XML_PARSER
from flowpath.exceptions import DocumentParseError
from flowpath.graph.model import FlowGraph, FlowNode

logger = logging.getLogger(__name__)


def _node_from_element(elem: Tag) -> FlowNode:
    """Build a FlowNode from a flow node element."""
    node_id = (elem.get("id") or "").strip()
    if not node_id:
        raise DocumentParseError(f"<{elem.name}> element has no id")
    name = (elem.get("name") or "").strip() or None
    return FlowNode(id=node_id, kind=elem.name, name=name)


def _outgoing_refs(elem: Tag) -> list[str]:
    """Sequence flow IDs listed as <outgoing> children of a flow node."""
    return [
        ref.get_text(strip=True)
        for ref in elem.find_all("outgoing", recursive=False)
        if ref.get_text(strip=True)
    ]


def parse_bpmn(xml: str | bytes) -> FlowGraph:
    """
    Parse BPMN XML into a graph of flow nodes.

    Successor order follows the node's <outgoing> references when the
    document lists them, otherwise the order sequence flows appear in.

    Args:
        xml: BPMN 2.0 XML document; bytes are decoded per its encoding declaration

    Returns:
        FlowGraph over all flow nodes, including those nested in sub-processes

    Raises:
        DocumentParseError: If the document is not usable as a process graph
    """
    if not xml or not xml.strip():
        raise DocumentParseError("BPMN document is empty")

    try:
        soup = BeautifulSoup(xml, XML_PARSER)
    except ParserRejectedMarkup as e:
        raise DocumentParseError(f"BPMN document could not be parsed: {e}") from e

    definitions = soup.find("definitions")
    if definitions is None:
        raise DocumentParseError("No BPMN <definitions> element found")

    # Collect flow nodes in document order
    elements: list[Tag] = definitions.find_all(list(BPMN_FLOW_NODE_TAGS))
    nodes: dict[str, FlowNode] = {}
    for elem in elements:
        node = _node_from_element(elem)
        if node.id in nodes:
            raise DocumentParseError(f"Duplicate flow node id '{node.id}'")
        nodes[node.id] = node

    # Collect sequence flows: id -> (source, target), plus per-source order
    flows: dict[str, tuple[str, str]] = {}
    targets_by_source: dict[str, list[str]] = {}
    for flow in definitions.find_all("sequenceFlow"):
        flow_id = (flow.get("id") or "").strip()
        source = (flow.get("sourceRef") or "").strip()
        target = (flow.get("targetRef") or "").strip()

        if source not in nodes or target not in nodes:
            raise DocumentParseError(
                f"Sequence flow '{flow_id}' connects unknown nodes '{source}' -> '{target}'"
            )
        if flow_id:
            flows[flow_id] = (source, target)
        targets_by_source.setdefault(source, []).append(target)

    # Build adjacency
    adjacency: dict[str, list[str]] = {}
    for elem in elements:
        node_id = elem.get("id").strip()
        refs = _outgoing_refs(elem)
        if not refs:
            adjacency[node_id] = targets_by_source.get(node_id, [])
            continue

        targets = []
        for ref in refs:
            if ref not in flows:
                raise DocumentParseError(f"Node '{node_id}' references unknown sequence flow '{ref}'")
            source, target = flows[ref]
            if source != node_id:
                raise DocumentParseError(
                    f"Node '{node_id}' lists outgoing flow '{ref}' that starts at '{source}'"
                )
            targets.append(target)
        adjacency[node_id] = targets

    graph = FlowGraph(nodes.values(), adjacency)
    logger.info(f"Parsed BPMN document: {len(graph)} flow nodes, {graph.edge_count()} sequence flows")
    return graph
