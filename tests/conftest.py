"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides
fixtures available to all test files.
"""

import json
from pathlib import Path

import pytest

from flowpath.bpmn import parse_bpmn
from flowpath.graph import FlowGraph


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def invoice_bpmn_path(fixtures_dir: Path) -> Path:
    """Return the path of the invoice process BPMN file."""
    return fixtures_dir / "invoice.bpmn"


@pytest.fixture
def invoice_xml(invoice_bpmn_path: Path) -> str:
    """Return the invoice process as raw BPMN XML."""
    return invoice_bpmn_path.read_text(encoding="utf-8")


@pytest.fixture
def invoice_envelope(invoice_xml: str) -> dict:
    """Return the invoice process wrapped the way the REST endpoint serves it."""
    return {"id": "invoice:2:c3a63aaa-2046-11e7-8f94-34f39ab71d4e", "bpmn20Xml": invoice_xml}


@pytest.fixture
def invoice_envelope_path(tmp_path: Path, invoice_envelope: dict) -> Path:
    """Write the JSON envelope to a temporary file and return its path."""
    path = tmp_path / "invoice.json"
    path.write_text(json.dumps(invoice_envelope), encoding="utf-8")
    return path


@pytest.fixture
def invoice_graph(invoice_xml: str) -> FlowGraph:
    """Return the parsed invoice process graph."""
    return parse_bpmn(invoice_xml)


@pytest.fixture
def diamond_graph() -> FlowGraph:
    """A -> B -> C and A -> D -> C, with B listed before D."""
    return FlowGraph.from_adjacency({"A": ["B", "D"], "B": ["C"], "D": ["C"]})


@pytest.fixture
def disconnected_graph() -> FlowGraph:
    """A -> B and C -> D, with no edge between the two halves."""
    return FlowGraph.from_adjacency({"A": ["B"], "C": ["D"]})
