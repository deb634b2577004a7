"""
BPMN document module.

Provides fetching and parsing of BPMN 2.0 process definitions.
"""

from flowpath.bpmn.fetcher import BpmnFetcher, unwrap_envelope
from flowpath.bpmn.parser import parse_bpmn

__all__ = [
    "BpmnFetcher",
    "parse_bpmn",
    "unwrap_envelope",
]
