"""
flowpath - find paths through BPMN process models.

Fetches a BPMN 2.0 process definition, builds a directed graph of its
flow nodes, and finds the shortest (fewest steps) path between two nodes.
"""

__version__ = "0.1.0"
