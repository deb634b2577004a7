"""
flowpath CLI - find a path between two nodes of a BPMN process.

Usage:
    flowpath approveInvoice invoiceProcessed
    flowpath StartEvent_1 invoiceNotProcessed --format json
    flowpath StartEvent_1 reviewInvoice --file invoice.bpmn
    flowpath --list-nodes --url https://camunda.example.com/engine-rest/process-definition/key/invoice/xml

Sources:
    By default the process definition is fetched from the configured REST
    endpoint (FLOWPATH_BPMN_URL). Use --url to point at another endpoint, or
    --file to read a local JSON envelope or raw BPMN XML file.

Exit codes:
    0  path found
    1  node not found, or no path between the nodes
    2  invalid arguments
    3  process definition could not be fetched or parsed
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

import requests

from flowpath.bpmn import BpmnFetcher, parse_bpmn
from flowpath.config import BPMN_URL, LOG_DATEFMT, LOG_FORMAT, LOG_LEVEL
from flowpath.exceptions import (
    DocumentError,
    InvalidInputError,
    NodeNotFoundError,
    TargetUnreachableError,
)
from flowpath.graph import FlowGraph, PathRequest

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_PATH = 1
EXIT_INVALID_INPUT = 2
EXIT_SOURCE_ERROR = 3


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="flowpath",
        description="Find the shortest path between two nodes of a BPMN process",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "node_ids",
        nargs="*",
        metavar="NODE_ID",
        help="Start node ID followed by target node ID",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--url",
        type=str,
        default=None,
        help=f"Process definition endpoint (default: {BPMN_URL})",
    )
    source.add_argument(
        "--file",
        type=str,
        default=None,
        help="Read the process definition from a local file instead",
    )

    parser.add_argument(
        "--format",
        type=str,
        default="text",
        choices=["text", "json"],
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--list-nodes",
        action="store_true",
        help="List all flow nodes of the process and exit",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def load_graph(url: str | None = None, file: str | None = None) -> FlowGraph:
    """Fetch (or read) the process definition and parse it into a graph."""
    with BpmnFetcher(url=url or BPMN_URL) as fetcher:
        xml = fetcher.load_file(file) if file else fetcher.fetch_xml()
    graph = parse_bpmn(xml)
    logger.debug(f"Loaded {graph!r}")
    return graph


def format_path(path: list[str]) -> str:
    """Render a path the way it is printed on the console."""
    return f"The path from {path[0]} to {path[-1]} is:\n[{', '.join(path)}]"


def format_nodes(graph: FlowGraph) -> str:
    """Render one line per node: id, kind and name."""
    width = max((len(node.id) for node in graph), default=0)
    lines = [f"{node.id:<{width}}  {node.kind:<22}  {node.name or ''}".rstrip() for node in graph]
    return "\n".join(lines)


def resolve_log_level(name: str) -> int:
    """Map a level name (e.g. "info") to its number, falling back to WARNING."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else resolve_log_level(LOG_LEVEL)
    logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    # Validate arguments before touching the network
    request = None
    if not args.list_nodes:
        try:
            request = PathRequest.from_ids(args.node_ids)
        except InvalidInputError as e:
            print(f"Error occurred: {e}", file=sys.stderr)
            return EXIT_INVALID_INPUT

    try:
        graph = load_graph(url=args.url, file=args.file)
    except requests.RequestException as e:
        print(f"Error occurred: could not fetch process definition: {e}", file=sys.stderr)
        return EXIT_SOURCE_ERROR
    except OSError as e:
        print(f"Error occurred: could not read process definition: {e}", file=sys.stderr)
        return EXIT_SOURCE_ERROR
    except DocumentError as e:
        print(f"Error occurred: invalid process definition: {e}", file=sys.stderr)
        return EXIT_SOURCE_ERROR

    if request is None:
        print(format_nodes(graph))
        return EXIT_OK

    try:
        path = request.resolve(graph)
    except NodeNotFoundError as e:
        print(f"Error occurred: {e}. Check the node ID (see --list-nodes).", file=sys.stderr)
        return EXIT_NO_PATH
    except TargetUnreachableError as e:
        print(f"Error occurred: {e}. The target cannot be reached from the start node.", file=sys.stderr)
        return EXIT_NO_PATH

    if args.format == "json":
        print(json.dumps({
            "start": request.start_id,
            "target": request.target_id,
            "path": path,
            "length": len(path) - 1,
        }))
    else:
        print(format_path(path))

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
