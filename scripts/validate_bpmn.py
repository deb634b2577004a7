#!/usr/bin/env python3
"""
Validate a BPMN process definition and print graph statistics.

Usage:
    python scripts/validate_bpmn.py
    python scripts/validate_bpmn.py --file tests/fixtures/invoice.bpmn
    python scripts/validate_bpmn.py --url https://camunda.example.com/engine-rest/process-definition/key/invoice/xml
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Fix Windows console encoding for Unicode output
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from flowpath.cli import load_graph  # noqa: E402 - must be after sys.path modification
from flowpath.exceptions import FlowPathError  # noqa: E402
from flowpath.graph import FlowGraph, find_path  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def load_and_validate(url: str | None, file: str | None) -> FlowGraph | None:
    """Load the process definition and run validation checks."""
    print("\n=== Loading Process Definition ===\n")

    start_time = time.time()
    graph = load_graph(url=url, file=file)
    print(f"Load time: {time.time() - start_time:.2f} seconds")

    print("\n=== Graph Statistics ===\n")
    stats = graph.stats()
    kinds = stats.pop("kinds")
    for key, value in stats.items():
        print(f"  {key}: {value:,}")
    for kind, count in sorted(kinds.items()):
        print(f"    {kind}: {count}")

    print("\n=== Validation Checks ===\n")
    validation = graph.validate()
    all_valid = True
    for check, passed in validation.items():
        status = "✓" if passed else "✗"
        print(f"  {status} {check}")
        if not passed:
            all_valid = False

    return graph if all_valid else None


def check_end_events_reachable(graph: FlowGraph) -> bool:
    """Every end event should be reachable from at least one start event."""
    print("\n=== End Event Reachability ===\n")

    all_reachable = True
    starts = graph.nodes_of_kind("startEvent")
    for end in graph.nodes_of_kind("endEvent"):
        for start in starts:
            try:
                path = find_path(graph, start.id, end.id)
            except FlowPathError:
                continue
            print(f"  ✓ {end.id}: {len(path) - 1} steps from {start.id}")
            break
        else:
            print(f"  ✗ {end.id}: not reachable from any start event")
            all_reachable = False

    return all_reachable


def main() -> int:
    """Main validation routine."""
    parser = argparse.ArgumentParser(description="Validate a BPMN process definition")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", type=str, default=None, help="Process definition endpoint")
    source.add_argument("--file", type=str, default=None, help="Local process definition file")
    args = parser.parse_args()

    print("=" * 60)
    print("BPMN Process Validation")
    print("=" * 60)

    try:
        graph = load_and_validate(args.url, args.file)
    except (OSError, FlowPathError) as e:
        print(f"\n✗ Error loading process definition: {e}")
        return 1

    if graph is None:
        print("\n✗ Validation checks failed.")
        return 1

    if not check_end_events_reachable(graph):
        print("\n✗ Some end events are unreachable.")
        return 1

    print("\n" + "=" * 60)
    print("✓ All validation checks passed!")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
