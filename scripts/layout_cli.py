#!/usr/bin/env python3
"""CLI for computing graph layouts.

Usage:
    python scripts/layout_cli.py cloud
    python scripts/layout_cli.py force --seed 7 --filter actor,activity
    python scripts/layout_cli.py tree --select actor:1 --json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog
from dotenv import load_dotenv
load_dotenv()  # Must run before any src.* imports

from src.config import FORCE_SEED, FORCE_TICKS
from src.graph import NodeGroup, compute_node_weights, parse_group_filter
from src.ingestion import GraphRepository
from src.layout import LayoutContext, compute_layout
from src.session import ViewMode

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)
logger = structlog.get_logger()


async def run(
    view_mode: ViewMode,
    selected: str | None,
    group_filter: tuple[NodeGroup, ...],
    seed: int | None,
    as_json: bool,
) -> int:
    graph = await GraphRepository().load()
    if graph is None:
        print("Graph unavailable")
        return 1

    context = LayoutContext(
        selected_node_id=selected,
        group_filter=group_filter,
        force_seed=seed,
        force_ticks=FORCE_TICKS,
    )
    result = compute_layout(view_mode, graph, context)

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    labels = {w.id: w.label for w in compute_node_weights(graph, group_filter)}

    print("\n" + "=" * 60)
    print(f"LAYOUT ({view_mode.value}) - {len(result.items)} items")
    print("=" * 60)
    for item in result.items:
        ring = "-" if item.ring is None else item.ring
        print(
            f"  {item.node_id:<22} {labels.get(item.node_id, ''):<14} "
            f"x={item.x:8.2f} y={item.y:8.2f} size={item.size:7.2f} ring={ring}"
        )
    print("-" * 60)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Compute a graph layout")
    parser.add_argument(
        "view_mode",
        choices=[m.value for m in ViewMode],
        help="View to lay out",
    )
    parser.add_argument("--select", default=None, help="Selected (focal/root) node id")
    parser.add_argument(
        "--filter",
        default="",
        help="Comma-separated groups to keep (actor,activity,tag,unknown)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=FORCE_SEED,
        help="Seed for the force layout (default: FORCE_SEED, unseeded if unset)",
    )
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")

    args = parser.parse_args()
    try:
        group_filter = parse_group_filter(args.filter)
    except ValueError as e:
        parser.error(str(e))

    sys.exit(
        asyncio.run(
            run(
                view_mode=ViewMode(args.view_mode),
                selected=args.select,
                group_filter=group_filter,
                seed=args.seed,
                as_json=args.json,
            )
        )
    )


if __name__ == "__main__":
    main()
