#!/usr/bin/env python3
"""Remote controller CLI - drive a viewer session over the HTTP API.

Usage:
    python scripts/remote_cli.py SESSION_ID zoom_in
    python scripts/remote_cli.py SESSION_ID next_neighbor
    python scripts/remote_cli.py SESSION_ID save_path export_path
    python scripts/remote_cli.py SESSION_ID --watch
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog
from dotenv import load_dotenv
load_dotenv()  # Must run before any src.* imports

from src.config import API_BASE_URL, REMOTE_POLL_INTERVAL
from src.session import HttpSessionTransport, RemoteController, SessionState

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)
logger = structlog.get_logger()


def print_state(state: SessionState) -> None:
    print(
        f"[{state.updated_at}] selected={state.selected_node_id or '-'} "
        f"zoom={state.zoom_state.value} autoplay={'on' if state.auto_play else 'off'} "
        f"view={state.view_mode.value} path={' > '.join(state.path) or '-'}"
    )


async def run(session_id: str, commands: list[str], base_url: str, watch: bool) -> None:
    async with HttpSessionTransport(base_url=base_url) as transport:
        remote = RemoteController(transport, session_id, transport.fetch_graph)
        await remote.sync()

        for command in commands:
            status = await remote.run(command)
            print(f"{command}: {status}")
            if command == "export_path" and remote.last_export is not None:
                print(remote.last_export)

        if watch:
            poller = remote.poller(REMOTE_POLL_INTERVAL)
            poller.on_state = print_state
            poller.start()
            try:
                await asyncio.Event().wait()
            finally:
                await poller.stop()


def main():
    parser = argparse.ArgumentParser(description="Remote-control a viewer session")
    parser.add_argument("session_id", help="Session to control")
    parser.add_argument(
        "commands",
        nargs="*",
        help=f"Commands to run in order: {', '.join(RemoteController.COMMANDS)}",
    )
    parser.add_argument("--base-url", default=API_BASE_URL, help="API base URL")
    parser.add_argument("--watch", action="store_true", help="Print session changes until interrupted")

    args = parser.parse_args()
    if not args.commands and not args.watch:
        parser.error("give at least one command or --watch")
    unknown = [c for c in args.commands if c not in RemoteController.COMMANDS]
    if unknown:
        parser.error(f"unknown command(s): {', '.join(unknown)}")

    try:
        asyncio.run(run(args.session_id, args.commands, args.base_url, args.watch))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
