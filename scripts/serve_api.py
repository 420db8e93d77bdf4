#!/usr/bin/env python3
"""Run the graph views API.

Usage:
    python scripts/serve_api.py
    python scripts/serve_api.py --port 9000 --reload
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog
import uvicorn
from dotenv import load_dotenv
load_dotenv()  # Must run before any src.* imports

from src.config import bonfires_configured

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)


def main():
    parser = argparse.ArgumentParser(description="Serve the graph views API")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    print("=" * 60)
    print("Bonfire Graph Views API")
    print("=" * 60)
    print(f"Graph source: {'bonfires' if bonfires_configured() else 'mock'}")
    print(f"Docs: http://localhost:{args.port}/docs")

    uvicorn.run("src.api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
