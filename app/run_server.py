#!/usr/bin/env python3
"""
SciCalc API Server Entry Point

Run with:
    python run_server.py

Or for development with auto-reload:
    uvicorn scicalc.server:create_app --factory --reload --host 127.0.0.1 --port 8765
"""

import sys
import os

# Make the package importable when run from a source checkout
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import uvicorn

from scicalc.config import load_config


def main():
    """Start the SciCalc API server."""
    config = load_config()

    print("=" * 50)
    print("  SciCalc API Server")
    print("=" * 50)
    print()
    print(f"Starting server on http://{config.server_host}:{config.server_port}")
    print()
    print("Press Ctrl+C to stop")
    print()

    uvicorn.run(
        "scicalc.server:create_app",
        factory=True,
        host=config.server_host,
        port=config.server_port,
        reload=False,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
