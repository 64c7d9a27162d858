"""
Launcher for the query-sync explorer.

    python code/run_capsule.py              # shared deployment on port 7860
    python code/run_capsule.py --dev --show # autoreload and open a browser tab

The explorer page keeps its filters in the query string, so any URL copied
from the browser reopens the same view.
"""

import argparse
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

APP_PATH = Path(__file__).parent / "app.py"
DEFAULT_PORT = 7860


def build_command(port: int = DEFAULT_PORT, address: str = "0.0.0.0", dev: bool = False, show: bool = False) -> List[str]:
    """
    Build the ``panel serve`` command line for the explorer.

    Args:
        port: Port to listen on
        address: Interface to bind
        dev: Enable autoreload
        show: Open the app in a browser once it is served
    """
    cmd = [
        sys.executable, "-m", "panel", "serve",
        str(APP_PATH),
        "--address", address,
        "--port", str(port),
        "--allow-websocket-origin=*",
    ]
    if dev:
        cmd.append("--dev")
    if show:
        cmd.append("--show")
    return cmd


def run(argv: Optional[List[str]] = None) -> int:
    """Parse launcher options and serve the explorer until interrupted."""
    parser = argparse.ArgumentParser(description="Serve the query-sync explorer")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--address", default="0.0.0.0")
    parser.add_argument("--dev", action="store_true", help="autoreload on code changes")
    parser.add_argument("--show", action="store_true", help="open a browser tab")
    args = parser.parse_args(argv)

    cmd = build_command(port=args.port, address=args.address, dev=args.dev, show=args.show)
    return subprocess.run(cmd).returncode


if __name__ == "__main__":
    sys.exit(run())
