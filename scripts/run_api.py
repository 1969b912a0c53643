#!/usr/bin/env python
"""
Run the Schedule Pricing API (FastAPI via uvicorn).

Usage:
    python scripts/run_api.py [--port 8000] [--no-reload]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent


def src_env() -> dict:
    """Process environment with ``src`` ahead of any existing PYTHONPATH."""
    env = os.environ.copy()
    src_path = str(PROJECT_ROOT / "src")
    if env.get("PYTHONPATH"):
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path
    return env


def main():
    parser = argparse.ArgumentParser(description="Start the schedule pricing API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true")
    args = parser.parse_args()

    cmd = [
        sys.executable, "-m", "uvicorn",
        "schedule_pricing.api.main:create_app",
        "--factory",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if not args.no_reload:
        cmd += ["--reload", "--reload-dir", str(PROJECT_ROOT / "src")]

    print(f"Starting Schedule Pricing API on {args.host}:{args.port} ...")
    try:
        subprocess.run(cmd, cwd=str(PROJECT_ROOT), env=src_env())
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
