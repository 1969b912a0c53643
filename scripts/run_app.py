#!/usr/bin/env python
"""
Run the Streamlit schedule pricing front page.

The page imports ``schedule_pricing`` by absolute name, so ``src`` is put
on PYTHONPATH for the Streamlit process.

Usage:
    python scripts/run_app.py [--port 8501]
"""
import argparse
import subprocess
import sys

from run_api import PROJECT_ROOT, src_env

UI_PATH = PROJECT_ROOT / "src" / "schedule_pricing" / "ui" / "app_streamlit.py"


def main():
    parser = argparse.ArgumentParser(description="Start the schedule pricing front page")
    parser.add_argument("--port", type=int, default=8501)
    args = parser.parse_args()

    if not UI_PATH.exists():
        sys.exit(f"UI page missing: {UI_PATH}")

    cmd = [
        sys.executable, "-m", "streamlit", "run", str(UI_PATH),
        "--server.port", str(args.port),
    ]
    print(f"Starting front page on port {args.port} ...")
    try:
        subprocess.run(cmd, cwd=str(PROJECT_ROOT), env=src_env())
    except KeyboardInterrupt:
        print("\nFront page stopped.")


if __name__ == "__main__":
    main()
