#!/usr/bin/env python3
"""
FloatChat - Main Application Entry Point

Launches the Streamlit dashboard (default) or the FastAPI server:

    python app.py [dashboard|api]
"""

import sys
import subprocess
from pathlib import Path

from floatchat.config import Config


def launch_dashboard(project_root: Path) -> int:
    dashboard_path = project_root / "floatchat" / "dashboard" / "app.py"

    if not dashboard_path.exists():
        print("❌ Dashboard application not found!")
        print(f"Expected location: {dashboard_path}")
        return 1

    print("🌊 Launching FloatChat Dashboard...")
    print(f"📍 Project root: {project_root}")
    print(f"🚀 Starting Streamlit server on port {Config.DASHBOARD_PORT}...")

    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        str(dashboard_path),
        "--server.address", "localhost",
        "--server.port", str(Config.DASHBOARD_PORT),
        "--browser.gatherUsageStats", "false"
    ], cwd=project_root)
    return 0


def launch_api() -> int:
    from floatchat.api.app import main as run_api

    print(f"🌊 Launching FloatChat API on {Config.API_HOST}:{Config.API_PORT}...")
    run_api()
    return 0


def main():
    """Launch the FloatChat dashboard or API"""

    project_root = Path(__file__).parent
    target = sys.argv[1] if len(sys.argv) > 1 else "dashboard"

    try:
        if target == "dashboard":
            return launch_dashboard(project_root)
        if target == "api":
            return launch_api()

        print(f"Unknown target '{target}'. Usage: python app.py [dashboard|api]")
        return 1

    except KeyboardInterrupt:
        print("\n👋 FloatChat stopped.")
        return 0
    except Exception as e:
        print(f"❌ Error launching {target}: {e}")
        return 1


if __name__ == "__main__":
    exit(main())
