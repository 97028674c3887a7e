#!/usr/bin/env python3
"""
Nearby POI Service - Run Script
This script starts the FastAPI backend server
"""

import os
import sys
import socket
import subprocess
from pathlib import Path

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_file_exists(filepath, error_message):
    """Check if a file exists"""
    if not Path(filepath).exists():
        print_colored(f"❌ Error: {error_message}", "red")
        sys.exit(1)

def check_overpass_reachable(host="overpass-api.de", port=443):
    """Check if the Overpass host accepts connections"""
    try:
        with socket.create_connection((host, port), timeout=3):
            return True
    except OSError:
        return False

def main():
    print_colored("🚀 Starting Nearby POI Service...", "blue")

    # Check if we're in the backend directory
    check_file_exists("nearby_poi/main.py", "nearby_poi/main.py not found. Please run this script from the backend directory.")

    if not Path(".env").exists() and not Path("../.env").exists():
        print_colored("⚠️  No .env file found, using default settings.", "yellow")
        print("Optional variables:")
        print("  OVERPASS_URL=https://overpass-api.de/api/interpreter")
        print("  CACHE_TTL_MINUTES=15")
        print("  MIN_REQUEST_INTERVAL_SECONDS=1.0")
        print("  LOGGER=20")

    print_colored("🔍 Checking Overpass API connectivity...", "blue")
    if not check_overpass_reachable():
        print_colored("⚠️  Warning: overpass-api.de is not reachable. Requests will fall back to cache.", "yellow")

    # Check if dependencies are installed
    print_colored("🔍 Checking dependencies...", "blue")
    try:
        import fastapi
        import uvicorn
    except ImportError:
        print_colored("❌ Dependencies not installed.", "red")
        print("Installing dependencies...")
        subprocess.run([sys.executable, "-m", "pip", "install", "-e", ".."], check=True)

    # Start the server
    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Uvicorn server...", "blue")
    print("📍 Backend will be available at: http://localhost:8000")
    print("📍 API Health check: http://localhost:8000/health")
    print("📍 API Documentation: http://localhost:8000/docs")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    reload_flag = ["--reload"] if os.environ.get("POI_RELOAD", "1") == "1" else []
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "nearby_poi.main:app",
            *reload_flag,
            "--host", "0.0.0.0",
            "--port", "8000"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Backend server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
