#!/usr/bin/env python3
"""
Weather Cache API - Run Script
This script checks the cache backend and starts the FastAPI server
"""

import os
import sys
import subprocess
import socket
from pathlib import Path
from urllib.parse import urlparse

DEFAULT_PORTS = {"redis": 6379, "mongodb": 27017}

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

def check_port_open(host, port):
    """Check if a port is open"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(2)
    result = sock.connect_ex((host, port))
    sock.close()
    return result == 0

def cache_endpoint(mode):
    """Host and port of the configured cache backend, or None for the local file cache."""
    if mode == "redis":
        url = urlparse(os.environ.get("REDIS_URL", "redis://localhost:6379/0"))
    elif mode == "mongodb":
        url = urlparse(os.environ.get("MONGO_URI", "mongodb://localhost:27017"))
    else:
        return None
    return url.hostname or "localhost", url.port or DEFAULT_PORTS[mode]

def main():
    print_colored("🚀 Starting Weather Cache API...", "blue")

    # Check if we're in the backend directory
    check_file_exists("app/main.py", "app/main.py not found. Please run this script from the backend directory.")

    env_path = Path("../.env")
    if not env_path.exists() and not os.environ.get("WEATHER_API_KEY"):
        print_colored("⚠️  Warning: no .env file and WEATHER_API_KEY is not set.", "yellow")
        print("Please create a .env file in the project root with, for example:")
        print("  WEATHER_API_KEY=your_visual_crossing_key")
        print("  STORAGE_MODE=redis            # redis, mongodb or local")
        print("  REDIS_URL=redis://localhost:6379/0")
        print("  CACHE_TTL_SECONDS=3600")
        print("  LOGGER=20")
        sys.exit(1)

    # The service runs without a cache, but every request then hits the provider
    mode = os.environ.get("STORAGE_MODE", "redis")
    endpoint = cache_endpoint(mode)
    if endpoint:
        host, port = endpoint
        print_colored(f"🔍 Checking {mode} at {host}:{port}...", "blue")
        if not check_port_open(host, port):
            print_colored(f"⚠️  Warning: {mode} doesn't appear to be reachable at {host}:{port}", "yellow")
            print("Requests will be served straight from the weather provider until it is up.")
            if mode == "redis":
                print("  - Using Docker: docker run -d -p 6379:6379 redis:7")
            else:
                print("  - Using Docker: docker run -d -p 27017:27017 mongo:7.0")

    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Uvicorn server...", "blue")
    print("📍 API will be available at: http://localhost:8000")
    print("📍 Health check: http://localhost:8000/health")
    print("📍 API Documentation: http://localhost:8000/docs")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    # Run uvicorn with auto-reload for development
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "app.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
