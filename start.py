#!/usr/bin/env python3
"""
Startup script for the Portfolio RAG API server.

Provides easy commands for checking the environment, starting the server
and asking a running server a question.
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path


def check_environment(data_folder: str) -> bool:
    """Check if required environment variables and the data folder are present."""
    required_vars = ["OPENAI_API_KEY"]

    print("🔍 Checking environment variables...")

    missing_required = [var for var in required_vars if not os.getenv(var)]
    if missing_required:
        print(f"❌ Missing required environment variables: {', '.join(missing_required)}")
        print("   Please set these in your .env file or environment")
        return False

    print("✅ Required environment variables found")

    if not Path(data_folder).is_dir():
        print(f"⚠️  Data folder not found: {data_folder} (the server will run in degraded mode)")
    else:
        print(f"📁 Data folder: {data_folder}")

    return True


def start_server(host: str, port: int, reload: bool = False) -> None:
    """Start the FastAPI server."""
    print(f"🚀 Starting Portfolio RAG API server on {host}:{port}")

    cmd = [
        sys.executable, "-m", "uvicorn",
        "portfolio_rag.api.main:app",
        "--host", host,
        "--port", str(port)
    ]

    if reload:
        cmd.append("--reload")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        print("\n🛑 Server stopped by user")
    except subprocess.CalledProcessError as e:
        print(f"❌ Failed to start server: {e}")


def ask(base_url: str, question: str) -> None:
    """Ask a running server one question."""
    from client import RAGAPIClient

    client = RAGAPIClient(base_url)
    print(client.chat(question))


def main():
    """Main CLI interface."""
    parser = argparse.ArgumentParser(description="Portfolio RAG API Server Management")
    parser.add_argument("command", choices=["start", "check", "ask"], help="Command to execute")
    parser.add_argument("question", nargs="?", help="Question for the ask command")
    parser.add_argument("--host", default=os.getenv("SERVER_HOST", "0.0.0.0"), help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "10000")), help="Port to bind to (default: 10000)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--url", default="http://localhost:10000", help="Server URL for the ask command")

    args = parser.parse_args()

    # Change to script directory
    script_dir = Path(__file__).parent
    os.chdir(script_dir)

    data_folder = os.getenv("DATA_DATA_FOLDER", "./data")

    if args.command == "check":
        if check_environment(data_folder):
            print("✅ Environment check passed")
            sys.exit(0)
        else:
            print("❌ Environment check failed")
            sys.exit(1)

    elif args.command == "start":
        if not check_environment(data_folder):
            print("❌ Environment check failed, cannot start server")
            sys.exit(1)

        start_server(args.host, args.port, args.reload)

    elif args.command == "ask":
        if not args.question:
            parser.error("the ask command needs a question")
        ask(args.url, args.question)


if __name__ == "__main__":
    main()
