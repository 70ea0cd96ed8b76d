#!/usr/bin/env python3
"""Serve the function endpoints with uvicorn.

Usage:
    python scripts/serve.py --host 0.0.0.0 --port 8000
    python scripts/serve.py --reload

Settings (NOTION_TOKEN, SLACK_BOT_TOKEN, FUNCTION_API_KEY, LOG_LEVEL) come
from the environment or .env.
"""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

APP_PATH = "src.notion_bridge.main:app"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Notion item bridge API server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    log_level = os.environ.get("LOG_LEVEL", "INFO").lower()

    uvicorn.run(
        APP_PATH,
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
