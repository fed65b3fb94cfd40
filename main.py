#!/usr/bin/env python3
"""
Group Ranking API -- set Roblox group ranks over HTTP with a shared API key.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 127.0.0.1 --reload

Environment variables:
  ROBLOX_COOKIE   .ROBLOSECURITY cookie of the account that performs rank changes.
  GROUP_ID        Numeric id of the group whose member ranks are changed.
  API_KEY         Shared secret callers pass as ?key= on every /api route.
  PORT            Listening port (default: 3000).
  HOST            Bind address (default: 0.0.0.0).

Missing credentials do not stop the server: it starts, logs the gap, and
ranking calls fail until the variables are set.
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="rankbridge",
        description="HTTP API that forwards rank changes to a Roblox group.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  PORT=8080 python main.py
  python main.py --host 127.0.0.1 --port 8000 --reload
  curl "http://localhost:3000/api/ranking/promote?key=SECRET&userId=builderman&rankId=50"
        """,
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Bind address (default: {settings.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Listening port (default: {settings.port}, from PORT)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change (development only)",
    )
    args = parser.parse_args()

    # Import string form so --reload can re-import the app in the worker process
    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
