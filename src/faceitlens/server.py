"""
FaceitLens Web Server Entry Point

`faceitlens-web` serves the lookup API (POST /api/faceit, /api/history,
/health) with uvicorn.

Usage:
    faceitlens-web                          # http://0.0.0.0:7860
    faceitlens-web --port 8000 --reload     # local development
    faceitlens-web --config faceitlens.yaml # keys still come from the env
"""

import argparse
import logging
import os
from pathlib import Path

import uvicorn

from faceitlens.core.config import load_config, setup_logging

logger = logging.getLogger(__name__)

APP_PATH = "faceitlens.api:app"
LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="faceitlens-web",
        description="Serve the FaceitLens player lookup API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    FACEIT_API_KEY      required, FACEIT Data API server key
    STEAM_API_KEY       optional, enables steamcommunity.com/id/<vanity> lookups
    FACEITLENS_CONFIG   config file path (same as --config)
        """,
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=7860, help="Port (default: 7860)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes (default: 1)")
    parser.add_argument("--config", type=Path, help="Configuration file (.yaml, .toml or .json)")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="uvicorn log level (default: logging.level from config)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Start the FaceitLens web server."""
    args = build_parser().parse_args(argv)

    if args.config:
        if not args.config.exists():
            raise SystemExit(f"Config file not found: {args.config}")
        # Workers import the app in fresh processes, so pass the path via env
        os.environ["FACEITLENS_CONFIG"] = str(args.config.resolve())

    config = load_config(args.config)
    setup_logging(config.logging)

    if not config.faceit.api_key:
        logger.warning("FACEIT_API_KEY is not set; every lookup will fail with UPSTREAM_AUTH")
    if not config.steam.api_key:
        logger.info("STEAM_API_KEY is not set; vanity URLs fall back to nickname search")

    log_level = args.log_level or str(config.logging.level).lower()
    if log_level not in LOG_LEVELS:
        log_level = "info"

    logger.info(f"Serving FaceitLens on http://{args.host}:{args.port}")
    uvicorn.run(
        APP_PATH,
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=1 if args.reload else args.workers,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
