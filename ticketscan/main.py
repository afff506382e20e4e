# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Run the ticket verification service.

Usage:
    ticketscan-server
    ticketscan-server --port 9000 --log-level DEBUG
"""

import argparse
import logging
import sys

import uvicorn

from ticketscan import __version__
from ticketscan.config import get_settings

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def setup_logging(level: str = "INFO") -> None:
    """Send ticketscan and server logs to stdout at the given level."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Per-request lines would drown out scan activity
    for noisy in ("uvicorn.access", "aiohttp.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def build_parser(default_log_level: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ticketscan-server",
        description="Serve the scanner page and the POST /api/verify ticket check",
    )
    parser.add_argument("--host", help="Interface to listen on (TICKETSCAN_SERVER_HOST)")
    parser.add_argument("--port", type=int, help="TCP port (TICKETSCAN_SERVER_PORT)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=LOG_LEVELS,
        help="Log verbosity (TICKETSCAN_SERVER_LOG_LEVEL)",
    )
    return parser


def main():
    """Parse arguments and hand the app to uvicorn."""
    settings = get_settings()
    args = build_parser(settings.server.log_level.upper()).parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    host = args.host or settings.server.host
    port = args.port or settings.server.port

    logger.info(f"ticketscan {__version__} - demo ticket checker, not for real admissions")
    logger.info(
        f"Listening on http://{host}:{port} "
        f"(CSRF {'on' if settings.server.csrf_enabled else 'off'})"
    )

    uvicorn.run(
        "ticketscan.api.server:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
