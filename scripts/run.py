"""
Local process runner for the LexiTrip hold broker.

Serves the HTTP API with uvicorn.  Holds live in Redis when it is reachable
and in an in-process store otherwise.

Usage:
    source .env && python scripts/run.py

Environment variables: see lexitrip/config.py.
"""

import logging
import os
import sys

# Make sure project root is on sys.path when run as a script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import uvicorn

from lexitrip.config import Config
from lexitrip.service import build_app

log = logging.getLogger(__name__)


def main() -> None:
    try:
        config = Config.from_env()
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = build_app(config)
    log.info(
        "Server starting — port=%d  hold_ttl=%ds  markup=%s  offers=%s",
        config.port, config.hold_ttl, config.markup_rate, config.offer_gateway,
    )
    uvicorn.run(app, host="0.0.0.0", port=config.port, log_config=None)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        log.info("Server stopped.")
