"""
Command-line entry point.

    inventory-api --host 127.0.0.1 --port 3000 --cache cache
    python -m inventory_api -h 127.0.0.1 -p 3000 -c cache

All three options are required. The cache directory is created if missing
and its name doubles as the URL prefix photos are served under.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

import uvicorn
from pydantic import ValidationError as PydanticValidationError

from inventory_api.config import Settings
from inventory_api.main import create_app, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    # -h is taken by --host, so help is --help only
    parser = argparse.ArgumentParser(
        prog="inventory-api",
        description="Run the inventory HTTP service.",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="show this help message and exit")
    parser.add_argument("-h", "--host", required=True, help="Server host")
    parser.add_argument("-p", "--port", required=True, type=int, help="Server port")
    parser.add_argument("-c", "--cache", required=True, help="Path to cache directory")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        settings = Settings(host=args.host, port=args.port, cache_dir=args.cache)
    except PydanticValidationError as e:
        print(f"inventory-api: invalid configuration:\n{e}", file=sys.stderr)
        return 2

    setup_logging(settings.log_level)
    Path(settings.cache_dir).mkdir(parents=True, exist_ok=True)

    app = create_app(settings)
    logger.info("Server running at http://%s:%d/", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
