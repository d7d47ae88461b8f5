#!/usr/bin/env python3
"""
pollkv Server Entry Point

This is the main entry point for starting the pollkv server.

Usage:
    python -m pollkv.server                       # Default settings (0.0.0.0:1234)
    python -m pollkv.server --port 8080           # Custom port
    python -m pollkv.server --host 127.0.0.1      # Custom host
    python -m pollkv.server --backend hashtable   # Chained hashtable store
    python -m pollkv.server --debug               # Enable debug logging

Environment Variables:
    POLLKV_HOST               - Server bind address
    POLLKV_PORT               - Server port
    POLLKV_STORE_BACKEND      - Store backend (dict or hashtable)
    POLLKV_HASHTABLE_BUCKETS  - Bucket count for the hashtable backend
    POLLKV_DEBUG              - Enable debug mode (true/false)
"""

import argparse
import logging
import sys

from .config.settings import settings
from .errors import FatalServerError, SetupError
from .network.tcp_server import KVServer
from .store import create_store


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="pollkv: In-Memory Key-Value Server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--backend",
        choices=("dict", "hashtable"),
        default=settings.STORE_BACKEND,
        help="Store backend",
    )

    parser.add_argument(
        "--buckets",
        type=int,
        default=settings.HASHTABLE_BUCKETS,
        help="Bucket count for the hashtable backend",
    )

    parser.add_argument(
        "--poll-timeout",
        type=int,
        default=settings.POLL_TIMEOUT_MS,
        help="poll() timeout in milliseconds, negative to block indefinitely",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def main(argv=None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    try:
        store = create_store(args.backend, args.buckets)
    except ValueError as e:
        logger.error(f"Invalid store configuration: {e}")
        sys.exit(2)

    server = KVServer(
        host=args.host,
        port=args.port,
        store=store,
        poll_timeout_ms=args.poll_timeout,
    )

    logger.info("Starting pollkv server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Backend: {args.backend}")
    logger.info(f"  Debug: {args.debug}")

    try:
        server.bind()
        server.serve_forever()
    except SetupError as e:
        logger.error(f"Server setup failed: {e}")
        sys.exit(1)
    except FatalServerError as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        server.close()
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
