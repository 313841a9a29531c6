#!/usr/bin/env python3
"""
Main entry point for the shortlink service.

Concurrency: every request runs as its own task on the event loop; store
calls run in worker threads. Many reads proceed in parallel while writes
are serialized by the link store.

Usage:
    python app.py serve <db-path> [--url HOST:PORT] [--index HTML_FILE]
    python app.py ls <db-path>

Environment variables (command-line arguments win):
    DB_PATH - Database file path
    HOST, PORT - Address to listen on
    INDEX_FILE - HTML file served on /
    REDIS_URL - Redis connection URL (optional)
    CODE_BYTES - Random bytes per generated code
    LOG_LEVEL - Logging level
"""

import argparse
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from config import Config, load_config, parse_listen_address
from shortlink.database.sqlite import SQLiteLinkStore
from shortlink.database.cache import RedisCache
from shortlink.errors import StoreError
from shortlink.service import LinkService
from shortlink.shortcode import ShortCodeGenerator
from shortlink.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    service = app.state.service
    logger = service.logger

    if service.cache:
        await service.cache.connect()

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down shortlink service...")
    await service.close()
    logger.info("Service stopped")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlink",
        description="Shorten URLs and redirect short codes back to them.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("db", help="Path to the database file")
    serve_parser.add_argument(
        "--url",
        default=None,
        help="Address to listen on as host:port (default 127.0.0.1:8080)",
    )
    serve_parser.add_argument(
        "--index",
        default=None,
        help="Path to an HTML file to serve on the root path",
    )

    ls_parser = subparsers.add_parser("ls", help="List all code -> url mappings in the database")
    ls_parser.add_argument("db", help="Path to the database file")

    return parser


def serve(config: Config, logger: logging.Logger) -> int:
    """Open the store and run the HTTP server until shutdown.

    Returns:
        Process exit status
    """
    generator = ShortCodeGenerator(num_bytes=config.code_bytes)

    try:
        store = SQLiteLinkStore(
            db_config=config.db_path,
            short_code_generator=generator,
            busy_timeout_seconds=config.busy_timeout_seconds,
            logger=logger,
        )
    except StoreError as e:
        logger.error(f"Cannot open database: {e}")
        return 1

    try:
        store.ensure_schema_sync()

        index_html = None
        if config.index_file:
            if not os.path.isfile(config.index_file):
                logger.error(f"index file does not exist or is not a file: {config.index_file}")
                return 1
            with open(config.index_file, "r", encoding="utf-8") as f:
                index_html = f.read()

        cache = None
        if config.redis_url:
            logger.info(f"Connecting to Redis at {config.redis_url}")
            cache = RedisCache(
                redis_url=config.redis_url,
                ttl_seconds=config.cache_ttl_seconds,
                logger=logger,
            )
        else:
            logger.info("Redis caching disabled")

        service = LinkService(
            store=store,
            cache=cache,
            logger=logger,
            max_url_length=config.max_url_length,
        )

        app = create_app(
            service_instance=service,
            config=config,
            index_html=index_html,
            lifespan=lifespan,
        )

        uvicorn_config = uvicorn.Config(
            app,
            host=config.host,
            port=config.port,
            log_level=config.log_level.lower(),
            access_log=False,
        )
        server = uvicorn.Server(uvicorn_config)

        logger.info(f"Starting shortlink at http://{config.host}:{config.port}, db at {config.db_path}")
        server.run()

    except StoreError as e:
        logger.error(f"Cannot initialize database: {e}")
        return 1
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Startup failed: {e}")
        return 1
    finally:
        store.close()

    return 0


def list_links(db_path: str) -> int:
    """Print every mapping in a database without modifying it.

    Returns:
        Process exit status
    """
    if not os.path.isfile(db_path):
        print(f"database file does not exist or is not a file: {db_path}", file=sys.stderr)
        return 1

    store = None
    try:
        store = SQLiteLinkStore(db_config=db_path, read_only=True)

        with store.snapshot() as (total, links):
            print(f"{total} mapping{'' if total == 1 else 's'} found in {db_path}:")
            for link in links:
                print(f"  {link}")

    except StoreError as e:
        print(f"cannot read database {db_path}: {e}", file=sys.stderr)
        return 1
    finally:
        if store:
            store.close()

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "ls":
        setup_logging(level=args.log_level or "WARNING")
        return list_links(args.db)

    host = port = None
    if args.url:
        try:
            host, port = parse_listen_address(args.url)
        except ValueError as e:
            parser.error(str(e))

    config = load_config(
        db_path=args.db,
        host=host,
        port=port,
        index_file=args.index,
        log_level=args.log_level,
    )

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("shortlink URL shortener")
    logger.info(f"Configuration: {config.model_dump()}")

    return serve(config, logger)


if __name__ == "__main__":
    sys.exit(main())
