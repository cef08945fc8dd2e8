#!/usr/bin/env python3
"""
Main entry point for the link ledger service.

Concurrency: the server handles many connections at once via async I/O
(FastAPI + asyncpg connection pool, or SQLite calls in worker threads). Set
WORKERS > 1 to have uvicorn start that many processes, each building its own
app through app_factory(). Workers coordinate only through the database.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - postgresql://... or sqlite:///path/to/links.sqlite3
    DATABASE_CREATE_TABLES - Create the links table on startup (default true)
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from linkledger.allocator import CodeAllocator
from linkledger.database import create_ledger
from linkledger.service import LinkService
from linkledger.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open storage on startup and close it on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting link ledger service...")

    ledger = create_ledger(
        config.database_url,
        pool_max_size=config.db_pool_max_size,
        timeout_seconds=config.db_timeout_seconds,
        logger=logger,
    )
    logger.info(f"Using {ledger.backend_name} storage")

    if config.database_create_tables:
        await ledger.ensure_schema()

    allocator = CodeAllocator(ledger, max_attempts=config.code_max_attempts, logger=logger)
    service = LinkService(
        ledger=ledger,
        allocator=allocator,
        logger=logger,
        max_create_attempts=config.code_max_attempts,
    )

    app.state.ledger = ledger
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down link ledger service...")
    await service.close()
    logger.info("Service stopped")


def build_app(config: Config) -> FastAPI:
    """Create the FastAPI app with storage opened by the lifespan hook."""
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    app = create_app(
        ledger_instance=None,  # Set in lifespan
        service_instance=None,
        config=config,
        logger=logger,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    return app


def app_factory() -> FastAPI:
    """Build the app from the environment. Used by uvicorn worker processes."""
    return build_app(load_config())


def main():
    """Main entry point."""
    config = load_config()
    app = build_app(config)
    logger = app.state.logger

    logger.info("Link Ledger Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url'})}")

    if config.workers > 1:
        # Worker processes need an import string; uvicorn handles their signals
        logger.info(f"Starting {config.workers} workers on {config.host}:{config.port}")
        uvicorn.run(
            "app:app_factory",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
        )
        return

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
