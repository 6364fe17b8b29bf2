#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: every request runs as its own task on one event loop
(FastAPI + asyncpg connection pool + redis.asyncio). The main server and the
diagnostic server share the loop; when either stops, the other is shut down.

Usage:
    python app.py                  # serve
    python app.py --run-migration  # create the short_urls table and exit

Environment variables:
    DATABASE_URL - Store connection URL (postgresql://... or memory://)
    CREATE_TABLES - Set to 'true' to create the table on startup
    REDIS_URL - Redis connection URL (optional)
    SHORT_URL_SCHEME / SHORT_URL_DOMAIN / SHORT_URL_PATH - Short URL format
    SHORT_CODE_LENGTH - Length of generated tokens
    PORT / DIAGNOSTIC_PORT - Ports to listen on
    LOG_LEVEL - Logging level
"""

import argparse
import asyncio
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortener.database import RedisCache, create_store
from shortener.exceptions import InvalidConfigurationError, StorageError
from shortener.health import LivenessMonitor
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import redact_url, setup_logging
from web_app import create_app, create_diagnostic_app


def build_service(config: Config, logger: logging.Logger) -> URLShortenerService:
    """Wire store, cache and generator into a service."""
    logger.info(f"Using store at {redact_url(config.database_url)}")
    store = create_store(
        config.database_url,
        pool_max_size=config.store_pool_max_size,
        logger=logger,
    )

    cache = None
    if config.redis_url:
        logger.info(f"Using Redis at {redact_url(config.redis_url)}")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
    else:
        logger.info("Redis caching disabled")

    return URLShortenerService(
        store=store,
        cache=cache,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger,
        max_collision_retries=config.max_collision_retries,
        store_timeout_seconds=config.store_timeout_seconds,
    )


def make_lifespan(service: URLShortenerService, monitor: LivenessMonitor, config: Config, logger: logging.Logger):
    """Lifespan context manager for startup and shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting URL shortener service...")

        if service.cache:
            await service.cache.connect()
        if config.create_tables:
            await service.ensure_schema()

        monitor.start()
        logger.info("Service started successfully")

        yield

        logger.info("Shutting down URL shortener service...")
        await monitor.stop()
        await service.close()
        logger.info("Service stopped")

    return lifespan


async def serve(config: Config, logger: logging.Logger) -> None:
    """Run the main and diagnostic servers until either one exits."""
    service = build_service(config, logger)
    monitor = LivenessMonitor(
        service.store,
        interval_seconds=config.liveness_interval_seconds,
        ping_timeout_seconds=config.store_timeout_seconds,
        logger=logger,
    )

    app = create_app(service_instance=service, config=config)
    app.router.lifespan_context = make_lifespan(service, monitor, config, logger)
    diagnostic_app = create_diagnostic_app(monitor)

    main_server = uvicorn.Server(uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    ))
    diagnostic_server = uvicorn.Server(uvicorn.Config(
        diagnostic_app,
        host=config.host,
        port=config.diagnostic_port,
        log_level=config.log_level.lower(),
        access_log=False,
        lifespan="off",
    ))

    async def run_until_exit(server: uvicorn.Server, other: uvicorn.Server, name: str):
        await server.serve()
        logger.info(f"{name} server stopped, stopping the other one")
        other.should_exit = True

    logger.info(f"Starting server on {config.host}:{config.port}, diagnostics on :{config.diagnostic_port}")
    await asyncio.gather(
        run_until_exit(main_server, diagnostic_server, "main"),
        run_until_exit(diagnostic_server, main_server, "diagnostic"),
    )


async def run_migration(config: Config, logger: logging.Logger) -> None:
    """Create the store schema and exit."""
    service = build_service(config, logger)
    try:
        logger.info("start db migration")
        await service.ensure_schema()
        logger.info("finish db migration")
    finally:
        await service.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="URL shortener service")
    parser.add_argument(
        "--run-migration",
        action="store_true",
        help="Create the short_urls table and exit",
    )
    args = parser.parse_args()

    # Load configuration
    config = load_config()

    # Setup logging
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")

    try:
        if args.run_migration:
            asyncio.run(run_migration(config, logger))
        else:
            asyncio.run(serve(config, logger))
    except KeyboardInterrupt:
        # uvicorn re-raises the captured signal once the servers are down
        logger.info("Interrupted, servers stopped")
    except InvalidConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    except StorageError as e:
        logger.error(f"Storage error: {e}")
        sys.exit(1)

    logger.info("good bye")


if __name__ == "__main__":
    main()
