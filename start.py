# start.py
import asyncio
import logging
import sys
import time

import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from gateway.core.config import get_settings
from gateway.core.logging import setup_logging
from gateway.database import make_engine, ping

settings = get_settings()
setup_logging(settings.log_level, settings.log_style)
logger = logging.getLogger(__name__)


async def _db_ready() -> bool:
    engine = make_engine(settings.async_database_url, 1)
    try:
        await ping(engine)
        return True
    finally:
        await engine.dispose()


def wait_for_db():
    """
    Blocks until the session database accepts connections, so the gateway
    does not come up answering 401 to everyone while postgres is still
    starting (docker-compose).
    """
    retries = 30  # ~1 minute
    wait_s = 2

    logger.info("Attempting to connect to DB...")

    while retries > 0:
        try:
            asyncio.run(_db_ready())
            logger.info("Database is ready and accepting connections")
            return
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            retries -= 1
            logger.warning(f"Database not ready yet ({e.__class__.__name__}). Retrying in {wait_s}s... ({retries} attempts left)")
            time.sleep(wait_s)

    logger.error("Could not connect to the database after multiple retries. Exiting.")
    sys.exit(1)


if __name__ == "__main__":
    # 1. DB first
    wait_for_db()

    # 2. then the web server
    logger.info(f"Starting Uvicorn server on {settings.api_address}:{settings.api_port} (Reload={settings.debug})...")
    uvicorn.run(
        "gateway.main:build_app",
        factory=True,
        host=settings.api_address,
        port=settings.api_port,
        reload=settings.debug,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
