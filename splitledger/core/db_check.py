import asyncio
import logging
from sqlalchemy import text
from splitledger.core.config import settings
from splitledger.db.session import engine

logger = logging.getLogger("splitledger.core.db_check")


async def wait_for_db(retries=None, delay=2):
    retries = retries or settings.DB_CONNECT_RETRIES
    for i in range(retries):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connected")
            return
        except Exception as e:
            logger.warning("Database not ready | [ %s/%s ] %s -> retrying...", i + 1, retries, e)
            await asyncio.sleep(delay)

    raise RuntimeError("Database unreachable after retries")
