# scripts/check_store.py

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from prr_engine.config.settings import get_settings
from prr_engine.infrastructure.cache.redis_client import RedisClient


async def check():
    settings = get_settings()
    if settings.case_store == "database":
        from sqlalchemy import text
        from prr_engine.infrastructure.database.session import create_tables, get_engine

        await create_tables()
        async with get_engine().begin() as conn:
            result = await conn.execute(text("SELECT 1"))
            print("DB Connected:", result.scalar())
        return

    r = RedisClient(settings.redis_url)
    print("Redis Connected:", await r.ping())
    print("Namespace:", settings.store_namespace)
    await r.close()

asyncio.run(check())
