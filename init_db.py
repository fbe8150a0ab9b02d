import asyncio

from gymo.app.core.config import get_settings
from gymo.app.core.logging_config import setup_logging
from gymo.app.db import init_models
from gymo.app.db.session import create_engine_from_settings


async def reset_database():
    settings = get_settings()
    setup_logging(settings)
    engine = create_engine_from_settings(settings)
    try:
        # Drop and recreate every table - DEV MODE ONLY
        await init_models(engine, drop=True)
    finally:
        await engine.dispose()
    print(">>> Tables Created Successfully!")


if __name__ == "__main__":
    asyncio.run(reset_database())
