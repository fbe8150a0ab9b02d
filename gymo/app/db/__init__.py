import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from gymo.app.db.base import Base

logger = logging.getLogger(__name__)


async def init_models(engine: AsyncEngine, drop: bool = False) -> None:
    """Create every table known to Base.metadata, optionally dropping first."""
    # Register the mapped classes on Base.metadata
    from gymo.app import models  # noqa: F401

    try:
        async with engine.begin() as conn:
            if drop:
                logger.warning("Dropping all tables")
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ready")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
