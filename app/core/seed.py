"""Seed the default status hierarchy on app startup."""

import logging
from app.core.database import async_session_maker
from app.services.status_hierarchy import initialize_status_hierarchy

logger = logging.getLogger(__name__)


async def seed_status_hierarchy(session_factory=async_session_maker):
    """Insert the default pipeline if the status table is empty."""
    async with session_factory() as db:
        try:
            inserted = await initialize_status_hierarchy(db)
            if inserted:
                logger.info("Seeded %d default statuses", inserted)
            else:
                logger.info("Status hierarchy already present, skipping seed")
        except Exception as e:
            logger.error("Failed to initialize status hierarchy: %s", e)
            await db.rollback()
