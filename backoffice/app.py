"""Process lifecycle: bring the expense core up and tear it down cleanly."""
import logging

from backoffice.config import settings
from backoffice.logging_config import setup_logging
from database.base import close_db, init_db
from services.notifications import default_dispatcher

logger = logging.getLogger(__name__)


async def startup(create_schema: bool = True) -> None:
    """
    Configure logging and make sure the schema exists.

    Production deployments run Alembic migrations instead and pass
    ``create_schema=False``.
    """
    setup_logging()
    if create_schema:
        await init_db()
    logger.info(f"Expense core started ({settings.environment})")


async def shutdown() -> None:
    """Wait for in-flight notifications, then release database connections."""
    pending = default_dispatcher.pending
    if pending:
        logger.info(f"Waiting for {pending} notification(s) to be delivered")
    await default_dispatcher.drain()
    await close_db()
    logger.info("Expense core stopped")
