"""Schema Bootstrap — applies Alembic migrations before the server takes traffic.

Invariants:
    - Upgrades to head; an already-current schema is a no-op
    - Any failure propagates: startup must abort on a broken schema

Design Decisions:
    - Migration scripts ship inside the package (axie_ledger/migrations) so an
      installed wheel can bootstrap its own schema
    - Runs in a worker thread: env.py drives its own event loop via asyncio.run
"""

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def build_alembic_config(database_url: str) -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # configparser interpolation: escape percent-encoded credentials
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    # leave the application's logging setup alone
    config.attributes["configure_logger"] = False
    return config


def upgrade_to_head(database_url: str) -> None:
    command.upgrade(build_alembic_config(database_url), "head")


async def run_migrations(database_url: str) -> None:
    """Apply all pending migrations. Raises on failure."""
    try:
        await asyncio.to_thread(upgrade_to_head, database_url)
    except Exception:
        logger.error("Failed to run migrations", exc_info=True)
        raise
    logger.info("Finished migrations")
