"""Root conftest — shared test configuration."""

import os

# Tests never talk to a real PostgreSQL or run migrations on app import
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("LOG_FORMAT", "text")
