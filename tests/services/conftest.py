"""Service test fixtures — file-backed SQLite ledger + FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - app.state.db points at the test manager for the duration of the client fixture
    - seed_account / read_account go through the real repository in their own transactions

Design Decisions:
    - File-backed SQLite over :memory: so each session gets its own connection and
      concurrent transactions really contend for the database lock
"""

import pytest
from httpx import ASGITransport, AsyncClient

from axie_ledger.core.domain_types import UserId
from axie_ledger.db.base import Base
from axie_ledger.infrastructure.database import DatabaseSessionManager
from axie_ledger.infrastructure.ledger_repository import SqlLedgerRepository
from axie_ledger.main import app
import axie_ledger.models  # noqa: F401


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
    )
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest.fixture
def seed_account(db_manager):
    """Provision a balance row and optionally a holdings row."""
    async def _seed(user_id: str, balance: int, holdings: int | None = None):
        async with db_manager.transaction() as session:
            repo = SqlLedgerRepository(session)
            await repo.upsert_balance(UserId(user_id), balance)
            if holdings is not None:
                await repo.upsert_holdings(UserId(user_id), holdings)
    return _seed


@pytest.fixture
def read_account(db_manager):
    """Return (balance, holdings) as stored; None for a missing row."""
    async def _read(user_id: str) -> tuple[int | None, int | None]:
        async with db_manager.session() as session:
            repo = SqlLedgerRepository(session)
            return (
                await repo.get_balance(UserId(user_id)),
                await repo.get_holdings(UserId(user_id)),
            )
    return _read


@pytest.fixture
async def client(db_manager):
    """FastAPI test client with app.state.db bound to the test database."""
    app.state.db = db_manager
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
    del app.state.db
