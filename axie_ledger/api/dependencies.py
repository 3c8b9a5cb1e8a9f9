"""Request Dependencies — identity and ledger wiring for route handlers.

Invariants:
    - Identity comes from the userId cookie only (mock auth); missing/empty → 401
      before any core code runs
    - The user id is returned as an explicit UserId and passed down as a parameter
    - The database manager is read from app.state (set by the lifespan), never a global
"""

from fastapi import Cookie, Depends, Request

from axie_ledger.core.domain_types import UserId
from axie_ledger.core.errors import UnauthorizedError
from axie_ledger.infrastructure.database import DatabaseSessionManager
from axie_ledger.services.purchase_executor import LedgerExecutor


async def get_user_id(
    user_id: str | None = Cookie(None, alias="userId"),
) -> UserId:
    """Mock authentication: trust the userId cookie."""
    if not user_id:
        raise UnauthorizedError()
    return UserId(user_id)


def get_db_manager(request: Request) -> DatabaseSessionManager:
    manager = getattr(request.app.state, "db", None)
    if manager is None:
        raise RuntimeError("Database not initialized")
    return manager


def get_ledger_executor(
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> LedgerExecutor:
    return LedgerExecutor(db)
