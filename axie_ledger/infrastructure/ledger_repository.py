"""Ledger Repository — SQLAlchemy implementation of the LedgerRepository protocol.

Invariants:
    - Never commits or rolls back: the caller owns the transaction
    - debit_balance is one conditional UPDATE; it returns None when the row is
      missing or cannot cover the amount, and writes nothing in that case
    - credit_holdings is one INSERT .. ON CONFLICT DO UPDATE that adds to the
      stored value, so concurrent credits never lose an update

Design Decisions:
    - Dialect-specific insert (postgresql / sqlite): both support ON CONFLICT and RETURNING
    - Any other dialect fails the upsert with StorageError instead of emitting SQL
"""

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from axie_ledger.core.domain_types import UserId
from axie_ledger.core.errors import StorageError
from axie_ledger.models.axie import Axie
from axie_ledger.models.balance import Balance

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlLedgerRepository:
    """Balance/holdings queries bound to one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _insert(self, model):
        dialect = self._session.get_bind().dialect.name
        try:
            return _INSERTS[dialect](model)
        except KeyError:
            raise StorageError(
                f"upsert not supported for dialect '{dialect}'", "upsert",
            ) from None

    async def get_balance(self, user_id: UserId) -> int | None:
        result = await self._session.execute(
            select(Balance.balance).where(Balance.id == user_id),
        )
        return result.scalar_one_or_none()

    async def get_holdings(self, user_id: UserId) -> int | None:
        result = await self._session.execute(
            select(Axie.axie).where(Axie.id == user_id),
        )
        return result.scalar_one_or_none()

    async def upsert_balance(self, user_id: UserId, balance: int) -> None:
        stmt = self._insert(Balance).values(id=user_id, balance=balance)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Balance.id],
            set_={"balance": stmt.excluded.balance},
        )
        await self._session.execute(stmt)

    async def upsert_holdings(self, user_id: UserId, holdings: int) -> None:
        stmt = self._insert(Axie).values(id=user_id, axie=holdings)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Axie.id],
            set_={"axie": stmt.excluded.axie},
        )
        await self._session.execute(stmt)

    async def debit_balance(self, user_id: UserId, amount: int) -> int | None:
        """Subtract amount if the balance covers it. Returns the new balance."""
        result = await self._session.execute(
            update(Balance)
            .where(Balance.id == user_id, Balance.balance >= amount)
            .values(balance=Balance.balance - amount)
            .returning(Balance.balance)
            .execution_options(synchronize_session=False),
        )
        return result.scalar_one_or_none()

    async def credit_holdings(self, user_id: UserId, amount: int) -> int:
        """Add amount to holdings, creating the row on first purchase."""
        stmt = self._insert(Axie).values(id=user_id, axie=amount)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Axie.id],
            set_={"axie": Axie.axie + stmt.excluded.axie},
        ).returning(Axie.axie)
        result = await self._session.execute(stmt)
        return result.scalar_one()
