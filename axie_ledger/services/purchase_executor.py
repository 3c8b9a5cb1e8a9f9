"""Ledger Transaction Executor — atomic debit-balance / credit-holdings for one user.

Invariants:
    - amount must be > 0; anything else is rejected before storage is touched
    - The sufficiency check and both writes run in ONE transaction; the conditional
      UPDATE holds the balance row lock until commit, so concurrent purchases on
      the same account serialize and the balance never goes negative
    - Any failure after the debit rolls the debit back (no half-applied purchase)
    - No internal retries: every failure propagates to the caller

Design Decisions:
    - Repository built per transaction from a factory: tests inject failures without
      touching the session manager
    - Returns the post-purchase Account snapshot for logging and callers that want it
"""

import logging
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from axie_ledger.core.domain_types import INT64_MAX, Account, UserId
from axie_ledger.core.errors import (
    AccountNotFoundError, ErrorContext, InsufficientFundsError,
    MalformedRequestError,
)
from axie_ledger.core.repository_protocols import LedgerRepository
from axie_ledger.infrastructure.database import DatabaseSessionManager
from axie_ledger.infrastructure.ledger_repository import SqlLedgerRepository
from axie_ledger.infrastructure.observability import ledger_fields

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[AsyncSession], LedgerRepository]


class LedgerExecutor:
    """Owns the balance >= 0 invariant for every purchase."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        repository_factory: RepositoryFactory = SqlLedgerRepository,
    ):
        self._db = db
        self._repository_factory = repository_factory

    async def purchase(self, user_id: UserId, amount: int) -> Account:
        """Move amount tokens from balance into axie holdings, or change nothing.

        Raises:
            MalformedRequestError: amount is not a positive 64-bit integer.
            InsufficientFundsError: no balance record, or balance < amount.
            StorageError: any persistence failure (transaction rolled back).
        """
        context = ErrorContext(user_id=user_id, amount=amount)
        if not 0 < amount <= INT64_MAX:
            raise MalformedRequestError(
                "token must be a positive 64-bit integer", field="token",
                context=context,
            )

        async with self._db.transaction() as session:
            repo = self._repository_factory(session)
            balance = await repo.debit_balance(user_id, amount)
            if balance is None:
                logger.info(
                    "Purchase rejected: insufficient balance",
                    extra=ledger_fields(user_id, amount, outcome="rejected"),
                )
                raise InsufficientFundsError(context=context)
            holdings = await repo.credit_holdings(user_id, amount)

        account = Account(user_id=user_id, balance=balance, holdings=holdings)
        logger.info(
            "Purchase committed",
            extra=ledger_fields(amount=amount, account=account, outcome="committed"),
        )
        return account

    async def get_account(self, user_id: UserId) -> Account:
        """Read balance and holdings in one snapshot. Missing holdings read as 0."""
        async with self._db.transaction() as session:
            repo = self._repository_factory(session)
            balance = await repo.get_balance(user_id)
            holdings = await repo.get_holdings(user_id)
        if balance is None:
            raise AccountNotFoundError(
                user_id, context=ErrorContext(user_id=user_id),
            )
        return Account(
            user_id=user_id, balance=balance, holdings=holdings or 0,
        )
