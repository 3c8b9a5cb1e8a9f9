"""Ledger Transaction Executor — tests for the atomic purchase against SQLite.

Tests cover:
    - Happy path scenarios (existing holdings, first purchase creates the row)
    - Insufficient funds and missing balance rows leave storage unchanged
    - Non-positive and out-of-range amounts rejected before storage is touched
    - Failure after the debit rolls the debit back
    - Cancellation mid-transaction rolls back
    - get_account snapshot and missing-account error
"""

import asyncio

import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError

from axie_ledger.core.domain_types import Account, UserId
from axie_ledger.core.errors import (
    AccountNotFoundError, InsufficientFundsError, MalformedRequestError,
    StorageError,
)
from axie_ledger.infrastructure.ledger_repository import SqlLedgerRepository
from axie_ledger.services.purchase_executor import LedgerExecutor


class _FailingCreditRepository(SqlLedgerRepository):
    """Debits for real, then fails the holdings write."""

    def __init__(self, session, exc: BaseException):
        super().__init__(session)
        self._exc = exc

    async def credit_holdings(self, user_id, amount):
        raise self._exc


@pytest.mark.asyncio
async def test_purchase_debits_balance_and_credits_holdings(
    db_manager, seed_account, read_account,
):
    await seed_account("alice", balance=100, holdings=0)
    executor = LedgerExecutor(db_manager)

    account = await executor.purchase(UserId("alice"), 30)

    assert account == Account(UserId("alice"), balance=70, holdings=30)
    assert await read_account("alice") == (70, 30)


@pytest.mark.asyncio
async def test_first_purchase_creates_holdings_row(
    db_manager, seed_account, read_account,
):
    await seed_account("bob", balance=50)
    assert await read_account("bob") == (50, None)

    await LedgerExecutor(db_manager).purchase(UserId("bob"), 10)

    assert await read_account("bob") == (40, 10)


@pytest.mark.asyncio
async def test_purchase_can_spend_entire_balance(
    db_manager, seed_account, read_account,
):
    await seed_account("carol", balance=25, holdings=1)

    await LedgerExecutor(db_manager).purchase(UserId("carol"), 25)

    assert await read_account("carol") == (0, 26)


@pytest.mark.asyncio
async def test_sequential_purchases_conserve_tokens(
    db_manager, seed_account, read_account,
):
    await seed_account("dave", balance=100, holdings=7)
    executor = LedgerExecutor(db_manager)
    amounts = [5, 20, 1, 33]

    for amount in amounts:
        await executor.purchase(UserId("dave"), amount)

    assert await read_account("dave") == (100 - sum(amounts), 7 + sum(amounts))


@pytest.mark.asyncio
async def test_insufficient_balance_leaves_account_unchanged(
    db_manager, seed_account, read_account,
):
    await seed_account("erin", balance=20, holdings=5)

    with pytest.raises(InsufficientFundsError):
        await LedgerExecutor(db_manager).purchase(UserId("erin"), 30)

    assert await read_account("erin") == (20, 5)


@pytest.mark.asyncio
async def test_missing_balance_row_is_insufficient_funds(
    db_manager, read_account,
):
    with pytest.raises(InsufficientFundsError):
        await LedgerExecutor(db_manager).purchase(UserId("ghost"), 1)

    assert await read_account("ghost") == (None, None)


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -1, -500, 2**63, 10**30])
async def test_out_of_range_amount_never_touches_storage(amount):
    db = MagicMock()
    executor = LedgerExecutor(db)

    with pytest.raises(MalformedRequestError) as exc_info:
        await executor.purchase(UserId("frank"), amount)

    assert exc_info.value.field == "token"
    db.transaction.assert_not_called()


@pytest.mark.asyncio
async def test_storage_failure_after_debit_rolls_back_both_writes(
    db_manager, seed_account, read_account,
):
    await seed_account("gina", balance=100, holdings=3)
    failure = OperationalError("INSERT INTO axies", {}, Exception("disk I/O error"))
    executor = LedgerExecutor(
        db_manager,
        repository_factory=lambda s: _FailingCreditRepository(s, failure),
    )

    with pytest.raises(StorageError):
        await executor.purchase(UserId("gina"), 40)

    assert await read_account("gina") == (100, 3)


@pytest.mark.asyncio
async def test_unexpected_error_after_debit_still_rolls_back(
    db_manager, seed_account, read_account,
):
    await seed_account("hank", balance=10)
    executor = LedgerExecutor(
        db_manager,
        repository_factory=lambda s: _FailingCreditRepository(
            s, RuntimeError("boom"),
        ),
    )

    with pytest.raises(RuntimeError):
        await executor.purchase(UserId("hank"), 4)

    assert await read_account("hank") == (10, None)


@pytest.mark.asyncio
async def test_cancelled_purchase_rolls_back(
    db_manager, seed_account, read_account,
):
    await seed_account("iris", balance=60, holdings=0)
    debited = asyncio.Event()
    never = asyncio.Event()

    class _StallingRepository(SqlLedgerRepository):
        async def credit_holdings(self, user_id, amount):
            debited.set()
            await never.wait()

    executor = LedgerExecutor(db_manager, repository_factory=_StallingRepository)
    task = asyncio.create_task(executor.purchase(UserId("iris"), 15))
    await asyncio.wait_for(debited.wait(), timeout=5)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert await read_account("iris") == (60, 0)


@pytest.mark.asyncio
async def test_get_account_reads_balance_and_holdings(
    db_manager, seed_account,
):
    await seed_account("jane", balance=9, holdings=4)

    account = await LedgerExecutor(db_manager).get_account(UserId("jane"))

    assert account.to_dict() == {"user_id": "jane", "balance": 9, "holdings": 4}


@pytest.mark.asyncio
async def test_get_account_without_holdings_reports_zero(
    db_manager, seed_account,
):
    await seed_account("kyle", balance=3)

    account = await LedgerExecutor(db_manager).get_account(UserId("kyle"))

    assert account.holdings == 0


@pytest.mark.asyncio
async def test_get_account_missing_balance_raises_not_found(db_manager):
    with pytest.raises(AccountNotFoundError):
        await LedgerExecutor(db_manager).get_account(UserId("nobody"))
