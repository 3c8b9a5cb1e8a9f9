"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All ledger IO is accessed through LedgerRepository
    - A repository is bound to one open transaction; it never commits itself

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - debit_balance/credit_holdings are single-statement conditional writes so the
      sufficiency check and the write happen under the same row lock
"""

from typing import Protocol

from axie_ledger.core.domain_types import UserId


class LedgerRepository(Protocol):
    """Contract for balance/holdings persistence — implemented by shell."""
    async def get_balance(self, user_id: UserId) -> int | None: ...
    async def get_holdings(self, user_id: UserId) -> int | None: ...
    async def upsert_balance(self, user_id: UserId, balance: int) -> None: ...
    async def upsert_holdings(self, user_id: UserId, holdings: int) -> None: ...
    async def debit_balance(self, user_id: UserId, amount: int) -> int | None: ...
    async def credit_holdings(self, user_id: UserId, amount: int) -> int: ...
