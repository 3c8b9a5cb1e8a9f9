"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the opaque cookie identity — never a bare str in domain logic
    - Account.balance >= 0 and Account.holdings >= 0
    - An absent holdings record is the same as holdings == 0

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Account is a frozen dataclass: a snapshot, never mutated in place
"""

from dataclasses import dataclass
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)


# ─── Value Types ─────────────────────────────────────────────────

TokenAmount = NewType("TokenAmount", int)   # > 0 once accepted by the executor

# BIGINT column width
INT64_MIN = -2**63
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Account:
    """Balance and holdings of one user at a point in time."""
    user_id: UserId
    balance: int
    holdings: int = 0

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "balance": self.balance,
            "holdings": self.holdings,
        }
