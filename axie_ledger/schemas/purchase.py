"""Purchase Schemas — Pydantic models for the purchase and account API boundaries.

Invariants:
    - PurchaseRequest.token is a strict JSON integer (no "5", 5.0, true, null)
    - token fits a signed 64-bit integer, the width of the BIGINT ledger columns
    - Unknown fields are ignored, matching a lenient JSON object decoder
    - Positivity of token is NOT checked here (executor owns the balance invariant)
"""

from typing import Annotated

from pydantic import BaseModel, Field, StrictInt

from axie_ledger.core.domain_types import INT64_MAX, INT64_MIN

Int64 = Annotated[StrictInt, Field(ge=INT64_MIN, le=INT64_MAX)]


class PurchaseRequest(BaseModel):
    """Body of POST /buy-axie."""
    token: Int64


class AccountResponse(BaseModel):
    """Public view of an account."""
    user_id: str
    balance: int
    holdings: int
