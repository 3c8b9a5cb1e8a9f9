"""Account Route — read-only view of the caller's balance and holdings."""

from fastapi import APIRouter, Depends

from axie_ledger.api.dependencies import get_ledger_executor, get_user_id
from axie_ledger.core.domain_types import UserId
from axie_ledger.schemas.purchase import AccountResponse
from axie_ledger.services.purchase_executor import LedgerExecutor

router = APIRouter(prefix="/api/v1/accounts", tags=["accounts"])


@router.get("/me", response_model=AccountResponse)
async def get_my_account(
    user_id: UserId = Depends(get_user_id),
    executor: LedgerExecutor = Depends(get_ledger_executor),
):
    account = await executor.get_account(user_id)
    return AccountResponse(**account.to_dict())
