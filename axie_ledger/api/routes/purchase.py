"""Purchase Route — POST /api/v1/buy-axie (and the unprefixed POST /buy-axie).

Invariants:
    - Identity resolved by dependency before the body is read (401 first)
    - Body decoded by the request validator, so a malformed payload never reaches storage
    - Success is 200 with an empty body; all failures go through the LedgerError handlers
    - Both paths run the same handler; /buy-axie keeps pre-versioned clients working
"""

from fastapi import APIRouter, Depends, Request, Response, status

from axie_ledger.api.dependencies import get_ledger_executor, get_user_id
from axie_ledger.core.domain_types import UserId
from axie_ledger.core.validate_purchase import validate_purchase
from axie_ledger.services.purchase_executor import LedgerExecutor

router = APIRouter(prefix="/api/v1", tags=["purchase"])
legacy_router = APIRouter(tags=["purchase"])


async def buy_axie(
    request: Request,
    user_id: UserId = Depends(get_user_id),
    executor: LedgerExecutor = Depends(get_ledger_executor),
):
    """Spend `token` balance on the same number of axies."""
    amount = validate_purchase(user_id, await request.body())
    await executor.purchase(user_id, amount)
    return Response(status_code=status.HTTP_200_OK)


router.add_api_route("/buy-axie", buy_axie, methods=["POST"])
legacy_router.add_api_route(
    "/buy-axie", buy_axie, methods=["POST"], include_in_schema=False,
)
