"""Request Validator — turns a raw purchase payload into a token amount.

Invariants:
    - Pure: no IO, never touches storage
    - Only the payload shape is checked; amount sign is left to the executor
    - Any decode failure surfaces as MalformedRequestError
"""

from pydantic import ValidationError

from axie_ledger.core.domain_types import TokenAmount, UserId
from axie_ledger.core.errors import ErrorContext, MalformedRequestError
from axie_ledger.schemas.purchase import PurchaseRequest


def validate_purchase(user_id: UserId, raw_payload: bytes | str) -> TokenAmount:
    """Decode ``{"token": <int>}`` from the request body.

    user_id is only used for error context; identity is checked upstream.
    """
    try:
        request = PurchaseRequest.model_validate_json(raw_payload)
    except ValidationError as e:
        errors = e.errors()
        field = ".".join(str(loc) for loc in errors[0]["loc"]) if errors else None
        raise MalformedRequestError(
            "malformed request", field=field or None,
            context=ErrorContext(user_id=user_id),
        ) from e
    return TokenAmount(request.token)
