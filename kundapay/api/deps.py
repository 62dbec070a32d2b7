"""
Reusable FastAPI dependencies.

Dependencies:
  - get_current_user_id - extracts the user id from the bearer JWT (401 if invalid)
  - get_rate_repository - rate/fee lookups for the request
  - get_calculator      - TransferQuoteCalculator wired to the database
"""

import uuid

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kundapay.core.security import decode_token
from kundapay.database import get_db
from kundapay.redis_client import get_redis
from kundapay.services.promo_service import DatabasePromoValidator
from kundapay.services.quote_service import TransferQuoteCalculator
from kundapay.services.rate_service import RateRepository, build_rate_repository


# ---------------------------------------------------------------------------
# Auth: extract user id from JWT
# ---------------------------------------------------------------------------


async def get_current_user_id(
    authorization: str = Header(..., description="Bearer <access_token>"),
) -> uuid.UUID:
    """
    Parse the ``Authorization: Bearer <token>`` header, verify the JWT
    and return the ``sub`` claim as a UUID.

    Raises 401 if the header is malformed or the token is invalid.
    """
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header",
        )

    token = authorization[len("Bearer "):]
    payload = decode_token(token)

    try:
        return uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token subject",
        )


# ---------------------------------------------------------------------------
# Calculator wiring
# ---------------------------------------------------------------------------


async def get_rate_repository(
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
) -> RateRepository:
    return build_rate_repository(db, redis)


async def get_calculator(
    db: AsyncSession = Depends(get_db),
    rates: RateRepository = Depends(get_rate_repository),
) -> TransferQuoteCalculator:
    return TransferQuoteCalculator(rates, DatabasePromoValidator(db))
