"""
Pydantic schemas for hosted checkout sessions.
"""

from uuid import UUID

from pydantic import BaseModel


class CheckoutSessionRequest(BaseModel):
    transfer_id: UUID


class CheckoutSessionResponse(BaseModel):
    session_id: str
    session_url: str
