# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Ticket verification endpoint."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, StrictStr, field_validator

from ticketscan.api.csrf import require_csrf_token
from ticketscan.verification import verify_payload

logger = logging.getLogger(__name__)

router = APIRouter()


class VerifyRequest(BaseModel):
    """Request body for ticket verification.

    qrcode must be a JSON string; it is trimmed and must not be blank.
    """

    qrcode: StrictStr

    @field_validator("qrcode")
    @classmethod
    def qrcode_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("The qrcode field is required.")
        return value


class VerifyResponse(BaseModel):
    """Verification outcome."""

    status: str
    message: str


@router.post("/verify", response_model=VerifyResponse, dependencies=[Depends(require_csrf_token)])
async def verify_ticket(body: VerifyRequest):
    """Verify a scanned ticket code.

    Args:
        body: Request with the decoded QR payload

    Returns:
        status ("valid" or "invalid") and a fixed message
    """
    result = verify_payload(body.qrcode)
    logger.info(f"Verified ticket code: {result.status.value}")
    return result.to_dict()
