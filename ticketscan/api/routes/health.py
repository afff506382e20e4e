# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Liveness endpoint."""

from fastapi import APIRouter

from ticketscan import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Report that the verification service is up."""
    return {"status": "ok", "service": "ticketscan", "version": __version__}
