# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""API route handlers for ticketscan."""

from ticketscan.api.routes import health, page, verify

__all__ = ["health", "page", "verify"]
