# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Ticket verification rule.

A payload is a valid ticket when its uppercased form starts with
``VALID``. In a real deployment this would look the code up in a
ticket store; here it is a pure string check.
"""

from ticketscan.models.ticket import ScanResult, TicketStatus

VALID_PREFIX = "VALID"


def classify(payload: str) -> TicketStatus:
    """Classify a payload as a valid or invalid ticket.

    Total over all strings: empty or malformed payloads are simply invalid.
    """
    if payload.upper().startswith(VALID_PREFIX):
        return TicketStatus.VALID
    return TicketStatus.INVALID


def verify_payload(payload: str) -> ScanResult:
    """Verify a payload and return the status with its fixed message."""
    return ScanResult.for_status(classify(payload))
