# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Data models for ticket verification and scanning."""

from ticketscan.models.ticket import ScanResult, ScanState, TicketStatus

__all__ = ["ScanResult", "ScanState", "TicketStatus"]
