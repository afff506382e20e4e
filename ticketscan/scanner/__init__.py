# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Scanner client: camera session, decode loop and verification calls."""

from ticketscan.scanner.client import VerificationClient, VerificationError
from ticketscan.scanner.render import render
from ticketscan.scanner.scanner import QrCodeScanner
from ticketscan.scanner.session import ScanSession

__all__ = [
    "QrCodeScanner",
    "ScanSession",
    "VerificationClient",
    "VerificationError",
    "render",
]
