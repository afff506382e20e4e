# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""QR code decode capability."""

from ticketscan.detection.qr_detector import (
    NullDetector,
    OpenCVQRDetector,
    QRDetector,
    get_detector,
)

__all__ = ["NullDetector", "OpenCVQRDetector", "QRDetector", "get_detector"]
