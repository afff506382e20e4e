# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""QR ticket verification demo.

A small FastAPI service that classifies scanned ticket codes, plus an
asyncio scanner client that reads QR codes from a camera and posts them
to the service.
"""

__version__ = "0.1.0"
