# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Scan session record.

Owns the camera stream for one scanning attempt together with the
scanning/loading flags and the last error. The stream is acquired and
released only through this record.
"""

import logging
from typing import Optional

from ticketscan.capture.base import Camera, CameraConstraints, CameraStream

logger = logging.getLogger(__name__)


class ScanSession:
    """In-memory session state for the scanner.

    Attributes:
        is_scanning: Polling loop is allowed to run
        is_loading: A verification call is in flight
        last_error: User-facing error message, if any
    """

    def __init__(self):
        self._stream: Optional[CameraStream] = None
        self.is_scanning = False
        self.is_loading = False
        self.last_error: Optional[str] = None

    @property
    def stream(self) -> Optional[CameraStream]:
        """Currently held camera stream."""
        return self._stream

    @property
    def has_stream(self) -> bool:
        return self._stream is not None

    async def acquire(self, camera: Camera, constraints: CameraConstraints) -> CameraStream:
        """Open a camera stream and take ownership of it.

        Raises:
            RuntimeError: If a stream is already held
            CameraError: If the camera refuses the request
        """
        if self._stream is not None:
            raise RuntimeError("Camera stream already acquired")

        self._stream = await camera.open(constraints)
        logger.debug("Camera stream acquired")
        return self._stream

    def release(self) -> bool:
        """Stop the held stream, if any, and clear the scanning flag.

        Safe to call any number of times; the stream is stopped once.

        Returns:
            True if a stream was stopped
        """
        self.is_scanning = False
        stream, self._stream = self._stream, None
        if stream is None:
            return False

        stream.stop()
        logger.debug("Camera stream released")
        return True
