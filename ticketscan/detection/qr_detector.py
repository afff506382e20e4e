# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""QR code detection.

The decode capability is optional. When it is missing the scanner gets a
NullDetector, which never finds anything; callers do not special-case it.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class QRDetector(ABC):
    """Decodes QR codes in a raster frame."""

    name = "base"

    @property
    def available(self) -> bool:
        """True if this detector can actually decode."""
        return True

    @abstractmethod
    async def detect(self, frame: np.ndarray) -> List[str]:
        """Decode all QR codes in frame.

        Returns:
            Decoded payloads, possibly empty
        """


class NullDetector(QRDetector):
    """Detector used when no decode capability exists."""

    name = "none"

    @property
    def available(self) -> bool:
        return False

    async def detect(self, frame: np.ndarray) -> List[str]:
        return []


class OpenCVQRDetector(QRDetector):
    """QR decoding with cv2.QRCodeDetector."""

    name = "opencv"

    def __init__(self):
        self._detector = cv2.QRCodeDetector()

    def _detect_sync(self, frame: np.ndarray) -> List[str]:
        ok, decoded_info, _points, _straight = self._detector.detectAndDecodeMulti(frame)
        if not ok:
            return []
        return [value for value in decoded_info if value]

    async def detect(self, frame: np.ndarray) -> List[str]:
        values = await asyncio.to_thread(self._detect_sync, frame)
        if values:
            logger.debug(f"Decoded {len(values)} QR code(s)")
        return values


def get_detector(name: str = "opencv") -> QRDetector:
    """Create the configured detector.

    Falls back to NullDetector when decoding is disabled or the installed
    OpenCV build has no QR support.

    Args:
        name: "opencv" or "none"
    """
    if name == "none":
        logger.info("QR decoding disabled, scanner will only poll")
        return NullDetector()

    if name != "opencv":
        raise ValueError(f"Unknown QR detector: {name}")

    if not hasattr(cv2, "QRCodeDetector"):
        logger.warning("OpenCV build has no QR support, scanner will only poll")
        return NullDetector()

    return OpenCVQRDetector()
