# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Local camera capture with OpenCV.

Opens a V4L2/DirectShow/AVFoundation device through cv2.VideoCapture.
Blocking OpenCV calls run in a worker thread so the event loop stays free.
"""

import asyncio
import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from ticketscan.capture.base import Camera, CameraConstraints, CameraError, CameraStream

logger = logging.getLogger(__name__)


class OpenCVStream(CameraStream):
    """Stream backed by an open cv2.VideoCapture."""

    def __init__(self, capture: cv2.VideoCapture, device_index: int):
        self._capture = capture
        self.device_index = device_index
        self._active = True

    @property
    def is_active(self) -> bool:
        return self._active

    async def play(self) -> None:
        """Grab one frame to make sure the device is delivering video."""
        if not self._active:
            raise CameraError("Stream already stopped")

        ok = await asyncio.to_thread(self._capture.grab)
        if not ok:
            raise CameraError(f"Camera {self.device_index} is not delivering frames")

        width, height = self.dimensions()
        logger.info(f"Camera {self.device_index} playing at {width}x{height}")

    def dimensions(self) -> Tuple[int, int]:
        if not self._active:
            return 0, 0
        width = int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        height = int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)
        return width, height

    async def read(self) -> Optional[np.ndarray]:
        if not self._active:
            return None

        ret, frame = await asyncio.to_thread(self._capture.read)
        if not ret or frame is None:
            logger.debug(f"Camera {self.device_index} returned no frame")
            return None
        return frame

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self._capture.release()
        logger.info(f"Camera {self.device_index} released")


class OpenCVCamera(Camera):
    """Camera capability over local OpenCV devices.

    OpenCV has no notion of facing mode, so the preferred facing mode is
    mapped to a configured device index.

    Usage:
        camera = OpenCVCamera(rear_device_index=0)
        stream = await camera.open(CameraConstraints())
        try:
            await stream.play()
            frame = await stream.read()
        finally:
            stream.stop()
    """

    def __init__(
        self,
        rear_device_index: int = 0,
        front_device_index: int = 1,
        api_preference: int = cv2.CAP_ANY,
    ):
        """Initialize OpenCV camera.

        Args:
            rear_device_index: Device used for facing_mode "environment"
            front_device_index: Device used for facing_mode "user"
            api_preference: OpenCV capture backend
        """
        self.rear_device_index = rear_device_index
        self.front_device_index = front_device_index
        self.api_preference = api_preference

    def device_for(self, facing_mode: str) -> int:
        """Map a facing mode to a device index."""
        if facing_mode == "user":
            return self.front_device_index
        return self.rear_device_index

    async def open(self, constraints: CameraConstraints) -> OpenCVStream:
        index = self.device_for(constraints.facing_mode)
        logger.info(
            f"Opening camera {index} ({constraints.facing_mode}, "
            f"ideal {constraints.ideal_width}x{constraints.ideal_height})"
        )
        capture = await asyncio.to_thread(self._open_device, index, constraints)
        return OpenCVStream(capture, index)

    def _open_device(self, index: int, constraints: CameraConstraints) -> cv2.VideoCapture:
        """Open and configure a capture device (blocking)."""
        capture = cv2.VideoCapture(index, self.api_preference)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Camera device {index} could not be opened")

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, constraints.ideal_width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, constraints.ideal_height)

        # Reduce buffer size to get fresher frames
        capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        return capture
