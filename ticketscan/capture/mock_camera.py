# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Mock camera for running the scanner without a physical device.

Serves a static image (or a blank frame) as the video stream, and can
simulate permission denial, playback failure and a slow-starting video.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

import cv2
import numpy as np

from ticketscan.capture.base import Camera, CameraConstraints, CameraError, CameraStream

logger = logging.getLogger(__name__)


class MockCameraStream(CameraStream):
    """Stream replaying a single frame.

    Attributes:
        stop_count: Number of times stop() was called
        dimension_checks: Number of times dimensions() was called
    """

    def __init__(
        self,
        frame: np.ndarray,
        warmup_checks: int = 0,
        fail_play: bool = False,
    ):
        self._frame = frame
        self._warmup_checks = warmup_checks
        self._fail_play = fail_play
        self._active = True
        self.playing = False
        self.stop_count = 0
        self.dimension_checks = 0

    @property
    def is_active(self) -> bool:
        return self._active

    async def play(self) -> None:
        if self._fail_play:
            raise CameraError("Playback failed (simulated)")
        self.playing = True

    def dimensions(self) -> Tuple[int, int]:
        self.dimension_checks += 1
        if not self._active or not self.playing or self.dimension_checks <= self._warmup_checks:
            return 0, 0
        height, width = self._frame.shape[:2]
        return width, height

    async def read(self) -> Optional[np.ndarray]:
        if not self._active or not self.playing:
            return None
        return self._frame.copy()

    def stop(self) -> None:
        self.stop_count += 1
        self._active = False
        self.playing = False


class MockCamera(Camera):
    """Simulated camera.

    Usage:
        camera = MockCamera(image_path="ticket_qr.png")
        camera = MockCamera(deny=True)  # Simulate permission denied

    Attributes:
        streams: Every stream handed out, for inspection
        open_count: Number of open() calls
    """

    def __init__(
        self,
        image_path: Optional[Union[str, Path]] = None,
        frame: Optional[np.ndarray] = None,
        deny: bool = False,
        fail_play: bool = False,
        warmup_checks: int = 0,
    ):
        """Initialize mock camera.

        Args:
            image_path: Image served as the video frame
            frame: Frame served as the video (overrides image_path)
            deny: Raise CameraError on open() as if permission was denied
            fail_play: Streams raise CameraError on play()
            warmup_checks: Number of dimensions() calls reporting (0, 0)
        """
        self.image_path = Path(image_path) if image_path else None
        self._frame = frame
        self.deny = deny
        self.fail_play = fail_play
        self.warmup_checks = warmup_checks
        self.streams: List[MockCameraStream] = []
        self.open_count = 0

    def _load_frame(self, constraints: CameraConstraints) -> np.ndarray:
        if self._frame is not None:
            return self._frame

        if self.image_path is not None:
            frame = cv2.imread(str(self.image_path), cv2.IMREAD_COLOR)
            if frame is None:
                raise CameraError(f"Failed to read mock image: {self.image_path}")
            return frame

        return np.zeros((constraints.ideal_height, constraints.ideal_width, 3), dtype=np.uint8)

    async def open(self, constraints: CameraConstraints) -> MockCameraStream:
        self.open_count += 1
        if self.deny:
            logger.info("Mock camera denying access")
            raise CameraError("Permission denied (simulated)")

        stream = MockCameraStream(
            self._load_frame(constraints),
            warmup_checks=self.warmup_checks,
            fail_play=self.fail_play,
        )
        self.streams.append(stream)
        logger.info("Mock camera opened")
        return stream
