# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Camera capability interfaces.

A Camera hands out a CameraStream for a set of constraints. The stream is
a revocable handle: whoever opened it must call stop() on every exit path.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


class CameraError(Exception):
    """Camera could not be opened (denied, missing or unsupported)."""


@dataclass(frozen=True)
class CameraConstraints:
    """Requested camera properties.

    The camera may deliver a different resolution; the ideal values are
    only a hint.
    """

    facing_mode: str = "environment"  # "environment" (rear) or "user" (front)
    ideal_width: int = 640
    ideal_height: int = 480


class CameraStream(ABC):
    """Live video stream handle."""

    @abstractmethod
    async def play(self) -> None:
        """Start playback. Raises CameraError if the stream cannot start."""

    @abstractmethod
    def dimensions(self) -> Tuple[int, int]:
        """Current (width, height) of the video; (0, 0) while not ready."""

    @abstractmethod
    async def read(self) -> Optional[np.ndarray]:
        """Return the current frame (BGR), or None if no frame is available."""

    @abstractmethod
    def stop(self) -> None:
        """Stop all tracks and release the device."""

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """True until stop() has been called."""


class Camera(ABC):
    """Media capture capability."""

    @abstractmethod
    async def open(self, constraints: CameraConstraints) -> CameraStream:
        """Request a stream matching constraints.

        Raises:
            CameraError: If access is denied or no device is available
        """
