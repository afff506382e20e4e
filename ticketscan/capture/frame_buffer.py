# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Off-screen raster buffer for decode attempts."""

from typing import Optional

import cv2
import numpy as np


class FrameBuffer:
    """Reusable raster the current video frame is drawn into.

    The buffer is resized to the video dimensions on each draw and only
    reallocated when the shape changes.
    """

    def __init__(self):
        self._data: Optional[np.ndarray] = None

    @property
    def width(self) -> int:
        return 0 if self._data is None else self._data.shape[1]

    @property
    def height(self) -> int:
        return 0 if self._data is None else self._data.shape[0]

    @property
    def data(self) -> Optional[np.ndarray]:
        return self._data

    def draw(self, frame: np.ndarray, width: int, height: int) -> np.ndarray:
        """Draw frame into the buffer scaled to width x height.

        Args:
            frame: Source frame (BGR or grayscale)
            width: Target width (video width)
            height: Target height (video height)

        Returns:
            The buffer contents
        """
        if frame.shape[1] != width or frame.shape[0] != height:
            frame = cv2.resize(frame, (width, height), interpolation=cv2.INTER_LINEAR)

        if self._data is None or self._data.shape != frame.shape or self._data.dtype != frame.dtype:
            self._data = np.empty_like(frame)

        np.copyto(self._data, frame)
        return self._data

    def clear(self) -> None:
        """Drop the buffer."""
        self._data = None
