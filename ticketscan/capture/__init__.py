# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Camera capture modules."""

from ticketscan.capture.base import Camera, CameraConstraints, CameraError, CameraStream
from ticketscan.capture.frame_buffer import FrameBuffer
from ticketscan.capture.mock_camera import MockCamera
from ticketscan.capture.opencv_camera import OpenCVCamera

__all__ = [
    "Camera",
    "CameraConstraints",
    "CameraError",
    "CameraStream",
    "FrameBuffer",
    "MockCamera",
    "OpenCVCamera",
]
