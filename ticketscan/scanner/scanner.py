# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""QR code scanner state machine.

Drives the camera session, the decode polling loop and the verification
call for one scanning attempt at a time.

State Flow:
    IDLE -> REQUESTING_CAMERA (start)
    REQUESTING_CAMERA -> SCANNING (stream granted and playing)
    REQUESTING_CAMERA -> ERROR (denied, missing or playback failed)
    SCANNING -> VERIFYING (QR code decoded)
    SCANNING -> IDLE (stop)
    VERIFYING -> IDLE (verify call finished, camera released)
    ERROR -> IDLE (reset)

Manual entry goes IDLE/ERROR -> VERIFYING -> IDLE without the camera.

Usage:
    async with QrCodeScanner(client, camera=OpenCVCamera()) as scanner:
        await scanner.start()
        result = await scanner.wait()
"""

import asyncio
import logging
from typing import Callable, List, Optional

from ticketscan.capture.base import Camera, CameraConstraints
from ticketscan.capture.frame_buffer import FrameBuffer
from ticketscan.detection.qr_detector import NullDetector, QRDetector
from ticketscan.models.ticket import ScanResult, ScanState
from ticketscan.scanner.client import VerificationClient
from ticketscan.scanner.session import ScanSession

logger = logging.getLogger(__name__)


class QrCodeScanner:
    """Camera QR scanner with a single decode-and-verify cycle per start.

    Attributes:
        client: Verification service client
        camera: Camera capability (None if the device has no camera)
        detector: QR decode capability
        session: Owned camera/session record
    """

    CAMERA_UNSUPPORTED_MESSAGE = "Camera access is not supported on this device."
    CAMERA_FAILED_MESSAGE = "Failed to access camera. Please check permissions and try again."
    VERIFY_FAILED_MESSAGE = "Failed to verify QR code. Please try again."

    DEFAULT_POLL_INTERVAL = 0.1  # Seconds between decode attempts

    def __init__(
        self,
        client: VerificationClient,
        camera: Optional[Camera] = None,
        detector: Optional[QRDetector] = None,
        constraints: Optional[CameraConstraints] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        """Initialize scanner.

        Args:
            client: VerificationClient used for verify calls
            camera: Camera capability, or None when unavailable
            detector: QR detector (NullDetector if not provided)
            constraints: Camera request (rear camera, 640x480 by default)
            poll_interval: Seconds between decode attempts
        """
        self.client = client
        self.camera = camera
        self.detector = detector or NullDetector()
        self.constraints = constraints or CameraConstraints()
        self.poll_interval = poll_interval

        self.session = ScanSession()
        self.frame_buffer = FrameBuffer()

        self._state = ScanState.IDLE
        self._result: Optional[ScanResult] = None
        self._scan_task: Optional[asyncio.Task] = None
        self._callbacks: List[Callable[[ScanState], None]] = []

        if self.camera is None:
            self.session.last_error = self.CAMERA_UNSUPPORTED_MESSAGE
            self._state = ScanState.ERROR

    # ==================== Properties ====================

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def result(self) -> Optional[ScanResult]:
        """Result of the last verification call."""
        return self._result

    @property
    def error(self) -> Optional[str]:
        """User-facing error message."""
        return self.session.last_error

    @property
    def is_scanning(self) -> bool:
        return self.session.is_scanning

    @property
    def is_loading(self) -> bool:
        return self.session.is_loading

    @property
    def has_camera(self) -> bool:
        return self.camera is not None

    @property
    def is_busy(self) -> bool:
        """True while the camera is being requested, scanning or verifying."""
        return (
            self.session.is_scanning
            or self.session.is_loading
            or self._state in (ScanState.REQUESTING_CAMERA, ScanState.SCANNING, ScanState.VERIFYING)
        )

    @property
    def can_manual_entry(self) -> bool:
        return not self.is_busy

    def add_callback(self, callback: Callable[[ScanState], None]) -> None:
        """Add a callback called with the new state on every transition."""
        self._callbacks.append(callback)

    def _set_state(self, new_state: ScanState) -> None:
        if new_state == self._state:
            return
        logger.info(f"Scanner state: {self._state.value} -> {new_state.value}")
        self._state = new_state
        for callback in self._callbacks:
            try:
                callback(new_state)
            except Exception as e:
                logger.error(f"Scanner callback error: {e}")

    # ==================== Lifecycle ====================

    async def start(self) -> None:
        """Request the camera and start the decode loop.

        Ignored when there is no camera or a scan/verification is already
        in progress.
        """
        if not self.has_camera:
            logger.warning("Start ignored: no camera available")
            return
        if self.is_busy:
            logger.warning(f"Start ignored in state {self._state.value}")
            return

        self._result = None
        self.session.last_error = None
        self._set_state(ScanState.REQUESTING_CAMERA)

        try:
            stream = await self.session.acquire(self.camera, self.constraints)
            await stream.play()
        except asyncio.CancelledError:
            self.session.release()
            self._set_state(ScanState.IDLE)
            raise
        except Exception as e:
            logger.error(f"Error starting scanner: {e}")
            self.session.release()
            self.session.last_error = self.CAMERA_FAILED_MESSAGE
            self._set_state(ScanState.ERROR)
            return

        if self._state != ScanState.REQUESTING_CAMERA:
            # Stopped while the camera was being opened
            self.session.release()
            return

        self.session.is_scanning = True
        self._set_state(ScanState.SCANNING)
        self._scan_task = asyncio.create_task(self._scan_loop())

    async def stop(self) -> None:
        """Stop scanning and release the camera.

        A verification call already in flight is left to finish.
        """
        if self._state == ScanState.VERIFYING:
            self.session.release()
            return

        self.session.is_scanning = False
        await self._cancel_scan_task()
        self.session.release()
        if self._state in (ScanState.REQUESTING_CAMERA, ScanState.SCANNING):
            self._set_state(ScanState.IDLE)

    async def close(self) -> None:
        """Tear down the scanner, cancelling any work and releasing the camera."""
        self.session.is_scanning = False
        await self._cancel_scan_task()
        self.session.release()
        self.session.is_loading = False
        if self._state != ScanState.ERROR:
            self._set_state(ScanState.IDLE)

    async def __aenter__(self) -> "QrCodeScanner":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def wait(self) -> Optional[ScanResult]:
        """Wait for the current scan to finish.

        Returns:
            The verification result, or None on error or stop
        """
        task = self._scan_task
        if task is not None:
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return self._result

    async def _cancel_scan_task(self) -> None:
        task, self._scan_task = self._scan_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def reset(self) -> bool:
        """Clear the result and error.

        No-op when neither is present. The camera stays off until the
        next start().

        Returns:
            True if anything was cleared
        """
        if self._result is None and self.session.last_error is None:
            return False

        self._result = None
        self.session.last_error = None
        self.session.is_loading = False
        self._set_state(ScanState.IDLE)
        return True

    # ==================== Decode Loop ====================

    async def _scan_loop(self) -> None:
        """Poll the detector until a code is decoded or scanning stops."""
        try:
            while self.session.is_scanning:
                try:
                    payload = await self._attempt_decode()
                except Exception as e:
                    logger.error(f"Frame capture failed: {e}")
                    self.session.release()
                    self.session.last_error = self.CAMERA_FAILED_MESSAGE
                    self._set_state(ScanState.ERROR)
                    return
                if payload is not None and self.session.is_scanning:
                    await self._handle_detected(payload)
                    return
                await asyncio.sleep(self.poll_interval)
        finally:
            self.session.release()

    async def _attempt_decode(self) -> Optional[str]:
        """Capture the current frame and try to decode a QR code.

        Returns:
            First decoded payload, or None
        """
        stream = self.session.stream
        if stream is None:
            return None

        width, height = stream.dimensions()
        if width == 0 or height == 0:
            logger.debug("Video not ready, retrying")
            return None

        frame = await stream.read()
        if frame is None:
            return None

        raster = self.frame_buffer.draw(frame, width, height)

        try:
            values = await self.detector.detect(raster)
        except Exception as e:
            logger.debug(f"QR detection failed: {e}")
            return None

        return values[0] if values else None

    async def _handle_detected(self, payload: str) -> None:
        """Halt polling and verify a decoded payload."""
        logger.info("QR code detected")
        self.session.is_scanning = False
        self._set_state(ScanState.VERIFYING)
        await self._verify(payload)

    # ==================== Verification ====================

    async def _verify(self, payload: str) -> Optional[ScanResult]:
        """Verify payload, store the outcome and release the camera."""
        self.session.is_loading = True
        result = None
        try:
            result = await self.client.verify(payload)
            self._result = result
            logger.info(f"Ticket {result.status.value}")
        except Exception as e:
            logger.error(f"Error verifying QR code: {e}")
            self.session.last_error = self.VERIFY_FAILED_MESSAGE
        finally:
            self.session.release()
            self.session.is_loading = False
            if self._state == ScanState.VERIFYING:
                self._set_state(ScanState.IDLE)
        return result

    async def manual_entry(self, text: Optional[str]) -> Optional[ScanResult]:
        """Verify manually entered text as if it had been decoded.

        Ignored while scanning or verifying, and for empty text.

        Returns:
            The verification result, or None if ignored or failed
        """
        if not self.can_manual_entry:
            logger.warning("Manual entry ignored while scanning")
            return None
        if not text:
            return None

        self._result = None
        self.session.last_error = None
        self._set_state(ScanState.VERIFYING)
        return await self._verify(text)
