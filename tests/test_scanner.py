"""Tests for the QR code scanner state machine."""

import asyncio
from typing import List, Optional

import numpy as np
import pytest

from ticketscan.capture.mock_camera import MockCamera
from ticketscan.detection.qr_detector import NullDetector, QRDetector
from ticketscan.models.ticket import ScanResult, ScanState, TicketStatus
from ticketscan.scanner.client import VerificationError
from ticketscan.scanner.scanner import QrCodeScanner
from tests.conftest import wait_for, wait_for_state

POLL = 0.001


class FakeDetector(QRDetector):
    """Returns values after a number of empty attempts."""

    name = "fake"

    def __init__(self, values: Optional[List[str]] = None, misses: int = 0, error: Optional[Exception] = None):
        self.values = values or []
        self.misses = misses
        self.error = error
        self.calls = 0
        self.frames = []

    async def detect(self, frame: np.ndarray) -> List[str]:
        self.calls += 1
        self.frames.append(frame)
        if self.error is not None:
            raise self.error
        if self.calls <= self.misses:
            return []
        return list(self.values)


def make_scanner(verify_client, camera=None, detector=None):
    return QrCodeScanner(
        verify_client,
        camera=camera if camera is not None else MockCamera(),
        detector=detector,
        poll_interval=POLL,
    )


@pytest.mark.asyncio
async def test_initial_state(verify_client):
    scanner = make_scanner(verify_client)
    assert scanner.state == ScanState.IDLE
    assert scanner.result is None
    assert scanner.error is None
    assert scanner.has_camera
    assert not scanner.is_scanning
    assert not scanner.is_loading


@pytest.mark.asyncio
async def test_camera_denied_enters_error(verify_client):
    camera = MockCamera(deny=True)
    scanner = make_scanner(verify_client, camera=camera)

    await scanner.start()

    assert scanner.state == ScanState.ERROR
    assert scanner.error == QrCodeScanner.CAMERA_FAILED_MESSAGE
    assert not scanner.session.has_stream
    assert not scanner.is_scanning
    assert camera.streams == []
    verify_client.verify.assert_not_awaited()


@pytest.mark.asyncio
async def test_playback_failure_releases_stream(verify_client):
    camera = MockCamera(fail_play=True)
    scanner = make_scanner(verify_client, camera=camera)

    await scanner.start()

    assert scanner.state == ScanState.ERROR
    assert not scanner.session.has_stream
    assert camera.streams[0].stop_count == 1


@pytest.mark.asyncio
async def test_decode_verifies_and_releases_camera_once(verify_client):
    camera = MockCamera()
    detector = FakeDetector(values=["VALID-1", "VALID-2"], misses=2)
    scanner = make_scanner(verify_client, camera=camera, detector=detector)

    await scanner.start()
    assert scanner.state == ScanState.SCANNING
    result = await scanner.wait()

    assert result == ScanResult(TicketStatus.VALID, "Ticket valid")
    assert scanner.result == result
    assert scanner.state == ScanState.IDLE
    assert scanner.error is None
    assert not scanner.is_loading
    assert not scanner.is_scanning
    assert detector.calls == 3
    verify_client.verify.assert_awaited_once_with("VALID-1")
    assert camera.streams[0].stop_count == 1

    await scanner.close()
    assert camera.streams[0].stop_count == 1


@pytest.mark.asyncio
async def test_verify_failure_releases_camera_once(verify_client):
    verify_client.verify.side_effect = VerificationError("Connection error")
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera, detector=FakeDetector(values=["VALID-1"]))

    await scanner.start()
    result = await scanner.wait()

    assert result is None
    assert scanner.result is None
    assert scanner.error == QrCodeScanner.VERIFY_FAILED_MESSAGE
    assert scanner.state == ScanState.IDLE
    assert camera.streams[0].stop_count == 1
    verify_client.verify.assert_awaited_once()

    await scanner.close()
    assert camera.streams[0].stop_count == 1


@pytest.mark.asyncio
async def test_polling_stops_after_decode(verify_client):
    detector = FakeDetector(values=["abc"])
    scanner = make_scanner(verify_client, detector=detector)

    await scanner.start()
    await scanner.wait()
    await asyncio.sleep(POLL * 20)

    assert detector.calls == 1
    verify_client.verify.assert_awaited_once_with("abc")


@pytest.mark.asyncio
async def test_zero_dimensions_defer_decode(verify_client):
    camera = MockCamera(warmup_checks=3)
    detector = FakeDetector(values=["VALID-1"])
    scanner = make_scanner(verify_client, camera=camera, detector=detector)

    await scanner.start()
    await scanner.wait()

    assert detector.calls == 1
    assert camera.streams[0].dimension_checks == 4
    assert scanner.result is not None
    assert scanner.error is None


@pytest.mark.asyncio
async def test_frame_is_drawn_into_buffer(verify_client):
    frame = np.full((120, 160, 3), 7, dtype=np.uint8)
    detector = FakeDetector(values=["VALID-1"])
    scanner = make_scanner(verify_client, camera=MockCamera(frame=frame), detector=detector)

    await scanner.start()
    await scanner.wait()

    assert detector.frames[0].shape == (120, 160, 3)
    assert detector.frames[0] is scanner.frame_buffer.data


@pytest.mark.asyncio
async def test_missing_decode_capability_polls_silently(verify_client):
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera, detector=NullDetector())

    await scanner.start()
    await wait_for(lambda: camera.streams[0].dimension_checks >= 10)

    assert scanner.state == ScanState.SCANNING
    assert scanner.is_scanning
    assert scanner.error is None
    verify_client.verify.assert_not_awaited()

    await scanner.stop()
    assert scanner.state == ScanState.IDLE
    assert camera.streams[0].stop_count == 1


@pytest.mark.asyncio
async def test_detector_errors_do_not_stop_polling(verify_client):
    detector = FakeDetector(error=RuntimeError("decoder crashed"))
    scanner = make_scanner(verify_client, detector=detector)

    await scanner.start()
    await wait_for(lambda: detector.calls >= 5)

    assert scanner.state == ScanState.SCANNING
    assert scanner.error is None
    await scanner.stop()


@pytest.mark.asyncio
async def test_stop_is_repeatable(verify_client):
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera, detector=NullDetector())

    await scanner.start()
    await scanner.stop()
    await scanner.stop()

    assert camera.streams[0].stop_count == 1
    assert scanner.state == ScanState.IDLE
    assert scanner.result is None


@pytest.mark.asyncio
async def test_start_ignored_while_scanning(verify_client):
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera, detector=NullDetector())

    await scanner.start()
    await scanner.start()

    assert camera.open_count == 1
    await scanner.stop()


@pytest.mark.asyncio
async def test_restart_after_result(verify_client):
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera, detector=FakeDetector(values=["VALID-1"]))

    await scanner.start()
    await scanner.wait()
    await scanner.start()

    assert scanner.result is None
    await scanner.wait()

    assert camera.open_count == 2
    assert [s.stop_count for s in camera.streams] == [1, 1]
    assert verify_client.verify.await_count == 2


@pytest.mark.asyncio
async def test_stop_while_verifying_lets_call_finish(verify_client):
    gate = asyncio.Event()

    async def slow_verify(payload):
        await gate.wait()
        return ScanResult.for_status(TicketStatus.VALID)

    verify_client.verify.side_effect = slow_verify
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera, detector=FakeDetector(values=["VALID-1"]))

    await scanner.start()
    await wait_for_state(scanner, ScanState.VERIFYING)
    assert scanner.is_loading

    await scanner.stop()
    assert camera.streams[0].stop_count == 1

    gate.set()
    result = await scanner.wait()

    assert result is not None and result.is_valid
    assert camera.streams[0].stop_count == 1
    assert scanner.state == ScanState.IDLE


@pytest.mark.asyncio
async def test_close_releases_camera_while_scanning(verify_client):
    camera = MockCamera()

    async with make_scanner(verify_client, camera=camera, detector=NullDetector()) as scanner:
        await scanner.start()
        assert scanner.session.has_stream

    assert camera.streams[0].stop_count == 1
    assert not scanner.session.has_stream
    assert scanner.state == ScanState.IDLE


@pytest.mark.asyncio
async def test_close_cancels_verification(verify_client):
    async def hanging_verify(payload):
        await asyncio.Event().wait()

    verify_client.verify.side_effect = hanging_verify
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera, detector=FakeDetector(values=["VALID-1"]))

    await scanner.start()
    await wait_for_state(scanner, ScanState.VERIFYING)
    await scanner.close()

    assert camera.streams[0].stop_count == 1
    assert not scanner.is_loading
    assert scanner.state == ScanState.IDLE


@pytest.mark.asyncio
async def test_reset_without_result_is_noop(verify_client):
    scanner = make_scanner(verify_client)

    assert scanner.reset() is False
    assert scanner.state == ScanState.IDLE
    assert scanner.result is None
    assert scanner.error is None


@pytest.mark.asyncio
async def test_reset_clears_error_and_keeps_camera_off(verify_client):
    camera = MockCamera(deny=True)
    scanner = make_scanner(verify_client, camera=camera)

    await scanner.start()
    assert scanner.reset() is True

    assert scanner.state == ScanState.IDLE
    assert scanner.error is None
    assert camera.open_count == 1
    assert not scanner.session.has_stream


@pytest.mark.asyncio
async def test_reset_clears_result(verify_client):
    scanner = make_scanner(verify_client, detector=FakeDetector(values=["VALID-1"]))

    await scanner.start()
    await scanner.wait()
    assert scanner.reset() is True

    assert scanner.result is None
    assert scanner.state == ScanState.IDLE
    assert scanner.reset() is False


@pytest.mark.asyncio
async def test_manual_entry_bypasses_camera(verify_client):
    verify_client.verify.return_value = ScanResult.for_status(TicketStatus.INVALID)
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera)

    result = await scanner.manual_entry("abc")

    assert result == ScanResult(TicketStatus.INVALID, "Ticket invalid")
    assert scanner.result == result
    assert scanner.state == ScanState.IDLE
    assert camera.open_count == 0
    verify_client.verify.assert_awaited_once_with("abc")


@pytest.mark.asyncio
async def test_manual_entry_rejected_while_scanning(verify_client):
    scanner = make_scanner(verify_client, detector=NullDetector())

    await scanner.start()
    result = await scanner.manual_entry("VALID-1")

    assert result is None
    verify_client.verify.assert_not_awaited()
    assert scanner.state == ScanState.SCANNING
    await scanner.stop()


@pytest.mark.asyncio
async def test_manual_entry_ignores_empty_text(verify_client):
    scanner = make_scanner(verify_client)

    assert await scanner.manual_entry("") is None
    assert await scanner.manual_entry(None) is None
    verify_client.verify.assert_not_awaited()


@pytest.mark.asyncio
async def test_manual_entry_failure_sets_error(verify_client):
    verify_client.verify.side_effect = VerificationError("HTTP 500")
    scanner = make_scanner(verify_client)

    assert await scanner.manual_entry("VALID-1") is None
    assert scanner.error == QrCodeScanner.VERIFY_FAILED_MESSAGE
    assert not scanner.is_loading


@pytest.mark.asyncio
async def test_no_camera_falls_back_to_manual(verify_client):
    scanner = QrCodeScanner(verify_client, camera=None)

    assert not scanner.has_camera
    assert scanner.state == ScanState.ERROR
    assert scanner.error == QrCodeScanner.CAMERA_UNSUPPORTED_MESSAGE

    await scanner.start()
    assert scanner.state == ScanState.ERROR

    result = await scanner.manual_entry("VALID-9")
    assert result is not None and result.is_valid
    assert scanner.error is None


@pytest.mark.asyncio
async def test_state_callbacks(verify_client):
    states = []
    scanner = make_scanner(verify_client, detector=FakeDetector(values=["VALID-1"]))
    scanner.add_callback(states.append)

    await scanner.start()
    await scanner.wait()

    assert states == [
        ScanState.REQUESTING_CAMERA,
        ScanState.SCANNING,
        ScanState.VERIFYING,
        ScanState.IDLE,
    ]


@pytest.mark.asyncio
async def test_capture_failure_is_recoverable(verify_client):
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera, detector=NullDetector())

    await scanner.start()
    stream = camera.streams[0]

    async def broken_read():
        raise RuntimeError("device unplugged")

    stream.read = broken_read
    await scanner.wait()

    assert scanner.state == ScanState.ERROR
    assert scanner.error == QrCodeScanner.CAMERA_FAILED_MESSAGE
    assert not scanner.is_scanning
    assert stream.stop_count == 1
    assert scanner._scan_task.exception() is None

    result = await scanner.manual_entry("VALID1")
    assert result is not None and result.is_valid

    await scanner.start()
    assert scanner.state == ScanState.SCANNING
    assert camera.open_count == 2
    await scanner.stop()


@pytest.mark.asyncio
async def test_reset_after_capture_failure_allows_restart(verify_client):
    camera = MockCamera()
    scanner = make_scanner(verify_client, camera=camera, detector=NullDetector())

    await scanner.start()
    camera.streams[0].read = None  # calling it raises TypeError
    await scanner.wait()

    assert scanner.reset() is True
    assert scanner.state == ScanState.IDLE

    await scanner.start()
    assert scanner.state == ScanState.SCANNING
    await scanner.stop()
    assert camera.streams[1].stop_count == 1
