# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Scanner command line entry point.

Scans one QR code from the camera (or verifies manually entered text)
against the verification service and prints the result.

Usage:
    python -m ticketscan.cli
    python -m ticketscan.cli --manual VALID-123
    python -m ticketscan.cli --mock-image ticket.png --url http://localhost:8000

Exit status is 0 for a valid ticket and 1 otherwise.
"""

import argparse
import asyncio
import logging
from typing import Optional

from ticketscan.capture.base import Camera, CameraConstraints
from ticketscan.capture.mock_camera import MockCamera
from ticketscan.capture.opencv_camera import OpenCVCamera
from ticketscan.config import Settings, get_settings
from ticketscan.detection.qr_detector import get_detector
from ticketscan.main import setup_logging
from ticketscan.models.ticket import ScanState
from ticketscan.scanner.client import VerificationClient
from ticketscan.scanner.render import render
from ticketscan.scanner.scanner import QrCodeScanner

logger = logging.getLogger(__name__)


def build_camera(args: argparse.Namespace, settings: Settings) -> Optional[Camera]:
    """Pick the camera implementation from the command line."""
    if args.no_camera:
        return None
    if args.mock_image:
        return MockCamera(image_path=args.mock_image)
    return OpenCVCamera(
        rear_device_index=settings.scanner.rear_device_index,
        front_device_index=settings.scanner.front_device_index,
    )


async def run_scan(args: argparse.Namespace, settings: Settings) -> int:
    """Run one scan or manual verification and print the panel.

    Returns:
        Process exit status
    """
    scanner_settings = settings.scanner
    client = VerificationClient(
        base_url=args.url or scanner_settings.verify_url,
        verify_path=scanner_settings.verify_path,
        timeout_seconds=scanner_settings.request_timeout_seconds,
    )
    constraints = CameraConstraints(
        facing_mode=scanner_settings.facing_mode,
        ideal_width=scanner_settings.ideal_width,
        ideal_height=scanner_settings.ideal_height,
    )

    async with client:
        async with QrCodeScanner(
            client,
            camera=build_camera(args, settings),
            detector=get_detector(scanner_settings.detector),
            constraints=constraints,
            poll_interval=scanner_settings.poll_interval_seconds,
        ) as scanner:
            if args.manual is not None:
                await scanner.manual_entry(args.manual)
            elif scanner.has_camera:
                def show_scanning(state: ScanState) -> None:
                    if state == ScanState.SCANNING:
                        print(render(scanner))

                scanner.add_callback(show_scanning)
                await scanner.start()
                await scanner.wait()

            print(render(scanner))
            result = scanner.result

    return 0 if result is not None and result.is_valid else 1


def main():
    """Main entry point for the scanner CLI."""
    parser = argparse.ArgumentParser(
        description="Ticket scanner - scan a QR code and verify it"
    )
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="Verification service URL (default: from settings)",
    )
    parser.add_argument(
        "--manual",
        type=str,
        default=None,
        metavar="TEXT",
        help="Verify TEXT instead of scanning with the camera",
    )
    parser.add_argument(
        "--mock-image",
        type=str,
        default=None,
        metavar="PATH",
        help="Use an image file as the camera",
    )
    parser.add_argument(
        "--no-camera",
        action="store_true",
        help="Run as if the device had no camera",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()
    setup_logging(args.log_level)

    try:
        exit_code = asyncio.run(run_scan(args, get_settings()))
    except KeyboardInterrupt:
        logger.info("Scan interrupted")
        exit_code = 130

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
