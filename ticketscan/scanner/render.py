# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Text rendering of the scanner panel."""

from typing import List

from ticketscan.models.ticket import ScanResult

TITLE = "📱 QR Code Scanner"
SUBTITLE = "Scan QR codes to verify tickets"

CAMERA_INSTRUCTIONS = [
    "Start scanning to activate the camera",
    "Point your camera at a QR code",
    "Wait for automatic detection",
    "View the verification result",
]

NO_CAMERA_INSTRUCTIONS = [
    "Camera not available on this device",
    "Use manual entry to enter QR data",
    "Or try on a device with camera support",
]


def render_result(result: ScanResult) -> str:
    icon = "✅" if result.is_valid else "❌"
    return f"{icon} {result.message}"


def render_error(error: str) -> str:
    return f"⚠️  {error}"


def render_instructions(has_camera: bool) -> List[str]:
    """Usage instructions shown while idle with nothing to report."""
    lines = ["📋 How to use:"]
    items = CAMERA_INSTRUCTIONS if has_camera else NO_CAMERA_INSTRUCTIONS
    lines.extend(f"  • {item}" for item in items)
    if not has_camera:
        lines.append(
            "💡 This device doesn't support camera access. "
            "You can still test verification with manual entry."
        )
    return lines


def render(scanner) -> str:
    """Render the scanner panel for a QrCodeScanner."""
    lines = [TITLE, SUBTITLE, ""]

    if scanner.is_loading:
        lines.append("⏳ Verifying...")
    elif scanner.is_scanning:
        lines.append("🎯 Scanning... point the camera at a QR code")

    if scanner.result is not None:
        lines.append(render_result(scanner.result))

    if scanner.error is not None:
        lines.append(render_error(scanner.error))

    if not scanner.is_scanning and scanner.result is None and scanner.error is None:
        lines.extend(render_instructions(scanner.has_camera))

    return "\n".join(lines)
