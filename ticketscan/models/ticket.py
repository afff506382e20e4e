# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Data models for ticket verification results and scanner state."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class TicketStatus(Enum):
    """Verification outcome for a payload."""

    VALID = "valid"
    INVALID = "invalid"

    @property
    def message(self) -> str:
        """Human-readable message returned alongside the status."""
        return TICKET_MESSAGES[self]


TICKET_MESSAGES = {
    TicketStatus.VALID: "Ticket valid",
    TicketStatus.INVALID: "Ticket invalid",
}


class ScanState(Enum):
    """Scanner state machine states."""

    IDLE = "idle"
    REQUESTING_CAMERA = "requesting_camera"
    SCANNING = "scanning"
    VERIFYING = "verifying"  # Decoded, waiting on the verify call
    ERROR = "error"  # Camera denied or unsupported


@dataclass(frozen=True)
class ScanResult:
    """Result of one verification call."""

    status: TicketStatus
    message: str

    @property
    def is_valid(self) -> bool:
        return self.status == TicketStatus.VALID

    @classmethod
    def for_status(cls, status: TicketStatus) -> "ScanResult":
        """Build the result carrying the fixed message for a status."""
        return cls(status=status, message=status.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "status": self.status.value,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanResult":
        """Create from a verify response body.

        Raises:
            ValueError: If status is missing or unknown, or message is not a string
        """
        status = TicketStatus(data.get("status"))
        message = data.get("message", status.message)
        if not isinstance(message, str):
            raise ValueError(f"Invalid message in response: {message!r}")
        return cls(status=status, message=message)
