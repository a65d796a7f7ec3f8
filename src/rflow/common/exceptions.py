"""Custom exceptions for rflow.

Provides a small hierarchy of exceptions with stable error codes
and structured details for logging.
"""

from typing import Any


class RFlowError(Exception):
    """Base exception for all rflow errors."""

    error_code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize exception with optional details.

        Args:
            message: Human-readable error message.
            details: Additional error details for debugging.
            cause: Original exception that caused this error.
        """
        self.message = message or self.message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# Decoding errors
class DecodeError(RFlowError):
    """Wire data could not be decoded."""

    error_code = "DECODE_ERROR"
    message = "Failed to decode flow data"


class InsufficientBytesError(DecodeError):
    """Buffer is shorter than the field being decoded."""

    error_code = "INSUFFICIENT_BYTES"
    message = "Not enough bytes"

    def __init__(self, needed: int, available: int) -> None:
        """Initialize with the requested width and the bytes left.

        Args:
            needed: Number of bytes the read required.
            available: Number of bytes remaining in the buffer.
        """
        self.needed = needed
        self.available = available
        super().__init__(
            f"not enough bytes (needed {needed}, got {available})",
            details={"needed": needed, "available": available},
        )


# Replay errors
class CaptureError(RFlowError):
    """Capture file could not be read."""

    error_code = "CAPTURE_ERROR"
    message = "Failed to read capture file"
