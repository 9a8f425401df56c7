"""
Exception and diagnostic types for the stereo processing pipeline.

Only failures of the monocular stage abort a processing call. Everything
else (unrecognized colour encodings, degenerate geometry) degrades
gracefully and is reported through diagnostics attached to the output.
"""

from dataclasses import dataclass


class StereoProcError(Exception):
    """Base exception for all stereo processing errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class MonocularProcessingError(StereoProcError):
    """Raised when monocular processing of the left or right image fails."""
    pass


class CameraModelError(StereoProcError):
    """Raised when camera calibration data cannot be turned into a model."""
    pass


# Diagnostic codes
UNRECOGNIZED_COLOR_ENCODING = "unrecognized_color_encoding"


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal condition recorded on a produced artifact."""
    code: str
    message: str
