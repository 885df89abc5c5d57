"""Error taxonomy for the detection endpoint.

Every expected failure is client-caused and maps to HTTP 400.  The HTTP
layer renders these as ``{"error": ..., "code": ...}`` bodies.
"""

from __future__ import annotations


class LexisError(Exception):
    """Base class for errors that are reported to the caller."""

    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"
    status_code: int = 500

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidJSONError(LexisError):
    """Body is not valid JSON, not an object, or ``text`` is not a string."""

    code = "INVALID_JSON"
    message = "Invalid JSON format"
    status_code = 400


class EmptyTextError(LexisError):
    code = "EMPTY_TEXT"
    message = "Text cannot be empty"
    status_code = 400


class DetectionFailedError(LexisError):
    """No configured target language was matched with enough confidence."""

    code = "DETECTION_FAILED"
    message = "Could not detect language with sufficient confidence"
    status_code = 400
