"""Errors raised by the revival core. Provider (transport/auth) errors are not wrapped."""

from typing import Optional

NO_BLOCK_FOUND = "no structured block found"
MALFORMED_PAYLOAD = "malformed payload"

_PERMISSION_MARKERS = ("403", "permission", "PERMISSION_DENIED")


class RevivalError(Exception):
    """Base class for content revival failures."""


class ExtractionError(RevivalError):
    """The finished stream held no usable structured block. Not retryable."""

    def __init__(self, reason: str, raw: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.raw = raw


class OverlayGenerationError(RevivalError):
    """Image overlay could not be produced. Leaves the report untouched."""


class AnalysisCancelled(RevivalError):
    """Stream consumption was aborted before it finished."""


class MissingApiKeyError(RevivalError):
    """No Gemini API key is configured."""


def is_permission_error(error: BaseException) -> bool:
    """True when the provider rejected the credential (re-selecting a key may help)."""
    message = str(error)
    return any(marker in message for marker in _PERMISSION_MARKERS)
