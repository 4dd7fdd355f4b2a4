"""Client-facing error taxonomy for the relay.

Every error carries the HTTP status it maps to, a short fixed message and an
optional ``details`` payload. Provider diagnostics stay in the server log; only
``message`` and ``details`` reach the caller.
"""

from __future__ import annotations

from typing import Any

from fastapi import status


class RelayError(Exception):
    """Base class for errors rendered as ``{"error": ..., "details": ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None, *, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(RelayError):
    """Caller omitted a required field."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing parameters"


class ProviderNotConfiguredError(RelayError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Translation provider is not configured"


class TranslationError(RelayError):
    default_message = "Failed to translate text"


class UploadError(RelayError):
    default_message = "Document upload failed"


class DocumentTranslationError(RelayError):
    default_message = "Document translation failed"


class StatusError(RelayError):
    default_message = "Failed to get document status"


class DownloadError(RelayError):
    default_message = "Download from DeepL failed"


class StreamingError(RelayError):
    default_message = "Error streaming file"


class DocumentDownloadError(RelayError):
    default_message = "Download failed"
