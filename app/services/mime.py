from __future__ import annotations

from pathlib import PurePath

DEFAULT_MIME_TYPE = "application/octet-stream"

_MIME_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".txt": "text/plain",
    ".html": "text/html",
    ".htm": "text/html",
}


def resolve_mime_type(extension: str) -> str:
    """Map a file extension such as ``.PDF`` to its content type."""
    return _MIME_TYPES.get(extension.lower(), DEFAULT_MIME_TYPE)


def mime_type_for_filename(filename: str) -> str:
    return resolve_mime_type(PurePath(filename).suffix)
