import logging
from typing import Any, BinaryIO

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

from app.api.deps import get_translation_service
from app.core.errors import (
    DocumentDownloadError,
    DocumentTranslationError,
    RelayError,
    StreamingError,
)
from app.schemas.translation import (
    DocumentDownloadRequest,
    DocumentHandlePayload,
    DocumentUploadResponse,
)
from app.services.downloads import TemporaryDownload
from app.services.translation import TranslationRelayService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/translate-document",
    response_model=DocumentUploadResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload a document for asynchronous translation.",
)
async def translate_document(
    file: UploadFile | None = File(default=None),
    target_lang: str | None = Form(default=None, alias="targetLang"),
    service: TranslationRelayService = Depends(get_translation_service),
) -> DocumentUploadResponse:
    try:
        content = await file.read() if file is not None else None
        handle = await service.upload_document(
            content,
            filename=file.filename if file is not None else None,
            target_lang=target_lang,
        )
    except RelayError:
        raise
    except Exception as exc:
        logger.exception("Document translation error")
        raise DocumentTranslationError() from exc

    return DocumentUploadResponse(
        document_id=handle.document_id,
        document_key=handle.document_key,
    )


@router.post(
    "/get-document-status",
    status_code=status.HTTP_200_OK,
    summary="Return the provider's status payload for a document job.",
)
async def get_document_status(
    payload: DocumentHandlePayload,
    service: TranslationRelayService = Depends(get_translation_service),
) -> dict[str, Any]:
    return await service.get_document_status(payload.document_id, payload.document_key)


@router.post(
    "/download-document",
    response_class=StreamingResponse,
    status_code=status.HTTP_200_OK,
    summary="Stream a translated document back as an attachment.",
)
async def download_document(
    payload: DocumentDownloadRequest,
    service: TranslationRelayService = Depends(get_translation_service),
) -> StreamingResponse:
    try:
        download = await service.download_document(
            payload.document_id,
            payload.document_key,
            payload.output_file_name,
        )
    except RelayError:
        raise
    except Exception as exc:
        logger.exception("Download error")
        raise DocumentDownloadError(details=str(exc)) from exc

    # Nothing has been sent yet, so a failure here can still become a JSON error.
    try:
        stream = await download.open()
    except OSError as exc:
        logger.error("Error streaming file %s: %s", download.path, exc)
        download.discard()
        raise StreamingError() from exc

    return TemporaryFileResponse(download, stream)


class TemporaryFileResponse(StreamingResponse):
    """Stream a staged download and discard it however the response ends."""

    def __init__(self, download: TemporaryDownload, stream: BinaryIO) -> None:
        super().__init__(
            download.iter_chunks(stream),
            headers={
                "Content-Disposition": download.content_disposition,
                "Content-Type": download.media_type,
            },
        )
        self._download = download
        self._stream = stream

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            # Covers disconnects that happen before the body iterator starts.
            self._stream.close()
            self._download.discard()
