from __future__ import annotations

import logging
import os
from typing import Any

from app.core.errors import (
    DownloadError,
    ProviderNotConfiguredError,
    StatusError,
    TranslationError,
    UploadError,
    ValidationError,
)
from app.integrations.deepl import DeepLClient, DeepLError, DocumentHandle
from app.services.downloads import DEFAULT_CHUNK_SIZE, TemporaryDownload, temporary_download_path

logger = logging.getLogger(__name__)


class TranslationRelayService:
    """Validate relay requests and forward them to the translation provider."""

    def __init__(
        self,
        client: DeepLClient | None,
        *,
        download_dir: str | os.PathLike[str],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._client = client
        self._download_dir = download_dir
        self._chunk_size = chunk_size

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def translate_text(
        self,
        text: str | None,
        *,
        target_lang: str | None,
        source_lang: str | None = None,
    ) -> str:
        if not text or not target_lang:
            raise ValidationError("Missing required fields: text or target_lang")
        client = self._require_client()

        # Blank source languages fall back to provider-side detection.
        source = source_lang if source_lang and source_lang.strip() else None
        try:
            return await client.translate_text(text, target_lang=target_lang, source_lang=source)
        except Exception as exc:
            logger.exception("Translation error (target=%s)", target_lang)
            raise TranslationError() from exc

    async def upload_document(
        self,
        content: bytes | None,
        *,
        filename: str | None,
        target_lang: str | None,
    ) -> DocumentHandle:
        """Forward an in-memory upload; the source language is always auto-detected."""
        if content is None or not filename:
            raise ValidationError("No file uploaded")
        client = self._require_client()

        logger.info("Uploading document %s (%d bytes, target=%s)", filename, len(content), target_lang)
        try:
            handle = await client.upload_document(
                content,
                filename=filename,
                target_lang=target_lang,
            )
        except DeepLError as exc:
            logger.error("DeepL upload error: %s", exc.details or exc.message)
            raise UploadError(details=exc.details) from exc
        except Exception as exc:
            logger.exception("DeepL upload error")
            raise UploadError() from exc

        logger.info("Document handle issued: %s", handle.document_id)
        return handle

    async def get_document_status(
        self,
        document_id: str | None,
        document_key: str | None,
    ) -> dict[str, Any]:
        if not document_id or not document_key:
            raise ValidationError("Missing document_id or document_key")
        client = self._require_client()

        handle = DocumentHandle(document_id=document_id, document_key=document_key)
        try:
            return await client.get_document_status(handle)
        except Exception as exc:
            logger.exception("DeepL document status error (document_id=%s)", document_id)
            raise StatusError() from exc

    async def download_document(
        self,
        document_id: str | None,
        document_key: str | None,
        output_file_name: str | None,
    ) -> TemporaryDownload:
        """Fetch the translated document into a fresh temporary file.

        On failure the temporary file is discarded before ``DownloadError`` is
        raised, so the caller only ever owns a fully written file.
        """
        if not document_id or not document_key or not output_file_name:
            raise ValidationError("Missing parameters")
        client = self._require_client()

        handle = DocumentHandle(document_id=document_id, document_key=document_key)
        download = TemporaryDownload(
            temporary_download_path(self._download_dir, output_file_name),
            output_file_name,
            chunk_size=self._chunk_size,
        )
        logger.info("Downloading document %s to temporary file %s", document_id, download.path)
        try:
            await client.download_document(handle, download.path)
        except Exception as exc:
            logger.exception("DeepL download error (document_id=%s)", document_id)
            download.discard()
            raise DownloadError(details=str(exc)) from exc

        logger.info("Document %s downloaded, sending to client", document_id)
        return download

    def _require_client(self) -> DeepLClient:
        if self._client is None:
            raise ProviderNotConfiguredError()
        return self._client
