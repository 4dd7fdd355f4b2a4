from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from os import PathLike
from typing import Any
from urllib.parse import quote

import httpx

from app.core.config import AppSettings

logger = logging.getLogger(__name__)

DEEPL_SERVER_URL = "https://api.deepl.com"
DEEPL_SERVER_URL_FREE = "https://api-free.deepl.com"

_STATUS_FIELDS: dict[str, str] = {
    "status": "status",
    "seconds_remaining": "secondsRemaining",
    "billed_characters": "billedCharacters",
    "error_message": "errorMessage",
}

_STATUS_MESSAGES: dict[int, str] = {
    403: "Authorization failure, check the DeepL API key.",
    429: "Too many requests, DeepL servers are under high load.",
    456: "DeepL quota for this billing period has been exceeded.",
}


class DeepLError(RuntimeError):
    """Raised when a DeepL API call fails."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


@dataclass(frozen=True)
class DocumentHandle:
    """Opaque identifiers DeepL issues for an uploaded document."""

    document_id: str
    document_key: str


def server_url_for_key(auth_key: str) -> str:
    """Free-tier keys carry a ``:fx`` suffix and live on a separate host."""
    return DEEPL_SERVER_URL_FREE if auth_key.endswith(":fx") else DEEPL_SERVER_URL


class DeepLClient:
    """Thin async wrapper around the DeepL v2 REST API."""

    def __init__(
        self,
        settings: AppSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not settings.deepl_api_key:
            raise ValueError("DeepL API key is not configured.")

        auth_key = settings.deepl_api_key.get_secret_value()
        base_url = (settings.deepl_server_url or server_url_for_key(auth_key)).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"DeepL-Auth-Key {auth_key}"},
            timeout=httpx.Timeout(settings.deepl_timeout_seconds),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def translate_text(
        self,
        text: str,
        *,
        target_lang: str,
        source_lang: str | None = None,
    ) -> str:
        """Translate ``text``; a ``None`` source language lets DeepL detect it."""
        body: dict[str, Any] = {"text": [text], "target_lang": target_lang}
        if source_lang:
            body["source_lang"] = source_lang

        response = await self._request("POST", "/v2/translate", json=body)
        translations = response.json().get("translations") or []
        if not translations:
            raise DeepLError("DeepL returned no translations.", status_code=response.status_code)
        return translations[0].get("text", "")

    async def upload_document(
        self,
        content: bytes,
        *,
        filename: str,
        target_lang: str | None,
        source_lang: str | None = None,
    ) -> DocumentHandle:
        data: dict[str, str] = {"filename": filename}
        if target_lang:
            data["target_lang"] = target_lang
        if source_lang:
            data["source_lang"] = source_lang

        response = await self._request(
            "POST",
            "/v2/document",
            data=data,
            files={"file": (filename, content)},
        )
        payload = response.json()
        return DocumentHandle(
            document_id=payload["document_id"],
            document_key=payload["document_key"],
        )

    async def get_document_status(self, handle: DocumentHandle) -> dict[str, Any]:
        """Return the job status as ``{status, secondsRemaining, billedCharacters, errorMessage}``.

        Optional fields DeepL leaves out are omitted from the result as well.
        """
        response = await self._request(
            "POST",
            f"/v2/document/{_path_segment(handle.document_id)}",
            data={"document_key": handle.document_key},
        )
        payload = response.json()
        return {
            field: payload[key]
            for key, field in _STATUS_FIELDS.items()
            if payload.get(key) is not None
        }

    async def download_document(
        self,
        handle: DocumentHandle,
        destination: str | PathLike[str],
    ) -> None:
        """Stream the translated document into ``destination``."""
        loop = asyncio.get_running_loop()
        try:
            async with self._client.stream(
                "POST",
                f"/v2/document/{_path_segment(handle.document_id)}/result",
                data={"document_key": handle.document_key},
            ) as response:
                if response.status_code != 200:
                    await response.aread()
                    raise _error_from_response(response)
                output = await loop.run_in_executor(None, open, destination, "wb")
                try:
                    async for chunk in response.aiter_bytes():
                        await loop.run_in_executor(None, output.write, chunk)
                finally:
                    await loop.run_in_executor(None, output.close)
        except httpx.HTTPError as exc:
            raise DeepLError(f"DeepL request failed: {exc}") from exc

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise DeepLError(f"DeepL request failed: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise _error_from_response(response)
        return response


def _path_segment(value: str) -> str:
    # Dots are escaped too, so ids like ".." cannot climb out of /v2/document/.
    return quote(value, safe="").replace(".", "%2E")


def _error_from_response(response: httpx.Response) -> DeepLError:
    details = _parse_error_body(response)
    message = None
    if isinstance(details, dict):
        message = details.get("message")
        if details.get("detail"):
            message = f"{message}, {details['detail']}" if message else details["detail"]
    prefix = _STATUS_MESSAGES.get(response.status_code)
    if prefix and message:
        message = f"{prefix} {message}"
    message = message or prefix or f"DeepL request failed with status {response.status_code}."
    logger.debug("DeepL responded %s: %s", response.status_code, message)
    return DeepLError(str(message), status_code=response.status_code, details=details)


def _parse_error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        text = response.text
        return text or None
