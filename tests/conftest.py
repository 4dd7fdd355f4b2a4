import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest


def _ensure_local_backend_on_path() -> None:
    root_dir = Path(__file__).resolve().parents[1]
    if str(root_dir) not in sys.path:
        sys.path.insert(0, str(root_dir))


_ensure_local_backend_on_path()

from fastapi.testclient import TestClient  # noqa: E402

from app.api.deps import get_deepl_client  # noqa: E402
from app.core.app import create_app  # noqa: E402
from app.core.config import AppSettings  # noqa: E402
from app.integrations.deepl import DocumentHandle  # noqa: E402


class FakeDeepLClient:
    """In-memory stand-in for DeepLClient that records every call."""

    def __init__(
        self,
        *,
        translated_text: str = "Hallo",
        document: bytes = b"%PDF-1.4 translated",
        status_payload: dict[str, Any] | None = None,
    ) -> None:
        self.translated_text = translated_text
        self.document = document
        self.status_payload = status_payload or {
            "status": "done",
            "billedCharacters": 42,
        }
        self.errors: dict[str, Exception] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.destinations: list[Path] = []

    def calls_for(self, name: str) -> list[dict[str, Any]]:
        return [kwargs for call, kwargs in self.calls if call == name]

    async def translate_text(
        self, text: str, *, target_lang: str, source_lang: str | None = None
    ) -> str:
        self.calls.append(
            ("translate_text", {"text": text, "target_lang": target_lang, "source_lang": source_lang})
        )
        self._maybe_fail("translate_text")
        return self.translated_text

    async def upload_document(
        self,
        content: bytes,
        *,
        filename: str,
        target_lang: str | None,
        source_lang: str | None = None,
    ) -> DocumentHandle:
        self.calls.append(
            (
                "upload_document",
                {
                    "content": content,
                    "filename": filename,
                    "target_lang": target_lang,
                    "source_lang": source_lang,
                },
            )
        )
        self._maybe_fail("upload_document")
        return DocumentHandle(document_id="doc-1", document_key="key-1")

    async def get_document_status(self, handle: DocumentHandle) -> dict[str, Any]:
        self.calls.append(("get_document_status", {"handle": handle}))
        self._maybe_fail("get_document_status")
        return dict(self.status_payload)

    async def download_document(self, handle: DocumentHandle, destination: Path) -> None:
        path = Path(destination)
        self.calls.append(("download_document", {"handle": handle, "destination": path}))
        self.destinations.append(path)
        # Leave a partial file behind before failing, like an interrupted transfer.
        path.write_bytes(self.document[:4])
        self._maybe_fail("download_document")
        path.write_bytes(self.document)

    def _maybe_fail(self, name: str) -> None:
        error = self.errors.get(name)
        if error is not None:
            raise error


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(API_KEY=None, DOWNLOAD_TEMP_DIR=str(tmp_path))


@pytest.fixture
def fake_deepl() -> FakeDeepLClient:
    return FakeDeepLClient()


@pytest.fixture
def client(settings: AppSettings, fake_deepl: FakeDeepLClient) -> Iterator[TestClient]:
    app = create_app(settings)
    app.dependency_overrides[get_deepl_client] = lambda: fake_deepl

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
