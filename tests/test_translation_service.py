import asyncio
import io
from pathlib import Path

import pytest

from app.core.errors import DownloadError, ProviderNotConfiguredError, ValidationError
from app.services.downloads import TemporaryDownload, temporary_download_path
from app.services.translation import TranslationRelayService


class FailingStream(io.BytesIO):
    def read(self, size: int | None = -1) -> bytes:
        raise OSError("disk vanished")


@pytest.mark.asyncio
async def test_concurrent_downloads_use_distinct_temp_files(fake_deepl, tmp_path: Path) -> None:
    service = TranslationRelayService(fake_deepl, download_dir=tmp_path)

    downloads = await asyncio.gather(
        *(service.download_document("doc-1", "key-1", "result.pdf") for _ in range(5))
    )

    paths = {download.path for download in downloads}
    assert len(paths) == 5
    for download in downloads:
        download.discard()
    assert list(tmp_path.iterdir()) == []


def test_temporary_download_path_keeps_basename(tmp_path: Path) -> None:
    first = temporary_download_path(tmp_path, "nested/result.pdf")
    second = temporary_download_path(tmp_path, "result.pdf")

    assert first.parent == tmp_path
    assert first.name.endswith("-result.pdf")
    assert first != second


@pytest.mark.asyncio
async def test_iter_chunks_streams_whole_file_then_discards(tmp_path: Path) -> None:
    path = tmp_path / "doc.pdf"
    path.write_bytes(b"abcdefghij")
    download = TemporaryDownload(path, "doc.pdf", chunk_size=3)

    stream = await download.open()
    chunks = [chunk async for chunk in download.iter_chunks(stream)]

    assert chunks == [b"abc", b"def", b"ghi", b"j"]
    assert download.discarded
    assert not path.exists()


@pytest.mark.asyncio
async def test_iter_chunks_discards_on_read_error(tmp_path: Path) -> None:
    path = tmp_path / "doc.pdf"
    path.write_bytes(b"payload")
    download = TemporaryDownload(path, "doc.pdf")

    with pytest.raises(OSError):
        async for _ in download.iter_chunks(FailingStream()):
            pass

    assert not path.exists()


@pytest.mark.asyncio
async def test_iter_chunks_discards_when_client_disconnects(tmp_path: Path) -> None:
    path = tmp_path / "doc.pdf"
    path.write_bytes(b"0123456789")
    download = TemporaryDownload(path, "doc.pdf", chunk_size=2)

    chunks = download.iter_chunks(await download.open())
    assert await chunks.__anext__() == b"01"
    await chunks.aclose()

    assert not path.exists()


def test_discard_runs_once(tmp_path: Path) -> None:
    path = tmp_path / "doc.pdf"
    path.write_bytes(b"x")
    download = TemporaryDownload(path, "doc.pdf")

    download.discard()
    path.write_bytes(b"recreated")
    download.discard()

    assert path.exists()


@pytest.mark.asyncio
async def test_download_failure_raises_after_cleanup(fake_deepl, tmp_path: Path) -> None:
    fake_deepl.errors["download_document"] = RuntimeError("connection reset")
    service = TranslationRelayService(fake_deepl, download_dir=tmp_path)

    with pytest.raises(DownloadError) as exc:
        await service.download_document("doc-1", "key-1", "result.pdf")

    assert exc.value.details == "connection reset"
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_validation_runs_before_provider_check(tmp_path: Path) -> None:
    service = TranslationRelayService(None, download_dir=tmp_path)

    with pytest.raises(ValidationError):
        await service.translate_text("", target_lang="DE")
    with pytest.raises(ProviderNotConfiguredError):
        await service.translate_text("Hello", target_lang="DE")


@pytest.mark.asyncio
async def test_upload_rejects_missing_file(fake_deepl, tmp_path: Path) -> None:
    service = TranslationRelayService(fake_deepl, download_dir=tmp_path)

    with pytest.raises(ValidationError):
        await service.upload_document(None, filename=None, target_lang="DE")
    assert fake_deepl.calls == []


def test_content_disposition_quotes_plain_names(tmp_path: Path) -> None:
    download = TemporaryDownload(tmp_path / "x", "result.pdf")
    assert download.content_disposition == 'attachment; filename="result.pdf"'


def test_content_disposition_encodes_non_latin_names(tmp_path: Path) -> None:
    download = TemporaryDownload(tmp_path / "x", "报告.pdf")
    assert download.content_disposition == "attachment; filename*=UTF-8''%E6%8A%A5%E5%91%8A.pdf"
