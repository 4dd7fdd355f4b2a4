from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator
from pathlib import Path, PurePath
from typing import BinaryIO
from urllib.parse import quote
from uuid import uuid4

from app.services.mime import mime_type_for_filename

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def temporary_download_path(directory: str | os.PathLike[str], output_file_name: str) -> Path:
    """Return ``<directory>/<uuid4>-<output_file_name>``."""
    return Path(directory) / f"{uuid4()}-{PurePath(output_file_name).name}"


class TemporaryDownload:
    """A translated document staged on disk for exactly one download request.

    The file is removed by :meth:`discard`, which every exit path calls. Only
    the first call touches the filesystem, so the file is deleted at most once
    no matter how many failure branches fire.
    """

    def __init__(
        self,
        path: Path,
        filename: str,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.path = path
        self.filename = filename
        self.media_type = mime_type_for_filename(filename)
        self._chunk_size = chunk_size
        self._discarded = False

    @property
    def content_disposition(self) -> str:
        try:
            self.filename.encode("latin-1")
        except UnicodeEncodeError:
            return f"attachment; filename*=UTF-8''{quote(self.filename)}"
        return f'attachment; filename="{self.filename}"'

    @property
    def discarded(self) -> bool:
        return self._discarded

    async def open(self) -> BinaryIO:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, open, self.path, "rb")

    async def iter_chunks(self, stream: BinaryIO) -> AsyncIterator[bytes]:
        """Yield the file in chunks, then close and discard it."""
        loop = asyncio.get_running_loop()
        try:
            while True:
                chunk = await loop.run_in_executor(None, stream.read, self._chunk_size)
                if not chunk:
                    break
                yield chunk
        except OSError as exc:
            logger.error("Error streaming file %s: %s", self.path, exc)
            raise
        finally:
            stream.close()
            self.discard()

    def discard(self) -> None:
        # Runs from generator finalizers during cancellation, so it must not await.
        if self._discarded:
            return
        self._discarded = True
        try:
            os.remove(self.path)
        except FileNotFoundError:
            logger.debug("Temporary file already absent: %s", self.path)
        except OSError as exc:
            logger.error("Error deleting temp file %s: %s", self.path, exc)
        else:
            logger.info("Temporary file deleted: %s", self.path)
