"""Streaming driver: byte-level progress and mid-flight abort."""
from __future__ import annotations

import os
from typing import BinaryIO, Optional

import httpx

from ..models import SelectedFile
from .base import FILE_FIELD_NAME, HTTPTransferDriver, ReportProgress, guess_content_type


class _ProgressReader:
    """
    File wrapper that reports how far httpx has read.

    httpx pulls multipart file parts through ``read`` while the request body
    is being sent, so the read position tracks bytes handed to the transport.
    """

    def __init__(self, fh: BinaryIO, total: Optional[int], report: ReportProgress):
        self._fh = fh
        self._total = total
        self._report = report
        self._reported = 0

    def fileno(self) -> int:
        return self._fh.fileno()

    def tell(self) -> int:
        return self._fh.tell()

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._fh.seek(offset, whence)

    def read(self, size: int = -1) -> bytes:
        chunk = self._fh.read(size)
        if chunk:
            loaded = self._fh.tell()
            # A re-sent body (redirect) must not move progress backwards.
            if loaded > self._reported:
                self._reported = loaded
                self._report(loaded, self._total)
        return chunk


class StreamingTransferDriver(HTTPTransferDriver):
    """Streams the file from disk, reporting progress as the body goes out."""

    supports_cancel = True

    async def _post(self, file: SelectedFile, target: str, report: ReportProgress) -> httpx.Response:
        # httpx encodes multipart bodies with plain (sync) reads even on an
        # AsyncClient, so each 64 KiB chunk is read on the loop between writes.
        with open(file.path, "rb") as fh:
            reader = _ProgressReader(fh, file.size_bytes, report)
            files = {FILE_FIELD_NAME: (file.name, reader, guess_content_type(file.name))}
            return await self._client.post(target, files=files)
