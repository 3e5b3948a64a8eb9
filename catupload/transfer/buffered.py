"""Buffered driver: one request, no byte progress, no abort."""
from __future__ import annotations

import asyncio

import httpx

from ..models import SelectedFile
from .base import FILE_FIELD_NAME, HTTPTransferDriver, ReportProgress, guess_content_type


class BufferedTransferDriver(HTTPTransferDriver):
    """
    Reads the whole file into memory and posts it in a single request.

    Progress stays at the session's eager value until the result arrives.
    """

    supports_cancel = False

    async def _post(self, file: SelectedFile, target: str, report: ReportProgress) -> httpx.Response:
        data = await asyncio.to_thread(file.path.read_bytes)
        files = {FILE_FIELD_NAME: (file.name, data, guess_content_type(file.name))}
        return await self._client.post(target, files=files)
