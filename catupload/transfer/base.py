"""
Shared plumbing for HTTP transfer drivers.

A driver owns (or borrows) an ``httpx.AsyncClient``; every call to
``start`` runs one attempt in its own asyncio task wrapped in an
``HTTPTransfer`` handle.
"""
from __future__ import annotations

import asyncio
import logging
import mimetypes
from typing import Awaitable, Callable, Optional

import httpx

from ..models import ProgressEvent, SelectedFile, TransferResult
from .responses import interpret_response, network_failure

logger = logging.getLogger(__name__)

# Fixed by the upload endpoint contract.
FILE_FIELD_NAME = "file"

ReportProgress = Callable[[int, Optional[int]], None]


def guess_content_type(filename: str) -> str:
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or "application/octet-stream"


class HTTPTransfer:
    """
    Handle on one transfer attempt.

    Delivers zero or more progress events, then exactly one result. After
    ``cancel()`` succeeds the only callback left is the cancellation result.
    """

    def __init__(
        self,
        send: Callable[[ReportProgress], Awaitable[TransferResult]],
        on_progress: Callable[[ProgressEvent], None],
        on_result: Callable[[TransferResult], None],
        supports_cancel: bool = True,
    ):
        self.supports_cancel = supports_cancel
        self._on_progress = on_progress
        self._on_result = on_result
        self._cancelled = False
        self._delivered = False
        self._result: Optional[TransferResult] = None
        self._task = asyncio.get_running_loop().create_task(self._run(send))

    @property
    def done(self) -> bool:
        return self._delivered

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def result(self) -> Optional[TransferResult]:
        return self._result

    def cancel(self) -> bool:
        """Abort the in-flight request and deliver the cancellation result."""
        if not self.supports_cancel or self._delivered:
            return False

        self._cancelled = True
        self._task.cancel()
        self._deliver(TransferResult.cancellation())
        return True

    async def wait(self) -> Optional[TransferResult]:
        """Wait for the attempt. Cancelling the waiter does not cancel the transfer."""
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not (self._cancelled and self._task.done()):
                raise
        return self._result

    async def _run(self, send) -> Optional[TransferResult]:
        try:
            result = await send(self._report_progress)
        except asyncio.CancelledError:
            if self._cancelled:
                return self._result
            raise
        except Exception as e:
            logger.error(f"Transfer failed unexpectedly: {e}", exc_info=True)
            result = network_failure(e)
        self._deliver(result)
        return result

    def _report_progress(self, loaded: int, total: Optional[int]) -> None:
        if self._cancelled or self._delivered:
            return
        self._on_progress(ProgressEvent(loaded=loaded, total=total))

    def _deliver(self, result: TransferResult) -> None:
        if self._delivered:
            return
        self._delivered = True
        self._result = result
        self._on_result(result)


class HTTPTransferDriver:
    """
    Base HTTP driver. Subclasses implement ``_post``.

    Use as ``async with`` unless an ``httpx.AsyncClient`` is injected.
    """

    supports_cancel = True

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self

    async def __aexit__(self, *args):
        if self._owns_client and self._client:
            await self._client.aclose()
            self._client = None

    def start(self, file: SelectedFile, target: str, on_progress, on_result) -> HTTPTransfer:
        if not self._client:
            raise RuntimeError(f"{type(self).__name__} not initialized. Use 'async with' context.")

        logger.info(f"Uploading {file.name} ({file.size_bytes} bytes) to {target}")

        async def send(report: ReportProgress) -> TransferResult:
            return await self._send(file, target, report)

        return HTTPTransfer(send, on_progress, on_result, supports_cancel=self.supports_cancel)

    async def _send(self, file: SelectedFile, target: str, report: ReportProgress) -> TransferResult:
        try:
            response = await self._post(file, target, report)
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            logger.warning(f"Upload of {file.name} failed before a response: {exc!r}")
            return network_failure(exc)

        result = interpret_response(response)
        if result.ok:
            logger.info(f"Upload of {file.name} accepted ({response.status_code})")
        else:
            logger.warning(f"Upload of {file.name} rejected ({response.status_code}): {result.message}")
        return result

    async def _post(self, file: SelectedFile, target: str, report: ReportProgress) -> httpx.Response:
        raise NotImplementedError
