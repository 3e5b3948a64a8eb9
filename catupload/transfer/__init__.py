"""Transfer drivers - send one file to an upload target."""
from typing import Optional

import httpx

from ..models import TransferStrategy, UploadConfig
from .base import FILE_FIELD_NAME, HTTPTransfer, HTTPTransferDriver
from .buffered import BufferedTransferDriver
from .responses import NETWORK_ERROR_MESSAGE, extract_error_message, interpret_response
from .streaming import StreamingTransferDriver


def build_driver(config: UploadConfig, client: Optional[httpx.AsyncClient] = None) -> HTTPTransferDriver:
    """Create the driver for the configured strategy."""
    if config.strategy == TransferStrategy.BUFFERED:
        return BufferedTransferDriver(client=client, timeout=config.timeout)
    return StreamingTransferDriver(client=client, timeout=config.timeout)


__all__ = [
    "FILE_FIELD_NAME",
    "NETWORK_ERROR_MESSAGE",
    "HTTPTransfer",
    "HTTPTransferDriver",
    "StreamingTransferDriver",
    "BufferedTransferDriver",
    "build_driver",
    "extract_error_message",
    "interpret_response",
]
