"""
catupload - send one local file to the endpoint behind an upload link.

Usage:
    from catupload import SessionController, SelectedFile, StreamingTransferDriver
    from catupload.links import resolve_upload_target

    target = resolve_upload_target("https://example.com/upload/<uuid>")
    async with StreamingTransferDriver() as driver:
        controller = SessionController(target, driver)
        controller.select_file(SelectedFile.from_path("report.pdf"))
        controller.submit()
        session = await controller.wait()
"""
__version__ = "0.1.0"

from .models import (
    Outcome,
    OutcomeKind,
    ProgressEvent,
    SelectedFile,
    SessionState,
    TransferResult,
    TransferStrategy,
    UploadConfig,
    UploadSession,
)
from .notifications import LoggingNotifier, Notification, NotificationVariant
from .session import SessionController
from .transfer import BufferedTransferDriver, StreamingTransferDriver, build_driver

__all__ = [
    # Main
    "SessionController",
    # Models
    "Outcome",
    "OutcomeKind",
    "ProgressEvent",
    "SelectedFile",
    "SessionState",
    "TransferResult",
    "TransferStrategy",
    "UploadConfig",
    "UploadSession",
    # Notifications
    "LoggingNotifier",
    "Notification",
    "NotificationVariant",
    # Drivers
    "StreamingTransferDriver",
    "BufferedTransferDriver",
    "build_driver",
]
