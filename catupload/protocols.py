"""
Protocols (Interfaces) for Dependency Inversion.

The session controller only talks to these; concrete drivers and notifiers
are injected.
"""
from typing import Callable, Optional, Protocol, runtime_checkable

from .models import ProgressEvent, SelectedFile, TransferResult
from .notifications import Notification


ProgressCallback = Callable[[ProgressEvent], None]
ResultCallback = Callable[[TransferResult], None]


@runtime_checkable
class ITransfer(Protocol):
    """Handle on one in-flight transfer attempt."""

    supports_cancel: bool

    @property
    def done(self) -> bool:
        """True once the attempt delivered its result."""
        ...

    def cancel(self) -> bool:
        """Abort the attempt. Returns False if nothing was aborted."""
        ...

    async def wait(self) -> Optional[TransferResult]:
        """Wait for the attempt to finish."""
        ...


@runtime_checkable
class ITransferDriver(Protocol):
    """Interface for sending a file to an upload target."""

    def start(
        self,
        file: SelectedFile,
        target: str,
        on_progress: ProgressCallback,
        on_result: ResultCallback,
    ) -> ITransfer:
        """Start sending in the background and return a handle."""
        ...


@runtime_checkable
class INotifier(Protocol):
    """Interface for user-facing (toast style) notifications."""

    def notify(self, notification: Notification) -> None:
        ...
