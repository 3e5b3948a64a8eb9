"""
Session controller - the upload state machine.

    IDLE -> READY -> UPLOADING -> SUCCEEDED | FAILED | CANCELLED

A new file selection is accepted from every state except UPLOADING and
always lands in READY (or IDLE when nothing was picked).

Usage:
    async with StreamingTransferDriver() as driver:
        controller = SessionController(target, driver, notifier)
        controller.on_progress_change(lambda percent: print(f"{percent}%"))
        controller.select_file(SelectedFile.from_path(path))
        controller.submit()
        session = await controller.wait()
"""
import logging
from typing import Callable, Optional

from .models import (
    Outcome,
    OutcomeKind,
    ProgressEvent,
    SelectedFile,
    SessionState,
    TransferResult,
    UploadSession,
)
from .notifications import LoggingNotifier, Notification, NotificationVariant
from .protocols import INotifier, ITransfer, ITransferDriver
from .utils.events import EventEmitter

logger = logging.getLogger(__name__)

VALIDATION_TITLE = "No file selected"
VALIDATION_MESSAGE = "Please select a file to upload."
DEFAULT_FAILURE_MESSAGE = "The upload failed due to a network or server error."

# Byte progress never reaches 100: that value means the endpoint confirmed.
MAX_IN_FLIGHT_PERCENT = 99


def percent_of(loaded: int, total: int) -> int:
    """round(loaded / total * 100) with halves rounded up, clamped to [0, 100]."""
    if total <= 0:
        return 0
    percent = (loaded * 200 + total) // (total * 2)
    return max(0, min(100, percent))


class SessionController:
    """
    Owns one UploadSession and drives it through the state machine.

    All intents and driver callbacks must run on the same event loop.
    """

    def __init__(
        self,
        target: str,
        driver: ITransferDriver,
        notifier: Optional[INotifier] = None,
        eager_progress: int = 10,
    ):
        self._target = target
        self._driver = driver
        self._notifier = notifier or LoggingNotifier()
        self._eager_progress = max(0, min(eager_progress, MAX_IN_FLIGHT_PERCENT))
        self._session = UploadSession()
        self._events = EventEmitter()
        self._transfer: Optional[ITransfer] = None
        self._attempt = 0
        self._validation_message: Optional[str] = None

    # Event subscription methods
    def on_state_change(self, callback: Callable[[SessionState], None]):
        """Called on every state transition. Receives the new SessionState."""
        self._events.on("state_changed", callback)

    def on_progress_change(self, callback: Callable[[int], None]):
        """Called when progress_percent changes. Receives the new percent."""
        self._events.on("progress", callback)

    def on_outcome(self, callback: Callable[[Outcome], None]):
        """Called when a terminal outcome is recorded. Receives the Outcome."""
        self._events.on("outcome", callback)

    # State properties
    @property
    def target(self) -> str:
        return self._target

    @property
    def session(self) -> UploadSession:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def progress_percent(self) -> int:
        return self._session.progress_percent

    @property
    def selected_file(self) -> Optional[SelectedFile]:
        return self._session.selected_file

    @property
    def last_outcome(self) -> Optional[Outcome]:
        return self._session.last_outcome

    @property
    def validation_message(self) -> Optional[str]:
        """Message from the last rejected submit, cleared by the next intent."""
        return self._validation_message

    @property
    def is_uploading(self) -> bool:
        return self._session.state == SessionState.UPLOADING

    # Intents
    def select_file(self, file: Optional[SelectedFile]) -> bool:
        """Replace the selected file. Rejected while an upload is in flight."""
        if self.is_uploading:
            logger.warning("Ignoring file selection while an upload is in progress")
            return False

        if file is not None and not file.name:
            file = None

        self._validation_message = None
        self._session.selected_file = file
        self._session.last_outcome = None
        self._set_progress(0)
        self._set_state(SessionState.READY if file else SessionState.IDLE)
        if file:
            logger.debug(f"Selected {file.name} ({file.size_bytes} bytes)")
        return True

    def submit(self) -> bool:
        """Start uploading the selected file. Returns True if a transfer started."""
        if self.is_uploading:
            logger.warning("Submit rejected: an upload is already in progress")
            return False

        file = self._session.selected_file
        if file is None:
            self._validation_message = VALIDATION_MESSAGE
            self._notify(Notification(VALIDATION_TITLE, VALIDATION_MESSAGE, NotificationVariant.DESTRUCTIVE))
            return False

        self._validation_message = None
        self._attempt += 1
        attempt = self._attempt

        self._session.last_outcome = None
        self._session.progress_percent = 0
        self._set_state(SessionState.UPLOADING)
        self._set_progress(self._eager_progress)

        def progress_callback(event: ProgressEvent) -> None:
            if attempt == self._attempt:
                self.on_progress(event.loaded, event.total)

        def result_callback(result: TransferResult) -> None:
            if attempt == self._attempt:
                self.on_result(result)
            else:
                logger.debug(f"Dropping result of stale attempt {attempt}")

        self._transfer = None
        try:
            transfer = self._driver.start(file, self._target, progress_callback, result_callback)
        except Exception as exc:
            logger.error(f"Could not start upload of {file.name}: {exc}", exc_info=True)
            self.on_result(TransferResult.failure(f"Could not start the upload: {exc}"))
            return False

        if attempt == self._attempt:
            self._transfer = transfer
        return True

    def cancel(self) -> bool:
        """
        Abort the in-flight upload. Returns True if the driver accepted.

        The driver acknowledges by delivering a cancellation result, which
        moves the session to CANCELLED through ``on_result``.
        """
        if not self.is_uploading or self._transfer is None:
            logger.debug(f"Nothing to cancel in state {self.state.value}")
            return False

        if not self._transfer.cancel():
            logger.warning("The transfer strategy in use cannot abort an upload in progress")
            return False
        return True

    async def wait(self) -> UploadSession:
        """Wait for the latest attempt (if any) to finish, cancelled ones included."""
        transfer = self._transfer
        if transfer is not None:
            await transfer.wait()
        return self._session

    # Driver callbacks
    def on_progress(self, loaded: int, total: Optional[int]) -> None:
        """Byte progress for the current attempt."""
        if not self.is_uploading:
            return
        if not total or total <= 0:
            # Unknown size: stay at the eager value until the result.
            return

        percent = min(percent_of(loaded, total), MAX_IN_FLIGHT_PERCENT)
        if percent > self._session.progress_percent:
            self._set_progress(percent)

    def on_result(self, result: TransferResult) -> None:
        """Final result for the current attempt."""
        if not self.is_uploading:
            logger.debug(f"Ignoring transfer result in state {self.state.value}")
            return

        file = self._session.selected_file

        if result.ok:
            name = file.name if file else "file"
            outcome = Outcome(
                OutcomeKind.SUCCESS,
                result.message or f'File "{name}" uploaded successfully.',
                result.status_code,
            )
            self._session.selected_file = None
            self._set_progress(100)
            self._finish(SessionState.SUCCEEDED, outcome)
            self._notify(Notification("Upload complete", outcome.message))
            return

        self._set_progress(0)

        if result.cancelled:
            outcome = Outcome(OutcomeKind.CANCELLED, result.message or "Upload cancelled.")
            self._finish(SessionState.CANCELLED, outcome)
            self._notify(Notification("Upload cancelled", outcome.message, NotificationVariant.DESTRUCTIVE))
            return

        outcome = Outcome(OutcomeKind.ERROR, result.message or DEFAULT_FAILURE_MESSAGE, result.status_code)
        self._finish(SessionState.FAILED, outcome)
        description = outcome.message
        if outcome.status_code is not None:
            description = f"Server responded with {outcome.status_code}. Details: {outcome.message}"
        self._notify(Notification("Upload error", description, NotificationVariant.DESTRUCTIVE))

    # Internal methods
    def _finish(self, state: SessionState, outcome: Outcome) -> None:
        self._session.last_outcome = outcome
        self._set_state(state)
        logger.info(f"Upload {state.value}: {outcome.message}")
        self._events.emit("outcome", outcome)

    def _set_state(self, state: SessionState) -> None:
        previous = self._session.state
        self._session.state = state
        if previous != state:
            logger.debug(f"Session {previous.value} -> {state.value}")
        self._events.emit("state_changed", state)

    def _set_progress(self, percent: int) -> None:
        percent = max(0, min(100, int(percent)))
        if percent == self._session.progress_percent:
            return
        self._session.progress_percent = percent
        self._events.emit("progress", percent)

    def _notify(self, notification: Notification) -> None:
        try:
            self._notifier.notify(notification)
        except Exception as e:
            logger.error(f"Notifier failed for {notification.title!r}: {e}")
