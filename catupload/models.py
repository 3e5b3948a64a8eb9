"""
Models for the upload session.

Value objects are immutable dataclasses; only the session aggregate mutates.
"""
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


DEFAULT_BASE_URL = "http://localhost:8012/api/cat/upload"


class SessionState(Enum):
    """State of an upload session."""
    IDLE = "idle"            # no file chosen
    READY = "ready"          # file chosen, not uploading
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.SUCCEEDED, SessionState.FAILED, SessionState.CANCELLED)


class OutcomeKind(Enum):
    """Kind of terminal outcome."""
    SUCCESS = "success"
    ERROR = "error"
    CANCELLED = "cancelled"


class TransferStrategy(Enum):
    """How the transfer driver sends the file."""
    STREAMING = "streaming"
    BUFFERED = "buffered"


@dataclass(frozen=True)
class SelectedFile:
    """Immutable reference to the local file chosen by the user."""
    name: str
    size_bytes: int
    path: Path

    @classmethod
    def from_path(cls, path) -> "SelectedFile":
        """Describe a local file. Raises OSError if it cannot be stat'ed."""
        path = Path(path)
        return cls(name=path.name, size_bytes=path.stat().st_size, path=path)


@dataclass(frozen=True)
class ProgressEvent:
    """Byte-level progress of one transfer attempt."""
    loaded: int
    total: Optional[int] = None


@dataclass(frozen=True)
class TransferResult:
    """Immutable result of one transfer attempt."""
    ok: bool
    message: str = ""
    status_code: Optional[int] = None
    cancelled: bool = False

    @classmethod
    def success(cls, status_code: Optional[int] = None, message: str = ""):
        return cls(ok=True, status_code=status_code, message=message)

    @classmethod
    def failure(cls, message: str, status_code: Optional[int] = None):
        return cls(ok=False, status_code=status_code, message=message)

    @classmethod
    def cancellation(cls, message: str = "Upload cancelled by user."):
        return cls(ok=False, message=message, cancelled=True)


@dataclass(frozen=True)
class Outcome:
    """Last terminal outcome recorded on a session."""
    kind: OutcomeKind
    message: str
    status_code: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.kind != OutcomeKind.SUCCESS


@dataclass
class UploadSession:
    """Aggregate root: everything the presentation layer renders."""
    state: SessionState = SessionState.IDLE
    progress_percent: int = 0
    selected_file: Optional[SelectedFile] = None
    last_outcome: Optional[Outcome] = None


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for the upload client."""
    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None  # None: rely on transport limits
    strategy: TransferStrategy = TransferStrategy.STREAMING
    eager_progress: int = 10

    @classmethod
    def from_env(cls) -> "UploadConfig":
        """Build configuration from CAT_UPLOAD_* environment variables."""
        base_url = os.getenv("CAT_UPLOAD_BASE_URL") or DEFAULT_BASE_URL

        timeout = None
        raw_timeout = os.getenv("CAT_UPLOAD_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ValueError(f"CAT_UPLOAD_TIMEOUT must be a number, got {raw_timeout!r}") from exc
            if timeout <= 0:
                timeout = None

        raw_strategy = (os.getenv("CAT_UPLOAD_STRATEGY") or TransferStrategy.STREAMING.value).strip().lower()
        try:
            strategy = TransferStrategy(raw_strategy)
        except ValueError as exc:
            raise ValueError(
                f"CAT_UPLOAD_STRATEGY must be 'streaming' or 'buffered', got {raw_strategy!r}"
            ) from exc

        return cls(base_url=base_url.rstrip("/"), timeout=timeout, strategy=strategy)
