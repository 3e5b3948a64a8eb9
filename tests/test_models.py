"""Tests for catupload models."""
import pytest
from catupload.models import (
    DEFAULT_BASE_URL,
    Outcome,
    OutcomeKind,
    SelectedFile,
    SessionState,
    TransferResult,
    TransferStrategy,
    UploadConfig,
    UploadSession,
)


class TestTransferResult:
    def test_success_result(self):
        result = TransferResult.success(status_code=201)
        assert result.ok is True
        assert result.cancelled is False
        assert result.status_code == 201

    def test_failure_result(self):
        result = TransferResult.failure("disk full", status_code=500)
        assert result.ok is False
        assert result.cancelled is False
        assert result.message == "disk full"
        assert result.status_code == 500

    def test_cancellation_result(self):
        result = TransferResult.cancellation()
        assert result.ok is False
        assert result.cancelled is True
        assert result.status_code is None

    def test_immutable(self):
        result = TransferResult.success()
        with pytest.raises(Exception):
            result.ok = False


class TestSelectedFile:
    def test_from_path(self, tmp_path):
        path = tmp_path / "report.pdf"
        path.write_bytes(b"x" * 1234)

        file = SelectedFile.from_path(path)

        assert file.name == "report.pdf"
        assert file.size_bytes == 1234
        assert file.path == path

    def test_from_missing_path(self, tmp_path):
        with pytest.raises(OSError):
            SelectedFile.from_path(tmp_path / "missing.bin")


class TestSessionState:
    def test_terminal_states(self):
        assert SessionState.SUCCEEDED.is_terminal
        assert SessionState.FAILED.is_terminal
        assert SessionState.CANCELLED.is_terminal
        assert not SessionState.IDLE.is_terminal
        assert not SessionState.READY.is_terminal
        assert not SessionState.UPLOADING.is_terminal

    def test_new_session_is_idle(self):
        session = UploadSession()
        assert session.state == SessionState.IDLE
        assert session.progress_percent == 0
        assert session.selected_file is None
        assert session.last_outcome is None


def test_outcome_is_error():
    assert Outcome(OutcomeKind.SUCCESS, "ok").is_error is False
    assert Outcome(OutcomeKind.ERROR, "bad").is_error is True
    assert Outcome(OutcomeKind.CANCELLED, "stop").is_error is True


class TestUploadConfig:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for key in ("CAT_UPLOAD_BASE_URL", "CAT_UPLOAD_TIMEOUT", "CAT_UPLOAD_STRATEGY"):
            monkeypatch.delenv(key, raising=False)

    def test_default_config(self):
        config = UploadConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout is None
        assert config.strategy == TransferStrategy.STREAMING
        assert config.eager_progress == 10

    def test_from_env_defaults(self):
        assert UploadConfig.from_env() == UploadConfig()

    def test_from_env_values(self, monkeypatch):
        monkeypatch.setenv("CAT_UPLOAD_BASE_URL", "https://files.example.com/upload/")
        monkeypatch.setenv("CAT_UPLOAD_TIMEOUT", "30")
        monkeypatch.setenv("CAT_UPLOAD_STRATEGY", "Buffered")

        config = UploadConfig.from_env()

        assert config.base_url == "https://files.example.com/upload"
        assert config.timeout == 30.0
        assert config.strategy == TransferStrategy.BUFFERED

    def test_from_env_zero_timeout_means_none(self, monkeypatch):
        monkeypatch.setenv("CAT_UPLOAD_TIMEOUT", "0")
        assert UploadConfig.from_env().timeout is None

    def test_from_env_rejects_bad_values(self, monkeypatch):
        monkeypatch.setenv("CAT_UPLOAD_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="CAT_UPLOAD_TIMEOUT"):
            UploadConfig.from_env()

        monkeypatch.setenv("CAT_UPLOAD_TIMEOUT", "5")
        monkeypatch.setenv("CAT_UPLOAD_STRATEGY", "carrier-pigeon")
        with pytest.raises(ValueError, match="CAT_UPLOAD_STRATEGY"):
            UploadConfig.from_env()
