"""Tests for console rendering helpers."""
from pathlib import Path

from catupload.cli_progress import ConsoleNotifier, SessionProgressDisplay, _human_size
from catupload.models import SelectedFile, SessionState, TransferResult
from catupload.notifications import Notification, NotificationVariant
from catupload.session import SessionController


def test_human_size():
    assert _human_size(0) == "0 B"
    assert _human_size(1023) == "1023 B"
    assert _human_size(1536) == "1.50 KB"
    assert _human_size(5 * 1024 * 1024) == "5.00 MB"


def test_console_notifier(capsys):
    notifier = ConsoleNotifier()
    notifier.notify(Notification("Upload error", "disk full", NotificationVariant.DESTRUCTIVE))

    out = capsys.readouterr().out
    assert "Upload error" in out
    assert "disk full" in out


class _Driver:
    def __init__(self):
        self.on_result = None

    def start(self, file, target, on_progress, on_result):
        self.on_result = on_result
        return self

    def cancel(self):
        return False


def test_progress_display_follows_session(capsys):
    driver = _Driver()
    controller = SessionController("http://api.test/upload/x", driver, ConsoleNotifier())
    display = SessionProgressDisplay("clip.mp4")
    display.attach(controller)

    controller.select_file(SelectedFile("clip.mp4", 10, Path("clip.mp4")))
    controller.submit()
    assert display._task_id is not None

    driver.on_result(TransferResult.failure("disk full", status_code=500))

    assert controller.state == SessionState.FAILED
    assert display._task_id is None
    out = capsys.readouterr().out
    assert "Failed:" in out
    assert "disk full" in out
