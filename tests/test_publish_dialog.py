import threading
from unittest.mock import Mock

from core.challenge import MAX_TARGET, Challenge
from core.lrclib_client import LrcLibError
from core.lrc_validator import validate_lrc
from ui.dialogs.publish_lyrics_dialog import PublishLyricsDialog


def _client():
    client = Mock()
    client.base_url = "https://lrclib.test"
    client.request_challenge.return_value = Challenge("pfx", MAX_TARGET)
    client.publish.return_value = None
    return client


def _held_until(release):
    def request_challenge():
        release.wait(5)
        return Challenge("pfx", MAX_TARGET)
    return request_challenge


def _settle(dlg):
    if dlg._request_worker is not None:
        dlg._request_worker.wait(5000)
    if dlg.solver is not None:
        dlg.solver.wait(5000)


def test_publish_flow_sends_solved_token(qtbot, payload):
    client = _client()
    dlg = PublishLyricsDialog(payload, client)
    qtbot.addWidget(dlg)
    assert dlg.stack.currentIndex() == 1

    dlg._on_primary()
    qtbot.waitUntil(lambda: dlg.result_ok, timeout=10000)
    _settle(dlg)

    client.publish.assert_called_once_with("pfx:0", payload)
    assert dlg._progress.publishLyrics == "Done"
    assert "published" in dlg.result_message


def test_challenge_failure_is_surfaced(qtbot, payload):
    client = _client()
    client.request_challenge.side_effect = LrcLibError("Failed to request a publish challenge.")
    dlg = PublishLyricsDialog(payload, client)
    qtbot.addWidget(dlg)

    dlg._on_primary()
    qtbot.waitUntil(lambda: bool(dlg.result_message), timeout=5000)
    _settle(dlg)

    assert dlg.result_ok is False
    assert dlg.result_message == "Failed to request a publish challenge."
    assert dlg._progress.requestChallenge == "Failed"
    client.publish.assert_not_called()


def test_server_rejection_message_is_shown_verbatim(qtbot, payload):
    client = _client()
    client.publish.side_effect = LrcLibError("The provided publish token is incorrect", 400)
    dlg = PublishLyricsDialog(payload, client)
    qtbot.addWidget(dlg)

    dlg._on_primary()
    qtbot.waitUntil(lambda: bool(dlg.result_message), timeout=10000)
    _settle(dlg)

    assert dlg.result_message == "The provided publish token is incorrect"
    assert dlg._progress.publishLyrics == "Failed"


def test_multi_timestamp_issues_block_publishing(qtbot, payload):
    validation = validate_lrc("[00:01.00][00:02.00]Hi\n[00:03.00]There")
    dlg = PublishLyricsDialog(payload, _client(), validation=validation)
    qtbot.addWidget(dlg)

    assert dlg.blocked
    assert dlg.stack.currentIndex() == 0
    assert dlg.btn_primary.text() == "Close"
    assert dlg.lint_table.rowCount() == 1

    with qtbot.waitSignal(dlg.rejected, timeout=1000):
        dlg._on_primary()
    assert dlg.result_ok is False


def test_other_issues_can_be_overridden(qtbot, payload):
    validation = validate_lrc("[00:01.00]<00:01.00>Hi")
    dlg = PublishLyricsDialog(payload, _client(), validation=validation)
    qtbot.addWidget(dlg)

    assert not dlg.blocked
    assert dlg.btn_primary.text() == "Continue Anyway"

    dlg._on_primary()
    assert dlg.stack.currentIndex() == 1
    assert dlg.btn_primary.text() == "Publish Now"


def test_cancel_drops_result_of_request_in_flight(qtbot, payload):
    release = threading.Event()
    client = _client()
    client.request_challenge.side_effect = _held_until(release)
    dlg = PublishLyricsDialog(payload, client)
    qtbot.addWidget(dlg)

    dlg._on_primary()
    worker = dlg._request_worker
    qtbot.waitUntil(worker.isRunning, timeout=2000)

    dlg._on_secondary()
    release.set()
    assert worker.wait(5000)
    qtbot.wait(50)

    assert dlg.result_message == "Publishing was cancelled."
    assert dlg.result_ok is False
    assert dlg.solver is None
    assert dlg._progress.requestChallenge == "Running..."
    client.publish.assert_not_called()


def test_dispose_waits_for_running_request(qtbot, payload):
    release = threading.Event()
    client = _client()
    client.request_challenge.side_effect = _held_until(release)
    dlg = PublishLyricsDialog(payload, client)

    dlg._on_primary()
    qtbot.waitUntil(dlg._request_worker.isRunning, timeout=2000)
    dlg.reject()

    destroyed = []
    dlg.destroyed.connect(lambda: destroyed.append(True))
    dlg.dispose()
    qtbot.wait(50)
    assert destroyed == []

    release.set()
    qtbot.waitUntil(lambda: destroyed == [True], timeout=5000)


def test_dispose_deletes_idle_dialog(qtbot, payload):
    dlg = PublishLyricsDialog(payload, _client())
    with qtbot.waitSignal(dlg.destroyed, timeout=1000):
        dlg.dispose()
