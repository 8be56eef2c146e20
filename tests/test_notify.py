# tests/test_notify.py
import subprocess

import pytest

from ssh_notifier.errors import NotifyDispatchError
from ssh_notifier.notify import notify_send


def test_notify_send_arguments(monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(subprocess, "run", fake_run)
    notify_send("title", "body")
    assert calls == [[
        "notify-send", "--urgency=critical", "--app-name=ssh-notifier", "title", "body",
    ]]


def test_notify_send_nonzero_exit(monkeypatch):
    monkeypatch.setattr(
        subprocess, "run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 1, "", "no daemon"),
    )
    with pytest.raises(NotifyDispatchError, match="no daemon"):
        notify_send("title", "body")


def test_notify_send_missing_binary(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(NotifyDispatchError):
        notify_send("title", "body")
