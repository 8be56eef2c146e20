# tests/test_main.py
import os
import signal
import subprocess

import ssh_notifier.main as main_mod
from ssh_notifier.errors import StartupError
from ssh_notifier.models import Configuration


class BrokenFollower:
    def __enter__(self):
        raise StartupError("could not start journalctl")

    def __exit__(self, *exc):
        pass


class FakeFollower:
    def __enter__(self):
        return iter([])

    def __exit__(self, *exc):
        pass


def test_startup_error_exits_with_one(tmp_path, monkeypatch):
    monkeypatch.setattr(main_mod, "JournalFollower", BrokenFollower)
    assert main_mod.main(["--config", str(tmp_path / "c.yaml")]) == 1


def test_end_of_stream_exits_cleanly(tmp_path, monkeypatch):
    monkeypatch.setattr(main_mod, "JournalFollower", FakeFollower)
    config = tmp_path / "c.yaml"
    assert main_mod.main(["--config", str(config)]) == 0
    # first run leaves an example config behind
    assert config.exists()


LINE = (
    "Jan 11 23:10:45 host sshd-session[42]: Accepted publickey for alice "
    "from 10.0.0.5 port 1234 ssh2: ED25519 SHA256:ABC"
)


class HangupFollower:
    """Sends itself SIGHUP before handing out a line."""

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        pass

    def __iter__(self):
        os.kill(os.getpid(), signal.SIGHUP)
        yield LINE


def test_sighup_reloads_config(tmp_path, monkeypatch):
    loads = []

    def fake_load(path=None):
        loads.append(path)
        return Configuration()

    sent = []

    def fake_run(cmd, **kwargs):
        sent.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(main_mod, "load_or_default", fake_load)
    monkeypatch.setattr(main_mod, "JournalFollower", HangupFollower)
    monkeypatch.setattr(subprocess, "run", fake_run)

    previous = signal.getsignal(signal.SIGHUP)
    try:
        assert main_mod.main(["--config", str(tmp_path / "c.yaml")]) == 0
    finally:
        signal.signal(signal.SIGHUP, previous)

    # once at startup, once after the hangup
    assert len(loads) == 2
    assert sent and sent[0][0] == "notify-send"
