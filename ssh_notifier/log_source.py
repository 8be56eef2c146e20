# ssh_notifier/log_source.py
import logging
import subprocess
from typing import Iterator, List, Optional

from .errors import StartupError

logger = logging.getLogger(__name__)

# Follow sshd from now on, only lines that record an accepted login
JOURNAL_COMMAND: List[str] = [
    "journalctl",
    "--unit", "sshd",
    "--grep", "Accepted",
    "--output", "short",
    "--since", "now",
    "--follow",
]


class JournalFollower:
    """
    Streams sshd log lines from a long-running journalctl process.

    Iterating yields one line at a time and stops when journalctl closes
    its output.
    """

    def __init__(self, command: Optional[List[str]] = None) -> None:
        self.command = list(command or JOURNAL_COMMAND)
        self.proc: Optional[subprocess.Popen] = None

    def start(self) -> None:
        logger.debug("Starting log source: %s", " ".join(self.command))
        try:
            self.proc = subprocess.Popen(
                self.command,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise StartupError(f"could not start {self.command[0]}: {e}") from e

    def __iter__(self) -> Iterator[str]:
        if self.proc is None:
            self.start()
        assert self.proc is not None and self.proc.stdout is not None

        for line in self.proc.stdout:
            yield line.rstrip("\n")

        logger.info("%s closed its output", self.command[0])

    def close(self) -> None:
        if self.proc is None:
            return
        if self.proc.poll() is None:
            self.proc.terminate()
        try:
            self.proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            self.proc.kill()
            self.proc.wait()
        if self.proc.stdout is not None:
            self.proc.stdout.close()
        self.proc = None

    def __enter__(self) -> "JournalFollower":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
