# ssh_notifier/greeter.py
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .errors import GreetingError

logger = logging.getLogger(__name__)

DEV_DIR = Path("/dev")

# Save cursor, scroll up four lines to make room, move to the start of the
# blank area. Restoring afterwards leaves the prompt below the greeting.
SAVE_AND_SCROLL = "\x1b[s\x1b[4S\x1b[3F"
RESTORE_CURSOR = "\x1b[u"
BORDER = "+-----------\n"


@dataclass
class Session:
    # Column order of `loginctl list-sessions`
    session_id: str
    uid: str
    user: str
    seat: str
    leader: str
    session_class: str
    tty: str
    idle: str = ""
    since: str = ""


def parse_sessions(output: str) -> List[Session]:
    """Parse `loginctl list-sessions --no-legend` output into Session rows."""
    sessions: List[Session] = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 7:
            continue
        idle = fields[7] if len(fields) > 7 else ""
        sessions.append(Session(*fields[:7], idle=idle, since=" ".join(fields[8:])))
    return sessions


def list_sessions() -> List[Session]:
    try:
        result = subprocess.run(
            ["loginctl", "list-sessions", "--no-legend"],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise GreetingError(f"could not run loginctl: {e}") from e
    if result.returncode != 0:
        raise GreetingError(f"loginctl exited with {result.returncode}")
    return parse_sessions(result.stdout)


def find_tty(sessions: List[Session], pid: str) -> Optional[str]:
    """Return the tty of the session led by `pid`, or None if there is none."""
    for session in sessions:
        if session.leader == pid:
            if not session.tty or session.tty == "-":
                return None
            return session.tty
    return None


def format_greeting(text: str) -> str:
    return SAVE_AND_SCROLL + BORDER + text + RESTORE_CURSOR


class TerminalGreeter:
    """Writes greetings straight onto the terminal of an SSH session."""

    def __init__(
        self,
        session_lister: Callable[[], List[Session]] = list_sessions,
        dev_dir: Path = DEV_DIR,
    ) -> None:
        self.session_lister = session_lister
        self.dev_dir = Path(dev_dir)

    def write_to_session(self, session_id: str, text: str) -> None:
        if not session_id:
            raise GreetingError("unknown session pid, cannot find the user's session")
        if not text:
            raise GreetingError("nothing to greet with")

        sessions = self.session_lister()
        tty = find_tty(sessions, session_id)
        if tty is None:
            raise GreetingError(f"no session with a terminal is led by pid {session_id}")

        device = self.dev_dir / tty
        try:
            with device.open("w", encoding="utf-8") as f:
                f.write(format_greeting(text))
        except OSError as e:
            raise GreetingError(f"could not write to {device}: {e}") from e

        logger.debug("Greeting written to %s", device)
