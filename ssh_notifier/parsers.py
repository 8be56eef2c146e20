# ssh_notifier/parsers.py
import re
from typing import Optional

from .models import NO_FINGERPRINT, UNKNOWN, ConnectionEvent

# Only used to tell real login records from other sshd chatter
ACCEPTED_PUBLICKEY_RE = re.compile(
    r"Accepted publickey for \S+ from \S+ port \d+"
)


def extract_between(line: str, start: str, end: str) -> Optional[str]:
    """
    Return the text strictly between the first `start` and the next `end`
    after it, or None if either anchor is missing.
    """
    i = line.find(start)
    if i < 0:
        return None
    rest = line[i + len(start):]
    j = rest.find(end)
    if j < 0:
        return None
    return rest[:j]


def parse_connection_event(raw: str) -> ConnectionEvent:
    """
    Parse a single sshd "Accepted publickey" line into a ConnectionEvent.

    Example:
    Jan 11 23:10:45 host sshd-session[31509]: Accepted publickey for yan
    from 127.0.0.1 port 50178 ssh2: ED25519 SHA256:EjRa...

    Every field falls back on its own, so lines that are not login records
    still come back as a best-effort event.
    """
    raw = raw.strip()

    session_id = extract_between(raw, "sshd-session[", "]")
    user = extract_between(raw, "for ", " from")
    ip = extract_between(raw, "from ", " port")
    tokens = raw.split()

    return ConnectionEvent(
        session_id=session_id or "",
        remote_user=user if user is not None else UNKNOWN,
        remote_address=ip if ip is not None else UNKNOWN,
        fingerprint=tokens[-1] if tokens else NO_FINGERPRINT,
        raw=raw,
    )


def is_accepted_publickey(raw: str) -> bool:
    return ACCEPTED_PUBLICKEY_RE.search(raw) is not None


if __name__ == "__main__":
    # manual test: pipe journalctl output in
    import sys

    for line in sys.stdin:
        if not line.strip():
            continue
        ev = parse_connection_event(line)
        print(
            f"pid={ev.session_id} user={ev.remote_user} "
            f"ip={ev.remote_address} fpr={ev.fingerprint}"
        )
