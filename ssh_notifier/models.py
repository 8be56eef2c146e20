# ssh_notifier/models.py
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple, Union

# Sentinels used when a log line lacks a field
UNKNOWN = "UNKNOWN"
NO_FINGERPRINT = "NONE"


@dataclass(frozen=True)
class ConnectionEvent:
    session_id: str = ""              # sshd-session pid, empty if not found
    remote_user: str = UNKNOWN
    remote_address: str = UNKNOWN
    fingerprint: str = NO_FINGERPRINT
    raw: str = ""                     # full raw log line


@dataclass(frozen=True)
class KnownIdentity:
    name: str
    fingerprints: FrozenSet[str] = frozenset()
    suppress_notification: bool = False
    greeting: str = ""                # empty means no greeting

    is_known = True

    def verify(self, fingerprint: str) -> bool:
        return fingerprint in self.fingerprints


@dataclass(frozen=True)
class UnknownIdentity:
    """Stands in for a key that matched no configured user."""

    name: str = field(default=UNKNOWN, init=False)
    fingerprints: FrozenSet[str] = field(default=frozenset(), init=False)
    suppress_notification: bool = field(default=False, init=False)
    greeting: str = field(default="", init=False)

    is_known = False


Identity = Union[KnownIdentity, UnknownIdentity]


DEFAULT_NOTIFY_TITLE = "SSH login: {name}"
DEFAULT_NOTIFY_TITLE_FOR_STRANGER = "SSH login: unknown key"
DEFAULT_NOTIFY_MESSAGE = "{name} logged in as {user} from {ip} at {time}"
DEFAULT_NOTIFY_MESSAGE_FOR_STRANGER = (
    "Unrecognized key {fpr} logged in as {user} from {ip} at {time}"
)
DEFAULT_TIME_FORMAT = "rfc3339"


@dataclass(frozen=True)
class Configuration:
    notify_title: str = DEFAULT_NOTIFY_TITLE
    notify_title_for_stranger: str = DEFAULT_NOTIFY_TITLE_FOR_STRANGER
    notify_message: str = DEFAULT_NOTIFY_MESSAGE
    notify_message_for_stranger: str = DEFAULT_NOTIFY_MESSAGE_FOR_STRANGER
    # "rfc3339", "rfc2822" or a strftime pattern
    time_format: str = DEFAULT_TIME_FORMAT
    identities: Tuple[KnownIdentity, ...] = ()
