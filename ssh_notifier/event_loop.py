# ssh_notifier/event_loop.py

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from .config import load_or_default
from .errors import GreetingError, NotifyDispatchError
from .greeter import TerminalGreeter
from .identity import resolve_identity
from .models import Configuration, ConnectionEvent, Identity
from .notify import notify_send
from .parsers import is_accepted_publickey, parse_connection_event
from .render import render_notification

logger = logging.getLogger(__name__)


@dataclass
class ProcessedEvent:
    event: ConnectionEvent
    identity: Identity
    title: Optional[str] = None       # None when the notification was suppressed
    body: Optional[str] = None
    notified: bool = False
    greeted: bool = False


class EventLoop:
    """
    Drives each sshd line through parse, resolve, render and dispatch.

    The configuration is loaded once and reused. Calling request_reload()
    makes the loop re-read it before the next line.
    """

    def __init__(
        self,
        config: Configuration,
        notifier: Callable[[str, str], None] = notify_send,
        greeter: Optional[TerminalGreeter] = None,
        clock: Callable[[], datetime] = datetime.now,
        config_loader: Callable[[], Configuration] = load_or_default,
    ) -> None:
        self.config = config
        self.notifier = notifier
        self.greeter = greeter if greeter is not None else TerminalGreeter()
        self.clock = clock
        self.config_loader = config_loader
        self.reload_requested = False

    def request_reload(self) -> None:
        self.reload_requested = True

    def _reload_if_requested(self) -> None:
        if not self.reload_requested:
            return
        self.reload_requested = False
        logger.info("Reloading configuration")
        self.config = self.config_loader()

    def process_line(self, line: str) -> ProcessedEvent:
        self._reload_if_requested()

        event = parse_connection_event(line)
        logger.debug("Parsed event: %s", event)
        if not is_accepted_publickey(event.raw):
            logger.warning("Line does not look like a publickey login: %s", event.raw)

        logger.info(
            "Login from %s@%s, fingerprint %s",
            event.remote_user, event.remote_address, event.fingerprint,
        )

        identity = resolve_identity(event.fingerprint, self.config.identities)
        result = ProcessedEvent(event=event, identity=identity)
        if identity.is_known:
            logger.info("Fingerprint %s belongs to %s", event.fingerprint, identity.name)
        else:
            logger.info("Fingerprint %s matches no configured user", event.fingerprint)

        if identity.suppress_notification:
            logger.debug("Notifications disabled for %s", identity.name)
        else:
            result.title, result.body = render_notification(
                self.config, event, identity, self.clock()
            )
            try:
                self.notifier(result.title, result.body)
                result.notified = True
            except NotifyDispatchError as e:
                logger.error(
                    "Failed to send notification for %s (fingerprint %s): %s",
                    identity.name, event.fingerprint, e,
                )

        if identity.greeting and event.session_id:
            try:
                self.greeter.write_to_session(event.session_id, identity.greeting)
                result.greeted = True
            except GreetingError as e:
                logger.warning(
                    "Error while greeting %s in session %s: %s",
                    identity.name, event.session_id, e,
                )

        return result

    def run(self, lines: Iterable[str]) -> int:
        """Process lines until the stream ends. Returns the number handled."""
        count = 0
        for line in lines:
            if not line.strip():
                continue
            logger.debug("Got line from sshd: %s", line)
            self.process_line(line)
            count += 1

        logger.info("Log stream ended after %d event(s), stopping", count)
        return count
