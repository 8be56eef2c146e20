# ssh_notifier/render.py
import re
from datetime import datetime
from email.utils import format_datetime
from typing import Tuple

from .models import Configuration, ConnectionEvent, Identity

PLACEHOLDER_RE = re.compile(r"\{(name|ip|user|fpr|time)\}")


def format_time(now: datetime, time_format: str) -> str:
    """Render `now` in local time using a named format or a strftime pattern."""
    local = now.astimezone()
    if time_format == "rfc3339":
        return local.isoformat()
    if time_format == "rfc2822":
        return format_datetime(local)
    return local.strftime(time_format)


def render(
    template: str,
    event: ConnectionEvent,
    identity: Identity,
    now: datetime,
    time_format: str = "rfc3339",
) -> str:
    """
    Replace {name}, {ip}, {user}, {fpr} and {time} in `template`.

    Substitution happens in one pass, so a value that itself contains a
    placeholder is left as is. Any other braces are kept literally.
    """
    values = {
        "name": identity.name,
        "ip": event.remote_address,
        "user": event.remote_user,
        "fpr": event.fingerprint,
    }

    def replace(m: "re.Match[str]") -> str:
        key = m.group(1)
        if key == "time":
            return format_time(now, time_format)
        return values[key]

    return PLACEHOLDER_RE.sub(replace, template)


def render_notification(
    config: Configuration,
    event: ConnectionEvent,
    identity: Identity,
    now: datetime,
) -> Tuple[str, str]:
    """Return (title, body), picking the stranger templates for unknown keys."""
    if identity.is_known:
        title, body = config.notify_title, config.notify_message
    else:
        title = config.notify_title_for_stranger
        body = config.notify_message_for_stranger

    return (
        render(title, event, identity, now, config.time_format),
        render(body, event, identity, now, config.time_format),
    )
