# ssh_notifier/notify.py
import logging
import subprocess

from .errors import NotifyDispatchError

logger = logging.getLogger(__name__)

APP_NAME = "ssh-notifier"


def notify_send(title: str, body: str) -> None:
    """Pop up a desktop notification through notify-send."""
    cmd = [
        "notify-send",
        "--urgency=critical",
        f"--app-name={APP_NAME}",
        title,
        body,
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise NotifyDispatchError(f"could not run notify-send: {e}") from e

    if result.returncode != 0:
        raise NotifyDispatchError(
            f"notify-send exited with {result.returncode}: {result.stderr.strip()}"
        )
    logger.debug("Notification sent: %s", title)
