# ssh_notifier/main.py
"""
Watch sshd for public key logins and tell the desktop user who just came in.

Usage:
    ssh-notifier [--config PATH] [--debug]

Send SIGHUP to re-read the config file without restarting.
"""
import argparse
import functools
import logging
import os
import signal
import sys
from typing import List, Optional

from .config import default_config_path, load_or_default
from .errors import StartupError
from .event_loop import EventLoop
from .log_source import JournalFollower

logger = logging.getLogger("ssh_notifier")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ssh-notifier",
        description="Desktop notifications for SSH public key logins.",
    )
    parser.add_argument(
        "--config",
        help=f"Path to the config file (default: {default_config_path()})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every line read from sshd",
    )
    return parser


def setup_logging(debug: bool = False) -> None:
    if debug:
        level = "DEBUG"
    else:
        level = os.environ.get("SSH_NOTIFIER_LOG", "INFO").upper()
        if not isinstance(logging.getLevelName(level), int):
            level = "INFO"
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)
    logger.debug("Application started")

    load = functools.partial(load_or_default, args.config)
    loop = EventLoop(load(), config_loader=load)

    def on_hangup(signum, frame):
        logger.info("Received signal %s, config will be reloaded", signum)
        loop.request_reload()

    signal.signal(signal.SIGHUP, on_hangup)

    try:
        with JournalFollower() as journal:
            loop.run(journal)
    except StartupError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")

    return 0


if __name__ == "__main__":
    sys.exit(main())
