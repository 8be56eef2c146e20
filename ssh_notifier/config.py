# ssh_notifier/config.py

import logging
import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .errors import (
    ConfigError,
    ConfigIOError,
    ConfigNotFoundError,
    ConfigParseError,
)
from .models import UNKNOWN, Configuration, KnownIdentity

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "ssh-notifier.yaml"

# Top-level keys that map straight onto Configuration fields
TEMPLATE_KEYS = (
    "notify_title",
    "notify_title_for_stranger",
    "notify_message",
    "notify_message_for_stranger",
    "time_format",
)

EXAMPLE_USERS = """\
# One entry per person, keyed by the name shown in notifications.
# users:
#   username:
#     fingerprint:
#       - "SHA256:xxx..."
#       - "SHA256:xxx..."
#     greeting: "Welcome back!"
#     no-notify:
"""


def default_config_path() -> Path:
    """Return the per-user config file path under the XDG config directory."""
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / CONFIG_FILE_NAME
    return Path.home() / ".config" / CONFIG_FILE_NAME


def write_default_config(path) -> None:
    """Write a commented example config to `path`."""
    path = Path(path)
    defaults = Configuration()
    header = {key: getattr(defaults, key) for key in TEMPLATE_KEYS}
    header["users"] = {}

    text = (
        "# ssh-notifier configuration\n"
        "# Placeholders: {name} {user} {ip} {fpr} {time}\n"
        "# time_format: rfc3339, rfc2822 or a strftime pattern\n"
        + yaml.safe_dump(header, sort_keys=False, allow_unicode=True)
        + EXAMPLE_USERS
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("x", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ConfigIOError(path, f"could not write example config: {e}") from e


def load_config(path) -> Configuration:
    """
    Read and parse the config file at `path`.

    Raises ConfigNotFoundError, ConfigIOError or ConfigParseError. The
    caller decides what to fall back to.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigNotFoundError(path, "config file does not exist") from e
    except OSError as e:
        raise ConfigIOError(path, str(e)) from e
    except UnicodeDecodeError as e:
        raise ConfigParseError(path, f"not valid UTF-8: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigParseError(path, f"invalid YAML: {e}") from e

    # Empty file, everything default
    if data is None:
        return Configuration()
    if not isinstance(data, dict):
        raise ConfigParseError(path, "top level must be a mapping")

    return parse_config(data, path)


def parse_config(data: Dict[str, Any], path="<config>") -> Configuration:
    """Build a Configuration from an already decoded document."""
    settings: Dict[str, Any] = {}
    for key in TEMPLATE_KEYS:
        if key not in data:
            continue
        value = data[key]
        if not isinstance(value, str):
            raise ConfigParseError(path, f"{key} must be a string")
        settings[key] = value

    users = data.get("users") or {}
    if not isinstance(users, dict):
        raise ConfigParseError(path, "users must be a mapping of name to settings")

    settings["identities"] = tuple(_parse_users(users))
    return Configuration(**settings)


def _parse_users(users: Dict[Any, Any]) -> List[KnownIdentity]:
    identities: List[KnownIdentity] = []
    for name, node in users.items():
        name = str(name)
        if not isinstance(node, dict):
            # Declares nothing usable
            logger.debug("Skipping user %s without settings", name)
            continue
        if name == UNKNOWN:
            logger.warning("User name %s is reserved, skipping entry", UNKNOWN)
            continue

        identities.append(
            KnownIdentity(
                name=name,
                fingerprints=frozenset(_flatten(node.get("fingerprint"))),
                suppress_notification="no-notify" in node,
                greeting=_first_arg(node.get("greeting")),
            )
        )
    return identities


def _flatten(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for item in value:
            out.extend(_flatten(item))
        return out
    value = str(value)
    return [value] if value else []


def _first_arg(value) -> str:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str):
        return value
    return ""


def load_or_default(path=None) -> Configuration:
    """
    Load the config, falling back to the built-in defaults on any error.

    A missing file is replaced by a commented example so the user has
    something to edit. Never raises.
    """
    path = Path(path) if path is not None else default_config_path()
    try:
        config = load_config(path)
    except ConfigNotFoundError:
        logger.info("No config at %s, creating an example one", path)
        try:
            write_default_config(path)
        except ConfigError as e:
            logger.error("%s", e)
        return Configuration()
    except ConfigError as e:
        logger.error("%s", e)
        logger.warning("Failed to load configuration, falling back to defaults")
        return Configuration()

    logger.info("Loaded %d user(s) from %s", len(config.identities), path)
    return config


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    conf = load_or_default()
    for identity in conf.identities:
        print(f"{identity.name}: {sorted(identity.fingerprints)}")
