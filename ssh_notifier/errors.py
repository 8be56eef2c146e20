# ssh_notifier/errors.py


class NotifierError(Exception):
    """Base class for every error raised by ssh_notifier."""


class ConfigError(NotifierError):
    def __init__(self, path, message):
        super().__init__(f"{path}: {message}")
        self.path = path


class ConfigNotFoundError(ConfigError):
    pass


class ConfigParseError(ConfigError):
    pass


class ConfigIOError(ConfigError):
    pass


class NotifyDispatchError(NotifierError):
    """The notification command failed or could not be found."""


class GreetingError(NotifierError):
    """The greeting could not be written to the session's terminal."""


class StartupError(NotifierError):
    """The log source could not be started."""
