"""Error types raised across the bot.

Only AuthError and ConfigError are fatal, and only at startup. Everything
else is caught where it happens and becomes a log line or a chat reply.
"""


class ChatlockError(Exception):
    """Base class for every error raised by chatlock."""


class AuthError(ChatlockError):
    """The chat platform rejected the bot's credentials."""


class ConfigError(ChatlockError):
    """Missing credentials or unparseable persisted state."""


class UsageError(ChatlockError):
    """A command was given the wrong arguments."""

    def __init__(self, command, hint=""):
        self.command = command
        self.hint = hint
        super().__init__(f"{command} {hint}".strip())


class IndexOutOfRange(ChatlockError):
    """A 1-based corpus index outside [1, len]."""

    def __init__(self, index, length):
        self.index = index
        self.length = length
        super().__init__(f"index {index} not in 1..{length}")


class RemoteError(ChatlockError):
    """A send, set-title or set-nickname call failed on the platform side."""


class PersistenceError(ChatlockError):
    """Writing a state file failed."""
