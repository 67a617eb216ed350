"""Exception hierarchy."""

from __future__ import annotations


class MacCleanupError(Exception):
    """Base class for all mac-cleanup errors."""


class ConfigError(MacCleanupError):
    """Raised when the target catalog is malformed or inconsistent."""


class UserConfigError(MacCleanupError):
    """Raised when the user config file cannot be read or parsed."""


class TrashError(MacCleanupError):
    """Raised when moving a path to the Trash fails."""


class LockCheckError(MacCleanupError):
    """Raised when open-file detection fails or times out."""


class RunnerError(MacCleanupError):
    """Base class for non-interactive runner failures."""


class NoSelectionError(RunnerError):
    """No targets were selected."""

    def __init__(self, message: str = "no targets selected") -> None:
        super().__init__(message)


class NoEligibleTargetsError(RunnerError):
    """Every selected target was skipped or missing."""

    def __init__(self, message: str = "no eligible targets selected") -> None:
        super().__init__(message)


class NilConfigError(RunnerError):
    """The runner was created without a catalog."""

    def __init__(self, message: str = "config is required") -> None:
        super().__init__(message)


class NilUserConfigError(RunnerError):
    """The runner was created without a user config."""

    def __init__(self, message: str = "user config is required") -> None:
        super().__init__(message)
