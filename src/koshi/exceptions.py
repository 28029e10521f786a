"""Koshi exceptions.

Every error the CLI knows how to report derives from KoshiError. The CLI
layer maps them onto exit codes; service code only raises.
"""


class KoshiError(Exception):
    """Base exception for koshi errors."""

    pass


class PreconditionError(KoshiError):
    """Raised when a check fails before any mutation was attempted.

    Not a jj repository, empty change, unauthenticated remote, missing base
    bookmark or a description that is too short.
    """

    pass


class ConfigurationError(KoshiError):
    """Raised when required configuration cannot be resolved."""

    pass


class Cancelled(KoshiError):
    """Raised when the user interrupts an interactive prompt.

    Aborts the whole invocation. Not an error from the user's point of view,
    so it is never logged as one.
    """

    exit_code = 130

    def __init__(self, message: str = "cancelled by user") -> None:
        super().__init__(message)


class RemoteOperationError(KoshiError):
    """Raised when a push, query or mutation against a remote fails.

    Never retried automatically.
    """

    pass


class CommandError(RemoteOperationError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str = "") -> None:
        message = stderr.strip() or f"exited with status {returncode}"
        super().__init__(f"{args[0]} failed: {message}")
        self.command = args
        self.returncode = returncode
        self.stderr = stderr
