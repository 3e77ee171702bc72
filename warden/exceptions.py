"""Exception hierarchy for the idempotency guard.

All errors raised by warden inherit from WardenError. Only LockConflict
ever becomes visible to an end client, and only as the 409 conflict outcome.
"""


class WardenError(Exception):
    """Base exception for all warden errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class LockConflict(WardenError):
    """Raised when a lease is held by someone else.

    On acquisition this means another execution for the same fingerprint is
    in flight. On release it means the lease expired and was possibly
    reclaimed by another process.
    """

    def __init__(self, message: str, fingerprint: str | None = None) -> None:
        super().__init__(message)
        self.fingerprint = fingerprint


class BackendError(WardenError):
    """Raised when the shared key-value store fails a command.

    Covers error replies such as READONLY after a failover or OOM.
    """


class BackendUnavailableError(BackendError):
    """Raised when the shared key-value store cannot be reached."""
