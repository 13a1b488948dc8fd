"""
Error Types
===========

[ERRORS] Every failure raised by the tooling derives from OwnershipToolError,
so scripts can catch one base class at the entry point.
"""


class OwnershipToolError(Exception):
    """Base error for the ownership tooling."""
    pass


class ConfigError(OwnershipToolError):
    """Required configuration is missing or malformed."""

    def __init__(self, message: str, missing=()):
        super().__init__(message)
        self.missing = tuple(missing)


class UnsupportedProofError(OwnershipToolError, ValueError):
    """Proof object is not one of the known shapes."""
    pass


class SemaphoreBridgeError(OwnershipToolError):
    """
    The Node.js Semaphore helper failed.

    [SDK] stderr of the helper process is kept so callers can show the
    underlying JavaScript error.
    """

    def __init__(self, message: str, stderr: str = "", returncode: int = -1):
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class TransactionFailedError(OwnershipToolError):
    """Transaction was mined with a failed status."""

    def __init__(self, message: str, tx_hash: str = "", receipt=None):
        super().__init__(message)
        self.tx_hash = tx_hash
        self.receipt = receipt


class GroupCreationError(OwnershipToolError):
    """No createGroup variant succeeded on the Semaphore contract."""

    def __init__(self, message: str, attempts=()):
        super().__init__(message)
        self.attempts = list(attempts)
