# src/lfscheck/contracts/errors.py
"""Exception contracts for lfscheck.

Two tiers of failure exist:

- Fatal errors (ConfigurationError, SetupFailedError) stop the run before any
  registered check executes. The CLI maps them to exit status 2.
- Check failures (CheckFailedError and subclasses) are captured per check,
  reported alongside the check name, and execution continues.

Anything else raised from a check is a bug and propagates.
"""


class LfsCheckError(Exception):
    """Base class for all lfscheck errors."""


# =============================================================================
# Fatal Errors
# =============================================================================


class ConfigurationError(LfsCheckError):
    """Raised when the run cannot start because of bad input.

    Covers URL selection, positional argument count, unreadable OID files
    and invalid settings.
    """


class SetupFailedError(LfsCheckError):
    """Raised when the setup check fails in synthetic mode.

    Attributes:
        reason: Failure message reported by the setup check.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to set up test data: {reason}")
        self.reason = reason


# =============================================================================
# Per-Check Failures
# =============================================================================


class CheckFailedError(LfsCheckError):
    """Raised by a check to report that the server did not conform."""


class LfsProtocolError(CheckFailedError):
    """Server response did not match the batch API contract."""


class LfsTransportError(CheckFailedError):
    """Request could not be completed (connection, timeout, TLS, ...)."""
