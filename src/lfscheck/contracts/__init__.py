"""Shared contracts: errors and result events.

Leaf package; imports nothing else from lfscheck.
"""

from lfscheck.contracts.errors import (
    CheckFailedError,
    ConfigurationError,
    LfsCheckError,
    LfsProtocolError,
    LfsTransportError,
    SetupFailedError,
)
from lfscheck.contracts.events import CheckOutcome, CheckStatus, RunSummary

__all__ = [
    "CheckFailedError",
    "CheckOutcome",
    "CheckStatus",
    "ConfigurationError",
    "LfsCheckError",
    "LfsProtocolError",
    "LfsTransportError",
    "RunSummary",
    "SetupFailedError",
]
