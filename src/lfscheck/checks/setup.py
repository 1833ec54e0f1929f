# src/lfscheck/checks/setup.py
"""Setup check run before the registered checks in synthetic mode.

It goes through the same runner path as every other check, so a server
that cannot even accept the setup requests fails here and aborts the run.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from lfscheck.checks.registry import ServerCheck
from lfscheck.core.logging import get_logger

if TYPE_CHECKING:
    from lfscheck.client import LfsApiClient

logger = get_logger(__name__)

SETUP_CHECK_NAME = "Set up test data"


def setup_test_data(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
    # TODO: upload content for oids_exist once synthesized OIDs are derived from real object content.
    logger.debug(
        "setup is a placeholder, no objects uploaded",
        endpoint=client.endpoint.sanitized_url,
        exist=len(oids_exist),
    )


SETUP_CHECK = ServerCheck(name=SETUP_CHECK_NAME, func=setup_test_data)
