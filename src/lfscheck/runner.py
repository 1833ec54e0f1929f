# src/lfscheck/runner.py
"""Sequential check runner.

Run flow:
    [setup check, synthetic mode only] -> every registered check in order
    -> summary

The mode line is announced by the caller before test data is acquired.

A failing check never stops later checks. A failing setup check raises
SetupFailedError before any registered check runs. Only CheckFailedError is
treated as a check failure; any other exception is a bug and propagates.
"""

from __future__ import annotations

import time

from lfscheck.checks.registry import CheckRegistry, ServerCheck
from lfscheck.checks.setup import SETUP_CHECK
from lfscheck.client import LfsApiClient
from lfscheck.contracts.errors import CheckFailedError, SetupFailedError
from lfscheck.contracts.events import CheckOutcome, CheckStatus, RunSummary
from lfscheck.core.logging import get_logger
from lfscheck.identifiers import IdentifierSet
from lfscheck.reporting import Reporter

logger = get_logger(__name__)


class CheckRunner:
    """Runs checks against one endpoint and reports each outcome.

    Args:
        registry: Frozen registry supplying the ordinary checks
        reporter: Receives progress and results
        setup_check: Check run once before the others in synthetic mode
        strict: If True, a run with any failed check gets exit_code 1
    """

    def __init__(
        self,
        registry: CheckRegistry,
        reporter: Reporter,
        *,
        setup_check: ServerCheck = SETUP_CHECK,
        strict: bool = False,
    ) -> None:
        self._registry = registry
        self._reporter = reporter
        self._setup_check = setup_check
        self._strict = strict

    def run_check(self, check: ServerCheck, client: LfsApiClient, ids: IdentifierSet) -> CheckOutcome:
        self._reporter.check_started(check.name)
        log = logger.bind(check=check.name)

        start = time.perf_counter()
        try:
            check.func(client, ids.exist, ids.missing)
        except CheckFailedError as e:
            outcome = CheckOutcome(
                name=check.name,
                status=CheckStatus.FAILED,
                message=str(e),
                duration_seconds=time.perf_counter() - start,
            )
            log.info("check failed", error=str(e), error_type=type(e).__name__)
        else:
            outcome = CheckOutcome(
                name=check.name,
                status=CheckStatus.OK,
                message=None,
                duration_seconds=time.perf_counter() - start,
            )
            log.debug("check passed", duration_seconds=outcome.duration_seconds)

        self._reporter.check_finished(outcome)
        return outcome

    def run_setup(self, client: LfsApiClient, ids: IdentifierSet) -> CheckOutcome:
        """Run the setup check once.

        Raises:
            SetupFailedError: If the setup check failed.
        """
        outcome = self.run_check(self._setup_check, client, ids)
        if not outcome.passed:
            raise SetupFailedError(outcome.message or "setup check failed")
        return outcome

    def run_all(self, client: LfsApiClient, ids: IdentifierSet) -> list[CheckOutcome]:
        self._reporter.run_started(len(self._registry))
        return [self.run_check(check, client, ids) for check in self._registry]

    def run(self, client: LfsApiClient, ids: IdentifierSet) -> RunSummary:
        """Run setup (synthetic mode only), then every registered check.

        Raises:
            SetupFailedError: If setup failed; no registered check has run.
        """
        start = time.perf_counter()
        logger.info(
            "starting compliance run",
            endpoint=client.endpoint.sanitized_url,
            synthesized=ids.synthesized,
            exist=len(ids.exist),
            missing=len(ids.missing),
        )

        if ids.synthesized:
            self.run_setup(client, ids)

        outcomes = self.run_all(client, ids)
        failed = sum(1 for o in outcomes if not o.passed)
        summary = RunSummary(
            total=len(outcomes),
            passed=len(outcomes) - failed,
            failed=failed,
            duration_seconds=time.perf_counter() - start,
            exit_code=1 if self._strict and failed else 0,
        )
        self._reporter.run_finished(summary)
        logger.info("compliance run finished", total=summary.total, failed=summary.failed)
        return summary
