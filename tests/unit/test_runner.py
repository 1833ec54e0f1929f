# tests/unit/test_runner.py
"""Tests for CheckRunner sequencing and failure handling."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from lfscheck.checks.registry import CheckRegistry, ServerCheck
from lfscheck.client import LfsApiClient
from lfscheck.contracts.errors import CheckFailedError, LfsTransportError, SetupFailedError
from lfscheck.contracts.events import CheckOutcome, CheckStatus, RunSummary
from lfscheck.identifiers import IdentifierSet, construct_test_oids
from lfscheck.runner import CheckRunner
from tests.conftest import RecordingReporter

FILE_IDS = IdentifierSet(exist=("e1",), missing=("m1",), synthesized=False)
SYNTHETIC_IDS = construct_test_oids(count=2)


class CallLog:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def passing(self, name: str):
        def check(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
            self.calls.append(name)

        return check

    def failing(self, name: str, error: Exception):
        def check(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
            self.calls.append(name)
            raise error

        return check


def _registry(*checks: tuple[str, object]) -> CheckRegistry:
    registry = CheckRegistry()
    for name, func in checks:
        registry.register(name, func)  # type: ignore[arg-type]
    return registry.freeze()


class TestRunCheck:
    def test_success_outcome(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(_registry(), recording_reporter)

        outcome = runner.run_check(ServerCheck("one", log.passing("one")), client, FILE_IDS)

        assert outcome.status is CheckStatus.OK
        assert outcome.passed
        assert outcome.message is None
        assert outcome.duration_seconds >= 0
        assert recording_reporter.events == [("check_started", "one"), ("check_finished", outcome)]

    def test_failure_outcome_carries_message(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(_registry(), recording_reporter)

        outcome = runner.run_check(
            ServerCheck("one", log.failing("one", CheckFailedError("server said no"))), client, FILE_IDS
        )

        assert outcome.status is CheckStatus.FAILED
        assert outcome.message == "server said no"

    def test_transport_errors_are_check_failures(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(_registry(), recording_reporter)

        outcome = runner.run_check(ServerCheck("one", log.failing("one", LfsTransportError("refused"))), client, FILE_IDS)

        assert not outcome.passed

    def test_unexpected_exception_propagates(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(_registry(), recording_reporter)

        with pytest.raises(KeyError):
            runner.run_check(ServerCheck("bug", log.failing("bug", KeyError("oops"))), client, FILE_IDS)

    def test_check_receives_identifiers(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        seen: list[tuple[Sequence[str], Sequence[str]]] = []

        def check(c: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
            assert c is client
            seen.append((oids_exist, oids_missing))

        CheckRunner(_registry(), recording_reporter).run_check(ServerCheck("one", check), client, FILE_IDS)

        assert seen == [(("e1",), ("m1",))]


class TestRun:
    def test_file_mode_never_runs_setup(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(
            _registry(("a", log.passing("a")), ("b", log.passing("b"))),
            recording_reporter,
            setup_check=ServerCheck("setup", log.passing("setup")),
        )

        runner.run(client, FILE_IDS)

        assert log.calls == ["a", "b"]
        assert recording_reporter.started_names == ["a", "b"]

    def test_synthetic_mode_runs_setup_once_first(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(
            _registry(("a", log.passing("a")), ("b", log.passing("b"))),
            recording_reporter,
            setup_check=ServerCheck("setup", log.passing("setup")),
        )

        runner.run(client, SYNTHETIC_IDS)

        assert log.calls == ["setup", "a", "b"]
        assert recording_reporter.started_names == ["setup", "a", "b"]

    def test_setup_failure_prevents_all_checks(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(
            _registry(("a", log.passing("a"))),
            recording_reporter,
            setup_check=ServerCheck("setup", log.failing("setup", CheckFailedError("cannot upload"))),
        )

        with pytest.raises(SetupFailedError, match="cannot upload") as exc_info:
            runner.run(client, SYNTHETIC_IDS)

        assert exc_info.value.reason == "cannot upload"
        assert log.calls == ["setup"]
        assert ("run_started", 1) not in recording_reporter.events

    def test_failure_does_not_skip_later_checks(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(
            _registry(
                ("a", log.failing("a", CheckFailedError("a broke"))),
                ("b", log.passing("b")),
                ("c", log.failing("c", CheckFailedError("c broke"))),
            ),
            recording_reporter,
        )

        summary = runner.run(client, FILE_IDS)

        assert log.calls == ["a", "b", "c"]
        assert (summary.total, summary.passed, summary.failed) == (3, 1, 2)
        assert summary.exit_code == 0

    def test_strict_mode_exit_code(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(
            _registry(("a", log.failing("a", CheckFailedError("broke")))),
            recording_reporter,
            strict=True,
        )

        assert runner.run(client, FILE_IDS).exit_code == 1

    def test_strict_mode_all_passing(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(_registry(("a", log.passing("a"))), recording_reporter, strict=True)

        assert runner.run(client, FILE_IDS).exit_code == 0

    def test_event_sequence(self, client: LfsApiClient, recording_reporter: RecordingReporter) -> None:
        log = CallLog()
        runner = CheckRunner(_registry(("a", log.passing("a"))), recording_reporter)

        summary = runner.run(client, FILE_IDS)

        kinds = [kind for kind, _ in recording_reporter.events]
        assert kinds == ["run_started", "check_started", "check_finished", "run_finished"]
        assert recording_reporter.events[-1] == ("run_finished", summary)
        assert isinstance(summary, RunSummary)
        finished = recording_reporter.events[2][1]
        assert isinstance(finished, CheckOutcome)
        assert finished.name == "a"
