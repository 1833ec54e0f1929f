# tests/conftest.py
"""Shared test fixtures.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
from hypothesis import Phase, Verbosity, settings

from lfscheck.client import LfsApiClient
from lfscheck.contracts.events import CheckOutcome, RunSummary
from lfscheck.endpoint import Endpoint

API_URL = "https://lfs.example.test/api"
BATCH_URL = f"{API_URL}/objects/batch"


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Fixtures
# =============================================================================


def _is_valid_object(obj: dict[str, Any]) -> bool:
    oid = obj["oid"]
    return len(oid) == 64 and all(c in "0123456789abcdef" for c in oid) and obj["size"] >= 0


def compliant_server(stored: set[str]) -> Callable[[httpx.Request], httpx.Response]:
    """respx side effect behaving like a batch API holding `stored` objects."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        operation = body["operation"]
        objects = []
        for obj in body["objects"]:
            oid = obj["oid"]
            entry: dict[str, Any] = {"oid": oid, "size": obj["size"]}
            if not _is_valid_object(obj):
                entry["error"] = {"code": 422, "message": "Invalid object"}
            elif operation == "download":
                if oid in stored:
                    entry["actions"] = {"download": {"href": f"https://cdn.example.test/{oid}"}}
                else:
                    entry["error"] = {"code": 404, "message": "Object does not exist"}
            elif oid not in stored:
                entry["actions"] = {"upload": {"href": f"https://cdn.example.test/{oid}"}}
            objects.append(entry)
        return httpx.Response(200, json={"transfer": "basic", "objects": objects})

    return handler


@pytest.fixture
def endpoint() -> Endpoint:
    return Endpoint.from_api_url(API_URL)


@pytest.fixture
def client(endpoint: Endpoint) -> Iterator[LfsApiClient]:
    with LfsApiClient(endpoint, timeout=5.0, object_size=100) as c:
        yield c


class RecordingReporter:
    """Reporter that records every call in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def mode_selected(self, synthesized: bool) -> None:
        self.events.append(("mode_selected", synthesized))

    def run_started(self, total: int) -> None:
        self.events.append(("run_started", total))

    def check_started(self, name: str) -> None:
        self.events.append(("check_started", name))

    def check_finished(self, outcome: CheckOutcome) -> None:
        self.events.append(("check_finished", outcome))

    def run_finished(self, summary: RunSummary) -> None:
        self.events.append(("run_finished", summary))

    @property
    def started_names(self) -> list[str]:
        return [str(payload) for kind, payload in self.events if kind == "check_started"]


@pytest.fixture
def recording_reporter() -> RecordingReporter:
    return RecordingReporter()
