# src/lfscheck/checks/batch.py
"""Batch API conformance checks.

Each check sends one batch request and asserts per-object expectations:

- present objects: download offers a `download` action; upload offers
  no action (the server already has them) and no error
- missing objects: download reports an object error with code 404;
  upload offers an `upload` action
- malformed requests (bad OID, negative size): rejected with HTTP 422,
  or accepted with an object-level 422 error
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from lfscheck.client import BatchObject, BatchResponse, parse_batch_response
from lfscheck.contracts.errors import CheckFailedError, LfsProtocolError

if TYPE_CHECKING:
    from lfscheck.checks.registry import CheckRegistry
    from lfscheck.client import LfsApiClient

INVALID_OID = "not-a-valid-sha256-oid"
UNPROCESSABLE = 422
NOT_FOUND = 404


def _index_objects(response: BatchResponse, requested: Sequence[str]) -> dict[str, BatchObject]:
    """Map each requested OID to its response object.

    Raises:
        LfsProtocolError: If an OID is missing, duplicated or unexpected.
    """
    by_oid: dict[str, BatchObject] = {}
    for obj in response.objects:
        if obj.oid in by_oid:
            raise LfsProtocolError(f"Object {obj.oid} appears more than once in the response")
        by_oid[obj.oid] = obj

    expected = set(requested)
    absent = [oid for oid in requested if oid not in by_oid]
    if absent:
        raise LfsProtocolError(f"{len(absent)} requested object(s) missing from response, first: {absent[0]}")
    unexpected = sorted(set(by_oid) - expected)
    if unexpected:
        raise LfsProtocolError(f"Response contains unrequested object(s): {', '.join(unexpected)}")
    return by_oid


def _expect_action(obj: BatchObject, action: str) -> None:
    if obj.error is not None:
        raise CheckFailedError(f"Object {obj.oid}: expected '{action}' action, got error {obj.error.code}: {obj.error.message}")
    if action not in obj.actions:
        offered = ", ".join(sorted(obj.actions)) or "none"
        raise CheckFailedError(f"Object {obj.oid}: expected '{action}' action, got actions: {offered}")


def _expect_error(obj: BatchObject, code: int) -> None:
    if obj.error is None:
        raise CheckFailedError(f"Object {obj.oid}: expected error {code}, got no error")
    if obj.error.code != code:
        raise CheckFailedError(f"Object {obj.oid}: expected error {code}, got error {obj.error.code}: {obj.error.message}")
    if obj.actions:
        raise CheckFailedError(f"Object {obj.oid}: error {code} must not offer actions, got: {', '.join(sorted(obj.actions))}")


def _expect_nothing_to_do(obj: BatchObject) -> None:
    if obj.error is not None:
        raise CheckFailedError(f"Object {obj.oid}: expected no action for a stored object, got error {obj.error.code}: {obj.error.message}")
    if "upload" in obj.actions:
        raise CheckFailedError(f"Object {obj.oid}: server asked to upload an object it already stores")


def _require(oids: Sequence[str], label: str) -> None:
    if not oids:
        raise CheckFailedError(f"No {label} OIDs supplied")


# =============================================================================
# Download
# =============================================================================


def download_all_present(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
    _require(oids_exist, "present")
    by_oid = _index_objects(client.batch("download", client.objects(oids_exist)), oids_exist)
    for oid in oids_exist:
        _expect_action(by_oid[oid], "download")


def download_all_missing(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
    _require(oids_missing, "missing")
    by_oid = _index_objects(client.batch("download", client.objects(oids_missing)), oids_missing)
    for oid in oids_missing:
        _expect_error(by_oid[oid], NOT_FOUND)


def download_mixed(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
    _require(oids_exist, "present")
    _require(oids_missing, "missing")
    requested = [*oids_exist, *oids_missing]
    by_oid = _index_objects(client.batch("download", client.objects(requested)), requested)
    for oid in oids_exist:
        _expect_action(by_oid[oid], "download")
    for oid in oids_missing:
        _expect_error(by_oid[oid], NOT_FOUND)


# =============================================================================
# Upload
# =============================================================================


def upload_all_missing(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
    _require(oids_missing, "missing")
    by_oid = _index_objects(client.batch("upload", client.objects(oids_missing)), oids_missing)
    for oid in oids_missing:
        _expect_action(by_oid[oid], "upload")


def upload_all_present(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
    _require(oids_exist, "present")
    by_oid = _index_objects(client.batch("upload", client.objects(oids_exist)), oids_exist)
    for oid in oids_exist:
        _expect_nothing_to_do(by_oid[oid])


def upload_mixed(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
    _require(oids_exist, "present")
    _require(oids_missing, "missing")
    requested = [*oids_exist, *oids_missing]
    by_oid = _index_objects(client.batch("upload", client.objects(requested)), requested)
    for oid in oids_exist:
        _expect_nothing_to_do(by_oid[oid])
    for oid in oids_missing:
        _expect_action(by_oid[oid], "upload")


def _expect_rejected(client: LfsApiClient, objects: list[dict[str, object]], what: str) -> None:
    response = client.post_batch({"operation": "upload", "transfers": ["basic"], "objects": objects})
    if response.status_code == UNPROCESSABLE:
        return
    if response.status_code != 200:
        raise CheckFailedError(f"Upload with {what}: expected HTTP {UNPROCESSABLE}, got HTTP {response.status_code}")

    parsed = parse_batch_response(response)
    if len(parsed.objects) != len(objects):
        raise LfsProtocolError(f"Upload with {what}: expected {len(objects)} object(s) in response, got {len(parsed.objects)}")
    for obj in parsed.objects:
        if obj.error is None or obj.error.code != UNPROCESSABLE:
            got = "no error" if obj.error is None else f"error {obj.error.code}"
            raise CheckFailedError(f"Upload with {what}: expected HTTP {UNPROCESSABLE} or object error {UNPROCESSABLE}, got {got}")


def upload_invalid_oid(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
    _expect_rejected(client, client.objects([INVALID_OID]), f"invalid OID {INVALID_OID!r}")


def upload_negative_size(client: LfsApiClient, oids_exist: Sequence[str], oids_missing: Sequence[str]) -> None:
    _require(oids_missing, "missing")
    _expect_rejected(client, client.objects(oids_missing[:1], size=-1), "negative size")


def register_batch_checks(registry: CheckRegistry) -> None:
    registry.register("Test download: all present", download_all_present)
    registry.register("Test download: all missing", download_all_missing)
    registry.register("Test download: mixed", download_mixed)
    registry.register("Test upload: all missing", upload_all_missing)
    registry.register("Test upload: all present", upload_all_present)
    registry.register("Test upload: mixed", upload_mixed)
    registry.register("Test upload: invalid OID", upload_invalid_oid)
    registry.register("Test upload: negative size", upload_negative_size)
