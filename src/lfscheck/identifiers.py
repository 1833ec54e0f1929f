# src/lfscheck/identifiers.py
"""Test OID acquisition.

Two sources produce an IdentifierSet:

- File mode reads OIDs that are known to exist and known to be missing on
  the server. The server is not modified in this mode.
- Synthetic mode derives OIDs from a seeded PRNG folded into a running
  SHA-256 accumulator. The same count and seed always produce the same
  OIDs, so a failing run can be re-created without re-fetching server state.
"""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass
from pathlib import Path

from lfscheck.contracts.errors import ConfigurationError
from lfscheck.core.config import DEFAULT_OID_COUNT
from lfscheck.core.logging import get_logger

logger = get_logger(__name__)

EXISTS_SUFFIX = "_exists"
MISSING_SUFFIX = "_missing"


@dataclass(frozen=True, slots=True)
class IdentifierSet:
    """OIDs present on the server and OIDs that never were.

    Tuples, so checks cannot mutate what later checks see.
    """

    exist: tuple[str, ...]
    missing: tuple[str, ...]
    synthesized: bool = False


def read_oid_file(path: Path) -> list[str]:
    """Read one OID per line, stripping surrounding whitespace.

    Order is preserved and nothing is validated. Blank lines become empty
    strings; a last line without a trailing newline is kept.

    Raises:
        ConfigurationError: If the file cannot be opened or decoded.
    """
    try:
        with path.open(encoding="utf-8") as f:
            return [line.strip() for line in f]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Error opening file {path}: {e}") from e


def load_test_oids(exist_file: Path, missing_file: Path) -> IdentifierSet:
    exist = read_oid_file(exist_file)
    missing = read_oid_file(missing_file)
    logger.debug("loaded test oids", exist_file=str(exist_file), exist=len(exist), missing=len(missing))
    return IdentifierSet(exist=tuple(exist), missing=tuple(missing), synthesized=False)


def construct_test_oids(count: int = DEFAULT_OID_COUNT, seed: int | None = None) -> IdentifierSet:
    """Deterministically synthesize `count` present and `count` missing OIDs.

    Each round feeds one PRNG byte into the running hash and takes the digest
    as a present OID, then feeds another byte and takes the digest as a
    missing OID. The seed defaults to `count`.
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")

    rng = random.Random(count if seed is None else seed)
    running = hashlib.sha256()
    exist: list[str] = []
    missing: list[str] = []

    for _ in range(count):
        running.update(bytes([rng.randrange(256)]))
        exist.append(running.hexdigest())

        running.update(bytes([rng.randrange(256)]))
        missing.append(running.hexdigest())

    return IdentifierSet(exist=tuple(exist), missing=tuple(missing), synthesized=True)


def save_test_oids(ids: IdentifierSet, prefix: Path) -> tuple[Path, Path]:
    """Write OIDs to `<prefix>_exists` and `<prefix>_missing`.

    The files can be passed back as positional arguments to replay a run
    in file mode.

    Returns:
        Paths of the exists file and the missing file.

    Raises:
        ConfigurationError: If either file cannot be written.
    """
    exist_path = prefix.with_name(prefix.name + EXISTS_SUFFIX)
    missing_path = prefix.with_name(prefix.name + MISSING_SUFFIX)
    try:
        for path, oids in ((exist_path, ids.exist), (missing_path, ids.missing)):
            with path.open("w", encoding="utf-8") as f:
                f.writelines(f"{oid}\n" for oid in oids)
    except OSError as e:
        raise ConfigurationError(f"Error saving test oids with prefix {prefix}: {e}") from e

    logger.debug("saved test oids", exist_file=str(exist_path), missing_file=str(missing_path))
    return exist_path, missing_path
