# src/lfscheck/checks/registry.py
"""Ordered, append-only registry of named server checks.

Checks run in registration order. A registry is frozen before the runner
sees it, after which registration raises.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lfscheck.client import LfsApiClient

# Returns normally on success, raises CheckFailedError on failure.
CheckFunc = Callable[["LfsApiClient", Sequence[str], Sequence[str]], None]


@dataclass(frozen=True, slots=True)
class ServerCheck:
    name: str
    func: CheckFunc


class CheckRegistry:
    """Ordered, append-only list of checks.

    Populated once at start-up, then frozen; the runner only reads it.
    """

    def __init__(self) -> None:
        self._checks: list[ServerCheck] = []
        self._frozen = False

    def register(self, name: str, func: CheckFunc) -> ServerCheck:
        """Append a check.

        Raises:
            RuntimeError: If the registry has been frozen.
            ValueError: If the name is empty or already registered.
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register {name!r}: registry is frozen")
        if not name:
            raise ValueError("Check name must not be empty")
        if any(c.name == name for c in self._checks):
            raise ValueError(f"Check {name!r} is already registered")
        check = ServerCheck(name=name, func=func)
        self._checks.append(check)
        return check

    def freeze(self) -> CheckRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def names(self) -> list[str]:
        return [c.name for c in self._checks]

    def __iter__(self) -> Iterator[ServerCheck]:
        return iter(tuple(self._checks))

    def __len__(self) -> int:
        return len(self._checks)
