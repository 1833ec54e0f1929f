# src/lfscheck/checks/__init__.py
"""Compliance checks and the registry that orders them."""

from lfscheck.checks.batch import register_batch_checks
from lfscheck.checks.registry import CheckFunc, CheckRegistry, ServerCheck
from lfscheck.checks.setup import SETUP_CHECK


def build_default_registry() -> CheckRegistry:
    """Return the frozen registry of built-in checks, in execution order."""
    registry = CheckRegistry()
    register_batch_checks(registry)
    return registry.freeze()


__all__ = [
    "SETUP_CHECK",
    "CheckFunc",
    "CheckRegistry",
    "ServerCheck",
    "build_default_registry",
]
