"""Test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from sigil.methods.base import _registry
from sigil.parser import Parser

from .support.constants import TEST_NOW


@pytest.fixture(autouse=True)
def environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear environment variables that would change the configuration."""
    for name in (
        "SIGIL_AUDIENCE",
        "SIGIL_ISSUER",
        "SIGIL_LOG_LEVEL",
        "SIGIL_LOG_PROFILE",
        "SIGIL_SKIP_CLAIMS_VALIDATION",
        "SIGIL_USE_DECIMAL",
        "SIGIL_VALID_METHODS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def parser() -> Parser:
    """Return a parser with default settings and a fixed clock."""
    return Parser(clock=lambda: TEST_NOW)


@pytest.fixture
def registry() -> Iterator[None]:
    """Restore the signing method registry after the test."""
    saved = dict(_registry)
    yield
    _registry.clear()
    _registry.update(saved)
