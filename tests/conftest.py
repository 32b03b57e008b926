"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A fresh Registry per test
- CallContext construction with an incrementing logical clock
"""

from collections.abc import Callable

import pytest

from identity_registry.domain.ports import CallContext
from identity_registry.domain.registry import Registry

OWNER = "0xowner"


@pytest.fixture
def owner() -> str:
    """Principal that owns the test registry."""
    return OWNER


@pytest.fixture
def registry() -> Registry:
    """Create an empty registry owned by OWNER."""
    return Registry(owner=OWNER)


@pytest.fixture
def ctx() -> Callable[[str], CallContext]:
    """
    Build CallContexts with strictly increasing timestamps.

    Each call returns a context for the given caller stamped with the
    next logical time, starting at 1.
    """
    clock = iter(range(1, 1_000_000))

    def make(caller: str) -> CallContext:
        return CallContext(caller=caller, now=next(clock))

    return make
