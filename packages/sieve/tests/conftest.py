"""Shared fixtures for sieve tests."""

from __future__ import annotations

import pytest

from cqrs_ddd_sieve.operators_memory import build_default_registry


@pytest.fixture
def registry():
    """Default in-memory operator registry for building expressions."""
    return build_default_registry()
