"""
Built-in comparison strategies and the default registry.

Usage::

    from cqrs_ddd_sieve.operators_memory import build_default_registry

    registry = build_default_registry()
    registry.evaluate(SpecificationOperator.EQ, 3, 3)  # True
"""

from __future__ import annotations

from ..evaluator import MemoryOperatorRegistry
from .standard import EqualOperator


def build_default_registry() -> MemoryOperatorRegistry:
    """Create a fresh registry populated with the built-in operators."""
    registry = MemoryOperatorRegistry()
    registry.register_all(EqualOperator())
    return registry


__all__ = [
    "EqualOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
]
