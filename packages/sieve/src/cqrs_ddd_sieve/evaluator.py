"""
Comparison strategies for evaluating sieve expressions in memory.

``MemoryOperator`` is the strategy interface for comparing a property
value read from a candidate with a value held by the sieve.
``MemoryOperatorRegistry`` maps each :class:`SpecificationOperator` to
its strategy; :func:`~cqrs_ddd_sieve.operators_memory.build_default_registry`
returns a registry with the built-in operators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from .operators import SpecificationOperator


class MemoryOperator(ABC):
    """Strategy interface for one comparison operator."""

    @property
    @abstractmethod
    def name(self) -> SpecificationOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        """
        Compare a candidate's property value with the sieve's value.

        Args:
            field_value: The value read from the candidate object.
            condition_value: The acceptable value held by the expression.
        """
        ...


class MemoryOperatorRegistry:
    """
    Comparison strategies keyed by the operator they implement.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register(EqualOperator())

        registry.evaluate(SpecificationOperator.EQ, order.status, "open")
    """

    def __init__(self) -> None:
        self._operators: dict[SpecificationOperator, MemoryOperator] = {}

    def register(self, operator: MemoryOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        for op in operators:
            self.register(op)

    def unregister(self, name: SpecificationOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: SpecificationOperator) -> MemoryOperator | None:
        return self._operators.get(name)

    def has(self, name: SpecificationOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[SpecificationOperator]:
        return set(self._operators)

    def require(self, name: SpecificationOperator) -> MemoryOperator:
        """
        Return the registered operator.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(
                f"No comparison strategy registered for operator {name!r}"
            )
        return op

    def evaluate(
        self,
        name: SpecificationOperator,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        return self.require(name).evaluate(field_value, condition_value)

    def bind(
        self, name: SpecificationOperator, condition_value: Any
    ) -> Callable[[Any], bool]:
        """Return ``field_value -> bool`` with the operator and value fixed."""
        evaluate = self.require(name).evaluate

        def _bound(field_value: Any) -> bool:
            return evaluate(field_value, condition_value)

        return _bound
