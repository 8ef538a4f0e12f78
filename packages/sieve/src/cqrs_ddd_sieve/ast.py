"""Property comparison leaves of the expression tree."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from .base import BaseSpecification
from .operators import SpecificationOperator

if TYPE_CHECKING:
    from .evaluator import MemoryOperatorRegistry

T = TypeVar("T", contravariant=True)


class AttributeSpecification(BaseSpecification[T]):
    """
    ``item.<attr> <op> <val>`` for a single property of the candidate.

    Comparison is delegated to the injected
    :class:`~cqrs_ddd_sieve.evaluator.MemoryOperatorRegistry`, so the same
    leaf can be evaluated with different operator strategies.
    """

    def __init__(
        self,
        attr: str,
        op: SpecificationOperator | str,
        val: Any,
        *,
        registry: MemoryOperatorRegistry,
    ) -> None:
        if registry is None:
            raise ValueError(
                "AttributeSpecification needs an operator registry; "
                "build one with operators_memory.build_default_registry()."
            )
        self.attr = attr
        self.op = SpecificationOperator(op)
        self.val = val
        self._registry = registry

    @property
    def registry(self) -> MemoryOperatorRegistry:
        return self._registry

    def is_satisfied_by(self, candidate: T) -> bool:
        return self._registry.evaluate(
            self.op, self.read_property(candidate, self.attr), self.val
        )

    @staticmethod
    def read_property(obj: Any, attr: str) -> Any:
        """Read *attr* from an object or a mapping; missing reads as ``None``."""
        if obj is None:
            return None
        if isinstance(obj, dict):
            return obj.get(attr)
        return getattr(obj, attr, None)

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.attr, "val": self.val}

    def __repr__(self) -> str:
        symbol = "==" if self.op is SpecificationOperator.EQ else self.op.value
        return f"item.{self.attr} {symbol} {self.val!r}"
