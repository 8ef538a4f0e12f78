"""
Specification primitives forming the expression form of a sieve.

A sieve's expression is a small tree of specifications that can be
evaluated (``is_satisfied_by``), serialised (``to_dict``), rendered
(``repr``) and compiled into a plain callable.
"""

from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from .operators import SpecificationOperator

T = TypeVar("T", contravariant=True)


@runtime_checkable
class ISpecification(Protocol, Generic[T]):
    """Protocol for predicates over candidate objects."""

    def is_satisfied_by(self, candidate: T) -> bool:
        ...

    def to_dict(self) -> dict[str, Any]:
        ...


class BaseSpecification(Generic[T], ISpecification[T]):
    """Base class for specifications with logic operator support."""

    def __and__(self, other: ISpecification[T]) -> AndSpecification[T]:
        return AndSpecification(self, other)

    def __or__(self, other: ISpecification[T]) -> OrSpecification[T]:
        return OrSpecification(self, other)

    def __invert__(self) -> NotSpecification[T]:
        return NotSpecification(self)


class ConstantSpecification(BaseSpecification[T]):
    """Specification that ignores the candidate and returns a fixed result."""

    def __init__(self, value: bool) -> None:
        self.value = bool(value)

    def is_satisfied_by(self, candidate: T) -> bool:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        op = SpecificationOperator.TRUE if self.value else SpecificationOperator.FALSE
        return {"op": op.value}

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ConstantSpecification) and other.value == self.value

    def __hash__(self) -> int:
        return hash(("const", self.value))

    def __repr__(self) -> str:
        return "True" if self.value else "False"


TRUE_SPECIFICATION: ConstantSpecification[Any] = ConstantSpecification(True)
FALSE_SPECIFICATION: ConstantSpecification[Any] = ConstantSpecification(False)


class AndSpecification(BaseSpecification[T]):
    """Logical AND composite specification."""

    def __init__(self, *specifications: ISpecification[T]) -> None:
        self.specifications = specifications

    def is_satisfied_by(self, candidate: T) -> bool:
        return all(spec.is_satisfied_by(candidate) for spec in self.specifications)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": SpecificationOperator.AND.value,
            "conditions": [spec.to_dict() for spec in self.specifications],
        }

    def __repr__(self) -> str:
        return "(" + " and ".join(repr(s) for s in self.specifications) + ")"


class OrSpecification(BaseSpecification[T]):
    """Logical OR composite specification."""

    def __init__(self, *specifications: ISpecification[T]) -> None:
        self.specifications = specifications

    def is_satisfied_by(self, candidate: T) -> bool:
        return any(spec.is_satisfied_by(candidate) for spec in self.specifications)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": SpecificationOperator.OR.value,
            "conditions": [spec.to_dict() for spec in self.specifications],
        }

    def __repr__(self) -> str:
        return "(" + " or ".join(repr(s) for s in self.specifications) + ")"


class NotSpecification(BaseSpecification[T]):
    """Logical NOT composite specification."""

    def __init__(self, specification: ISpecification[T]) -> None:
        self.specification = specification

    def is_satisfied_by(self, candidate: T) -> bool:
        return not self.specification.is_satisfied_by(candidate)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": SpecificationOperator.NOT.value,
            "conditions": [self.specification.to_dict()],
        }

    def __repr__(self) -> str:
        return f"not {self.specification!r}"
