"""
Predicate construction and compilation.

:class:`PredicateBuilder` turns a property and its acceptable values
into an expression tree::

    item.status == "open" or item.status == "pending"

:func:`compile_specification` turns any expression tree into a plain
``candidate -> bool`` function.
"""

from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from .ast import AttributeSpecification
from .base import (
    FALSE_SPECIFICATION,
    TRUE_SPECIFICATION,
    AndSpecification,
    ConstantSpecification,
    NotSpecification,
    OrSpecification,
)
from .exceptions import NoSieveValuesSuppliedError, SieveInvariantError
from .operators import SpecificationOperator
from .operators_memory import build_default_registry
from .options import EmptyValuesListBehavior

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .base import ISpecification
    from .evaluator import MemoryOperatorRegistry
    from .properties import PropertyDescriptor

T = TypeVar("T")


class PredicateBuilder(Generic[T]):
    """Builds equality-OR expression trees for one property."""

    def __init__(self, registry: MemoryOperatorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else build_default_registry()

    @property
    def registry(self) -> MemoryOperatorRegistry:
        return self._registry

    def build(
        self,
        property_to_filter: PropertyDescriptor,
        values: Sequence[Any],
        empty_values_list_behavior: EmptyValuesListBehavior | str = (
            EmptyValuesListBehavior.LET_ALL_OBJECTS_THROUGH
        ),
    ) -> ISpecification[T]:
        """
        Build the predicate for *values*.

        One value yields its equality leaf; several values yield an OR of
        equality leaves, in the order given.

        Raises:
            NoSieveValuesSuppliedError: If *values* is empty and the policy
                is ``THROW_NO_SIEVE_VALUES_SUPPLIED``.
            SieveInvariantError: If the policy is not recognised.
        """
        if not values:
            return self._build_for_empty_values(empty_values_list_behavior)

        leaves = [
            AttributeSpecification(
                property_to_filter.name,
                SpecificationOperator.EQ,
                value,
                registry=self._registry,
            )
            for value in values
        ]
        return cast(
            "ISpecification[T]",
            reduce(_or, leaves, cast("ISpecification[T]", FALSE_SPECIFICATION)),
        )

    @staticmethod
    def _build_for_empty_values(behavior: Any) -> ISpecification[T]:
        try:
            behavior = EmptyValuesListBehavior(behavior)
        except ValueError:
            behavior = None

        if behavior is EmptyValuesListBehavior.THROW_NO_SIEVE_VALUES_SUPPLIED:
            raise NoSieveValuesSuppliedError
        if behavior is EmptyValuesListBehavior.LET_ALL_OBJECTS_THROUGH:
            return cast("ISpecification[T]", TRUE_SPECIFICATION)
        if behavior is EmptyValuesListBehavior.LET_NO_OBJECTS_THROUGH:
            return cast("ISpecification[T]", FALSE_SPECIFICATION)
        raise SieveInvariantError("Could not determine empty values list behavior.")


def _or(current: ISpecification[Any], leaf: ISpecification[Any]) -> Any:
    """OR *leaf* onto *current*, with FALSE as the identity."""
    if current == FALSE_SPECIFICATION:
        return leaf
    if isinstance(current, OrSpecification):
        return OrSpecification(*current.specifications, leaf)
    return OrSpecification(current, leaf)


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def compile_specification(spec: ISpecification[T]) -> Callable[[T], bool]:
    """
    Compile an expression tree into nested closures.

    The tree is walked once; the returned function does no dispatch of
    its own and can be called any number of times.  Specifications this
    module does not know are evaluated through ``is_satisfied_by``.
    """
    if isinstance(spec, ConstantSpecification):
        return _constant(spec.value)

    if isinstance(spec, AttributeSpecification):
        attr = spec.attr
        read = AttributeSpecification.read_property
        matches = spec.registry.bind(spec.op, spec.val)

        def _leaf(candidate: T) -> bool:
            return matches(read(candidate, attr))

        return _leaf

    if isinstance(spec, OrSpecification):
        any_of = tuple(compile_specification(s) for s in spec.specifications)

        def _any(candidate: T) -> bool:
            return any(f(candidate) for f in any_of)

        return _any

    if isinstance(spec, AndSpecification):
        all_of = tuple(compile_specification(s) for s in spec.specifications)

        def _all(candidate: T) -> bool:
            return all(f(candidate) for f in all_of)

        return _all

    if isinstance(spec, NotSpecification):
        inner = compile_specification(spec.specification)

        def _not(candidate: T) -> bool:
            return not inner(candidate)

        return _not

    return spec.is_satisfied_by


def _constant(value: bool) -> Callable[[Any], bool]:
    def _const(candidate: Any) -> bool:
        return value

    return _const
