"""
Fluent equality sieve.

Example::

    predicate = (
        EqualitySieve(Order, int)
        .for_property("customer_id")
        .for_values("1, 3, 5")
        .to_compiled_expression()
    )
    matching = [order for order in orders if predicate(order)]

    # value type taken from the property
    sieve = Sieve(Order).for_property(lambda order: order.status)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from .exceptions import SievePropertyNotSetError
from .options import (
    DEFAULT_SEPARATORS,
    EmptyValuesListBehavior,
    InvalidValueBehavior,
    SieveOptions,
)
from .predicate import PredicateBuilder, compile_specification
from .properties import PropertyDescriptor, PropertyResolver
from .values import ValueAccumulator

if TYPE_CHECKING:
    from .base import ISpecification
    from .conversion import TypeConverter
    from .evaluator import MemoryOperatorRegistry

logger = logging.getLogger("cqrs_ddd.sieve")

T = TypeVar("T")
V = TypeVar("V")

PropertySelector = str | Callable[[Any], Any]


class Sieve(Generic[T]):
    """
    Entry point when the value type should come from the property.

    ``Sieve(Order).for_property("status")`` returns an
    :class:`EqualitySieve` typed on the declared type of ``status``.
    """

    def __init__(
        self,
        owner_type: type[T],
        *,
        options: SieveOptions | None = None,
        converter: TypeConverter | None = None,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self.owner_type = owner_type
        self._options = options
        self._converter = converter
        self._registry = registry

    def for_property(self, selector: PropertySelector) -> EqualitySieve[T, Any]:
        resolver = PropertyResolver(self.owner_type)
        descriptor = (
            resolver.resolve(selector)
            if isinstance(selector, str) or selector is None
            else resolver.resolve_accessor(selector)
        )
        sieve: EqualitySieve[T, Any] = EqualitySieve(
            self.owner_type,
            descriptor.declared_type,
            options=self._options,
            converter=self._converter,
            registry=self._registry,
        )
        return sieve.for_property(descriptor.name)


class EqualitySieve(Generic[T, V]):
    """
    Builds an equality filter on one property of *owner_type*.

    Every mutator returns ``self``.  ``for_*`` methods replace the
    acceptable values; ``for_additional_*`` methods add to them.
    Acceptable values and expressions are recomputed on every access,
    so changing the sieve after building an expression and building
    again reflects the change.
    """

    def __init__(
        self,
        owner_type: type[T],
        value_type: type[V] | Any,
        *,
        options: SieveOptions | None = None,
        converter: TypeConverter | None = None,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        options = options if options is not None else SieveOptions()
        self.owner_type = owner_type
        self.value_type = value_type
        self._resolver: PropertyResolver[T] = PropertyResolver(owner_type)
        self._values: ValueAccumulator[V] = ValueAccumulator(
            value_type, separators=options.separators, converter=converter
        )
        self._predicates: PredicateBuilder[T] = PredicateBuilder(registry)
        self._property_to_filter: PropertyDescriptor | None = None
        self._empty_values_list_behavior = options.empty_values_list_behavior
        self._invalid_value_behavior = options.invalid_value_behavior

    # -- accessors -----------------------------------------------------------

    @property
    def property_to_filter(self) -> PropertyDescriptor | None:
        return self._property_to_filter

    @property
    def acceptable_values(self) -> list[V]:
        """
        The deduplicated acceptable values, resolved from the current state.

        Raises:
            InvalidSieveValueError: If a raw value cannot be converted and
                the invalid value policy is to throw.
        """
        return self._values.resolve(self._invalid_value_behavior)

    @property
    def separators(self) -> tuple[str, ...]:
        return self._values.effective_separators

    @property
    def default_separators(self) -> tuple[str, ...]:
        return DEFAULT_SEPARATORS

    @property
    def empty_values_list_behavior(self) -> EmptyValuesListBehavior:
        return self._empty_values_list_behavior

    @property
    def invalid_value_behavior(self) -> InvalidValueBehavior:
        return self._invalid_value_behavior

    @property
    def options(self) -> SieveOptions:
        """Snapshot of the current configuration."""
        return SieveOptions(
            separators=self._values.custom_separators,
            empty_values_list_behavior=self._empty_values_list_behavior,
            invalid_value_behavior=self._invalid_value_behavior,
        )

    # -- property ------------------------------------------------------------

    def for_property(self, selector: PropertySelector) -> EqualitySieve[T, V]:
        """
        Choose the property to filter on, by name or by typed accessor.

        Raises:
            InvalidSieveArgumentError: Blank name or malformed accessor.
            PropertyNotFoundError: No property with that name.
            PropertyTypeMismatchError: The property is not of the sieve's
                value type.
        """
        if isinstance(selector, str) or selector is None:
            descriptor = self._resolver.resolve(selector, self.value_type)
        else:
            descriptor = self._resolver.resolve_accessor(selector, self.value_type)
        self._property_to_filter = descriptor
        return self

    # -- replacing values ----------------------------------------------------

    def for_value(self, value: V | str | None) -> EqualitySieve[T, V]:
        """
        Replace the acceptable values with *value*.

        A string given to a non-string sieve is converted when the values
        are resolved, under the invalid value policy.
        """
        if isinstance(value, str) and self._takes_raw_strings:
            self._values.for_string_value(value)
        else:
            self._values.for_value(cast("V", value))
        return self

    def for_values(
        self, values: Iterable[V] | Iterable[str] | str
    ) -> EqualitySieve[T, V]:
        """
        Replace the acceptable values.

        A single string is a delimited list (``"1, 3|5"``) split on the
        separators at resolution time.  Strings inside an iterable given to
        a non-string sieve are converted item by item, while the other
        items are taken as they are.
        """
        if isinstance(values, str):
            self._values.for_values_to_parse(values)
            return self
        self._values.clear()
        return self._add_items(values)

    # -- appending values ----------------------------------------------------

    def for_additional_value(self, value: V | str) -> EqualitySieve[T, V]:
        if isinstance(value, str) and self._takes_raw_strings:
            self._values.for_additional_string_value(value)
        else:
            self._values.for_additional_value(cast("V", value))
        return self

    def for_additional_values(
        self, values: Iterable[V] | Iterable[str] | str
    ) -> EqualitySieve[T, V]:
        if isinstance(values, str):
            self._values.for_additional_values_to_parse(values)
            return self
        return self._add_items(values)

    # -- configuration -------------------------------------------------------

    def with_separator(self, separator: str | None) -> EqualitySieve[T, V]:
        self._values.with_separator(separator)
        return self

    def with_separators(
        self, separators: Iterable[str] | str | None
    ) -> EqualitySieve[T, V]:
        """Replace the separators; a plain string is a single separator."""
        self._values.with_separators(separators)
        return self

    def with_empty_values_list_behavior(
        self, behavior: EmptyValuesListBehavior | str
    ) -> EqualitySieve[T, V]:
        self._empty_values_list_behavior = EmptyValuesListBehavior(behavior)
        return self

    def with_invalid_value_behavior(
        self, behavior: InvalidValueBehavior | str
    ) -> EqualitySieve[T, V]:
        self._invalid_value_behavior = InvalidValueBehavior(behavior)
        return self

    # -- terminal producers --------------------------------------------------

    def to_expression(self) -> ISpecification[T]:
        """
        Build the expression tree for the current state.

        Raises:
            SievePropertyNotSetError: If no property was chosen.
            InvalidSieveValueError: See :attr:`acceptable_values`.
            NoSieveValuesSuppliedError: If no values resolved and the empty
                values list policy is to throw.
        """
        if self._property_to_filter is None:
            raise SievePropertyNotSetError
        values = self.acceptable_values
        logger.debug(
            "Building sieve expression for %s.%s with %d value(s)",
            self.owner_type.__name__,
            self._property_to_filter.name,
            len(values),
        )
        return self._predicates.build(
            self._property_to_filter, values, self._empty_values_list_behavior
        )

    def to_compiled_expression(self) -> Callable[[T], bool]:
        """Build the expression and compile it into a plain function."""
        return compile_specification(self.to_expression())

    def filter(self, candidates: Iterable[T]) -> Iterator[T]:
        """Yield the candidates accepted by the current predicate."""
        predicate = self.to_compiled_expression()
        return (candidate for candidate in candidates if predicate(candidate))

    # -- internals -----------------------------------------------------------

    @property
    def _takes_raw_strings(self) -> bool:
        return self.value_type is not str

    def _add_items(self, values: Iterable[Any]) -> EqualitySieve[T, V]:
        # strings are raw input (blanks dropped); everything else is typed
        items = list(values)
        raws = [item for item in items if isinstance(item, str)]
        typed = [item for item in items if not isinstance(item, str)]
        self._values.for_additional_string_values(raws)
        self._values.for_additional_values(cast("list[V]", typed))
        return self

    def __repr__(self) -> str:
        prop = self._property_to_filter.name if self._property_to_filter else None
        return (
            f"{type(self).__name__}({self.owner_type.__name__}, "
            f"{getattr(self.value_type, '__name__', self.value_type)}, "
            f"property={prop!r})"
        )
