"""
Sieve behaviour options.

``SieveOptions`` carries the initial configuration of a sieve.  Hosts
that build many sieves with the same separators or policies create one
``SieveOptions`` and pass it to every sieve; the fluent ``with_*``
methods on a sieve then override the options for that sieve only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_SEPARATORS: tuple[str, ...] = (",", "|")


class EmptyValuesListBehavior(str, Enum):
    """What a sieve does when it resolves to no acceptable values."""

    LET_ALL_OBJECTS_THROUGH = "let_all_objects_through"
    LET_NO_OBJECTS_THROUGH = "let_no_objects_through"
    THROW_NO_SIEVE_VALUES_SUPPLIED = "throw_no_sieve_values_supplied"


class InvalidValueBehavior(str, Enum):
    """What a sieve does with a raw string that cannot be converted."""

    IGNORE_INVALID_VALUE = "ignore_invalid_value"
    THROW_INVALID_SIEVE_VALUE_EXCEPTION = "throw_invalid_sieve_value_exception"


@dataclass(frozen=True)
class SieveOptions:
    """
    Immutable container for sieve configuration.

    Attributes:
        separators: Custom separators used to split delimited value
            strings.  Empty means "use ``DEFAULT_SEPARATORS``".
        empty_values_list_behavior: Policy applied when no acceptable
            values are resolved.
        invalid_value_behavior: Policy applied to unconvertible strings.
    """

    separators: tuple[str, ...] = ()
    empty_values_list_behavior: EmptyValuesListBehavior = (
        EmptyValuesListBehavior.LET_ALL_OBJECTS_THROUGH
    )
    invalid_value_behavior: InvalidValueBehavior = (
        InvalidValueBehavior.IGNORE_INVALID_VALUE
    )

    def __post_init__(self) -> None:
        # Accept plain strings for enum fields; a lone string is one separator
        object.__setattr__(
            self,
            "empty_values_list_behavior",
            EmptyValuesListBehavior(self.empty_values_list_behavior),
        )
        object.__setattr__(
            self,
            "invalid_value_behavior",
            InvalidValueBehavior(self.invalid_value_behavior),
        )
        object.__setattr__(
            self,
            "separators",
            tuple(s for s in _as_tuple(self.separators) if s and s.strip()),
        )

    @property
    def effective_separators(self) -> tuple[str, ...]:
        return self.separators or DEFAULT_SEPARATORS

    def with_separators(self, *separators: str) -> SieveOptions:
        """Return a copy with the separators replaced."""
        return SieveOptions(
            separators=separators,
            empty_values_list_behavior=self.empty_values_list_behavior,
            invalid_value_behavior=self.invalid_value_behavior,
        )

    def with_empty_values_list_behavior(
        self, behavior: EmptyValuesListBehavior | str
    ) -> SieveOptions:
        """Return a copy with the empty values list policy replaced."""
        return SieveOptions(
            separators=self.separators,
            empty_values_list_behavior=EmptyValuesListBehavior(behavior),
            invalid_value_behavior=self.invalid_value_behavior,
        )

    def with_invalid_value_behavior(
        self, behavior: InvalidValueBehavior | str
    ) -> SieveOptions:
        """Return a copy with the invalid value policy replaced."""
        return SieveOptions(
            separators=self.separators,
            empty_values_list_behavior=self.empty_values_list_behavior,
            invalid_value_behavior=InvalidValueBehavior(behavior),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        return {
            "separators": list(self.effective_separators),
            "empty_values_list_behavior": self.empty_values_list_behavior.value,
            "invalid_value_behavior": self.invalid_value_behavior.value,
        }


def _as_tuple(separators: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(separators, str):
        return (separators,)
    return tuple(separators)
