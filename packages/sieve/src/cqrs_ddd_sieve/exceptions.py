"""
Sieve exception hierarchy.

All exceptions inherit from ``SieveError`` and provide ``to_dict()``
for API-friendly error responses.  Exceptions that describe a bad
argument also inherit the matching builtin (``ValueError``,
``TypeError``, ``AttributeError``) so generic handlers keep working.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


class SieveError(Exception):
    """Base exception for all sieve errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class InvalidSieveArgumentError(SieveError, ValueError):
    """A property name or property accessor is malformed."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_ARGUMENT",
            "message": str(self),
        }


class PropertyNotFoundError(SieveError, AttributeError):
    """
    The requested property does not exist on the filtered type.

    Uses fuzzy matching to suggest similarly named properties.
    """

    def __init__(
        self,
        property_name: str,
        owner_name: str,
        available_properties: list[str],
        cutoff: float = 0.6,
    ) -> None:
        self.property_name = property_name
        self.owner_name = owner_name
        self.available_properties = available_properties
        self.suggestions = get_close_matches(
            property_name, available_properties, n=3, cutoff=cutoff
        )

        message = f"The property '{property_name}' does not exist on '{owner_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "PROPERTY_NOT_FOUND",
            "property": self.property_name,
            "owner": self.owner_name,
            "suggestions": self.suggestions,
            "available_properties": sorted(self.available_properties),
        }


class PropertyTypeMismatchError(SieveError, TypeError):
    """The property's declared type differs from the sieve's value type."""

    def __init__(
        self,
        property_name: str,
        expected_type: Any,
        actual_type: Any,
    ) -> None:
        self.property_name = property_name
        self.expected_type = expected_type
        self.actual_type = actual_type
        super().__init__(
            f"property type doesn't match for property {property_name}. "
            f"Sieve expects {_type_name(expected_type)} "
            f"but property is {_type_name(actual_type)}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "PROPERTY_TYPE_MISMATCH",
            "property": self.property_name,
            "expected_type": _type_name(self.expected_type),
            "actual_type": _type_name(self.actual_type),
        }


class SievePropertyNotSetError(SieveError):
    """A predicate was requested before a property was chosen."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or (
                "The sieve has no property to filter on; "
                "try calling ForProperty (for_property) before building "
                "an expression."
            )
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "PROPERTY_NOT_SET",
            "message": str(self),
        }


class InvalidSieveValueError(SieveError, ValueError):
    """A raw value could not be converted to the sieve's value type."""

    def __init__(self, raw_value: str, value_type: Any = None) -> None:
        self.raw_value = raw_value
        self.value_type = value_type
        message = f"Invalid value: {raw_value}"
        if value_type is not None:
            message += f" (expected {_type_name(value_type)})"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_VALUE",
            "value": self.raw_value,
            "value_type": (
                _type_name(self.value_type) if self.value_type is not None else None
            ),
        }


class NoSieveValuesSuppliedError(SieveError):
    """The acceptable values list is empty and the policy forbids that."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "No acceptable values were supplied to the sieve.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "NO_VALUES_SUPPLIED",
            "message": str(self),
        }


class SieveInvariantError(SieveError):
    """Internal state the sieve cannot interpret."""


class SieveRegistrationError(SieveError):
    """A different factory is already registered under the same filter name."""
