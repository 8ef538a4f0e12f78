"""
String-to-value conversion.

The default conversion for every type is pydantic's lax validation
(``TypeAdapter(value_type).validate_python(raw)``), which turns ``"1"``
into ``1``, ``"2010-07-25"`` into a ``date`` and ``"true"`` into
``True``.  Types that need something else get a conversion function
registered on the converter.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

if TYPE_CHECKING:
    from collections.abc import Callable


class ConversionError(ValueError):
    """Raised when a raw string cannot be converted to the target type."""

    def __init__(self, raw_value: str, value_type: Any) -> None:
        self.raw_value = raw_value
        self.value_type = value_type
        name = getattr(value_type, "__name__", repr(value_type))
        super().__init__(f"Cannot convert {raw_value!r} to {name}")


@lru_cache(maxsize=256)
def _adapter_for(value_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(value_type)


class TypeConverter:
    """
    Registry of string → value conversion functions keyed by target type.

    Usage::

        converter = TypeConverter()
        converter.register(Money, Money.parse)

        converter.convert("12", int)       # → 12
        converter.convert("3 EUR", Money)  # → Money.parse("3 EUR")
    """

    def __init__(self) -> None:
        self._converters: dict[Any, Callable[[str], Any]] = {}

    # -- registration --------------------------------------------------------

    def register(self, value_type: Any, func: Callable[[str], Any]) -> None:
        """Register a conversion function for *value_type*."""
        self._converters[value_type] = func

    def unregister(self, value_type: Any) -> None:
        self._converters.pop(value_type, None)

    def has(self, value_type: Any) -> bool:
        return value_type in self._converters

    # -- conversion ----------------------------------------------------------

    def convert(self, raw_value: str, value_type: Any) -> Any:
        """
        Convert *raw_value* to *value_type*.

        Raises:
            ConversionError: If pydantic validation rejects the value, or
                the registered conversion function raises anything at all.
        """
        func = self._converters.get(value_type)
        if func is None:
            try:
                return _adapter_for(value_type).validate_python(raw_value)
            except (PydanticValidationError, ValueError, TypeError) as exc:
                raise ConversionError(raw_value, value_type) from exc
        try:
            return func(raw_value)
        except Exception as exc:
            # user functions fail in their own ways (InvalidOperation, KeyError)
            raise ConversionError(raw_value, value_type) from exc


_DEFAULT_CONVERTER = TypeConverter()


def default_converter() -> TypeConverter:
    """Return the process-wide converter used when none is injected."""
    return _DEFAULT_CONVERTER
