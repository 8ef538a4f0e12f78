"""
Accumulation and resolution of acceptable values.

Values reach a sieve in three shapes:

- *known* values, already of the sieve's value type;
- *pending singles*, raw strings converted one by one;
- *pending parseable* strings such as ``"1, 3|5"``, split on the
  separators before conversion.

``for_*`` operations clear all three lists before inserting;
``for_additional_*`` operations append.  Nothing is converted until
:meth:`ValueAccumulator.resolve` is called, and every call resolves
afresh from the current state.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .conversion import ConversionError, TypeConverter, default_converter
from .exceptions import InvalidSieveValueError
from .options import DEFAULT_SEPARATORS, InvalidValueBehavior

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger("cqrs_ddd.sieve.values")

V = TypeVar("V")


def split_values(raw: str | None, separators: Iterable[str]) -> list[str]:
    """
    Split *raw* on every separator, dropping blank fragments.

    Fragments are trimmed.  Longer separators are matched first, so
    ``"||"`` wins over ``"|"`` when both are configured.
    """
    if raw is None or not raw.strip():
        return []
    ordered = sorted({s for s in separators if s}, key=len, reverse=True)
    if not ordered:
        return [raw.strip()]
    pattern = "|".join(re.escape(s) for s in ordered)
    return [part.strip() for part in re.split(pattern, raw) if part.strip()]


def unique_values(values: Iterable[Any]) -> list[Any]:
    """Drop ``None`` and duplicates (by equality), keeping first-seen order."""
    result: list[Any] = []
    for value in values:
        if value is None or value in result:
            continue
        result.append(value)
    return result


class ValueAccumulator(Generic[V]):
    """Holds the raw inputs of a sieve and resolves them to typed values."""

    def __init__(
        self,
        value_type: type[V] | Any,
        *,
        separators: Iterable[str] | str = (),
        converter: TypeConverter | None = None,
    ) -> None:
        self.value_type = value_type
        self._converter = converter if converter is not None else default_converter()
        self._known_values: list[V] = []
        self._pending_singles: list[str] = []
        self._pending_parseable: list[str] = []
        self._separators: tuple[str, ...] = ()
        self.with_separators(separators)

    # -- inspection ----------------------------------------------------------

    @property
    def known_values(self) -> list[V]:
        return list(self._known_values)

    @property
    def pending_singles(self) -> list[str]:
        return list(self._pending_singles)

    @property
    def pending_parseable(self) -> list[str]:
        return list(self._pending_parseable)

    @property
    def custom_separators(self) -> tuple[str, ...]:
        return self._separators

    @property
    def effective_separators(self) -> tuple[str, ...]:
        """Custom separators if any were set, otherwise the defaults."""
        return self._separators or DEFAULT_SEPARATORS

    # -- replacing values ----------------------------------------------------

    def clear(self) -> ValueAccumulator[V]:
        self._known_values = []
        self._pending_singles = []
        self._pending_parseable = []
        return self

    def for_value(self, value: V) -> ValueAccumulator[V]:
        self.clear()
        self._known_values = [value]
        return self

    def for_string_value(self, raw: str | None) -> ValueAccumulator[V]:
        """
        Replace all values with *raw*, converted when values are resolved.

        Unlike list input, a blank single string is kept, so it fails
        conversion under the invalid value policy.
        """
        self.clear()
        self._pending_singles = [] if raw is None else [raw]
        return self

    def for_values(self, values: Iterable[V]) -> ValueAccumulator[V]:
        self.clear()
        self._known_values = unique_values(values)
        return self

    def for_string_values(self, raws: Iterable[str | None]) -> ValueAccumulator[V]:
        self.clear()
        self._pending_singles = _non_blank(raws)
        return self

    def for_values_to_parse(self, raw: str) -> ValueAccumulator[V]:
        self.clear()
        self._pending_parseable = [raw]
        return self

    # -- appending values ----------------------------------------------------

    def for_additional_value(self, value: V) -> ValueAccumulator[V]:
        self._known_values.append(value)
        return self

    def for_additional_string_value(self, raw: str | None) -> ValueAccumulator[V]:
        if raw is not None:
            self._pending_singles.append(raw)
        return self

    def for_additional_values(self, values: Iterable[V]) -> ValueAccumulator[V]:
        self._known_values.extend(values)
        return self

    def for_additional_string_values(
        self, raws: Iterable[str | None]
    ) -> ValueAccumulator[V]:
        self._pending_singles.extend(_non_blank(raws))
        return self

    def for_additional_values_to_parse(self, raw: str) -> ValueAccumulator[V]:
        self._pending_parseable.append(raw)
        return self

    # -- separators ----------------------------------------------------------

    def with_separator(self, separator: str | None) -> ValueAccumulator[V]:
        """Replace the separators with *separator*; blank input is a no-op."""
        if separator is not None and separator.strip():
            self._separators = (separator,)
            logger.debug("Sieve separators replaced with %r", self._separators)
        return self

    def with_separators(
        self, separators: Iterable[str] | str | None
    ) -> ValueAccumulator[V]:
        """
        Replace the separators wholesale; empty or blank input is a no-op.

        A plain string is one separator, not a sequence of characters.
        """
        if separators is None:
            return self
        if isinstance(separators, str):
            return self.with_separator(separators)
        candidates = tuple(s for s in separators if s is not None and s.strip())
        if candidates:
            self._separators = candidates
            logger.debug("Sieve separators replaced with %r", self._separators)
        return self

    # -- resolution ----------------------------------------------------------

    def resolve(
        self,
        invalid_value_behavior: InvalidValueBehavior = (
            InvalidValueBehavior.IGNORE_INVALID_VALUE
        ),
    ) -> list[V]:
        """
        Compute the deduplicated acceptable values.

        Raises:
            InvalidSieveValueError: If a raw string cannot be converted and
                the policy is ``THROW_INVALID_SIEVE_VALUE_EXCEPTION``.
        """
        separators = self.effective_separators
        raws = list(self._pending_singles)
        for entry in self._pending_parseable:
            raws.extend(split_values(entry, separators))

        converted: list[V] = []
        for raw in raws:
            if raw is None:
                continue
            try:
                converted.append(self._convert(raw.strip()))
            except ConversionError as exc:
                if (
                    invalid_value_behavior
                    == InvalidValueBehavior.THROW_INVALID_SIEVE_VALUE_EXCEPTION
                ):
                    raise InvalidSieveValueError(raw, self.value_type) from exc
                logger.debug("Ignoring invalid value %r for %s", raw, self._type_name)

        return unique_values([*self._known_values, *converted])

    # -- internals -----------------------------------------------------------

    def _convert(self, raw: str) -> V:
        value: V = self._converter.convert(raw, self.value_type)
        return value

    @property
    def _type_name(self) -> str:
        return getattr(self.value_type, "__name__", repr(self.value_type))


def _non_blank(raws: Iterable[str | None]) -> list[str]:
    return [raw for raw in raws if raw is not None and raw.strip()]
