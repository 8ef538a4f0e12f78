"""
Property resolution for sieves.

A sieve filters on one declared property of the filtered type.  The
property is chosen either by name (case-insensitive) or by a typed
accessor such as ``lambda order: order.status``.  Both paths produce a
:class:`PropertyDescriptor` and share the same error taxonomy.
"""

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from .exceptions import (
    InvalidSieveArgumentError,
    PropertyNotFoundError,
    PropertyTypeMismatchError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("cqrs_ddd.sieve")

T = TypeVar("T")


@dataclass(frozen=True)
class PropertyDescriptor:
    """A named, typed property on the filtered type."""

    name: str
    declared_type: Any
    owner_type: type[Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "declared_type": getattr(
                self.declared_type, "__name__", repr(self.declared_type)
            ),
            "owner_type": self.owner_type.__name__,
        }


def declared_properties(owner_type: type[Any]) -> dict[str, Any]:
    """
    Return ``{name: declared_type}`` for every filterable property.

    - pydantic models: ``model_fields`` (resolved annotations).
    - any other class: resolved class annotations (``ClassVar`` and
      private names skipped).
    - both: ``@property`` members whose getter declares a return type.

    Raises:
        InvalidSieveArgumentError: If an annotation names a type that
            cannot be resolved.
    """
    is_model = isinstance(owner_type, type) and issubclass(owner_type, BaseModel)
    result: dict[str, Any] = {}
    if is_model:
        for name, info in owner_type.model_fields.items():
            result[name] = info.annotation
    else:
        for name, hint in _type_hints(owner_type, owner_type).items():
            if name.startswith("_") or typing.get_origin(hint) is ClassVar:
                continue
            result[name] = hint
    fields = set(result)

    for klass in reversed(owner_type.__mro__):
        if is_model and klass in BaseModel.__mro__:
            continue
        for name, member in vars(klass).items():
            if not isinstance(member, property) or name.startswith("_"):
                continue
            if member.fget is None or name in fields:
                continue
            return_type = _type_hints(member.fget, owner_type).get("return")
            if return_type is not None:
                result[name] = return_type
    return result


def _type_hints(obj: Any, owner_type: type[Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except NameError as exc:
        raise InvalidSieveArgumentError(
            f"Cannot resolve the declared types of {owner_type.__name__}: {exc}"
        ) from exc


class PropertyResolver(Generic[T]):
    """
    Resolve property names and accessors on *owner_type*.

    Resolution is a pure lookup; calling it twice yields equal
    descriptors.
    """

    def __init__(self, owner_type: type[T]) -> None:
        self.owner_type = owner_type

    # -- by name -------------------------------------------------------------

    def resolve(
        self,
        property_name: str | None,
        value_type: Any = None,
    ) -> PropertyDescriptor:
        """
        Resolve *property_name* (case-insensitive).

        Raises:
            InvalidSieveArgumentError: If the name is ``None`` or blank.
            PropertyNotFoundError: If no property matches.
            PropertyTypeMismatchError: If *value_type* is given and is not
                exactly the property's declared type.
        """
        if property_name is None or not str(property_name).strip():
            raise InvalidSieveArgumentError("the given property name is null or empty")

        properties = declared_properties(self.owner_type)
        wanted = property_name.casefold()
        match = next((name for name in properties if name.casefold() == wanted), None)
        if match is None:
            raise PropertyNotFoundError(
                property_name, self.owner_type.__name__, list(properties)
            )

        return self._describe(match, properties[match], value_type)

    # -- by accessor ---------------------------------------------------------

    def resolve_accessor(
        self,
        accessor: Callable[[T], Any],
        value_type: Any = None,
    ) -> PropertyDescriptor:
        """
        Resolve the property read by a typed accessor.

        The accessor must perform exactly one direct attribute read on
        its argument and return it (``lambda o: o.name`` or
        ``operator.attrgetter("name")``).

        Raises:
            InvalidSieveArgumentError: If the accessor calls a method,
                reads a nested or undeclared member, or returns something
                other than the member it read.
            PropertyTypeMismatchError: As for :meth:`resolve`.
        """
        if not callable(accessor):
            raise InvalidSieveArgumentError(
                f"Expression '{accessor!r}' is not a property accessor."
            )

        recorder = _AccessRecorder()
        try:
            result = accessor(recorder)  # type: ignore[arg-type]
        except _MethodCallError as exc:
            raise InvalidSieveArgumentError(
                f"Expression '{accessor!r}' refers to a method, not a property."
            ) from exc
        except (_NestedAccessError, AttributeError, TypeError) as exc:
            raise InvalidSieveArgumentError(
                f"Expression '{accessor!r}' does not refer to a direct property "
                f"of type {self.owner_type.__name__}."
            ) from exc

        if not isinstance(result, _MemberAccess) or result.recorder is not recorder:
            raise InvalidSieveArgumentError(
                f"Expression '{accessor!r}' does not refer to a property."
            )

        properties = declared_properties(self.owner_type)
        if result.name not in properties:
            raise InvalidSieveArgumentError(
                f"Expression '{accessor!r}' refers to a property that is not "
                f"from type {self.owner_type.__name__}."
            )

        return self._describe(result.name, properties[result.name], value_type)

    # -- internals -----------------------------------------------------------

    def _describe(
        self, name: str, declared_type: Any, value_type: Any
    ) -> PropertyDescriptor:
        if value_type is not None and declared_type != value_type:
            raise PropertyTypeMismatchError(name, value_type, declared_type)

        logger.debug(
            "Resolved sieve property %s.%s (%s)",
            self.owner_type.__name__,
            name,
            getattr(declared_type, "__name__", declared_type),
        )
        return PropertyDescriptor(
            name=name, declared_type=declared_type, owner_type=self.owner_type
        )


# ---------------------------------------------------------------------------
# Accessor probing
# ---------------------------------------------------------------------------


class _MethodCallError(Exception):
    pass


class _NestedAccessError(Exception):
    pass


class _MemberAccess:
    """Placeholder returned for an attribute read on the recorder."""

    __slots__ = ("name", "recorder")

    def __init__(self, name: str, recorder: _AccessRecorder) -> None:
        self.name = name
        self.recorder = recorder

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        raise _MethodCallError(self.name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        raise _NestedAccessError(f"{self.name}.{name}")


class _AccessRecorder:
    """Stand-in candidate that records the single attribute an accessor reads."""

    def __getattr__(self, name: str) -> _MemberAccess:
        if name.startswith("__"):
            raise AttributeError(name)
        return _MemberAccess(name, self)
