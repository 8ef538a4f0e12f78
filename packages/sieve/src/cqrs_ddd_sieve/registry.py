"""
Registry of findable sieves.

A host that turns query parameters into filters looks sieves up by a
human-facing filter name (``?status=open,closed``).  Each registration
pairs that name with the property it filters and a factory returning a
fresh, configured sieve::

    registry = SieveRegistry()

    @findable_sieve("status", registry=registry)
    def status_sieve() -> EqualitySieve[Order, str]:
        return EqualitySieve(Order, str).for_property("status")

    sieve = registry.create("status").for_values(request.args["status"])
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from .exceptions import SieveRegistrationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from .sieve import EqualitySieve

logger = logging.getLogger("cqrs_ddd.sieve.registry")

F = TypeVar("F")


@dataclass(frozen=True)
class SieveRegistration:
    """A filter name bound to the property it filters and a sieve factory."""

    filter_name: str
    factory: Callable[[], EqualitySieve[Any, Any]] = field(compare=False)
    property_name: str = ""

    def __post_init__(self) -> None:
        if not self.filter_name or not self.filter_name.strip():
            raise SieveRegistrationError("Filter name must not be blank")
        if not self.property_name or not self.property_name.strip():
            object.__setattr__(self, "property_name", self.filter_name)


class SieveRegistry:
    """
    Store of sieve factories keyed by filter name (case-insensitive).

    **Conflict detection:** registering a different factory under an
    existing filter name raises :class:`SieveRegistrationError`.
    Re-registering the same factory is a no-op.
    """

    def __init__(self) -> None:
        self._registrations: dict[str, SieveRegistration] = {}

    # ── Registration ─────────────────────────────────────────────

    def register(
        self,
        filter_name: str,
        factory: Callable[[], EqualitySieve[Any, Any]],
        property_name: str | None = None,
    ) -> SieveRegistration:
        registration = SieveRegistration(
            filter_name=filter_name,
            factory=factory,
            property_name=property_name or "",
        )
        key = _key(filter_name)
        existing = self._registrations.get(key)
        if existing is not None:
            if existing.factory is factory:
                return existing
            msg = (
                f"Duplicate sieve for filter {filter_name!r}: "
                f"{_factory_name(existing.factory)} already registered, "
                f"cannot register {_factory_name(factory)}"
            )
            raise SieveRegistrationError(msg)

        self._registrations[key] = registration
        logger.debug(
            "Registered sieve %s (property %s) -> %s",
            registration.filter_name,
            registration.property_name,
            _factory_name(factory),
        )
        return registration

    def unregister(self, filter_name: str) -> None:
        self._registrations.pop(_key(filter_name), None)

    # ── Lookup ───────────────────────────────────────────────────

    def get(self, filter_name: str) -> SieveRegistration | None:
        return self._registrations.get(_key(filter_name))

    def create(self, filter_name: str) -> EqualitySieve[Any, Any]:
        """
        Return a fresh sieve from the factory registered for *filter_name*.

        Raises:
            KeyError: If nothing is registered under that name.
        """
        registration = self.get(filter_name)
        if registration is None:
            raise KeyError(f"No sieve registered for filter {filter_name!r}")
        return registration.factory()

    def registrations(self) -> list[SieveRegistration]:
        return list(self._registrations.values())

    def clear(self) -> None:
        self._registrations.clear()

    def __contains__(self, filter_name: object) -> bool:
        return isinstance(filter_name, str) and _key(filter_name) in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)

    def __iter__(self) -> Iterator[SieveRegistration]:
        return iter(self.registrations())


def findable_sieve(
    filter_name: str,
    property_name: str | None = None,
    *,
    registry: SieveRegistry,
) -> Callable[[F], F]:
    """
    Register the decorated factory under *filter_name*.

    A decorated function is used as the factory.  A decorated class is
    instantiated and its ``get_sieve()`` called each time a sieve is
    created.
    """

    def decorator(target: F) -> F:
        if isinstance(target, type):
            klass: Any = target

            def factory() -> EqualitySieve[Any, Any]:
                return klass().get_sieve()  # type: ignore[no-any-return]

            factory.__qualname__ = f"{klass.__qualname__}.get_sieve"
        elif callable(target):
            factory = target  # type: ignore[assignment]
        else:
            raise TypeError(f"Cannot register {target!r} as a sieve factory")

        registry.register(filter_name, factory, property_name)
        return target

    return decorator


def _key(filter_name: str) -> str:
    return filter_name.strip().casefold()


def _factory_name(factory: Callable[..., Any]) -> str:
    return getattr(factory, "__qualname__", None) or repr(factory)
