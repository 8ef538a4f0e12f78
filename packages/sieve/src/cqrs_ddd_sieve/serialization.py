"""
Rebuilding expression trees from their ``to_dict()`` form.

A sieve expression serialises to plain dicts::

    {"op": "or", "conditions": [
        {"op": "=", "attr": "status", "val": "open"},
        {"op": "=", "attr": "status", "val": "pending"},
    ]}

:class:`SpecificationFactory` turns that back into a specification tree,
so an expression built on one side of a process boundary can be
evaluated on the other.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from .ast import AttributeSpecification
from .base import (
    FALSE_SPECIFICATION,
    TRUE_SPECIFICATION,
    AndSpecification,
    NotSpecification,
    OrSpecification,
)
from .exceptions import SieveError
from .operators import SpecificationOperator

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .base import ISpecification
    from .evaluator import MemoryOperatorRegistry

T = TypeVar("T")

ROOT_PATH = "<root>"

_COMPOSITES: dict[SpecificationOperator, type[Any]] = {
    SpecificationOperator.AND: AndSpecification,
    SpecificationOperator.OR: OrSpecification,
}


class SpecificationFormatError(SieveError):
    """A serialised expression tree is malformed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "SPECIFICATION_FORMAT_ERROR",
            "message": self.message,
            "path": self.path,
        }


class SpecificationFactory(Generic[T]):
    """
    Build specification trees from dicts or JSON.

    - ``from_dict(data, registry=...)``: build, raising on the first problem
    - ``from_json(text, registry=...)``: decode, then ``from_dict``
    - ``validate(data)``: list every problem without building anything
    """

    @staticmethod
    def from_dict(
        data: dict[str, Any],
        *,
        allowed_fields: Iterable[str] | None = None,
        registry: MemoryOperatorRegistry,
    ) -> ISpecification[T]:
        """
        Build the tree described by *data*.

        Args:
            data: The (possibly nested) specification dict.
            allowed_fields: Optional whitelist of property names; any other
                ``attr`` is a format error.
            registry: Operator registry injected into every leaf.

        Raises:
            SpecificationFormatError: On the first problem found, carrying
                its path (``<root>.conditions[1]``).
        """
        reader = _TreeReader(allowed_fields, registry)
        spec = reader.read(data, ROOT_PATH)
        if reader.problems:
            path, message = reader.problems[0]
            raise SpecificationFormatError(message, path=path)
        return cast("ISpecification[T]", spec)

    @staticmethod
    def from_json(
        text: str,
        *,
        allowed_fields: Iterable[str] | None = None,
        registry: MemoryOperatorRegistry,
    ) -> ISpecification[T]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            message = f"Invalid JSON: {exc}"
            raise SpecificationFormatError(message, path=ROOT_PATH) from exc
        if not isinstance(data, dict):
            raise SpecificationFormatError(
                "Top-level JSON value must be an object", path=ROOT_PATH
            )
        return SpecificationFactory.from_dict(
            data, allowed_fields=allowed_fields, registry=registry
        )

    @staticmethod
    def validate(
        data: Any,
        *,
        allowed_fields: Iterable[str] | None = None,
    ) -> list[str]:
        """Return ``"<path>: <message>"`` for every problem; empty when valid."""
        reader = _TreeReader(allowed_fields)
        reader.read(data, ROOT_PATH)
        return [f"{path}: {message}" for path, message in reader.problems]


class _TreeReader:
    """
    Single depth-first pass over a serialised tree.

    Problems are collected as ``(path, message)`` pairs.  Nodes are only
    built when a registry is available and their subtree is clean;
    otherwise ``read`` returns ``None``.
    """

    def __init__(
        self,
        allowed_fields: Iterable[str] | None,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self.allowed_fields = None if allowed_fields is None else set(allowed_fields)
        self.registry = registry
        self.problems: list[tuple[str, str]] = []

    def read(self, node: Any, path: str) -> ISpecification[Any] | None:
        if not isinstance(node, dict):
            return self._problem(path, f"expected dict, got {type(node).__name__}")

        raw_op = node.get("op")
        if not isinstance(raw_op, str) or not raw_op:
            return self._problem(path, "missing or empty 'op' key")
        try:
            op = SpecificationOperator(raw_op.lower())
        except ValueError:
            return self._problem(path, f"unknown operator '{raw_op}'")

        if op is SpecificationOperator.TRUE:
            return TRUE_SPECIFICATION
        if op is SpecificationOperator.FALSE:
            return FALSE_SPECIFICATION
        if op is SpecificationOperator.NOT or op in _COMPOSITES:
            return self._read_logical(node, op, path)
        return self._read_leaf(node, op, path)

    def _read_logical(
        self, node: dict[str, Any], op: SpecificationOperator, path: str
    ) -> ISpecification[Any] | None:
        conditions = node.get("conditions")
        if not isinstance(conditions, list) or not conditions:
            return self._problem(
                path, f"logical '{op.value}' requires 'conditions' list"
            )
        if op is SpecificationOperator.NOT and len(conditions) != 1:
            return self._problem(path, "'not' requires exactly one condition")

        children = [
            self.read(child, f"{path}.conditions[{index}]")
            for index, child in enumerate(conditions)
        ]
        if any(child is None for child in children):
            return None
        if op is SpecificationOperator.NOT:
            return NotSpecification(children[0])
        return cast("ISpecification[Any]", _COMPOSITES[op](*children))

    def _read_leaf(
        self, node: dict[str, Any], op: SpecificationOperator, path: str
    ) -> ISpecification[Any] | None:
        attr = node.get("attr")
        if not isinstance(attr, str) or not attr:
            return self._problem(path, "missing 'attr'")
        if self.allowed_fields is not None and attr not in self.allowed_fields:
            return self._problem(path, f"field '{attr}' not allowed")
        if self.registry is None:
            return None
        return AttributeSpecification(attr, op, node.get("val"), registry=self.registry)

    def _problem(self, path: str, message: str) -> ISpecification[Any] | None:
        self.problems.append((path, message))
        return None
