"""Tests for SpecificationFactory and the in-memory operator registry."""

from __future__ import annotations

import json

import pytest
from pydantic import BaseModel

from cqrs_ddd_sieve import EqualitySieve
from cqrs_ddd_sieve.ast import AttributeSpecification
from cqrs_ddd_sieve.base import (
    FALSE_SPECIFICATION,
    TRUE_SPECIFICATION,
    AndSpecification,
    NotSpecification,
)
from cqrs_ddd_sieve.evaluator import MemoryOperatorRegistry
from cqrs_ddd_sieve.operators import SpecificationOperator
from cqrs_ddd_sieve.operators_memory import EqualOperator
from cqrs_ddd_sieve.serialization import SpecificationFactory, SpecificationFormatError


class Order(BaseModel):
    status: str = ""
    quantity: int = 0


@pytest.fixture
def candidate() -> Order:
    return Order(status="open", quantity=3)


# -- Round trip of sieve expressions ----------------------------------------


def test_sieve_expression_rebuilds_from_dict(registry, candidate):
    sieve = EqualitySieve(Order, str).for_property("status").for_values("open,closed")
    data = sieve.to_expression().to_dict()
    rebuilt = SpecificationFactory.from_dict(data, registry=registry)
    assert rebuilt.to_dict() == data
    assert rebuilt.is_satisfied_by(candidate) is True
    assert rebuilt.is_satisfied_by(Order(status="draft")) is False


def test_from_json_basic(registry, candidate):
    payload = json.dumps({"op": "=", "attr": "quantity", "val": 3})
    spec = SpecificationFactory.from_json(payload, registry=registry)
    assert spec.is_satisfied_by(candidate) is True


def test_constants(registry):
    assert SpecificationFactory.from_dict({"op": "true"}, registry=registry) is (
        TRUE_SPECIFICATION
    )
    assert SpecificationFactory.from_dict({"op": "FALSE"}, registry=registry) is (
        FALSE_SPECIFICATION
    )


def test_logical_operators(registry, candidate):
    spec = SpecificationFactory.from_dict(
        {
            "op": "and",
            "conditions": [
                {"op": "=", "attr": "status", "val": "open"},
                {
                    "op": "not",
                    "conditions": [{"op": "=", "attr": "quantity", "val": 1}],
                },
            ],
        },
        registry=registry,
    )
    assert isinstance(spec, AndSpecification)
    assert isinstance(spec.specifications[1], NotSpecification)
    assert spec.is_satisfied_by(candidate) is True


# -- Validation --------------------------------------------------------------


def test_from_json_invalid_json(registry):
    with pytest.raises(SpecificationFormatError, match="Invalid JSON"):
        SpecificationFactory.from_json("not json {", registry=registry)


def test_from_json_non_object(registry):
    with pytest.raises(SpecificationFormatError, match="object"):
        SpecificationFactory.from_json('"just a string"', registry=registry)


def test_from_dict_missing_op(registry):
    with pytest.raises(SpecificationFormatError, match="op"):
        SpecificationFactory.from_dict({}, registry=registry)


def test_from_dict_unknown_operator(registry):
    with pytest.raises(SpecificationFormatError, match="unknown operator 'like'"):
        SpecificationFactory.from_dict(
            {"op": "like", "attr": "status", "val": "o%"}, registry=registry
        )


def test_from_dict_missing_attr(registry):
    with pytest.raises(SpecificationFormatError, match="attr"):
        SpecificationFactory.from_dict({"op": "=", "val": "x"}, registry=registry)


def test_from_dict_logical_missing_conditions(registry):
    with pytest.raises(SpecificationFormatError, match="conditions"):
        SpecificationFactory.from_dict({"op": "or"}, registry=registry)


def test_not_requires_single_condition():
    errors = SpecificationFactory.validate(
        {
            "op": "not",
            "conditions": [
                {"op": "=", "attr": "status", "val": "a"},
                {"op": "=", "attr": "status", "val": "b"},
            ],
        }
    )
    assert errors == ["<root>: 'not' requires exactly one condition"]


def test_validate_reports_nested_paths():
    errors = SpecificationFactory.validate(
        {
            "op": "or",
            "conditions": [
                {"op": "=", "attr": "status", "val": "a"},
                {"op": "=", "val": "b"},
                "oops",
            ],
        }
    )
    assert errors == [
        "<root>.conditions[1]: missing 'attr'",
        "<root>.conditions[2]: expected dict, got str",
    ]


def test_error_carries_path(registry):
    with pytest.raises(SpecificationFormatError) as exc_info:
        SpecificationFactory.from_dict(
            {"op": "or", "conditions": [{"op": "=", "val": 1}]}, registry=registry
        )
    assert exc_info.value.path == "<root>.conditions[0]"
    assert exc_info.value.to_dict() == {
        "error": "SPECIFICATION_FORMAT_ERROR",
        "message": "missing 'attr'",
        "path": "<root>.conditions[0]",
    }


def test_allowed_fields(registry):
    data = {"op": "=", "attr": "quantity", "val": 1}
    assert SpecificationFactory.validate(data, allowed_fields=["quantity"]) == []
    with pytest.raises(SpecificationFormatError, match="field 'quantity' not allowed"):
        SpecificationFactory.from_dict(
            data, allowed_fields=["status"], registry=registry
        )


# -- Operator registry -------------------------------------------------------


def test_registry_lists_equality(registry):
    assert registry.supported_operators == {SpecificationOperator.EQ}
    assert isinstance(registry.get(SpecificationOperator.EQ), EqualOperator)


def test_registry_evaluate(registry):
    assert registry.evaluate(SpecificationOperator.EQ, 3, 3) is True
    assert registry.evaluate(SpecificationOperator.EQ, 3, "3") is False


def test_registry_bind(registry):
    is_three = registry.bind(SpecificationOperator.EQ, 3)
    assert is_three(3) is True
    assert is_three(4) is False


def test_registry_require_unknown_operator():
    registry = MemoryOperatorRegistry()
    with pytest.raises(ValueError, match="No comparison strategy registered"):
        registry.evaluate(SpecificationOperator.EQ, 1, 1)


def test_registry_unregister(registry):
    registry.unregister(SpecificationOperator.EQ)
    assert not registry.has(SpecificationOperator.EQ)
    registry.register(EqualOperator())
    assert registry.has(SpecificationOperator.EQ)


def test_custom_operator_replaces_default(registry, candidate):
    class CaseInsensitiveEqual(EqualOperator):
        def evaluate(self, field_value, condition_value):
            return str(field_value).casefold() == str(condition_value).casefold()

    registry.register(CaseInsensitiveEqual())
    predicate = (
        EqualitySieve(Order, str, registry=registry)
        .for_property("status")
        .for_value("OPEN")
        .to_compiled_expression()
    )
    assert predicate(candidate) is True


def test_attribute_specification_requires_registry():
    with pytest.raises(ValueError, match="needs an operator registry"):
        AttributeSpecification("status", "=", "open", registry=None)  # type: ignore[arg-type]
