"""Tests for property resolution by name and by accessor."""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar

import pytest
from pydantic import BaseModel

from cqrs_ddd_sieve.exceptions import (
    InvalidSieveArgumentError,
    PropertyNotFoundError,
    PropertyTypeMismatchError,
)
from cqrs_ddd_sieve.properties import (
    PropertyDescriptor,
    PropertyResolver,
    declared_properties,
)


class ABusinessObject(BaseModel):
    an_int: int = 0
    a_string: str = ""
    a_date: date = date(2000, 1, 1)
    a_datetime: datetime = datetime(2000, 1, 1)
    an_optional_int: int | None = None

    def describe(self) -> str:
        return f"{self.an_int}:{self.a_string}"


@dataclass
class Address:
    city: str = ""


@dataclass
class Customer:
    kind: ClassVar[str] = "customer"

    name: str = ""
    age: int = 0
    address: Address | None = None
    _secret: str = ""

    @property
    def display_name(self) -> str:
        return self.name.title()

    @property
    def untyped(self):
        return self.name


class Invoice(BaseModel):
    net: int = 0
    tax: int = 0

    @property
    def gross(self) -> int:
        return self.net + self.tax


@dataclass
class Dangling:
    parent: Undeclared | None = None  # noqa: F821


@pytest.fixture
def resolver() -> PropertyResolver[ABusinessObject]:
    return PropertyResolver(ABusinessObject)


# -- declared_properties -----------------------------------------------------


def test_declared_properties_of_pydantic_model():
    properties = declared_properties(ABusinessObject)
    assert list(properties) == [
        "an_int",
        "a_string",
        "a_date",
        "a_datetime",
        "an_optional_int",
    ]
    assert properties["an_int"] is int
    assert properties["a_datetime"] is datetime


def test_declared_properties_of_plain_class():
    properties = declared_properties(Customer)
    assert properties["name"] is str
    assert properties["age"] is int
    assert properties["display_name"] is str
    assert "kind" not in properties
    assert "_secret" not in properties
    assert "untyped" not in properties


def test_declared_properties_of_pydantic_model_include_typed_properties():
    properties = declared_properties(Invoice)
    assert properties == {"net": int, "tax": int, "gross": int}


def test_pydantic_property_can_be_resolved_by_name_and_accessor():
    resolver = PropertyResolver(Invoice)
    assert resolver.resolve("Gross", int).name == "gross"
    assert resolver.resolve_accessor(lambda i: i.gross, int).name == "gross"


def test_unresolvable_annotation_is_an_argument_error():
    with pytest.raises(InvalidSieveArgumentError, match="Dangling") as exc_info:
        declared_properties(Dangling)
    assert isinstance(exc_info.value.__cause__, NameError)


# -- By name -----------------------------------------------------------------


def test_resolve_by_exact_name(resolver):
    descriptor = resolver.resolve("an_int")
    assert descriptor == PropertyDescriptor("an_int", int, ABusinessObject)


@pytest.mark.parametrize("name", ["AN_INT", "An_Int", "an_INT"])
def test_resolve_is_case_insensitive(resolver, name):
    assert resolver.resolve(name).name == "an_int"


def test_resolve_is_repeatable(resolver):
    assert resolver.resolve("a_date") == resolver.resolve("a_date")


def test_resolve_checks_value_type(resolver):
    assert resolver.resolve("a_date", date).declared_type is date


def test_resolve_type_mismatch(resolver):
    with pytest.raises(PropertyTypeMismatchError) as exc_info:
        resolver.resolve("a_datetime", date)
    assert exc_info.value.property_name == "a_datetime"
    assert exc_info.value.expected_type is date
    assert exc_info.value.actual_type is datetime


def test_optional_property_does_not_match_plain_type(resolver):
    with pytest.raises(PropertyTypeMismatchError):
        resolver.resolve("an_optional_int", int)


@pytest.mark.parametrize("name", [None, "", "   "])
def test_resolve_blank_name(resolver, name):
    with pytest.raises(
        InvalidSieveArgumentError, match="the given property name is null or empty"
    ):
        resolver.resolve(name)


def test_resolve_unknown_name(resolver):
    with pytest.raises(PropertyNotFoundError) as exc_info:
        resolver.resolve("an_itn")
    error = exc_info.value
    assert "an_itn" in str(error)
    assert "does not exist" in str(error)
    assert "an_int" in error.suggestions
    assert isinstance(error, AttributeError)


def test_resolve_on_plain_class():
    descriptor = PropertyResolver(Customer).resolve("Display_Name", str)
    assert descriptor.name == "display_name"
    assert descriptor.owner_type is Customer


def test_resolve_skips_class_vars():
    with pytest.raises(PropertyNotFoundError):
        PropertyResolver(Customer).resolve("kind")


# -- By accessor -------------------------------------------------------------


def test_resolve_lambda_accessor(resolver):
    descriptor = resolver.resolve_accessor(lambda o: o.a_string, str)
    assert descriptor == PropertyDescriptor("a_string", str, ABusinessObject)


def test_resolve_attrgetter_accessor(resolver):
    assert resolver.resolve_accessor(operator.attrgetter("a_date")).name == "a_date"


def test_accessor_agrees_with_name(resolver):
    assert resolver.resolve_accessor(lambda o: o.an_int) == resolver.resolve("an_int")


def test_accessor_type_mismatch(resolver):
    with pytest.raises(PropertyTypeMismatchError):
        resolver.resolve_accessor(lambda o: o.a_datetime, int)


def test_accessor_calling_method(resolver):
    with pytest.raises(InvalidSieveArgumentError, match="refers to a method"):
        resolver.resolve_accessor(lambda o: o.describe())


def test_accessor_reading_nested_member():
    with pytest.raises(InvalidSieveArgumentError, match="direct property of type"):
        PropertyResolver(Customer).resolve_accessor(lambda c: c.address.city)


def test_accessor_returning_constant(resolver):
    with pytest.raises(InvalidSieveArgumentError, match="does not refer to a property"):
        resolver.resolve_accessor(lambda o: 42)


def test_accessor_returning_candidate(resolver):
    with pytest.raises(InvalidSieveArgumentError, match="does not refer to a property"):
        resolver.resolve_accessor(lambda o: o)


def test_accessor_with_arithmetic(resolver):
    with pytest.raises(InvalidSieveArgumentError):
        resolver.resolve_accessor(lambda o: o.an_int + 1)


def test_accessor_reading_undeclared_member(resolver):
    with pytest.raises(
        InvalidSieveArgumentError, match="not from type ABusinessObject"
    ):
        resolver.resolve_accessor(lambda o: o.missing)


def test_accessor_not_callable(resolver):
    with pytest.raises(InvalidSieveArgumentError):
        resolver.resolve_accessor("an_int")  # type: ignore[arg-type]


# -- Logging -----------------------------------------------------------------


def test_resolution_is_logged_at_debug(resolver, caplog):
    with caplog.at_level(logging.DEBUG, logger="cqrs_ddd.sieve"):
        resolver.resolve("an_int")
    assert "Resolved sieve property ABusinessObject.an_int (int)" in caplog.text


def test_descriptor_to_dict(resolver):
    assert resolver.resolve("a_date").to_dict() == {
        "name": "a_date",
        "declared_type": "date",
        "owner_type": "ABusinessObject",
    }
