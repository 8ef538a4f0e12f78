from .ast import AttributeSpecification
from .base import (
    FALSE_SPECIFICATION,
    TRUE_SPECIFICATION,
    AndSpecification,
    BaseSpecification,
    ConstantSpecification,
    ISpecification,
    NotSpecification,
    OrSpecification,
)
from .conversion import ConversionError, TypeConverter, default_converter
from .evaluator import MemoryOperator, MemoryOperatorRegistry
from .exceptions import (
    InvalidSieveArgumentError,
    InvalidSieveValueError,
    NoSieveValuesSuppliedError,
    PropertyNotFoundError,
    PropertyTypeMismatchError,
    SieveError,
    SieveInvariantError,
    SievePropertyNotSetError,
    SieveRegistrationError,
)
from .operators import SpecificationOperator
from .operators_memory import build_default_registry
from .options import (
    DEFAULT_SEPARATORS,
    EmptyValuesListBehavior,
    InvalidValueBehavior,
    SieveOptions,
)
from .predicate import PredicateBuilder, compile_specification
from .properties import PropertyDescriptor, PropertyResolver, declared_properties
from .registry import SieveRegistration, SieveRegistry, findable_sieve
from .serialization import SpecificationFactory, SpecificationFormatError
from .sieve import EqualitySieve, Sieve
from .values import ValueAccumulator, split_values, unique_values

__all__ = [
    # Facade
    "Sieve",
    "EqualitySieve",
    # Options
    "DEFAULT_SEPARATORS",
    "EmptyValuesListBehavior",
    "InvalidValueBehavior",
    "SieveOptions",
    # Components
    "PropertyDescriptor",
    "PropertyResolver",
    "declared_properties",
    "ValueAccumulator",
    "split_values",
    "unique_values",
    "TypeConverter",
    "ConversionError",
    "default_converter",
    "PredicateBuilder",
    "compile_specification",
    # Expression tree
    "ISpecification",
    "BaseSpecification",
    "AndSpecification",
    "OrSpecification",
    "NotSpecification",
    "ConstantSpecification",
    "TRUE_SPECIFICATION",
    "FALSE_SPECIFICATION",
    "AttributeSpecification",
    "SpecificationFactory",
    "SpecificationOperator",
    # Evaluator / strategy
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
    # Findable sieves
    "SieveRegistration",
    "SieveRegistry",
    "findable_sieve",
    # Exceptions
    "SieveError",
    "InvalidSieveArgumentError",
    "PropertyNotFoundError",
    "PropertyTypeMismatchError",
    "SievePropertyNotSetError",
    "InvalidSieveValueError",
    "NoSieveValuesSuppliedError",
    "SieveInvariantError",
    "SieveRegistrationError",
    "SpecificationFormatError",
]
