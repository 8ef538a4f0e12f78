from enum import Enum


class SpecificationOperator(str, Enum):
    """Operators that can appear in a sieve expression tree."""

    # Comparison
    EQ = "="

    # Constant predicates
    TRUE = "true"
    FALSE = "false"

    # Logical operators
    AND = "and"
    OR = "or"
    NOT = "not"
