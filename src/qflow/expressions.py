"""
Expression System for skip conditions

Every question may carry a ``skip_if`` condition. Conditions are boolean
trees built from a small, closed set of variants:

    - Comparison       (equality, inequality, membership)
    - LogicalExpression (conjunction, disjunction)
    - Negation
    - LegacyCondition  (the old textual "a == 'b' && c" form)

ARCHITECTURAL RULE:
    These classes are structure only.
    Evaluation lives in ``qflow.evaluator``.
    Dict/JSON/YAML shapes live in ``qflow.serialization``.

The legacy textual form is its own variant. It is never silently
coerced into the structured tree, because the legacy operator
dispatch has different precedence rules (see ``qflow.evaluator``).
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Tuple


class Expression(ABC):
    """
    Base class for all condition expressions.

    DO NOT:
        - Add evaluation logic here (belongs in evaluator)
        - Add dict conversion here (belongs in serialization)
    """
    pass


class ComparisonOperator(Enum):
    """
    Field-against-literal comparisons.

    The values match the keys used by catalog files.
    """

    EQUALS = "eq"
    NOT_EQUALS = "neq"
    CONTAINS = "has"


class LogicalOperator(Enum):
    """N-ary logical connectives."""

    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class Comparison(Expression):
    """
    Compares the answer stored under ``field`` with a literal.

    Example:
        deployment.model == "cloud"

    Becomes:
        Comparison(
            operator=ComparisonOperator.EQUALS,
            field="deployment.model",
            value="cloud",
        )

    Properties:
        operator: ComparisonOperator enum
        field: Field path (question identifier)
        value: Literal (str, int, float, bool or None)
    """

    operator: ComparisonOperator
    field: str
    value: Any


@dataclass(frozen=True)
class LogicalExpression(Expression):
    """
    Conjunction or disjunction over an ordered tuple of operands.

    An empty AND is true, an empty OR is false.
    """

    operator: LogicalOperator
    operands: Tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Negation(Expression):
    """Inverts the result of a single operand."""

    operand: Expression


@dataclass(frozen=True)
class LegacyCondition(Expression):
    """
    A condition written in the legacy textual syntax.

    Examples:
        "deployment.model == 'cloud'"
        "privacy.pii == true && security.auth != 'none'"
        "project.has_api"

    Kept for catalogs written before structured conditions existed.
    """

    text: str


# =============================================================================
# Constructors
# =============================================================================

def eq(field: str, value: Any) -> Comparison:
    return Comparison(ComparisonOperator.EQUALS, field, value)


def neq(field: str, value: Any) -> Comparison:
    return Comparison(ComparisonOperator.NOT_EQUALS, field, value)


def has(field: str, value: Any) -> Comparison:
    return Comparison(ComparisonOperator.CONTAINS, field, value)


def not_(operand: Expression) -> Negation:
    return Negation(operand)


def all_of(*operands: Expression) -> LogicalExpression:
    return LogicalExpression(LogicalOperator.AND, tuple(operands))


def any_of(*operands: Expression) -> LogicalExpression:
    return LogicalExpression(LogicalOperator.OR, tuple(operands))


def legacy(text: str) -> LegacyCondition:
    return LegacyCondition(text)


def iter_subexpressions(expr: Expression) -> Iterable[Expression]:
    """Yield the direct children of an expression node."""
    if isinstance(expr, LogicalExpression):
        yield from expr.operands
    elif isinstance(expr, Negation):
        yield expr.operand
