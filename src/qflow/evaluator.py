"""
Skip-condition evaluator.

Evaluates an Expression tree against the current answers.

Evaluation is pure and total: a condition that cannot be evaluated
(wrong shape, unexpected types, runaway nesting) is reported as not
satisfied, so the question it guards stays visible.

Legacy textual conditions are dispatched in a fixed order:

    1. "&&"  split on every occurrence, all parts must hold
    2. "||"  split on every occurrence, any part must hold
    3. "!="  field / literal inequality
    4. "=="  field / literal equality
    5. otherwise the whole text is a field path checked for truthiness

KNOWN LIMITATION:
    A condition mixing "&&" and "||" is always split on "&&" first,
    so "a || b && c" reads as "(a || b) && c". Existing catalogs
    depend on this, so it is kept as is.
"""

import logging
import math
import re
from typing import Any, Mapping, Optional, Union

from .expressions import (
    Comparison,
    ComparisonOperator,
    Expression,
    LegacyCondition,
    LogicalExpression,
    LogicalOperator,
    Negation,
)
from .model import AnswerMap, Question
from .serialization import SchemaError, expr_from_dict

logger = logging.getLogger(__name__)


class _Absent:
    """Marker for a field with no recorded answer."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def evaluate(expression: Expression, answers: AnswerMap) -> bool:
    """
    Evaluate a condition against the answers.

    Args:
        expression: Condition tree (any Expression variant)
        answers: Field path -> answer value

    Returns:
        Result of the condition, or False if it could not be evaluated
    """
    try:
        return _evaluate(expression, answers)
    except Exception:
        logger.warning(
            "Could not evaluate condition %r, treating it as not satisfied",
            expression,
            exc_info=True,
        )
        return False


def evaluate_skip(question: Question, answers: AnswerMap) -> bool:
    """Return True when the question's skip_if condition holds."""
    if question.skip_if is None:
        return False
    return evaluate(question.skip_if, answers)


def should_skip_question(
    condition: Optional[Union[str, Mapping[str, Any], Expression]],
    answers: AnswerMap,
) -> bool:
    """
    Evaluate a bare condition that is not attached to a Question.

    Accepts None, a legacy condition string, a condition in its catalog
    shape ({"eq": [field, value]}, {"not": ...}, ...) or an Expression.
    """
    if condition is None or condition == "":
        return False
    if isinstance(condition, str):
        condition = LegacyCondition(condition)
    elif isinstance(condition, Mapping):
        try:
            condition = expr_from_dict(condition)
        except SchemaError:
            logger.warning(
                "Could not parse condition %r, treating it as not satisfied",
                condition,
                exc_info=True,
            )
            return False
    return evaluate(condition, answers)


def get_field_value(field: str, answers: AnswerMap) -> Any:
    """Read an answer, returning ABSENT when nothing is recorded."""
    return answers.get(field, ABSENT)


def parse_literal(token: str) -> Any:
    """
    Parse a literal written in the legacy textual syntax.

    'x' or "x"        -> "x"
    true/false/null   -> True/False/None
    42, -1.5, 1e3     -> int or float
    anything else     -> the trimmed text

    Only decimal numbers are recognised: an empty token stays "", and
    tokens such as 0x1A or Infinity stay text.
    """
    text = token.strip()

    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]

    if text == "true":
        return True
    if text == "false":
        return False
    if text == "null":
        return None

    if _NUMBER_RE.fullmatch(text):
        if any(c in text for c in ".eE"):
            return float(text)
        return int(text)

    return text


# =============================================================================
# Internals
# =============================================================================

def _evaluate(expr: Expression, answers: AnswerMap) -> bool:
    if isinstance(expr, Comparison):
        return _evaluate_comparison(expr, answers)

    if isinstance(expr, Negation):
        return not _evaluate(expr.operand, answers)

    if isinstance(expr, LogicalExpression):
        if expr.operator is LogicalOperator.AND:
            return all(_evaluate(sub, answers) for sub in expr.operands)
        if expr.operator is LogicalOperator.OR:
            return any(_evaluate(sub, answers) for sub in expr.operands)
        raise ValueError(f"Unsupported logical operator: {expr.operator!r}")

    if isinstance(expr, LegacyCondition):
        return _evaluate_legacy(expr.text, answers)

    raise TypeError(f"Unsupported expression type: {type(expr).__name__}")


def _evaluate_comparison(expr: Comparison, answers: AnswerMap) -> bool:
    actual = get_field_value(expr.field, answers)

    if expr.operator is ComparisonOperator.EQUALS:
        return _strict_equals(actual, expr.value)

    if expr.operator is ComparisonOperator.NOT_EQUALS:
        return not _strict_equals(actual, expr.value)

    if expr.operator is ComparisonOperator.CONTAINS:
        if not isinstance(actual, (list, tuple)):
            return False
        return any(_strict_equals(item, expr.value) for item in actual)

    raise ValueError(f"Unsupported comparison operator: {expr.operator!r}")


def _evaluate_legacy(condition: str, answers: AnswerMap) -> bool:
    if "&&" in condition:
        return all(_evaluate_legacy(part.strip(), answers) for part in condition.split("&&"))

    if "||" in condition:
        return any(_evaluate_legacy(part.strip(), answers) for part in condition.split("||"))

    if "!=" in condition:
        parts = condition.split("!=")
        actual = get_field_value(parts[0].strip(), answers)
        return not _strict_equals(actual, parse_literal(parts[1]))

    if "==" in condition:
        parts = condition.split("==")
        actual = get_field_value(parts[0].strip(), answers)
        return _strict_equals(actual, parse_literal(parts[1]))

    return _is_truthy(get_field_value(condition.strip(), answers))


def _strict_equals(actual: Any, expected: Any) -> bool:
    """
    Equality without cross-type coercion.

    True never equals 1, "1" never equals 1, ABSENT equals nothing.
    Integers and floats compare by numeric value.
    """
    if actual is ABSENT or expected is ABSENT:
        return False

    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual == expected

    if isinstance(actual, (int, float)) and isinstance(expected, (int, float)):
        return actual == expected

    if type(actual) is not type(expected):
        return False

    return actual == expected


def _is_truthy(value: Any) -> bool:
    if value is ABSENT or value is None:
        return False
    if isinstance(value, (list, tuple, dict, set)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)
