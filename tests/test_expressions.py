"""
Tests for the condition Expression system.

These tests verify:
    - Expression objects can be created
    - Constructors build the expected variants
    - Expression immutability
"""

import pytest
from qflow.expressions import (
    Comparison,
    ComparisonOperator,
    Expression,
    LegacyCondition,
    LogicalExpression,
    LogicalOperator,
    Negation,
    all_of,
    any_of,
    eq,
    has,
    iter_subexpressions,
    legacy,
    neq,
    not_,
)


class TestComparison:
    """Test field/literal comparisons."""

    def test_eq_constructor(self):
        expr = eq("deployment.model", "cloud")
        assert expr == Comparison(ComparisonOperator.EQUALS, "deployment.model", "cloud")

    def test_neq_and_has_constructors(self):
        assert neq("a", 1).operator is ComparisonOperator.NOT_EQUALS
        assert has("a", "x").operator is ComparisonOperator.CONTAINS

    def test_operator_values_match_catalog_keys(self):
        assert [op.value for op in ComparisonOperator] == ["eq", "neq", "has"]

    def test_comparison_is_expression(self):
        assert isinstance(eq("a", 1), Expression)

    def test_comparison_immutable(self):
        """Comparisons should be immutable."""
        expr = eq("a", 1)
        with pytest.raises(AttributeError):
            expr.value = 2


class TestLogicalExpression:
    """Test AND/OR composition."""

    def test_all_of_builds_and(self):
        expr = all_of(eq("a", 1), eq("b", 2))
        assert expr.operator is LogicalOperator.AND
        assert len(expr.operands) == 2

    def test_any_of_builds_or(self):
        expr = any_of(eq("a", 1))
        assert expr.operator is LogicalOperator.OR

    def test_empty_operands(self):
        assert all_of().operands == ()
        assert LogicalExpression(LogicalOperator.OR).operands == ()

    def test_nested_composition(self):
        inner = any_of(eq("a", 1), not_(has("b", "x")))
        outer = all_of(inner, legacy("c == 'd'"))
        assert isinstance(outer.operands[0], LogicalExpression)
        assert isinstance(outer.operands[1], LegacyCondition)


class TestNegationAndLegacy:

    def test_not_wraps_operand(self):
        inner = eq("a", 1)
        assert not_(inner) == Negation(inner)

    def test_legacy_keeps_text(self):
        assert legacy("privacy.pii == true").text == "privacy.pii == true"

    def test_legacy_immutable(self):
        cond = legacy("x")
        with pytest.raises(AttributeError):
            cond.text = "y"


def test_iter_subexpressions():
    a, b = eq("a", 1), eq("b", 2)
    assert list(iter_subexpressions(all_of(a, b))) == [a, b]
    assert list(iter_subexpressions(not_(a))) == [a]
    assert list(iter_subexpressions(a)) == []
