"""
Catalog Analyzer — early diagnostics and inventory of question catalogs.

This module provides lightweight analysis of QuestionCatalog objects:
    - Stage and tag inventory
    - Trigger targets missing from the catalog
    - Fields referenced by skip conditions
    - Condition complexity metrics
    - Coverage of tag-schema field metadata

IMPORTANT: This is read-only. It does NOT modify the catalog.
It only produces reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from qflow.expressions import (
    Comparison,
    Expression,
    LegacyCondition,
    iter_subexpressions,
)
from qflow.model import QuestionCatalog, TagSchema


@dataclass
class ExpressionMetrics:
    """Metrics about a single condition tree."""
    depth: int = 0
    node_count: int = 0
    field_references: Set[str] = field(default_factory=set)


def _legacy_fields(text: str) -> Set[str]:
    """Field paths named by a legacy condition, split like the evaluator does."""
    fields: Set[str] = set()
    for conjunct in text.split("&&"):
        for term in conjunct.split("||"):
            for op in ("!=", "=="):
                if op in term:
                    term = term.split(op)[0]
                    break
            term = term.strip()
            if term:
                fields.add(term)
    return fields


def _analyze_expression(expr: Expression | None) -> ExpressionMetrics:
    """Recursively analyze a condition tree."""
    if expr is None:
        return ExpressionMetrics()

    metrics = ExpressionMetrics(depth=1, node_count=1)

    if isinstance(expr, Comparison):
        metrics.field_references.add(expr.field)

    elif isinstance(expr, LegacyCondition):
        metrics.field_references.update(_legacy_fields(expr.text))

    else:
        child_depth = 0
        for sub in iter_subexpressions(expr):
            child = _analyze_expression(sub)
            child_depth = max(child_depth, child.depth)
            metrics.node_count += child.node_count
            metrics.field_references.update(child.field_references)
        metrics.depth += child_depth

    return metrics


@dataclass
class CatalogReport:
    """Comprehensive analysis report for a question catalog."""

    version: str
    total_questions: int = 0
    total_stages: int = 0
    total_tags: int = 0

    # Inventory
    questions_per_stage: Dict[str, int] = field(default_factory=dict)
    tag_usage: Dict[str, int] = field(default_factory=dict)
    duplicate_ids: Set[str] = field(default_factory=set)
    undeclared_stages: Set[str] = field(default_factory=set)

    # Triggers
    total_triggers: int = 0
    unknown_trigger_targets: Dict[str, List[str]] = field(default_factory=dict)

    # Conditions
    questions_with_skip_if: int = 0
    condition_fields: Set[str] = field(default_factory=set)
    unknown_condition_fields: Set[str] = field(default_factory=set)
    max_condition_depth: int = 0
    avg_condition_depth: float = 0.0

    # Tag schema coverage
    questions_without_metadata: List[str] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_catalog(catalog: QuestionCatalog, tag_schema: Optional[TagSchema] = None) -> CatalogReport:
    """
    Perform a read-only analysis of a question catalog.

    Checks for:
    - Duplicate ids and undeclared stages
    - Trigger targets with no catalog entry
    - Skip conditions that reference fields no question defines
    - Questions missing from the tag schema (when one is given)

    Returns a CatalogReport with metrics and warnings.
    """
    report = CatalogReport(version=catalog.version)
    report.total_questions = len(catalog.questions)

    ids = Counter(q.id for q in catalog.questions)
    report.duplicate_ids = {qid for qid, count in ids.items() if count > 1}

    # =========================================================================
    # 1. STAGES AND TAGS
    # =========================================================================

    stage_counts: Counter = Counter()
    tag_counts: Counter = Counter()
    for question in catalog.questions:
        stage_counts[question.stage] += 1
        tag_counts.update(question.tags)

    report.questions_per_stage = dict(stage_counts)
    report.tag_usage = dict(tag_counts)
    report.total_stages = len(stage_counts)
    report.total_tags = len(tag_counts)
    if catalog.stages:
        report.undeclared_stages = set(stage_counts) - set(catalog.stages)

    # =========================================================================
    # 2. TRIGGERS
    # =========================================================================

    for question in catalog.questions:
        for targets in (question.triggers or {}).values():
            report.total_triggers += 1
            missing = [t for t in targets if t not in ids]
            if missing:
                report.unknown_trigger_targets.setdefault(question.id, []).extend(missing)

    # =========================================================================
    # 3. CONDITIONS
    # =========================================================================

    depths = []
    for question in catalog.questions:
        if question.skip_if is None:
            continue
        report.questions_with_skip_if += 1
        metrics = _analyze_expression(question.skip_if)
        depths.append(metrics.depth)
        report.condition_fields.update(metrics.field_references)

    if depths:
        report.max_condition_depth = max(depths)
        report.avg_condition_depth = sum(depths) / len(depths)
    report.unknown_condition_fields = report.condition_fields - set(ids)

    # =========================================================================
    # 4. TAG SCHEMA COVERAGE
    # =========================================================================

    if tag_schema is not None:
        report.questions_without_metadata = [
            q.id for q in catalog.questions if q.id not in tag_schema.field_metadata
        ]

    # =========================================================================
    # 5. WARNING FLAGS
    # =========================================================================

    if report.duplicate_ids:
        report.add_warning(f"Duplicate question ids: {', '.join(sorted(report.duplicate_ids))}")

    if report.undeclared_stages:
        report.add_warning(f"Undeclared stages: {', '.join(sorted(report.undeclared_stages))}")

    for source, missing in sorted(report.unknown_trigger_targets.items()):
        report.add_warning(f"Triggers on {source} reference unknown questions: {', '.join(missing)}")

    if report.unknown_condition_fields:
        report.add_warning(
            f"Skip conditions reference unknown fields: {', '.join(sorted(report.unknown_condition_fields))}"
        )

    if report.questions_without_metadata:
        report.add_warning(
            f"{len(report.questions_without_metadata)} question(s) have no field metadata "
            f"and default to the base tier"
        )

    if report.max_condition_depth > 5:
        report.add_warning(f"High condition complexity: max depth {report.max_condition_depth}")

    return report
