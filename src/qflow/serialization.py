"""
Serialization helpers for catalogs, tag schemas and conditions.

Provides JSON/YAML round-trip via an intermediate dict representation
that matches the catalog files:

    skip_if: {"eq": ["deployment.model", "cloud"]}
    skip_if: {"not": {"has": ["security.data_types", "PII"]}}
    skip_if: "privacy.pii == false"            # legacy textual form

Structural problems are reported as SchemaError. The flow engine itself
never raises for a bad condition; this is the one place that does.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import yaml

from qflow.expressions import (
    Comparison,
    ComparisonOperator,
    Expression,
    LegacyCondition,
    LogicalExpression,
    LogicalOperator,
    Negation,
)
from qflow.model import FieldMetadata, Question, QuestionCatalog, Tag, TagSchema
from qflow.triggers import canonical_string


class SchemaError(ValueError):
    """Raised when a catalog or tag schema is structurally invalid."""
    pass


_COMPARISON_KEYS = [op.value for op in ComparisonOperator]
_LOGICAL_KEYS = [op.value for op in LogicalOperator]


# =============================================================================
# Expressions
# =============================================================================

def expr_to_dict(expr: Expression | None) -> Any:
    if expr is None:
        return None
    if isinstance(expr, Comparison):
        return {expr.operator.value: [expr.field, expr.value]}
    if isinstance(expr, LogicalExpression):
        return {expr.operator.value: [expr_to_dict(sub) for sub in expr.operands]}
    if isinstance(expr, Negation):
        return {"not": expr_to_dict(expr.operand)}
    if isinstance(expr, LegacyCondition):
        return expr.text
    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def expr_from_dict(d: Any) -> Expression | None:
    if d is None:
        return None
    if isinstance(d, str):
        return LegacyCondition(d)
    if not isinstance(d, Mapping):
        raise SchemaError(f"Condition must be a mapping or string, got {type(d).__name__}")

    for key in _COMPARISON_KEYS:
        if key in d:
            pair = d[key]
            if not isinstance(pair, (list, tuple)) or len(pair) != 2 or not isinstance(pair[0], str):
                raise SchemaError(f"'{key}' expects [field, value], got {pair!r}")
            return Comparison(ComparisonOperator(key), pair[0], pair[1])

    if "not" in d:
        operand = expr_from_dict(d["not"])
        if operand is None:
            raise SchemaError("'not' expects a condition, got null")
        return Negation(operand)

    for key in _LOGICAL_KEYS:
        if key in d:
            items = d[key]
            if not isinstance(items, (list, tuple)):
                raise SchemaError(f"'{key}' expects a list of conditions, got {items!r}")
            operands = tuple(expr_from_dict(item) for item in items)
            if any(op is None for op in operands):
                raise SchemaError(f"'{key}' contains a null condition")
            return LogicalExpression(LogicalOperator(key), operands)

    raise SchemaError(f"Unsupported condition keys: {sorted(d)}")


# =============================================================================
# Questions and catalogs
# =============================================================================

def question_to_dict(q: Question) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": q.id,
        "stage": q.stage,
        "type": q.type,
        "question": q.question,
        "validation": dict(q.validation),
        "tags": list(q.tags),
        "skip_if": expr_to_dict(q.skip_if),
    }
    if q.triggers is not None:
        d["triggers"] = {key: list(ids) for key, ids in q.triggers.items()}
    if q.hint is not None:
        d["hint"] = q.hint
    if q.options:
        d["options"] = list(q.options)
    if q.examples:
        d["examples"] = list(q.examples)
    if q.help is not None:
        d["help"] = dict(q.help)
    return d


def question_from_dict(d: Mapping[str, Any]) -> Question:
    if not isinstance(d, Mapping):
        raise SchemaError(f"Question must be a mapping, got {type(d).__name__}")

    question_id = d.get("id")
    if not isinstance(question_id, str) or not question_id:
        raise SchemaError(f"Question is missing a non-empty 'id': {dict(d)!r}")

    try:
        skip_if = expr_from_dict(d.get("skip_if"))
    except SchemaError as e:
        raise SchemaError(f"Question '{question_id}' skip_if: {e}") from e

    return Question(
        id=question_id,
        stage=d.get("stage", ""),
        type=d.get("type", ""),
        question=d.get("question", ""),
        validation=d.get("validation") or {},
        tags=tuple(_string_list(d.get("tags"), f"Question '{question_id}' tags")),
        skip_if=skip_if,
        triggers=_triggers_from_dict(d.get("triggers"), question_id),
        hint=d.get("hint"),
        options=tuple(d.get("options") or ()),
        examples=tuple(d.get("examples") or ()),
        help=d.get("help"),
    )


def catalog_to_dict(c: QuestionCatalog) -> Dict[str, Any]:
    return {
        "version": c.version,
        "stages": list(c.stages),
        "complexity_levels": list(c.complexity_levels),
        "questions": [question_to_dict(q) for q in c.questions],
    }


def catalog_from_dict(d: Mapping[str, Any]) -> QuestionCatalog:
    if not isinstance(d, Mapping):
        raise SchemaError(f"Catalog must be a mapping, got {type(d).__name__}")
    questions = d.get("questions", [])
    if not isinstance(questions, list):
        raise SchemaError("Catalog 'questions' must be a list")

    c = QuestionCatalog(version=str(d.get("version", "")))
    c.stages = _string_list(d.get("stages"), "Catalog stages")
    c.complexity_levels = _string_list(d.get("complexity_levels"), "Catalog complexity_levels")
    for index, item in enumerate(questions):
        try:
            c.questions.append(question_from_dict(item))
        except SchemaError as e:
            raise SchemaError(f"questions[{index}]: {e}") from e
    return c


# =============================================================================
# Tag schema
# =============================================================================

def tag_schema_to_dict(s: TagSchema) -> Dict[str, Any]:
    return {
        "version": s.version,
        "tags": {
            name: {"label": tag.label, "description": tag.description}
            for name, tag in s.tags.items()
        },
        "field_metadata": {
            field_id: {
                "tags": list(meta.tags),
                "related_fields": list(meta.related_fields),
                "complexity_levels": list(meta.complexity_levels),
                "weight": meta.weight,
            }
            for field_id, meta in s.field_metadata.items()
        },
    }


def tag_schema_from_dict(d: Mapping[str, Any]) -> TagSchema:
    if not isinstance(d, Mapping):
        raise SchemaError(f"Tag schema must be a mapping, got {type(d).__name__}")

    s = TagSchema(version=str(d.get("version", "")))

    for name, tag in (d.get("tags") or {}).items():
        if not isinstance(tag, Mapping):
            raise SchemaError(f"Tag '{name}' must be a mapping")
        s.tags[name] = Tag(label=tag.get("label", name), description=tag.get("description"))

    for field_id, meta in (d.get("field_metadata") or {}).items():
        if not isinstance(meta, Mapping):
            raise SchemaError(f"Field metadata for '{field_id}' must be a mapping")
        weight = meta.get("weight", 1)
        if not isinstance(weight, int) or isinstance(weight, bool):
            raise SchemaError(f"Field metadata for '{field_id}' has non-integer weight {weight!r}")
        s.field_metadata[field_id] = FieldMetadata(
            tags=tuple(_string_list(meta.get("tags"), f"'{field_id}' tags")),
            related_fields=tuple(_string_list(meta.get("related_fields"), f"'{field_id}' related_fields")),
            complexity_levels=tuple(
                _string_list(meta.get("complexity_levels"), f"'{field_id}' complexity_levels")
            ),
            weight=weight,
        )
    return s


# =============================================================================
# JSON / YAML
# =============================================================================

def catalog_to_json(c: QuestionCatalog) -> str:
    return json.dumps(catalog_to_dict(c), sort_keys=True)


def catalog_from_json(s: str) -> QuestionCatalog:
    return catalog_from_dict(_parse(s, json.loads, json.JSONDecodeError))


def catalog_to_yaml(c: QuestionCatalog) -> str:
    return yaml.safe_dump(catalog_to_dict(c), sort_keys=False)


def catalog_from_yaml(s: str) -> QuestionCatalog:
    return catalog_from_dict(_parse(s, yaml.safe_load, yaml.YAMLError))


def tag_schema_to_json(s: TagSchema) -> str:
    return json.dumps(tag_schema_to_dict(s), sort_keys=True)


def tag_schema_from_json(s: str) -> TagSchema:
    return tag_schema_from_dict(_parse(s, json.loads, json.JSONDecodeError))


def tag_schema_to_yaml(s: TagSchema) -> str:
    return yaml.safe_dump(tag_schema_to_dict(s), sort_keys=False)


def tag_schema_from_yaml(s: str) -> TagSchema:
    return tag_schema_from_dict(_parse(s, yaml.safe_load, yaml.YAMLError))


def load_catalog(path: Union[str, Path]) -> QuestionCatalog:
    """Load a question catalog from a .json, .yaml or .yml file."""
    text, is_yaml = _read(path)
    return catalog_from_yaml(text) if is_yaml else catalog_from_json(text)


def load_tag_schema(path: Union[str, Path]) -> TagSchema:
    """Load a tag schema from a .json, .yaml or .yml file."""
    text, is_yaml = _read(path)
    return tag_schema_from_yaml(text) if is_yaml else tag_schema_from_json(text)


def _read(path: Union[str, Path]):
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"Failed to load schema from {p}: {e}") from e
    return text, p.suffix.lower() in (".yaml", ".yml")


def _parse(s: str, loader, error_type):
    try:
        return loader(s)
    except error_type as e:
        raise SchemaError(f"Failed to parse schema: {e}") from e


def _string_list(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise SchemaError(f"{where} must be a list of strings, got {value!r}")
    return list(value)


def _triggers_from_dict(value: Any, question_id: str):
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise SchemaError(f"Question '{question_id}' triggers must be a mapping")
    # YAML turns bare true/false/1 keys into non-strings
    return {
        canonical_string(key): tuple(_string_list(ids, f"Question '{question_id}' triggers[{key!r}]"))
        for key, ids in value.items()
    }
