"""
Tests for qflow Core Model Objects

These tests verify:
    - Basic model creation and defaults
    - Immutability of questions and metadata
    - Retrieval methods on the catalog
    - Registry construction for trigger expansion
"""

import pytest
from qflow.expressions import eq
from qflow.model import (
    FieldMetadata,
    Question,
    QuestionCatalog,
    Tag,
    TagSchema,
)


def make_question(question_id="project.name", stage="core", **kwargs):
    return Question(id=question_id, stage=stage, type="text", question="?", **kwargs)


class TestQuestion:
    """Test Question objects."""

    def test_create_question(self):
        """Should create a question with the required fields."""
        q = Question(id="project.name", stage="core", type="text", question="Name?")
        assert q.id == "project.name"
        assert q.stage == "core"
        assert q.question == "Name?"

    def test_defaults(self):
        """Optional fields should default to empty values."""
        q = make_question()
        assert q.tags == ()
        assert q.skip_if is None
        assert q.triggers is None
        assert q.validation == {}
        assert q.options == ()

    def test_with_skip_if(self):
        """Should store a skip condition."""
        cond = eq("deployment.model", "cloud")
        q = make_question("datacenter.location", skip_if=cond)
        assert q.skip_if is cond

    def test_has_tag(self):
        q = make_question(tags=("foundation", "architecture"))
        assert q.has_tag("architecture")
        assert not q.has_tag("security")

    def test_question_hashable_with_mappings(self):
        """Questions carrying dict fields can still live in sets."""
        q = make_question(
            "deployment.model",
            validation={"enum": ["cloud", "on-premise"]},
            triggers={"cloud": ("cloud.provider",)},
            help={"text": "Where it runs"},
            skip_if=eq("project.tags", ["a", "b"]),
        )
        assert q in {q}
        assert hash(q) == hash(make_question(
            "deployment.model",
            validation={"enum": ["cloud", "on-premise"]},
            triggers={"cloud": ("cloud.provider",)},
            help={"text": "Where it runs"},
            skip_if=eq("project.tags", ["a", "b"]),
        ))

    def test_equality_still_compares_mappings(self):
        a = make_question(validation={"minLength": 1})
        b = make_question(validation={"minLength": 2})
        assert a != b
        assert len({a, b}) == 2

    def test_question_immutable(self):
        """Questions should not change once loaded."""
        q = make_question()
        with pytest.raises(AttributeError):
            q.stage = "review"


class TestQuestionCatalog:
    """Test QuestionCatalog container."""

    def test_empty_catalog(self):
        catalog = QuestionCatalog()
        assert catalog.questions == []
        assert catalog.stages == []

    def test_get_question(self):
        """Should retrieve questions by id."""
        catalog = QuestionCatalog(questions=[make_question("a"), make_question("b")])
        assert catalog.get_question("b").id == "b"
        assert catalog.get_question("missing") is None

    def test_get_questions_by_stage(self):
        catalog = QuestionCatalog(questions=[
            make_question("a", stage="core"),
            make_question("b", stage="review"),
            make_question("c", stage="core"),
        ])
        assert [q.id for q in catalog.get_questions_by_stage("core")] == ["a", "c"]
        assert catalog.get_questions_by_stage("deep_dive") == []

    def test_registry(self):
        a, b = make_question("a"), make_question("b")
        registry = QuestionCatalog(questions=[a, b]).registry()
        assert registry == {"a": a, "b": b}

    def test_registry_first_duplicate_wins(self):
        first = make_question("a", stage="core")
        second = make_question("a", stage="review")
        registry = QuestionCatalog(questions=[first, second]).registry()
        assert registry["a"] is first

    def test_registry_is_fresh(self):
        catalog = QuestionCatalog(questions=[make_question("a")])
        registry = catalog.registry()
        registry.clear()
        assert "a" in catalog.registry()


class TestTagSchema:
    """Test Tag, FieldMetadata and TagSchema."""

    def test_tag(self):
        tag = Tag(label="Security")
        assert tag.description is None

    def test_field_metadata_defaults(self):
        meta = FieldMetadata()
        assert meta.weight == 1
        assert meta.complexity_levels == ()

    def test_field_metadata_immutable(self):
        meta = FieldMetadata(weight=3)
        with pytest.raises(AttributeError):
            meta.weight = 4

    def test_schema_holds_metadata(self):
        schema = TagSchema(
            version="1.1",
            tags={"security": Tag(label="Security")},
            field_metadata={"security.auth": FieldMetadata(("security",), (), ("standard",), 2)},
        )
        assert schema.field_metadata["security.auth"].tags == ("security",)
        assert "security" in schema.tags
