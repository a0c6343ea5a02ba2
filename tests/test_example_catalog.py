"""
Test the example catalog and tag schema used by the demos.

Validates that the builders create the expected questions, triggers and
field metadata, and that the catalog behaves as a small end-to-end flow.
"""

from qflow.evaluator import evaluate_skip
from qflow.examples import build_example_catalog, build_example_tag_schema
from qflow.routing import get_field_complexity_levels
from qflow.triggers import expand_triggers


def test_example_catalog_structure():
    catalog = build_example_catalog()

    assert catalog.version == "2.0"
    assert catalog.stages == ["core", "review", "deep_dive"]
    assert len(catalog.questions) == 16

    # Every id is unique
    ids = [q.id for q in catalog.questions]
    assert len(ids) == len(set(ids))

    # Foundation questions carry the foundation tag first
    model = catalog.get_question("deployment.model")
    assert model.tags[0] == "foundation"
    assert set(model.triggers) == {"cloud", "on-premise", "hybrid"}


def test_deployment_triggers_expand_to_catalog_questions():
    catalog = build_example_catalog()
    registry = catalog.registry()
    model = catalog.get_question("deployment.model")

    hybrid = [q.id for q in expand_triggers(model, "hybrid", registry)]
    assert hybrid == ["cloud.provider", "cloud.regions", "datacenter.location"]


def test_cloud_questions_hidden_on_premise():
    catalog = build_example_catalog()
    answers = {"deployment.model": "on-premise"}
    assert evaluate_skip(catalog.get_question("cloud.provider"), answers) is True
    assert evaluate_skip(catalog.get_question("datacenter.location"), answers) is False

    answers = {"deployment.model": "hybrid"}
    assert evaluate_skip(catalog.get_question("cloud.provider"), answers) is False
    assert evaluate_skip(catalog.get_question("datacenter.location"), answers) is False


def test_privacy_questions_follow_pii_answer():
    catalog = build_example_catalog()
    regulations = catalog.get_question("privacy.regulations")
    data_types = catalog.get_question("security.data_types")

    for answers, hidden in [({"privacy.pii": True}, False), ({"privacy.pii": False}, True), ({}, True)]:
        assert evaluate_skip(regulations, answers) is hidden
        assert evaluate_skip(data_types, answers) is hidden


def test_example_tag_schema():
    schema = build_example_tag_schema()
    assert "foundation" in schema.tags
    assert "risks.top" not in schema.field_metadata
    assert get_field_complexity_levels(schema, "cloud.regions") == ["standard", "comprehensive", "enterprise"]
    assert schema.field_metadata["deployment.model"].related_fields == ("cloud.provider", "datacenter.location")
