"""
End-to-end flow scenarios.

Each scenario drives the public helpers together the way a prompting
layer would: record answers, expand triggers, filter by focus tags and
pick a complexity tier.
"""

import pytest
from qflow.complexity import ComplexityLevel, analyze_complexity, tags_for_level
from qflow.examples import build_example_catalog, build_example_tag_schema
from qflow.expressions import has, neq, not_
from qflow.model import Question
from qflow.routing import filter_by_tags, visible_questions_for_stage
from qflow.triggers import expand_triggers


@pytest.fixture
def deployment_questions():
    return [
        Question(id="project.name", stage="core", type="text", question="Name?", tags=("foundation",)),
        Question(
            id="cloud.provider",
            stage="core",
            type="choice",
            question="Provider?",
            tags=("cloud", "operations"),
            skip_if=neq("deployment.model", "cloud"),
        ),
        Question(
            id="datacenter.location",
            stage="core",
            type="text",
            question="Where?",
            tags=("operations",),
            skip_if=neq("deployment.model", "on-premise"),
        ),
    ]


def ids(questions):
    return [q.id for q in questions]


def test_on_premise_operations_flow(deployment_questions):
    result = filter_by_tags(deployment_questions, ["operations"], {"deployment.model": "on-premise"})
    assert "cloud.provider" not in ids(result)
    assert "datacenter.location" in ids(result)
    assert "project.name" in ids(result)


@pytest.mark.parametrize("pii, present", [(True, True), (False, False)])
def test_privacy_follow_up_flow(pii, present):
    questions = [
        Question(
            id="security.data_types",
            stage="review",
            type="multi_choice",
            question="Data types?",
            tags=("security", "privacy"),
            skip_if=neq("privacy.pii", True),
        ),
        Question(
            id="security.pii_storage",
            stage="review",
            type="text",
            question="Where is PII stored?",
            tags=("security", "privacy"),
            skip_if=not_(has("privacy.tags", "PII")),
        ),
    ]
    answers = {"privacy.pii": pii, "privacy.tags": ["PII"] if pii else []}
    result = filter_by_tags(questions, ["security"], answers)
    assert ("security.data_types" in ids(result)) is present
    assert ("security.pii_storage" in ids(result)) is present


def test_complexity_rises_with_regulated_data():
    simple = {
        "project.name": "Internal wiki",
        "project.industry": "Education",
        "privacy.pii": False,
        "privacy.regulations": ["none"],
    }
    assert analyze_complexity(simple).recommended_level is ComplexityLevel.BASE

    regulated = dict(simple, **{"privacy.regulations": ["hipaa", "gdpr"], "operations.sla": "99.99"})
    level = analyze_complexity(regulated).recommended_level
    assert level.rank >= ComplexityLevel.STANDARD.rank

    healthcare = dict(regulated, **{"project.industry": "Healthcare", "privacy.pii": True})
    analysis = analyze_complexity(healthcare)
    assert analysis.recommended_level.rank >= ComplexityLevel.COMPREHENSIVE.rank
    assert analysis.score == 38


def test_full_questionnaire_walkthrough():
    """Answer the example catalog stage by stage."""
    catalog = build_example_catalog()
    schema = build_example_tag_schema()
    registry = catalog.registry()
    answers = {}

    core = visible_questions_for_stage(catalog.questions, answers, "core")
    # Deployment follow-ups stay hidden until a model is chosen
    assert "cloud.provider" not in ids(core)
    assert "datacenter.location" not in ids(core)

    answers["deployment.model"] = "cloud"
    unlocked = expand_triggers(registry["deployment.model"], "cloud", registry)
    assert ids(unlocked) == ["cloud.provider", "cloud.regions"]

    core = visible_questions_for_stage(catalog.questions, answers, "core")
    assert "cloud.provider" in ids(core)
    assert "datacenter.location" not in ids(core)

    answers.update({
        "project.name": "Clinic portal",
        "project.problem": "Patients cannot book online",
        "project.industry": "Healthcare",
        "cloud.provider": "aws",
        "cloud.regions": ["eu-west-1", "eu-central-1"],
        "privacy.pii": True,
    })
    unlocked = expand_triggers(registry["privacy.pii"], True, registry)
    assert ids(unlocked) == ["privacy.regulations", "security.data_types"]

    # risk 22 (PII, multi-region, healthcare) + answered weight 12
    analysis = analyze_complexity(answers, schema)
    assert analysis.score == 34
    assert analysis.recommended_level is ComplexityLevel.STANDARD

    def review_questions():
        focus = tags_for_level(analyze_complexity(answers, schema).recommended_level)
        pending = [q for q in catalog.questions if q.stage == "review" and q.id not in answers]
        return filter_by_tags(pending, focus, answers)

    assert ids(review_questions()) == ["architecture.scale", "architecture.multitenancy", "operations.sla"]

    answers["privacy.regulations"] = ["hipaa"]
    assert analyze_complexity(answers, schema).recommended_level is ComplexityLevel.ENTERPRISE
    assert "security.data_types" in ids(review_questions())
