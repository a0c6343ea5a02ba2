"""
Example catalog builder for demos and tests.

Builds a small technical-design questionnaire covering the foundation,
deployment, privacy and operations topics, with skip conditions in both
structured and legacy form, triggers, and a matching tag schema.
"""
from qflow.expressions import all_of, eq, legacy, neq, not_
from qflow.model import FieldMetadata, Question, QuestionCatalog, Tag, TagSchema

ALL_LEVELS = ("base", "minimal", "standard", "comprehensive", "enterprise")


def _from(level: str) -> tuple:
    return ALL_LEVELS[ALL_LEVELS.index(level):]


def build_example_catalog() -> QuestionCatalog:
    catalog = QuestionCatalog(
        version="2.0",
        stages=["core", "review", "deep_dive"],
        complexity_levels=list(ALL_LEVELS),
    )

    not_cloud = all_of(neq("deployment.model", "cloud"), neq("deployment.model", "hybrid"))
    not_on_premise = all_of(neq("deployment.model", "on-premise"), neq("deployment.model", "hybrid"))

    catalog.questions = [
        # Foundation
        Question(
            id="project.name",
            stage="core",
            type="text",
            question="What is the project called?",
            validation={"type": "string", "minLength": 1},
            tags=("foundation",),
        ),
        Question(
            id="project.problem",
            stage="core",
            type="text",
            question="What problem does the project solve?",
            validation={"type": "string", "minLength": 10},
            tags=("foundation",),
        ),
        Question(
            id="project.industry",
            stage="core",
            type="text",
            question="Which industry is the project for?",
            validation={"type": "string"},
            tags=("foundation",),
            examples=("Healthcare", "E-Commerce", "FinTech"),
        ),
        Question(
            id="deployment.model",
            stage="core",
            type="choice",
            question="How will the system be deployed?",
            validation={"enum": ["cloud", "on-premise", "hybrid"]},
            tags=("foundation", "architecture"),
            options=("cloud", "on-premise", "hybrid"),
            triggers={
                "cloud": ("cloud.provider", "cloud.regions"),
                "on-premise": ("datacenter.location",),
                "hybrid": ("cloud.provider", "cloud.regions", "datacenter.location"),
            },
        ),
        # Deployment follow-ups
        Question(
            id="cloud.provider",
            stage="core",
            type="choice",
            question="Which cloud provider will host the system?",
            validation={"enum": ["aws", "gcp", "azure", "other"]},
            tags=("cloud", "operations"),
            skip_if=not_cloud,
            options=("aws", "gcp", "azure", "other"),
        ),
        Question(
            id="cloud.regions",
            stage="core",
            type="multi_choice",
            question="Which regions will the system run in?",
            validation={"type": "array", "minItems": 1},
            tags=("cloud", "operations"),
            skip_if=not_cloud,
        ),
        Question(
            id="datacenter.location",
            stage="core",
            type="text",
            question="Where is the data center located?",
            validation={"type": "string"},
            tags=("operations",),
            skip_if=not_on_premise,
        ),
        # Architecture
        Question(
            id="architecture.scale",
            stage="review",
            type="choice",
            question="What scale do you expect?",
            validation={"enum": ["small", "medium", "large", "massive"]},
            tags=("architecture",),
            options=("small", "medium", "large", "massive"),
        ),
        Question(
            id="architecture.multitenancy",
            stage="review",
            type="boolean",
            question="Will the system serve multiple tenants?",
            validation={"type": "boolean"},
            tags=("architecture",),
        ),
        # Privacy and security
        Question(
            id="privacy.pii",
            stage="core",
            type="boolean",
            question="Does the system handle personally identifiable information?",
            validation={"type": "boolean"},
            tags=("security", "privacy"),
            triggers={"true": ("privacy.regulations", "security.data_types")},
        ),
        Question(
            id="privacy.regulations",
            stage="review",
            type="multi_choice",
            question="Which regulations apply?",
            validation={"type": "array"},
            tags=("privacy", "compliance"),
            skip_if=legacy("privacy.pii != true"),
            options=("gdpr", "ccpa", "hipaa", "hitech", "pci-dss", "none"),
        ),
        Question(
            id="security.data_types",
            stage="review",
            type="multi_choice",
            question="Which kinds of sensitive data are stored?",
            validation={"type": "array"},
            tags=("security", "privacy"),
            skip_if=not_(eq("privacy.pii", True)),
        ),
        Question(
            id="security.auth",
            stage="review",
            type="choice",
            question="How do users authenticate?",
            validation={"enum": ["none", "password", "sso", "oauth"]},
            tags=("security",),
        ),
        # Operations
        Question(
            id="operations.sla",
            stage="review",
            type="choice",
            question="What availability target must the system meet?",
            validation={"enum": ["99", "99.9", "99.99", "99.999"]},
            tags=("operations",),
            options=("99", "99.9", "99.99", "99.999"),
        ),
        # Deep dive
        Question(
            id="integrations.external",
            stage="deep_dive",
            type="multi_choice",
            question="Which external systems does the project integrate with?",
            validation={"type": "array"},
            tags=("architecture",),
        ),
        Question(
            id="risks.top",
            stage="deep_dive",
            type="text",
            question="What are the top delivery risks?",
            validation={"type": "string"},
            tags=("risks",),
        ),
    ]

    return catalog


def build_example_tag_schema() -> TagSchema:
    schema = TagSchema(version="1.1")

    schema.tags = {
        "foundation": Tag(label="Foundation", description="Core project questions"),
        "architecture": Tag(label="Architecture"),
        "cloud": Tag(label="Cloud", description="Cloud hosting details"),
        "operations": Tag(label="Operations"),
        "security": Tag(label="Security"),
        "privacy": Tag(label="Privacy", description="Personal data handling"),
        "compliance": Tag(label="Compliance"),
        "risks": Tag(label="Risks"),
    }

    # risks.top is left out on purpose: it falls back to the base tier
    schema.field_metadata = {
        "project.name": FieldMetadata(("foundation",), (), _from("base"), 1),
        "project.problem": FieldMetadata(("foundation",), (), _from("base"), 1),
        "project.industry": FieldMetadata(("foundation",), (), _from("base"), 1),
        "deployment.model": FieldMetadata(
            ("foundation", "architecture"),
            ("cloud.provider", "datacenter.location"),
            _from("base"),
            2,
        ),
        "cloud.provider": FieldMetadata(("cloud",), ("cloud.regions",), _from("minimal"), 2),
        "cloud.regions": FieldMetadata(("cloud",), ("cloud.provider",), _from("standard"), 3),
        "datacenter.location": FieldMetadata(("operations",), (), _from("minimal"), 2),
        "architecture.scale": FieldMetadata(("architecture",), (), _from("minimal"), 2),
        "architecture.multitenancy": FieldMetadata(("architecture",), (), _from("standard"), 3),
        "privacy.pii": FieldMetadata(("security", "privacy"), ("privacy.regulations",), _from("base"), 2),
        "privacy.regulations": FieldMetadata(("privacy", "compliance"), ("privacy.pii",), _from("standard"), 4),
        "security.data_types": FieldMetadata(("security", "privacy"), (), _from("comprehensive"), 3),
        "security.auth": FieldMetadata(("security",), (), _from("standard"), 2),
        "operations.sla": FieldMetadata(("operations",), (), _from("standard"), 3),
        "integrations.external": FieldMetadata(("architecture",), (), _from("comprehensive"), 3),
    }

    return schema
