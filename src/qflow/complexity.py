"""
Complexity Analyzer — decides how much of the catalog a project needs.

Pipeline:
    answers -> RiskFactors -> risk score (+ answered weight) -> ComplexityLevel

The level then drives progressive disclosure: which document sections
are revealed and which tags are exposed to the questionnaire.

All functions are pure. Risk factors are recomputed on every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .model import AnswerMap, TagSchema
from .routing import answered_weight as compute_answered_weight

logger = logging.getLogger(__name__)


class ComplexityLevel(str, Enum):
    """Project complexity tiers, lowest to highest."""

    BASE = "base"
    MINIMAL = "minimal"
    STANDARD = "standard"
    COMPREHENSIVE = "comprehensive"
    ENTERPRISE = "enterprise"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    @property
    def threshold(self) -> int:
        return COMPLEXITY_THRESHOLDS[self]


_LEVEL_ORDER: List[ComplexityLevel] = list(ComplexityLevel)

# Minimum score per tier. Doubles as the approximate question count.
COMPLEXITY_THRESHOLDS: Dict[ComplexityLevel, int] = {
    ComplexityLevel.BASE: 4,
    ComplexityLevel.MINIMAL: 10,
    ComplexityLevel.STANDARD: 20,
    ComplexityLevel.COMPREHENSIVE: 35,
    ComplexityLevel.ENTERPRISE: 48,
}

# Answered fields required before a tier counts as complete.
MIN_FIELD_COUNTS: Dict[ComplexityLevel, int] = {
    ComplexityLevel.BASE: 4,
    ComplexityLevel.MINIMAL: 8,
    ComplexityLevel.STANDARD: 15,
    ComplexityLevel.COMPREHENSIVE: 25,
    ComplexityLevel.ENTERPRISE: 35,
}

LEVEL_DESCRIPTIONS: Dict[ComplexityLevel, str] = {
    ComplexityLevel.BASE: "Basic project with minimal requirements (~4 questions)",
    ComplexityLevel.MINIMAL: "Simple project with standard requirements (~10 questions)",
    ComplexityLevel.STANDARD: "Typical project with moderate complexity (~20 questions)",
    ComplexityLevel.COMPREHENSIVE: "Complex project with extensive requirements (~35 questions)",
    ComplexityLevel.ENTERPRISE: "Enterprise-grade project with full compliance and scale (~48+ questions)",
}

RISK_WEIGHTS: Dict[str, int] = {
    "handles_pii": 6,
    "handles_phi": 8,
    "requires_compliance": 8,
    "multi_region": 5,
    "handles_payments": 7,
    "high_availability": 5,
    "large_scale": 6,
    "multi_tenant": 5,
    "regulated_industry": 7,
}
POINTS_PER_INTEGRATION = 2

REGULATED_INDUSTRIES = ("healthcare", "finance", "fintech", "banking", "insurance", "government")
HEALTH_REGULATIONS = ("hipaa", "hitech")
PAYMENT_REGULATIONS = ("pci-dss",)
HIGH_AVAILABILITY_SLAS = ("99.99", "99.999")
LARGE_SCALES = ("large", "massive")

BASE_SECTIONS = ("foundation", "summary")
_SECTION_TIERS = (
    (),
    ("architecture",),
    ("operations", "security"),
    ("privacy", "implementation"),
    ("risks", "compliance"),
)
_TAG_TIERS = (
    ("foundation",),
    ("architecture",),
    ("operations",),
    ("security", "privacy"),
    ("compliance", "risks"),
)


@dataclass(frozen=True)
class RiskFactors:
    """Risk signals derived from the answers."""

    handles_pii: bool = False
    handles_phi: bool = False
    requires_compliance: bool = False
    multi_region: bool = False
    handles_payments: bool = False
    high_availability: bool = False
    large_scale: bool = False
    multi_tenant: bool = False
    external_integrations: int = 0
    regulated_industry: bool = False


@dataclass(frozen=True)
class ComplexityAnalysis:
    """
    Result of analyze_complexity.

    score is the total used to pick the tier: risk_score plus the
    answered weight (zero when no tag schema was supplied).
    """

    recommended_level: ComplexityLevel
    risk_factors: RiskFactors
    score: int
    question_count: int
    description: str
    risk_score: int = 0
    answered_weight: int = 0


# =============================================================================
# Risk detection and scoring
# =============================================================================

def detect_risk_factors(answers: AnswerMap) -> RiskFactors:
    """
    Derive RiskFactors from well-known answer fields.

    Fields read:
        privacy.pii, privacy.regulations, cloud.regions, operations.sla,
        architecture.scale, architecture.multitenancy, deployment.model,
        integrations.external, project.industry
    """
    regulations = _as_list(answers.get("privacy.regulations"))
    regions = _as_list(answers.get("cloud.regions"))
    industry = answers.get("project.industry")

    regulated_industry = isinstance(industry, str) and any(
        name in industry.lower() for name in REGULATED_INDUSTRIES
    )

    return RiskFactors(
        handles_pii=answers.get("privacy.pii") is True,
        handles_phi=any(reg in regulations for reg in HEALTH_REGULATIONS),
        requires_compliance=bool(regulations) and "none" not in regulations,
        multi_region=len(regions) > 1,
        handles_payments=any(reg in regulations for reg in PAYMENT_REGULATIONS),
        high_availability=_is_high_availability(answers.get("operations.sla")),
        large_scale=answers.get("architecture.scale") in LARGE_SCALES,
        multi_tenant=(
            answers.get("deployment.model") == "hybrid"
            or answers.get("architecture.multitenancy") is True
        ),
        external_integrations=_count_integrations(answers.get("integrations.external")),
        regulated_industry=regulated_industry,
    )


def calculate_complexity_score(risk_factors: RiskFactors) -> int:
    """Base threshold plus a fixed weight per present risk factor."""
    score = COMPLEXITY_THRESHOLDS[ComplexityLevel.BASE]

    for name, weight in RISK_WEIGHTS.items():
        if getattr(risk_factors, name):
            score += weight

    score += risk_factors.external_integrations * POINTS_PER_INTEGRATION
    return score


def score_to_level(score: int) -> ComplexityLevel:
    """Highest tier whose threshold does not exceed the score."""
    for level in reversed(_LEVEL_ORDER):
        if score >= COMPLEXITY_THRESHOLDS[level]:
            return level
    return ComplexityLevel.BASE


def recommend_level(answers: AnswerMap, tag_schema: Optional[TagSchema] = None) -> ComplexityLevel:
    return analyze_complexity(answers, tag_schema).recommended_level


def analyze_complexity(
    answers: AnswerMap,
    tag_schema: Optional[TagSchema] = None,
) -> ComplexityAnalysis:
    """
    Full complexity analysis of the current answers.

    Args:
        answers: Field path -> answer value
        tag_schema: Optional; when given, the weight of every answered
            field is added to the risk score

    Returns:
        ComplexityAnalysis with the recommended tier and score breakdown
    """
    risk_factors = detect_risk_factors(answers)
    risk_score = calculate_complexity_score(risk_factors)

    weight = 0
    if tag_schema is not None:
        weight = compute_answered_weight(tag_schema, answers.keys())

    score = risk_score + weight
    level = score_to_level(score)
    logger.debug(
        "Complexity score %d (risk %d, answered weight %d) -> %s",
        score,
        risk_score,
        weight,
        level.value,
    )

    return ComplexityAnalysis(
        recommended_level=level,
        risk_factors=risk_factors,
        score=score,
        question_count=question_count_for_level(level),
        description=level_description(level),
        risk_score=risk_score,
        answered_weight=weight,
    )


# =============================================================================
# Tier lookups
# =============================================================================

def question_count_for_level(level: ComplexityLevel) -> int:
    return COMPLEXITY_THRESHOLDS[ComplexityLevel(level)]


def level_description(level: ComplexityLevel) -> str:
    return LEVEL_DESCRIPTIONS[ComplexityLevel(level)]


def is_level_sufficient(
    level: ComplexityLevel,
    answers: AnswerMap,
    tag_schema: Optional[TagSchema] = None,
) -> bool:
    """True when the level is at or above the recommended one."""
    recommended = recommend_level(answers, tag_schema)
    return ComplexityLevel(level).rank >= recommended.rank


def min_field_count_for_level(level: ComplexityLevel) -> int:
    return MIN_FIELD_COUNTS[ComplexityLevel(level)]


def meets_min_field_count(level: ComplexityLevel, answers: AnswerMap) -> bool:
    """Check that enough non-empty answers exist for the level."""
    provided = sum(1 for value in answers.values() if value is not None and value != "")
    return provided >= min_field_count_for_level(level)


def sections_for_level(level: ComplexityLevel) -> List[str]:
    """Document sections revealed at a level. Grows with each tier."""
    rank = ComplexityLevel(level).rank
    sections = list(BASE_SECTIONS)
    for tier in _SECTION_TIERS[: rank + 1]:
        sections.extend(tier)
    return sections


def tags_for_level(level: ComplexityLevel) -> List[str]:
    """Question tags exposed at a level. Always starts with foundation."""
    rank = ComplexityLevel(level).rank
    tags: List[str] = []
    for tier in _TAG_TIERS[: rank + 1]:
        tags.extend(tier)
    return tags


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _is_high_availability(sla: Any) -> bool:
    if isinstance(sla, str):
        return sla.strip() in HIGH_AVAILABILITY_SLAS
    if isinstance(sla, (int, float)) and not isinstance(sla, bool):
        return sla in (99.99, 99.999)
    return False


def _count_integrations(value: Any) -> int:
    if isinstance(value, (list, tuple)):
        return len(value)
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return 0
