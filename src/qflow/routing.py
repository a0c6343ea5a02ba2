"""
Tag Router — narrows the question catalog to what is in scope.

Two families of helpers live here:

    - Flow filters, which combine tag selection with skip evaluation
      (filter_by_tags, filter_visible, visible_questions_for_stage)
    - Tag-schema queries, which read FieldMetadata without looking at
      answers (questions_by_tag, questions_by_complexity, weights, ...)

Every helper returns a new list in the catalog's original order.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .evaluator import evaluate_skip
from .model import AnswerMap, FieldMetadata, Question, Tag, TagSchema


FOUNDATION_TAG = "foundation"
BASE_LEVEL = "base"
DEFAULT_FIELD_WEIGHT = 1


# =============================================================================
# Flow filters
# =============================================================================

def filter_by_tags(
    questions: Sequence[Question],
    selected_tags: Optional[Iterable[str]],
    answers: AnswerMap,
) -> List[Question]:
    """
    Filter questions by focus tags, then drop skipped questions.

    Rules:
        - No selected tags: every question passes the tag stage
        - Foundation questions always pass the tag stage
        - Otherwise a question passes if it has ANY selected tag
        - skip_if is evaluated only for questions that passed

    Args:
        questions: Candidate questions
        selected_tags: Focus tags chosen by the user (may be None)
        answers: Current answers, for skip evaluation

    Returns:
        Questions in scope, in their original order
    """
    wanted = set(selected_tags or ())

    if wanted:
        candidates = [
            q for q in questions
            if FOUNDATION_TAG in q.tags or any(tag in wanted for tag in q.tags)
        ]
    else:
        candidates = list(questions)

    return filter_visible(candidates, answers)


def filter_visible(questions: Sequence[Question], answers: AnswerMap) -> List[Question]:
    """Drop questions whose skip_if condition holds."""
    return [q for q in questions if not evaluate_skip(q, answers)]


def visible_questions_for_stage(
    questions: Sequence[Question],
    answers: AnswerMap,
    stage: str,
) -> List[Question]:
    """
    Next questions to ask in a stage.

    Keeps the stage's questions that are not skipped and not yet answered.
    """
    stage_questions = [q for q in questions if q.stage == stage]
    return [q for q in filter_visible(stage_questions, answers) if q.id not in answers]


def filter_questions(
    questions: Sequence[Question],
    tag_schema: TagSchema,
    *,
    tags: Optional[Sequence[str]] = None,
    stage: Optional[str] = None,
    complexity_level: Optional[Union[str, Any]] = None,
    question_type: Optional[str] = None,
) -> List[Question]:
    """
    Filter questions by several criteria at once.

    Unlike filter_by_tags this does not evaluate skip conditions and
    gives foundation questions no special treatment.

    Args:
        questions: Candidate questions
        tag_schema: Source of FieldMetadata for the complexity check
        tags: Keep questions with any of these tags
        stage: Keep questions declared in this stage
        complexity_level: Keep questions relevant at this tier
            (a ComplexityLevel or its string value)
        question_type: Keep questions of this input kind

    Returns:
        Matching questions in their original order
    """
    result = list(questions)

    if tags:
        result = [q for q in result if any(tag in tags for tag in q.tags)]

    if stage:
        result = [q for q in result if q.stage == stage]

    if complexity_level:
        level = _level_name(complexity_level)
        result = [q for q in result if _in_level(tag_schema, q.id, level)]

    if question_type:
        result = [q for q in result if q.type == question_type]

    return result


# =============================================================================
# Tag-schema queries
# =============================================================================

def questions_by_tag(questions: Sequence[Question], tag: str) -> List[Question]:
    return [q for q in questions if tag in q.tags]


def questions_by_tags(questions: Sequence[Question], tags: Iterable[str]) -> List[Question]:
    wanted = set(tags)
    return [q for q in questions if any(tag in wanted for tag in q.tags)]


def group_by_primary_tag(questions: Sequence[Question]) -> Dict[str, List[Question]]:
    """Group questions under their first tag. Untagged questions are left out."""
    groups: Dict[str, List[Question]] = defaultdict(list)
    for question in questions:
        if question.tags:
            groups[question.tags[0]].append(question)
    return dict(groups)


def get_field_metadata(tag_schema: TagSchema, field_id: str) -> Optional[FieldMetadata]:
    return tag_schema.field_metadata.get(field_id)


def get_related_fields(tag_schema: TagSchema, field_id: str) -> List[str]:
    metadata = get_field_metadata(tag_schema, field_id)
    return list(metadata.related_fields) if metadata else []


def get_field_complexity_levels(tag_schema: TagSchema, field_id: str) -> List[str]:
    metadata = get_field_metadata(tag_schema, field_id)
    return list(metadata.complexity_levels) if metadata else []


def questions_by_complexity(
    questions: Sequence[Question],
    tag_schema: TagSchema,
    complexity_level: Union[str, Any],
) -> List[Question]:
    """
    Questions relevant at a complexity tier.

    A question without field metadata belongs to the base tier only.
    """
    level = _level_name(complexity_level)
    return [q for q in questions if _in_level(tag_schema, q.id, level)]


def get_field_weight(tag_schema: TagSchema, field_id: str) -> int:
    """Weight of a field for the complexity score, 1 when undeclared."""
    metadata = get_field_metadata(tag_schema, field_id)
    if metadata is None or not metadata.weight:
        return DEFAULT_FIELD_WEIGHT
    return metadata.weight


def answered_weight(tag_schema: TagSchema, answered_field_ids: Iterable[str]) -> int:
    return sum(get_field_weight(tag_schema, field_id) for field_id in answered_field_ids)


def available_tags(tag_schema: TagSchema) -> List[str]:
    return list(tag_schema.tags)


def get_tag_info(tag_schema: TagSchema, tag_name: str) -> Optional[Tag]:
    return tag_schema.tags.get(tag_name)


def _level_name(level: Union[str, Any]) -> str:
    # ComplexityLevel is a str-valued Enum; accept either form
    return getattr(level, "value", level)


def _in_level(tag_schema: TagSchema, field_id: str, level: str) -> bool:
    metadata = get_field_metadata(tag_schema, field_id)
    if metadata is None:
        return level == BASE_LEVEL
    return level in metadata.complexity_levels
