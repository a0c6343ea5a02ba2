"""
Trigger expansion.

A question may declare triggers: a mapping from an answer literal to the
ids of follow-up questions that the answer unlocks.

    triggers:
        "cloud":      ["cloud.provider", "cloud.regions"]
        "on-premise": ["datacenter.location"]

The answer is converted to its canonical string form and used as an exact
key. Ids with no catalog entry are skipped, so a trigger declaration may
refer to questions that a given catalog version does not ship yet.

Expansion is advisory: nothing here mutates the question, the registry
or the caller's state.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from .model import Question

logger = logging.getLogger(__name__)


def canonical_string(value: Any) -> str:
    """
    Convert an answer to the string used as a trigger key.

    Examples:
        True   -> "true"
        None   -> "null"
        3.0    -> "3"
        ["a", "b"] -> "a,b"
    """
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    # Whole floats below 1e21 print as integers. Other floats use Python's
    # repr, so exponent forms read "1e-07" and "1e+21".
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else canonical_string(item) for item in value)
    return str(value)


def expand_triggers(
    question: Question,
    answer: Any,
    registry: Mapping[str, Question],
) -> List[Question]:
    """
    Resolve the follow-up questions unlocked by an answer.

    Args:
        question: The question that was just answered
        answer: The recorded answer value
        registry: Question id -> Question lookup (see QuestionCatalog.registry)

    Returns:
        Triggered questions in declared order. Unknown ids are omitted.
    """
    if not question.triggers:
        return []

    triggered: List[Question] = []
    for question_id in get_triggered_question_ids(question.triggers, answer):
        target = registry.get(question_id)
        if target is None:
            logger.debug(
                "Trigger on %s references unknown question %s, skipping",
                question.id,
                question_id,
            )
            continue
        triggered.append(target)
    return triggered


def get_triggered_question_ids(
    triggers: Optional[Mapping[str, Sequence[str]]],
    answer: Any,
) -> List[str]:
    """Return the ids a bare trigger map declares for an answer."""
    if not triggers:
        return []
    return list(triggers.get(canonical_string(answer), ()))
