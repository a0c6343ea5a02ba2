"""
Core Questionnaire Model Objects

Defines the data structures the flow engine reads:
    - Questions (catalog entries)
    - QuestionCatalog (root container for questions)
    - Tags and FieldMetadata
    - TagSchema (root container for tag metadata)

ARCHITECTURAL RULE:
    These objects:
        - Are loaded once and never mutated by the engine
        - Are fully serializable (see qflow.serialization)
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .expressions import Expression


AnswerMap = Mapping[str, Any]


@dataclass(frozen=True)
class Question:
    """
    A single questionnaire entry.

    Properties:
        id:
            Unique, stable field path
            Examples: "project.name", "deployment.model", "cloud.provider"

        stage:
            Grouping phase the question is asked in
            Examples: "core", "review", "deep_dive"

        type:
            Input kind ("text", "choice", "multi_choice", "boolean", ...)

        question:
            Human-readable prompt

        validation:
            Validation descriptor. Opaque to the flow engine.

        tags:
            Ordered topic tags. The first tag is the primary tag.

        skip_if:
            Optional Expression. When it evaluates to True the question
            is hidden.

        triggers:
            Optional mapping from a literal answer (in canonical string
            form) to the ordered ids of the questions it unlocks.

    The remaining attributes (hint, options, examples, help) are display
    data carried for the prompting layer.
    """

    id: str
    stage: str
    type: str
    question: str
    validation: Mapping[str, Any] = field(default_factory=dict, hash=False)
    tags: Tuple[str, ...] = ()
    # Mapping and literal-valued fields stay out of the hash so questions
    # can be collected into sets
    skip_if: Optional[Expression] = field(default=None, hash=False)
    triggers: Optional[Mapping[str, Tuple[str, ...]]] = field(default=None, hash=False)
    hint: Optional[str] = None
    options: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()
    help: Optional[Mapping[str, Any]] = field(default=None, hash=False)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


@dataclass
class QuestionCatalog:
    """
    Root container for the full question catalog.

    INVARIANTS (enforced by the loader, not here):
        - Every question has a non-empty id
        - Question order is the presentation order

    Properties:
        version: Catalog version string
        stages: Declared stage names, in order
        complexity_levels: Declared complexity tier names
        questions: All questions, in presentation order
    """

    version: str = ""
    stages: List[str] = field(default_factory=list)
    complexity_levels: List[str] = field(default_factory=list)
    questions: List[Question] = field(default_factory=list)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Args:
            question_id: Question identifier

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def get_questions_by_stage(self, stage: str) -> List[Question]:
        return [q for q in self.questions if q.stage == stage]

    def registry(self) -> Dict[str, Question]:
        """
        Build an id -> Question lookup for trigger expansion.

        A new dict is returned on every call; the first question wins
        when ids are duplicated.
        """
        lookup: Dict[str, Question] = {}
        for question in self.questions:
            lookup.setdefault(question.id, question)
        return lookup


@dataclass(frozen=True)
class Tag:
    """Display metadata for a tag."""

    label: str
    description: Optional[str] = None


@dataclass(frozen=True)
class FieldMetadata:
    """
    Per-question routing metadata from the tag schema.

    Properties:
        tags: Tags the field belongs to
        related_fields: Ids of fields shown alongside this one
        complexity_levels: Tier names in which the field is relevant
        weight: Contribution to the answered-detail score
    """

    tags: Tuple[str, ...] = ()
    related_fields: Tuple[str, ...] = ()
    complexity_levels: Tuple[str, ...] = ()
    weight: int = 1


@dataclass
class TagSchema:
    """
    Root container for tag metadata.

    Properties:
        version: Schema version string
        tags: Tag name -> Tag
        field_metadata: Question id -> FieldMetadata
    """

    version: str = ""
    tags: Dict[str, Tag] = field(default_factory=dict)
    field_metadata: Dict[str, FieldMetadata] = field(default_factory=dict)
