"""Blueprint questions: loading, dependency ordering, and answer collection.

Key pieces:
    load_questions   - Parse and validate a blueprint's question file
    build_graph      - Dependency edges between questions
    question_order   - Stabilised topological ask order
    AnswerCollector  - Asks visible questions through a Prompter
    RichPrompter     - Terminal prompt widgets built on rich.prompt
"""

from stencil.questions.collector import AnswerCollector, check_predicate, is_visible
from stencil.questions.graph import Graph, build_graph, question_order, sort_graph, stabilize_topological_order
from stencil.questions.models import (
    Answer,
    Dependency,
    DependencyKind,
    Predicate,
    Question,
    QuestionType,
    load_questions,
    parse_questions,
)
from stencil.questions.prompts import Prompter, RichPrompter

__all__ = [
    # Models
    "Answer",
    "Dependency",
    "DependencyKind",
    "Predicate",
    "Question",
    "QuestionType",
    "load_questions",
    "parse_questions",
    # Ordering
    "Graph",
    "build_graph",
    "sort_graph",
    "stabilize_topological_order",
    "question_order",
    # Collection
    "AnswerCollector",
    "check_predicate",
    "is_visible",
    "Prompter",
    "RichPrompter",
]
