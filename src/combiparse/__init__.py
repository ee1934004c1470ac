from .core import Failure, Grammar, attempt, parse, validate
from .errors import (
    ChoiceExhaustedError,
    CombiparseError,
    ConstructionError,
    ExclusionViolationError,
    GrammarConfigError,
    IncompleteConsumptionError,
    LeftRecursionError,
    MatchError,
    NestingTooDeepError,
    ParseError,
    TransformError,
    UnresolvedRecursionError,
)
from .nodes import (
    EMPTY,
    Action,
    Capture,
    Captured,
    Choice,
    Empty,
    Exclusion,
    Literal,
    Node,
    Range,
    Recursion,
    Repeat,
    Sequence,
    capture,
    char_range,
    choice,
    create_recursion,
    describe,
    exclusion,
    literal,
    literal_choice,
    optional,
    repeat,
    repeat_alternating,
    repeat_at_least_once,
    repeat_exact,
    sequence,
    with_action,
)

__all__ = [
    "Action",
    "Capture",
    "Captured",
    "Choice",
    "ChoiceExhaustedError",
    "CombiparseError",
    "ConstructionError",
    "EMPTY",
    "Empty",
    "Exclusion",
    "ExclusionViolationError",
    "Failure",
    "Grammar",
    "GrammarConfigError",
    "IncompleteConsumptionError",
    "LeftRecursionError",
    "Literal",
    "MatchError",
    "NestingTooDeepError",
    "Node",
    "ParseError",
    "Range",
    "Recursion",
    "Repeat",
    "Sequence",
    "TransformError",
    "UnresolvedRecursionError",
    "attempt",
    "capture",
    "char_range",
    "choice",
    "create_recursion",
    "describe",
    "exclusion",
    "literal",
    "literal_choice",
    "optional",
    "parse",
    "repeat",
    "repeat_alternating",
    "repeat_at_least_once",
    "repeat_exact",
    "sequence",
    "validate",
    "with_action",
]
