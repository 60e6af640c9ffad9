"""Safe evaluation of checkpoint conditions (no eval/exec)."""

from .errors import ConditionError, ConditionSyntaxError, UnknownFieldError
from .evaluator import evaluate_condition, evaluate_parsed, resolve_field
from .parser import MAX_CONDITION_LENGTH, MAX_NESTING_DEPTH, parse_condition, tokenize

__all__ = [
    "ConditionError",
    "ConditionSyntaxError",
    "MAX_CONDITION_LENGTH",
    "MAX_NESTING_DEPTH",
    "UnknownFieldError",
    "evaluate_condition",
    "evaluate_parsed",
    "parse_condition",
    "resolve_field",
    "tokenize",
]
