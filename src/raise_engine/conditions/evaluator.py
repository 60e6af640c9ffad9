"""Evaluate parsed conditions against an opportunity's declared fields."""

import logging
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel

from .errors import ConditionError, UnknownFieldError
from .parser import And, Comparison, FieldRef, Literal, Node, Or, Truthy, parse_condition

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[ConditionError], None]


def resolve_field(obj: BaseModel, path: tuple[str, ...], expression: str = "") -> Any:
    """
    Walk a dotted path through declared model fields only. Segments may use the
    camelCase alias or the Python name. Extra attributes, methods and
    non-model values are never reachable.
    """
    current: Any = obj
    for depth, segment in enumerate(path):
        if not isinstance(current, BaseModel):
            raise UnknownFieldError(".".join(path[: depth + 1]), expression)
        name = _declared_name(type(current), segment)
        if name is None:
            raise UnknownFieldError(".".join(path[: depth + 1]), expression)
        current = getattr(current, name)
    return current


def _declared_name(model: type[BaseModel], segment: str) -> Optional[str]:
    fields = model.model_fields
    if segment in fields:
        return segment
    for name, info in fields.items():
        if info.alias == segment:
            return name
    return None


def _normalize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _as_number(value: Any) -> Optional[Decimal]:
    """Decimal for real numbers; None for booleans, NaN/inf and non-numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    number = Decimal(str(value))
    return number if number.is_finite() else None


def _strict_equals(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    left_num, right_num = _as_number(left), _as_number(right)
    if left_num is not None and right_num is not None:
        return left_num == right_num
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return False


def _compare(op: str, left: Any, right: Any) -> bool:
    if op in ("===", "=="):
        return _strict_equals(left, right)
    if op in ("!==", "!="):
        return not _strict_equals(left, right)

    left_num, right_num = _as_number(left), _as_number(right)
    if left_num is None or right_num is None:
        return False
    if op == ">":
        return left_num > right_num
    if op == ">=":
        return left_num >= right_num
    if op == "<":
        return left_num < right_num
    return left_num <= right_num


def evaluate_parsed(node: Node, opp: BaseModel, expression: str = "") -> bool:
    """Evaluate an AST. Raises UnknownFieldError for undeclared fields."""

    def operand(item: Union[Literal, FieldRef]) -> Any:
        if isinstance(item, FieldRef):
            return _normalize(resolve_field(opp, item.path, expression))
        return item.value

    # No short-circuit: every field reference is checked, so an unknown field
    # fails the whole expression even behind a satisfied branch.
    if isinstance(node, Or):
        return any([evaluate_parsed(item, opp, expression) for item in node.items])
    if isinstance(node, And):
        return all([evaluate_parsed(item, opp, expression) for item in node.items])
    if isinstance(node, Comparison):
        return _compare(node.op, operand(node.left), operand(node.right))
    return operand(node.operand) is True


def evaluate_condition(
    expression: Optional[str],
    opp: BaseModel,
    *,
    on_error: Optional[ErrorCallback] = None,
) -> bool:
    """
    True when the expression holds for the opportunity.
    Empty/None means no condition (True). Syntax errors and unknown fields
    fail closed (False): they are logged and passed to on_error if given.
    """
    if expression is None or not expression.strip():
        return True
    try:
        return evaluate_parsed(parse_condition(expression), opp, expression)
    except ConditionError as exc:
        logger.warning("Condition %r rejected: %s", expression, exc)
        if on_error is not None:
            on_error(exc)
        return False
