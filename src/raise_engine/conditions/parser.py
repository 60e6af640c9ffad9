"""
Tokenizer and recursive-descent parser for checkpoint conditions.

Grammar (&& binds tighter than ||):

    expr       := and_expr ( "||" and_expr )*
    and_expr   := term ( "&&" term )*
    term       := "(" expr ")" | comparison
    comparison := operand ( op operand )?
    op         := "===" | "==" | "!==" | "!=" | ">=" | "<=" | ">" | "<"
    operand    := field_path | string | number | true | false | null | undefined

The parser only builds the small AST below; nothing in the expression is
ever executed.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from .errors import ConditionSyntaxError

MAX_CONDITION_LENGTH = 2000
MAX_NESTING_DEPTH = 32

# Order matters: longest operators first
_TOKEN_SPEC: list[tuple[str, str]] = [
    ("WS", r"\s+"),
    ("OP", r"===|!==|==|!=|>=|<=|>|<"),
    ("AND", r"&&"),
    ("OR", r"\|\|"),
    ("LPAREN", r"\("),
    ("RPAREN", r"\)"),
    ("STRING", r"'[^'\\]*'|\"[^\"\\]*\""),
    ("NUMBER", r"-?\d+(?:\.\d+)?"),
    ("NAME", r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*"),
]
_TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC))

_KEYWORDS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
}

# Root object name accepted (and dropped) in front of field paths
_ROOT = "opp"


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: int


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class FieldRef:
    path: tuple[str, ...]

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True)
class Comparison:
    op: str
    left: Union[Literal, FieldRef]
    right: Union[Literal, FieldRef]


@dataclass(frozen=True)
class Truthy:
    """A bare operand; holds only when it evaluates to boolean true."""

    operand: Union[Literal, FieldRef]


@dataclass(frozen=True)
class And:
    items: tuple["Node", ...]


@dataclass(frozen=True)
class Or:
    items: tuple["Node", ...]


Node = Union[Comparison, Truthy, And, Or]


def tokenize(expression: str) -> list[Token]:
    """Split an expression into tokens; anything unrecognised is a syntax error."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(expression):
        match = _TOKEN_RE.match(expression, pos)
        if match is None:
            raise ConditionSyntaxError(
                f"Unexpected character {expression[pos]!r} at {pos}", expression, pos
            )
        kind = match.lastgroup or ""
        if kind != "WS":
            tokens.append(Token(kind, match.group(), pos))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = tokenize(expression)
        self.index = 0
        self.depth = 0

    def _peek(self) -> Token | None:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise ConditionSyntaxError(
                "Unexpected end of expression", self.expression, len(self.expression)
            )
        self.index += 1
        return token

    def _error(self, token: Token, message: str) -> ConditionSyntaxError:
        return ConditionSyntaxError(
            f"{message} at {token.position}: {token.text!r}", self.expression, token.position
        )

    def parse(self) -> Node:
        if not self.tokens:
            raise ConditionSyntaxError("Empty expression", self.expression, 0)
        node = self._or()
        leftover = self._peek()
        if leftover is not None:
            raise self._error(leftover, "Unexpected token")
        return node

    def _or(self) -> Node:
        items = [self._and()]
        while (token := self._peek()) is not None and token.kind == "OR":
            self._advance()
            items.append(self._and())
        return items[0] if len(items) == 1 else Or(tuple(items))

    def _and(self) -> Node:
        items = [self._term()]
        while (token := self._peek()) is not None and token.kind == "AND":
            self._advance()
            items.append(self._term())
        return items[0] if len(items) == 1 else And(tuple(items))

    def _term(self) -> Node:
        token = self._peek()
        if token is not None and token.kind == "LPAREN":
            if self.depth >= MAX_NESTING_DEPTH:
                raise self._error(token, f"Nesting deeper than {MAX_NESTING_DEPTH}")
            self._advance()
            self.depth += 1
            node = self._or()
            self.depth -= 1
            closing = self._advance()
            if closing.kind != "RPAREN":
                raise self._error(closing, "Expected ')'")
            return node
        return self._comparison()

    def _comparison(self) -> Node:
        left = self._operand()
        token = self._peek()
        if token is None or token.kind != "OP":
            return Truthy(left)
        self._advance()
        right = self._operand()
        return Comparison(token.text, left, right)

    def _operand(self) -> Union[Literal, FieldRef]:
        token = self._advance()
        if token.kind == "STRING":
            return Literal(token.text[1:-1])
        if token.kind == "NUMBER":
            return Literal(Decimal(token.text))
        if token.kind == "NAME":
            if token.text in _KEYWORDS:
                return Literal(_KEYWORDS[token.text])
            path = tuple(token.text.split("."))
            if path[0] == _ROOT:
                path = path[1:]
            if not path:
                raise self._error(token, "Field name expected")
            return FieldRef(path)
        raise self._error(token, "Operand expected")


def parse_condition(expression: str) -> Node:
    """Parse an expression into an AST. Raises ConditionSyntaxError."""
    if len(expression) > MAX_CONDITION_LENGTH:
        raise ConditionSyntaxError(
            f"Expression longer than {MAX_CONDITION_LENGTH} characters", expression[:80]
        )
    return _Parser(expression).parse()
