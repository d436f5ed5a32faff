"""Effect magnitude resolution (flat, percent and formula values)."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict, List, Mapping, Tuple

from battlecore.domain.defs import ValueSpec
from battlecore.domain.entities import STAT_ATTRS, Actor

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<number>\d+(?:\.\d*)?|\.\d+)"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)"
    r"|(?P<op>[-+*/%(),])"
    r")"
)

_FUNCTIONS: Dict[str, Callable[..., float]] = {
    "min": min,
    "max": max,
    "abs": abs,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": round,
}

Scope = Mapping[str, object]
Node = Callable[[Scope], float]


class FormulaError(ValueError):
    """Raised when a formula expression cannot be parsed or evaluated."""


@dataclass(slots=True)
class _Token:
    kind: str
    text: str


def tokenize(expr: str) -> List[_Token]:
    tokens: List[_Token] = []
    position = 0
    stripped_end = len(expr.rstrip())
    while position < stripped_end:
        match = _TOKEN_RE.match(expr, position)
        if match is None or match.end() == position:
            raise FormulaError(f"Unexpected character at {position} in '{expr}'.")
        kind = match.lastgroup or ""
        tokens.append(_Token(kind=kind, text=match.group(kind)))
        position = match.end()
    return tokens


def _stat_reader(owner: str, stat: str) -> Node:
    attr = STAT_ATTRS.get(stat)
    if attr is None:
        raise FormulaError(f"Unknown stat '{stat}'.")
    return lambda scope: float(getattr(scope[owner], attr))


def _reference(name: str) -> Node:
    parts = name.split(".")
    if len(parts) == 1 and parts[0] in ("stacks", "amount"):
        key = parts[0]
        return lambda scope: float(scope.get(key, 0))  # type: ignore[arg-type]
    if len(parts) == 3 and parts[0] in ("u", "t") and parts[1] == "stats":
        return _stat_reader(parts[0], parts[2])
    raise FormulaError(f"Unknown reference '{name}'.")


class _Parser:
    """Recursive-descent parser compiling an expression into closures."""

    def __init__(self, tokens: List[_Token]) -> None:
        self._tokens = tokens
        self._index = 0

    def parse(self) -> Node:
        node = self._expression()
        if self._peek() is not None:
            raise FormulaError(f"Unexpected token '{self._peek().text}'.")
        return node

    def _peek(self) -> _Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _take(self) -> _Token:
        token = self._peek()
        if token is None:
            raise FormulaError("Unexpected end of formula.")
        self._index += 1
        return token

    def _accept(self, text: str) -> bool:
        token = self._peek()
        if token is not None and token.kind == "op" and token.text == text:
            self._index += 1
            return True
        return False

    def _expect(self, text: str) -> None:
        if not self._accept(text):
            raise FormulaError(f"Expected '{text}'.")

    def _expression(self) -> Node:
        node = self._term()
        while True:
            if self._accept("+"):
                node = _binary(node, self._term(), lambda a, b: a + b)
            elif self._accept("-"):
                node = _binary(node, self._term(), lambda a, b: a - b)
            else:
                return node

    def _term(self) -> Node:
        node = self._unary()
        while True:
            if self._accept("*"):
                node = _binary(node, self._unary(), lambda a, b: a * b)
            elif self._accept("/"):
                node = _binary(node, self._unary(), _divide)
            elif self._accept("%"):
                node = _binary(node, self._unary(), _modulo)
            else:
                return node

    def _unary(self) -> Node:
        if self._accept("-"):
            operand = self._unary()
            return lambda scope: -operand(scope)
        if self._accept("+"):
            return self._unary()
        return self._atom()

    def _atom(self) -> Node:
        token = self._take()
        if token.kind == "number":
            constant = float(token.text)
            return lambda scope: constant
        if token.kind == "op" and token.text == "(":
            node = self._expression()
            self._expect(")")
            return node
        if token.kind == "name":
            if token.text in _FUNCTIONS and self._accept("("):
                return self._call(_FUNCTIONS[token.text])
            return _reference(token.text)
        raise FormulaError(f"Unexpected token '{token.text}'.")

    def _call(self, func: Callable[..., float]) -> Node:
        args: List[Node] = []
        if not self._accept(")"):
            args.append(self._expression())
            while self._accept(","):
                args.append(self._expression())
            self._expect(")")
        if not args:
            raise FormulaError("Function call needs at least one argument.")
        return lambda scope: float(func(*(arg(scope) for arg in args)))


def _binary(left: Node, right: Node, op: Callable[[float, float], float]) -> Node:
    return lambda scope: op(left(scope), right(scope))


def _divide(left: float, right: float) -> float:
    if right == 0:
        raise FormulaError("Division by zero.")
    return left / right


def _modulo(left: float, right: float) -> float:
    if right == 0:
        raise FormulaError("Modulo by zero.")
    return left % right


@lru_cache(maxsize=256)
def compile_formula(expr: str) -> Node:
    """Compile a formula such as ``u.stats.atk * 2 - t.stats.def``."""
    return _Parser(tokenize(expr)).parse()


def evaluate_formula(expr: str, user: Actor, target: Actor, *, stacks: int = 1, amount: float = 0) -> float:
    scope = {"u": user.stats, "t": target.stats, "stacks": stacks, "amount": amount}
    return compile_formula(expr)(scope)


def _percent_base(target: Actor, effect_kind: str | None, resource: str | None) -> int:
    if effect_kind == "resource" and resource:
        _, maximum = target.stats.resource(resource)
        return maximum
    return target.stats.max_hp


def _clamp(value: float, bounds: Tuple[float | None, float | None]) -> float:
    minimum, maximum = bounds
    if minimum is not None and value < minimum:
        value = minimum
    if maximum is not None and value > maximum:
        value = maximum
    return value


def resolve(
    value: ValueSpec,
    user: Actor,
    target: Actor,
    *,
    effect_kind: str | None = None,
    resource: str | None = None,
    stacks: int = 1,
    amount: float = 0,
    scale: float = 1,
) -> float:
    """
    Resolve an effect magnitude for ``user`` acting on ``target``.

    Percent values take a share of the target's relevant maximum: the named
    resource for ``resource`` effects, max HP otherwise. Their bounds clamp
    the share itself, so ``percent=25, max=1`` still yields a quarter.
    Flat and formula results are scaled by ``scale`` and then clamped.
    Malformed formulas and non-finite results resolve to 0.
    """

    if value.kind == "flat":
        raw = float(value.amount)
    elif value.kind == "percent":
        share = value.percent / 100 * scale
        if not math.isfinite(share):
            return 0.0
        return _clamp(share, (value.minimum, value.maximum)) * _percent_base(target, effect_kind, resource)
    elif value.kind == "formula":
        if not value.expr:
            return 0.0
        try:
            raw = evaluate_formula(value.expr, user, target, stacks=stacks, amount=amount)
        except (ArithmeticError, RecursionError, TypeError, ValueError) as exc:
            logger.debug("Formula '%s' failed to resolve: %s", value.expr, exc)
            return 0.0
    else:
        logger.debug("Unknown value kind '%s'", value.kind)
        return 0.0

    if not math.isfinite(raw):
        return 0.0
    return _clamp(raw * scale, (value.minimum, value.maximum))


__all__ = ["FormulaError", "compile_formula", "evaluate_formula", "resolve", "tokenize"]
