"""Recursive-descent parser for calculator expressions.

Precedence, lowest first::

    conversion        = additive ('->' additive)*
    additive          = compound_fraction (('+' | '-') compound_fraction)*
    compound_fraction = multiplicative multiplicative?
    multiplicative    = power (('*' | '/') power)*
    power             = '-' power | '+' power | apply (('^' | '**') power)?
    apply             = atom atom*
    atom              = number | identifier | '(' conversion ')'

Juxtaposition is ambiguous (``3 kg``, ``sqrt 4``, ``8 1/2``, ``6 feet 1
inch``). The parser resolves it by looking at the shape of subtrees that are
already built; that policy lives entirely in :func:`classify_apply` and
:func:`classify_compound_fraction`.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator, Optional, Sequence, Type

from unitcalc.parser.lexer import IDENT, NUM, ParseError, Token, tokenize
from unitcalc.parser.nodes import (
    Add,
    Apply,
    ApplyFunctionCall,
    ApplyMul,
    BinaryOp,
    Convert,
    Div,
    Expr,
    Ident,
    Mul,
    Num,
    Parens,
    Pow,
    Sub,
    UnaryMinus,
    UnaryPlus,
    expression_depth,
)

# Bounds parentheses, unary signs, exponent chains and the depth of the
# finished tree alike, so neither parsing nor evaluation can exhaust the stack.
MAX_NESTING_DEPTH = int(os.getenv("UNITCALC_MAX_NESTING_DEPTH", "64"))


class NestingDepthError(ParseError):
    """Raised when an expression is nested deeper than MAX_NESTING_DEPTH."""


class ApplyAction(str, Enum):
    """What to do with two adjacent atoms."""

    STOP = "stop"
    FUNCTION_CALL = "function_call"
    MULTIPLY = "multiply"
    APPLY = "apply"


def classify_apply(left: Expr, right: Expr) -> ApplyAction:
    """Decide how ``left`` (built so far) and the next atom ``right`` combine.

    ``STOP`` leaves ``right`` unconsumed so the compound-fraction level can
    reinterpret it (``8 1/2``, ``6 feet 1 inch``).
    """

    if isinstance(right, Num):
        if isinstance(left, (Num, ApplyMul)):
            return ApplyAction.STOP
        return ApplyAction.FUNCTION_CALL
    if isinstance(left, (Num, ApplyMul)):
        return ApplyAction.MULTIPLY
    return ApplyAction.APPLY


_APPLY_NODES = {
    ApplyAction.FUNCTION_CALL: ApplyFunctionCall,
    ApplyAction.MULTIPLY: ApplyMul,
    ApplyAction.APPLY: Apply,
}


def _is_simple_fraction(node: Expr) -> bool:
    return isinstance(node, Div) and isinstance(node.lhs, Num) and isinstance(node.rhs, Num)


def classify_compound_fraction(first: Expr, second: Expr) -> Optional[Type[BinaryOp]]:
    """Return the node joining two juxtaposed terms, or ``None`` to reject.

    * ``<num> <num>/<num>`` is a mixed number: ``Add``.
    * ``-<num> <num>/<num>`` is a negative mixed number: ``Sub``, since the
      unary minus already bound to the whole part.
    * ``<num> <unit> <num> <unit>`` is a sum of lengths etc.: ``Add``.
    """

    if _is_simple_fraction(second):
        if isinstance(first, Num):
            return Add
        if isinstance(first, UnaryMinus) and isinstance(first.operand, Num):
            return Sub
    if isinstance(first, ApplyMul) and isinstance(second, ApplyMul):
        return Add
    return None


class _TokenStream:
    def __init__(self, tokens: Sequence[Token], source: str) -> None:
        self.tokens = list(tokens)
        self.source = source
        self.index = 0
        self.depth = 0

    @contextmanager
    def nested(self, position: int) -> Iterator[None]:
        if self.depth >= MAX_NESTING_DEPTH:
            raise NestingDepthError(
                f"Expression is nested more than {MAX_NESTING_DEPTH} levels deep",
                self.source,
                position,
            )
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def position(self) -> int:
        token = self.peek()
        return len(self.source) if token is None else token.start

    def peek(self) -> Token | None:
        if self.index >= len(self.tokens):
            return None
        return self.tokens[self.index]

    def pop(self) -> Token:
        token = self.peek()
        if token is None:
            raise ParseError("Unexpected end of input", self.source, len(self.source))
        self.index += 1
        return token

    def accept(self, *symbols: str) -> bool:
        token = self.peek()
        if token is not None and token.is_symbol(*symbols):
            self.index += 1
            return True
        return False

    def expect(self, symbol: str) -> None:
        token = self.pop()
        if not token.is_symbol(symbol):
            raise ParseError(
                f"Found '{token.text}' while expecting '{symbol}'", self.source, token.start
            )


def _speculate(stream: _TokenStream, parse: Callable[[_TokenStream], Expr]) -> Optional[Expr]:
    """Run ``parse``; on failure rewind the stream and return ``None``."""

    mark = stream.index
    try:
        return parse(stream)
    except NestingDepthError:
        raise
    except ParseError:
        stream.index = mark
        return None


def _parse_atom(stream: _TokenStream) -> Expr:
    token = stream.peek()
    if token is None:
        raise ParseError("Unexpected end of input", stream.source, len(stream.source))
    if token.kind == NUM:
        stream.pop()
        return Num(token.value, token.base)
    if token.kind == IDENT:
        stream.pop()
        return Ident(token.value)
    if token.is_symbol("("):
        stream.pop()
        with stream.nested(token.start):
            inner = _parse_conversion(stream)
        stream.expect(")")
        return Parens(inner)
    raise ParseError(
        "Expected a number, an identifier or an open parenthesis",
        stream.source,
        token.start,
    )


def _parse_apply(stream: _TokenStream) -> Expr:
    result = _parse_atom(stream)
    while True:
        mark = stream.index
        term = _speculate(stream, _parse_atom)
        if term is None:
            break
        action = classify_apply(result, term)
        if action is ApplyAction.STOP:
            stream.index = mark
            break
        result = _APPLY_NODES[action](result, term)
    return result


def _parse_nested_power(stream: _TokenStream) -> Expr:
    with stream.nested(stream.position()):
        return _parse_power(stream)


def _parse_power(stream: _TokenStream) -> Expr:
    if stream.accept("-"):
        return UnaryMinus(_parse_nested_power(stream))
    if stream.accept("+"):
        return UnaryPlus(_parse_nested_power(stream))
    result = _parse_apply(stream)
    if stream.accept("^", "**"):
        result = Pow(result, _parse_nested_power(stream))
    return result


def _parse_multiplicative(stream: _TokenStream) -> Expr:
    result = _parse_power(stream)
    while True:
        if stream.accept("*"):
            result = Mul(result, _parse_power(stream))
        elif stream.accept("/"):
            result = Div(result, _parse_power(stream))
        else:
            return result


def _parse_compound_fraction(stream: _TokenStream) -> Expr:
    first = _parse_multiplicative(stream)
    mark = stream.index
    second = _speculate(stream, _parse_multiplicative)
    if second is None:
        return first
    joiner = classify_compound_fraction(first, second)
    if joiner is None:
        stream.index = mark
        return first
    return joiner(first, second)


def _parse_additive(stream: _TokenStream) -> Expr:
    result = _parse_compound_fraction(stream)
    while True:
        if stream.accept("+"):
            result = Add(result, _parse_compound_fraction(stream))
        elif stream.accept("-"):
            result = Sub(result, _parse_compound_fraction(stream))
        else:
            return result


def _parse_conversion(stream: _TokenStream) -> Expr:
    result = _parse_additive(stream)
    while stream.accept("->"):
        result = Convert(result, _parse_additive(stream))
    return result


def parse_tokens(tokens: Sequence[Token], source: str = "") -> Expr:
    """Parse a complete expression; leftover tokens are an error."""

    stream = _TokenStream(tokens, source)
    result = _parse_conversion(stream)
    leftover = stream.peek()
    if leftover is not None:
        raise ParseError(f"Unexpected input found: '{leftover.text}'", source, leftover.start)
    # Long operator chains ("1+1+...") deepen the tree without recursing here.
    if expression_depth(result) > MAX_NESTING_DEPTH:
        raise NestingDepthError(
            f"Expression is nested more than {MAX_NESTING_DEPTH} levels deep", source, 0
        )
    return result


def parse_string(text: str) -> Expr:
    return parse_tokens(tokenize(text), text)


__all__ = [
    "ApplyAction",
    "MAX_NESTING_DEPTH",
    "NestingDepthError",
    "classify_apply",
    "classify_compound_fraction",
    "parse_string",
    "parse_tokens",
]
