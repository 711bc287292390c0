"""Tokenizer turning calculator input into numbers, identifiers and symbols."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import sympy as sp


class ParseError(ValueError):
    """Raised when input cannot be tokenized or parsed."""

    def __init__(self, message: str, text: str = "", position: int | None = None) -> None:
        pointer = ""
        if text and position is not None and 0 <= position <= len(text):
            pointer = f"\n{text}\n{' ' * position}^"
        super().__init__(f"{message}{pointer}")
        self.message = message
        self.text = text
        self.position = position


NUM = "num"
IDENT = "ident"
SYMBOL = "symbol"

SYMBOLS = ("->", "**", "+", "-", "*", "/", "^", "(", ")")
_SYMBOL_ALIASES = {"×": "*", "÷": "/"}
# Unit symbols that form an identifier on their own.
_SYMBOL_IDENTS = frozenset({"%", "‰", '"', "'", "”", "’"})
_BASE_PREFIXES = {"x": 16, "o": 8, "b": 2}
_DECIMAL = "0123456789"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed token with its source span.

    ``value`` is an exact SymPy number for ``num`` tokens and the identifier
    or canonical symbol text otherwise.
    """

    kind: str
    value: object
    text: str
    start: int
    end: int
    base: int = 10

    def is_symbol(self, *symbols: str) -> bool:
        return self.kind == SYMBOL and self.value in symbols


def _digit_value(char: str) -> int:
    if char.isascii() and char.isalnum():
        return int(char, 36)
    return 99


def _read_digits(text: str, pos: int, base: int, *, allow_leading_zero: bool) -> Tuple[str, int]:
    start = pos
    digits: List[str] = []
    while pos < len(text):
        char = text[pos]
        if char == "_":
            following = text[pos + 1] if pos + 1 < len(text) else ""
            if not digits or not following or _digit_value(following) >= base:
                raise ParseError("Digit separators must sit between two digits", text, pos)
            pos += 1
            continue
        if _digit_value(char) >= base:
            break
        digits.append(char)
        pos += 1
    if not allow_leading_zero and len(digits) > 1 and digits[0] == "0":
        raise ParseError("Leading zeroes are not supported", text, start)
    return "".join(digits), pos


def _read_base_prefix(text: str, pos: int) -> Tuple[int, int]:
    if text[pos] == "0" and pos + 1 < len(text) and text[pos + 1] in _BASE_PREFIXES:
        return _BASE_PREFIXES[text[pos + 1]], pos + 2

    end = pos
    while end < len(text) and text[end] in _DECIMAL:
        end += 1
    if end < len(text) and text[end] == "#":
        digits = text[pos:end]
        if digits.startswith("0"):
            raise ParseError("Base prefixes may not have leading zeroes", text, pos)
        base = int(digits)
        if not 2 <= base <= 36:
            raise ParseError("Base must be between 2 and 36 (inclusive)", text, pos)
        return base, end + 1
    return 10, pos


def _lex_number(text: str, start: int) -> Token:
    base, pos = _read_base_prefix(text, start)

    integer_digits, pos = _read_digits(text, pos, base, allow_leading_zero=False)
    if not integer_digits:
        raise ParseError(f"Expected a digit in base {base}", text, pos)
    value = sp.Integer(int(integer_digits, base))

    if (
        pos + 1 < len(text)
        and text[pos] == "."
        and _digit_value(text[pos + 1]) < base
    ):
        fraction_digits, pos = _read_digits(text, pos + 1, base, allow_leading_zero=True)
        value += sp.Rational(int(fraction_digits, base), base ** len(fraction_digits))

    # "e" is a valid digit above base 10, so exponents are only read up to it.
    if base <= 10 and pos < len(text) and text[pos] in "eE":
        look = pos + 1
        negative = look < len(text) and text[look] == "-"
        if negative:
            look += 1
        if look < len(text) and text[look] in _DECIMAL:
            exponent_digits, pos = _read_digits(text, look, 10, allow_leading_zero=False)
            exponent = int(exponent_digits)
            value *= sp.Integer(base) ** (-exponent if negative else exponent)

    return Token(NUM, value, text[start:pos], start, pos, base)


def _is_ident_start(char: str) -> bool:
    return char.isalpha() or char == "_"


def _lex_ident(text: str, start: int) -> Token:
    pos = start + 1
    while pos < len(text):
        char = text[pos]
        if _is_ident_start(char):
            pos += 1
        elif char == "." and pos + 1 < len(text) and text[pos + 1].isalpha():
            pos += 1
        else:
            break
    name = text[start:pos]
    return Token(IDENT, name, name, start, pos)


def tokenize(text: str) -> List[Token]:
    """Split ``text`` into tokens, discarding whitespace."""

    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char.isspace():
            pos += 1
            continue
        if char in _DECIMAL:
            token = _lex_number(text, pos)
        elif char in _SYMBOL_IDENTS:
            token = Token(IDENT, char, char, pos, pos + 1)
        elif _is_ident_start(char):
            token = _lex_ident(text, pos)
        elif char in _SYMBOL_ALIASES:
            token = Token(SYMBOL, _SYMBOL_ALIASES[char], char, pos, pos + 1)
        else:
            for symbol in SYMBOLS:
                if text.startswith(symbol, pos):
                    token = Token(SYMBOL, symbol, symbol, pos, pos + len(symbol))
                    break
            else:
                raise ParseError(f"Unexpected character '{char}'", text, pos)
        tokens.append(token)
        pos = token.end
    return tokens


__all__ = ["IDENT", "NUM", "SYMBOL", "SYMBOLS", "ParseError", "Token", "tokenize"]
