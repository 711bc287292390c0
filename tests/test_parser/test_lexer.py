"""Tests for the tokenizer."""

import pytest
import sympy as sp

from unitcalc.parser import ParseError, tokenize
from unitcalc.parser.lexer import IDENT, NUM, SYMBOL


def _single_number(text):
    tokens = tokenize(text)
    assert len(tokens) == 1
    assert tokens[0].kind == NUM
    return tokens[0]


def test_tokenize_simple_expression() -> None:
    tokens = tokenize("1 kg + 12 g")
    assert [t.kind for t in tokens] == [NUM, IDENT, SYMBOL, NUM, IDENT]
    assert [t.value for t in tokens] == [1, "kg", "+", 12, "g"]
    assert (tokens[3].start, tokens[3].end) == (7, 9)


def test_numbers_glued_to_units() -> None:
    tokens = tokenize("3kg")
    assert [t.kind for t in tokens] == [NUM, IDENT]
    assert [t.value for t in tokenize("5%")] == [5, "%"]
    assert [t.value for t in tokenize("6' 1\"")] == [6, "'", 1, '"']


@pytest.mark.parametrize(
    "text, expected, base",
    [
        ("0x1f", 31, 16),
        ("0o17", 15, 8),
        ("0b101", 5, 2),
        ("16#ff", 255, 16),
        ("36#z", 35, 36),
        ("16#1e3", 0x1E3, 16),
    ],
)
def test_base_prefixes(text, expected, base) -> None:
    token = _single_number(text)
    assert token.value == expected
    assert token.base == base


def test_decimals_are_exact() -> None:
    assert _single_number("0.001").value == sp.Rational(1, 1000)
    assert _single_number("2.54").value == sp.Rational(127, 50)
    assert _single_number("0x1.8").value == sp.Rational(3, 2)


def test_digit_separators() -> None:
    assert _single_number("1_000_000").value == 1000000
    assert _single_number("0b1010_1010").value == 170


def test_exponents_multiply_by_powers_of_the_base() -> None:
    assert _single_number("1.5e3").value == 1500
    assert _single_number("1e-9").value == sp.Rational(1, 10**9)
    assert _single_number("2#1e11").value == 2048


def test_symbols_and_aliases() -> None:
    tokens = tokenize("2 ** 3 -> x × y ÷ z")
    assert [t.value for t in tokens if t.kind == SYMBOL] == ["**", "->", "*", "/"]


def test_identifiers_may_contain_dots_before_letters() -> None:
    tokens = tokenize("a.b c_d")
    assert [t.value for t in tokens] == ["a.b", "c_d"]


@pytest.mark.parametrize(
    "text",
    ["37#1", "1#1", "08#1", "1__0", "1_", "0x", "007", "1 $ 2"],
)
def test_invalid_input_raises(text) -> None:
    with pytest.raises(ParseError):
        tokenize(text)


def test_error_points_at_offending_character() -> None:
    with pytest.raises(ParseError) as excinfo:
        tokenize("1 + $")
    assert excinfo.value.position == 4
    assert str(excinfo.value).endswith("1 + $\n    ^")
