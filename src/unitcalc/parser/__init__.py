"""Parsing package: tokenizer, expression tree and grammar."""

from .grammar import ApplyAction, classify_apply, classify_compound_fraction, parse_string, parse_tokens
from .lexer import ParseError, Token, tokenize

__all__ = [
    "ApplyAction",
    "ParseError",
    "Token",
    "classify_apply",
    "classify_compound_fraction",
    "parse_string",
    "parse_tokens",
    "tokenize",
]
