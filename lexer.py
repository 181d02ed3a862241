"""
Axiom lexical scanner
Turns source text into a lazy stream of tokens using pyparsing token patterns
"""

import re
from typing import Any, Iterator, List, Optional
from dataclasses import dataclass
from enum import Enum

from pyparsing import Regex, Char, MatchFirst, ParserElement, lineno, col

from error_handling import SourceSpan, AxiomLexError, lex_suggestions


INT64_MAX = 2**63 - 1

WHITESPACE = " \t\r\n"

KEYWORDS = {"let"}


class TokenKind(Enum):
    # Keywords
    LET = "let"

    # Identifiers & literals
    IDENT = "identifier"
    NUMBER = "integer"

    # Operators
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    EQUAL = "="

    EOF = "end of input"


OPERATOR_TOKENS = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "=": TokenKind.EQUAL,
}


@dataclass(frozen=True)
class Token:
    """Axiom token with source information"""
    kind: TokenKind
    value: Any = None
    span: Optional[SourceSpan] = None

    def describe(self) -> str:
        """Human readable form used in diagnostics"""
        if self.kind == TokenKind.IDENT:
            return f"identifier '{self.value}'"
        if self.kind == TokenKind.NUMBER:
            return f"integer {self.value}"
        if self.kind == TokenKind.LET:
            return "keyword 'let'"
        if self.kind == TokenKind.EOF:
            return "end of input"
        return f"'{self.kind.value}'"

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.kind.name}({self.value})"
        return self.kind.name


def _build_token_pattern() -> ParserElement:
    """One alternative per token class; the last one catches anything unrecognized"""
    integer = Regex(r"[0-9]+").set_name("integer")("integer")
    word = Regex(r"[^\W\d]\w*").set_name("identifier")("word")
    operator = Char("".join(OPERATOR_TOKENS)).set_name("operator")("operator")
    unknown = Regex(r".", flags=re.DOTALL).set_name("unknown character")("unknown")

    pattern = MatchFirst([integer, word, operator, unknown])
    for element in (pattern, integer, word, operator, unknown):
        element.set_whitespace_chars(WHITESPACE)
    return pattern.parse_with_tabs()


TOKEN_PATTERN = _build_token_pattern()


class Lexer:
    """Scanner over one source string; iterate it to pull tokens one at a time"""

    def __init__(self, source: str, filename: str = "<input>", debug: bool = False):
        self.source = source
        self.filename = filename
        self.debug = debug
        self._matches = TOKEN_PATTERN.scan_string(source)
        self._done = False

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if self._done:
            raise StopIteration

        token = self._next_token()
        if token.kind == TokenKind.EOF:
            self._done = True

        if self.debug:
            print(f"Scanned: {token} at {token.span}")
        return token

    def _span(self, start: int, end: int) -> SourceSpan:
        end_loc = max(start, end - 1)
        return SourceSpan(
            self.filename,
            lineno(start, self.source), col(start, self.source),
            lineno(end_loc, self.source), col(end_loc, self.source) + (1 if end > start else 0)
        )

    def _next_token(self) -> Token:
        match = next(self._matches, None)
        if match is None:
            end = len(self.source)
            return Token(TokenKind.EOF, None, self._span(end, end))

        tokens, start, end = match
        text = tokens[0]
        span = self._span(start, end)

        if "integer" in tokens:
            value = int(text)
            if value > INT64_MAX:
                raise AxiomLexError(
                    "Integer Literal Too Large",
                    f"The literal {text} at line {span.start_line}, column {span.start_col} "
                    f"does not fit in a 64-bit signed integer.",
                    help=f"Integer literals must not exceed {INT64_MAX}.",
                    span=span
                )
            return Token(TokenKind.NUMBER, value, span)

        if "word" in tokens:
            if text in KEYWORDS:
                return Token(TokenKind.LET, None, span)
            return Token(TokenKind.IDENT, text, span)

        if "operator" in tokens:
            return Token(OPERATOR_TOKENS[text], None, span)

        suggestions = lex_suggestions(text)
        raise AxiomLexError(
            "Unexpected Character",
            f"Unexpected character {text!r} at line {span.start_line}, column {span.start_col}.",
            help=suggestions[0] if suggestions else None,
            span=span
        )


def tokenize(source: str, filename: str = "<input>", debug: bool = False) -> List[Token]:
    """Scan the whole source eagerly; the list always ends with the EOF token"""
    return list(Lexer(source, filename, debug))
