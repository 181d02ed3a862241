"""
Diagnostics and error handling for the Axiom pipeline
Every stage reports failures as a Diagnostic; stage boundaries return Ok/Err
"""

from typing import Any, List, Optional, Union
from dataclasses import dataclass
from enum import Enum


# ============================================================================
# SOURCE LOCATIONS
# ============================================================================

@dataclass(frozen=True)
class SourceSpan:
    """Source location information attached to tokens, nodes and diagnostics"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_col}"
        return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


def merge_spans(first: Optional[SourceSpan], last: Optional[SourceSpan]) -> Optional[SourceSpan]:
    """Span covering everything from the start of first to the end of last"""
    if first is None or last is None:
        return first or last
    return SourceSpan(first.filename, first.start_line, first.start_col,
                      last.end_line, last.end_col)


# ============================================================================
# DIAGNOSTICS
# ============================================================================

class ErrorKind(Enum):
    LEX = "LexError"
    PARSE = "ParseError"
    TYPE = "TypeError"
    RUNTIME = "RuntimeError"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Diagnostic:
    """Uniform error report produced by the scanner, parser, checker or interpreter"""
    kind: ErrorKind
    title: str
    message: str
    help: Optional[str] = None
    span: Optional[SourceSpan] = None

    def with_help(self, help: str) -> 'Diagnostic':
        return Diagnostic(self.kind, self.title, self.message, help, self.span)


def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def format_diagnostic(diagnostic: Diagnostic, source_text: Optional[str] = None) -> str:
    """Format a diagnostic as text; help is only shown when present"""
    result = f"{diagnostic.kind}: {diagnostic.title}\n"

    if diagnostic.span:
        result += f"  --> {diagnostic.span}\n"

    result += f"  {diagnostic.message}\n"

    if diagnostic.span and source_text is not None:
        result += get_context_lines(source_text, diagnostic.span.start_line,
                                    diagnostic.span.start_col) + "\n"

    if diagnostic.help:
        result += f"  Help: {diagnostic.help}\n"

    return result


# ============================================================================
# EXCEPTIONS (raised inside a stage)
# ============================================================================

class AxiomError(Exception):
    """Base class for stage failures; carries the diagnostic to report"""
    kind = ErrorKind.RUNTIME

    def __init__(self, title: str, message: str, help: Optional[str] = None,
                 span: Optional[SourceSpan] = None):
        self.diagnostic = Diagnostic(self.kind, title, message, help, span)
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def span(self) -> Optional[SourceSpan]:
        return self.diagnostic.span

    def __str__(self) -> str:
        return format_diagnostic(self.diagnostic)


class AxiomLexError(AxiomError):
    kind = ErrorKind.LEX


class AxiomParseError(AxiomError):
    kind = ErrorKind.PARSE


class AxiomTypeError(AxiomError):
    kind = ErrorKind.TYPE


class AxiomRuntimeError(AxiomError):
    kind = ErrorKind.RUNTIME


# ============================================================================
# STAGE RESULTS (returned across stage boundaries)
# ============================================================================

@dataclass(frozen=True)
class Ok:
    value: Any
    ok = True


@dataclass(frozen=True)
class Err:
    diagnostic: Diagnostic
    ok = False


Result = Union[Ok, Err]


def capture_errors(stage_func, *error_types):
    """Wrap a stage so the given AxiomError subclasses come back as Err"""
    caught = error_types or (AxiomError,)

    def guarded(*args, **kwargs) -> Result:
        try:
            return Ok(stage_func(*args, **kwargs))
        except caught as e:
            return Err(e.diagnostic)

    return guarded


def lex_suggestions(char: str) -> List[str]:
    """Hints for characters that commonly appear by mistake"""
    suggestions = []

    if char == ';':
        suggestions.append("Axiom statements need no terminator - try removing the ';'")

    if char in "()":
        suggestions.append("Parentheses are not supported; rely on operator precedence "
                           "or bind the sub-expression with 'let'")

    if char in "<>!":
        suggestions.append("Comparison operators are not supported; only + - * / are available")

    if char in "{}":
        suggestions.append("Axiom has no blocks; write one statement after another")

    return suggestions
