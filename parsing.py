"""
Axiom Programming Language Parser
Recursive descent over the lexer's token stream, one method per precedence level
"""

from typing import Iterator, List, Optional

from lexer import Lexer, Token, TokenKind
from ast_nodes import Expr, Stmt, Number, Var, Now, Binary, Let, ExprStmt, BinOp
from error_handling import AxiomLexError, AxiomParseError, Result, capture_errors, merge_spans


ADDITIVE_OPS = {TokenKind.PLUS: BinOp.ADD, TokenKind.MINUS: BinOp.SUB}
MULTIPLICATIVE_OPS = {TokenKind.STAR: BinOp.MUL, TokenKind.SLASH: BinOp.DIV}

CLOCK_PRIMITIVE = "now"


class Parser:
    """
    Grammar, lowest precedence first:

        program := stmt*
        stmt    := "let" ident "=" expr | expr
        expr    := add
        add     := mul (("+"|"-") mul)*
        mul     := primary (("*"|"/") primary)*
        primary := integer | "now" | ident
    """

    def __init__(self, lexer: Lexer, debug: bool = False):
        self.debug = debug
        self._tokens: Iterator[Token] = iter(lexer)
        self.current: Token = next(self._tokens)

    def _advance(self) -> Token:
        consumed = self.current
        if consumed.kind != TokenKind.EOF:
            self.current = next(self._tokens)
        return consumed

    def _expect(self, kind: TokenKind, context: str) -> Token:
        if self.current.kind != kind:
            expected = "an identifier" if kind == TokenKind.IDENT else f"'{kind.value}'"
            raise self._error(f"Expected {expected} {context}, found {self.current.describe()}.")
        return self._advance()

    def _error(self, message: str, help: Optional[str] = None) -> AxiomParseError:
        if help is None and self.current.kind == TokenKind.EOF:
            help = "The program ended early; complete the statement."
        return AxiomParseError("Unexpected Token", message, help=help, span=self.current.span)

    def parse(self) -> List[Stmt]:
        stmts = []
        while self.current.kind != TokenKind.EOF:
            stmt = self.parse_stmt()
            if self.debug:
                print(f"Parsed statement: {stmt}")
            stmts.append(stmt)
        return stmts

    def parse_stmt(self) -> Stmt:
        if self.current.kind == TokenKind.LET:
            return self.parse_let()
        expr = self.parse_expr()
        return ExprStmt(expr, expr.span)

    def parse_let(self) -> Let:
        let_token = self._advance()

        name_token = self._expect(TokenKind.IDENT, "after 'let'")
        self._expect(TokenKind.EQUAL, f"after 'let {name_token.value}'")

        value = self.parse_expr()
        return Let(name_token.value, value, merge_spans(let_token.span, value.span))

    def parse_expr(self) -> Expr:
        return self.parse_add()

    def _parse_left_assoc(self, operators, parse_operand) -> Expr:
        expr = parse_operand()
        while self.current.kind in operators:
            op = operators[self._advance().kind]
            right = parse_operand()
            expr = Binary(expr, op, right, merge_spans(expr.span, right.span))
        return expr

    def parse_add(self) -> Expr:
        return self._parse_left_assoc(ADDITIVE_OPS, self.parse_mul)

    def parse_mul(self) -> Expr:
        return self._parse_left_assoc(MULTIPLICATIVE_OPS, self.parse_primary)

    def parse_primary(self) -> Expr:
        token = self.current

        if token.kind == TokenKind.NUMBER:
            self._advance()
            return Number(token.value, token.span)

        if token.kind == TokenKind.IDENT:
            self._advance()
            if token.value == CLOCK_PRIMITIVE:
                return Now(token.span)
            return Var(token.value, token.span)

        help = None
        if token.kind == TokenKind.MINUS:
            help = "Negative literals are not supported; write '0 - n' instead."
        elif token.kind == TokenKind.LET:
            help = "'let' starts a new statement; finish the current expression first."
        raise self._error(
            f"Expected an integer, identifier or '{CLOCK_PRIMITIVE}', found {token.describe()}.",
            help=help
        )


class AxiomParser:
    """Main Axiom parser combining lexer and grammar"""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def parse_string(self, text: str, filename: str = "<input>") -> List[Stmt]:
        """Parse Axiom source code from string"""
        lexer = Lexer(text, filename, self.debug)
        return Parser(lexer, self.debug).parse()

    def parse_expression(self, text: str, filename: str = "<input>") -> Expr:
        """Parse a single Axiom expression; trailing input is an error"""
        parser = Parser(Lexer(text, filename, self.debug), self.debug)
        expr = parser.parse_expr()
        if parser.current.kind != TokenKind.EOF:
            raise parser._error(f"Expected end of input, found {parser.current.describe()}.")
        return expr

    def tokenize(self, text: str, filename: str = "<input>") -> List[Token]:
        """Tokenize Axiom source code"""
        return list(Lexer(text, filename, self.debug))


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> AxiomParser:
    """Create an Axiom parser"""
    return AxiomParser(debug=debug)


def parse_source(text: str, filename: str = "<input>", debug: bool = False) -> Result:
    """Scan and parse text; Ok(statements) or Err(diagnostic) from the lexer or parser"""
    return capture_errors(create_parser(debug).parse_string, AxiomLexError, AxiomParseError)(text, filename)
