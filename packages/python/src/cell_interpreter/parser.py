from typing import List, Optional

from cell_interpreter.errors import ParseError
from cell_interpreter.operators import BINARY_OPERATORS
from cell_interpreter.types import parse_number
from .tokenizer import Token, TokenType, FormulaTokenizer
from .ast import (
    ASTNode,
    BinaryOperation,
    CellRange,
    CellReference,
    Constant,
    RangeOperation,
)
from .utils import extract_cell_reference

# Marks cell text as a formula rather than a literal
FORMULA_MARKER = "="


def parse_formula(formula: str) -> ASTNode:
    """Parse formula text (without its leading '=') into an AST."""
    tokens = FormulaTokenizer(formula).tokenize()
    return FormulaParser(tokens).parse()


class FormulaParser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.current = 0

    def parse(self) -> ASTNode:
        """Parse tokens into an AST, requiring that all of them are consumed."""
        self.current = 0
        try:
            node = self.parse_expression()
        except RecursionError:
            raise ParseError("Formula is nested too deeply")

        trailing = self.peek()
        if trailing is not None:
            raise ParseError(
                f"Unexpected {trailing.type.name} '{trailing.value}' "
                f"at position {trailing.position}"
            )
        return node

    def peek(self) -> Optional[Token]:
        """Look at the current token without consuming it."""
        if self.current >= len(self.tokens):
            return None
        return self.tokens[self.current]

    def read(self) -> Token:
        """Consume and return the current token."""
        if self.current >= len(self.tokens):
            raise ParseError("Unexpected end of formula")
        tok = self.tokens[self.current]
        self.current += 1
        return tok

    def read_if_match(self, *types: TokenType) -> Optional[Token]:
        """Consume and return current token if it matches any of the given types."""
        token = self.peek()
        if token is not None and token.type in types:
            self.current += 1
            return token
        return None

    def expect(self, *types: TokenType) -> Token:
        """Read and return the current token if it matches expected types, otherwise error."""
        token = self.read_if_match(*types)
        if token is None:
            curr = self.peek()
            type_names = " or ".join(t.name for t in types)
            raise ParseError(
                f"Expected {type_names}, got "
                f"{curr.type.name if curr else 'end of formula'}"
                f" at position {curr.position if curr else 'end'}"
            )
        return token

    def parse_expression(self) -> ASTNode:
        """Parse a cell reference, a function call or a constant."""
        token = self.read()

        if token.type == TokenType.REFERENCE:
            return self._reference(token)

        if token.type == TokenType.FUNCTION:
            return self.parse_function_call(token.value)

        if token.type == TokenType.CONSTANT:
            return Constant(parse_number(token.value), token.value)

        raise ParseError(
            f"Unexpected token: {token.type.name} at position {token.position}"
        )

    def parse_function_call(self, name: str) -> BinaryOperation | RangeOperation:
        """Parse the parenthesized arguments of add/sub/mul/div or sum/prod."""
        self.expect(TokenType.LPAREN)

        if name in BINARY_OPERATORS:
            left = self.parse_expression()
            self.expect(TokenType.COMMA)
            right = self.parse_expression()
            self.expect(TokenType.RPAREN)
            return BinaryOperation(left=left, operator=name, right=right)

        start = self.parse_cell_reference()
        self.expect(TokenType.COLON)
        end = self.parse_cell_reference()
        self.expect(TokenType.RPAREN)
        return RangeOperation(operator=name, range=CellRange(start=start, end=end))

    def parse_cell_reference(self) -> CellReference:
        return self._reference(self.expect(TokenType.REFERENCE))

    def _reference(self, token: Token) -> CellReference:
        ref = extract_cell_reference(token.value)
        if ref is None:
            raise ParseError(
                f"Invalid cell reference: {token.value} at position {token.position}"
            )
        return ref
