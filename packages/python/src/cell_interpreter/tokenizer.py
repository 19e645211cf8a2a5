from enum import Enum, auto
from typing import List, NamedTuple

from cell_interpreter.functions import RANGE_FUNCTIONS
from cell_interpreter.operators import BINARY_OPERATORS

FUNCTION_NAMES = frozenset(BINARY_OPERATORS) | frozenset(RANGE_FUNCTIONS)


class TokenType(Enum):
    REFERENCE = auto()
    FUNCTION = auto()
    CONSTANT = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    COLON = auto()


class Token(NamedTuple):
    type: TokenType
    value: str
    position: int


def _is_letter(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_digit(char: str) -> bool:
    return char.isascii() and char.isdigit()


class FormulaTokenizer:
    """Splits the text after a formula's leading '=' into tokens.

    At every position the candidates are tried in a fixed order: a cell
    reference, then a function name directly followed by '(', then
    punctuation, then a constant running up to the next whitespace, comma or
    parenthesis. A colon is only a token right after a cell reference;
    anywhere else it is part of a constant.
    """

    CONSTANT_TERMINATORS = {",", "(", ")"}

    def __init__(self, formula: str):
        self.formula = formula
        self.pos = 0
        self.length = len(self.formula)

    def tokenize(self) -> List[Token]:
        """Tokenize the formula and return list of tokens."""
        tokens: List[Token] = []
        while self.pos < self.length:
            char = self.formula[self.pos]

            if char.isspace():
                self.pos += 1
                continue
            elif (reference := self._tokenize_reference()) is not None:
                tokens.append(reference)
            elif (function := self._tokenize_function()) is not None:
                tokens.append(function)
            elif char == "(":
                tokens.append(Token(TokenType.LPAREN, char, self.pos))
                self.pos += 1
            elif char == ")":
                tokens.append(Token(TokenType.RPAREN, char, self.pos))
                self.pos += 1
            elif char == ",":
                tokens.append(Token(TokenType.COMMA, char, self.pos))
                self.pos += 1
            elif char == ":" and tokens and tokens[-1].type == TokenType.REFERENCE:
                tokens.append(Token(TokenType.COLON, char, self.pos))
                self.pos += 1
            else:
                tokens.append(self._tokenize_constant())

        return tokens

    def _tokenize_reference(self) -> Token | None:
        """Tokenize a cell reference: one letter followed by one or two digits."""
        start = self.pos
        if not (
            start + 1 < self.length
            and _is_letter(self.formula[start])
            and _is_digit(self.formula[start + 1])
        ):
            return None

        end = start + 2
        if end < self.length and _is_digit(self.formula[end]):
            end += 1
        self.pos = end
        return Token(TokenType.REFERENCE, self.formula[start:end].upper(), start)

    def _tokenize_function(self) -> Token | None:
        """Tokenize a known function name, only when an opening parenthesis follows."""
        start = end = self.pos
        while end < self.length and _is_letter(self.formula[end]):
            end += 1
        name = self.formula[start:end].lower()
        if name not in FUNCTION_NAMES:
            return None

        # Whitespace is allowed between the name and its parenthesis
        lookahead = end
        while lookahead < self.length and self.formula[lookahead].isspace():
            lookahead += 1
        if lookahead >= self.length or self.formula[lookahead] != "(":
            return None

        self.pos = end
        return Token(TokenType.FUNCTION, name, start)

    def _tokenize_constant(self) -> Token:
        """Tokenize a constant, which may or may not turn out to be a number."""
        start = self.pos
        while self.pos < self.length:
            char = self.formula[self.pos]
            if char.isspace() or char in self.CONSTANT_TERMINATORS:
                break
            self.pos += 1

        return Token(TokenType.CONSTANT, self.formula[start : self.pos], start)
