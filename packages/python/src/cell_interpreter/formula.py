import logging
import math
from typing import TYPE_CHECKING, NamedTuple

from cell_interpreter.ast import ASTNode, Constant
from cell_interpreter.errors import CycleError
from cell_interpreter.interpreter import CellInterpreter
from cell_interpreter.types import NAN, format_number, parse_number

if TYPE_CHECKING:
    from cell_interpreter.grid import Grid


class Formula(NamedTuple):
    """The content of one cell: the text it was set to and its parsed AST.

    Formulas are immutable. Assigning a cell replaces its Formula.
    """

    display_string: str
    node: ASTNode

    def evaluate(self, depth: int, grid: "Grid") -> float:
        """Numeric value of the formula, NaN when it has none.

        Never raises: references cut off at the depth limit are NaN, and a
        chain too deep for the Python stack makes the whole value NaN.
        """
        try:
            return CellInterpreter(grid).evaluate(self.node, depth)
        except CycleError as e:
            logging.debug("%r evaluates to NaN: %s", self.display_string, e)
            return NAN

    def current_value(self, grid: "Grid") -> str:
        """Display value: the formatted number, or the display string if there is none."""
        value = self.evaluate(0, grid)
        if math.isnan(value):
            return self.display_string
        return format_number(value)


def literal_formula(text: str) -> Formula:
    return Formula(text, Constant(parse_number(text), text))


def invalid_formula(text: str) -> Formula:
    # Keeps the text for display, never has a numeric value
    return Formula(text, Constant(NAN))


EMPTY_FORMULA = literal_formula("")
