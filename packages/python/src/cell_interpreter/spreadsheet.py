"""Spreadsheet: the formula engine's public interface.

Cells are addressed by (row, column) with rows 0-99 and columns 0-25 (A-Z).
Text starting with '=' is a formula, anything else is a literal::

    sheet = Spreadsheet()
    sheet.set_cell(0, 0, "41")
    sheet.set_cell(0, 1, "=add(A0, 1)")
    sheet.value(0, 1)  # "42"
    sheet.cell(0, 1)  # "=add(A0, 1)"

Values are computed when they are read, so a formula always reflects the
current content of the cells it references.
"""

import logging

import numpy as np

from cell_interpreter.errors import ParseError
from cell_interpreter.formula import Formula, invalid_formula, literal_formula
from cell_interpreter.grid import Grid
from cell_interpreter.interpreter import CellInterpreter
from cell_interpreter.parser import FORMULA_MARKER, parse_formula
from cell_interpreter.utils import coordinate_to_tuple, tuple_to_coordinate


def parse_cell(text: str) -> Formula:
    """Build the Formula stored for a cell's text.

    Malformed formulas are kept as text without a numeric value, so one bad
    cell never prevents the others from evaluating.
    """
    if not text.startswith(FORMULA_MARKER):
        return literal_formula(text)
    try:
        node = parse_formula(text[len(FORMULA_MARKER) :])
    except ParseError as e:
        logging.debug("Invalid formula %r: %s", text, e)
        return invalid_formula(text)
    return Formula(text, node)


class Spreadsheet:
    def __init__(self) -> None:
        self.grid = Grid()

    def set_cell(self, row: int, col: int, text: str) -> None:
        """Replace the content of a cell. This is the only way to modify the grid."""
        formula = parse_cell(text)
        self.grid[row, col] = formula
        logging.debug("%s := %r", tuple_to_coordinate(row, col), text)

    def cell(self, row: int, col: int) -> str:
        """The text the cell was last set to."""
        return self.grid[row, col].display_string

    def value(self, row: int, col: int) -> str:
        """The computed value of the cell, or its text if it has no numeric value."""
        return self.grid[row, col].current_value(self.grid)

    def number(self, row: int, col: int) -> float:
        """The computed value of the cell as a float, NaN if it has none."""
        return self.grid[row, col].evaluate(0, self.grid)

    def formula(self, row: int, col: int) -> Formula:
        return self.grid[row, col]

    def evaluate(self, text: str) -> float:
        """Evaluate formula text against the grid without storing it.

        Unlike cells, malformed text raises ParseError. A cycle evaluates to
        NaN as it does in a cell.
        """
        return CellInterpreter(self.grid).evaluate(text)

    def values_array(self) -> np.ndarray:
        """Numeric values of the whole grid, NaN where a cell has none."""
        return np.array(
            [
                [self.number(row, col) for col in range(self.grid.columns)]
                for row in range(self.grid.rows)
            ],
            dtype=float,
        )

    def __getitem__(self, coordinate: str) -> str:
        return self.value(*coordinate_to_tuple(coordinate))

    def __setitem__(self, coordinate: str, text: str) -> None:
        self.set_cell(*coordinate_to_tuple(coordinate), text)
