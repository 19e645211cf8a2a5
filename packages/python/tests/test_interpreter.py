import math

import pytest

from cell_interpreter.ast import BinaryOperation, CellReference, Constant
from cell_interpreter.errors import ParseError
from cell_interpreter.formula import Formula
from cell_interpreter.grid import CELL_COUNT, COLUMN_COUNT
from cell_interpreter.interpreter import CellInterpreter
from cell_interpreter.spreadsheet import Spreadsheet
from cell_interpreter.utils import tuple_to_coordinate


@pytest.fixture
def sheet():
    sheet = Spreadsheet()
    # A0 to A4: 1, 2, 3, 4, 5
    # B0 to B4: 2, 4, 6, 8, 10
    for i in range(5):
        sheet.set_cell(i, 0, str(i + 1))
        sheet.set_cell(i, 1, str((i + 1) * 2))
    return sheet


@pytest.fixture
def interpreter(sheet):
    return CellInterpreter(sheet.grid)


def address(index: int) -> tuple[int, int]:
    """Row-major address of the index-th cell of the grid."""
    return divmod(index, COLUMN_COUNT)


class TestEvaluate:
    def test_literal_text(self, interpreter):
        assert interpreter.evaluate("42") == 42
        assert math.isnan(interpreter.evaluate("foo"))

    def test_formula_text(self, interpreter):
        assert interpreter.evaluate("=add(A0,B0)") == 3
        assert interpreter.evaluate("=mul(A4, B4)") == 50
        assert interpreter.evaluate("=sum(A0:B4)") == 45
        assert interpreter.evaluate("=prod(A0:A4)") == 120

    def test_nodes(self, interpreter):
        node = BinaryOperation(CellReference(column=0, row=1), "sub", Constant(0.5))
        assert interpreter.evaluate(node) == 1.5

    def test_unset_cells_have_no_value(self, interpreter):
        assert math.isnan(interpreter.evaluate("=Z99"))
        assert math.isnan(interpreter.evaluate("=add(Z99,1)"))
        assert interpreter.evaluate("=sum(C0:D9)") == 0

    def test_malformed_formula(self, interpreter):
        with pytest.raises(ParseError):
            interpreter.evaluate("=add(1,")

    def test_cache_is_dropped_after_evaluation(self, sheet, interpreter):
        assert interpreter.evaluate("=add(A0,A0)") == 2
        assert interpreter.cache == {}

        sheet.set_cell(0, 0, "10")
        assert interpreter.evaluate("=add(A0,A0)") == 20

    def test_cycle(self, sheet, interpreter):
        sheet.set_cell(0, 0, "=B0")
        sheet.set_cell(0, 1, "=A0")
        assert math.isnan(interpreter.evaluate("=A0"))
        assert interpreter.evaluate("=sum(A0:A4)") == 14
        assert interpreter.cache == {}
        assert interpreter.truncated_cache == {}


class TestDepthBound:
    def test_reference_at_depth_limit(self, sheet):
        formula = Formula("=A0", CellReference(column=0, row=0))
        assert formula.evaluate(CELL_COUNT, sheet.grid) == 1
        assert math.isnan(formula.evaluate(CELL_COUNT + 1, sheet.grid))

    def test_chain_through_every_cell(self):
        sheet = Spreadsheet()
        for index in range(CELL_COUNT - 1):
            next_cell = tuple_to_coordinate(*address(index + 1))
            sheet.set_cell(*address(index), f"=add({next_cell},1)")
        sheet.set_cell(*address(CELL_COUNT - 1), "1")

        assert sheet.value(0, 0) == str(CELL_COUNT)

    def test_shared_references_are_evaluated_once(self):
        sheet = Spreadsheet()
        sheet.set_cell(0, 0, "1")
        for row in range(1, 61):
            sheet.set_cell(row, 0, f"=add(A{row - 1},A{row - 1})")

        assert sheet.value(60, 0) == "1152921504606847000"


class TestCycles:
    def test_self_reference(self):
        sheet = Spreadsheet()
        sheet.set_cell(0, 0, "=add(A0,A0)")
        assert sheet.value(0, 0) == "=add(A0,A0)"
        assert math.isnan(sheet.number(0, 0))

    def test_cyclic_cells_are_skipped_by_ranges(self):
        sheet = Spreadsheet()
        sheet.set_cell(0, 0, "=A1")
        sheet.set_cell(1, 0, "=A0")
        sheet.set_cell(0, 1, "5")
        sheet.set_cell(0, 2, "=sum(A0:B0)")
        assert sheet.value(0, 2) == "5"

        sheet.set_cell(0, 0, "=A0")
        sheet.set_cell(0, 1, "4")
        sheet.set_cell(0, 2, "=prod(A0:B0)")
        assert sheet.value(0, 2) == "4"

    def test_cells_cut_off_at_the_limit_keep_their_value_elsewhere(self):
        sheet = Spreadsheet()
        # B0 is also reached at the depth limit, below the last A0
        sheet.set_cell(0, 0, "=add(A0,B0)")
        sheet.set_cell(0, 1, "5")
        sheet.set_cell(0, 2, "=sum(A0:B0)")
        assert sheet.value(0, 0) == "=add(A0,B0)"
        assert sheet.value(0, 2) == "5"

    def test_cycle_through_range(self):
        sheet = Spreadsheet()
        sheet.set_cell(0, 0, "=sum(A0:A1)")
        sheet.set_cell(1, 0, "5")
        # Every level of the cycle down to the depth limit adds A1 once more
        assert sheet.value(0, 0) == str(5 * (CELL_COUNT + 1))
        assert sheet.value(1, 0) == "5"

    def test_cycle_with_repeated_references(self):
        sheet = Spreadsheet()
        for row in range(50):
            next_row = (row + 1) % 50
            sheet.set_cell(row, 0, f"=add(A{next_row},A{next_row})")
        assert sheet.value(0, 0) == "=add(A1,A1)"
        assert sheet.value(49, 0) == "=add(A0,A0)"

    def test_cell_depending_on_cycle(self):
        sheet = Spreadsheet()
        sheet.set_cell(0, 0, "=A1")
        sheet.set_cell(1, 0, "=A0")
        sheet.set_cell(0, 1, "=add(A0,1)")
        assert sheet.value(0, 1) == "=add(A0,1)"

    def test_breaking_the_cycle(self):
        sheet = Spreadsheet()
        sheet.set_cell(0, 0, "=A1")
        sheet.set_cell(1, 0, "=A0")
        sheet.set_cell(1, 0, "3")
        assert sheet.value(0, 0) == "3"
