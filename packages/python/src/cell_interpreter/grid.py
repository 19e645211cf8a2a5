from cell_interpreter.errors import CellAddressError
from cell_interpreter.formula import EMPTY_FORMULA, Formula

ROW_COUNT = 100
COLUMN_COUNT = ord("Z") - ord("A") + 1
CELL_COUNT = ROW_COUNT * COLUMN_COUNT


class Grid:
    """Fixed 100 x 26 store of Formulas, addressed by (row, column).

    Every address holds a Formula; unset cells hold EMPTY_FORMULA.
    """

    rows = ROW_COUNT
    columns = COLUMN_COUNT
    cell_count = CELL_COUNT

    def __init__(self) -> None:
        self.cells: list[list[Formula]] = [
            [EMPTY_FORMULA] * COLUMN_COUNT for _ in range(ROW_COUNT)
        ]

    def __getitem__(self, address: tuple[int, int]) -> Formula:
        row, col = self.check_address(*address)
        return self.cells[row][col]

    def __setitem__(self, address: tuple[int, int], formula: Formula) -> None:
        row, col = self.check_address(*address)
        self.cells[row][col] = formula

    def check_address(self, row: int, col: int) -> tuple[int, int]:
        if not (
            isinstance(row, int)
            and isinstance(col, int)
            and 0 <= row < ROW_COUNT
            and 0 <= col < COLUMN_COUNT
        ):
            raise CellAddressError(
                f"Cell ({row!r}, {col!r}) is outside the "
                f"{ROW_COUNT}x{COLUMN_COUNT} grid"
            )
        return row, col
