from typing import NamedTuple


class CellReference(NamedTuple):
    column: int
    row: int

    def coords(self) -> str:
        # Avoid circular imports
        from cell_interpreter.utils import column_as_str

        return f"{column_as_str(self.column)}{self.row}"


class CellRange(NamedTuple):
    start: CellReference
    end: CellReference

    def bounds(self) -> tuple[int, int, int, int]:
        """Return (min_row, max_row, min_col, max_col), whichever corners were given."""
        return (
            min(self.start.row, self.end.row),
            max(self.start.row, self.end.row),
            min(self.start.column, self.end.column),
            max(self.start.column, self.end.column),
        )

    def cells(self) -> list[CellReference]:
        min_row, max_row, min_col, max_col = self.bounds()
        return [
            CellReference(column=col, row=row)
            for row in range(min_row, max_row + 1)
            for col in range(min_col, max_col + 1)
        ]


class BinaryOperation(NamedTuple):
    left: "ASTNode"
    operator: str
    right: "ASTNode"


class RangeOperation(NamedTuple):
    operator: str
    range: CellRange


class Constant(NamedTuple):
    value: float
    # Source token, kept so formulas can be printed back
    text: str = ""


# Type alias for all possible AST nodes
ASTNode = CellReference | BinaryOperation | RangeOperation | Constant
