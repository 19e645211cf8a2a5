import math
import re
import sys
from contextlib import contextmanager

from openpyxl.utils import column_index_from_string, get_column_letter

import cell_interpreter.ast as ast
from cell_interpreter.errors import CellAddressError
from cell_interpreter.types import format_number

# Constants
CELL_REF_REGEX = re.compile(r"([A-Za-z])(\d{1,2})")


def column_as_int(col: int | str) -> int:
    """Zero-based column index for a column letter (A -> 0)."""
    if isinstance(col, str):
        col = column_index_from_string(col.upper()) - 1
    return col


def column_as_str(col: int | str) -> str:
    """Column letter for a zero-based column index (0 -> A)."""
    if isinstance(col, int):
        col = get_column_letter(col + 1)
    return col


def extract_cell_reference(ref: str) -> ast.CellReference | None:
    """Parse a cell reference such as "B7", returning None if invalid."""
    match = CELL_REF_REGEX.fullmatch(ref)
    if match:
        col, row = match.groups()
        return ast.CellReference(column=column_as_int(col), row=int(row))
    return None


def coordinate_to_tuple(coordinate: str) -> tuple[int, int]:
    """Convert an A1-style coordinate into a (row, col) address."""
    ref = extract_cell_reference(coordinate.strip())
    if ref is None:
        raise CellAddressError(f"Invalid cell coordinate: {coordinate!r}")
    return ref.row, ref.column


def tuple_to_coordinate(row: int, col: int) -> str:
    return ast.CellReference(column=col, row=row).coords()


def format_ast(node: ast.ASTNode) -> str:
    """Print an AST back as formula text, without the leading '='."""
    if isinstance(node, ast.CellReference):
        return node.coords()
    if isinstance(node, ast.BinaryOperation):
        return f"{node.operator}({format_ast(node.left)},{format_ast(node.right)})"
    if isinstance(node, ast.RangeOperation):
        return f"{node.operator}({node.range.start.coords()}:{node.range.end.coords()})"
    if isinstance(node, ast.Constant):
        if node.text or math.isnan(node.value):
            return node.text
        return format_number(node.value)
    raise ValueError(f"Unknown node type: {type(node)}")


@contextmanager
def recursion_headroom(limit: int):
    """Temporarily raise the interpreter's recursion limit to at least `limit`."""
    previous = sys.getrecursionlimit()
    if previous >= limit:
        yield
        return
    sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)
