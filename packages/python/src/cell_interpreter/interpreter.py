import logging
from typing import TYPE_CHECKING, Union

from .ast import (
    ASTNode,
    BinaryOperation,
    CellReference,
    Constant,
    RangeOperation,
)
from cell_interpreter.errors import CycleError
from cell_interpreter.functions import RANGE_FUNCTIONS
from cell_interpreter.operators import BINARY_OPERATORS
from cell_interpreter.parser import FORMULA_MARKER, parse_formula
from cell_interpreter.types import NAN, parse_number
from cell_interpreter.utils import format_ast, recursion_headroom

if TYPE_CHECKING:
    from cell_interpreter.grid import Grid

# Python stack frames allowed per dereference along a reference chain. A chain
# may be as long as the grid has cells before it is cut off.
FRAMES_PER_DEREFERENCE = 20


class CellInterpreter:
    """Evaluates formula ASTs against a grid.

    Every dereference of another cell increments `depth`. A reference reached
    at a depth above the number of cells in the grid must be part of a cycle:
    it evaluates to NaN without following the chain any further, and
    enclosing operators treat that NaN like any other (`sum` and `prod` skip
    it).

    Within one call to `evaluate` results are memoized per cell. A value whose
    evaluation stayed within the depth limit is reused wherever the chain
    below it still fits under the limit. A value that was cut off at the
    limit depends on depth and is only reused at exactly the same depth. Both
    caches are dropped when the call returns: nothing is remembered between
    reads.
    """

    def __init__(self, grid: "Grid"):
        self.grid = grid
        # (row, col) -> (value, how many levels below the cell its chain reaches)
        self.cache: dict[tuple[int, int], tuple[float, int]] = {}
        # ((row, col), depth) -> value of a chain cut off at the depth limit
        self.truncated_cache: dict[tuple[tuple[int, int], int], float] = {}
        # Deepest dereference reached below the cell being evaluated
        self.deepest = 0
        self.truncations = 0

    def evaluate(self, formula_or_node: Union[str, ASTNode], depth: int = 0) -> float:
        """Evaluate formula text or an AST node at the given depth.

        Text without the leading '=' is read as a literal number. Raises
        ParseError for malformed formula text, and CycleError when a
        reference chain does not fit on the Python stack.
        """
        if isinstance(formula_or_node, str):
            if not formula_or_node.startswith(FORMULA_MARKER):
                return parse_number(formula_or_node)
            node = parse_formula(formula_or_node[len(FORMULA_MARKER) :])
        else:
            node = formula_or_node

        limit = FRAMES_PER_DEREFERENCE * (self.grid.cell_count + 1)
        try:
            with recursion_headroom(limit):
                value = self._evaluate_node(node, depth)
        except RecursionError:
            logging.warning(
                "Ran out of stack while evaluating a formula, treating it as a cycle"
            )
            raise CycleError("Reference chain is nested too deeply to evaluate")
        finally:
            truncations = self.truncations
            self.cache.clear()
            self.truncated_cache.clear()
            self.deepest = self.truncations = 0

        if truncations and logging.getLogger().isEnabledFor(logging.DEBUG):
            logging.debug(
                "%r reached the depth limit of %d %d time(s)",
                format_ast(node),
                self.grid.cell_count,
                truncations,
            )
        return value

    def _evaluate_node(self, node: ASTNode, depth: int) -> float:
        """Evaluate an AST node."""

        if isinstance(node, Constant):
            return node.value

        elif isinstance(node, CellReference):
            return self._evaluate_cell_ref(node, depth)

        elif isinstance(node, BinaryOperation):
            return self._evaluate_binary_op(node, depth)

        elif isinstance(node, RangeOperation):
            return self._evaluate_range_op(node, depth)

        raise ValueError(f"Unknown node type: {type(node)}")

    def _evaluate_binary_op(self, node: BinaryOperation, depth: int) -> float:
        # Both operands are evaluated at the same depth
        left = self._evaluate_node(node.left, depth)
        right = self._evaluate_node(node.right, depth)
        return BINARY_OPERATORS[node.operator](left, right)

    def _evaluate_range_op(self, node: RangeOperation, depth: int) -> float:
        # Cells cut off at the depth limit are NaN and get skipped like text
        values = [self._evaluate_cell_ref(ref, depth) for ref in node.range.cells()]
        return RANGE_FUNCTIONS[node.operator](values)

    def _evaluate_cell_ref(self, node: CellReference, depth: int) -> float:
        """Evaluate the formula stored in the referenced cell, one level deeper."""
        max_depth = self.grid.cell_count
        self.deepest = max(self.deepest, depth)
        if depth > max_depth:
            self.truncations += 1
            return NAN

        cache_key = (node.row, node.column)
        cached = self.cache.get(cache_key)
        if cached is not None:
            value, height = cached
            if depth + height <= max_depth:
                self.deepest = max(self.deepest, depth + height)
                return value

        truncated_key = (cache_key, depth)
        if truncated_key in self.truncated_cache:
            self.deepest = max(self.deepest, max_depth + 1)
            return self.truncated_cache[truncated_key]

        outer_deepest = self.deepest
        self.deepest = depth
        formula = self.grid[node.row, node.column]
        value = self._evaluate_node(formula.node, depth + 1)

        if self.deepest <= max_depth:
            self.cache[cache_key] = (value, self.deepest - depth)
        else:
            self.truncated_cache[truncated_key] = value
        self.deepest = max(outer_deepest, self.deepest)
        return value
