class CellInterpreterError(Exception):
    """Base class for all errors raised by the cell interpreter."""


class ParseError(CellInterpreterError):
    """Formula text that does not match the formula grammar."""


class CycleError(CellInterpreterError):
    """A reference chain too deep to evaluate on the Python stack."""


class CellAddressError(CellInterpreterError, IndexError):
    """A (row, column) address outside of the grid."""
