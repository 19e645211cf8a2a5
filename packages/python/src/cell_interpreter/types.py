import math
import re
from typing import Iterable

import numpy as np

NAN = math.nan

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INFINITY_RE = re.compile(r"([+-]?)Infinity")
_PREFIXED_INTEGER_RE = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")


def parse_number(text: str) -> float:
    """Read a cell's text as a number, returning NaN when it isn't one.

    Surrounding whitespace is ignored. Accepted forms are decimal literals
    (``7``, ``-2.5``, ``.5``, ``1e3``), ``Infinity`` with an optional sign and
    ``0x``/``0o``/``0b`` integer literals. Blank text is not a number.
    """
    text = text.strip()
    if _DECIMAL_RE.fullmatch(text):
        return float(text)
    if match := _INFINITY_RE.fullmatch(text):
        return -math.inf if match.group(1) == "-" else math.inf
    if _PREFIXED_INTEGER_RE.fullmatch(text):
        try:
            return float(int(text, 0))
        except OverflowError:
            return math.inf
    return NAN


def format_number(value: float) -> str:
    """Format a computed value the way it is displayed in a cell."""
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        # Also -0.0
        return "0"
    if 1e-6 <= abs(value) < 1e21:
        return np.format_float_positional(value, trim="-")
    return np.format_float_scientific(value, trim="-", exp_digits=1)


def is_number(value: float) -> bool:
    return not math.isnan(value)


# Aggregations skip anything without a numeric value
def aggregate_numbers(values: Iterable[float]) -> list[float]:
    return [value for value in values if not math.isnan(value)]
