import math
from typing import Callable

# Binary operators follow IEEE-754 double arithmetic. Python raises on float
# division by zero, so divide() spells out the IEEE results itself; the other
# operators already overflow to infinity and propagate NaN.


def add(left: float, right: float) -> float:
    return left + right


def subtract(left: float, right: float) -> float:
    return left - right


def multiply(left: float, right: float) -> float:
    return left * right


def divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        # The sign of the zero matters: 1/-0 is -infinity
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


BINARY_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "add": add,
    "sub": subtract,
    "mul": multiply,
    "div": divide,
}
