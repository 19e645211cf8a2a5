from typing import Callable, Iterable

from cell_interpreter.types import aggregate_numbers

RANGE_FUNCTIONS: dict[str, Callable[[Iterable[float]], float]] = {}


def range_fn(name: str):
    """Decorator to register a function folding the values of a cell range."""

    def decorator(fn: Callable[[Iterable[float]], float]):
        RANGE_FUNCTIONS[name] = fn
        return fn

    return decorator


@range_fn("sum")
def range_sum(values: Iterable[float]) -> float:
    """Sum of the numeric values, 0 when there are none."""
    total = 0.0
    for value in aggregate_numbers(values):
        total += value
    return total


@range_fn("prod")
def range_product(values: Iterable[float]) -> float:
    """Product of the numeric values, 1 when there are none."""
    product = 1.0
    for value in aggregate_numbers(values):
        product *= value
    return product
