"""
Intcode VM - Arithmetic and Comparison Operations

Words are Python ints, so ADD and MUL never overflow or truncate:
34915192 * 34915192 stays 1219070632396864. Comparisons produce the
integer flags 1 / 0 that programs store back into memory.
"""


def add(a: int, b: int) -> int:
    return a + b


def mul(a: int, b: int) -> int:
    return a * b


def less_than(a: int, b: int) -> int:
    """1 if a < b else 0."""
    return 1 if a < b else 0


def equals(a: int, b: int) -> int:
    """1 if a == b else 0."""
    return 1 if a == b else 0


def is_true(value: int) -> bool:
    """Jump condition for JT: any non-zero word is true."""
    return value != 0


def is_false(value: int) -> bool:
    """Jump condition for JF."""
    return value == 0
