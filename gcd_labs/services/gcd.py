"""
GCD Labs — GCD Core and Operand Parsing
=========================================

What:  The pure greatest-common-divisor function, plus the boundary parser that
       turns raw path parameters into unsigned 64-bit operands.
How:   compute() runs the iterative Euclidean algorithm.
       parse_uint64() accepts exactly what a base-10 unsigned 64-bit parse
       accepts and raises ValidationError for everything else.
Who:   compute() is called by the gRPC servicer; parse_uint64() by the
       gateway route before any RPC is made.

Contract of compute(a, b):
    - a, b in [0, 2**64 - 1]
    - result divides a and b, and is the largest such divisor
    - gcd(x, 0) = x, gcd(0, y) = y, gcd(0, 0) = 0
    - total and side-effect free; safe to call concurrently

Iteration bound:
    Remainders shrink at least at the Fibonacci rate, so 64-bit operands need
    at most ~93 loop iterations.
"""

from gcd_labs.exceptions import ValidationError

UINT64_MAX = 2**64 - 1

_DIGITS = frozenset("0123456789")


def compute(a: int, b: int) -> int:
    """
    Return the greatest common divisor of two non-negative integers.

    The loop stops exactly when b reaches zero, so `a % b` is never evaluated
    with a zero divisor.

    Examples:
        >>> compute(294, 462)
        42
        >>> compute(0, 5)
        5
        >>> compute(0, 0)
        0
    """
    while b != 0:
        a, b = b, a % b
    return a


def parse_uint64(raw: str, name: str) -> int:
    """
    Parse a decimal unsigned 64-bit integer from a path parameter.

    Accepted: one or more ASCII digits, value <= 2**64 - 1. Leading zeros are
    allowed ("007" → 7).
    Rejected: empty strings, signs ("+1", "-1"), whitespace, underscores,
    non-ASCII digits, and anything above UINT64_MAX.

    Args:
        raw:  The raw string taken from the URL.
        name: Parameter label used in the error message ("A" or "B").

    Raises:
        ValidationError: "Invalid parameter <name>"
    """
    # int() alone would accept " 12", "+12", "1_2" and Unicode digits
    if not raw or not set(raw) <= _DIGITS:
        raise ValidationError(
            message=f"Invalid parameter {name}",
            field=name.lower(),
            context={"value": raw, "reason": "not an unsigned decimal integer"},
        )

    value = int(raw)
    if value > UINT64_MAX:
        raise ValidationError(
            message=f"Invalid parameter {name}",
            field=name.lower(),
            context={"value": raw, "reason": "out of range for uint64"},
        )
    return value
