"""Rounding policy shared by every performance output.

All results round half away from zero. The arithmetic runs in ``decimal`` on
the shortest repr of the float, so a value printed as 14.95 rounds to 15.0
even though its binary form is slightly below the half.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from pohperf.performance.errors import InvalidInputError


def require_finite(name: str, value: float) -> float:
    """Check that a numeric input is finite.

    Args:
        name: Input name, used in the error.
        value: Value to check.

    Returns:
        The value as a float.

    Raises:
        InvalidInputError: If the value is not a real finite number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(name, value, "must be a number")
    if not math.isfinite(value):
        raise InvalidInputError(name, value)
    return float(value)


def round_to_increment(value: float, increment: float) -> float:
    """Round a value to the nearest multiple of an increment.

    Ties round away from zero (ROUND_HALF_UP in ``decimal`` terms).

    Args:
        value: Value to round.
        increment: Positive rounding step (e.g. 10, 50, 0.1).

    Returns:
        Rounded value. Negative zero is normalized to 0.0.

    Examples:
        >>> round_to_increment(1025, 50)
        1050.0
        >>> round_to_increment(-2.5, 1)
        -3.0
    """
    step = Decimal(repr(float(increment)))
    if step <= 0:
        raise ValueError(f"Rounding increment must be positive: {increment}")

    target = Decimal(repr(float(value)))
    with localcontext() as ctx:
        # The integral unit count of any finite float must fit in the precision
        ctx.prec = max(28, target.adjusted() - step.adjusted() + 30)
        units = (target / step).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        return float(units * step) + 0.0


def round_to_int(value: float, increment: int = 1) -> int:
    """Round to the nearest multiple of an integral increment, as an int.

    Raises:
        ValueError: If the increment is not a positive whole number.
    """
    if not float(increment).is_integer():
        raise ValueError(f"Integer rounding needs a whole-number increment: {increment}")
    return int(round_to_increment(value, increment))
