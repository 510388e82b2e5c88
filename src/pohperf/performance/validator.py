"""Envelope validation for performance queries."""

from pohperf.performance.dataset import ValidationRange, ValidationRanges
from pohperf.performance.errors import RangeError
from pohperf.performance.rounding import require_finite


def check_range(value: float, valid: ValidationRange) -> None:
    """Check one value against an inclusive range.

    Raises:
        InvalidInputError: If the value is not finite.
        RangeError: If the value is strictly outside the range.
    """
    value = require_finite(valid.axis, value)
    if not valid.contains(value):
        raise RangeError(valid.axis, value, valid.minimum, valid.maximum)


def check_bounds(
    pressure_altitude_ft: float, temperature_c: float, ranges: ValidationRanges
) -> None:
    """Check a (pressure altitude, temperature) pair against the envelope.

    Bounds are inclusive on both ends. Pressure altitude is checked first.

    Args:
        pressure_altitude_ft: Pressure altitude (ft)
        temperature_c: Temperature (°C)
        ranges: Validated envelope of the dataset

    Raises:
        InvalidInputError: If either input is not finite.
        RangeError: If either input is outside its range.
    """
    check_range(pressure_altitude_ft, ranges.pressure_altitude)
    check_range(temperature_c, ranges.temperature)
