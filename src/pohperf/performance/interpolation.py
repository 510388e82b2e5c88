"""Bilinear interpolation over irregular POH performance tables.

Tables are indexed by pressure altitude (rows) and temperature (points within
a row). Rows need not be evenly spaced and may tabulate different
temperatures. The target is bracketed on each axis and interpolated
linearly, first across temperature within each bracketing row, then across
pressure altitude between the two rows.

Values are never extrapolated: a target outside the tabulated span of either
axis raises NoDataRangeError, even if it lies inside the validated envelope.
Exact matches return the stored value unchanged.
"""

from collections.abc import Iterable, Sequence

import numpy as np

from pohperf.core.logging_system import get_logger
from pohperf.performance.dataset import (
    PRESSURE_ALTITUDE_AXIS,
    TEMPERATURE_AXIS,
    ConditionRow,
    PerformanceSection,
    TemperaturePoint,
)
from pohperf.performance.errors import MissingFieldError, NoDataError, NoDataRangeError
from pohperf.performance.rounding import require_finite

logger = get_logger(__name__)


def find_bracket(axis: Sequence[float], target: float, axis_name: str) -> tuple[int, int]:
    """Find the indices bracketing a target on an ascending axis.

    Args:
        axis: Ascending axis values (ties allowed)
        target: Value to bracket
        axis_name: Axis name reported in errors

    Returns:
        (lower, upper) indices with axis[lower] <= target <= axis[upper] and
        nothing strictly between them. Both indices are equal when the target
        matches a tabulated value exactly.

    Raises:
        NoDataRangeError: If the target lies outside [axis[0], axis[-1]].
    """
    values = np.asarray(axis, dtype=float)
    lowest, highest = float(values[0]), float(values[-1])
    if target < lowest or target > highest:
        raise NoDataRangeError(axis_name, target, lowest, highest)

    upper = int(np.searchsorted(values, target, side="left"))
    if values[upper] == target:
        return upper, upper
    return upper - 1, upper


def lerp(x0: float, y0: float, x1: float, y1: float, x: float) -> float:
    """Linear interpolation of y at x between (x0, y0) and (x1, y1)."""
    if x1 == x0:
        return y0
    ratio = (x - x0) / (x1 - x0)
    return y0 + ratio * (y1 - y0)


def interpolate_temperature(row: ConditionRow, target_temp: float, field: str) -> float:
    """Interpolate a field across the temperature points of one row.

    Args:
        row: Condition row at a single pressure altitude
        target_temp: Temperature to evaluate at (°C)
        field: Field name (e.g. "ground_roll_ft")

    Returns:
        Interpolated field value.

    Raises:
        NoDataError: If no point in the row tabulates the field.
        NoDataRangeError: If target_temp is outside the row's temperatures.
        MissingFieldError: If a bracketing point lacks the field.
    """
    if not any(field in point.values for point in row.points):
        raise NoDataError(field, row.pressure_altitude_ft)

    points: list[TemperaturePoint] = sorted(row.points, key=lambda p: p.temperature_c)
    lower_i, upper_i = find_bracket(
        [p.temperature_c for p in points], target_temp, TEMPERATURE_AXIS
    )
    lower, upper = points[lower_i], points[upper_i]

    for point in (lower, upper):
        if field not in point.values:
            raise MissingFieldError(field, point.temperature_c)

    return lerp(
        lower.temperature_c,
        lower.values[field],
        upper.temperature_c,
        upper.values[field],
        target_temp,
    )


def interpolate(
    section: PerformanceSection | Iterable[ConditionRow],
    target_pa: float,
    target_temp: float,
    field: str,
) -> float:
    """Bilinearly interpolate a field at (pressure altitude, temperature).

    The caller's rows are never reordered; sorting produces new sequences.

    Args:
        section: Performance section, or its condition rows
        target_pa: Pressure altitude (ft)
        target_temp: Temperature (°C)
        field: Field name to evaluate

    Returns:
        Interpolated value, unrounded.

    Raises:
        InvalidInputError: If a target is not finite.
        NoDataRangeError: If a target is outside the tabulated grid.
        MissingFieldError: If a bracketing point lacks the field.
        NoDataError: If a bracketing row has no data for the field.

    Examples:
        >>> interpolate(dataset.section("takeoff_distance"), 1000, 20, "ground_roll_ft")
        1570.0
    """
    target_pa = require_finite("pressure_altitude_ft", target_pa)
    target_temp = require_finite("temperature_c", target_temp)

    rows = section.rows if isinstance(section, PerformanceSection) else tuple(section)
    if not rows:
        raise NoDataError(field)

    ordered = sorted(rows, key=lambda r: r.pressure_altitude_ft)
    lower_i, upper_i = find_bracket(
        [r.pressure_altitude_ft for r in ordered], target_pa, PRESSURE_ALTITUDE_AXIS
    )
    lower, upper = ordered[lower_i], ordered[upper_i]

    lower_value = interpolate_temperature(lower, target_temp, field)
    if lower.pressure_altitude_ft == upper.pressure_altitude_ft:
        return lower_value

    upper_value = interpolate_temperature(upper, target_temp, field)
    value = lerp(
        lower.pressure_altitude_ft,
        lower_value,
        upper.pressure_altitude_ft,
        upper_value,
        target_pa,
    )

    logger.debug(
        "%s at PA=%.0f ft, T=%.1f C: %.1f (rows %.0f..%.0f ft)",
        field,
        target_pa,
        target_temp,
        value,
        lower.pressure_altitude_ft,
        upper.pressure_altitude_ft,
    )
    return value
