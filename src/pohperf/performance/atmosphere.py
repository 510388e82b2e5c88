"""Atmospheric calculations for pre-flight performance.

Pure functions for pressure altitude, ISA temperature, density altitude and
runway wind components. ``AtmosphericCalculator`` wraps them for callers that
prefer an object.

Typical usage example:
    pa = pressure_altitude(field_elevation_ft=1000, altimeter_inhg=29.42)
    da = density_altitude(pa, oat_c=30)
    wind = wind_components(runway_heading_deg=270, wind_direction_deg=300, wind_speed_kt=15)
"""

import math
from dataclasses import dataclass

from pohperf.performance.errors import InvalidInputError
from pohperf.performance.rounding import (
    require_finite,
    round_to_increment,
    round_to_int,
)

STANDARD_ALTIMETER_INHG = 29.92
FEET_PER_INHG = 1000.0
SEA_LEVEL_ISA_C = 15.0
ISA_LAPSE_C_PER_1000FT = 2.0
DENSITY_ALTITUDE_FT_PER_C = 120.0

PRESSURE_ALTITUDE_INCREMENT_FT = 10
ISA_TEMPERATURE_INCREMENT_C = 0.1
DENSITY_ALTITUDE_INCREMENT_FT = 50


@dataclass(frozen=True)
class WindComponents:
    """Runway wind components.

    Attributes:
        headwind: Headwind component (kt); negative is a tailwind
        crosswind: Crosswind magnitude (kt)
        direction: Side the crosswind comes from, "right" or "left"
        angle: Wind angle relative to the runway, in (-180, 180] degrees
    """

    headwind: int
    crosswind: int
    direction: str
    angle: int

    @property
    def is_tailwind(self) -> bool:
        return self.headwind < 0


def pressure_altitude(
    field_elevation_ft: float,
    altimeter_inhg: float,
    standard_altimeter_inhg: float = STANDARD_ALTIMETER_INHG,
) -> int:
    """Calculate pressure altitude from field elevation and altimeter setting.

    PA = elevation + (29.92 - altimeter) × 1000, rounded to the nearest 10 ft.

    Args:
        field_elevation_ft: Airport field elevation (ft)
        altimeter_inhg: Altimeter setting (inHg)
        standard_altimeter_inhg: Standard pressure setting (inHg)

    Returns:
        Pressure altitude (ft)

    Examples:
        >>> pressure_altitude(1000, 28.92)
        2000
    """
    elevation = require_finite("field_elevation_ft", field_elevation_ft)
    altimeter = require_finite("altimeter_inhg", altimeter_inhg)

    pa = elevation + (standard_altimeter_inhg - altimeter) * FEET_PER_INHG
    return round_to_int(pa, PRESSURE_ALTITUDE_INCREMENT_FT)


def isa_temperature(pressure_altitude_ft: float) -> float:
    """Calculate ISA temperature at a pressure altitude.

    ISA = 15 - 2 × (PA / 1000), rounded to the nearest 0.1 °C.

    Examples:
        >>> isa_temperature(10000)
        -5.0
    """
    pa = require_finite("pressure_altitude_ft", pressure_altitude_ft)
    isa = SEA_LEVEL_ISA_C - ISA_LAPSE_C_PER_1000FT * (pa / 1000.0)
    return round_to_increment(isa, ISA_TEMPERATURE_INCREMENT_C)


def density_altitude(pressure_altitude_ft: float, oat_c: float) -> int:
    """Calculate density altitude.

    DA = PA + 120 × (OAT - ISA), rounded to the nearest 50 ft. The ISA
    temperature used is the rounded value from ``isa_temperature``.

    Args:
        pressure_altitude_ft: Pressure altitude (ft)
        oat_c: Outside air temperature (°C)

    Returns:
        Density altitude (ft)
    """
    pa = require_finite("pressure_altitude_ft", pressure_altitude_ft)
    oat = require_finite("oat_c", oat_c)

    da = pa + DENSITY_ALTITUDE_FT_PER_C * (oat - isa_temperature(pa))
    return round_to_int(da, DENSITY_ALTITUDE_INCREMENT_FT)


def normalize_angle(angle_deg: float) -> float:
    """Normalize an angle into (-180, 180] with a single modulo reduction.

    Examples:
        >>> normalize_angle(270)
        -90.0
        >>> normalize_angle(-180)
        180.0
    """
    angle = require_finite("angle_deg", angle_deg)
    return 180.0 - ((180.0 - angle) % 360.0)


def wind_components(
    runway_heading_deg: float, wind_direction_deg: float, wind_speed_kt: float
) -> WindComponents:
    """Resolve a wind into headwind and crosswind components for a runway.

    Args:
        runway_heading_deg: Runway magnetic heading (degrees)
        wind_direction_deg: Wind direction, magnetic (degrees)
        wind_speed_kt: Wind speed (kt), not negative

    Returns:
        WindComponents with rounded headwind, crosswind and angle.

    Raises:
        InvalidInputError: If an input is not finite or the speed is negative.

    Examples:
        >>> wind_components(0, 90, 10)
        WindComponents(headwind=0, crosswind=10, direction='right', angle=90)
    """
    heading = require_finite("runway_heading_deg", runway_heading_deg)
    direction = require_finite("wind_direction_deg", wind_direction_deg)
    speed = require_finite("wind_speed_kt", wind_speed_kt)
    if speed < 0:
        raise InvalidInputError("wind_speed_kt", wind_speed_kt, "must not be negative")

    angle = normalize_angle(direction - heading)
    angle_rad = math.radians(angle)

    return WindComponents(
        headwind=round_to_int(speed * math.cos(angle_rad)),
        crosswind=round_to_int(abs(speed * math.sin(angle_rad))),
        direction="right" if angle > 0 else "left",
        angle=round_to_int(angle),
    )


class AtmosphericCalculator:
    """Stateless facade over the atmospheric functions.

    Examples:
        >>> calc = AtmosphericCalculator()
        >>> calc.isa_temperature(0)
        15.0
    """

    def __init__(self, standard_altimeter_inhg: float = STANDARD_ALTIMETER_INHG) -> None:
        self.standard_altimeter_inhg = standard_altimeter_inhg

    def pressure_altitude(self, field_elevation_ft: float, altimeter_inhg: float) -> int:
        return pressure_altitude(field_elevation_ft, altimeter_inhg, self.standard_altimeter_inhg)

    def isa_temperature(self, pressure_altitude_ft: float) -> float:
        return isa_temperature(pressure_altitude_ft)

    def density_altitude(self, pressure_altitude_ft: float, oat_c: float) -> int:
        return density_altitude(pressure_altitude_ft, oat_c)

    def wind_components(
        self, runway_heading_deg: float, wind_direction_deg: float, wind_speed_kt: float
    ) -> WindComponents:
        return wind_components(runway_heading_deg, wind_direction_deg, wind_speed_kt)
