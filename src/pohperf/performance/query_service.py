"""Performance queries against a POH dataset.

The service validates inputs against the dataset's envelope, interpolates
the relevant table and rounds the result. It holds no mutable state: every
query is a function of its arguments and the frozen dataset, so one service
can be shared between threads.

Typical usage example:
    dataset = PerformanceDataset.from_mapping(yaml.safe_load(text))
    service = PerformanceQueryService(dataset)

    takeoff = service.get_takeoff_distance(pressure_altitude_ft=2000, temperature_c=25)
    print(takeoff.ground_roll_ft, takeoff.total_distance_ft)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from pohperf.core.config import PerformanceSettings
from pohperf.core.logging_system import get_logger
from pohperf.performance.atmosphere import AtmosphericCalculator, WindComponents
from pohperf.performance.dataset import (
    LANDING_DISTANCE,
    TAKEOFF_CLIMB_GRADIENT,
    TAKEOFF_DISTANCE,
    PerformanceDataset,
)
from pohperf.performance.errors import InvalidInputError, PerformanceError
from pohperf.performance.interpolation import interpolate
from pohperf.performance.rounding import require_finite, round_to_increment, round_to_int
from pohperf.performance.validator import check_bounds

logger = get_logger(__name__)

GROUND_ROLL_FIELD = "ground_roll_ft"
TOTAL_DISTANCE_FIELD = "total_distance_ft"
GRADIENT_FIELD = "gradient_ft_per_nm"

T = TypeVar("T")


class PerformanceQuery(Enum):
    """Queries available through ``PerformanceQueryService.evaluate``."""

    TAKEOFF_DISTANCE = "takeoff_distance"
    LANDING_DISTANCE = "landing_distance"
    CLIMB_GRADIENT = "climb_gradient"


@dataclass(frozen=True)
class QueryConditions:
    """Conditions a result was computed for.

    Attributes:
        pressure_altitude_ft: Pressure altitude as queried (ft)
        temperature_c: Temperature as queried (°C)
        weight_lb: Aircraft weight the tables apply to (lb)
    """

    pressure_altitude_ft: float
    temperature_c: float
    weight_lb: float


@dataclass(frozen=True)
class DistanceResult:
    """Takeoff or landing distance result, rounded to the distance step."""

    ground_roll_ft: int
    total_distance_ft: int
    conditions: QueryConditions


@dataclass(frozen=True)
class ClimbGradientResult:
    """Climb gradient result.

    Attributes:
        gradient_ft_per_nm: Climb gradient (ft/NM), rounded per the section
        meets_requirement: Whether the gradient meets the required value, or
            None if no requirement was given
        required_gradient_ft_per_nm: Required gradient, if any
        conditions: Conditions the result applies to
    """

    gradient_ft_per_nm: float
    meets_requirement: bool | None
    required_gradient_ft_per_nm: float | None
    conditions: QueryConditions


@dataclass(frozen=True)
class PerformanceSummary:
    """Atmosphere, wind and performance for one departure."""

    pressure_altitude_ft: int
    isa_temperature_c: float
    density_altitude_ft: int
    oat_c: float
    wind: WindComponents | None
    takeoff: DistanceResult
    landing: DistanceResult
    climb: ClimbGradientResult


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Tagged result of a query: either a value or a performance error.

    Examples:
        >>> outcome = service.evaluate("takeoff_distance", 12000, 20)
        >>> outcome.ok
        False
        >>> outcome.error.to_dict()["kind"]
        'range_error'
    """

    value: T | None = None
    error: PerformanceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Get the value, raising the captured error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


class PerformanceQueryService:
    """Query takeoff, landing and climb performance from a POH dataset.

    Examples:
        >>> service = PerformanceQueryService(dataset)
        >>> service.get_landing_distance(0, 15).total_distance_ft
        2300
    """

    def __init__(
        self, dataset: PerformanceDataset, settings: PerformanceSettings | None = None
    ) -> None:
        """Initialize the service.

        Args:
            dataset: Frozen performance dataset, shared by reference.
            settings: Engine settings (defaults if None).
        """
        self.dataset = dataset
        self.settings = settings or PerformanceSettings()
        self.atmosphere = AtmosphericCalculator(self.settings.standard_altimeter_inhg)

    # Atmosphere

    def calculate_pressure_altitude(self, field_elevation_ft: float, altimeter_inhg: float) -> int:
        return self.atmosphere.pressure_altitude(field_elevation_ft, altimeter_inhg)

    def calculate_isa_temperature(self, pressure_altitude_ft: float) -> float:
        return self.atmosphere.isa_temperature(pressure_altitude_ft)

    def calculate_density_altitude(self, pressure_altitude_ft: float, oat_c: float) -> int:
        return self.atmosphere.density_altitude(pressure_altitude_ft, oat_c)

    def calculate_wind_components(
        self, runway_heading_deg: float, wind_direction_deg: float, wind_speed_kt: float
    ) -> WindComponents:
        return self.atmosphere.wind_components(
            runway_heading_deg, wind_direction_deg, wind_speed_kt
        )

    # Performance

    def get_takeoff_distance(
        self, pressure_altitude_ft: float, temperature_c: float
    ) -> DistanceResult:
        """Get takeoff ground roll and total distance over a 50 ft obstacle.

        Args:
            pressure_altitude_ft: Pressure altitude (ft)
            temperature_c: Outside air temperature (°C)

        Returns:
            DistanceResult with distances rounded to the distance step.

        Raises:
            RangeError: If an input is outside the validated envelope.
            NoDataRangeError: If the point is outside the tabulated grid.
            MissingFieldError: If a bracketing point lacks a distance field.
            NoDataError: If a bracketing row has no distance data.
        """
        return self._get_distance(TAKEOFF_DISTANCE, pressure_altitude_ft, temperature_c)

    def get_landing_distance(
        self, pressure_altitude_ft: float, temperature_c: float
    ) -> DistanceResult:
        """Get landing ground roll and total distance over a 50 ft obstacle.

        Same validation and errors as ``get_takeoff_distance``.
        """
        return self._get_distance(LANDING_DISTANCE, pressure_altitude_ft, temperature_c)

    def get_climb_gradient(
        self,
        pressure_altitude_ft: float,
        temperature_c: float,
        required_gradient_ft_per_nm: float | None = None,
    ) -> ClimbGradientResult:
        """Get the takeoff climb gradient.

        Args:
            pressure_altitude_ft: Pressure altitude (ft)
            temperature_c: Outside air temperature (°C)
            required_gradient_ft_per_nm: Gradient required by the departure
                procedure (ft/NM), if any

        Returns:
            ClimbGradientResult rounded to the section's rounding increment.
        """
        required = None
        if required_gradient_ft_per_nm is not None:
            required = require_finite("required_gradient_ft_per_nm", required_gradient_ft_per_nm)

        check_bounds(pressure_altitude_ft, temperature_c, self.dataset.validation)

        section = self.dataset.section(TAKEOFF_CLIMB_GRADIENT)
        raw = interpolate(section, pressure_altitude_ft, temperature_c, GRADIENT_FIELD)
        gradient = round_to_increment(raw, section.rounding_increment)

        result = ClimbGradientResult(
            gradient_ft_per_nm=gradient,
            meets_requirement=None if required is None else gradient >= required,
            required_gradient_ft_per_nm=required,
            conditions=self._conditions(pressure_altitude_ft, temperature_c),
        )

        logger.debug(
            "Climb gradient at PA=%s ft, T=%s C: %s ft/NM (required: %s)",
            pressure_altitude_ft,
            temperature_c,
            gradient,
            required,
        )
        return result

    def evaluate(
        self,
        query: PerformanceQuery | str,
        pressure_altitude_ft: float,
        temperature_c: float,
        **kwargs: Any,
    ) -> Outcome:
        """Run a query and capture performance errors instead of raising.

        Args:
            query: PerformanceQuery or its value ("takeoff_distance", ...)
            pressure_altitude_ft: Pressure altitude (ft)
            temperature_c: Outside air temperature (°C)
            **kwargs: Extra query arguments (required_gradient_ft_per_nm)

        Returns:
            Outcome holding the result or the PerformanceError.

        Raises:
            ValueError: If the query name is unknown.
        """
        query = PerformanceQuery(query)
        handlers = {
            PerformanceQuery.TAKEOFF_DISTANCE: self.get_takeoff_distance,
            PerformanceQuery.LANDING_DISTANCE: self.get_landing_distance,
            PerformanceQuery.CLIMB_GRADIENT: self.get_climb_gradient,
        }

        try:
            return Outcome(value=handlers[query](pressure_altitude_ft, temperature_c, **kwargs))
        except PerformanceError as e:
            logger.debug("%s query failed: %s", query.value, e)
            return Outcome(error=e)

    def get_performance_summary(
        self,
        field_elevation_ft: float,
        altimeter_inhg: float,
        oat_c: float,
        runway_heading_deg: float | None = None,
        wind_direction_deg: float | None = None,
        wind_speed_kt: float | None = None,
        required_gradient_ft_per_nm: float | None = None,
    ) -> PerformanceSummary:
        """Derive atmosphere and wind and run every performance query.

        Performance is looked up at the derived pressure altitude and the
        outside air temperature. Wind is resolved only when heading,
        direction and speed are all given.

        Raises:
            InvalidInputError: If only some of the wind arguments are given.
            PerformanceError: Any error from the underlying queries.
        """
        wind_args = (runway_heading_deg, wind_direction_deg, wind_speed_kt)
        given = [arg is not None for arg in wind_args]
        if any(given) and not all(given):
            raise InvalidInputError(
                "wind", wind_args, "needs runway heading, wind direction and wind speed"
            )

        pa = self.calculate_pressure_altitude(field_elevation_ft, altimeter_inhg)
        wind = self.calculate_wind_components(*wind_args) if all(given) else None

        summary = PerformanceSummary(
            pressure_altitude_ft=pa,
            isa_temperature_c=self.calculate_isa_temperature(pa),
            density_altitude_ft=self.calculate_density_altitude(pa, oat_c),
            oat_c=oat_c,
            wind=wind,
            takeoff=self.get_takeoff_distance(pa, oat_c),
            landing=self.get_landing_distance(pa, oat_c),
            climb=self.get_climb_gradient(pa, oat_c, required_gradient_ft_per_nm),
        )

        logger.info(
            "Performance summary: PA=%d ft, DA=%d ft, takeoff=%d ft, landing=%d ft",
            pa,
            summary.density_altitude_ft,
            summary.takeoff.total_distance_ft,
            summary.landing.total_distance_ft,
        )
        return summary

    def _get_distance(
        self, section_name: str, pressure_altitude_ft: float, temperature_c: float
    ) -> DistanceResult:
        check_bounds(pressure_altitude_ft, temperature_c, self.dataset.validation)

        section = self.dataset.section(section_name)
        step = self.settings.distance_rounding_ft

        pa, temp = pressure_altitude_ft, temperature_c
        ground_roll = interpolate(section, pa, temp, GROUND_ROLL_FIELD)
        total_distance = interpolate(section, pa, temp, TOTAL_DISTANCE_FIELD)

        result = DistanceResult(
            ground_roll_ft=round_to_int(ground_roll, step),
            total_distance_ft=round_to_int(total_distance, step),
            conditions=self._conditions(pressure_altitude_ft, temperature_c),
        )

        logger.debug(
            "%s at PA=%s ft, T=%s C: ground roll %d ft, total %d ft",
            section_name,
            pressure_altitude_ft,
            temperature_c,
            result.ground_roll_ft,
            result.total_distance_ft,
        )
        return result

    def _conditions(self, pressure_altitude_ft: float, temperature_c: float) -> QueryConditions:
        return QueryConditions(
            pressure_altitude_ft=pressure_altitude_ft,
            temperature_c=temperature_c,
            weight_lb=self.dataset.weight_lb,
        )
