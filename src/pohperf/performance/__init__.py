"""POH performance engine.

This module provides pre-flight performance figures from tabulated POH data:
- Atmosphere (pressure altitude, ISA temperature, density altitude)
- Runway wind components
- Takeoff and landing distances (ground roll, 50 ft obstacle)
- Takeoff climb gradient
"""

from pohperf.performance.atmosphere import AtmosphericCalculator, WindComponents
from pohperf.performance.dataset import PerformanceDataset
from pohperf.performance.errors import (
    InvalidInputError,
    MissingFieldError,
    NoDataError,
    NoDataRangeError,
    PerformanceError,
    RangeError,
    SchemaError,
)
from pohperf.performance.interpolation import interpolate
from pohperf.performance.query_service import (
    ClimbGradientResult,
    DistanceResult,
    Outcome,
    PerformanceQuery,
    PerformanceQueryService,
    PerformanceSummary,
    QueryConditions,
)
from pohperf.performance.validator import check_bounds

__all__ = [
    "AtmosphericCalculator",
    "ClimbGradientResult",
    "DistanceResult",
    "InvalidInputError",
    "MissingFieldError",
    "NoDataError",
    "NoDataRangeError",
    "Outcome",
    "PerformanceDataset",
    "PerformanceError",
    "PerformanceQuery",
    "PerformanceQueryService",
    "PerformanceSummary",
    "QueryConditions",
    "RangeError",
    "SchemaError",
    "WindComponents",
    "check_bounds",
    "interpolate",
]
