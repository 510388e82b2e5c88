"""Tests for envelope validation."""

import math

import pytest

from pohperf.performance.dataset import PerformanceDataset
from pohperf.performance.errors import InvalidInputError, RangeError
from pohperf.performance.validator import check_bounds


class TestCheckBounds:
    """Test the (pressure altitude, temperature) envelope check."""

    def test_inside_envelope(self, dataset: PerformanceDataset) -> None:
        check_bounds(5000, 20, dataset.validation)

    @pytest.mark.parametrize("pa,temp", [(0, -20), (10000, 50), (0, 50), (10000, -20)])
    def test_bounds_are_inclusive(
        self, dataset: PerformanceDataset, pa: float, temp: float
    ) -> None:
        check_bounds(pa, temp, dataset.validation)

    def test_pressure_altitude_above_range(self, dataset: PerformanceDataset) -> None:
        with pytest.raises(RangeError) as exc_info:
            check_bounds(10001, 20, dataset.validation)

        error = exc_info.value
        assert error.axis == "pressure_altitude"
        assert error.value == 10001
        assert error.minimum == 0
        assert error.maximum == 10000

    def test_pressure_altitude_below_range(self, dataset: PerformanceDataset) -> None:
        with pytest.raises(RangeError, match="pressure_altitude -100.0 outside valid range"):
            check_bounds(-100, 20, dataset.validation)

    def test_temperature_out_of_range(self, dataset: PerformanceDataset) -> None:
        with pytest.raises(RangeError) as exc_info:
            check_bounds(2000, 55, dataset.validation)

        assert exc_info.value.to_dict() == {
            "kind": "range_error",
            "message": "temperature 55.0 outside valid range [-20.0, 50.0]",
            "axis": "temperature",
            "value": 55.0,
            "minimum": -20.0,
            "maximum": 50.0,
        }

    def test_pressure_altitude_checked_first(self, dataset: PerformanceDataset) -> None:
        with pytest.raises(RangeError) as exc_info:
            check_bounds(20000, 80, dataset.validation)
        assert exc_info.value.axis == "pressure_altitude"

    def test_nan_is_not_inside_envelope(self, dataset: PerformanceDataset) -> None:
        with pytest.raises(InvalidInputError):
            check_bounds(math.nan, 20, dataset.validation)
        with pytest.raises(InvalidInputError):
            check_bounds(2000, math.nan, dataset.validation)
