"""Tests for bilinear interpolation over irregular tables."""

import itertools

import numpy as np
import pytest

from pohperf.performance.dataset import (
    ConditionRow,
    PerformanceDataset,
    PerformanceSection,
    TemperaturePoint,
)
from pohperf.performance.errors import MissingFieldError, NoDataError, NoDataRangeError
from pohperf.performance.interpolation import (
    find_bracket,
    interpolate,
    interpolate_temperature,
    lerp,
)


def make_row(pa: float, points: dict[float, dict[str, float]]) -> ConditionRow:
    return ConditionRow(
        pressure_altitude_ft=pa,
        points=tuple(TemperaturePoint(temp, values) for temp, values in points.items()),
    )


class TestFindBracket:
    """Test bracket finding on an ascending axis."""

    def test_between_values(self) -> None:
        assert find_bracket([0, 2000, 5000], 3000, "pressure_altitude") == (1, 2)

    def test_exact_match(self) -> None:
        assert find_bracket([0, 2000, 5000], 2000, "pressure_altitude") == (1, 1)

    def test_exact_match_at_ends(self) -> None:
        assert find_bracket([0, 2000, 5000], 0, "pressure_altitude") == (0, 0)
        assert find_bracket([0, 2000, 5000], 5000, "pressure_altitude") == (2, 2)

    def test_single_value_axis(self) -> None:
        assert find_bracket([20], 20, "temperature") == (0, 0)

    def test_outside_axis(self) -> None:
        with pytest.raises(NoDataRangeError) as exc_info:
            find_bracket([0, 2000, 5000], 6000, "pressure_altitude")

        error = exc_info.value
        assert error.axis == "pressure_altitude"
        assert error.target == 6000
        assert error.available_min == 0
        assert error.available_max == 5000

    def test_below_axis(self) -> None:
        with pytest.raises(NoDataRangeError, match="temperature -5"):
            find_bracket([0, 10], -5, "temperature")


class TestLerp:
    """Test the linear step."""

    def test_midpoint(self) -> None:
        assert lerp(0, 100, 10, 200, 5) == 150

    def test_equal_abscissae_returns_first_value(self) -> None:
        assert lerp(20, 1460, 20, 1460, 20) == 1460


class TestInterpolateTemperature:
    """Test the temperature axis within one row."""

    def test_interpolates_between_points(self) -> None:
        row = make_row(0, {0: {"gradient": 950}, 20: {"gradient": 880}})
        assert interpolate_temperature(row, 10, "gradient") == pytest.approx(915)

    def test_unsorted_points(self) -> None:
        row = make_row(0, {40: {"v": 400}, 0: {"v": 0}, 20: {"v": 200}})
        assert interpolate_temperature(row, 30, "v") == pytest.approx(300)

    def test_missing_field_on_bracketing_point(self) -> None:
        row = make_row(0, {0: {"v": 0, "w": 1}, 20: {"v": 200}, 40: {"v": 400, "w": 3}})

        with pytest.raises(MissingFieldError) as exc_info:
            interpolate_temperature(row, 10, "w")

        assert exc_info.value.field == "w"
        assert exc_info.value.temperature == 20

    def test_missing_field_elsewhere_is_ignored(self) -> None:
        """Test a point outside the bracket may lack the field."""
        row = make_row(0, {0: {"v": 0, "w": 1}, 20: {"v": 200, "w": 3}, 40: {"v": 400}})
        assert interpolate_temperature(row, 10, "w") == pytest.approx(2)

    def test_no_points_for_field(self) -> None:
        row = make_row(3000, {0: {"v": 0}, 20: {"v": 200}})
        with pytest.raises(NoDataError) as exc_info:
            interpolate_temperature(row, 10, "w")
        assert exc_info.value.field == "w"
        assert exc_info.value.pressure_altitude == 3000

    def test_empty_row(self) -> None:
        with pytest.raises(NoDataError):
            interpolate_temperature(make_row(0, {}), 10, "v")


class TestInterpolate:
    """Test bilinear interpolation against the test dataset."""

    @pytest.fixture
    def takeoff(self, dataset: PerformanceDataset) -> PerformanceSection:
        return dataset.section("takeoff_distance")

    def test_exact_grid_point_returns_stored_value(self, takeoff: PerformanceSection) -> None:
        assert interpolate(takeoff, 0, 20, "ground_roll_ft") == 1460
        assert interpolate(takeoff, 5000, 40, "total_distance_ft") == 3400
        assert interpolate(takeoff, 8000, 30, "ground_roll_ft") == 2780

    def test_every_grid_point_is_exact(self, takeoff: PerformanceSection) -> None:
        for row in takeoff.rows:
            for point in row.points:
                for field, value in point.values.items():
                    pa, temp = row.pressure_altitude_ft, point.temperature_c
                    assert interpolate(takeoff, pa, temp, field) == value

    def test_bilinear_midpoint_is_mean(self, takeoff: PerformanceSection) -> None:
        """Test PA halfway between rows at a shared temperature gives the mean."""
        assert interpolate(takeoff, 1000, 20, "ground_roll_ft") == (1460 + 1680) / 2
        assert interpolate(takeoff, 1000, 20, "total_distance_ft") == (2120 + 2460) / 2

    def test_exact_altitude_interpolates_temperature_only(
        self, takeoff: PerformanceSection
    ) -> None:
        assert interpolate(takeoff, 2000, 25, "ground_roll_ft") == pytest.approx(1725)

    def test_irregular_rows(self, takeoff: PerformanceSection) -> None:
        """Test rows with different temperature points are blended."""
        # 2000 ft at 25 C: 1725; 5000 ft at 25 C: 2150; one third of the way up
        expected = 1725 + (3000 - 2000) / (5000 - 2000) * (2150 - 1725)
        assert interpolate(takeoff, 3000, 25, "ground_roll_ft") == pytest.approx(expected)

    def test_accepts_row_sequence(self, takeoff: PerformanceSection) -> None:
        assert interpolate(list(takeoff.rows), 1000, 20, "ground_roll_ft") == 1570

    def test_pressure_altitude_outside_grid(self, takeoff: PerformanceSection) -> None:
        with pytest.raises(NoDataRangeError) as exc_info:
            interpolate(takeoff, 9000, 20, "ground_roll_ft")

        assert exc_info.value.to_dict() == {
            "kind": "no_data_range",
            "message": (
                "target pressure_altitude 9000.0 outside available data range [0.0, 8000.0]"
            ),
            "axis": "pressure_altitude",
            "target": 9000.0,
            "available_min": 0.0,
            "available_max": 8000.0,
        }

    def test_temperature_below_grid(self, takeoff: PerformanceSection) -> None:
        with pytest.raises(NoDataRangeError) as exc_info:
            interpolate(takeoff, 1000, -10, "ground_roll_ft")
        assert exc_info.value.axis == "temperature"
        assert exc_info.value.available_min == 0

    def test_temperature_outside_one_bracketing_row(self, takeoff: PerformanceSection) -> None:
        """Test the 8000 ft row's shorter temperature span is enforced."""
        with pytest.raises(NoDataRangeError) as exc_info:
            interpolate(takeoff, 6000, 35, "ground_roll_ft")

        assert exc_info.value.axis == "temperature"
        assert exc_info.value.available_max == 30

    def test_unknown_field(self, takeoff: PerformanceSection) -> None:
        with pytest.raises(NoDataError, match="gradient_ft_per_nm"):
            interpolate(takeoff, 1000, 20, "gradient_ft_per_nm")

    def test_empty_rows(self) -> None:
        with pytest.raises(NoDataError):
            interpolate([], 0, 0, "v")

    def test_single_row_section(self) -> None:
        rows = [make_row(4000, {0: {"v": 10}, 20: {"v": 30}})]
        assert interpolate(rows, 4000, 10, "v") == pytest.approx(20)
        with pytest.raises(NoDataRangeError):
            interpolate(rows, 4001, 10, "v")

    def test_does_not_reorder_caller_rows(self) -> None:
        rows = [
            make_row(4000, {20: {"v": 30}, 0: {"v": 10}}),
            make_row(0, {20: {"v": 3}, 0: {"v": 1}}),
        ]
        before = list(rows)

        interpolate(rows, 2000, 10, "v")

        assert rows == before
        assert [p.temperature_c for p in rows[0].points] == [20, 0]

    def test_query_order_does_not_matter(self, takeoff: PerformanceSection) -> None:
        targets = [(1000, 20), (6500, 10), (3000, 25), (0, 0), (7999, 29.5)]

        first = [interpolate(takeoff, pa, t, "ground_roll_ft") for pa, t in targets]
        second = [interpolate(takeoff, pa, t, "ground_roll_ft") for pa, t in reversed(targets)]

        assert first == list(reversed(second))


class TestInterpolationBounds:
    """The result stays within the surrounding tabulated values."""

    @pytest.mark.parametrize("field", ["ground_roll_ft", "total_distance_ft"])
    def test_result_within_surrounding_values(
        self, dataset: PerformanceDataset, field: str
    ) -> None:
        section = dataset.section("takeoff_distance")
        rows = sorted(section.rows, key=lambda r: r.pressure_altitude_ft)

        for lower, upper in zip(rows, rows[1:]):
            common_temps = sorted(
                {p.temperature_c for p in lower.points} & {p.temperature_c for p in upper.points}
            )
            pa_grid = np.linspace(lower.pressure_altitude_ft, upper.pressure_altitude_ft, 7)
            temp_grid = np.linspace(common_temps[0], common_temps[-1], 9)

            for pa, temp in itertools.product(pa_grid, temp_grid):
                corners = []
                for row in (lower, upper):
                    points = sorted(row.points, key=lambda p: p.temperature_c)
                    below = max(
                        (p for p in points if p.temperature_c <= temp),
                        key=lambda p: p.temperature_c,
                    )
                    above = min(
                        (p for p in points if p.temperature_c >= temp),
                        key=lambda p: p.temperature_c,
                    )
                    corners += [below.values[field], above.values[field]]

                value = interpolate(section, float(pa), float(temp), field)
                assert min(corners) - 1e-9 <= value <= max(corners) + 1e-9
