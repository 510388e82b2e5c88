"""Pytest configuration and fixtures for all tests."""

import copy
from typing import Any

import pytest

from pohperf.performance.dataset import PerformanceDataset
from pohperf.performance.query_service import PerformanceQueryService


def _temperature_map(rows: dict[float, tuple[float, float]]) -> dict[float, dict[str, float]]:
    return {
        temp: {"ground_roll_ft": ground_roll, "total_distance_ft": total}
        for temp, (ground_roll, total) in rows.items()
    }


def build_performance_data() -> dict[str, Any]:
    """Build a POH-style dataset mapping.

    Takeoff rows are listed out of altitude order and tabulate different
    temperatures per row (irregular grid). Landing rows use the explicit
    list form. The 8000 ft takeoff row stops at 30 °C.
    """
    return {
        "metadata": {
            "aircraft": "SR22T",
            "source": "POH section 5",
            "weight_lb": 3600,
        },
        "validation": {
            "pressure_altitude_range_ft": [0, 10000],
            "temperature_range_celsius": [-20, 50],
        },
        "interpolation": {"method": "bilinear"},
        "performance_data": {
            "takeoff_distance": {
                "conditions": [
                    {
                        "pressure_altitude_ft": 5000,
                        "performance": _temperature_map(
                            {0: (1900, 2800), 20: (2100, 3100), 40: (2300, 3400)}
                        ),
                    },
                    {
                        "pressure_altitude_ft": 0,
                        "performance": _temperature_map(
                            {
                                0: (1300, 1900),
                                10: (1380, 2010),
                                20: (1460, 2120),
                                30: (1540, 2230),
                                40: (1620, 2340),
                            }
                        ),
                    },
                    {
                        "pressure_altitude_ft": 8000,
                        "performance": _temperature_map(
                            {0: (2400, 3550), 20: (2650, 3900), 30: (2780, 4100)}
                        ),
                    },
                    {
                        "pressure_altitude_ft": 2000,
                        "performance": _temperature_map(
                            {
                                0: (1500, 2200),
                                10: (1590, 2330),
                                20: (1680, 2460),
                                30: (1770, 2590),
                                40: (1860, 2720),
                            }
                        ),
                    },
                ]
            },
            "landing_distance": [
                {
                    "pressure_altitude_ft": 0,
                    "performance": [
                        {"temperature_c": 0, "ground_roll_ft": 1100, "total_distance_ft": 2200},
                        {"temperature_c": 20, "ground_roll_ft": 1180, "total_distance_ft": 2300},
                        {"temperature_c": 40, "ground_roll_ft": 1260, "total_distance_ft": 2400},
                    ],
                },
                {
                    "pressure_altitude_ft": 4000,
                    "performance": [
                        {"temperature_c": 0, "ground_roll_ft": 1250, "total_distance_ft": 2400},
                        {"temperature_c": 20, "ground_roll_ft": 1340, "total_distance_ft": 2520},
                        {"temperature_c": 40, "ground_roll_ft": 1430, "total_distance_ft": 2640},
                    ],
                },
                {
                    "pressure_altitude_ft": 8000,
                    "performance": [
                        {"temperature_c": 0, "ground_roll_ft": 1420, "total_distance_ft": 2650},
                        {"temperature_c": 20, "ground_roll_ft": 1520, "total_distance_ft": 2790},
                        {"temperature_c": 40, "ground_roll_ft": 1620, "total_distance_ft": 2930},
                    ],
                },
            ],
            "takeoff_climb_gradient": {
                "rounding_increment": 10,
                "conditions": [
                    {
                        "pressure_altitude_ft": 0,
                        "performance": {
                            0: {"gradient_ft_per_nm": 950},
                            20: {"gradient_ft_per_nm": 880},
                            40: {"gradient_ft_per_nm": 810},
                        },
                    },
                    {
                        "pressure_altitude_ft": 4000,
                        "performance": {
                            0: {"gradient_ft_per_nm": 820},
                            20: {"gradient_ft_per_nm": 750},
                            40: {"gradient_ft_per_nm": 680},
                        },
                    },
                    {
                        "pressure_altitude_ft": 8000,
                        "performance": {
                            0: {"gradient_ft_per_nm": 700},
                            20: {"gradient_ft_per_nm": 630},
                            40: {"gradient_ft_per_nm": 560},
                        },
                    },
                ],
            },
        },
    }


@pytest.fixture
def performance_data() -> dict[str, Any]:
    """Raw dataset mapping, as an external loader would hand it over."""
    return build_performance_data()


@pytest.fixture
def dataset(performance_data: dict[str, Any]) -> PerformanceDataset:
    """Frozen dataset built from the raw mapping."""
    return PerformanceDataset.from_mapping(copy.deepcopy(performance_data))


@pytest.fixture
def service(dataset: PerformanceDataset) -> PerformanceQueryService:
    """Query service over the test dataset."""
    return PerformanceQueryService(dataset)
