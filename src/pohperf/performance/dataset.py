"""Immutable performance dataset.

The dataset is parsed by an external loader (YAML, JSON, network) and handed
over as a plain mapping. ``PerformanceDataset.from_mapping`` checks that
mapping against the schema once and freezes it, so queries can share it by
reference across threads without locks.

Expected mapping layout:

    metadata:
      aircraft: SR22T
      weight_lb: 3600
    validation:
      pressure_altitude_range_ft: [0, 10000]
      temperature_range_celsius: [-20, 50]
    performance_data:
      takeoff_distance:
        conditions:
          - pressure_altitude_ft: 0
            performance:
              0: {ground_roll_ft: 1300, total_distance_ft: 1900}
              20: {ground_roll_ft: 1450, total_distance_ft: 2100}
      landing_distance: [...]
      takeoff_climb_gradient:
        rounding_increment: 1
        conditions: [...]

Temperature keys must already be numbers. Rows may also list their points
explicitly as ``[{temperature_c: 0, ground_roll_ft: 1300, ...}, ...]``.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pohperf.core.logging_system import get_logger
from pohperf.performance.errors import SchemaError

logger = get_logger(__name__)

TAKEOFF_DISTANCE = "takeoff_distance"
LANDING_DISTANCE = "landing_distance"
TAKEOFF_CLIMB_GRADIENT = "takeoff_climb_gradient"

REQUIRED_SECTIONS = (TAKEOFF_DISTANCE, LANDING_DISTANCE, TAKEOFF_CLIMB_GRADIENT)
REQUIRED_TOP_LEVEL = ("metadata", "validation", "performance_data")

PRESSURE_ALTITUDE_AXIS = "pressure_altitude"
TEMPERATURE_AXIS = "temperature"

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class ValidationRange:
    """Inclusive [minimum, maximum] envelope for one input axis."""

    axis: str
    minimum: float
    maximum: float

    def contains(self, value: float) -> bool:
        """Check whether a value is inside the inclusive range."""
        return self.minimum <= value <= self.maximum


@dataclass(frozen=True)
class ValidationRanges:
    """Validated envelope for a dataset.

    Attributes:
        pressure_altitude: Pressure altitude range (ft)
        temperature: Temperature range (°C)
    """

    pressure_altitude: ValidationRange
    temperature: ValidationRange


@dataclass(frozen=True)
class TemperaturePoint:
    """Tabulated values at one temperature.

    Attributes:
        temperature_c: Temperature (°C)
        values: Read-only mapping of field name to value
    """

    temperature_c: float
    values: Mapping[str, float] = field(default_factory=lambda: _EMPTY)


@dataclass(frozen=True)
class ConditionRow:
    """One tabulated pressure altitude and its temperature points."""

    pressure_altitude_ft: float
    points: tuple[TemperaturePoint, ...]


@dataclass(frozen=True)
class PerformanceSection:
    """A named performance table (takeoff distance, landing distance, ...).

    Attributes:
        name: Section name as it appears in the dataset
        rows: Condition rows, in dataset order (not necessarily sorted)
        rounding_increment: Output rounding step for single-value queries
    """

    name: str
    rows: tuple[ConditionRow, ...]
    rounding_increment: float = 1.0


@dataclass(frozen=True)
class PerformanceDataset:
    """Frozen POH performance dataset.

    Examples:
        >>> dataset = PerformanceDataset.from_mapping(yaml.safe_load(text))
        >>> dataset.weight_lb
        3600.0
        >>> dataset.section("takeoff_distance").rows[0].pressure_altitude_ft
        0.0
    """

    metadata: Mapping[str, Any]
    validation: ValidationRanges
    sections: Mapping[str, PerformanceSection]
    interpolation: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    @property
    def weight_lb(self) -> float:
        """Aircraft weight the tables were computed for (lb)."""
        return self.metadata["weight_lb"]

    def section(self, name: str) -> PerformanceSection:
        """Get a performance section by name.

        Raises:
            SchemaError: If the dataset has no such section.
        """
        try:
            return self.sections[name]
        except KeyError:
            raise SchemaError(f"unknown performance section '{name}'") from None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PerformanceDataset":
        """Build a dataset from a parsed mapping.

        Args:
            data: Mapping in the layout described in the module docstring.

        Returns:
            Frozen PerformanceDataset.

        Raises:
            SchemaError: If any part of the mapping does not match the schema,
                including a missing mandatory section.
        """
        if not isinstance(data, Mapping):
            raise SchemaError("dataset must be a mapping")

        for key in REQUIRED_TOP_LEVEL:
            if not data.get(key):
                raise SchemaError(f"missing required section: {key}")

        metadata = _parse_metadata(data["metadata"])
        validation = _parse_validation(data["validation"])

        performance_data = data["performance_data"]
        if not isinstance(performance_data, Mapping):
            raise SchemaError("must be a mapping of section name to rows", "performance_data")

        for name in REQUIRED_SECTIONS:
            if not performance_data.get(name):
                raise SchemaError(f"missing required performance section: {name}")

        sections = {
            str(name): _parse_section(str(name), raw) for name, raw in performance_data.items()
        }

        interpolation = data.get("interpolation") or {}
        if not isinstance(interpolation, Mapping):
            raise SchemaError("must be a mapping", "interpolation")
        if interpolation.get("extrapolation"):
            logger.warning("Dataset requests extrapolation; ignored, tabulated bounds are enforced")

        dataset = cls(
            metadata=MappingProxyType(metadata),
            validation=validation,
            sections=MappingProxyType(sections),
            interpolation=_freeze(interpolation),
        )

        logger.info(
            "Performance dataset loaded: aircraft=%s, weight=%.0f lb, sections=%s",
            metadata.get("aircraft", "unknown"),
            dataset.weight_lb,
            ", ".join(sorted(sections)),
        )
        return dataset


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"expected a number, got {value!r}", path)
    if not math.isfinite(value):
        raise SchemaError(f"expected a finite number, got {value!r}", path)
    return float(value)


def _freeze(value: Any) -> Any:
    """Copy nested containers into read-only equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(item) for item in value)
    return value


def _parse_metadata(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise SchemaError("must be a mapping", "metadata")
    if "weight_lb" not in raw:
        raise SchemaError("missing weight_lb", "metadata")

    metadata = {str(key): _freeze(value) for key, value in raw.items()}
    metadata["weight_lb"] = _number(raw["weight_lb"], "metadata.weight_lb")
    return metadata


def _parse_range(raw: Mapping[str, Any], key: str, axis: str) -> ValidationRange:
    path = f"validation.{key}"
    bounds = raw.get(key)
    if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
        raise SchemaError("expected [min, max]", path)

    minimum = _number(bounds[0], path)
    maximum = _number(bounds[1], path)
    if minimum > maximum:
        raise SchemaError(f"min {minimum} greater than max {maximum}", path)

    return ValidationRange(axis=axis, minimum=minimum, maximum=maximum)


def _parse_validation(raw: Any) -> ValidationRanges:
    if not isinstance(raw, Mapping):
        raise SchemaError("must be a mapping", "validation")

    return ValidationRanges(
        pressure_altitude=_parse_range(raw, "pressure_altitude_range_ft", PRESSURE_ALTITUDE_AXIS),
        temperature=_parse_range(raw, "temperature_range_celsius", TEMPERATURE_AXIS),
    )


def _parse_section(name: str, raw: Any) -> PerformanceSection:
    path = f"performance_data.{name}"
    rounding_increment = 1.0

    # Either a bare list of rows or {conditions: [...], rounding_increment: n}
    if isinstance(raw, Mapping):
        if "rounding_increment" in raw:
            rounding_increment = _number(raw["rounding_increment"], f"{path}.rounding_increment")
            if rounding_increment <= 0:
                raise SchemaError("must be positive", f"{path}.rounding_increment")
        raw = raw.get("conditions")
        path = f"{path}.conditions"

    if not isinstance(raw, (list, tuple)) or not raw:
        raise SchemaError("expected a non-empty list of condition rows", path)

    rows = []
    seen: set[float] = set()
    for i, raw_row in enumerate(raw):
        row = _parse_row(raw_row, f"{path}[{i}]")
        if row.pressure_altitude_ft in seen:
            raise SchemaError(
                f"duplicate pressure altitude {row.pressure_altitude_ft}", f"{path}[{i}]"
            )
        seen.add(row.pressure_altitude_ft)
        rows.append(row)

    return PerformanceSection(name=name, rows=tuple(rows), rounding_increment=rounding_increment)


def _parse_row(raw: Any, path: str) -> ConditionRow:
    if not isinstance(raw, Mapping):
        raise SchemaError("condition row must be a mapping", path)
    if "pressure_altitude_ft" not in raw:
        raise SchemaError("missing pressure_altitude_ft", path)
    if "performance" not in raw:
        raise SchemaError("missing performance", path)

    pressure_altitude = _number(raw["pressure_altitude_ft"], f"{path}.pressure_altitude_ft")
    performance = raw["performance"]
    perf_path = f"{path}.performance"

    if isinstance(performance, Mapping):
        entries = [
            (temp, fields, f"{perf_path}[{temp!r}]") for temp, fields in performance.items()
        ]
    elif isinstance(performance, (list, tuple)):
        entries = []
        for i, item in enumerate(performance):
            item_path = f"{perf_path}[{i}]"
            if not isinstance(item, Mapping) or "temperature_c" not in item:
                raise SchemaError("expected a mapping with temperature_c", item_path)
            fields = {k: v for k, v in item.items() if k != "temperature_c"}
            entries.append((item["temperature_c"], fields, item_path))
    else:
        raise SchemaError("expected a temperature mapping or list", perf_path)

    points = []
    seen: set[float] = set()
    for temp, fields, item_path in entries:
        temperature = _number(temp, item_path)
        if temperature in seen:
            raise SchemaError(f"duplicate temperature {temperature}", item_path)
        seen.add(temperature)

        if not isinstance(fields, Mapping):
            raise SchemaError("expected a mapping of field name to value", item_path)
        values = {
            str(name): _number(value, f"{item_path}.{name}") for name, value in fields.items()
        }
        points.append(TemperaturePoint(temperature, MappingProxyType(values)))

    return ConditionRow(pressure_altitude_ft=pressure_altitude, points=tuple(points))
