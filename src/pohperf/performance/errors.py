"""Error taxonomy for performance queries.

Every error carries the structured detail a briefing workflow needs to decide
whether to halt and ask for manual input: the kind of failure, the axis and
value involved, and the valid bound or the tabulated range.

Typical usage example:
    from pohperf.performance.errors import PerformanceError

    try:
        result = service.get_takeoff_distance(3000, 25)
    except PerformanceError as e:
        report = e.to_dict()
"""

from typing import Any


class PerformanceError(Exception):
    """Base class for all performance engine errors."""

    kind = "performance_error"

    def details(self) -> dict[str, Any]:
        """Get structured error detail.

        Returns:
            Dictionary of error attributes (without the kind).
        """
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Get the error as a tagged dictionary.

        Returns:
            Dictionary with "kind", "message" and the error detail.
        """
        return {"kind": self.kind, "message": str(self), **self.details()}


class SchemaError(PerformanceError):
    """Raised at construction when the dataset does not match the schema."""

    kind = "schema_error"

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)

    def details(self) -> dict[str, Any]:
        return {"path": self.path}


class InvalidInputError(PerformanceError, ValueError):
    """Raised when an input is not a finite number or otherwise unusable."""

    kind = "invalid_input"

    def __init__(self, name: str, value: Any, reason: str = "must be a finite number") -> None:
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"{name}={value!r} {reason}")

    def details(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value, "reason": self.reason}


class RangeError(PerformanceError):
    """Raised when an input lies outside the validated envelope.

    Attributes:
        axis: "pressure_altitude" or "temperature"
        value: Offending input value
        minimum: Inclusive lower bound of the envelope
        maximum: Inclusive upper bound of the envelope
    """

    kind = "range_error"

    def __init__(self, axis: str, value: float, minimum: float, maximum: float) -> None:
        self.axis = axis
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"{axis} {value} outside valid range [{minimum}, {maximum}]")

    def details(self) -> dict[str, Any]:
        return {
            "axis": self.axis,
            "value": self.value,
            "minimum": self.minimum,
            "maximum": self.maximum,
        }


class NoDataRangeError(PerformanceError):
    """Raised when a target lies outside the tabulated grid on one axis.

    The target may still be inside the validated envelope; the engine never
    extrapolates to cover the gap.
    """

    kind = "no_data_range"

    def __init__(
        self, axis: str, target: float, available_min: float, available_max: float
    ) -> None:
        self.axis = axis
        self.target = target
        self.available_min = available_min
        self.available_max = available_max
        super().__init__(
            f"target {axis} {target} outside available data range "
            f"[{available_min}, {available_max}]"
        )

    def details(self) -> dict[str, Any]:
        return {
            "axis": self.axis,
            "target": self.target,
            "available_min": self.available_min,
            "available_max": self.available_max,
        }


class MissingFieldError(PerformanceError):
    """Raised when a bracketing temperature point lacks the requested field."""

    kind = "missing_field"

    def __init__(self, field: str, temperature: float) -> None:
        self.field = field
        self.temperature = temperature
        super().__init__(f"field '{field}' missing at temperature {temperature}")

    def details(self) -> dict[str, Any]:
        return {"field": self.field, "temperature": self.temperature}


class NoDataError(PerformanceError):
    """Raised when a row holds no temperature points for the requested field."""

    kind = "no_data"

    def __init__(self, field: str, pressure_altitude: float | None = None) -> None:
        self.field = field
        self.pressure_altitude = pressure_altitude
        where = ""
        if pressure_altitude is not None:
            where = f" at pressure altitude {pressure_altitude}"
        super().__init__(f"no temperature data found for field '{field}'{where}")

    def details(self) -> dict[str, Any]:
        return {"field": self.field, "pressure_altitude": self.pressure_altitude}
