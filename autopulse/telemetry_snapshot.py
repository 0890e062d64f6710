"""
Telemetry snapshot module for the AutoPulse advisory engine.

This module defines the TelemetrySnapshot class which wraps the raw readings
submitted with a diagnosis request. Readings arrive as loosely typed values
(numbers, numeric strings, empty strings, None) keyed by parameter name. The
snapshot provides the shared parsing convention used by the fault detector,
the correlation rules and the maintenance predictor.
"""

import math
from typing import Any, Mapping, Optional


# Canonical telemetry parameters understood by the rule set
CANONICAL_PARAMETERS = (
    "speed",
    "engineTemp",
    "rpm",
    "oilPressure",
    "tirePressure",
    "batteryVoltage",
    "fuelLevel",
    "brakeThickness",
)


def parse_reading(raw: Any) -> Optional[float]:
    """
    Parses a single telemetry reading to a finite float.

    Missing values (None or an empty string), booleans, and anything that
    does not convert to a finite number are rejected. Strings must be a
    number in full: "25 psi" and "1_000" are rejected. Rejected readings are
    never an error: the caller simply skips them.

    Args:
        raw: Reading as submitted by the caller

    Returns:
        The reading as a float, or None if it cannot be used
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        # No digit grouping and no trailing units: the whole string must be a number
        if raw == "" or "_" in raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(value):
        return None
    return value


class TelemetrySnapshot:
    """
    Immutable view over one set of submitted telemetry readings.

    The snapshot keeps the raw mapping untouched so that the number of
    submitted parameters can be reported exactly, while exposing parsed
    numeric values for rule evaluation.
    """

    def __init__(self, readings: Optional[Mapping[str, Any]] = None) -> None:
        """
        Args:
            readings: Mapping of parameter name to raw reading. None is
                      treated as an empty mapping.
        """
        self._readings: dict[str, Any] = dict(readings or {})

    @property
    def parameters_checked(self) -> int:
        """Number of keys present in the submitted mapping, valid or not."""
        return len(self._readings)

    def value(self, name: str) -> Optional[float]:
        """Returns the parsed reading for a parameter, or None if unusable."""
        return parse_reading(self._readings.get(name))

    def numeric_values(self) -> dict[str, float]:
        """
        Parses every submitted reading to a float.

        Invalid readings become NaN, which fails every comparison used by the
        correlation predicates. Parameters that were not submitted are simply
        absent from the mapping.

        Returns:
            Mapping of every submitted parameter name to a float or NaN
        """
        numeric = {}
        for name, raw in self._readings.items():
            value = parse_reading(raw)
            numeric[name] = value if value is not None else math.nan
        return numeric

    def provided_parameters(self) -> list[str]:
        """
        Lists the canonical parameters submitted with a non-empty value.

        Returns:
            Canonical parameter names, in canonical order
        """
        return [
            name for name in CANONICAL_PARAMETERS
            if self._readings.get(name) is not None and self._readings.get(name) != ""
        ]

    def to_dict(self) -> dict[str, Any]:
        """Returns a copy of the raw readings."""
        return dict(self._readings)
