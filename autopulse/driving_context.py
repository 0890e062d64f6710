"""
Driving context module for the AutoPulse advisory engine.

This module defines the DrivingContext dataclass which describes the
situation a vehicle is operating in: road type, weather, time of day, driver
experience and load. The priority adjuster uses it to escalate fault
severity, and a few correlation rules inspect the air-conditioning and gear
fields directly.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .telemetry_snapshot import parse_reading


def _parse_int(raw: Any) -> Optional[int]:
    # Whole, finite numbers only; "2" and 2.0 parse, "1.9" and "inf" do not
    value = parse_reading(raw)
    if value is None or not value.is_integer():
        return None
    return int(value)


def _parse_flag(raw: Any) -> Optional[bool]:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)


@dataclass(frozen=True)
class DrivingContext:
    """
    Situational information attached to a diagnosis request.

    Every field is optional and None means "no effect". Recognized values
    are case-sensitive, matching the values sent by the dashboard.

    Attributes:
        trip_type: Road type, e.g. "City" or "Highway"
        weather: Weather condition, e.g. "Clear", "Rain", "Fog", "Storm"
        time_of_day: "Day" or "Night"
        driver_profile: e.g. "Experienced" or "New"
        passengers: Number of people in the vehicle
        load: "Normal" or "Heavy"
        ac_on: Whether the air conditioning is running
        gear: Currently engaged gear
    """

    trip_type: Optional[str] = None
    weather: Optional[str] = None
    time_of_day: Optional[str] = None
    driver_profile: Optional[str] = None
    passengers: Optional[int] = None
    load: Optional[str] = None
    ac_on: Optional[bool] = None
    gear: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DrivingContext":
        """
        Builds a context from its wire representation.

        Accepts the camelCase keys used by the HTTP API (tripType, weather,
        timeOfDay, driverProfile, passengers, load, acOn, gear). Unknown keys
        are ignored and integer fields that are not whole, finite numbers
        become None.

        Args:
            data: Wire mapping, or None for an empty context

        Returns:
            A DrivingContext instance
        """
        data = data or {}
        return cls(
            trip_type=data.get("tripType"),
            weather=data.get("weather"),
            time_of_day=data.get("timeOfDay"),
            driver_profile=data.get("driverProfile"),
            passengers=_parse_int(data.get("passengers")),
            load=data.get("load"),
            ac_on=_parse_flag(data.get("acOn")),
            gear=_parse_int(data.get("gear")),
        )

    def is_heavy(self) -> bool:
        """True when five or more passengers ride or the load is Heavy."""
        return (self.passengers is not None and self.passengers >= 5) or self.load == "Heavy"

    def to_dict(self) -> dict[str, Any]:
        """Converts the context back to its wire representation, omitting unset fields."""
        wire = {
            "tripType": self.trip_type,
            "weather": self.weather,
            "timeOfDay": self.time_of_day,
            "driverProfile": self.driver_profile,
            "passengers": self.passengers,
            "load": self.load,
            "acOn": self.ac_on,
            "gear": self.gear,
        }
        return {key: value for key, value in wire.items() if value is not None}
