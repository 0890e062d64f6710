"""
Maintenance predictor module for the AutoPulse advisory engine.

This module contains the MaintenancePredictor class which estimates when the
usual service items (oil, brake pads, battery, tires, coolant, fuel filter)
will be due. Each estimate is a simple linear formula over the odometer
reading and the current telemetry; adverse readings shorten the remaining
interval. Estimates are bucketed into urgency levels and sorted so the most
urgent item comes first.

Readings follow the shared telemetry parsing convention, except that a
submitted but unparseable reading counts as 0.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from .telemetry_snapshot import parse_reading


# Average distance driven per day, used to turn kilometers into days
KM_PER_DAY = 40

URGENCY_ORDER = {"immediate": 0, "soon": 1, "upcoming": 2, "scheduled": 3}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _days(km: float) -> int:
    return _round_half_up(km / KM_PER_DAY)


def _fallback(value: float, default: float) -> float:
    # Missing (NaN) and zero readings both fall back to the nominal value
    if math.isnan(value) or value == 0:
        return default
    return value


def classify_urgency(km_remaining: float) -> str:
    """
    Buckets the remaining distance into an urgency level.

    Args:
        km_remaining: Kilometers left before the item is due

    Returns:
        "immediate" below 500 km, "soon" up to 1500 km, "upcoming" up to
        3000 km, "scheduled" otherwise
    """
    if km_remaining < 500:
        return "immediate"
    if km_remaining <= 1500:
        return "soon"
    if km_remaining <= 3000:
        return "upcoming"
    return "scheduled"


def urgency_message(item_name: str, urgency: str) -> str:
    messages = {
        "immediate": f"⏰ Your {item_name} needs attention right away — let's keep you safe on the road!",
        "soon": f"📅 Your {item_name} is coming up in the next few weeks. Plan a visit to your mechanic.",
        "upcoming": f"🗓️ Your {item_name} is on the horizon. No rush, but keep it in mind.",
        "scheduled": f"✅ Your {item_name} is looking good! Just routine maintenance ahead.",
    }
    return messages[urgency]


@dataclass(frozen=True)
class MaintenancePrediction:
    """
    Estimate for one maintenance item.

    Attributes:
        item_id: Stable identifier of the item (e.g. "oil_change")
        name: Display name
        icon: Emoji shown next to the item
        km_remaining: Kilometers left before the item is due
        days_remaining: Days left at the average daily distance
        condition: Short description of the item's condition
        urgency: "immediate", "soon", "upcoming" or "scheduled"
        emotional_message: Message addressed to the driver
        note: Optional detail about how the estimate was computed
    """

    item_id: str
    name: str
    icon: str
    km_remaining: int
    days_remaining: int
    condition: str
    urgency: str
    emotional_message: str
    note: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.item_id,
            "name": self.name,
            "icon": self.icon,
            "kmRemaining": self.km_remaining,
            "daysRemaining": self.days_remaining,
            "condition": self.condition,
            "urgency": self.urgency,
            "emotionalMessage": self.emotional_message,
        }
        if self.note is not None:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class MaintenanceReport:
    """
    Maintenance outlook for one vehicle.

    Attributes:
        timestamp: When the report was produced
        mileage: Odometer reading used for the estimates
        predictions: Estimates sorted from most to least urgent
    """

    timestamp: datetime
    mileage: int
    predictions: tuple[MaintenancePrediction, ...]

    @property
    def next_action(self) -> MaintenancePrediction:
        return self.predictions[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "mileage": self.mileage,
            "predictions": [prediction.to_dict() for prediction in self.predictions],
            "nextAction": self.next_action.to_dict(),
        }


class MaintenancePredictor:
    """
    Linear-formula estimator for upcoming maintenance.

    Each item is computed by its own method returning
    (km_remaining, days_remaining, condition, note). predict() runs them all,
    assigns urgencies and sorts the result.
    """

    DEFAULT_MILEAGE = 50000

    OIL_CHANGE_INTERVAL_KM = 10000
    TIRE_ROTATION_INTERVAL_KM = 10000
    COOLANT_FLUSH_INTERVAL_KM = 50000
    FUEL_FILTER_INTERVAL_KM = 40000

    # Brake pads wear 0.3 mm per 1000 km down to a 1.5 mm service limit
    BRAKE_WEAR_MM_PER_KM = 0.0003
    BRAKE_SERVICE_LIMIT_MM = 1.5
    NOMINAL_BRAKE_THICKNESS_MM = 8
    NOMINAL_BATTERY_VOLTAGE = 12.6

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.clock = clock or datetime.now
        self._items = (
            ("oil_change", "Oil Change", "🛢️", self._oil_change),
            ("brake_replacement", "Brake Pad Replacement", "🛑", self._brake_replacement),
            ("battery_replacement", "Battery Replacement", "🔋", self._battery_replacement),
            ("tire_rotation", "Tire Rotation / Replacement", "🛞", self._tire_rotation),
            ("coolant_flush", "Coolant System Flush", "🌡️", self._coolant_flush),
            ("fuel_filter", "Fuel Filter Replacement", "⛽", self._fuel_filter),
        )

    def predict(
        self,
        params: Optional[Mapping[str, Any]] = None,
        mileage: int = DEFAULT_MILEAGE,
        context: Optional[Mapping[str, Any]] = None,
    ) -> MaintenanceReport:
        """
        Estimates every maintenance item for the vehicle.

        Args:
            params: Telemetry readings keyed by parameter name
            mileage: Current odometer reading in kilometers
            context: Service history; recognizes lastServiceMileage and
                     lastRotationMileage

        Returns:
            MaintenanceReport with predictions sorted by urgency (stable)
        """
        readings = self._readings(params or {})
        context = context or {}

        predictions = []
        for item_id, name, icon, estimate in self._items:
            km_remaining, days_remaining, condition, note = estimate(readings, mileage, context)
            urgency = classify_urgency(km_remaining)
            predictions.append(MaintenancePrediction(
                item_id=item_id,
                name=name,
                icon=icon,
                km_remaining=km_remaining,
                days_remaining=days_remaining,
                condition=condition,
                urgency=urgency,
                emotional_message=urgency_message(name, urgency),
                note=note,
            ))

        predictions.sort(key=lambda p: URGENCY_ORDER[p.urgency])
        return MaintenanceReport(timestamp=self.clock(), mileage=mileage, predictions=tuple(predictions))

    def _readings(self, params: Mapping[str, Any]) -> dict[str, float]:
        numeric = {}
        for name, raw in params.items():
            value = parse_reading(raw)
            numeric[name] = value if value is not None else 0.0
        return numeric

    def _last_service(self, context: Mapping[str, Any], key: str, mileage: int, interval: int) -> float:
        recorded = parse_reading(context.get(key))
        if recorded:
            return recorded
        return mileage - (mileage % interval)

    def _oil_change(self, readings, mileage, context):
        last_change = self._last_service(context, "lastServiceMileage", mileage, self.OIL_CHANGE_INTERVAL_KM)
        remaining = self.OIL_CHANGE_INTERVAL_KM - (mileage - last_change)
        degraded = readings.get("oilPressure", math.nan) < 30
        if degraded:
            remaining *= 0.7
        remaining = max(0, _round_half_up(remaining))
        return (remaining, _days(remaining), "degraded" if degraded else "normal", None)

    def _brake_replacement(self, readings, mileage, context):
        thickness = _fallback(readings.get("brakeThickness", math.nan), self.NOMINAL_BRAKE_THICKNESS_MM)
        remaining = max(0, (thickness - self.BRAKE_SERVICE_LIMIT_MM) / self.BRAKE_WEAR_MM_PER_KM)
        remaining = _round_half_up(remaining)
        if thickness < 2.5:
            condition = "worn"
        elif thickness < 5:
            condition = "moderate"
        else:
            condition = "good"
        note = f"Calculated from {thickness:g}mm pad thickness using 0.3mm/1000km standard wear."
        return (remaining, _days(remaining), condition, note)

    def _battery_replacement(self, readings, mileage, context):
        voltage = _fallback(readings.get("batteryVoltage", math.nan), self.NOMINAL_BATTERY_VOLTAGE)
        if voltage < 12.0:
            condition, days = "critical", 7
        elif voltage < 12.4:
            condition, days = "aging", 90
        else:
            condition, days = "healthy", 365
        return (days * KM_PER_DAY, days, condition, None)

    def _tire_rotation(self, readings, mileage, context):
        last_rotation = self._last_service(
            context, "lastRotationMileage", mileage, self.TIRE_ROTATION_INTERVAL_KM
        )
        remaining = self.TIRE_ROTATION_INTERVAL_KM - (mileage - last_rotation)
        pressure = readings.get("tirePressure", math.nan)
        irregular = pressure < 28 or pressure > 38
        if irregular:
            remaining *= 0.6
        remaining = max(0, _round_half_up(remaining))
        return (remaining, _days(remaining), "uneven wear likely" if irregular else "normal", None)

    def _coolant_flush(self, readings, mileage, context):
        remaining = self.COOLANT_FLUSH_INTERVAL_KM - (mileage % self.COOLANT_FLUSH_INTERVAL_KM)
        hot_running = readings.get("engineTemp", math.nan) > 100
        factor = 0.7 if hot_running else 1
        km = _round_half_up(remaining * factor)
        return (km, _days(remaining * factor), "potentially degraded" if hot_running else "normal", None)

    def _fuel_filter(self, readings, mileage, context):
        remaining = self.FUEL_FILTER_INTERVAL_KM - (mileage % self.FUEL_FILTER_INTERVAL_KM)
        return (_round_half_up(remaining), _days(remaining), "scheduled", None)
