"""
Emergency assistance module for the AutoPulse advisory service.

This module contains the EmergencyAssistant class which answers a roadside
emergency with a step-by-step protocol, nearby service centers, emergency
phone numbers and a calming message. Service centers are a fixed default list
(isRealData is always False); no geocoding lookup is made.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional


@dataclass(frozen=True)
class EmergencyProtocol:
    """
    What to do in one kind of emergency.

    Attributes:
        title: Display title
        steps: Ordered instructions for the driver
    """

    title: str
    steps: tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "steps": list(self.steps)}


@dataclass(frozen=True)
class ServiceCenter:
    """
    A service center the driver can call.

    Attributes:
        center_id: Stable identifier
        name: Display name
        address: Street address
        distance_km: Distance from the driver
        phone: Phone number
        center_type: "Multi-brand", "Authorized Service", ...
        rating: Rating out of 5, as displayed
    """

    center_id: str
    name: str
    address: str
    distance_km: float
    phone: str
    center_type: str
    rating: str

    @property
    def distance(self) -> str:
        return f"{self.distance_km:.1f} km"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.center_id,
            "name": self.name,
            "address": self.address,
            "distance": self.distance,
            "distanceKm": self.distance_km,
            "phone": self.phone,
            "type": self.center_type,
            "rating": self.rating,
        }


DEFAULT_EMERGENCY_TYPE = "breakdown"

EMERGENCY_PROTOCOLS: Dict[str, EmergencyProtocol] = {
    "breakdown": EmergencyProtocol("Vehicle Breakdown", (
        "Turn on hazard lights immediately",
        "Safely move to the shoulder or side of the road",
        "Place warning triangle 50m behind your vehicle",
        "Stay inside the vehicle if on a highway",
        "Call roadside assistance or nearest service center",
    )),
    "accident": EmergencyProtocol("Accident", (
        "Check yourself and passengers for injuries",
        "Call emergency services (112) if anyone is hurt",
        "Turn off the engine and turn on hazard lights",
        "Do not move the vehicle unless it blocks traffic",
        "Exchange information with other parties involved",
        "Document the scene with photos",
    )),
    "fire": EmergencyProtocol("Vehicle Fire", (
        "Pull over immediately and turn off the engine",
        "Get everyone out of the vehicle and move 30m away",
        "Call fire services (101) immediately",
        "Do NOT open the hood if smoke is coming from engine",
        "Use a fire extinguisher only if the fire is small and contained",
    )),
    "flat_tire": EmergencyProtocol("Flat Tire", (
        "Slow down gradually and find a safe, flat spot",
        "Turn on hazard lights and apply parking brake",
        "Use the spare tire kit if available",
        "If no spare, call roadside assistance",
        "Do not drive on a flat tire — it damages the rim",
    )),
}

EMERGENCY_NUMBERS: Dict[str, str] = {
    "police": "100",
    "ambulance": "108",
    "fire": "101",
    "roadside": "1800-123-4567",
}

CALMING_MESSAGE = "🫂 Help is on the way. Stay calm, stay safe. You're not alone."

DEFAULT_SERVICE_CENTERS: tuple[ServiceCenter, ...] = (
    ServiceCenter("default-1", "AutoCare Express", "123 Main Road, Near City Center",
                  1.2, "+91 98765 43210", "Multi-brand", "4.5"),
    ServiceCenter("default-2", "QuickFix Motors", "456 Industrial Area, Phase 2",
                  2.8, "+91 98765 43211", "Authorized Service", "4.2"),
    ServiceCenter("default-3", "RoadStar Garage", "789 Highway Plaza, Exit 5",
                  4.1, "+91 98765 43212", "Premium Service", "4.7"),
)


@dataclass(frozen=True)
class EmergencyResponse:
    """Everything the driver is shown for one emergency request."""

    timestamp: datetime
    emergency_type: str
    protocol: EmergencyProtocol
    service_centers: tuple[ServiceCenter, ...]
    user_location: Optional[Dict[str, float]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "emergencyType": self.emergency_type,
            "protocol": self.protocol.to_dict(),
            "nearbyServiceCenters": [center.to_dict() for center in self.service_centers],
            "isRealData": False,
            "userLocation": self.user_location,
            "calmingMessage": CALMING_MESSAGE,
            "emergencyNumbers": dict(EMERGENCY_NUMBERS),
        }


class EmergencyAssistant:
    """
    Builds the emergency response for a reported incident.

    Unknown emergency types get the breakdown protocol; the type is echoed
    back as it was reported.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or datetime.now

    @staticmethod
    def protocol_for(emergency_type: Optional[str]) -> EmergencyProtocol:
        return EMERGENCY_PROTOCOLS.get(emergency_type or DEFAULT_EMERGENCY_TYPE,
                                       EMERGENCY_PROTOCOLS[DEFAULT_EMERGENCY_TYPE])

    def respond(self, emergency_type: Optional[str] = DEFAULT_EMERGENCY_TYPE,
                lat: Optional[float] = None, lng: Optional[float] = None) -> EmergencyResponse:
        """
        Builds the response for one emergency.

        Args:
            emergency_type: "breakdown", "accident", "fire" or "flat_tire"
            lat: Latitude of the driver, if known
            lng: Longitude of the driver, if known

        Returns:
            EmergencyResponse; the user location is set only when both
            coordinates are given
        """
        emergency_type = emergency_type or DEFAULT_EMERGENCY_TYPE
        location = {"lat": lat, "lng": lng} if lat is not None and lng is not None else None
        return EmergencyResponse(
            timestamp=self.clock(),
            emergency_type=emergency_type,
            protocol=self.protocol_for(emergency_type),
            service_centers=DEFAULT_SERVICE_CENTERS,
            user_location=location,
        )
