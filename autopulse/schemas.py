"""
API request schemas for the AutoPulse advisory service.

This module defines the Pydantic models for the HTTP request bodies. Field
aliases follow the dashboard's camelCase keys. The diagnosis endpoint accepts
both a nested and a flat body and is therefore parsed by hand.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PredictRequest(BaseModel):
    """Request model for the /api/predict endpoint."""
    mileage: int = Field(50000, description="Current odometer reading in km")
    params: Dict[str, Any] = Field(default_factory=dict, description="Telemetry readings")
    context: Dict[str, Any] = Field(
        default_factory=dict,
        description="Service history (lastServiceMileage, lastRotationMileage)"
    )


class SafetyScoreRequest(BaseModel):
    """Request model for the /api/safety-score endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    avg_speed: float = Field(60, alias="avgSpeed", allow_inf_nan=False)
    max_speed: float = Field(80, alias="maxSpeed", allow_inf_nan=False)
    hard_brakes: int = Field(0, alias="hardBrakes", ge=0)
    rapid_accelerations: int = Field(0, alias="rapidAccelerations", ge=0)
    distance_km: float = Field(50, alias="distanceKm", allow_inf_nan=False)
    duration_minutes: float = Field(60, alias="durationMinutes", allow_inf_nan=False)
    night_driving: bool = Field(False, alias="nightDriving")
    weather_condition: str = Field("clear", alias="weatherCondition")


class ExplainRequest(BaseModel):
    """Request model for the /api/ai/explain endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    fault_code: Optional[str] = Field(None, alias="faultCode", description="Fault title or code")
    context: Optional[str] = Field(None, description="Fault description or context")
    telemetry: Optional[Dict[str, Any]] = None


class ChatTurn(BaseModel):
    """One previous message of a chat conversation."""
    role: str = Field(..., description="'user' or 'assistant'")
    content: str = ""


class ChatRequest(BaseModel):
    """Request model for the /api/ai/chat endpoint."""
    message: Optional[str] = None
    telemetry: Optional[Dict[str, Any]] = None
    history: List[ChatTurn] = Field(default_factory=list)


class WeatherAdvisoryRequest(BaseModel):
    """Request model for the /api/ai/weather-advisory endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    temperature: Optional[float] = None
    humidity: Optional[float] = None
    condition: str = ""
    is_day: bool = Field(True, alias="isDay")


class EmergencyRequest(BaseModel):
    """Request model for the /api/emergency endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    emergency_type: str = Field("breakdown", alias="emergencyType",
                                description="breakdown, accident, fire or flat_tire")
    lat: Optional[float] = Field(None, allow_inf_nan=False)
    lng: Optional[float] = Field(None, allow_inf_nan=False)
