"""
HTTP API module for the AutoPulse advisory service.

This module defines the FastAPI application exposing the fault detector, the
maintenance predictor, the safety scorer, the explanation service and the
emergency assistant. The engines themselves are pure; this layer handles
request parsing, the "nothing to check" rejection, optional diagnosis logging,
and translation of unexpected errors into HTTP responses. The AI handlers are
plain functions so the blocking Groq calls run in the worker thread pool.

Run with: uvicorn autopulse.web_api:app
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from autopulse.diagnosis_log import DiagnosisLog
from autopulse.driving_context import DrivingContext
from autopulse.emergency import EmergencyAssistant
from autopulse.explanation_service import ExplanationService
from autopulse.fault_detector import FaultDetector
from autopulse.log_entry import LogEntry
from autopulse.maintenance_predictor import MaintenancePredictor
from autopulse.safety_scorer import DrivingSession, SafetyScorer
from autopulse.schemas import (
    ChatRequest,
    EmergencyRequest,
    ExplainRequest,
    PredictRequest,
    SafetyScoreRequest,
    WeatherAdvisoryRequest,
)
from autopulse.settings import Settings
from autopulse.telemetry_snapshot import CANONICAL_PARAMETERS, TelemetrySnapshot

logger = logging.getLogger(__name__)


def split_diagnose_body(data: Dict[str, Any]) -> tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Splits a diagnosis request body into telemetry and context.

    Accepts {"params": {...}, "context": {...}} as well as a flat body with
    the readings at the top level (a top-level "context" key is still taken
    as the context).

    Returns:
        Tuple of (params, context); context defaults to {}
    """
    params = data.get("params")
    if not isinstance(params, dict) or not params:
        params = {key: value for key, value in data.items() if key != "context"}
    context = data.get("context")
    if not isinstance(context, dict):
        context = {}
    return params, context


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the FastAPI application.

    Args:
        settings: Service settings; read from the environment if None

    Returns:
        The configured FastAPI app
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="AutoPulse",
        description="Vehicle telemetry diagnosis, maintenance prediction and driving safety scoring",
        version="1.0.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    detector = FaultDetector(verdict_policy=settings.verdict_policy)
    predictor = MaintenancePredictor()
    scorer = SafetyScorer()
    explainer = ExplanationService(settings=settings)
    assistant = EmergencyAssistant()
    diagnosis_log = DiagnosisLog(settings.log_dir) if settings.log_diagnoses else None

    @app.get("/api/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "ok",
            "timestamp": datetime.now().isoformat(),
            "aiMode": explainer.mode,
        }

    @app.post("/api/diagnose")
    async def diagnose(data: Dict[str, Any] = Body(...)):
        """
        Diagnose one set of telemetry readings.

        Args:
            data: {"params": {...}, "context": {...}} or flat readings

        Returns:
            The DiagnosisResult as JSON
        """
        params, context_data = split_diagnose_body(data)
        snapshot = TelemetrySnapshot(params)

        if not snapshot.provided_parameters():
            raise HTTPException(
                status_code=400,
                detail={
                    "error": "Please provide at least one vehicle parameter.",
                    "validParameters": list(CANONICAL_PARAMETERS),
                },
            )

        try:
            context = DrivingContext.from_dict(context_data)
            result = detector.detect(snapshot, context)
        except Exception as e:
            logger.exception("Diagnose error")
            raise HTTPException(
                status_code=500,
                detail={"error": "Internal server error during diagnosis.", "details": str(e)},
            )

        if diagnosis_log is not None:
            diagnosis_log.record(LogEntry(
                timestamp=result.timestamp,
                telemetry=snapshot.to_dict(),
                result=result,
                context=context,
                details={"source": "api"},
            ))

        return result.to_dict()

    @app.post("/api/predict")
    async def predict(request: PredictRequest):
        """Estimate upcoming maintenance from telemetry and mileage."""
        try:
            report = predictor.predict(request.params, request.mileage, request.context)
        except Exception as e:
            logger.exception("Predict error")
            raise HTTPException(
                status_code=500,
                detail={"error": "Internal server error during prediction.", "details": str(e)},
            )
        return report.to_dict()

    @app.post("/api/safety-score")
    async def safety_score(request: SafetyScoreRequest):
        """Score a driving session."""
        try:
            report = scorer.score(DrivingSession.from_dict(request.model_dump(by_alias=True)))
        except Exception as e:
            logger.exception("Safety score error")
            raise HTTPException(
                status_code=500,
                detail={"error": "Internal server error during safety scoring.", "details": str(e)},
            )
        return report.to_dict()

    @app.post("/api/ai/explain")
    def explain(request: ExplainRequest):
        """Explain a fault to the driver in plain language."""
        if not request.fault_code:
            raise HTTPException(status_code=400, detail={"error": "faultCode is required."})

        text, valid = explainer.explain_fault(request.fault_code, request.context, request.telemetry)
        if not valid:
            raise HTTPException(status_code=503, detail={"error": "AI explanation is unavailable."})
        return {"explanation": text}

    @app.post("/api/ai/chat")
    def chat(request: ChatRequest):
        """Answer a driver's question about their vehicle."""
        if not request.message:
            raise HTTPException(status_code=400, detail={"error": "message is required."})

        history = [turn.model_dump() for turn in request.history]
        text, valid = explainer.chat(request.message, request.telemetry, history)
        if not valid:
            raise HTTPException(status_code=503, detail={"error": "Failed to process chat message"})
        return {"response": text}

    @app.post("/api/ai/weather-advisory")
    def weather_advisory(request: WeatherAdvisoryRequest):
        """Recommend vehicle settings and driving behavior for the weather."""
        text, valid = explainer.weather_advisory(
            request.temperature, request.humidity, request.condition, request.is_day
        )
        if not valid:
            raise HTTPException(status_code=503, detail={"error": "Failed to generate weather advisory"})
        return {"advisory": text}

    @app.post("/api/emergency")
    async def emergency(request: EmergencyRequest):
        """Protocol, service centers and emergency numbers for a roadside emergency."""
        try:
            response = assistant.respond(request.emergency_type, request.lat, request.lng)
        except Exception as e:
            logger.exception("Emergency error")
            raise HTTPException(status_code=500, detail={"error": "Internal server error.", "details": str(e)})
        return response.to_dict()

    return app


app = create_app()
