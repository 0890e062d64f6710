"""
AutoPulse vehicle advisory engine.

Rule-based fault detection with context-aware severity escalation, plus the
maintenance predictor and drive safety scorer that share its telemetry
conventions.
"""

from .diagnosis_result import DiagnosisResult, VerdictPolicy
from .driving_context import DrivingContext
from .fault import Fault
from .fault_detector import FaultDetector, detect_faults
from .maintenance_predictor import MaintenancePredictor
from .safety_scorer import DrivingSession, SafetyScorer
from .severity import SeverityLevel
from .telemetry_snapshot import TelemetrySnapshot

__all__ = [
    'DiagnosisResult',
    'DrivingContext',
    'DrivingSession',
    'Fault',
    'FaultDetector',
    'MaintenancePredictor',
    'SafetyScorer',
    'SeverityLevel',
    'TelemetrySnapshot',
    'VerdictPolicy',
    'detect_faults',
]
