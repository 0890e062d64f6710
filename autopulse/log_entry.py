"""
Log entry module for the AutoPulse advisory service.

This module defines the LogEntry dataclass which represents a single audit
record for a diagnosis. Log entries capture the submitted telemetry, the
driving context and the outcome, so that a diagnosis can be traced and
reviewed after the fact.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .diagnosis_result import DiagnosisResult
from .driving_context import DrivingContext


@dataclass
class LogEntry:
    """
    Represents a single log record for a diagnosis.

    Attributes:
        timestamp: When the diagnosis was made
        telemetry: The raw readings that were submitted
        result: The diagnosis produced for them
        context: The driving context, if any
        details: Additional metadata (e.g. request source)
    """

    timestamp: datetime
    telemetry: dict[str, Any]
    result: DiagnosisResult
    context: Optional[DrivingContext] = None
    details: dict[str, str] = field(default_factory=dict)

    def summary(self) -> str:
        """
        Builds a short human-readable summary of the diagnosis.

        Returns:
            Top fault title and its label, or a note that nothing was found
        """
        top = self.result.top_fault
        if top is None:
            return "No faults detected"
        parts = [f"Top: {top.title} [{top.severity.label}]"]
        escalated = sum(1 for fault in self.result.faults if fault.was_escalated())
        if escalated:
            parts.append(f"{escalated} escalated by context")
        return "; ".join(parts)

    def to_dict(self) -> dict[str, object]:
        """
        Converts the log entry to a serializable dictionary.

        Returns:
            A dictionary representation of the log entry with all fields
            converted to serializable types
        """
        return {
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "telemetry": dict(self.telemetry),
            "context": self.context.to_dict() if self.context else {},
            "result": {
                "overall_status": self.result.overall_status,
                "total_faults": self.result.total_faults,
                "fault_titles": [fault.title for fault in self.result.faults],
                "parameters_checked": self.result.parameters_checked,
            },
            "details": self.details,
        }
