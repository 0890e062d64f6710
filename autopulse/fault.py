"""
Fault module for the AutoPulse advisory engine.

This module defines the Fault dataclass, the output record produced for each
detected condition. A fault is either tied to a single telemetry parameter
("single") or to the joint state of several parameters ("correlation").

A fault carries one continuous severity score. Its severity label and color
are derived from that score, so escalation by the priority adjuster can never
leave the label and the score out of sync.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .severity import SeverityLevel


SINGLE = "single"
CORRELATION = "correlation"


@dataclass(frozen=True)
class Fault:
    """
    A detected out-of-range or risky condition.

    Attributes:
        fault_id: Identifier unique within one diagnosis response
        parameter: Parameter name, or related names joined with " + "
        display_name: Human-readable name of the parameter
        icon: Emoji shown next to the fault on dashboards
        base_severity: Severity declared by the rule that fired
        severity_score: Continuous score after context adjustment
        title: Short headline
        description: Explanation, possibly followed by a context note
        fix: Recommended action
        emotional_message: Reassuring or urgent message for the driver
        kind: SINGLE or CORRELATION
        value: Parsed reading (None for correlation faults)
        unit: Unit of the reading (None for correlation faults)
        related_params: Parameters involved in a correlation fault
    """

    fault_id: str
    parameter: str
    display_name: str
    icon: str
    base_severity: SeverityLevel
    severity_score: float
    title: str
    description: str
    fix: str
    emotional_message: str
    kind: str = SINGLE
    value: Optional[float] = None
    unit: Optional[str] = None
    related_params: tuple[str, ...] = field(default_factory=tuple)

    @property
    def severity(self) -> SeverityLevel:
        """Severity level derived from the continuous score."""
        return SeverityLevel.from_score(self.severity_score)

    @property
    def color(self) -> str:
        return self.severity.color

    def was_escalated(self) -> bool:
        """True when context pushed the label above the rule's own severity."""
        return self.severity.level > self.base_severity.level

    def to_dict(self) -> dict[str, Any]:
        """
        Converts the fault to its serializable wire representation.

        The keys follow the dashboard's camelCase convention. severityLevel
        carries the continuous score and baseSeverityLevel the integer rank
        of the rule that fired.

        Returns:
            A JSON-compatible dictionary
        """
        data: dict[str, Any] = {
            "id": self.fault_id,
            "parameter": self.parameter,
            "displayName": self.display_name,
            "icon": self.icon,
            "severity": self.severity.label,
            "severityLevel": self.severity_score,
            "baseSeverityLevel": self.base_severity.level,
            "color": self.color,
            "title": self.title,
            "description": self.description,
            "fix": self.fix,
            "emotionalMessage": self.emotional_message,
            "type": self.kind,
        }
        if self.kind == SINGLE:
            data["value"] = self.value
            data["unit"] = self.unit
        else:
            data["relatedParams"] = list(self.related_params)
        return data
