"""
Diagnosis result module for the AutoPulse advisory engine.

This module defines the DiagnosisResult dataclass returned by the fault
detector, together with the overall vehicle-health verdict derived from the
most severe fault.

Two verdict policies are available. BANDED buckets the top fault's
continuous score into the five health bands. LEGACY_EXACT reproduces the
behavior of the first release of the dashboard, which compared the escalated
score for exact equality with 0, 1, 2 and 3 and therefore reported any
non-integer escalated score as critical.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .fault import Fault


class VerdictPolicy(Enum):
    """How the top fault's score is turned into an overall status."""

    BANDED = "banded"
    LEGACY_EXACT = "legacy_exact"


@dataclass(frozen=True)
class OverallVerdict:
    """
    Overall health status shown at the top of a diagnosis.

    Attributes:
        status: One of "healthy", "good", "warning", "danger", "critical"
        emoji: Emoji rendered next to the status
        message: Message addressed to the driver
    """

    status: str
    emoji: str
    message: str


HEALTHY = OverallVerdict(
    "healthy", "😊",
    "Your vehicle is in great shape! All parameters are within normal range. "
    "Keep up the good maintenance!",
)
GOOD = OverallVerdict(
    "good", "🙂",
    "Your vehicle is mostly fine with minor observations. Nothing urgent, but keep an eye "
    "on the noted items.",
)
WARNING = OverallVerdict(
    "warning", "⚠️",
    "Some parameters need your attention. Address the warnings when possible to prevent "
    "bigger issues.",
)
DANGER = OverallVerdict(
    "danger", "🔶",
    "There are significant issues that need prompt attention. Please address the "
    "high-severity alerts soon.",
)
CRITICAL = OverallVerdict(
    "critical", "🚨",
    "CRITICAL issues detected! Your safety may be at risk. Please take immediate action on "
    "the red alerts.",
)


def overall_verdict(top_score: float, policy: VerdictPolicy = VerdictPolicy.BANDED) -> OverallVerdict:
    """
    Derives the overall health verdict from the highest fault score.

    Args:
        top_score: Continuous score of the most severe fault, 0 when there
                   are no faults
        policy: Verdict policy to apply

    Returns:
        The matching OverallVerdict
    """
    if policy is VerdictPolicy.LEGACY_EXACT:
        # Exact comparisons: escalated non-integer scores fall through to critical
        exact = {0: HEALTHY, 1: GOOD, 2: WARNING, 3: DANGER}
        for level, verdict in exact.items():
            if top_score == level:
                return verdict
        return CRITICAL

    if top_score <= 0:
        return HEALTHY
    if top_score < 2:
        return GOOD
    if top_score < 3:
        return WARNING
    if top_score < 4:
        return DANGER
    return CRITICAL


@dataclass(frozen=True)
class DiagnosisResult:
    """
    Aggregate outcome of one fault detection run.

    Attributes:
        timestamp: When the diagnosis was produced
        faults: Detected faults sorted by descending severity score
        verdict: Overall health verdict
        parameters_checked: Number of submitted parameters, valid or not
    """

    timestamp: datetime
    faults: tuple[Fault, ...]
    verdict: OverallVerdict
    parameters_checked: int

    @property
    def total_faults(self) -> int:
        return len(self.faults)

    @property
    def overall_status(self) -> str:
        return self.verdict.status

    @property
    def top_fault(self):
        """Most severe fault, or None when the vehicle is healthy."""
        return self.faults[0] if self.faults else None

    def to_dict(self) -> dict[str, Any]:
        """
        Converts the result to its serializable wire representation.

        Returns:
            A JSON-compatible dictionary using camelCase keys
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "totalFaults": self.total_faults,
            "overallStatus": self.verdict.status,
            "overallEmoji": self.verdict.emoji,
            "overallMessage": self.verdict.message,
            "faults": [fault.to_dict() for fault in self.faults],
            "parametersChecked": self.parameters_checked,
        }
