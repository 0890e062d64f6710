"""
Severity module for the AutoPulse advisory engine.

This module defines the SeverityLevel enumeration shared by every fault the
engine produces. Each level carries a numeric rank, a display label and a
color. Faults store a single continuous severity score; the label and color
shown to the driver are always recomputed from that score with
SeverityLevel.from_score().
"""

from enum import Enum


class SeverityLevel(Enum):
    """
    Ordered danger ranking for detected faults.

    The numeric value increases strictly with danger, so levels can be
    compared through their value. The label and color are used in the wire
    representation of a fault.

    Attributes:
        label: Lowercase display label ("low", "medium", "high", "critical")
        color: Hex color used by dashboards to render the fault
    """

    LOW = (1, "low", "#00e676")
    MEDIUM = (2, "medium", "#ffc400")
    HIGH = (3, "high", "#ff6d00")
    CRITICAL = (4, "critical", "#ff1744")

    def __init__(self, level: int, label: str, color: str) -> None:
        self.level = level
        self.label = label
        self.color = color

    @classmethod
    def from_score(cls, score: float) -> "SeverityLevel":
        """
        Buckets a continuous severity score into a severity level.

        Returns the highest level whose numeric rank is less than or equal to
        the score. Scores below 1 (which the engine never produces for a real
        fault) map to LOW.

        Args:
            score: Continuous severity score, possibly escalated by context

        Returns:
            The SeverityLevel corresponding to the score
        """
        for severity in (cls.CRITICAL, cls.HIGH, cls.MEDIUM):
            if score >= severity.level:
                return severity
        return cls.LOW
