"""
Priority adjuster module for the AutoPulse advisory engine.

This module contains the PriorityAdjuster class which escalates the severity
of a detected fault according to the driving context. Each adverse factor
(highway driving, bad weather, darkness, an inexperienced driver, a heavy
load) multiplies the fault's base severity. The combined multiplier is capped
so that stacking factors cannot grow without bound.

The adjuster only ever escalates: the multiplier is at least 1.0, so the
adjusted score never drops below the base severity of the rule that fired.
"""

from dataclasses import replace
from typing import Optional

from .driving_context import DrivingContext
from .fault import Fault
from .severity import SeverityLevel


class PriorityAdjuster:
    """
    Context-aware severity escalation.

    Stateless; a single instance can be shared by any number of concurrent
    diagnoses.
    """

    HIGHWAY_MULTIPLIER = 1.4
    REDUCED_VISIBILITY_MULTIPLIER = 1.3  # Rain or Fog
    STORM_MULTIPLIER = 1.5
    NIGHT_MULTIPLIER = 1.3
    NEW_DRIVER_MULTIPLIER = 1.2
    HEAVY_LOAD_MULTIPLIER = 1.2

    # Hard cap applied after all factors are combined
    MAX_MULTIPLIER = 2.5

    UPGRADE_MARKER = " (Upgraded due to context)"

    def compute_multiplier(self, context: Optional[DrivingContext]) -> tuple[float, list[str]]:
        """
        Combines every contextual factor into one capped multiplier.

        Args:
            context: Driving context, or None for no context at all

        Returns:
            A tuple containing:
            - float: The combined multiplier, between 1.0 and MAX_MULTIPLIER
            - list[str]: Human-readable reason for every factor that applied
        """
        if context is None:
            return (1.0, [])

        multiplier = 1.0
        reasons = []

        if context.trip_type == "Highway":
            multiplier *= self.HIGHWAY_MULTIPLIER
            reasons.append("Highway speeds increase risk")

        if context.weather in ("Rain", "Fog"):
            multiplier *= self.REDUCED_VISIBILITY_MULTIPLIER
            reasons.append(f"Reduced visibility/traction due to {context.weather}")
        elif context.weather == "Storm":
            multiplier *= self.STORM_MULTIPLIER
            reasons.append("Extreme weather conditions")

        if context.time_of_day == "Night":
            multiplier *= self.NIGHT_MULTIPLIER
            reasons.append("Nighttime driving limits visibility")

        if context.driver_profile == "New":
            multiplier *= self.NEW_DRIVER_MULTIPLIER
            reasons.append("Inexperienced driver profile")

        if context.is_heavy():
            multiplier *= self.HEAVY_LOAD_MULTIPLIER
            reasons.append("Heavy vehicle load impacts handling/braking")

        return (min(multiplier, self.MAX_MULTIPLIER), reasons)

    def adjust(self, fault: Fault, context: Optional[DrivingContext]) -> Fault:
        """
        Returns a copy of the fault with its severity escalated by context.

        The new score is the base severity rank times the capped multiplier.
        The severity label follows from the score. When the label reaches
        CRITICAL from a strictly lower base, the title is marked as upgraded.
        When at least one factor applied, a context note listing every reason
        is appended to the description.

        Args:
            fault: Fault as built from its rule, before adjustment
            context: Driving context, or None

        Returns:
            The adjusted fault (the input is not modified)
        """
        multiplier, reasons = self.compute_multiplier(context)
        if not reasons:
            return fault

        score = fault.base_severity.level * multiplier

        title = fault.title
        if (SeverityLevel.from_score(score) is SeverityLevel.CRITICAL
                and fault.base_severity.level < SeverityLevel.CRITICAL.level):
            title += self.UPGRADE_MARKER

        context_note = f"\n\nContext Warning: Priority increased. {', '.join(reasons)}."

        return replace(
            fault,
            severity_score=score,
            title=title,
            description=fault.description + context_note,
        )
