"""
Correlation rule set for the AutoPulse advisory engine.

Correlation rules detect compounded risks arising from the joint state of
two or more parameters, and in a few cases from the driving context. Every
rule is evaluated independently of the single-parameter faults: a reading
that already produced its own fault can still take part in a correlation.

Readings are looked up with NaN as the default, so a missing parameter fails
every comparison and the rule simply does not trigger.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Mapping

from .driving_context import DrivingContext
from .severity import SeverityLevel

logger = logging.getLogger(__name__)


def _reading(params: Mapping[str, float], name: str) -> float:
    return params.get(name, math.nan)


@dataclass(frozen=True)
class CorrelationRule:
    """
    A predicate over several parameters (and optionally the context).

    Attributes:
        test: Predicate over (numeric readings, driving context)
        severity: Severity declared for the compound condition
        title: Short headline of the resulting fault
        description: Explanation of the compound risk
        fix: Recommended action
        emotional: Message addressed to the driver
        parameters: Parameters the rule concerns, in display order
        requires_context: True when the predicate reads context fields
    """

    test: Callable[[Mapping[str, float], DrivingContext], bool]
    severity: SeverityLevel
    title: str
    description: str
    fix: str
    emotional: str
    parameters: tuple[str, ...]
    requires_context: bool = False

    def matches(self, params: Mapping[str, float], context: DrivingContext) -> bool:
        """
        Evaluates the predicate, treating any failure as "not triggered".

        Args:
            params: Numeric readings (invalid readings are NaN)
            context: Driving context, possibly empty

        Returns:
            True if the compound condition holds
        """
        try:
            return bool(self.test(params, context))
        except Exception as e:
            logger.debug("Correlation rule %r skipped: %s", self.title, e)
            return False


CORRELATION_RULES: tuple[CorrelationRule, ...] = (
    CorrelationRule(
        test=lambda p, ctx: _reading(p, "engineTemp") > 105 and _reading(p, "oilPressure") < 25,
        severity=SeverityLevel.CRITICAL,
        title="🔥 Compound Risk: High Temp + Low Oil",
        description="Engine running hot with low oil pressure. Extremely high risk of engine seizure.",
        fix="Stop immediately! This combination can destroy your engine within minutes. Call a tow truck.",
        emotional="🚨 Two danger signs together — please take this very seriously and stop NOW.",
        parameters=("engineTemp", "oilPressure"),
    ),
    CorrelationRule(
        test=lambda p, ctx: _reading(p, "speed") > 120 and _reading(p, "brakeThickness") < 4,
        severity=SeverityLevel.CRITICAL,
        title="💀 Compound Risk: High Speed + Worn Brakes",
        description="Driving at high speed with thin brake pads. Extremely dangerous stopping conditions.",
        fix="Reduce speed immediately. Maintain extra following distance. Get brakes replaced ASAP.",
        emotional="🚨 Speed and bad brakes are a deadly combination — slow down right now.",
        parameters=("speed", "brakeThickness"),
    ),
    CorrelationRule(
        test=lambda p, ctx: _reading(p, "engineTemp") > 105 and _reading(p, "speed") > 120,
        severity=SeverityLevel.HIGH,
        title="⚠️ Compound Risk: Hot Engine + High Speed",
        description="High engine temperature at high speed increases breakdown risk.",
        fix="Slow down to reduce engine load. Turn off A/C and open windows.",
        emotional="⚠️ Your engine is stressed and you're pushing it — ease off the gas.",
        parameters=("engineTemp", "speed"),
    ),
    CorrelationRule(
        test=lambda p, ctx: _reading(p, "batteryVoltage") < 12.4 and _reading(p, "rpm") < 600,
        severity=SeverityLevel.HIGH,
        title="⚠️ Compound Risk: Low Battery + Rough Idle",
        description="Low battery voltage combined with low RPM may indicate alternator failure.",
        fix="Have the alternator tested. The battery may not be getting recharged while driving.",
        emotional="⚠️ Your car's electrical system needs attention — don't risk a breakdown.",
        parameters=("batteryVoltage", "rpm"),
    ),
    CorrelationRule(
        test=lambda p, ctx: _reading(p, "fuelLevel") < 20 and _reading(p, "speed") > 120,
        severity=SeverityLevel.HIGH,
        title="⚠️ Compound Risk: Low Fuel + High Speed",
        description="Low fuel at high speed makes reaching a station risky. High speed burns fuel faster.",
        fix="Reduce speed to improve fuel economy. Locate the nearest fuel station immediately.",
        emotional="⚠️ Slow down to stretch your fuel — you don't want to be stranded at high speed.",
        parameters=("fuelLevel", "speed"),
    ),
    CorrelationRule(
        test=lambda p, ctx: _reading(p, "speed") == 80 and _reading(p, "rpm") < 1500,
        severity=SeverityLevel.HIGH,
        title="⚠️ Compound Risk: RPM & Speed Mismatch",
        description="Speed is 80 km/h but RPM is unusually low (<1500). Possible clutch slipping or "
                    "transmission gear engagement issue.",
        fix="Avoid rapid acceleration. Have your transmission and clutch inspected by a professional.",
        emotional="⚠️ Your gears might be slipping. Go easy on the pedal until you get it checked.",
        parameters=("speed", "rpm"),
    ),
    CorrelationRule(
        test=lambda p, ctx: _reading(p, "rpm") > 4000 and _reading(p, "engineTemp") > 100,
        severity=SeverityLevel.CRITICAL,
        title="🔥 CRITICAL: Engine Under Extreme Stress",
        description="High RPM combined with High Engine Temperature. This condition rapidly degrades "
                    "engine components and risks catastrophic failure.",
        fix="PULL OVER IMMEDIATELY. Let the engine idle to cool down. Do not turn it off immediately if "
            "boiling over, let the fans run.",
        emotional="🚨 Your engine is screaming and burning up! STOP NOW before permanent damage occurs.",
        parameters=("rpm", "engineTemp"),
    ),
    CorrelationRule(
        test=lambda p, ctx: (
            _reading(p, "batteryVoltage") < 12.4 and _reading(p, "speed") < 20 and bool(ctx.ac_on)
        ),
        severity=SeverityLevel.HIGH,
        title="⚡ Compound Risk: Electrical Stress at Low Speed",
        description="Low battery voltage while AC is on at low speed. Alternator may not be charging "
                    "sufficiently under high load at idle.",
        fix="Turn off AC and other non-essential electronics until you reach higher speeds or get the "
            "alternator tested.",
        emotional="⚠️ Your car is struggling to power the AC right now. Give the alternator a break by "
                  "turning it off.",
        parameters=("batteryVoltage", "speed"),
        requires_context=True,
    ),
    CorrelationRule(
        test=lambda p, ctx: ctx.gear == 1 and _reading(p, "speed") > 30,
        severity=SeverityLevel.HIGH,
        title="⚙️ Compound Risk: Engine Over-revving for Gear",
        description="Driving over 30 km/h in 1st gear places massive stress on the engine and transmission.",
        fix="Shift to a higher gear immediately to reduce engine stress and save fuel.",
        emotional="⚠️ You're holding 1st gear way too long! Please upshift to let the engine breathe.",
        parameters=("speed",),
        requires_context=True,
    ),
)
