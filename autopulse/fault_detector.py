"""
Fault detector module for the AutoPulse advisory engine.

This module contains the FaultDetector class, the orchestrator of the fault
diagnosis. A diagnosis is a single pass through four stages:

1. collect-single: evaluate each parameter rule against its reading
2. collect-correlation: evaluate every cross-parameter correlation rule
3. sort: order all faults by descending (context-adjusted) severity score
4. summarize: derive the overall vehicle-health verdict

Every fault passes through the PriorityAdjuster before it is collected. The
detector never raises for malformed telemetry: unusable readings are skipped
and an empty submission yields a healthy result with no faults.
"""

from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from .correlation_rules import CORRELATION_RULES, CorrelationRule
from .diagnosis_result import DiagnosisResult, VerdictPolicy, overall_verdict
from .driving_context import DrivingContext
from .fault import CORRELATION, SINGLE, Fault
from .fault_rules import PARAMETER_RULES, Check, ParameterRule
from .priority_adjuster import PriorityAdjuster
from .telemetry_snapshot import TelemetrySnapshot


ContextInput = Union[DrivingContext, Mapping[str, Any], None]


class FaultDetector:
    """
    Core orchestrator of the rule-based fault diagnosis.

    The detector holds no per-request state. The rule tables, the priority
    adjuster and the clock are fixed at construction so a single instance
    can serve concurrent requests.
    """

    CORRELATION_DISPLAY_NAME = "Cross-Parameter Alert"
    CORRELATION_ICON = "🔗"

    def __init__(
        self,
        parameter_rules: tuple[ParameterRule, ...] = PARAMETER_RULES,
        correlation_rules: tuple[CorrelationRule, ...] = CORRELATION_RULES,
        adjuster: Optional[PriorityAdjuster] = None,
        clock: Optional[Callable[[], datetime]] = None,
        verdict_policy: VerdictPolicy = VerdictPolicy.BANDED,
    ) -> None:
        """
        Args:
            parameter_rules: Per-parameter threshold rules
            correlation_rules: Cross-parameter correlation rules
            adjuster: Priority adjuster; a default one is created if None
            clock: Callable returning the current time, used for the result
                   timestamp and fault ids. Defaults to datetime.now.
            verdict_policy: How the overall status is derived
        """
        self.parameter_rules = parameter_rules
        self.correlation_rules = correlation_rules
        self.adjuster = adjuster or PriorityAdjuster()
        self.clock = clock or datetime.now
        self.verdict_policy = verdict_policy

    def detect(self, snapshot: TelemetrySnapshot, context: Optional[DrivingContext] = None) -> DiagnosisResult:
        """
        Runs the full diagnosis over one telemetry snapshot.

        Args:
            snapshot: Submitted telemetry readings
            context: Driving context; None behaves like an empty context

        Returns:
            DiagnosisResult with faults sorted by descending severity score
        """
        now = self.clock()
        stamp = int(now.timestamp() * 1000)
        faults = []

        # Stage 1: single-parameter rules, at most one fault per parameter
        for rule in self.parameter_rules:
            value = snapshot.value(rule.name)
            if value is None:
                continue
            check = rule.evaluate(value)
            if check is None:
                continue
            fault = self._single_fault(rule, check, value, stamp)
            faults.append(self.adjuster.adjust(fault, context))

        # Stage 2: correlation rules over every submitted reading
        numeric = snapshot.numeric_values()
        correlation_context = context or DrivingContext()
        for correlation in self.correlation_rules:
            if not correlation.matches(numeric, correlation_context):
                continue
            fault = self._correlation_fault(correlation, stamp)
            faults.append(self.adjuster.adjust(fault, context))

        # Stage 3: stable sort, insertion order breaks ties
        faults.sort(key=lambda f: f.severity_score, reverse=True)

        # Stage 4: overall verdict from the top fault
        top_score = faults[0].severity_score if faults else 0
        return DiagnosisResult(
            timestamp=now,
            faults=tuple(faults),
            verdict=overall_verdict(top_score, self.verdict_policy),
            parameters_checked=snapshot.parameters_checked,
        )

    def _single_fault(self, rule: ParameterRule, check: Check, value: float, stamp: int) -> Fault:
        return Fault(
            fault_id=f"{rule.name}-{check.severity.label}-{stamp}",
            parameter=rule.name,
            display_name=rule.display_name,
            icon=rule.icon,
            base_severity=check.severity,
            severity_score=float(check.severity.level),
            title=check.title,
            description=check.description,
            fix=check.fix,
            emotional_message=check.emotional,
            kind=SINGLE,
            value=value,
            unit=rule.unit,
        )

    def _correlation_fault(self, correlation: CorrelationRule, stamp: int) -> Fault:
        return Fault(
            fault_id=f"corr-{'-'.join(correlation.parameters)}-{stamp}",
            parameter=" + ".join(correlation.parameters),
            display_name=self.CORRELATION_DISPLAY_NAME,
            icon=self.CORRELATION_ICON,
            base_severity=correlation.severity,
            severity_score=float(correlation.severity.level),
            title=correlation.title,
            description=correlation.description,
            fix=correlation.fix,
            emotional_message=correlation.emotional,
            kind=CORRELATION,
            related_params=correlation.parameters,
        )


def detect_faults(
    params: Optional[Mapping[str, Any]],
    context: ContextInput = None,
    *,
    clock: Optional[Callable[[], datetime]] = None,
    verdict_policy: VerdictPolicy = VerdictPolicy.BANDED,
) -> DiagnosisResult:
    """
    Diagnoses one set of telemetry readings.

    Convenience wrapper around FaultDetector for callers holding plain
    mappings, such as the HTTP layer.

    Args:
        params: Mapping of parameter name to raw reading
        context: DrivingContext, or its wire mapping (camelCase keys)
        clock: Optional callable returning the current time
        verdict_policy: How the overall status is derived

    Returns:
        The DiagnosisResult
    """
    if context is not None and not isinstance(context, DrivingContext):
        context = DrivingContext.from_dict(context)
    detector = FaultDetector(clock=clock, verdict_policy=verdict_policy)
    return detector.detect(TelemetrySnapshot(params), context)
