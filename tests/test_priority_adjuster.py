"""
Tests for PriorityAdjuster.

Tests cover:
- Equivalence classes: neutral context, each individual factor
- Boundary value analysis: multiplier cap, bucket edges after escalation
- Full decision path coverage: upgrade marker, context note, correlation faults
"""

import pytest
from autopulse.driving_context import DrivingContext
from autopulse.fault import CORRELATION, Fault
from autopulse.priority_adjuster import PriorityAdjuster
from autopulse.severity import SeverityLevel


def make_fault(severity, kind="single"):
    return Fault(
        fault_id="test-1",
        parameter="engineTemp",
        display_name="Engine Temperature",
        icon="🌡️",
        base_severity=severity,
        severity_score=float(severity.level),
        title="Engine Running Hot",
        description="Engine temperature is high.",
        fix="Pull over.",
        emotional_message="Stay calm.",
        kind=kind,
        value=110.0,
        unit="°C",
    )


class TestPriorityAdjuster:
    """Test suite for PriorityAdjuster."""

    @pytest.fixture
    def adjuster(self):
        return PriorityAdjuster()

    # ==================== Equivalence Classes ====================

    def test_none_context_is_identity(self, adjuster):
        fault = make_fault(SeverityLevel.HIGH)
        assert adjuster.adjust(fault, None) == fault

    def test_neutral_context_is_identity(self, adjuster):
        """Equivalence class: all-default context leaves the fault unchanged."""
        neutral = DrivingContext(
            trip_type="City", weather="Clear", time_of_day="Day",
            driver_profile="Experienced", passengers=4, load="Normal",
        )
        fault = make_fault(SeverityLevel.MEDIUM)
        adjusted = adjuster.adjust(fault, neutral)
        assert adjusted == fault
        assert adjusted.severity is SeverityLevel.MEDIUM
        assert "Context Warning" not in adjusted.description

    @pytest.mark.parametrize("context, multiplier, reason", [
        (DrivingContext(trip_type="Highway"), 1.4, "Highway speeds increase risk"),
        (DrivingContext(weather="Rain"), 1.3, "Reduced visibility/traction due to Rain"),
        (DrivingContext(weather="Fog"), 1.3, "Reduced visibility/traction due to Fog"),
        (DrivingContext(weather="Storm"), 1.5, "Extreme weather conditions"),
        (DrivingContext(time_of_day="Night"), 1.3, "Nighttime driving limits visibility"),
        (DrivingContext(driver_profile="New"), 1.2, "Inexperienced driver profile"),
        (DrivingContext(passengers=5), 1.2, "Heavy vehicle load impacts handling/braking"),
        (DrivingContext(load="Heavy"), 1.2, "Heavy vehicle load impacts handling/braking"),
    ])
    def test_single_factor(self, adjuster, context, multiplier, reason):
        """Equivalence class: each factor contributes its multiplier and reason."""
        value, reasons = adjuster.compute_multiplier(context)
        assert value == pytest.approx(multiplier)
        assert reasons == [reason]

    def test_unrecognized_values_have_no_effect(self, adjuster):
        value, reasons = adjuster.compute_multiplier(DrivingContext(weather="Snow", trip_type="Offroad"))
        assert value == 1.0
        assert reasons == []

    # ==================== Boundary Value Analysis ====================

    def test_multiplier_capped(self, adjuster):
        """Boundary: every factor stacked is capped at 2.5."""
        context = DrivingContext(
            trip_type="Highway", weather="Storm", time_of_day="Night",
            driver_profile="New", passengers=6, load="Heavy",
        )
        value, reasons = adjuster.compute_multiplier(context)
        assert value == 2.5
        assert len(reasons) == 5

    def test_heavy_counts_once(self, adjuster):
        """Boundary: many passengers and a heavy load apply a single factor."""
        value, _ = adjuster.compute_multiplier(DrivingContext(passengers=7, load="Heavy"))
        assert value == pytest.approx(1.2)

    def test_high_with_night_stays_high(self, adjuster):
        """Boundary: 3 × 1.3 = 3.9 stays HIGH."""
        adjusted = adjuster.adjust(make_fault(SeverityLevel.HIGH), DrivingContext(time_of_day="Night"))
        assert adjusted.severity_score == pytest.approx(3.9)
        assert adjusted.severity is SeverityLevel.HIGH
        assert "(Upgraded due to context)" not in adjusted.title

    def test_low_escalated_to_medium(self, adjuster):
        """Boundary: LOW × 2.1 = 2.1 becomes MEDIUM."""
        context = DrivingContext(trip_type="Highway", weather="Storm")
        adjusted = adjuster.adjust(make_fault(SeverityLevel.LOW), context)
        assert adjusted.severity is SeverityLevel.MEDIUM

    def test_low_small_multiplier_keeps_label(self, adjuster):
        """Boundary: LOW × 1.2 stays LOW, never downgraded."""
        adjusted = adjuster.adjust(make_fault(SeverityLevel.LOW), DrivingContext(driver_profile="New"))
        assert adjusted.severity is SeverityLevel.LOW
        assert adjusted.severity_score == pytest.approx(1.2)

    # ==================== Decision Path Coverage ====================

    def test_upgrade_to_critical_marks_title(self, adjuster):
        """Decision path: HIGH × 2.1 = 6.3 → CRITICAL with marker."""
        context = DrivingContext(trip_type="Highway", weather="Storm")
        adjusted = adjuster.adjust(make_fault(SeverityLevel.HIGH), context)
        assert adjusted.severity_score == pytest.approx(6.3)
        assert adjusted.severity is SeverityLevel.CRITICAL
        assert adjusted.title == "Engine Running Hot (Upgraded due to context)"
        assert adjusted.color == SeverityLevel.CRITICAL.color
        assert adjusted.was_escalated() is True

    def test_critical_base_not_marked(self, adjuster):
        """Decision path: an already critical fault is not marked as upgraded."""
        adjusted = adjuster.adjust(make_fault(SeverityLevel.CRITICAL), DrivingContext(trip_type="Highway"))
        assert adjusted.severity is SeverityLevel.CRITICAL
        assert "Upgraded" not in adjusted.title

    def test_context_note_lists_all_reasons(self, adjuster):
        context = DrivingContext(trip_type="Highway", weather="Rain")
        adjusted = adjuster.adjust(make_fault(SeverityLevel.MEDIUM), context)
        assert adjusted.description == (
            "Engine temperature is high.\n\nContext Warning: Priority increased. "
            "Highway speeds increase risk, Reduced visibility/traction due to Rain."
        )

    def test_correlation_fault_adjusted_the_same_way(self, adjuster):
        context = DrivingContext(driver_profile="New", time_of_day="Night")
        single = adjuster.adjust(make_fault(SeverityLevel.HIGH), context)
        corr = adjuster.adjust(make_fault(SeverityLevel.HIGH, kind=CORRELATION), context)
        assert corr.severity_score == single.severity_score
        assert corr.severity is single.severity

    def test_input_fault_not_modified(self, adjuster):
        fault = make_fault(SeverityLevel.HIGH)
        adjuster.adjust(fault, DrivingContext(weather="Storm"))
        assert fault.severity_score == 3.0
        assert fault.title == "Engine Running Hot"
