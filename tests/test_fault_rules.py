"""
Tests for the fault rule set and the correlation rule set.

Tests cover:
- Equivalence classes: each threshold band of each parameter
- Boundary value analysis: strict inequalities at band edges
- Error scenarios: missing readings, missing context, raising predicates
- Full decision path coverage: first-match ordering, every correlation rule
"""

import math

import pytest
from autopulse.correlation_rules import CORRELATION_RULES, CorrelationRule
from autopulse.driving_context import DrivingContext
from autopulse.fault_rules import PARAMETER_RULES
from autopulse.severity import SeverityLevel
from autopulse.telemetry_snapshot import CANONICAL_PARAMETERS


def first_match(parameter, value):
    """Returns the check that fires for a reading, or None."""
    rule = next(rule for rule in PARAMETER_RULES if rule.name == parameter)
    return rule.evaluate(value)


def correlation(title_fragment):
    return next(rule for rule in CORRELATION_RULES if title_fragment in rule.title)


class TestParameterRules:
    """Test suite for ParameterRule evaluation."""

    def test_every_canonical_parameter_has_a_rule(self):
        assert {rule.name for rule in PARAMETER_RULES} == set(CANONICAL_PARAMETERS)

    # ==================== Equivalence Classes ====================

    @pytest.mark.parametrize("parameter, value, severity, title", [
        ("engineTemp", 130, SeverityLevel.CRITICAL, "Engine Overheating — Critical!"),
        ("engineTemp", 110, SeverityLevel.HIGH, "Engine Running Hot"),
        ("engineTemp", 50, SeverityLevel.LOW, "Engine Not Warmed Up"),
        ("rpm", 7500, SeverityLevel.CRITICAL, "RPM Dangerously High — Redline!"),
        ("rpm", 6500, SeverityLevel.HIGH, "RPM Above Normal Range"),
        ("rpm", 500, SeverityLevel.MEDIUM, "RPM Too Low — Rough Idle"),
        ("oilPressure", 10, SeverityLevel.CRITICAL, "Oil Pressure Critically Low!"),
        ("oilPressure", 20, SeverityLevel.HIGH, "Oil Pressure Below Normal"),
        ("oilPressure", 70, SeverityLevel.MEDIUM, "Oil Pressure Too High"),
        ("tirePressure", 20, SeverityLevel.CRITICAL, "Tire Pressure Dangerously Low!"),
        ("tirePressure", 45, SeverityLevel.CRITICAL, "Tire Pressure Dangerously High!"),
        ("tirePressure", 27, SeverityLevel.MEDIUM, "Tire Pressure Low"),
        ("tirePressure", 38, SeverityLevel.LOW, "Tire Pressure Slightly High"),
        ("batteryVoltage", 11.5, SeverityLevel.CRITICAL, "Battery Voltage Critical — May Not Start!"),
        ("batteryVoltage", 12.0, SeverityLevel.HIGH, "Battery Voltage Low"),
        ("batteryVoltage", 15.0, SeverityLevel.HIGH, "Battery Overcharging"),
        ("speed", 170, SeverityLevel.CRITICAL, "Speed Dangerously High!"),
        ("speed", 130, SeverityLevel.MEDIUM, "Speed Above Safe Limit"),
        ("fuelLevel", 5, SeverityLevel.CRITICAL, "Fuel Almost Empty!"),
        ("fuelLevel", 15, SeverityLevel.MEDIUM, "Fuel Level Low"),
        ("brakeThickness", 1, SeverityLevel.CRITICAL, "Brake Pads Extremely Worn!"),
        ("brakeThickness", 3, SeverityLevel.HIGH, "Brake Pads Wearing Thin"),
    ])
    def test_each_band_fires(self, parameter, value, severity, title):
        """Equivalence class: a reading inside each band fires that band."""
        check = first_match(parameter, value)
        assert check is not None
        assert check.severity is severity
        assert check.title == title

    @pytest.mark.parametrize("parameter, value", [
        ("engineTemp", 90),
        ("rpm", 2500),
        ("oilPressure", 40),
        ("tirePressure", 32),
        ("batteryVoltage", 12.6),
        ("speed", 100),
        ("fuelLevel", 60),
        ("brakeThickness", 8),
    ])
    def test_normal_readings_do_not_fire(self, parameter, value):
        """Equivalence class: normal operating range → no check fires."""
        assert first_match(parameter, value) is None

    # ==================== Boundary Value Analysis ====================

    def test_oil_pressure_15_is_high_not_critical(self):
        """Boundary: oilPressure 15 misses "<15" but hits "<25"."""
        check = first_match("oilPressure", 15)
        assert check.severity is SeverityLevel.HIGH

    def test_tire_pressure_40_is_low_not_critical(self):
        """Boundary: tirePressure 40 misses ">40" but hits ">35"."""
        check = first_match("tirePressure", 40)
        assert check.severity is SeverityLevel.LOW

    @pytest.mark.parametrize("parameter, value", [
        ("engineTemp", 0), ("rpm", 0), ("rpm", 600),
        ("speed", 120), ("fuelLevel", 20), ("brakeThickness", 4), ("batteryVoltage", 14.7),
    ])
    def test_strict_edges(self, parameter, value):
        """Boundary: values exactly at an edge fall outside the strict band."""
        assert first_match(parameter, value) is None

    def test_engine_temp_120_is_high(self):
        """Boundary: 120 misses ">120" and falls to the ">105" band."""
        assert first_match("engineTemp", 120).severity is SeverityLevel.HIGH

    # ==================== Decision Path Coverage ====================

    def test_first_match_shadows_broader_band(self):
        """Decision path: "<25" CRITICAL shadows "<30" MEDIUM for tires."""
        check = first_match("tirePressure", 10)
        assert check.title == "Tire Pressure Dangerously Low!"

    def test_brake_narrow_band_first(self):
        """Decision path: "<2" is declared before "<4"."""
        assert first_match("brakeThickness", 1.9).severity is SeverityLevel.CRITICAL

    def test_negative_readings(self):
        """Negative temperatures and RPM do not trigger the "> 0" low bands."""
        assert first_match("engineTemp", -5) is None
        assert first_match("rpm", -100) is None


class TestCorrelationRules:
    """Test suite for CorrelationRule evaluation."""

    @pytest.fixture
    def empty_context(self):
        return DrivingContext()

    def test_nine_rules_declared(self):
        assert len(CORRELATION_RULES) == 9

    # ==================== Equivalence Classes ====================

    @pytest.mark.parametrize("fragment, params, severity", [
        ("High Temp + Low Oil", {"engineTemp": 110, "oilPressure": 20}, SeverityLevel.CRITICAL),
        ("High Speed + Worn Brakes", {"speed": 130, "brakeThickness": 3}, SeverityLevel.CRITICAL),
        ("Hot Engine + High Speed", {"engineTemp": 110, "speed": 130}, SeverityLevel.HIGH),
        ("Low Battery + Rough Idle", {"batteryVoltage": 12.0, "rpm": 500}, SeverityLevel.HIGH),
        ("Low Fuel + High Speed", {"fuelLevel": 15, "speed": 130}, SeverityLevel.HIGH),
        ("RPM & Speed Mismatch", {"speed": 80, "rpm": 1200}, SeverityLevel.HIGH),
        ("Engine Under Extreme Stress", {"rpm": 4500, "engineTemp": 101}, SeverityLevel.CRITICAL),
    ])
    def test_parameter_correlations_trigger(self, empty_context, fragment, params, severity):
        """Equivalence class: each parameter-only correlation triggers."""
        rule = correlation(fragment)
        assert rule.matches(params, empty_context) is True
        assert rule.severity is severity

    def test_electrical_stress_requires_ac(self, empty_context):
        """Context rule: low battery at low speed only matters with the A/C on."""
        rule = correlation("Electrical Stress at Low Speed")
        params = {"batteryVoltage": 12.0, "speed": 10}
        assert rule.requires_context is True
        assert rule.matches(params, empty_context) is False
        assert rule.matches(params, DrivingContext(ac_on=True)) is True

    def test_first_gear_over_revving(self, empty_context):
        rule = correlation("Over-revving for Gear")
        assert rule.matches({"speed": 40}, DrivingContext(gear=1)) is True
        assert rule.matches({"speed": 40}, DrivingContext(gear=2)) is False
        assert rule.matches({"speed": 40}, empty_context) is False

    # ==================== Boundary Value Analysis ====================

    def test_speed_mismatch_needs_exactly_80(self, empty_context):
        """Boundary: the mismatch rule compares speed for equality."""
        rule = correlation("RPM & Speed Mismatch")
        assert rule.matches({"speed": 80.0, "rpm": 1000}, empty_context) is True
        assert rule.matches({"speed": 81, "rpm": 1000}, empty_context) is False

    # ==================== Error Scenarios ====================

    def test_missing_parameters_do_not_trigger(self, empty_context):
        """Error scenario: absent readings fail every comparison."""
        for rule in CORRELATION_RULES:
            assert rule.matches({}, empty_context) is False

    def test_nan_readings_do_not_trigger(self, empty_context):
        """Error scenario: NaN readings fail every comparison."""
        rule = correlation("High Temp + Low Oil")
        assert rule.matches({"engineTemp": math.nan, "oilPressure": 10}, empty_context) is False

    def test_raising_predicate_is_not_triggered(self, empty_context):
        """Error scenario: an exception inside a predicate means "not triggered"."""
        def explode(params, context):
            raise KeyError("speed")

        rule = CorrelationRule(
            test=explode, severity=SeverityLevel.HIGH, title="Broken", description="",
            fix="", emotional="", parameters=("speed",),
        )
        assert rule.matches({"speed": 100}, empty_context) is False
