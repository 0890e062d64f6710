"""
Fault rule set for the AutoPulse advisory engine.

This module holds the per-parameter threshold table. Each ParameterRule owns
an ordered tuple of Checks; when a reading is evaluated only the first
matching Check fires, so the most severe (narrowest) band of each parameter
is declared first. A later, broader band such as "below 30 psi" is shadowed
by an earlier "below 25 psi" for any reading that satisfies both.

The table is built once at import and never mutated.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from .severity import SeverityLevel


@dataclass(frozen=True)
class Check:
    """
    One threshold band of a parameter rule.

    Attributes:
        test: Predicate over the parsed reading
        severity: Severity declared for this band
        title: Short headline of the resulting fault
        description: Explanation of the band
        fix: Recommended action
        emotional: Message addressed to the driver
    """

    test: Callable[[float], bool]
    severity: SeverityLevel
    title: str
    description: str
    fix: str
    emotional: str


@dataclass(frozen=True)
class ParameterRule:
    """
    Ordered threshold checks for one telemetry parameter.

    Attributes:
        name: Canonical parameter name (e.g. "engineTemp")
        display_name: Human-readable parameter name
        unit: Unit of the reading
        icon: Emoji shown next to faults for this parameter
        checks: Checks in evaluation order
    """

    name: str
    display_name: str
    unit: str
    icon: str
    checks: tuple[Check, ...]

    def evaluate(self, value: float) -> Optional[Check]:
        """
        Finds the first check whose predicate holds for the reading.

        Args:
            value: Parsed, finite reading for this parameter

        Returns:
            The first matching Check in declaration order, or None
        """
        for check in self.checks:
            if check.test(value):
                return check
        return None


PARAMETER_RULES: tuple[ParameterRule, ...] = (
    ParameterRule(
        name="engineTemp",
        display_name="Engine Temperature",
        unit="°C",
        icon="🌡️",
        checks=(
            Check(
                test=lambda v: v > 120,
                severity=SeverityLevel.CRITICAL,
                title="Engine Overheating — Critical!",
                description="Engine temperature has exceeded 120°C. Immediate shutdown risk.",
                fix="Pull over safely and turn off the engine immediately. Do NOT open the radiator cap. "
                    "Call roadside assistance.",
                emotional="🚨 This is serious — please stop driving right now. Your safety comes first.",
            ),
            Check(
                test=lambda v: v > 105,
                severity=SeverityLevel.HIGH,
                title="Engine Running Hot",
                description="Engine temperature is between 105–120°C, above normal operating range.",
                fix="Turn off the A/C, turn on the heater to dissipate heat, and drive to the nearest "
                    "service station.",
                emotional="⚠️ Don't panic — reduce load on your engine and get checked soon.",
            ),
            Check(
                test=lambda v: 0 < v < 70,
                severity=SeverityLevel.LOW,
                title="Engine Not Warmed Up",
                description="Engine temperature is below 70°C. May be normal during cold starts.",
                fix="Let the engine warm up for a few minutes before driving aggressively.",
                emotional="💡 Give your car a moment to wake up — just like us on cold mornings.",
            ),
        ),
    ),
    ParameterRule(
        name="rpm",
        display_name="Engine RPM",
        unit="RPM",
        icon="⚙️",
        checks=(
            Check(
                test=lambda v: v > 7000,
                severity=SeverityLevel.CRITICAL,
                title="RPM Dangerously High — Redline!",
                description="Engine RPM has exceeded 7000. Risk of engine damage or failure.",
                fix="Ease off the accelerator immediately. Shift to a higher gear if manual. "
                    "If persistent, pull over.",
                emotional="🚨 Your engine is screaming — please let it breathe. Slow down now.",
            ),
            Check(
                test=lambda v: v > 6000,
                severity=SeverityLevel.HIGH,
                title="RPM Above Normal Range",
                description="Engine RPM is between 6000–7000. Sustained high RPM causes wear.",
                fix="Reduce speed, shift up, or ease off the throttle. Avoid sustained high-RPM driving.",
                emotional="⚠️ Your engine is working hard — give it a break before it overheats.",
            ),
            Check(
                test=lambda v: 0 < v < 600,
                severity=SeverityLevel.MEDIUM,
                title="RPM Too Low — Rough Idle",
                description="Engine RPM is below 600. May indicate idle issues or stalling risk.",
                fix="Check for vacuum leaks, dirty throttle body, or failing idle air control valve.",
                emotional="🔧 Your car seems a bit sluggish — a quick tune-up should help.",
            ),
        ),
    ),
    ParameterRule(
        name="oilPressure",
        display_name="Oil Pressure",
        unit="psi",
        icon="🛢️",
        checks=(
            Check(
                test=lambda v: v < 15,
                severity=SeverityLevel.CRITICAL,
                title="Oil Pressure Critically Low!",
                description="Oil pressure is below 15 psi. Engine seizure risk is imminent.",
                fix="Stop driving immediately! Check oil level and top up if low. Do not restart until "
                    "pressure is restored.",
                emotional="🚨 This is an emergency — your engine needs oil NOW. Please pull over safely.",
            ),
            Check(
                test=lambda v: v < 25,
                severity=SeverityLevel.HIGH,
                title="Oil Pressure Below Normal",
                description="Oil pressure is between 15–25 psi, below the safe operating range.",
                fix="Check oil level with the dipstick. Look for leaks under the car. Visit a mechanic soon.",
                emotional="⚠️ Your engine's lifeblood is running low — don't ignore this one.",
            ),
            Check(
                test=lambda v: v > 65,
                severity=SeverityLevel.MEDIUM,
                title="Oil Pressure Too High",
                description="Oil pressure exceeds 65 psi. May indicate a blocked oil passage.",
                fix="Check oil viscosity and pressure relief valve. Have a mechanic inspect.",
                emotional="🔧 Unusual reading — worth getting checked to prevent future issues.",
            ),
        ),
    ),
    ParameterRule(
        name="tirePressure",
        display_name="Tire Pressure",
        unit="psi",
        icon="🛞",
        checks=(
            Check(
                test=lambda v: v < 25,
                severity=SeverityLevel.CRITICAL,
                title="Tire Pressure Dangerously Low!",
                description="Tire pressure is below 25 psi. Blowout risk is very high.",
                fix="Do not drive at high speed. Inflate tires at the nearest gas station or use a spare.",
                emotional="🚨 Your tires are in danger — please slow down and get air immediately.",
            ),
            Check(
                test=lambda v: v > 40,
                severity=SeverityLevel.CRITICAL,
                title="Tire Pressure Dangerously High!",
                description="Tire pressure exceeds 40 psi. Risk of blowout, especially on hot roads.",
                fix="Release air to bring pressure to 30-35 psi. Check when tires are cold for accurate reading.",
                emotional="🚨 Over-inflated tires are a hidden danger — please release some air now.",
            ),
            Check(
                test=lambda v: v < 30,
                severity=SeverityLevel.MEDIUM,
                title="Tire Pressure Low",
                description="Tire pressure is between 25–30 psi. Reduces fuel efficiency and handling.",
                fix="Inflate tires to the manufacturer-recommended pressure (usually 30-35 psi).",
                emotional="💡 A small top-up will improve your ride and save fuel money.",
            ),
            Check(
                test=lambda v: v > 35,
                severity=SeverityLevel.LOW,
                title="Tire Pressure Slightly High",
                description="Tire pressure is between 35–40 psi. Slightly above optimal.",
                fix="Release a small amount of air. Recheck pressure when tires are cold.",
                emotional="💡 Just a tiny adjustment needed — no stress.",
            ),
        ),
    ),
    ParameterRule(
        name="batteryVoltage",
        display_name="Battery Voltage",
        unit="V",
        icon="🔋",
        checks=(
            Check(
                test=lambda v: v < 11.8,
                severity=SeverityLevel.CRITICAL,
                title="Battery Voltage Critical — May Not Start!",
                description="Battery voltage is below 11.8V. Car may not start or may stall.",
                fix="Jump-start the vehicle or replace the battery. Check the alternator for charging issues.",
                emotional="🚨 Your car's heart is fading — get a new battery before you're stranded.",
            ),
            Check(
                test=lambda v: v < 12.4,
                severity=SeverityLevel.HIGH,
                title="Battery Voltage Low",
                description="Battery voltage is between 11.8–12.4V. Battery is not fully charged.",
                fix="Drive for 20+ minutes to let the alternator recharge. If it persists, test the battery.",
                emotional="⚠️ Your battery needs a good charge — a short drive should help.",
            ),
            Check(
                test=lambda v: v > 14.7,
                severity=SeverityLevel.HIGH,
                title="Battery Overcharging",
                description="Battery voltage exceeds 14.7V. Alternator may be overcharging.",
                fix="Have the voltage regulator and alternator checked immediately.",
                emotional="⚠️ Too much power can be just as bad — get your alternator checked.",
            ),
        ),
    ),
    ParameterRule(
        name="speed",
        display_name="Vehicle Speed",
        unit="km/h",
        icon="🏎️",
        checks=(
            Check(
                test=lambda v: v > 160,
                severity=SeverityLevel.CRITICAL,
                title="Speed Dangerously High!",
                description="Vehicle speed exceeds 160 km/h. Extreme accident risk.",
                fix="Gradually reduce speed. Do NOT brake suddenly at high speed. Move to the slow lane.",
                emotional="🚨 Please slow down — no destination is worth risking your life.",
            ),
            Check(
                test=lambda v: v > 120,
                severity=SeverityLevel.MEDIUM,
                title="Speed Above Safe Limit",
                description="Vehicle speed is between 120–160 km/h. Increased risk and fuel consumption.",
                fix="Reduce speed to below 120 km/h for safer driving and better fuel economy.",
                emotional="⚠️ Ease off a bit — you'll still get there on time, and much safer.",
            ),
        ),
    ),
    ParameterRule(
        name="fuelLevel",
        display_name="Fuel Level",
        unit="%",
        icon="⛽",
        checks=(
            Check(
                test=lambda v: v < 10,
                severity=SeverityLevel.CRITICAL,
                title="Fuel Almost Empty!",
                description="Fuel level is below 10%. Risk of running out and getting stranded.",
                fix="Find the nearest fuel station immediately. Avoid highways where stations are far apart.",
                emotional="🚨 You're running on fumes — please refuel NOW before it's too late.",
            ),
            Check(
                test=lambda v: v < 20,
                severity=SeverityLevel.MEDIUM,
                title="Fuel Level Low",
                description="Fuel level is between 10–20%. Time to plan a refueling stop.",
                fix="Head to the nearest fuel station. Running on low fuel can damage the fuel pump.",
                emotional="💡 Time for a pit stop — your car (and wallet) will thank you.",
            ),
        ),
    ),
    ParameterRule(
        name="brakeThickness",
        display_name="Brake Pad Thickness",
        unit="mm",
        icon="🛑",
        checks=(
            Check(
                test=lambda v: v < 2,
                severity=SeverityLevel.CRITICAL,
                title="Brake Pads Extremely Worn!",
                description="Brake pad thickness is below 2mm. Braking power severely compromised.",
                fix="Replace brake pads immediately. Avoid high-speed driving until replaced.",
                emotional="🚨 Your brakes are almost gone — this is life-threatening. Get them replaced TODAY.",
            ),
            Check(
                test=lambda v: v < 4,
                severity=SeverityLevel.HIGH,
                title="Brake Pads Wearing Thin",
                description="Brake pad thickness is between 2–4mm. Replacement needed soon.",
                fix="Schedule brake pad replacement within the next 1-2 weeks.",
                emotional="⚠️ Your brakes have served you well — time to give them a refresh.",
            ),
        ),
    ),
)
