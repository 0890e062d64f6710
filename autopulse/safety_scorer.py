"""
Safety scorer module for the AutoPulse advisory engine.

This module contains the SafetyScorer class which rates a driving session on
a 0-100 scale. The score starts at 100 and loses points for speeding, hard
braking, rapid acceleration, fast night driving and speeds unsuited to the
weather. The result includes a letter grade, the list of deductions, earned
badges and tips targeted at the deductions.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Callable, Mapping, Optional


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class DrivingSession:
    """
    Summary of one driving session.

    Attributes:
        avg_speed: Average speed in km/h
        max_speed: Maximum speed in km/h
        hard_brakes: Number of hard braking events
        rapid_accelerations: Number of rapid acceleration events
        distance_km: Distance covered
        duration_minutes: Duration of the session
        night_driving: Whether the session took place at night
        weather_condition: "clear", "rain", "fog", ...
    """

    avg_speed: float = 60
    max_speed: float = 80
    hard_brakes: int = 0
    rapid_accelerations: int = 0
    distance_km: float = 50
    duration_minutes: float = 60
    night_driving: bool = False
    weather_condition: str = "clear"

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DrivingSession":
        """Builds a session from its camelCase wire representation, keeping defaults for absent keys."""
        data = data or {}
        wire_keys = {
            "avgSpeed": "avg_speed",
            "maxSpeed": "max_speed",
            "hardBrakes": "hard_brakes",
            "rapidAccelerations": "rapid_accelerations",
            "distanceKm": "distance_km",
            "durationMinutes": "duration_minutes",
            "nightDriving": "night_driving",
            "weatherCondition": "weather_condition",
        }
        values = {field: data[key] for key, field in wire_keys.items() if data.get(key) is not None}
        return cls(**values)


@dataclass(frozen=True)
class Deduction:
    reason: str
    points: int


@dataclass(frozen=True)
class Badge:
    """
    Award for a good driving habit.

    Attributes:
        badge_id: Stable identifier
        name: Display name
        icon: Emoji
        description: What the badge rewards
        condition: Predicate over (session, vehicle_condition)
    """

    badge_id: str
    name: str
    icon: str
    description: str
    condition: Callable[[DrivingSession, str], bool]

    def to_dict(self) -> dict[str, str]:
        return {"id": self.badge_id, "name": self.name, "icon": self.icon, "description": self.description}


BADGES: tuple[Badge, ...] = (
    Badge("speed_saint", "Speed Saint", "🏅", "Maintained safe average speed",
          lambda s, vc: s.avg_speed <= 80),
    Badge("smooth_operator", "Smooth Operator", "🎯", "No hard braking events",
          lambda s, vc: s.hard_brakes == 0),
    Badge("gentle_starter", "Gentle Starter", "🌱", "No rapid acceleration events",
          lambda s, vc: s.rapid_accelerations == 0),
    Badge("night_owl", "Night Owl Pro", "🦉", "Safe speed during night driving",
          lambda s, vc: s.night_driving and s.avg_speed <= 60),
    Badge("eco_warrior", "Eco Warrior", "🌍", "Optimal speed for fuel efficiency",
          lambda s, vc: 40 <= s.avg_speed <= 80),
    Badge("maintenance_hero", "Maintenance Hero", "🔧", "Vehicle in good condition",
          lambda s, vc: vc == "good"),
)

# (score floor, grade, color, emoji, message), checked from the top
GRADES = (
    (90, "A+", "#00e676", "🌟", "🌟 Outstanding driving! You're a road safety champion. Keep it up!"),
    (80, "A", "#69f0ae", "😊", "😊 Great job! You're a safe and responsible driver."),
    (70, "B", "#ffc400", "🙂", "🙂 Good driving overall! A few small tweaks and you'll be even better."),
    (60, "C", "#ff9100", "😐", "😐 Room for improvement. Focus on the tips below for a safer drive."),
    (50, "D", "#ff6d00", "😟", "😟 Your driving needs attention. Safety should always come first."),
    (0, "F", "#ff1744", "😰", "😰 Please focus on driving safely. Your life and others' lives depend on it."),
)

# (keyword in deduction reason, tip)
TIPS = (
    ("speed", "Try maintaining speeds under 100 km/h for safer and more fuel-efficient driving."),
    ("braking", "Anticipate traffic flow to reduce hard braking. Keep a safe following distance."),
    ("acceleration", "Accelerate gently — it's easier on your engine and passengers."),
    ("night", "Reduce speed at night when visibility is lower."),
    ("rain", "Adjust your speed to match weather conditions for maximum safety."),
    ("fog", "Adjust your speed to match weather conditions for maximum safety."),
)


@dataclass(frozen=True)
class SafetyScore:
    """Outcome of scoring one driving session."""

    score: int
    grade: str
    grade_color: str
    grade_emoji: str
    deductions: tuple[Deduction, ...]
    badges: tuple[Badge, ...]
    tips: tuple[str, ...]
    emotional_message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "grade": self.grade,
            "gradeColor": self.grade_color,
            "gradeEmoji": self.grade_emoji,
            "deductions": [asdict(d) for d in self.deductions],
            "badges": [b.to_dict() for b in self.badges],
            "tips": list(self.tips),
            "emotionalMessage": self.emotional_message,
        }


class SafetyScorer:
    """
    Rates a driving session on a 0-100 scale.

    Deduction caps: speed at most -30 for extreme max speed, hard braking
    at most -20, rapid acceleration at most -15.
    """

    def score(self, session: DrivingSession) -> SafetyScore:
        """
        Scores a driving session.

        Args:
            session: Summary of the session

        Returns:
            SafetyScore with grade, deductions, badges and tips
        """
        deductions = self._deductions(session)
        score = 100 + sum(d.points for d in deductions)
        score = max(0, min(100, score))

        _, grade, color, emoji, message = next(g for g in GRADES if score >= g[0])

        vehicle_condition = "good" if score >= 80 else "needs work"
        badges = tuple(b for b in BADGES if b.condition(session, vehicle_condition))

        return SafetyScore(
            score=score,
            grade=grade,
            grade_color=color,
            grade_emoji=emoji,
            deductions=tuple(deductions),
            badges=badges,
            tips=self._tips(deductions),
            emotional_message=message,
        )

    def _deductions(self, session: DrivingSession) -> list[Deduction]:
        deductions = []

        if session.max_speed > 160:
            deductions.append(Deduction("Extreme speed detected (>160 km/h)", -30))
        elif session.max_speed > 120:
            penalty = _round_half_up((session.max_speed - 120) * 0.5)
            deductions.append(Deduction(f"High max speed: {session.max_speed:g} km/h", -penalty))

        if session.avg_speed > 100:
            penalty = _round_half_up((session.avg_speed - 100) * 0.3)
            deductions.append(Deduction(f"High average speed: {session.avg_speed:g} km/h", -penalty))

        if session.hard_brakes > 0:
            penalty = min(session.hard_brakes * 5, 20)
            deductions.append(Deduction(f"{session.hard_brakes} hard braking event(s)", -penalty))

        if session.rapid_accelerations > 0:
            penalty = min(session.rapid_accelerations * 3, 15)
            deductions.append(Deduction(f"{session.rapid_accelerations} rapid acceleration(s)", -penalty))

        if session.night_driving and session.avg_speed > 80:
            deductions.append(Deduction("High speed during night driving", -10))

        weather = (session.weather_condition or "").lower()
        if weather == "rain" and session.avg_speed > 70:
            deductions.append(Deduction("High speed in rainy conditions", -10))
        elif weather == "fog" and session.avg_speed > 50:
            deductions.append(Deduction("High speed in foggy conditions", -15))

        return deductions

    def _tips(self, deductions: list[Deduction]) -> tuple[str, ...]:
        tips: list[str] = []
        for deduction in deductions:
            for keyword, tip in TIPS:
                if keyword in deduction.reason and tip not in tips:
                    tips.append(tip)
        return tuple(tips)
