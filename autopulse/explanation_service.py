"""
Explanation service module for the AutoPulse advisory service.

This module contains the ExplanationService class which turns faults and
telemetry into plain-language text for the driver. Supports two modes:
- "mock": Deterministic text assembled from the rule tables (offline, always available)
- "groq": Real LLM integration via the Groq API (requires GROQ_API_KEY)

Every operation returns a (text, valid) tuple. In groq mode a failed call
falls back to the mock text, so callers only see (None, False) when the
input itself is unusable.
"""

import json
import logging
from typing import Any, Mapping, Optional, Sequence

from groq import Groq

from .correlation_rules import CORRELATION_RULES
from .fault_detector import detect_faults
from .fault_rules import PARAMETER_RULES
from .settings import Settings
from .severity import SeverityLevel

logger = logging.getLogger(__name__)


class ExplanationService:
    """
    Service producing driver-facing explanations, chat replies and weather advisories.

    Mode is selected via the constructor parameter or the AUTOPULSE_AI_MODE
    setting. If mode is "groq" but the API key is missing or the client
    cannot be created, the service falls back to mock mode.
    """

    EXPLAIN_TEMPERATURE = 0.3
    CHAT_TEMPERATURE = 0.5
    ADVISORY_TEMPERATURE = 0.4

    def __init__(self, mode: Optional[str] = None, settings: Optional[Settings] = None):
        """
        Initialize the service with the specified mode or from settings.

        Args:
            mode: Optional mode override ("mock" or "groq")
            settings: Service settings; read from the environment if None
        """
        settings = settings or Settings.from_env()
        self.mode = mode.lower() if mode else settings.ai_mode
        self.model = settings.ai_model

        self._groq_client = None
        if self.mode == "groq":
            self._groq_client = self._init_groq_client(settings.groq_api_key)
            if self._groq_client is None:
                self.mode = "mock"
                logger.warning("ExplanationService: groq mode requested but unavailable, using mock mode")

    def _init_groq_client(self, api_key: Optional[str]):
        """
        Initialize the Groq client.

        Returns:
            Groq client instance if successful, None otherwise
        """
        if not api_key:
            logger.warning("ExplanationService: GROQ_API_KEY not set")
            return None
        try:
            return Groq(api_key=api_key)
        except Exception as e:
            logger.warning("ExplanationService: failed to initialize Groq client: %s", e)
            return None

    # ------------------------------------------------------------------ explain

    def explain_fault(
        self,
        fault_code: str,
        description: Optional[str] = None,
        telemetry: Optional[Mapping[str, Any]] = None,
    ) -> tuple[Optional[str], bool]:
        """
        Explains a fault in plain English.

        The answer has three parts: what the fault means, whether it is safe
        to keep driving, and the next steps.

        Args:
            fault_code: Fault title or code reported by the dashboard
            description: Optional description or context of the fault
            telemetry: Optional current telemetry readings

        Returns:
            A tuple containing:
            - Optional[str]: The explanation, or None if fault_code is empty
            - bool: True if the explanation is valid
        """
        if not fault_code:
            return (None, False)

        if self.mode == "groq":
            prompt = (
                "You are an expert, reassuring automotive AI mechanic named AutoPulse AI.\n"
                f'A vehicle just reported the following fault: "{fault_code}".\n'
                f'Context/Description: "{description or "No context provided"}"\n'
                f"Current Telemetry Data: {json.dumps(dict(telemetry or {}))}\n\n"
                "Please explain this fault to the driver in plain English. "
                "Do NOT use overly technical jargon without explaining it.\n"
                "Provide a 3-part response formatted exactly like this:\n\n"
                "**What it means:** (1-2 sentences explaining what the fault is)\n"
                "**Is it safe to drive?:** (Yes/No, with a 1 sentence explanation of danger level)\n"
                "**Next Steps:** (1-2 actionable steps for the driver)"
            )
            result = self._complete(prompt, self.EXPLAIN_TEMPERATURE)
            if result[1]:
                return result
        return self._explain_fault_mock(fault_code, description)

    def _explain_fault_mock(self, fault_code: str, description: Optional[str]) -> tuple[Optional[str], bool]:
        """
        Mock implementation: looks the fault up in the rule tables.

        Unknown faults are explained from the supplied description.
        """
        entry = self._find_rule_text(fault_code)
        if entry is None:
            meaning = description or f"The vehicle reported: {fault_code}."
            safety = "Unknown — drive carefully and have the vehicle checked if the warning persists."
            steps = "Note when the warning appears and share it with your mechanic."
        else:
            severity, rule_description, fix = entry
            meaning = rule_description
            if severity.level >= SeverityLevel.HIGH.level:
                safety = f"No — this is a {severity.label}-severity condition that can get worse quickly."
            else:
                safety = f"Yes — this is a {severity.label}-severity condition, but do not ignore it."
            steps = fix

        text = (
            f"**What it means:** {meaning}\n"
            f"**Is it safe to drive?:** {safety}\n"
            f"**Next Steps:** {steps}"
        )
        return (text, True)

    def _find_rule_text(self, fault_code: str) -> Optional[tuple[SeverityLevel, str, str]]:
        needle = fault_code.lower()
        for rule in PARAMETER_RULES:
            for check in rule.checks:
                if needle in check.title.lower() or check.title.lower() in needle:
                    return (check.severity, check.description, check.fix)
        for correlation in CORRELATION_RULES:
            if needle in correlation.title.lower() or correlation.title.lower() in needle:
                return (correlation.severity, correlation.description, correlation.fix)
        return None

    # --------------------------------------------------------------------- chat

    def chat(
        self,
        message: str,
        telemetry: Optional[Mapping[str, Any]] = None,
        history: Optional[Sequence[Mapping[str, str]]] = None,
    ) -> tuple[Optional[str], bool]:
        """
        Answers a driver's question, using their telemetry when relevant.

        Args:
            message: The driver's message
            telemetry: Optional current telemetry readings
            history: Previous turns as {"role": "user"|"assistant", "content": str}

        Returns:
            Tuple of (reply, valid)
        """
        if not message:
            return (None, False)

        if self.mode == "groq":
            conversation = "\n".join(
                f"{'User' if turn.get('role') == 'user' else 'AutoPulse AI'}: {turn.get('content', '')}"
                for turn in (history or [])
            )
            prompt = (
                "You are AutoPulse AI, an automotive expert and vehicle companion.\n"
                "You have real-time access to the user's vehicle telemetry data:\n"
                f"{json.dumps(dict(telemetry or {}), indent=2)}\n\n"
                "RULES:\n"
                "- Answer vehicle and automotive questions thoroughly.\n"
                "- If the telemetry shows a dangerous condition, proactively warn the user.\n"
                "- If a question is unrelated to vehicles, politely redirect.\n"
                "- Keep answers concise (3-5 sentences) unless asked for more detail.\n\n"
                + (f"CONVERSATION HISTORY:\n{conversation}\n\n" if conversation else "")
                + f"User: {message}\nAutoPulse AI:"
            )
            result = self._complete(prompt, self.CHAT_TEMPERATURE)
            if result[1]:
                return result
        return self._chat_mock(telemetry)

    def _chat_mock(self, telemetry: Optional[Mapping[str, Any]]) -> tuple[Optional[str], bool]:
        """Mock implementation: summarizes the diagnosis of the current telemetry."""
        result = detect_faults(telemetry or {})
        top = result.top_fault
        if top is None:
            return ("Your readings look normal right now. Ask me anything about your vehicle!", True)
        reply = (
            f"Heads up: {top.title} ({top.severity.label}). {top.fix} "
            f"I found {result.total_faults} issue(s) in your current readings."
        )
        return (reply, True)

    # ------------------------------------------------------------------ weather

    def weather_advisory(
        self,
        temperature: Optional[float],
        humidity: Optional[float],
        condition: str,
        is_day: bool,
    ) -> tuple[Optional[str], bool]:
        """
        Produces a one or two sentence driving recommendation for the weather.

        Args:
            temperature: Air temperature in Celsius
            humidity: Relative humidity in percent
            condition: Weather condition description (e.g. "Rain")
            is_day: True during daytime

        Returns:
            Tuple of (advisory, valid)
        """
        if self.mode == "groq":
            prompt = (
                "You are an expert automotive and road safety AI.\n"
                "Current weather conditions:\n"
                f"- Temperature: {temperature}°C\n"
                f"- Humidity: {humidity}%\n"
                f"- Condition: {condition}\n"
                f"- Time: {'Daytime' if is_day else 'Nighttime'}\n\n"
                "Provide a highly concise, 1-2 sentence recommendation for driving under these exact "
                "conditions. Focus on vehicle settings and driving behavior. Plain text only."
            )
            result = self._complete(prompt, self.ADVISORY_TEMPERATURE)
            if result[1]:
                return (result[0].strip(), True)
        return self._weather_advisory_mock(temperature, humidity, condition, is_day)

    def _weather_advisory_mock(self, temperature, humidity, condition, is_day) -> tuple[Optional[str], bool]:
        condition = (condition or "").lower()
        advice = []
        if any(word in condition for word in ("rain", "storm", "drizzle", "thunder")):
            advice.append("Slow down and double your following distance on wet roads.")
        elif any(word in condition for word in ("fog", "mist", "haze")):
            advice.append("Use low-beam headlights and fog lights and keep your speed down.")
        elif "snow" in condition or "ice" in condition:
            advice.append("Drive gently and brake early, as traction is limited.")
        if not is_day:
            advice.append("Switch on your headlights and stay alert for pedestrians.")
        if temperature is not None and temperature > 30:
            advice.append("Use the A/C to stay alert and watch the engine temperature gauge.")
        elif temperature is not None and temperature < 5:
            advice.append("Turn on the defogger before setting off.")
        if humidity is not None and humidity > 85 and len(advice) < 2:
            advice.append("Keep the windshield clear with the defogger.")
        if not advice:
            advice.append("Conditions look good, so drive at a steady speed and enjoy the trip.")
        return (" ".join(advice[:2]), True)

    # ------------------------------------------------------------------- groq

    def _complete(self, prompt: str, temperature: float) -> tuple[Optional[str], bool]:
        """
        Sends a prompt to the Groq chat completions API.

        Returns:
            Tuple of (response text, valid), or (None, False) if the call
            failed or returned nothing
        """
        if self._groq_client is None:
            return (None, False)

        try:
            chat_completion = self._groq_client.chat.completions.create(
                messages=[{"role": "user", "content": prompt}],
                model=self.model,
                temperature=temperature,
            )
            text = chat_completion.choices[0].message.content
        except Exception as e:
            logger.warning("ExplanationService: Groq API call failed: %s", e)
            return (None, False)

        if not text or not text.strip():
            logger.warning("ExplanationService: Groq returned an empty response")
            return (None, False)
        return (text, True)
