"""
Tests for ExplanationService component.

Tests cover:
- Equivalence classes: known, correlation and unknown faults in mock mode
- Error scenarios: missing API key, API failures, empty responses
- Full decision path coverage: mock mode, groq mode, fallback behavior
"""

import os
import pytest
from unittest.mock import MagicMock, patch
from autopulse.explanation_service import ExplanationService
from autopulse.settings import Settings


def completion(text):
    """Builds a fake Groq chat completion carrying the given text."""
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=text))]
    return response


class TestExplanationServiceMockMode:
    """Test suite for ExplanationService in mock mode (deterministic behavior)."""

    @pytest.fixture
    def service(self):
        return ExplanationService(settings=Settings(ai_mode="mock"))

    # ==================== Equivalence Classes ====================

    def test_explain_high_severity_fault(self, service):
        """Equivalence class: HIGH fault → not safe to drive."""
        text, valid = service.explain_fault("Engine Running Hot")
        assert valid is True
        assert text.startswith("**What it means:** Engine temperature is between 105–120°C")
        assert "**Is it safe to drive?:** No" in text
        assert "**Next Steps:**" in text

    def test_explain_low_severity_fault(self, service):
        """Equivalence class: LOW fault → safe to drive with care."""
        text, valid = service.explain_fault("Engine Not Warmed Up")
        assert valid is True
        assert "**Is it safe to drive?:** Yes" in text

    def test_explain_correlation_fault(self, service):
        text, valid = service.explain_fault("Compound Risk: High Temp + Low Oil")
        assert valid is True
        assert "engine seizure" in text
        assert "**Is it safe to drive?:** No" in text

    def test_explain_upgraded_title(self, service):
        """A title carrying the context marker still finds its rule."""
        text, valid = service.explain_fault("Engine Running Hot (Upgraded due to context)")
        assert valid is True
        assert "Engine temperature is between 105–120°C" in text

    def test_explain_unknown_fault_uses_description(self, service):
        text, valid = service.explain_fault("P0420", description="Catalyst efficiency below threshold.")
        assert valid is True
        assert "**What it means:** Catalyst efficiency below threshold." in text
        assert "Unknown" in text

    def test_chat_names_top_fault(self, service):
        reply, valid = service.chat("Is my car ok?", telemetry={"engineTemp": 130, "fuelLevel": 15})
        assert valid is True
        assert reply.startswith("Heads up: Engine Overheating — Critical! (critical).")
        assert "2 issue(s)" in reply

    def test_chat_without_faults(self, service):
        reply, valid = service.chat("Hello", telemetry={"speed": 60})
        assert valid is True
        assert "look normal" in reply

    @pytest.mark.parametrize("condition, is_day, expected", [
        ("Light rain", True, "Slow down and double your following distance on wet roads."),
        ("Fog", True, "Use low-beam headlights and fog lights and keep your speed down."),
        ("Snow", True, "Drive gently and brake early, as traction is limited."),
        ("Clear", True, "Conditions look good, so drive at a steady speed and enjoy the trip."),
    ])
    def test_weather_advisory(self, service, condition, is_day, expected):
        text, valid = service.weather_advisory(20, 50, condition, is_day)
        assert valid is True
        assert text == expected

    def test_weather_advisory_at_night(self, service):
        text, _ = service.weather_advisory(20, 50, "Rain", False)
        assert text == (
            "Slow down and double your following distance on wet roads. "
            "Switch on your headlights and stay alert for pedestrians."
        )

    def test_weather_advisory_at_most_two_sentences(self, service):
        text, _ = service.weather_advisory(35, 95, "Thunderstorm", False)
        assert text.count(".") == 2

    # ==================== Error Scenarios ====================

    def test_empty_fault_code(self, service):
        assert service.explain_fault("") == (None, False)

    def test_empty_chat_message(self, service):
        assert service.chat("") == (None, False)

    def test_mode_from_environment(self):
        env = {"AUTOPULSE_AI_MODE": "mock", "GROQ_API_KEY": ""}
        with patch.dict(os.environ, env, clear=False):
            service = ExplanationService()
        assert service.mode == "mock"


class TestExplanationServiceGroqMode:
    """Test suite for ExplanationService in groq mode (mocked API)."""

    @pytest.fixture
    def groq_settings(self):
        return Settings(ai_mode="groq", groq_api_key="test-key", ai_model="test-model")

    # ==================== Decision Path Coverage ====================

    def test_explain_uses_groq(self, groq_settings):
        with patch("autopulse.explanation_service.Groq") as mock_groq:
            mock_client = MagicMock()
            mock_groq.return_value = mock_client
            mock_client.chat.completions.create.return_value = completion("**What it means:** Hot.")

            service = ExplanationService(settings=groq_settings)
            text, valid = service.explain_fault("Engine Running Hot", telemetry={"engineTemp": 110})

        assert service.mode == "groq"
        assert text == "**What it means:** Hot."
        assert valid is True
        mock_groq.assert_called_once_with(api_key="test-key")
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.3
        assert '"engineTemp": 110' in kwargs["messages"][0]["content"]

    def test_chat_includes_history(self, groq_settings):
        with patch("autopulse.explanation_service.Groq") as mock_groq:
            mock_client = MagicMock()
            mock_groq.return_value = mock_client
            mock_client.chat.completions.create.return_value = completion("Check your oil.")

            service = ExplanationService(settings=groq_settings)
            history = [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello!"}]
            reply, valid = service.chat("What now?", history=history)

        assert (reply, valid) == ("Check your oil.", True)
        prompt = mock_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert "CONVERSATION HISTORY:\nUser: Hi\nAutoPulse AI: Hello!" in prompt
        assert prompt.endswith("User: What now?\nAutoPulse AI:")

    def test_weather_advisory_stripped(self, groq_settings):
        with patch("autopulse.explanation_service.Groq") as mock_groq:
            mock_client = MagicMock()
            mock_groq.return_value = mock_client
            mock_client.chat.completions.create.return_value = completion("  Drive slowly.\n")

            service = ExplanationService(settings=groq_settings)
            assert service.weather_advisory(10, 80, "Rain", True) == ("Drive slowly.", True)

    # ==================== Error Scenarios ====================

    def test_missing_api_key_falls_back_to_mock(self):
        """Error scenario: groq mode without a key uses mock mode."""
        service = ExplanationService(settings=Settings(ai_mode="groq"))
        assert service.mode == "mock"
        text, valid = service.explain_fault("Fuel Level Low")
        assert valid is True

    def test_client_init_failure_falls_back_to_mock(self, groq_settings):
        with patch("autopulse.explanation_service.Groq", side_effect=Exception("bad key")):
            service = ExplanationService(settings=groq_settings)
        assert service.mode == "mock"

    def test_api_failure_falls_back_to_mock_text(self, groq_settings):
        """Error scenario: API exception → deterministic explanation."""
        with patch("autopulse.explanation_service.Groq") as mock_groq:
            mock_client = MagicMock()
            mock_groq.return_value = mock_client
            mock_client.chat.completions.create.side_effect = Exception("API down")

            service = ExplanationService(settings=groq_settings)
            text, valid = service.explain_fault("Engine Running Hot")

        assert valid is True
        assert "**Is it safe to drive?:** No" in text

    def test_empty_response_falls_back_to_mock_text(self, groq_settings):
        with patch("autopulse.explanation_service.Groq") as mock_groq:
            mock_client = MagicMock()
            mock_groq.return_value = mock_client
            mock_client.chat.completions.create.return_value = completion("   ")

            service = ExplanationService(settings=groq_settings)
            reply, valid = service.chat("Hello", telemetry={})

        assert valid is True
        assert "look normal" in reply
