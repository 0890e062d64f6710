"""
Settings module for the AutoPulse advisory service.

Configuration is read from environment variables. A .env file in the working
directory is loaded first when present, so local setups can keep the Groq API
key and the logging options out of the shell profile.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .diagnosis_result import VerdictPolicy


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration of the advisory service.

    Attributes:
        ai_mode: "mock" (offline, deterministic) or "groq"
        groq_api_key: API key for Groq, required in groq mode
        ai_model: Model name used for Groq chat completions
        verdict_policy: How the overall diagnosis status is derived
        log_diagnoses: Whether every diagnosis is appended to the log file
        log_dir: Directory holding the diagnosis log
    """

    ai_mode: str = "mock"
    groq_api_key: Optional[str] = None
    ai_model: str = "llama-3.1-70b-versatile"
    verdict_policy: VerdictPolicy = VerdictPolicy.BANDED
    log_diagnoses: bool = False
    log_dir: Path = Path("logs")

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        """
        Reads the settings from the environment.

        Recognized variables: AUTOPULSE_AI_MODE, GROQ_API_KEY,
        AUTOPULSE_AI_MODEL, AUTOPULSE_VERDICT_POLICY, AUTOPULSE_LOG_DIAGNOSES
        and AUTOPULSE_LOG_DIR. Unknown modes and policies fall back to the
        defaults.

        Args:
            load_dotenv_file: Load a .env file before reading the environment

        Returns:
            A Settings instance
        """
        if load_dotenv_file:
            load_dotenv()

        ai_mode = os.getenv("AUTOPULSE_AI_MODE", "").lower()
        if ai_mode not in ("mock", "groq"):
            ai_mode = "mock"

        try:
            verdict_policy = VerdictPolicy(os.getenv("AUTOPULSE_VERDICT_POLICY", "banded").lower())
        except ValueError:
            verdict_policy = VerdictPolicy.BANDED

        return cls(
            ai_mode=ai_mode,
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            ai_model=os.getenv("AUTOPULSE_AI_MODEL", cls.ai_model),
            verdict_policy=verdict_policy,
            log_diagnoses=_env_flag("AUTOPULSE_LOG_DIAGNOSES"),
            log_dir=Path(os.getenv("AUTOPULSE_LOG_DIR", "logs")),
        )
