"""
Diagnosis log module for the AutoPulse advisory service.

This module contains the DiagnosisLog class which appends one human-readable
line per diagnosis to a persistent log file. The log is an audit trail for
operators; writing to it never affects the diagnosis itself.
"""

import logging
from pathlib import Path
from typing import Optional

from .log_entry import LogEntry

logger = logging.getLogger(__name__)


class DiagnosisLog:
    """
    Append-only, human-readable diagnosis log.

    Line format:
    [TIMESTAMP] STATUS | FAULTS | PARAMS | SUMMARY
    """

    LOG_FILE_NAME = "diagnosis_log.log"

    def __init__(self, log_dir: Optional[Path] = None) -> None:
        """
        Args:
            log_dir: Directory of the log file, "logs" by default
        """
        self.log_dir = Path(log_dir) if log_dir is not None else Path("logs")
        self.log_file = self.log_dir / self.LOG_FILE_NAME
        self._ensure_log_file_exists()

    def _ensure_log_file_exists(self) -> None:
        """Create the log directory and the file header if needed."""
        self.log_dir.mkdir(parents=True, exist_ok=True)

        if not self.log_file.exists():
            with open(self.log_file, "w", encoding="utf-8") as f:
                f.write("# AutoPulse Diagnosis Log\n")
                f.write("# Format: [TIMESTAMP] STATUS | FAULTS | PARAMS | SUMMARY\n")
                f.write("# " + "=" * 80 + "\n\n")

    def format_line(self, entry: LogEntry) -> str:
        """Renders one log entry as a single log line."""
        timestamp_str = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        return (
            f"[{timestamp_str}] {entry.result.overall_status:8s} | "
            f"Faults: {entry.result.total_faults:2d} | "
            f"Params: {entry.result.parameters_checked:2d} | "
            f"{entry.summary()}\n"
        )

    def record(self, entry: LogEntry) -> bool:
        """
        Appends a diagnosis to the log file.

        Args:
            entry: The log entry to write

        Returns:
            True if the line was written, False if the write failed
        """
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(self.format_line(entry))
        except OSError as e:
            logger.warning("Could not write diagnosis log %s: %s", self.log_file, e)
            return False
        return True
