"""Data models for audit logging."""

from dataclasses import dataclass
from typing import Any

__all__ = ["LEVELS", "SEVERITY_ERROR", "SEVERITY_INFO", "LogEvent", "severity_to_level"]

# Ordered from most to least verbose
LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARN", "ERROR")

# Numeric severities accepted by AuditLogger.log()
SEVERITY_ERROR = 1
SEVERITY_INFO = 3

_SEVERITY_LEVELS: dict[int, str] = {1: "ERROR", 2: "WARN", 3: "INFO"}


def severity_to_level(severity: int) -> str:
    """Map a numeric severity to a level name, DEBUG for anything above 3."""
    return _SEVERITY_LEVELS.get(severity, "DEBUG" if severity > 3 else "ERROR")


@dataclass
class LogEvent:
    """Structured log event.

    Attributes
    ----------
    ts : str
        ISO8601 timestamp with microseconds (UTC).
    run_id : str
        Unique run identifier.
    level : str
        Log level ("DEBUG", "INFO", "WARN", "ERROR").
    event : str
        Event type identifier.
    data : dict[str, Any]
        Event-specific data payload.
    stage : str | None
        Current stage identifier.
    rid : str | None
        Natural key (001) if the event is record-specific.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    stage: str | None = None
    rid: str | None = None
