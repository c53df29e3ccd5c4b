"""Structured audit logger for JSONL event logging.

Provides append-only structured event logging to JSONL files with
a persistent file handle. Events below the configured minimum level are
dropped before they reach the file.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from marcimport.audit.models import LEVELS, LogEvent, severity_to_level
from marcimport.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Writes structured log events to a JSONL file (one JSON object per line).
    Events are append-only and flushed after each write.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    min_level : str
        Lowest level written ("DEBUG", "INFO", "WARN", "ERROR").
    current_stage : str | None
        Current stage name for context.
    """

    def __init__(self, run_id: str, log_path: Path, min_level: str = "INFO") -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        run_id : str
            Unique run identifier.
        log_path : Path
            Path to JSONL log file.
        min_level : str, optional
            Lowest level written, by default "INFO".

        Raises
        ------
        ValueError
            If ``min_level`` is not a known level.
        """
        if min_level not in LEVELS:
            raise ValueError(f"min_level must be one of {LEVELS}, got {min_level!r}")

        self.run_id = run_id
        self.log_path = log_path
        self.min_level = min_level
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set current stage context."""
        self.current_stage = stage

    def is_enabled(self, level: str) -> bool:
        """Whether events at ``level`` are written."""
        return LEVELS.index(level) >= LEVELS.index(self.min_level)

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "record_inserted").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        stage : str | None, optional
            Stage identifier, uses current_stage if not provided.
        rid : str | None, optional
            Natural key if event is record-specific.
        """
        if not self.is_enabled(level):
            return

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data if data is not None else {},
            stage=stage if stage is not None else self.current_stage,
            rid=rid,
        )

        json.dump(asdict(log_event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def log(
        self,
        severity: int,
        message: str,
        *,
        event_type: str = "message",
        data: dict[str, Any] | None = None,
        rid: str | None = None,
    ) -> None:
        """Write a free-text message with a numeric severity.

        Parameters
        ----------
        severity : int
            1 = error, 2 = warning, 3 = informational.
        message : str
            Message text, stored under ``data["message"]``.
        event_type : str, optional
            Event type identifier, "message" by default.
        data : dict[str, Any] | None, optional
            Extra payload written alongside the message.
        rid : str | None, optional
            Natural key if the message is record-specific.
        """
        payload = dict(data) if data else {}
        payload["message"] = message
        self.event(event_type, data=payload, level=severity_to_level(severity), rid=rid)

    def file_started(self, path: str, institution_code: str, file_id: int) -> None:
        """Log file_started event."""
        self.set_stage("load")
        self.event(
            "file_started",
            data={"path": path, "institution_code": institution_code, "file_id": file_id},
        )

    def file_finished(self, path: str, status: str, counters: dict[str, int]) -> None:
        """Log file_finished event.

        Parameters
        ----------
        path : str
            Loaded file.
        status : str
            "success" or "failed".
        counters : dict[str, int]
            Per-file counters from the load result.
        """
        self.event(
            "file_finished",
            data={"path": path, "status": status, "counters": counters},
            level="INFO" if status == "success" else "ERROR",
        )
        self.set_stage(None)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Log error event.

        Parameters
        ----------
        exception_class : str
            Exception class name.
        message : str
            Error message.
        stage : str | None, optional
            Stage where error occurred.
        rid : str | None, optional
            Natural key if error is record-specific.
        """
        self.event(
            "error",
            data={"exception_class": exception_class, "message": message},
            stage=stage,
            rid=rid,
            level="ERROR",
        )
