"""JSONL event log for assembly runs.

Every call appends one JSON object to the log file and flushes it, so a
crashed run still leaves a readable log up to the failure.
"""

from collections import Counter
from pathlib import Path
from typing import Any

from bibnorm.audit.models import LogEvent, LogLevel
from bibnorm.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """Append-only writer of run, stage, and per-entry events.

    Attributes
    ----------
    run_id : str
        Identifier stamped on every event.
    log_path : Path
        JSONL file the events go to.
    current_stage : str | None
        Stage attached to events that do not name one.
    level_counts : Counter[str]
        Number of events written per level; reported in ``run_finished``.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        self.run_id = run_id
        self.log_path = log_path
        self.current_stage: str | None = None
        self.level_counts: Counter[str] = Counter()

        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the log file; safe to call more than once."""
        if not self._handle.closed:
            self._handle.close()

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        entry_id: str | None = None,
    ) -> None:
        """Append one event.

        Parameters
        ----------
        event_type : str
            Event name, e.g. ``"entry_assembled"``.
        data : dict[str, Any] | None, optional
            JSON-serializable payload.
        level : str, optional
            One of DEBUG, INFO, WARN, ERROR, by default INFO.
        stage : str | None, optional
            Stage name, by default ``current_stage``.
        entry_id : str | None, optional
            Citation key the event concerns.

        Raises
        ------
        ValueError
            If ``level`` is not a known log level.
        """
        try:
            severity = LogLevel(level)
        except ValueError:
            raise ValueError(f"Unknown log level: {level!r}") from None

        record = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=severity,
            event=event_type,
            data=data or {},
            stage=stage if stage is not None else self.current_stage,
            entry_id=entry_id,
        )
        self._handle.write(record.to_json() + "\n")
        self._handle.flush()
        self.level_counts[severity] += 1

    # Run lifecycle

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        self.event("run_started", data={"command": command, "parameters": parameters})

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        entries_processed: int | None = None,
    ) -> None:
        """Record the end of a run.

        ``status`` is ``"success"``, ``"partial"`` (some entries failed) or
        ``"failed"``. The payload also carries the per-level event counts
        written so far.
        """
        data: dict[str, Any] = {
            "status": status,
            "duration_seconds": duration_seconds,
            "events_by_level": {str(level): n for level, n in sorted(self.level_counts.items())},
        }
        if entries_processed is not None:
            data["entries_processed"] = entries_processed
        self.event("run_finished", data=data)

    # Stage lifecycle

    def stage_started(self, stage: str, expected_entries: int | None = None) -> None:
        """Enter a stage; later events inherit it until ``stage_finished``."""
        self.current_stage = stage
        data = {} if expected_entries is None else {"expected_entries": expected_entries}
        self.event("stage_started", data=data, stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        data: dict[str, Any] = {"duration_seconds": duration_seconds}
        if counters:
            data["counters"] = dict(counters)
        self.event("stage_finished", data=data, stage=stage)
        self.current_stage = None

    # Per-entry events

    def entry_assembled(self, entry_id: str, field_count: int) -> None:
        self.event(
            "entry_assembled", data={"field_count": field_count}, level="DEBUG", entry_id=entry_id
        )

    def field_unresolved(self, entry_id: str, message: str) -> None:
        """Record a field dropped because its macros could not be resolved."""
        self._entry_warning("field_unresolved", entry_id, message)

    def malformed_braces(self, entry_id: str, message: str) -> None:
        """Record a brace-balance fallback while normalizing an entry."""
        self._entry_warning("malformed_braces", entry_id, message)

    def _entry_warning(self, event_type: str, entry_id: str, message: str) -> None:
        self.event(event_type, data={"message": message}, level="WARN", entry_id=entry_id)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        entry_id: str | None = None,
    ) -> None:
        """Record a failure.

        Parameters
        ----------
        exception_class : str
            Name of the exception type, e.g. ``"UnknownMacroError"``.
        message : str
            Exception message.
        stage : str | None, optional
            Stage name, by default ``current_stage``.
        entry_id : str | None, optional
            Citation key of the failed entry, if any.
        """
        self.event(
            "error",
            data={"exception_class": exception_class, "message": message},
            level="ERROR",
            stage=stage,
            entry_id=entry_id,
        )
