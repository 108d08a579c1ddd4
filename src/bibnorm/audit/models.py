"""Event records written by the audit logger."""

import json
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

__all__ = ["LogEvent", "LogLevel"]


class LogLevel(StrEnum):
    """Severity of an audit event."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


@dataclass(frozen=True)
class LogEvent:
    """One line of the event log.

    ``stage`` names the assembly stage the event belongs to and
    ``entry_id`` the citation key it concerns; both are null for run-level
    events.
    """

    ts: str
    run_id: str
    level: LogLevel
    event: str
    data: dict[str, Any] = field(default_factory=dict)
    stage: str | None = None
    entry_id: str | None = None

    def to_json(self) -> str:
        """Serialize as a compact single-line JSON object."""
        record = asdict(self)
        record["level"] = str(self.level)
        return json.dumps(record, ensure_ascii=False, separators=(",", ":"))
