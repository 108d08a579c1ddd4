"""Audit logging for assembly runs.

Main Components
---------------
- AuditLogger: JSONL event logger
- generate_run_id: Unique run identifiers
"""

from bibnorm.audit.helpers import generate_run_id
from bibnorm.audit.logger import AuditLogger
from bibnorm.audit.models import LogEvent

__all__ = ["AuditLogger", "LogEvent", "generate_run_id"]
