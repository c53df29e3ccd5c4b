"""Audit logging subsystem for marcimport.

Main Components
---------------
- AuditLogger: JSONL event logger
- LogEvent: event envelope
"""

from marcimport.audit.helpers import generate_run_id
from marcimport.audit.logger import AuditLogger
from marcimport.audit.models import LEVELS, LogEvent, severity_to_level

__all__ = [
    "AuditLogger",
    "LogEvent",
    "LEVELS",
    "generate_run_id",
    "severity_to_level",
]
