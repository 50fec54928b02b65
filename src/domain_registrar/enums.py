"""
Enumeration types for the domain registrar system.

These enums provide type-safe constants for remote operation states,
orchestration steps, zone-guard outcomes and configuration options.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status of an asynchronous registry operation."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    SUCCESSFUL = "SUCCESSFUL"
    FAILED = "FAILED"
    ERROR = "ERROR"

    @property
    def is_terminal(self) -> bool:
        return self in (
            OperationStatus.SUCCESSFUL,
            OperationStatus.FAILED,
            OperationStatus.ERROR,
        )


class RegistrationStep(Enum):
    """States of the registration orchestrator."""

    SUBMITTING = "submitting"
    POLLING = "polling"
    CONFIGURING = "configuring"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class ZoneSkipReason(Enum):
    """Why the zone guard left a hosted zone alone."""

    NOT_FOUND = "not_found"
    PRIVATE = "private"
    COMMENT_MISMATCH = "comment_mismatch"
    HAS_CUSTOM_RECORDS = "has_custom_records"
    REMOTE_ERROR = "remote_error"


class ContactType(Enum):
    """Registrant contact types accepted by the registry."""

    PERSON = "PERSON"
    COMPANY = "COMPANY"
    ASSOCIATION = "ASSOCIATION"
    PUBLIC_BODY = "PUBLIC_BODY"
    RESELLER = "RESELLER"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}
