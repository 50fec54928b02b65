"""
Domain Registrar - domain registration orchestration with safe zone teardown.

This package registers domains through a registrar API, waits for the
asynchronous registration to finish within a bounded time, and deletes the
registrar's auto-created hosted zone only when doing so cannot lose data.
"""

__version__ = "0.1.0"

from domain_registrar.exceptions import (
    DomainRegistrarError,
    ValidationError,
    ConfigurationError,
    RemoteServiceError,
    DomainNotFoundError,
    RegistrationError,
    SubmitError,
    RegistryRejectedError,
    RegistrationTimeoutError,
    NameserverUpdateError,
    ReadError,
    DomainUpdateError,
    DomainDeletionError,
)
from domain_registrar.enums import (
    OperationStatus,
    RegistrationStep,
    ZoneSkipReason,
    ContactType,
    LogLevel,
)
from domain_registrar.config import (
    REGISTRAR_ZONE_COMMENT,
    PollingConfig,
    AWSConfig,
    ZoneGuardConfig,
    LoggingConfig,
    SystemConfig,
    load_config_from_file,
    load_config_from_env,
    save_config_to_file,
)
from domain_registrar.models import (
    ContactDetail,
    RegistrationRequest,
    OperationHandle,
    OperationDetail,
    DomainRecord,
    HostedZone,
    ResourceRecord,
    ZoneDeletionOutcome,
    ProvisionResult,
    DomainSnapshot,
    DomainDeletionResult,
    AvailabilityResult,
    TldPrice,
)
from domain_registrar.audit_logger import (
    AuditLogger,
    LogEntry,
)
from domain_registrar.domain_validator import (
    DomainValidator,
    DomainValidationResult,
)
from domain_registrar.poller import (
    OperationPoller,
    PollResult,
)
from domain_registrar.registry import (
    RegistryClient,
    DnsClient,
)
from domain_registrar.orchestrator import RegistrationOrchestrator
from domain_registrar.zone_guard import ZoneGuard
from domain_registrar.manager import DomainManager
from domain_registrar.simulation import SimulatedRegistry

__all__ = [
    # Exceptions
    "DomainRegistrarError",
    "ValidationError",
    "ConfigurationError",
    "RemoteServiceError",
    "DomainNotFoundError",
    "RegistrationError",
    "SubmitError",
    "RegistryRejectedError",
    "RegistrationTimeoutError",
    "NameserverUpdateError",
    "ReadError",
    "DomainUpdateError",
    "DomainDeletionError",
    # Enums
    "OperationStatus",
    "RegistrationStep",
    "ZoneSkipReason",
    "ContactType",
    "LogLevel",
    # Configuration
    "REGISTRAR_ZONE_COMMENT",
    "PollingConfig",
    "AWSConfig",
    "ZoneGuardConfig",
    "LoggingConfig",
    "SystemConfig",
    "load_config_from_file",
    "load_config_from_env",
    "save_config_to_file",
    # Models
    "ContactDetail",
    "RegistrationRequest",
    "OperationHandle",
    "OperationDetail",
    "DomainRecord",
    "HostedZone",
    "ResourceRecord",
    "ZoneDeletionOutcome",
    "ProvisionResult",
    "DomainSnapshot",
    "DomainDeletionResult",
    "AvailabilityResult",
    "TldPrice",
    # Logging
    "AuditLogger",
    "LogEntry",
    # Validation
    "DomainValidator",
    "DomainValidationResult",
    # Polling
    "OperationPoller",
    "PollResult",
    # Remote interfaces
    "RegistryClient",
    "DnsClient",
    # Components
    "RegistrationOrchestrator",
    "ZoneGuard",
    "DomainManager",
    "SimulatedRegistry",
]
