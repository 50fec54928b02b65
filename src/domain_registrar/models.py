"""
Data models for the domain registrar system.

This module defines the registration request, the registry's view of a
domain, hosted zones and the outcome types returned by the orchestrator,
the zone guard and the lifecycle manager.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import ContactType, OperationStatus, ZoneSkipReason


@dataclass(frozen=True)
class ContactDetail:
    """Address and identity record for one domain contact."""

    first_name: str
    last_name: str
    email: str
    phone_number: str  # E.164 with a dot, e.g. +1.5551234567
    address_line_1: str
    city: str
    state: str
    zip_code: str
    country_code: str  # ISO 3166-1 alpha-2
    address_line_2: Optional[str] = None
    contact_type: ContactType = ContactType.PERSON
    organization_name: Optional[str] = None


@dataclass(frozen=True)
class RegistrationRequest:
    """Everything needed to register one domain. Immutable once submitted."""

    domain_name: str
    admin_contact: ContactDetail
    registrant_contact: ContactDetail
    tech_contact: ContactDetail
    duration_years: int = 1
    auto_renew: bool = False
    admin_privacy: bool = True
    registrant_privacy: bool = True
    tech_privacy: bool = True
    nameservers: tuple[str, ...] = ()
    timeout_seconds: Optional[float] = None  # None: use PollingConfig
    poll_interval_seconds: Optional[float] = None


@dataclass(frozen=True)
class OperationHandle:
    """Opaque identifier of an in-flight registry operation."""

    operation_id: str


@dataclass
class OperationDetail:
    """One observation of an operation's status."""

    status: OperationStatus
    message: Optional[str] = None


@dataclass
class DomainRecord:
    """The registry's view of a registered domain."""

    domain_name: str
    status_list: list[str] = field(default_factory=list)
    creation_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    nameservers: list[str] = field(default_factory=list)
    auto_renew: Optional[bool] = None
    admin_contact: Optional[ContactDetail] = None
    registrant_contact: Optional[ContactDetail] = None
    tech_contact: Optional[ContactDetail] = None
    admin_privacy: Optional[bool] = None
    registrant_privacy: Optional[bool] = None
    tech_privacy: Optional[bool] = None

    @property
    def status(self) -> Optional[str]:
        """First entry of the status list, if any."""
        return self.status_list[0] if self.status_list else None


@dataclass(frozen=True)
class HostedZone:
    """A DNS hosted zone as reported by the DNS service."""

    zone_id: str
    name: str
    private: bool = False
    comment: Optional[str] = None


@dataclass(frozen=True)
class ResourceRecord:
    """A record set inside a hosted zone."""

    name: str
    record_type: str


@dataclass
class ZoneDeletionOutcome:
    """Result of a safe-delete attempt. A skip is not a failure."""

    domain_name: str
    deleted: bool
    zone_id: Optional[str] = None
    reason: Optional[ZoneSkipReason] = None
    details: dict = field(default_factory=dict)

    @property
    def skipped(self) -> bool:
        return not self.deleted


@dataclass
class ProvisionResult:
    """Result of registering a domain and handling its auto-created zone."""

    record: DomainRecord
    hosted_zone_id: Optional[str]
    zone_outcome: Optional[ZoneDeletionOutcome] = None


@dataclass
class DomainSnapshot:
    """Current remote state of a domain, rebuilt on every read."""

    record: DomainRecord
    hosted_zone_id: Optional[str]


@dataclass
class DomainDeletionResult:
    """Result of tearing down a domain."""

    domain_name: str
    domain_deleted: bool
    zone_outcome: Optional[ZoneDeletionOutcome] = None


@dataclass
class AvailabilityResult:
    """Registry answer to an availability check."""

    domain_name: str
    availability: str
    available: bool


@dataclass
class TldPrice:
    """Registry price list entry for a TLD."""

    tld: str
    currency: Optional[str] = None
    registration_price: Optional[float] = None
    renewal_price: Optional[float] = None
    transfer_price: Optional[float] = None
    change_ownership_price: Optional[float] = None
    restoration_price: Optional[float] = None
