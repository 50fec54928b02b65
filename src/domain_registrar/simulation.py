"""
In-memory registry and DNS service.

SimulatedRegistry implements both RegistryClient and DnsClient without any
network access. It backs the CLI's --dry-run mode and serves as the test
double: operation status sequences are scriptable and any remote call can
be made to fail.
"""

import itertools
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, Optional

from .config import REGISTRAR_ZONE_COMMENT
from .enums import OperationStatus
from .exceptions import DomainNotFoundError, RemoteServiceError
from .models import (
    AvailabilityResult,
    ContactDetail,
    DomainRecord,
    HostedZone,
    OperationDetail,
    OperationHandle,
    RegistrationRequest,
    ResourceRecord,
    TldPrice,
)

DEFAULT_PRICES = {
    "com": TldPrice(
        tld="com",
        currency="USD",
        registration_price=15.0,
        renewal_price=15.0,
        transfer_price=15.0,
        change_ownership_price=0.0,
        restoration_price=71.0,
    ),
}

SIMULATED_NAMESERVERS = [
    "ns-1.awsdns-sim.com",
    "ns-2.awsdns-sim.net",
    "ns-3.awsdns-sim.org",
    "ns-4.awsdns-sim.co.uk",
]


@dataclass
class _SimulatedOperation:
    request: RegistrationRequest
    statuses: list[OperationStatus]
    polls: int = 0
    applied: bool = False


def _zone_sort_key(name: str) -> tuple[str, ...]:
    # Route 53 lists zones ordered by their labels reversed
    return tuple(reversed(name.lower().rstrip(".").split(".")))


def _add_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


@dataclass
class SimulatedRegistry:
    """
    Deterministic stand-in for the registrar and DNS APIs.

    Args:
        status_sequence: Statuses returned by successive polls of a
            registration; the last one repeats
        status_messages: Optional remote message per status
        failures: Method name -> error raised on every call to that method
        registrar_comment: Comment placed on auto-created zones
    """

    status_sequence: list[OperationStatus] = field(
        default_factory=lambda: [OperationStatus.SUCCESSFUL]
    )
    status_messages: dict[OperationStatus, str] = field(default_factory=dict)
    failures: dict[str, RemoteServiceError] = field(default_factory=dict)
    registrar_comment: str = REGISTRAR_ZONE_COMMENT
    prices: dict[str, TldPrice] = field(default_factory=lambda: dict(DEFAULT_PRICES))

    domains: dict[str, DomainRecord] = field(default_factory=dict)
    zones: dict[str, HostedZone] = field(default_factory=dict)
    records: dict[str, list[ResourceRecord]] = field(default_factory=dict)
    operations: dict[str, _SimulatedOperation] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._ids = itertools.count(1)

    # -- test helpers ---------------------------------------------------

    def fail(self, method: str, message: str = "simulated failure",
             code: str = "InternalFailure") -> None:
        """Make every later call to `method` raise RemoteServiceError."""
        self.failures[method] = RemoteServiceError(code=code, message=message)

    def add_zone(
        self,
        name: str,
        private: bool = False,
        comment: Optional[str] = REGISTRAR_ZONE_COMMENT,
        record_types: Iterable[str] = ("NS", "SOA"),
    ) -> HostedZone:
        """Create a hosted zone with one record per given type."""
        zone_id = f"Z{next(self._ids):012d}"
        fqdn = name if name.endswith(".") else name + "."
        zone = HostedZone(zone_id=zone_id, name=fqdn, private=private, comment=comment)
        self.zones[zone_id] = zone
        self.records[zone_id] = [ResourceRecord(name=fqdn, record_type=t) for t in record_types]
        return zone

    def count_calls(self, method: str) -> int:
        return self.calls.count(method)

    def _enter(self, method: str) -> None:
        self.calls.append(method)
        error = self.failures.get(method)
        if error is not None:
            raise error

    def _require_domain(self, domain_name: str) -> DomainRecord:
        record = self.domains.get(domain_name.lower())
        if record is None:
            raise DomainNotFoundError(
                code="InvalidInput",
                message=f"Domain {domain_name} not found in account",
                details={"domain": domain_name},
            )
        return record

    def _complete_registration(self, request: RegistrationRequest) -> None:
        now = datetime.now(timezone.utc).replace(microsecond=0)
        name = request.domain_name.lower()
        self.domains[name] = DomainRecord(
            domain_name=name,
            status_list=["clientTransferProhibited"],
            creation_date=now,
            expiration_date=_add_years(now, request.duration_years),
            nameservers=list(SIMULATED_NAMESERVERS),
            auto_renew=request.auto_renew,
            admin_contact=request.admin_contact,
            registrant_contact=request.registrant_contact,
            tech_contact=request.tech_contact,
            admin_privacy=request.admin_privacy,
            registrant_privacy=request.registrant_privacy,
            tech_privacy=request.tech_privacy,
        )
        if not any(z.name == name + "." for z in self.zones.values()):
            self.add_zone(name, comment=self.registrar_comment)

    # -- RegistryClient -------------------------------------------------

    async def register_domain(self, request: RegistrationRequest) -> OperationHandle:
        self._enter("register_domain")
        operation_id = f"op-{next(self._ids):08d}"
        self.operations[operation_id] = _SimulatedOperation(
            request=request,
            statuses=list(self.status_sequence) or [OperationStatus.SUCCESSFUL],
        )
        return OperationHandle(operation_id=operation_id)

    async def get_operation_detail(self, handle: OperationHandle) -> OperationDetail:
        self._enter("get_operation_detail")
        operation = self.operations.get(handle.operation_id)
        if operation is None:
            raise RemoteServiceError(
                code="InvalidInput",
                message=f"Unknown operation {handle.operation_id}",
            )

        index = min(operation.polls, len(operation.statuses) - 1)
        status = operation.statuses[index]
        operation.polls += 1

        if status == OperationStatus.SUCCESSFUL and not operation.applied:
            self._complete_registration(operation.request)
            operation.applied = True

        return OperationDetail(status=status, message=self.status_messages.get(status))

    async def set_nameservers(self, domain_name: str, nameservers: list[str]) -> None:
        self._enter("set_nameservers")
        record = self._require_domain(domain_name)
        record.nameservers = list(nameservers)

    async def get_domain_record(self, domain_name: str) -> DomainRecord:
        self._enter("get_domain_record")
        record = self._require_domain(domain_name)
        return replace(
            record,
            status_list=list(record.status_list),
            nameservers=list(record.nameservers),
        )

    async def enable_auto_renew(self, domain_name: str) -> None:
        self._enter("enable_auto_renew")
        self._require_domain(domain_name).auto_renew = True

    async def disable_auto_renew(self, domain_name: str) -> None:
        self._enter("disable_auto_renew")
        self._require_domain(domain_name).auto_renew = False

    async def update_contacts(
        self,
        domain_name: str,
        admin_contact: Optional[ContactDetail],
        registrant_contact: Optional[ContactDetail],
        tech_contact: Optional[ContactDetail],
    ) -> None:
        self._enter("update_contacts")
        record = self._require_domain(domain_name)
        if admin_contact is not None:
            record.admin_contact = admin_contact
        if registrant_contact is not None:
            record.registrant_contact = registrant_contact
        if tech_contact is not None:
            record.tech_contact = tech_contact

    async def update_contact_privacy(
        self,
        domain_name: str,
        admin_privacy: bool,
        registrant_privacy: bool,
        tech_privacy: bool,
    ) -> None:
        self._enter("update_contact_privacy")
        record = self._require_domain(domain_name)
        record.admin_privacy = admin_privacy
        record.registrant_privacy = registrant_privacy
        record.tech_privacy = tech_privacy

    async def renew_domain(
        self, domain_name: str, duration_years: int, current_expiry_year: int
    ) -> OperationHandle:
        self._enter("renew_domain")
        record = self._require_domain(domain_name)
        if record.expiration_date is None or record.expiration_date.year != current_expiry_year:
            raise RemoteServiceError(
                code="InvalidInput",
                message="CurrentExpiryYear does not match the domain's expiry year",
            )
        record.expiration_date = _add_years(record.expiration_date, duration_years)
        return OperationHandle(operation_id=f"op-{next(self._ids):08d}")

    async def delete_domain(self, domain_name: str) -> None:
        self._enter("delete_domain")
        self._require_domain(domain_name)
        del self.domains[domain_name.lower()]

    async def check_availability(self, domain_name: str) -> AvailabilityResult:
        self._enter("check_availability")
        taken = domain_name.lower() in self.domains
        availability = "UNAVAILABLE" if taken else "AVAILABLE"
        return AvailabilityResult(
            domain_name=domain_name,
            availability=availability,
            available=not taken,
        )

    async def get_tld_price(self, tld: str) -> TldPrice:
        self._enter("get_tld_price")
        key = tld.lower().lstrip(".")
        if key not in self.prices:
            raise RemoteServiceError(
                code="TldNotFound",
                message=f"No pricing information found for TLD: {key}",
                details={"tld": key},
            )
        return self.prices[key]

    # -- DnsClient ------------------------------------------------------

    async def list_zones_by_name(self, dns_name: str, max_items: int) -> list[HostedZone]:
        self._enter("list_zones_by_name")
        start = _zone_sort_key(dns_name)
        ordered = sorted(self.zones.values(), key=lambda z: _zone_sort_key(z.name))
        return [z for z in ordered if _zone_sort_key(z.name) >= start][:max_items]

    async def list_records(self, zone_id: str) -> list[ResourceRecord]:
        self._enter("list_records")
        if zone_id not in self.zones:
            raise RemoteServiceError(code="NoSuchHostedZone", message=f"No zone {zone_id}")
        return list(self.records.get(zone_id, []))

    async def delete_zone(self, zone_id: str) -> None:
        self._enter("delete_zone")
        if zone_id not in self.zones:
            raise RemoteServiceError(code="NoSuchHostedZone", message=f"No zone {zone_id}")
        del self.zones[zone_id]
        self.records.pop(zone_id, None)
