"""
Remote service interfaces consumed by the orchestrator and the zone guard.

Implementations must raise RemoteServiceError (or DomainNotFoundError when
the registry reports the domain does not exist) and nothing else for
remote failures.
"""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

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


@runtime_checkable
class RegistryClient(Protocol):
    """Operations of the domain registry (registrar) API."""

    @abstractmethod
    async def register_domain(self, request: RegistrationRequest) -> OperationHandle:
        """Submit a registration; returns the handle of the async operation."""
        ...

    @abstractmethod
    async def get_operation_detail(self, handle: OperationHandle) -> OperationDetail:
        """Fetch the current status of an operation."""
        ...

    @abstractmethod
    async def set_nameservers(self, domain_name: str, nameservers: list[str]) -> None:
        ...

    @abstractmethod
    async def get_domain_record(self, domain_name: str) -> DomainRecord:
        ...

    @abstractmethod
    async def enable_auto_renew(self, domain_name: str) -> None:
        ...

    @abstractmethod
    async def disable_auto_renew(self, domain_name: str) -> None:
        ...

    @abstractmethod
    async def update_contacts(
        self,
        domain_name: str,
        admin_contact: Optional[ContactDetail],
        registrant_contact: Optional[ContactDetail],
        tech_contact: Optional[ContactDetail],
    ) -> None:
        ...

    @abstractmethod
    async def update_contact_privacy(
        self,
        domain_name: str,
        admin_privacy: bool,
        registrant_privacy: bool,
        tech_privacy: bool,
    ) -> None:
        ...

    @abstractmethod
    async def renew_domain(
        self, domain_name: str, duration_years: int, current_expiry_year: int
    ) -> OperationHandle:
        ...

    @abstractmethod
    async def delete_domain(self, domain_name: str) -> None:
        ...

    @abstractmethod
    async def check_availability(self, domain_name: str) -> AvailabilityResult:
        ...

    @abstractmethod
    async def get_tld_price(self, tld: str) -> TldPrice:
        ...


@runtime_checkable
class DnsClient(Protocol):
    """Operations of the DNS hosted-zone API."""

    @abstractmethod
    async def list_zones_by_name(self, dns_name: str, max_items: int) -> list[HostedZone]:
        """
        List zones starting at dns_name in DNS order.

        May return zones whose names merely share the prefix.
        """
        ...

    @abstractmethod
    async def list_records(self, zone_id: str) -> list[ResourceRecord]:
        ...

    @abstractmethod
    async def delete_zone(self, zone_id: str) -> None:
        ...
