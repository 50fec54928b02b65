"""
AWS implementations of the registry and DNS interfaces.

Route53DomainsClient talks to the Route 53 Domains API (registrar) and
Route53ZoneClient to the Route 53 hosted-zone API, both through boto3.
boto3 is blocking, so every call runs in a worker thread via
asyncio.to_thread; botocore errors are translated into RemoteServiceError
(or DomainNotFoundError) so nothing boto-specific leaks past this module.
"""

import asyncio
from typing import Any, Callable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import AWSConfig
from .enums import ContactType, OperationStatus
from .exceptions import ConfigurationError, DomainNotFoundError, RemoteServiceError
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

HOSTED_ZONE_ID_PREFIX = "/hostedzone/"

AVAILABLE_STATES = frozenset({"AVAILABLE", "AVAILABLE_RESERVED", "AVAILABLE_PREORDER"})


def create_boto_client(service_name: str, config: AWSConfig) -> Any:
    """
    Create a boto3 client for the given service.

    Raises:
        ConfigurationError: If the session or client cannot be created
    """
    try:
        session = boto3.session.Session(profile_name=config.profile)
        return session.client(
            service_name,
            region_name=config.region,
            config=Config(
                retries={"mode": config.retry_mode, "max_attempts": config.max_attempts}
            ),
        )
    except (BotoCoreError, ClientError) as exc:
        raise ConfigurationError(
            code="aws_client_error",
            message=f"Failed to create {service_name} client: {exc}",
            details={"region": config.region, "profile": config.profile},
        ) from exc


def contact_to_aws(contact: Optional[ContactDetail]) -> Optional[dict]:
    """Convert a ContactDetail to the Route 53 Domains ContactDetail shape."""
    if contact is None:
        return None

    payload = {
        "FirstName": contact.first_name,
        "LastName": contact.last_name,
        "ContactType": contact.contact_type.value,
        "AddressLine1": contact.address_line_1,
        "City": contact.city,
        "State": contact.state,
        "CountryCode": contact.country_code,
        "ZipCode": contact.zip_code,
        "PhoneNumber": contact.phone_number,
        "Email": contact.email,
    }
    if contact.address_line_2:
        payload["AddressLine2"] = contact.address_line_2
    if contact.organization_name:
        payload["OrganizationName"] = contact.organization_name
    return payload


def contact_from_aws(data: Optional[dict]) -> Optional[ContactDetail]:
    if not data:
        return None

    try:
        contact_type = ContactType(data.get("ContactType", "PERSON"))
    except ValueError:
        contact_type = ContactType.PERSON

    return ContactDetail(
        first_name=data.get("FirstName", ""),
        last_name=data.get("LastName", ""),
        email=data.get("Email", ""),
        phone_number=data.get("PhoneNumber", ""),
        address_line_1=data.get("AddressLine1", ""),
        address_line_2=data.get("AddressLine2"),
        city=data.get("City", ""),
        state=data.get("State", ""),
        zip_code=data.get("ZipCode", ""),
        country_code=data.get("CountryCode", ""),
        contact_type=contact_type,
        organization_name=data.get("OrganizationName"),
    )


def strip_zone_id(raw_id: str) -> str:
    """'/hostedzone/Z123' -> 'Z123'."""
    if raw_id.startswith(HOSTED_ZONE_ID_PREFIX):
        return raw_id[len(HOSTED_ZONE_ID_PREFIX):]
    return raw_id


class _BotoAdapter:
    """Runs blocking boto3 calls off the event loop and maps their errors."""

    def __init__(self, boto_client: Any) -> None:
        self._boto = boto_client

    async def _call(self, func: Callable[..., Any], **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(func, **kwargs)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            code = error.get("Code", "ClientError")
            message = error.get("Message", str(exc))
            raise self._translate(code, message, kwargs) from exc
        except BotoCoreError as exc:
            raise RemoteServiceError(
                code="transport_error",
                message=str(exc),
            ) from exc

    def _translate(self, code: str, message: str, kwargs: dict) -> RemoteServiceError:
        return RemoteServiceError(code=code, message=message)


class Route53DomainsClient(_BotoAdapter):
    """RegistryClient backed by the Route 53 Domains API."""

    @classmethod
    def from_config(cls, config: AWSConfig) -> "Route53DomainsClient":
        return cls(create_boto_client("route53domains", config))

    def _translate(self, code: str, message: str, kwargs: dict) -> RemoteServiceError:
        # Unknown domains come back as InvalidInput "Domain x not found in account"
        if code == "InvalidInput" and "not found" in message.lower():
            return DomainNotFoundError(
                code=code,
                message=message,
                details={"domain": kwargs.get("DomainName")},
            )
        return RemoteServiceError(code=code, message=message)

    async def register_domain(self, request: RegistrationRequest) -> OperationHandle:
        response = await self._call(
            self._boto.register_domain,
            DomainName=request.domain_name,
            DurationInYears=request.duration_years,
            AutoRenew=request.auto_renew,
            AdminContact=contact_to_aws(request.admin_contact),
            RegistrantContact=contact_to_aws(request.registrant_contact),
            TechContact=contact_to_aws(request.tech_contact),
            PrivacyProtectAdminContact=request.admin_privacy,
            PrivacyProtectRegistrantContact=request.registrant_privacy,
            PrivacyProtectTechContact=request.tech_privacy,
        )
        return OperationHandle(operation_id=response["OperationId"])

    async def get_operation_detail(self, handle: OperationHandle) -> OperationDetail:
        response = await self._call(
            self._boto.get_operation_detail,
            OperationId=handle.operation_id,
        )
        try:
            status = OperationStatus(response.get("Status", ""))
        except ValueError as exc:
            raise RemoteServiceError(
                code="unknown_status",
                message=f"Unexpected operation status: {response.get('Status')!r}",
            ) from exc
        return OperationDetail(status=status, message=response.get("Message"))

    async def set_nameservers(self, domain_name: str, nameservers: list[str]) -> None:
        await self._call(
            self._boto.update_domain_nameservers,
            DomainName=domain_name,
            Nameservers=[{"Name": ns} for ns in nameservers],
        )

    async def get_domain_record(self, domain_name: str) -> DomainRecord:
        response = await self._call(
            self._boto.get_domain_detail,
            DomainName=domain_name,
        )
        return DomainRecord(
            domain_name=response.get("DomainName", domain_name),
            status_list=list(response.get("StatusList", [])),
            creation_date=response.get("CreationDate"),
            expiration_date=response.get("ExpirationDate"),
            nameservers=[ns["Name"] for ns in response.get("Nameservers", []) if ns.get("Name")],
            auto_renew=response.get("AutoRenew"),
            admin_contact=contact_from_aws(response.get("AdminContact")),
            registrant_contact=contact_from_aws(response.get("RegistrantContact")),
            tech_contact=contact_from_aws(response.get("TechContact")),
            admin_privacy=response.get("AdminPrivacy"),
            registrant_privacy=response.get("RegistrantPrivacy"),
            tech_privacy=response.get("TechPrivacy"),
        )

    async def enable_auto_renew(self, domain_name: str) -> None:
        await self._call(self._boto.enable_domain_auto_renew, DomainName=domain_name)

    async def disable_auto_renew(self, domain_name: str) -> None:
        await self._call(self._boto.disable_domain_auto_renew, DomainName=domain_name)

    async def update_contacts(
        self,
        domain_name: str,
        admin_contact: Optional[ContactDetail],
        registrant_contact: Optional[ContactDetail],
        tech_contact: Optional[ContactDetail],
    ) -> None:
        kwargs: dict = {"DomainName": domain_name}
        for key, contact in (
            ("AdminContact", admin_contact),
            ("RegistrantContact", registrant_contact),
            ("TechContact", tech_contact),
        ):
            if contact is not None:
                kwargs[key] = contact_to_aws(contact)
        await self._call(self._boto.update_domain_contact, **kwargs)

    async def update_contact_privacy(
        self,
        domain_name: str,
        admin_privacy: bool,
        registrant_privacy: bool,
        tech_privacy: bool,
    ) -> None:
        await self._call(
            self._boto.update_domain_contact_privacy,
            DomainName=domain_name,
            AdminPrivacy=admin_privacy,
            RegistrantPrivacy=registrant_privacy,
            TechPrivacy=tech_privacy,
        )

    async def renew_domain(
        self, domain_name: str, duration_years: int, current_expiry_year: int
    ) -> OperationHandle:
        response = await self._call(
            self._boto.renew_domain,
            DomainName=domain_name,
            DurationInYears=duration_years,
            CurrentExpiryYear=current_expiry_year,
        )
        return OperationHandle(operation_id=response["OperationId"])

    async def delete_domain(self, domain_name: str) -> None:
        await self._call(self._boto.delete_domain, DomainName=domain_name)

    async def check_availability(self, domain_name: str) -> AvailabilityResult:
        response = await self._call(
            self._boto.check_domain_availability,
            DomainName=domain_name,
        )
        availability = response.get("Availability", "")
        return AvailabilityResult(
            domain_name=domain_name,
            availability=availability,
            available=availability in AVAILABLE_STATES,
        )

    async def get_tld_price(self, tld: str) -> TldPrice:
        tld = tld.lower().lstrip(".")
        prices = await self._call(self._collect_prices, Tld=tld)
        for price in prices:
            if price.get("Name") == tld:
                return _price_from_aws(tld, price)
        raise RemoteServiceError(
            code="TldNotFound",
            message=f"No pricing information found for TLD: {tld}",
            details={"tld": tld},
        )

    def _collect_prices(self, **kwargs: Any) -> list[dict]:
        paginator = self._boto.get_paginator("list_prices")
        prices: list[dict] = []
        for page in paginator.paginate(**kwargs):
            prices.extend(page.get("Prices", []))
        return prices


def _price_from_aws(tld: str, price: dict) -> TldPrice:
    def amount(key: str) -> Optional[float]:
        entry = price.get(key)
        return entry.get("Price") if entry else None

    registration = price.get("RegistrationPrice") or {}
    return TldPrice(
        tld=tld,
        currency=registration.get("Currency"),
        registration_price=amount("RegistrationPrice"),
        renewal_price=amount("RenewalPrice"),
        transfer_price=amount("TransferPrice"),
        change_ownership_price=amount("ChangeOwnershipPrice"),
        restoration_price=amount("RestorationPrice"),
    )


class Route53ZoneClient(_BotoAdapter):
    """DnsClient backed by the Route 53 hosted-zone API."""

    @classmethod
    def from_config(cls, config: AWSConfig) -> "Route53ZoneClient":
        return cls(create_boto_client("route53", config))

    async def list_zones_by_name(self, dns_name: str, max_items: int) -> list[HostedZone]:
        response = await self._call(
            self._boto.list_hosted_zones_by_name,
            DNSName=dns_name,
            MaxItems=str(max_items),
        )
        zones = []
        for zone in response.get("HostedZones", []):
            zone_config = zone.get("Config") or {}
            zones.append(HostedZone(
                zone_id=strip_zone_id(zone["Id"]),
                name=zone["Name"],
                private=bool(zone_config.get("PrivateZone", False)),
                comment=zone_config.get("Comment"),
            ))
        return zones

    async def list_records(self, zone_id: str) -> list[ResourceRecord]:
        record_sets = await self._call(self._collect_record_sets, HostedZoneId=zone_id)
        return [
            ResourceRecord(name=rs.get("Name", ""), record_type=rs.get("Type", ""))
            for rs in record_sets
        ]

    def _collect_record_sets(self, **kwargs: Any) -> list[dict]:
        paginator = self._boto.get_paginator("list_resource_record_sets")
        record_sets: list[dict] = []
        for page in paginator.paginate(**kwargs):
            record_sets.extend(page.get("ResourceRecordSets", []))
        return record_sets

    async def delete_zone(self, zone_id: str) -> None:
        await self._call(self._boto.delete_hosted_zone, Id=zone_id)
