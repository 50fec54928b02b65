"""
Domain lifecycle manager.

Composes the registration orchestrator, the zone guard and the registry
client into the create/read/update/delete operations a declarative resource
layer needs. Nothing is cached between calls; every read goes to the
remote services.
"""

import asyncio
import time
from typing import Optional

from .audit_logger import AuditLogger
from .config import SystemConfig
from .domain_validator import DomainValidator
from .enums import LogLevel
from .exceptions import (
    DomainDeletionError,
    DomainNotFoundError,
    DomainUpdateError,
    ReadError,
    RemoteServiceError,
)
from .models import (
    AvailabilityResult,
    DomainDeletionResult,
    DomainRecord,
    DomainSnapshot,
    OperationHandle,
    ProvisionResult,
    RegistrationRequest,
    TldPrice,
)
from .orchestrator import RegistrationOrchestrator
from .poller import Clock, Sleeper
from .registry import DnsClient, RegistryClient
from .zone_guard import ZoneGuard


class DomainManager:
    """Full lifecycle of registered domains and their auto-created zones."""

    COMPONENT = "DomainManager"

    def __init__(
        self,
        registry: RegistryClient,
        dns: DnsClient,
        config: Optional[SystemConfig] = None,
        logger: Optional[AuditLogger] = None,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._config = config or SystemConfig()
        self._registry = registry
        self._logger = logger
        self._validator = DomainValidator()
        self._orchestrator = RegistrationOrchestrator(
            registry,
            polling=self._config.polling,
            logger=logger,
            clock=clock,
            sleep=sleep,
        )
        self._zone_guard = ZoneGuard(
            dns,
            config=self._config.zone_guard,
            logger=logger,
            validator=self._validator,
        )

    @property
    def orchestrator(self) -> RegistrationOrchestrator:
        return self._orchestrator

    @property
    def zone_guard(self) -> ZoneGuard:
        return self._zone_guard

    async def provision(
        self,
        request: RegistrationRequest,
        delete_hosted_zone: bool = False,
    ) -> ProvisionResult:
        """
        Register a domain, then deal with its auto-created hosted zone.

        With delete_hosted_zone the zone is removed if the zone guard allows
        it; otherwise (or when the guard skips) its id is looked up. Zone
        handling never fails the provisioning.

        Raises:
            RegistrationError subclass from the orchestrator
        """
        record = await self._orchestrator.register(request)
        domain = request.domain_name

        if delete_hosted_zone:
            outcome = await self._zone_guard.safe_delete(domain)
            if outcome.deleted:
                self._log(LogLevel.INFO, "Deleted auto-created hosted zone",
                          {"domain": domain, "zone_id": outcome.zone_id})
                return ProvisionResult(record=record, hosted_zone_id=None,
                                       zone_outcome=outcome)
            zone_id = await self._lookup_zone_id(domain)
            return ProvisionResult(record=record, hosted_zone_id=zone_id,
                                   zone_outcome=outcome)

        return ProvisionResult(record=record,
                               hosted_zone_id=await self._lookup_zone_id(domain))

    async def read(self, domain_name: str) -> Optional[DomainSnapshot]:
        """
        Current state of a domain.

        Returns:
            Snapshot, or None when the registry says the domain does not exist

        Raises:
            ReadError: For any other failure; transient errors are never
                reported as absence
        """
        try:
            record = await self._registry.get_domain_record(domain_name)
        except DomainNotFoundError:
            self._log(LogLevel.INFO, "Domain not found in registry",
                      {"domain": domain_name})
            return None
        except RemoteServiceError as e:
            raise ReadError(
                domain_name,
                f"Could not read domain details for {domain_name}: {e.message}",
                step=None,
                remote_message=e.message,
                details={"remote_code": e.code},
            ) from e

        return DomainSnapshot(record=record,
                              hosted_zone_id=await self._lookup_zone_id(domain_name))

    async def update(
        self,
        previous: RegistrationRequest,
        desired: RegistrationRequest,
    ) -> DomainRecord:
        """
        Bring a registered domain in line with a changed request.

        Auto-renew is toggled only when it changed; nameservers are applied
        when given; contacts and privacy flags are always re-sent.

        Raises:
            DomainUpdateError: Naming the step that failed
        """
        domain = desired.domain_name

        if desired.auto_renew != previous.auto_renew:
            if desired.auto_renew:
                await self._update_step(domain, "enable_auto_renew",
                                        self._registry.enable_auto_renew(domain))
            else:
                await self._update_step(domain, "disable_auto_renew",
                                        self._registry.disable_auto_renew(domain))

        if desired.nameservers:
            await self._update_step(
                domain, "nameservers",
                self._registry.set_nameservers(domain, list(desired.nameservers)),
            )

        await self._update_step(
            domain, "contacts",
            self._registry.update_contacts(
                domain,
                desired.admin_contact,
                desired.registrant_contact,
                desired.tech_contact,
            ),
        )
        await self._update_step(
            domain, "privacy",
            self._registry.update_contact_privacy(
                domain,
                desired.admin_privacy,
                desired.registrant_privacy,
                desired.tech_privacy,
            ),
        )

        try:
            return await self._registry.get_domain_record(domain)
        except RemoteServiceError as e:
            raise DomainUpdateError(
                domain, "refresh",
                f"Could not read domain details for {domain}: {e.message}",
                remote_message=e.message,
            ) from e

    async def renew(self, domain_name: str, duration_years: int = 1) -> OperationHandle:
        """
        Submit a renewal for the domain's current expiry year.

        Raises:
            DomainUpdateError: If the expiry year is unknown or the call fails
        """
        try:
            record = await self._registry.get_domain_record(domain_name)
        except RemoteServiceError as e:
            raise DomainUpdateError(
                domain_name, "renew",
                f"Could not read domain details for {domain_name}: {e.message}",
                remote_message=e.message,
            ) from e

        if record.expiration_date is None:
            raise DomainUpdateError(
                domain_name, "renew",
                f"Domain {domain_name} has no expiration date to renew from",
            )

        handle = await self._update_step(
            domain_name, "renew",
            self._registry.renew_domain(domain_name, duration_years,
                                        record.expiration_date.year),
        )
        self._log(LogLevel.INFO, "Domain renewal initiated",
                  {"domain": domain_name, "operation_id": handle.operation_id,
                   "duration_years": duration_years})
        return handle

    async def delete(
        self,
        domain_name: str,
        allow_delete: bool = False,
    ) -> DomainDeletionResult:
        """
        Tear down a domain.

        Without allow_delete nothing is changed remotely; the caller only
        forgets the domain. With it, the registration is deleted and the
        auto-created zone is removed on a best-effort basis.

        Raises:
            DomainDeletionError: If the registry refuses the deletion
        """
        if not allow_delete:
            self._log(LogLevel.WARN,
                      "Domain will be removed from state only (allow_delete = false)",
                      {"domain": domain_name})
            return DomainDeletionResult(domain_name=domain_name, domain_deleted=False)

        self._log(LogLevel.WARN, "Deleting domain registration (allow_delete = true)",
                  {"domain": domain_name})
        try:
            await self._registry.delete_domain(domain_name)
        except RemoteServiceError as e:
            if self._logger:
                self._logger.log_error(self.COMPONENT, "Error deleting domain",
                                       error=e, additional_data={"domain": domain_name})
            raise DomainDeletionError(
                code="delete_error",
                message=(
                    f"Could not delete domain {domain_name}: {e.message}. "
                    "Domain deletion may not be supported by the registry."
                ),
                details={"domain": domain_name, "remote_code": e.code},
            ) from e

        self._log(LogLevel.INFO, "Domain deletion initiated", {"domain": domain_name})
        outcome = await self._zone_guard.safe_delete(domain_name)
        return DomainDeletionResult(domain_name=domain_name, domain_deleted=True,
                                    zone_outcome=outcome)

    async def check_availability(self, domain_name: str) -> AvailabilityResult:
        return await self._registry.check_availability(domain_name)

    async def get_price(self, tld: str) -> TldPrice:
        return await self._registry.get_tld_price(tld)

    async def _lookup_zone_id(self, domain_name: str) -> Optional[str]:
        try:
            zone_id = await self._zone_guard.locate_zone_id(domain_name)
        except RemoteServiceError as e:
            self._log(LogLevel.WARN, "Could not look up hosted zone",
                      {"domain": domain_name, "error": e.message})
            return None
        if zone_id is None:
            self._log(LogLevel.WARN, "Could not find hosted zone for domain",
                      {"domain": domain_name})
        return zone_id

    async def _update_step(self, domain_name: str, step: str, call):
        try:
            return await call
        except RemoteServiceError as e:
            if self._logger:
                self._logger.log_error(self.COMPONENT, f"Update step '{step}' failed",
                                       error=e, additional_data={"domain": domain_name})
            raise DomainUpdateError(
                domain_name, step,
                f"Could not apply {step} for {domain_name}: {e.message}",
                remote_message=e.message,
            ) from e

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, self.COMPONENT, message, data)
