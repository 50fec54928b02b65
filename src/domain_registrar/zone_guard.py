"""
Zone Guard for the domain registrar system.

The registry auto-creates a public hosted zone for every new domain. At the
API level that zone looks exactly like one a user built by hand, so deletion
is a whitelist: a zone is only deleted when ALL of these hold, checked in
this order:

1. its name equals the domain name exactly (after normalization)
2. it is public
3. its comment is the registrar's sentinel comment
4. it contains only NS and SOA records

A failed check is not an error; the zone is left alone and the reason is
returned. Remote failures are also reported as a skip, never raised, so a
cosmetic cleanup cannot block a teardown that has already happened.
"""

from typing import Optional

from .audit_logger import AuditLogger
from .config import ZoneGuardConfig
from .domain_validator import DomainValidator
from .enums import LogLevel, ZoneSkipReason
from .exceptions import RemoteServiceError, ValidationError
from .models import HostedZone, ZoneDeletionOutcome
from .registry import DnsClient


class ZoneGuard:
    """Locates a domain's hosted zone and deletes it only when provably safe."""

    COMPONENT = "ZoneGuard"

    def __init__(
        self,
        client: DnsClient,
        config: Optional[ZoneGuardConfig] = None,
        logger: Optional[AuditLogger] = None,
        validator: Optional[DomainValidator] = None,
    ) -> None:
        self._client = client
        self._config = config or ZoneGuardConfig()
        self._logger = logger
        self._validator = validator or DomainValidator()
        self._allowed_types = {t.upper() for t in self._config.allowed_record_types}

    async def locate(self, domain_name: str) -> Optional[HostedZone]:
        """
        Find the hosted zone whose name is exactly the domain name.

        The DNS service lists zones starting at the given name, so candidates
        such as "example.com.au." may come back for "example.com"; only an
        exact match counts.

        Returns:
            The zone, or None when no exact match exists

        Raises:
            RemoteServiceError: If the zone listing fails (absence is not assumed)
        """
        try:
            target = self._validator.normalize_to_canonical(domain_name)
        except ValidationError:
            return None

        zones = await self._client.list_zones_by_name(
            target + ".", self._config.list_max_items
        )

        for zone in zones:
            if self._validator.names_match(zone.name, target):
                return zone
        return None

    async def locate_zone_id(self, domain_name: str) -> Optional[str]:
        """Zone id for the domain, or None if there is no exact match."""
        zone = await self.locate(domain_name)
        return zone.zone_id if zone else None

    async def safe_delete(self, domain_name: str) -> ZoneDeletionOutcome:
        """
        Delete the domain's auto-created hosted zone if every check passes.

        Never raises for remote failures; see ZoneSkipReason.REMOTE_ERROR.
        """
        try:
            zone = await self.locate(domain_name)
        except RemoteServiceError as e:
            return self._skip(domain_name, None, ZoneSkipReason.REMOTE_ERROR,
                              {"error": e.message})

        if zone is None:
            return self._skip(domain_name, None, ZoneSkipReason.NOT_FOUND, {})

        if zone.private:
            return self._skip(domain_name, zone.zone_id, ZoneSkipReason.PRIVATE, {})

        comment = zone.comment or ""
        if comment != self._config.registrar_comment:
            return self._skip(domain_name, zone.zone_id,
                              ZoneSkipReason.COMMENT_MISMATCH, {"comment": comment})

        try:
            records = await self._client.list_records(zone.zone_id)
        except RemoteServiceError as e:
            return self._skip(domain_name, zone.zone_id, ZoneSkipReason.REMOTE_ERROR,
                              {"error": e.message})

        for record in records:
            if record.record_type.upper() not in self._allowed_types:
                return self._skip(
                    domain_name,
                    zone.zone_id,
                    ZoneSkipReason.HAS_CUSTOM_RECORDS,
                    {"record_name": record.name, "record_type": record.record_type},
                )

        self._log(LogLevel.INFO, "Deleting registrar hosted zone",
                  {"domain": domain_name, "zone_id": zone.zone_id})
        try:
            await self._client.delete_zone(zone.zone_id)
        except RemoteServiceError as e:
            return self._skip(domain_name, zone.zone_id, ZoneSkipReason.REMOTE_ERROR,
                              {"error": e.message})

        return ZoneDeletionOutcome(domain_name=domain_name, deleted=True,
                                   zone_id=zone.zone_id)

    def _skip(
        self,
        domain_name: str,
        zone_id: Optional[str],
        reason: ZoneSkipReason,
        details: dict,
    ) -> ZoneDeletionOutcome:
        self._log(
            LogLevel.WARN,
            "Skipping hosted zone deletion",
            {"domain": domain_name, "zone_id": zone_id, "reason": reason.value, **details},
        )
        return ZoneDeletionOutcome(
            domain_name=domain_name,
            deleted=False,
            zone_id=zone_id,
            reason=reason,
            details=details,
        )

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, self.COMPONENT, message, data)
