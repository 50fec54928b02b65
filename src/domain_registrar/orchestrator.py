"""
Registration Orchestrator for the domain registrar system.

Drives one registration to completion:

    SUBMITTING -> POLLING -> CONFIGURING -> FINALIZING -> DONE

Every way the run can end badly is a distinct exception:
- SubmitError: the register call itself failed
- RegistryRejectedError: the operation ended FAILED or ERROR
- RegistrationTimeoutError: the wait budget ran out (remote op not cancelled)
- NameserverUpdateError: registered, but custom nameservers were not applied
- ReadError: a status or domain-detail fetch failed

The first failure stops the run; completed steps are never retried.
"""

import asyncio
import time
from typing import Optional

from .audit_logger import AuditLogger
from .config import PollingConfig
from .enums import LogLevel, OperationStatus, RegistrationStep
from .exceptions import (
    NameserverUpdateError,
    ReadError,
    RegistrationTimeoutError,
    RegistryRejectedError,
    RemoteServiceError,
    SubmitError,
)
from .models import DomainRecord, OperationDetail, OperationHandle, RegistrationRequest
from .poller import Clock, OperationPoller, Sleeper
from .registry import RegistryClient


class RegistrationOrchestrator:
    """
    Converts the registry's fire-and-forget register call into a bounded
    synchronous wait with a typed result.

    One instance may serve many requests sequentially or concurrently; all
    per-run state lives in local variables of register().
    """

    COMPONENT = "RegistrationOrchestrator"

    def __init__(
        self,
        client: RegistryClient,
        polling: Optional[PollingConfig] = None,
        logger: Optional[AuditLogger] = None,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            client: Registry API implementation
            polling: Default interval/timeout/backoff for the wait loop
            logger: Optional audit logger
            clock: Monotonic time source (injectable for tests)
            sleep: Suspension coroutine (injectable for tests)
        """
        self._client = client
        self._polling = polling or PollingConfig()
        self._logger = logger
        self._clock = clock
        self._sleep = sleep

    async def register(self, request: RegistrationRequest) -> DomainRecord:
        """
        Register a domain and wait for the registry to confirm it.

        The request is assumed to be validated. Calling this for a domain
        that is already registered submits again; deduplication is the
        caller's job.

        Returns:
            The DomainRecord read after registration completed

        Raises:
            RegistrationError subclass describing the failed step
        """
        domain = request.domain_name
        self._log(LogLevel.INFO, "Registering domain", {"domain": domain})

        handle = await self._submit(request)

        detail = await self._wait_for_completion(request, handle)
        self._log(
            LogLevel.INFO,
            "Domain registration completed",
            {"domain": domain, "operation_id": handle.operation_id,
             "status": detail.status.value},
        )

        if request.nameservers:
            await self._configure_nameservers(request, handle)

        record = await self._finalize(request, handle)
        self._log(
            LogLevel.INFO,
            "Registration finished",
            {"domain": domain, "step": RegistrationStep.DONE.value},
        )
        return record

    async def _submit(self, request: RegistrationRequest) -> OperationHandle:
        domain = request.domain_name
        try:
            handle = await self._client.register_domain(request)
        except RemoteServiceError as e:
            self._log_failure(RegistrationStep.SUBMITTING, domain, e)
            raise SubmitError(
                domain,
                f"Could not register domain {domain}: {e.message}",
                remote_message=e.message,
                details={"remote_code": e.code},
            ) from e

        self._log(
            LogLevel.INFO,
            "Domain registration initiated",
            {"domain": domain, "operation_id": handle.operation_id},
        )
        return handle

    async def _wait_for_completion(
        self, request: RegistrationRequest, handle: OperationHandle
    ) -> OperationDetail:
        domain = request.domain_name
        poller = OperationPoller.from_config(
            self._polling,
            interval_seconds=request.poll_interval_seconds,
            timeout_seconds=request.timeout_seconds,
            clock=self._clock,
            sleep=self._sleep,
        )

        async def fetch() -> OperationDetail:
            try:
                return await self._client.get_operation_detail(handle)
            except RemoteServiceError as e:
                self._log_failure(RegistrationStep.POLLING, domain, e)
                raise ReadError(
                    domain,
                    f"Could not check registration status for {domain}: {e.message}",
                    step=RegistrationStep.POLLING,
                    remote_message=e.message,
                    operation_id=handle.operation_id,
                ) from e

        def on_poll(detail: OperationDetail, poll_number: int) -> None:
            self._log(
                LogLevel.DEBUG,
                "Registration operation status",
                {"domain": domain, "status": detail.status.value, "poll": poll_number},
            )

        result = await poller.poll_until(
            fetch, lambda d: d.status.is_terminal, on_poll=on_poll
        )
        detail = result.value

        if not result.completed:
            last_message = detail.message if detail else None
            self._log(
                LogLevel.WARN,
                "Gave up waiting for domain registration",
                {"domain": domain, "operation_id": handle.operation_id,
                 "timeout_seconds": poller.timeout_seconds, "polls": result.polls},
            )
            raise RegistrationTimeoutError(
                domain,
                f"Registration of {domain} did not finish within "
                f"{poller.timeout_seconds:g}s; it may still complete",
                remote_message=last_message,
                operation_id=handle.operation_id,
                details={
                    "last_status": detail.status.value if detail else None,
                    "polls": result.polls,
                },
            )

        if detail.status != OperationStatus.SUCCESSFUL:
            self._log(
                LogLevel.ERROR,
                "Domain registration failed",
                {"domain": domain, "status": detail.status.value,
                 "remote_message": detail.message},
            )
            raise RegistryRejectedError(
                domain,
                f"Domain registration for {domain} ended with "
                f"{detail.status.value}: {detail.message or 'no message'}",
                remote_message=detail.message,
                operation_id=handle.operation_id,
                details={"status": detail.status.value},
            )

        return detail

    async def _configure_nameservers(
        self, request: RegistrationRequest, handle: OperationHandle
    ) -> None:
        domain = request.domain_name
        try:
            await self._client.set_nameservers(domain, list(request.nameservers))
        except RemoteServiceError as e:
            self._log_failure(RegistrationStep.CONFIGURING, domain, e)
            raise NameserverUpdateError(
                domain,
                f"Domain {domain} was registered but its nameservers could "
                f"not be updated: {e.message}",
                remote_message=e.message,
                operation_id=handle.operation_id,
                details={"nameservers": list(request.nameservers)},
            ) from e

        self._log(
            LogLevel.INFO,
            "Nameservers updated",
            {"domain": domain, "nameservers": list(request.nameservers)},
        )

    async def _finalize(
        self, request: RegistrationRequest, handle: OperationHandle
    ) -> DomainRecord:
        domain = request.domain_name
        try:
            return await self._client.get_domain_record(domain)
        except RemoteServiceError as e:
            self._log_failure(RegistrationStep.FINALIZING, domain, e)
            raise ReadError(
                domain,
                f"Domain {domain} was registered but its details could not "
                f"be read: {e.message}",
                step=RegistrationStep.FINALIZING,
                remote_message=e.message,
                operation_id=handle.operation_id,
            ) from e

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, self.COMPONENT, message, data)

    def _log_failure(
        self, step: RegistrationStep, domain: str, error: Exception
    ) -> None:
        if self._logger:
            self._logger.log_error(
                self.COMPONENT,
                f"Registration step '{step.value}' failed",
                error=error,
                additional_data={"domain": domain, "step": step.value,
                                 "state": RegistrationStep.FAILED.value},
            )
