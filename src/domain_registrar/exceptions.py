"""
Exception classes for the domain registrar system.

All exceptions inherit from DomainRegistrarError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional

from .enums import RegistrationStep


class DomainRegistrarError(Exception):
    """Base exception for all domain registrar errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainRegistrarError):
    """Raised when a domain name or registration request is invalid."""

    pass


class ConfigurationError(DomainRegistrarError):
    """Raised when configuration cannot be loaded or is inconsistent."""

    pass


class RemoteServiceError(DomainRegistrarError):
    """Raised by registry/DNS clients when a remote call fails."""

    pass


class DomainNotFoundError(RemoteServiceError):
    """Raised when the registry reports that a domain does not exist."""

    pass


class RegistrationError(DomainRegistrarError):
    """
    Terminal failure of a registration run.

    Carries the step that failed and the last message the registry returned,
    so callers can tell a domain that was never registered from one that was
    registered but left misconfigured or in an unknown state.
    """

    code = "registration_error"
    step = RegistrationStep.SUBMITTING

    def __init__(
        self,
        domain_name: str,
        message: str,
        remote_message: Optional[str] = None,
        operation_id: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        self.domain_name = domain_name
        self.remote_message = remote_message
        self.operation_id = operation_id
        merged = {
            "domain": domain_name,
            "step": self.step.value if self.step else None,
            "remote_message": remote_message,
            "operation_id": operation_id,
        }
        merged.update(details or {})
        super().__init__(self.code, message, merged)

    @property
    def registered(self) -> Optional[bool]:
        """
        Whether the domain is known to be registered.

        False: never registered. True: registered, a later step failed.
        None: unknown (we stopped waiting or could not read the status).
        """
        return False


class SubmitError(RegistrationError):
    """The registry rejected the registration request outright."""

    code = "submit_error"
    step = RegistrationStep.SUBMITTING


class RegistryRejectedError(RegistrationError):
    """The asynchronous registration operation ended in FAILED or ERROR."""

    code = "registry_rejected"
    step = RegistrationStep.POLLING


class RegistrationTimeoutError(RegistrationError):
    """The wait budget ran out before the operation reached a terminal status."""

    code = "timeout"
    step = RegistrationStep.POLLING

    @property
    def registered(self) -> Optional[bool]:
        return None


class NameserverUpdateError(RegistrationError):
    """Registration succeeded but setting custom nameservers failed."""

    code = "nameserver_update_error"
    step = RegistrationStep.CONFIGURING

    @property
    def registered(self) -> Optional[bool]:
        return True


class ReadError(RegistrationError):
    """Fetching an operation status or domain detail failed."""

    code = "read_error"

    def __init__(
        self,
        domain_name: str,
        message: str,
        step: Optional[RegistrationStep] = RegistrationStep.FINALIZING,
        remote_message: Optional[str] = None,
        operation_id: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        self.step = step
        super().__init__(
            domain_name,
            message,
            remote_message=remote_message,
            operation_id=operation_id,
            details=details,
        )

    @property
    def registered(self) -> Optional[bool]:
        if self.step == RegistrationStep.FINALIZING:
            return True
        return None


class DomainUpdateError(DomainRegistrarError):
    """Raised when an in-place change to a registered domain fails."""

    def __init__(
        self,
        domain_name: str,
        step: str,
        message: str,
        remote_message: Optional[str] = None,
    ) -> None:
        self.domain_name = domain_name
        self.step = step
        self.remote_message = remote_message
        super().__init__(
            "update_error",
            message,
            {"domain": domain_name, "step": step, "remote_message": remote_message},
        )


class DomainDeletionError(DomainRegistrarError):
    """Raised when the registry refuses to delete a domain."""

    pass
