"""
Domain name normalization and registration request validation.

Zone names come back from the DNS service fully qualified (trailing dot),
possibly upper-cased or IDNA-encoded; every comparison in the zone guard goes
through normalize_to_canonical so that "Example.COM." and "example.com" match.
"""

import re
from dataclasses import dataclass
from typing import Optional

import idna

from domain_registrar.exceptions import ValidationError
from domain_registrar.models import ContactDetail, RegistrationRequest


# Control characters, whitespace and symbols never valid in a hostname
FORBIDDEN_CHARS_PATTERN = re.compile(
    r'[\x00-\x1f\x7f'
    r'\s'
    r'!@#$%^&*()+=\[\]{}|\\:;"\'<>,?/`~]'
)

COUNTRY_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")

MIN_DURATION_YEARS = 1
MAX_DURATION_YEARS = 10

REQUIRED_CONTACT_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "address_line_1",
    "city",
    "state",
    "zip_code",
    "country_code",
)


@dataclass
class DomainValidationResult:
    """Result of domain validation operation."""

    valid: bool
    canonical_domain: Optional[str]
    error: Optional[str]


class DomainValidator:
    """Validates and normalizes domain names and registration requests."""

    def __init__(self, allowed_tlds: Optional[list[str]] = None) -> None:
        """
        Args:
            allowed_tlds: Optional whitelist of TLDs; None accepts any TLD
        """
        self._allowed_tlds = (
            {tld.lower().lstrip(".") for tld in allowed_tlds}
            if allowed_tlds is not None
            else None
        )

    def normalize_to_canonical(self, domain: str) -> str:
        """
        Convert a domain or zone name to canonical form.

        Lowercases, strips surrounding whitespace and one trailing dot, and
        IDNA-encodes non-ASCII labels.

        Raises:
            ValidationError: If IDNA encoding fails
        """
        name = domain.strip().lower()
        if name.endswith("."):
            name = name[:-1]

        if any(ord(c) > 127 for c in name):
            try:
                name = idna.encode(name, uts46=True).decode("ascii")
            except idna.IDNAError as e:
                raise ValidationError(
                    code="idna_error",
                    message=f"IDNA encoding failed: {e}",
                    details={"domain": domain},
                ) from e

        return name

    def names_match(self, left: str, right: str) -> bool:
        """Exact comparison of two names after normalization."""
        try:
            return self.normalize_to_canonical(left) == self.normalize_to_canonical(right)
        except ValidationError:
            return False

    def validate(self, raw_domain: str) -> DomainValidationResult:
        """Validate a domain name and return its canonical form."""
        if not raw_domain or not raw_domain.strip():
            return DomainValidationResult(False, None, "Domain input is empty")

        if FORBIDDEN_CHARS_PATTERN.search(raw_domain.strip()):
            return DomainValidationResult(
                False, None, "Domain contains forbidden characters"
            )

        try:
            canonical = self.normalize_to_canonical(raw_domain)
        except ValidationError as e:
            return DomainValidationResult(False, None, e.message)

        labels = canonical.split(".")
        if len(labels) < 2 or not all(labels):
            return DomainValidationResult(
                False, None, "Domain must have at least two non-empty labels"
            )

        if self._allowed_tlds is not None and labels[-1] not in self._allowed_tlds:
            return DomainValidationResult(
                False, None, f"TLD '{labels[-1]}' is not in the configured allowed list"
            )

        return DomainValidationResult(True, canonical, None)

    def validate_request(self, request: RegistrationRequest) -> list[str]:
        """
        Check a registration request before it is submitted.

        Returns:
            List of problems; empty when the request is valid
        """
        problems: list[str] = []

        result = self.validate(request.domain_name)
        if not result.valid:
            problems.append(f"domain_name: {result.error}")

        if not MIN_DURATION_YEARS <= request.duration_years <= MAX_DURATION_YEARS:
            problems.append(
                f"duration_years: must be between {MIN_DURATION_YEARS} "
                f"and {MAX_DURATION_YEARS}"
            )

        if request.timeout_seconds is not None and request.timeout_seconds <= 0:
            problems.append("timeout_seconds: must be positive")
        if request.poll_interval_seconds is not None and request.poll_interval_seconds <= 0:
            problems.append("poll_interval_seconds: must be positive")

        for role, contact in (
            ("admin_contact", request.admin_contact),
            ("registrant_contact", request.registrant_contact),
            ("tech_contact", request.tech_contact),
        ):
            problems.extend(f"{role}.{p}" for p in self._validate_contact(contact))

        for ns in request.nameservers:
            if not self.validate(ns).valid:
                problems.append(f"nameservers: invalid hostname {ns!r}")

        return problems

    def _validate_contact(self, contact: ContactDetail) -> list[str]:
        problems = [
            f"{name}: required"
            for name in REQUIRED_CONTACT_FIELDS
            if not (getattr(contact, name) or "").strip()
        ]
        if contact.country_code and not COUNTRY_CODE_PATTERN.match(contact.country_code):
            problems.append("country_code: must be a two-letter upper-case code")
        return problems
