"""
Property-based tests for the Domain Validator.

Tests name normalization, exact matching and registration request checks.
"""

import pytest
from dataclasses import replace
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_registrar.domain_validator import DomainValidator

from helpers import domain_strategy, label_strategy, make_contact, make_request


class TestNormalizationProperty:
    """Canonical form is lowercase, dot-free at the end and idempotent."""

    @given(domain=domain_strategy())
    @settings(max_examples=100)
    def test_case_and_trailing_dot_are_ignored(self, domain: str) -> None:
        validator = DomainValidator()

        assert validator.normalize_to_canonical(domain.upper() + ".") == domain
        assert validator.normalize_to_canonical(f"  {domain}  ") == domain

    @given(domain=domain_strategy())
    @settings(max_examples=100)
    def test_normalization_is_idempotent(self, domain: str) -> None:
        validator = DomainValidator()

        once = validator.normalize_to_canonical(domain)

        assert validator.normalize_to_canonical(once) == once

    def test_idna_encoding(self) -> None:
        validator = DomainValidator()

        assert validator.normalize_to_canonical("Bücher.example") == "xn--bcher-kva.example"
        assert validator.names_match("xn--bcher-kva.example.", "bücher.example")


class TestNamesMatchProperty:
    """Only identical names match; parents, children and lookalikes do not."""

    @given(domain=domain_strategy(), label=label_strategy())
    @settings(max_examples=100)
    def test_subdomain_and_prefix_never_match(self, domain: str, label: str) -> None:
        validator = DomainValidator()

        assert validator.names_match(domain + ".", domain)
        assert not validator.names_match(f"{label}.{domain}.", domain)
        assert not validator.names_match(f"{label}{domain}.", domain)


class TestValidateProperty:
    """validate accepts well-formed names and rejects malformed ones."""

    @given(domain=domain_strategy())
    @settings(max_examples=100)
    def test_generated_domains_are_valid(self, domain: str) -> None:
        result = DomainValidator().validate(domain)

        assert result.valid
        assert result.canonical_domain == domain
        assert result.error is None

    @pytest.mark.parametrize("raw", ["", "   ", "localhost", "a..com", "bad name.com",
                                     "exa$mple.com", "http://example.com"])
    def test_invalid_inputs(self, raw: str) -> None:
        result = DomainValidator().validate(raw)

        assert not result.valid
        assert result.canonical_domain is None
        assert result.error

    def test_tld_whitelist(self) -> None:
        validator = DomainValidator(allowed_tlds=[".com", "NET"])

        assert validator.validate("example.com").valid
        assert validator.validate("example.net").valid
        assert not validator.validate("example.org").valid


class TestRequestValidation:
    """validate_request lists every problem with a field prefix."""

    def test_valid_request(self) -> None:
        assert DomainValidator().validate_request(make_request()) == []

    @given(years=st.integers().filter(lambda y: y < 1 or y > 10))
    @settings(max_examples=50)
    def test_duration_out_of_range(self, years: int) -> None:
        problems = DomainValidator().validate_request(make_request(duration_years=years))

        assert any(p.startswith("duration_years:") for p in problems)

    def test_timing_must_be_positive(self) -> None:
        request = make_request(timeout_seconds=0.0, poll_interval_seconds=-1.0)

        problems = DomainValidator().validate_request(request)

        assert "timeout_seconds: must be positive" in problems
        assert "poll_interval_seconds: must be positive" in problems

    def test_missing_contact_fields(self) -> None:
        request = make_request(admin_contact=make_contact(email="", city="  "))

        problems = DomainValidator().validate_request(request)

        assert "admin_contact.email: required" in problems
        assert "admin_contact.city: required" in problems
        assert not any(p.startswith("tech_contact.") for p in problems)

    def test_country_code_format(self) -> None:
        request = make_request(tech_contact=make_contact(country_code="usa"))

        problems = DomainValidator().validate_request(request)

        assert problems == ["tech_contact.country_code: must be a two-letter upper-case code"]

    def test_bad_nameserver(self) -> None:
        request = replace(make_request(), nameservers=("ns1.example.net", "not a host"))

        problems = DomainValidator().validate_request(request)

        assert problems == ["nameservers: invalid hostname 'not a host'"]
