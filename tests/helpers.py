"""
Shared builders and Hypothesis strategies for the test suite.
"""

import string
from dataclasses import replace

from hypothesis import strategies as st

from domain_registrar.models import ContactDetail, RegistrationRequest


class FakeClock:
    """Monotonic clock that only moves when sleep() is awaited."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_contact(**overrides) -> ContactDetail:
    contact = ContactDetail(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.org",
        phone_number="+1.5551234567",
        address_line_1="1 Analytical Way",
        city="Seattle",
        state="WA",
        zip_code="98101",
        country_code="US",
    )
    return replace(contact, **overrides)


def make_request(domain_name: str = "test-domain.example", **overrides) -> RegistrationRequest:
    contact = make_contact()
    request = RegistrationRequest(
        domain_name=domain_name,
        admin_contact=contact,
        registrant_contact=contact,
        tech_contact=contact,
        duration_years=1,
        timeout_seconds=30.0,
        poll_interval_seconds=10.0,
    )
    return replace(request, **overrides)


def label_strategy() -> st.SearchStrategy[str]:
    """A single lowercase DNS label."""
    return st.text(
        alphabet=string.ascii_lowercase + string.digits,
        min_size=1,
        max_size=20,
    )


def domain_strategy() -> st.SearchStrategy[str]:
    """Generate valid lowercase domain names."""
    return st.builds(
        lambda label, tld: f"{label}.{tld}",
        label_strategy(),
        st.sampled_from(["com", "net", "org", "example", "io"]),
    )
