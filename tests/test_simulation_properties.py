"""
Property-based tests for the in-memory SimulatedRegistry.

The simulator backs --dry-run and every other test module, so its own
behavior is pinned down here.
"""

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_registrar.enums import OperationStatus
from domain_registrar.exceptions import DomainNotFoundError, RemoteServiceError
from domain_registrar.models import OperationHandle
from domain_registrar.registry import DnsClient, RegistryClient
from domain_registrar.simulation import SimulatedRegistry

from helpers import domain_strategy, make_request


class TestProtocolConformance:
    """The simulator satisfies both remote interfaces."""

    def test_implements_protocols(self) -> None:
        registry = SimulatedRegistry()

        assert isinstance(registry, RegistryClient)
        assert isinstance(registry, DnsClient)


class TestStatusSequenceProperty:
    """Polls walk the scripted sequence and repeat its last status."""

    @given(sequence=st.lists(st.sampled_from(list(OperationStatus)), min_size=1, max_size=6),
           extra_polls=st.integers(min_value=0, max_value=3))
    @settings(max_examples=100)
    def test_sequence_then_repeat(self, sequence: list, extra_polls: int) -> None:
        registry = SimulatedRegistry(status_sequence=sequence)

        async def scenario():
            handle = await registry.register_domain(make_request())
            return [
                (await registry.get_operation_detail(handle)).status
                for _ in range(len(sequence) + extra_polls)
            ]

        seen = asyncio.run(scenario())

        assert seen == sequence + [sequence[-1]] * extra_polls

    def test_domain_exists_only_after_success(self) -> None:
        registry = SimulatedRegistry(status_sequence=[
            OperationStatus.IN_PROGRESS, OperationStatus.SUCCESSFUL,
        ])

        async def scenario():
            handle = await registry.register_domain(make_request("example.com"))
            await registry.get_operation_detail(handle)
            before = dict(registry.domains)
            await registry.get_operation_detail(handle)
            return before

        before = asyncio.run(scenario())

        assert before == {}
        assert "example.com" in registry.domains
        assert len(registry.zones) == 1

    def test_returned_record_is_a_copy(self) -> None:
        registry = SimulatedRegistry()

        async def scenario():
            handle = await registry.register_domain(
                make_request("example.com", nameservers=("ns1.example.net",))
            )
            await registry.get_operation_detail(handle)
            await registry.set_nameservers("example.com", ["ns1.example.net"])
            record = await registry.get_domain_record("example.com")
            record.nameservers.append("ns9.example.net")
            record.status_list.append("clientHold")
            return await registry.get_domain_record("example.com")

        fresh = asyncio.run(scenario())

        assert fresh.nameservers == ["ns1.example.net"]
        assert "clientHold" not in fresh.status_list

    def test_unknown_operation(self) -> None:
        registry = SimulatedRegistry()

        with pytest.raises(RemoteServiceError):
            asyncio.run(registry.get_operation_detail(OperationHandle("op-missing")))


class TestZoneListingProperty:
    """Listings start at the given name in reversed-label order."""

    @given(domains=st.lists(domain_strategy(), min_size=1, max_size=8, unique=True),
           max_items=st.integers(min_value=1, max_value=10))
    @settings(max_examples=100)
    def test_listing_is_ordered_and_bounded(self, domains: list, max_items: int) -> None:
        registry = SimulatedRegistry()
        for domain in domains:
            registry.add_zone(domain)
        start = domains[0] + "."

        zones = asyncio.run(registry.list_zones_by_name(start, max_items))

        keys = [tuple(reversed(z.name.rstrip(".").split("."))) for z in zones]
        assert keys == sorted(keys)
        assert len(zones) <= max_items
        assert zones[0].name == start


class TestFailureInjection:
    """fail() makes a method raise on every call and records the attempt."""

    def test_injected_failure(self) -> None:
        registry = SimulatedRegistry()
        registry.fail("check_availability", "Service unavailable", code="ServiceUnavailable")

        for _ in range(2):
            with pytest.raises(RemoteServiceError) as exc_info:
                asyncio.run(registry.check_availability("example.com"))
            assert exc_info.value.code == "ServiceUnavailable"

        assert registry.count_calls("check_availability") == 2

    def test_unknown_domain(self) -> None:
        registry = SimulatedRegistry()

        with pytest.raises(DomainNotFoundError):
            asyncio.run(registry.get_domain_record("example.com"))

    def test_renew_checks_expiry_year(self) -> None:
        registry = SimulatedRegistry()

        async def scenario():
            handle = await registry.register_domain(make_request("example.com"))
            await registry.get_operation_detail(handle)
            year = registry.domains["example.com"].expiration_date.year
            await registry.renew_domain("example.com", 1, year - 1)

        with pytest.raises(RemoteServiceError) as exc_info:
            asyncio.run(scenario())

        assert exc_info.value.code == "InvalidInput"
