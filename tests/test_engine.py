"""Tests for orchestration/engine.py."""

import pytest
from marketbed.core.errors import (
    DuplicateResourceError,
    TransportError,
    UnresolvedDependencyError,
)
from marketbed.orchestration.bulk import MockTokenProvisioner
from marketbed.orchestration.engine import ExecutionEngine
from marketbed.orchestration.registry import ResourceRegistry
from marketbed.orchestration.steps import configure, deploy
from marketbed.markets.models import TokenDescriptor
from marketbed.transport.memory import InMemoryTransport


class FailingTransport(InMemoryTransport):
    """In-memory transport that fails on one action."""

    def __init__(self, fail_on: str, error: Exception) -> None:
        super().__init__(seed="failing")
        self._fail_on = fail_on
        self._error = error

    async def provision(self, action, config, dependencies):
        if action == self._fail_on:
            raise self._error
        return await super().provision(action, config, dependencies)


def chain_plan():
    return [
        deploy("a", "a.deploy", "A"),
        deploy("b", "b.deploy", "B"),
        deploy("c", "c.deploy", "C", "A", "B"),
    ]


class TestExecutionEngine:
    """Tests for ExecutionEngine."""

    @pytest.mark.asyncio
    async def test_inputs_receive_earlier_handles(self, transport):
        """A step's dependencies are the handles registered by earlier steps."""
        result = await ExecutionEngine(transport).execute(chain_plan())

        calls = transport.calls
        assert [c.action for c in calls] == ["a.deploy", "b.deploy", "c.deploy"]
        assert calls[2].dependencies == {"A": result.registry["A"], "B": result.registry["B"]}
        assert set(result.registry) == {"A", "B", "C"}

    @pytest.mark.asyncio
    async def test_registry_holds_union_of_outputs(self, transport):
        plan = [
            MockTokenProvisioner("mock-tokens", [TokenDescriptor("DAI"), TokenDescriptor("USDC", 6)]),
            deploy("provider", "provider.deploy", "Provider"),
            configure("set-admin", "provider.set_admin", "Provider"),
        ]

        result = await ExecutionEngine(transport).execute(plan)

        assert list(result.registry) == ["token:DAI", "token:USDC", "Provider"]
        assert len(result.steps) == 4
        assert result.total_resources == 3

    @pytest.mark.asyncio
    async def test_token_catalog_registers_every_token(self, transport):
        """Three descriptors, one without precision, give three tokens."""
        catalog = [TokenDescriptor("DAI", 18), TokenDescriptor("USDC", 6), TokenDescriptor("BAT")]

        result = await ExecutionEngine(transport).execute([MockTokenProvisioner("mock-tokens", catalog)])

        assert list(result.registry) == ["token:DAI", "token:USDC", "token:BAT"]
        assert len(set(result.registry.values())) == 3
        assert [c.config["decimals"] for c in transport.calls] == [18, 6, 18]

    @pytest.mark.asyncio
    async def test_configuration_receipt_is_not_registered(self, transport):
        plan = [
            deploy("provider", "provider.deploy", "Provider"),
            configure("set-admin", "provider.set_admin", "Provider"),
        ]

        result = await ExecutionEngine(transport).execute(plan)

        assert list(result.registry) == ["Provider"]
        assert result.steps[1].output is None
        assert result.steps[1].handle is None

    @pytest.mark.asyncio
    async def test_failure_stops_run_and_keeps_earlier_outputs(self):
        """Steps before the failure stay registered; later steps never run."""
        transport = FailingTransport("b.deploy", TransportError("node rejected deploy"))
        registry = ResourceRegistry()

        with pytest.raises(TransportError) as exc_info:
            await ExecutionEngine(transport).execute(chain_plan(), registry=registry)

        assert registry.names() == ["A"]
        assert not registry.sealed
        assert [c.action for c in transport.calls] == ["a.deploy"]
        assert exc_info.value.details["step"] == "b"

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped_as_transport_error(self):
        cause = RuntimeError("socket closed")
        transport = FailingTransport("a.deploy", cause)

        with pytest.raises(TransportError) as exc_info:
            await ExecutionEngine(transport).execute(chain_plan())

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.details["action"] == "a.deploy"

    @pytest.mark.asyncio
    async def test_missing_input_fails_before_transport_call(self, transport):
        plan = [deploy("c", "c.deploy", "C", "A")]

        with pytest.raises(UnresolvedDependencyError) as exc_info:
            await ExecutionEngine(transport).execute(plan)

        assert exc_info.value.details["missing"] == "A"
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_duplicate_output_aborts(self, transport):
        plan = [deploy("a1", "a.deploy", "A"), deploy("a2", "a.deploy", "A")]
        registry = ResourceRegistry()

        with pytest.raises(DuplicateResourceError) as exc_info:
            await ExecutionEngine(transport).execute(plan, registry=registry)

        assert registry.names() == ["A"]
        assert exc_info.value.details["step"] == "a2"

    @pytest.mark.asyncio
    async def test_export_seals_registry(self, transport):
        registry = ResourceRegistry()

        result = await ExecutionEngine(transport).execute(chain_plan(), registry=registry, mode="fresh")

        assert registry.sealed
        assert result.mode == "fresh"
        assert result.duration_seconds >= 0

    @pytest.mark.asyncio
    async def test_config_passed_to_transport(self, transport):
        plan = [deploy("provider", "provider.deploy", "Provider", market_id="Test market")]

        await ExecutionEngine(transport).execute(plan)

        assert transport.calls[0].config == {"market_id": "Test market"}
        assert transport.calls[0].dependencies == {}
