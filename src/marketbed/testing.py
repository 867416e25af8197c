"""
Pytest integration.

Call ``marketbed_fixture()`` from a ``conftest.py`` to provision the market
once per test session:

    from marketbed.testing import marketbed_fixture

    market = marketbed_fixture()

    def test_pool_is_deployed(market):
        assert market.contract("Pool").startswith("0x")
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import pytest

from marketbed.config.settings import Settings
from marketbed.markets.models import MarketConfig
from marketbed.orchestration.registry import RegistryExport
from marketbed.orchestration.results import RunResult
from marketbed.runner import setup_environment
from marketbed.transport.base import Transport


@dataclass(frozen=True)
class MarketSuite:
    """Read-only view of a provisioned market for test code."""

    mode: str
    registry: RegistryExport

    def contract(self, name: str) -> str:
        return self.registry[name]

    @property
    def tokens(self) -> Dict[str, str]:
        return self.registry.with_prefix("token:")

    @property
    def aggregators(self) -> Dict[str, str]:
        return self.registry.with_prefix("aggregator:")

    @property
    def reserves(self) -> Dict[str, str]:
        return self.registry.with_prefix("reserve:")

    @property
    def roles(self) -> Dict[str, str]:
        return self.registry.with_prefix("role:")

    @classmethod
    def from_result(cls, result: RunResult) -> "MarketSuite":
        return cls(mode=result.mode, registry=result.registry)


def provision_suite(
    settings: Optional[Settings] = None,
    *,
    market: Optional[MarketConfig] = None,
    transport: Optional[Transport] = None,
) -> MarketSuite:
    """Run the orchestrator synchronously and wrap its export."""
    result = asyncio.run(setup_environment(settings, market=market, transport=transport))
    return MarketSuite.from_result(result)


def marketbed_fixture(
    name: str = "market",
    *,
    settings: Optional[Settings] = None,
    market: Optional[MarketConfig] = None,
    transport_factory: Optional[Callable[[], Transport]] = None,
) -> Callable[..., MarketSuite]:
    """Build a session-scoped fixture that provisions the market once."""

    @pytest.fixture(scope="session", name=name)
    def _market_fixture() -> MarketSuite:
        transport = transport_factory() if transport_factory else None
        return provision_suite(settings, market=market, transport=transport)

    return _market_fixture
