"""Root test configuration and shared fixtures."""

import logging

import pytest
import structlog
from marketbed.markets.defaults import USD_ADDRESS
from marketbed.markets.models import (
    AssetPrice,
    MarketConfig,
    MarketRate,
    ReserveParams,
    RoleAccount,
    TokenDescriptor,
    TokenKind,
)
from marketbed.transport.memory import InMemoryTransport


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def transport():
    """Deterministic in-memory transport."""
    return InMemoryTransport(seed="tests")


@pytest.fixture
def small_market():
    """A two-reserve market small enough to reason about step by step."""
    return MarketConfig(
        market_id="Test market",
        tokens=(
            TokenDescriptor("WETH", 18, TokenKind.NATIVE_WRAPPED),
            TokenDescriptor("DAI", 18),
            TokenDescriptor("USDC", 6),
            TokenDescriptor("USD"),
        ),
        prices=(
            AssetPrice("WETH", "1000000000000000000"),
            AssetPrice("DAI", "3700000000000000"),
            AssetPrice("USDC", "4000000000000000"),
            AssetPrice("USD", "5848466240000000", address=USD_ADDRESS),
        ),
        rates=(
            MarketRate("DAI", "39000000000000000000000000"),
            MarketRate("USDC", "39000000000000000000000000"),
        ),
        reserves=(
            ReserveParams("DAI", 18, 7500, 8000, 10500, 1000),
            ReserveParams("USDC", 6, 8000, 8500, 10500, 1000),
        ),
        roles=(
            RoleAccount("Deployer", 0),
            RoleAccount("EmergencyAdmin", 2),
            RoleAccount("RiskAdmin", 3),
        ),
        mock_usd_price="5848466240000000",
        dropped_reserves=("USDC",),
        external_resources=("PoolAddressesProvider", "Pool"),
    )
