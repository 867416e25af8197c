"""
Plan construction for fresh and external environments.

The fresh plan is an explicit, hand-ordered list. Dependencies are
declared on each step and checked with ``verify_order``; they are never
used to reorder anything.
"""

from __future__ import annotations

from enum import StrEnum
from typing import List

from marketbed.markets.models import MarketConfig
from marketbed.orchestration.bulk import (
    AccountRolesProvisioner,
    AssetPriceProvisioner,
    MarketRateProvisioner,
    MockAggregatorProvisioner,
    MockTokenProvisioner,
    ReserveConfigProvisioner,
    ReserveDropProvisioner,
    ReserveInitProvisioner,
    aggregator,
    role,
    token,
)
from marketbed.orchestration.results import PlanPreview
from marketbed.orchestration.steps import (
    PlanEntry,
    ProvisioningStep,
    configure,
    deploy,
    flatten,
    verify_order,
)

ATTACH_ACTION = "external.attach"

DEPLOYER = role("Deployer")
EMERGENCY_ADMIN = role("EmergencyAdmin")
RISK_ADMIN = role("RiskAdmin")
REQUIRED_ROLES = ("Deployer", "EmergencyAdmin", "RiskAdmin")


class ContractId(StrEnum):
    """Registry names of the core market contracts."""

    ADDRESSES_PROVIDER = "PoolAddressesProvider"
    ADDRESSES_PROVIDER_REGISTRY = "PoolAddressesProviderRegistry"
    POOL_IMPL = "PoolImpl"
    POOL = "Pool"
    POOL_CONFIGURATOR_IMPL = "PoolConfiguratorImpl"
    POOL_CONFIGURATOR = "PoolConfigurator"
    STABLE_VARIABLE_TOKENS_HELPER = "StableAndVariableTokensHelper"
    ATOKENS_RATES_HELPER = "ATokensAndRatesHelper"
    PRICE_ORACLE = "PriceOracle"
    AAVE_ORACLE = "AaveOracle"
    RATE_ORACLE = "RateOracle"
    PROTOCOL_DATA_PROVIDER = "AaveProtocolDataProvider"
    FLASH_LOAN_RECEIVER = "MockFlashLoanReceiver"
    UNISWAP_ROUTER = "MockUniswapRouter"
    WALLET_BALANCE_PROVIDER = "WalletBalanceProvider"
    WETH_GATEWAY = "WETHGateway"


C = ContractId


def oracle_pairs(market: MarketConfig) -> List[str]:
    """Symbols wired into the Aave oracle as token/aggregator pairs.

    Assets pinned to a static address and the native-wrapped base asset
    are priced by the oracle itself, not through a pair.
    """
    base = market.native_wrapped_symbol
    return [p.symbol for p in market.prices if p.address is None and p.symbol != base]


def build_fresh_plan(market: MarketConfig) -> List[PlanEntry]:
    """Build the full provisioning sequence for a fresh environment."""
    weth = token(market.native_wrapped_symbol)
    pairs = oracle_pairs(market)
    pair_inputs = [token(s) for s in pairs] + [aggregator(s) for s in pairs]

    return [
        AccountRolesProvisioner("accounts", market.roles),
        MockTokenProvisioner("mock-tokens", market.tokens),
        deploy(
            "addresses-provider",
            "pool_addresses_provider.deploy",
            C.ADDRESSES_PROVIDER,
            market_id=market.market_id,
        ),
        configure(
            "set-pool-admin",
            "pool_addresses_provider.set_pool_admin",
            C.ADDRESSES_PROVIDER,
            DEPLOYER,
        ),
        configure(
            "set-emergency-admin",
            "pool_addresses_provider.set_emergency_admin",
            C.ADDRESSES_PROVIDER,
            EMERGENCY_ADMIN,
        ),
        deploy(
            "addresses-provider-registry",
            "pool_addresses_provider_registry.deploy",
            C.ADDRESSES_PROVIDER_REGISTRY,
        ),
        configure(
            "register-addresses-provider",
            "pool_addresses_provider_registry.register_addresses_provider",
            C.ADDRESSES_PROVIDER_REGISTRY,
            C.ADDRESSES_PROVIDER,
            provider_id=market.addresses_provider_id,
        ),
        deploy("pool-impl", "pool.deploy", C.POOL_IMPL),
        deploy(
            "pool-proxy",
            "pool_addresses_provider.set_pool_impl",
            C.POOL,
            C.ADDRESSES_PROVIDER,
            C.POOL_IMPL,
        ),
        deploy("pool-configurator-impl", "pool_configurator.deploy", C.POOL_CONFIGURATOR_IMPL),
        deploy(
            "pool-configurator-proxy",
            "pool_addresses_provider.set_pool_configurator_impl",
            C.POOL_CONFIGURATOR,
            C.ADDRESSES_PROVIDER,
            C.POOL_CONFIGURATOR_IMPL,
        ),
        configure(
            "register-risk-admin",
            "pool_configurator.register_risk_admin",
            C.POOL_CONFIGURATOR,
            RISK_ADMIN,
        ),
        deploy(
            "stable-variable-tokens-helper",
            "stable_and_variable_tokens_helper.deploy",
            C.STABLE_VARIABLE_TOKENS_HELPER,
            C.POOL,
            C.ADDRESSES_PROVIDER,
        ),
        deploy(
            "atokens-rates-helper",
            "atokens_and_rates_helper.deploy",
            C.ATOKENS_RATES_HELPER,
            C.POOL,
            C.ADDRESSES_PROVIDER,
            C.POOL_CONFIGURATOR,
        ),
        deploy("fallback-oracle", "price_oracle.deploy", C.PRICE_ORACLE),
        configure(
            "set-eth-usd-price",
            "price_oracle.set_eth_usd_price",
            C.PRICE_ORACLE,
            price=market.mock_usd_price,
        ),
        AssetPriceProvisioner("asset-prices", market.prices, oracle=C.PRICE_ORACLE),
        MockAggregatorProvisioner("mock-aggregators", market.prices),
        deploy(
            "aave-oracle",
            "aave_oracle.deploy",
            C.AAVE_ORACLE,
            *pair_inputs,
            C.PRICE_ORACLE,
            weth,
            assets=pairs,
            base_currency=market.native_wrapped_symbol,
            base_currency_unit=market.oracle_base_unit,
        ),
        configure(
            "set-price-oracle",
            "pool_addresses_provider.set_price_oracle",
            C.ADDRESSES_PROVIDER,
            C.PRICE_ORACLE,
        ),
        deploy("rate-oracle", "rate_oracle.deploy", C.RATE_ORACLE),
        configure(
            "set-rate-oracle",
            "pool_addresses_provider.set_rate_oracle",
            C.ADDRESSES_PROVIDER,
            C.RATE_ORACLE,
        ),
        MarketRateProvisioner("market-rates", market.rates, oracle=C.RATE_ORACLE, owner=DEPLOYER),
        deploy(
            "protocol-data-provider",
            "aave_protocol_data_provider.deploy",
            C.PROTOCOL_DATA_PROVIDER,
            C.ADDRESSES_PROVIDER,
        ),
        ReserveInitProvisioner(
            "init-reserves",
            market.reserves,
            configurator=C.POOL_CONFIGURATOR,
            admin=DEPLOYER,
            naming=market.naming,
            treasury=market.treasury,
            incentives_controller=market.incentives_controller,
        ),
        ReserveConfigProvisioner(
            "configure-reserves",
            market.reserves,
            helper=C.ATOKENS_RATES_HELPER,
            data_provider=C.PROTOCOL_DATA_PROVIDER,
            admin=DEPLOYER,
        ),
        ReserveDropProvisioner("drop-reserves", market.dropped_reserves, configurator=C.POOL_CONFIGURATOR),
        deploy(
            "flash-loan-receiver",
            "mock_flash_loan_receiver.deploy",
            C.FLASH_LOAN_RECEIVER,
            C.ADDRESSES_PROVIDER,
        ),
        deploy("uniswap-router", "mock_uniswap_router.deploy", C.UNISWAP_ROUTER),
        deploy("wallet-balance-provider", "wallet_balance_provider.deploy", C.WALLET_BALANCE_PROVIDER),
        deploy("weth-gateway", "weth_gateway.deploy", C.WETH_GATEWAY, weth),
        configure("authorize-weth-gateway", "weth_gateway.authorize_pool", C.WETH_GATEWAY, C.POOL),
    ]


def build_external_plan(market: MarketConfig) -> List[PlanEntry]:
    """Build the read-only attach steps for an external environment."""
    return [
        ProvisioningStep(
            name=f"attach:{name}",
            action=ATTACH_ACTION,
            output=name,
            config={"name": name},
        )
        for name in market.external_resources
    ]


class PlanBuilder:
    """Builds verified plans for a market."""

    def __init__(self, market: MarketConfig) -> None:
        self._market = market

    def build(self, mode: str) -> List[PlanEntry]:
        """Build and verify the plan for ``mode`` ("fresh" or "external")."""
        if mode == "external":
            plan = build_external_plan(self._market)
        else:
            plan = build_fresh_plan(self._market)
        verify_order(plan)
        return plan

    def preview(self, mode: str) -> PlanPreview:
        """Describe the elementary steps of the plan without running them."""
        plan = self.build(mode)
        return PlanPreview(mode=mode, steps=[step.describe() for step in flatten(plan)])
