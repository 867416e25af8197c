"""Tests for orchestration/plan_builder.py."""

import pytest
from marketbed.core.errors import UnresolvedDependencyError
from marketbed.markets.defaults import DEFAULT_MARKET
from marketbed.orchestration.plan_builder import (
    ATTACH_ACTION,
    ContractId,
    PlanBuilder,
    build_external_plan,
    build_fresh_plan,
    oracle_pairs,
)
from marketbed.orchestration.steps import flatten, verify_order

FRESH_ORDER = [
    "accounts",
    "mock-tokens",
    "addresses-provider",
    "set-pool-admin",
    "set-emergency-admin",
    "addresses-provider-registry",
    "register-addresses-provider",
    "pool-impl",
    "pool-proxy",
    "pool-configurator-impl",
    "pool-configurator-proxy",
    "register-risk-admin",
    "stable-variable-tokens-helper",
    "atokens-rates-helper",
    "fallback-oracle",
    "set-eth-usd-price",
    "asset-prices",
    "mock-aggregators",
    "aave-oracle",
    "set-price-oracle",
    "rate-oracle",
    "set-rate-oracle",
    "market-rates",
    "protocol-data-provider",
    "init-reserves",
    "configure-reserves",
    "drop-reserves",
    "flash-loan-receiver",
    "uniswap-router",
    "wallet-balance-provider",
    "weth-gateway",
    "authorize-weth-gateway",
]


class TestFreshPlan:
    """Tests for the fresh provisioning plan."""

    def test_entries_follow_fixed_order(self):
        plan = build_fresh_plan(DEFAULT_MARKET)

        assert [entry.name for entry in plan] == FRESH_ORDER

    def test_default_plan_is_dependency_ordered(self):
        verify_order(build_fresh_plan(DEFAULT_MARKET))

    def test_small_market_plan_is_dependency_ordered(self, small_market):
        verify_order(build_fresh_plan(small_market))

    def test_outputs_are_unique(self):
        outputs = [s.output for s in flatten(build_fresh_plan(DEFAULT_MARKET)) if s.output]

        assert len(outputs) == len(set(outputs))

    def test_every_core_contract_is_produced(self):
        outputs = {s.output for s in flatten(build_fresh_plan(DEFAULT_MARKET))}

        assert {str(c) for c in ContractId} <= outputs

    def test_one_token_per_catalog_entry(self):
        steps = flatten(build_fresh_plan(DEFAULT_MARKET))
        token_steps = [s for s in steps if s.name.startswith("mock-tokens:")]

        assert len(token_steps) == len(DEFAULT_MARKET.tokens)
        weth = [s for s in token_steps if s.output == "token:WETH"]
        assert weth[0].action == "weth9_mocked.deploy"

    def test_pool_proxy_reads_provider_and_impl(self):
        pool = next(s for s in flatten(build_fresh_plan(DEFAULT_MARKET)) if s.name == "pool-proxy")

        assert pool.output == "Pool"
        assert pool.inputs == ("PoolAddressesProvider", "PoolImpl")

    def test_aave_oracle_wired_with_all_pairs(self, small_market):
        step = next(s for s in flatten(build_fresh_plan(small_market)) if s.name == "aave-oracle")

        assert step.config["assets"] == ["DAI", "USDC"]
        assert step.config["base_currency"] == "WETH"
        for symbol in ("DAI", "USDC"):
            assert f"token:{symbol}" in step.inputs
            assert f"aggregator:{symbol}" in step.inputs
        assert "PriceOracle" in step.inputs
        assert "token:WETH" in step.inputs

    def test_dropped_reserve_runs_after_initialisation(self, small_market):
        names = [s.name for s in flatten(build_fresh_plan(small_market))]

        assert names.index("drop-reserves:USDC") > names.index("init-reserves:USDC")
        assert names.index("drop-reserves:USDC") > names.index("configure-reserves:USDC")


def test_oracle_pairs_skip_pinned_and_base_assets():
    pairs = oracle_pairs(DEFAULT_MARKET)

    assert "USD" not in pairs
    assert "WETH" not in pairs
    assert "DAI" in pairs
    assert len(pairs) == len(DEFAULT_MARKET.prices) - 2


class TestExternalPlan:
    """Tests for the external attach plan."""

    def test_attach_step_per_external_resource(self, small_market):
        plan = build_external_plan(small_market)

        assert [s.name for s in plan] == ["attach:PoolAddressesProvider", "attach:Pool"]
        assert all(s.action == ATTACH_ACTION for s in plan)
        assert [s.output for s in plan] == ["PoolAddressesProvider", "Pool"]
        assert all(s.inputs == () for s in plan)


class TestPlanBuilder:
    """Tests for PlanBuilder."""

    def test_build_selects_plan_by_mode(self, small_market):
        builder = PlanBuilder(small_market)

        assert [e.name for e in builder.build("fresh")] == FRESH_ORDER
        assert len(builder.build("external")) == 2

    def test_preview_describes_elementary_steps(self, small_market):
        preview = PlanBuilder(small_market).preview("fresh")

        assert preview.mode == "fresh"
        assert preview.steps[0] == {
            "step": "accounts:Deployer",
            "action": "account.resolve",
            "inputs": [],
            "output": "role:Deployer",
        }
        assert "Pool" in preview.outputs
        assert "WETHGateway" in preview.outputs

    def test_build_rejects_unsatisfiable_plan(self, small_market):
        from dataclasses import replace

        from marketbed.markets.models import MarketRate

        broken = replace(small_market, rates=(MarketRate("BAT", "1"),))

        with pytest.raises(UnresolvedDependencyError) as exc_info:
            PlanBuilder(broken).build("fresh")

        assert exc_info.value.details["missing"] == "token:BAT"
