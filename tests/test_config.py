"""Tests for settings and market catalog loading."""

from dataclasses import replace

import pytest
from pydantic import ValidationError
from marketbed.config.loader import load_market_config, parse_market, validate_market
from marketbed.config.settings import Settings, get_settings
from marketbed.core.errors import ConfigurationError
from marketbed.markets.defaults import DEFAULT_MARKET, USD_ADDRESS
from marketbed.markets.models import RoleAccount, TokenDescriptor, TokenKind

SMALL_MARKET_YAML = """\
market_id: Small market
tokens: [WETH, DAI, USDC, USD]
prices:
  WETH: "1000000000000000000"
  DAI: "3700000000000000"
  USDC: "4000000000000000"
  USD: "5848466240000000"
rates:
  DAI: "39000000000000000000000000"
reserves:
  DAI: {decimals: 18, ltv: 7500, liquidation_threshold: 8000, liquidation_bonus: 10500, reserve_factor: 1000}
  USDC: {decimals: 6, ltv: 8000, liquidation_threshold: 8500, liquidation_bonus: 10500, reserve_factor: 1000}
dropped_reserves: []
external_resources: [Pool]
"""


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MARKETBED_FORK", raising=False)
        settings = Settings()

        assert settings.fork is False
        assert settings.transport == "memory"
        assert settings.export_path is None

    def test_fork_switch_from_environment(self, monkeypatch):
        monkeypatch.setenv("MARKETBED_FORK", "true")
        monkeypatch.setenv("MARKETBED_TRANSPORT", "jsonrpc")

        settings = Settings()

        assert settings.fork is True
        assert settings.transport == "jsonrpc"

    def test_rpc_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(rpc_timeout=0)

    def test_invalid_environment_is_config_error(self, monkeypatch):
        monkeypatch.setenv("MARKETBED_RPC_TIMEOUT", "-1")
        get_settings.cache_clear()

        try:
            with pytest.raises(ConfigurationError):
                get_settings()
        finally:
            get_settings.cache_clear()

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()

        assert get_settings() is get_settings()

        get_settings.cache_clear()


class TestLoadMarketConfig:
    """Tests for load_market_config."""

    def test_default_market_when_no_path(self):
        market = load_market_config()

        assert market is DEFAULT_MARKET
        assert market.native_wrapped_symbol == "WETH"

    def test_load_yaml_market(self, tmp_path):
        path = tmp_path / "market.yaml"
        path.write_text(SMALL_MARKET_YAML)

        market = load_market_config(path)

        assert market.market_id == "Small market"
        assert market.token_symbols == ["WETH", "DAI", "USDC", "USD"]
        assert [t.decimals for t in market.tokens] == [None, 18, 6, None]
        assert market.tokens[0].kind is TokenKind.NATIVE_WRAPPED
        assert [r.symbol for r in market.reserves] == ["DAI", "USDC"]
        assert market.dropped_reserves == ()
        assert market.external_resources == ("Pool",)
        # Keys absent from the file keep the default market's values
        assert market.roles == DEFAULT_MARKET.roles

    def test_usd_price_is_pinned(self, tmp_path):
        path = tmp_path / "market.yaml"
        path.write_text(SMALL_MARKET_YAML)

        prices = {p.symbol: p for p in load_market_config(path).prices}

        assert prices["USD"].address == USD_ADDRESS
        assert prices["DAI"].address is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_market_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "market.yaml"
        path.write_text("tokens: [WETH, DAI\n")

        with pytest.raises(ConfigurationError):
            load_market_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "market.yaml"
        path.write_text("- WETH\n- DAI\n")

        with pytest.raises(ConfigurationError):
            load_market_config(path)

    def test_scalar_list_value_is_config_error(self, tmp_path):
        path = tmp_path / "market.yaml"
        path.write_text("external_resources: 5\n")

        with pytest.raises(ConfigurationError):
            load_market_config(path)

    def test_empty_file_is_default_market(self, tmp_path):
        path = tmp_path / "market.yaml"
        path.write_text("")

        assert load_market_config(path) == DEFAULT_MARKET


class TestParseMarket:
    """Tests for parse_market."""

    def test_token_dicts_with_explicit_decimals(self):
        market = parse_market(
            {"tokens": [{"symbol": "WETH"}, {"symbol": "BAT", "decimals": 18}, "ZRX"]},
        )

        assert market.tokens == (
            TokenDescriptor("WETH", None, TokenKind.NATIVE_WRAPPED),
            TokenDescriptor("BAT", 18),
            TokenDescriptor("ZRX", None),
        )

    def test_malformed_section(self):
        with pytest.raises(ConfigurationError):
            parse_market({"roles": ["Deployer"]})

    @pytest.mark.parametrize("key", ["external_resources", "dropped_reserves"])
    def test_scalar_where_list_expected(self, key):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_market({key: 5})

        assert key in exc_info.value.message

    def test_null_list_is_empty(self):
        assert parse_market({"dropped_reserves": None}).dropped_reserves == ()

    def test_treasury_is_string(self):
        assert parse_market({"treasury": 0}).treasury == "0"

    def test_unknown_reserve_field(self):
        with pytest.raises(ConfigurationError):
            parse_market({"reserves": {"DAI": {"decimals": 18, "bogus": 1}}})


class TestValidateMarket:
    """Tests for validate_market."""

    def test_default_market_is_valid(self):
        assert validate_market(DEFAULT_MARKET) is DEFAULT_MARKET

    def test_requires_one_native_wrapped_token(self, small_market):
        tokens = tuple(replace(t, kind=TokenKind.STANDARD) for t in small_market.tokens)

        with pytest.raises(ConfigurationError):
            validate_market(replace(small_market, tokens=tokens))

    def test_requires_market_roles(self, small_market):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_market(replace(small_market, roles=(RoleAccount("Deployer", 0),)))

        assert exc_info.value.details["roles"] == "EmergencyAdmin, RiskAdmin"

    def test_catalog_references_unknown_token(self, small_market):
        tokens = tuple(t for t in small_market.tokens if t.symbol != "DAI")

        with pytest.raises(ConfigurationError) as exc_info:
            validate_market(replace(small_market, tokens=tokens))

        assert exc_info.value.details["symbols"] == "DAI"

    def test_dropped_reserve_must_exist(self, small_market):
        with pytest.raises(ConfigurationError):
            validate_market(replace(small_market, dropped_reserves=("BAT",)))
