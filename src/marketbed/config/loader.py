"""
Market catalog loading.

A market file is YAML. Every top-level key is optional and replaces the
matching part of the default market:

    market_id: My test market
    native_wrapped: WETH
    tokens: [WETH, DAI, USDC]          # or [{symbol: DAI, decimals: 18}]
    prices: {WETH: "1000000000000000000", USD: "5848466240000000"}
    usd_address: "0x10F7..."
    rates: {DAI: "39000000000000000000000000"}
    reserves:
      DAI: {decimals: 18, ltv: 7500, liquidation_threshold: 8000,
            liquidation_bonus: 10500, reserve_factor: 1000}
    roles: {Deployer: 0, EmergencyAdmin: 2, RiskAdmin: 3}
    dropped_reserves: [KNC]
    external_resources: [PoolAddressesProvider, Pool]
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

import structlog
import yaml

from marketbed.core.errors import ConfigurationError
from marketbed.markets.defaults import (
    DEFAULT_MARKET,
    NATIVE_WRAPPED_SYMBOL,
    USD_ADDRESS,
    build_price_catalog,
    build_token_catalog,
)
from marketbed.markets.models import (
    MarketConfig,
    MarketRate,
    ReserveParams,
    RoleAccount,
    TokenDescriptor,
    TokenKind,
    TokenNaming,
)
from marketbed.orchestration.plan_builder import REQUIRED_ROLES

logger = structlog.get_logger()


def load_market_config(path: str | Path | None = None) -> MarketConfig:
    """
    Load a market catalog, merged over the default market.

    Args:
        path: Optional YAML market file; the default market when omitted

    Returns:
        Validated MarketConfig

    Raises:
        ConfigurationError: If the file is missing, malformed or inconsistent
    """
    if path is None:
        return validate_market(DEFAULT_MARKET)

    market_path = Path(path)
    if not market_path.exists():
        raise ConfigurationError(f"Market file not found: {market_path}", details={"path": str(market_path)})

    try:
        with open(market_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid market YAML: {e}", details={"path": str(market_path)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Market file must contain a mapping", details={"path": str(market_path)})

    logger.debug("loaded_market_file", path=str(market_path), keys=sorted(data))
    return validate_market(parse_market(data, base=DEFAULT_MARKET))


def parse_market(data: dict[str, Any], base: MarketConfig = DEFAULT_MARKET) -> MarketConfig:
    """Build a MarketConfig from parsed YAML, keeping ``base`` for absent keys."""
    try:
        reserves = _parse_reserves(data["reserves"]) if "reserves" in data else base.reserves
        native_wrapped = data.get("native_wrapped", NATIVE_WRAPPED_SYMBOL)

        if "tokens" in data:
            tokens = _parse_tokens(data["tokens"], reserves, native_wrapped)
        elif "reserves" in data or "native_wrapped" in data:
            tokens = build_token_catalog(base.token_symbols, reserves, native_wrapped)
        else:
            tokens = base.tokens

        if "prices" in data:
            prices = build_price_catalog(
                {str(k): str(v) for k, v in data["prices"].items()},
                usd_address=data.get("usd_address", USD_ADDRESS),
            )
        else:
            prices = base.prices

        rates = (
            tuple(MarketRate(str(k), str(v)) for k, v in data["rates"].items())
            if "rates" in data
            else base.rates
        )
        roles = (
            tuple(RoleAccount(str(k), int(v)) for k, v in data["roles"].items())
            if "roles" in data
            else base.roles
        )
        naming = TokenNaming(**data["naming"]) if "naming" in data else base.naming
        treasury = str(data.get("treasury", base.treasury))
        dropped_reserves = _names(data, "dropped_reserves", base.dropped_reserves)
        external_resources = _names(data, "external_resources", base.external_resources)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Malformed market definition: {e}") from e

    return replace(
        base,
        market_id=str(data.get("market_id", base.market_id)),
        tokens=tokens,
        prices=prices,
        rates=rates,
        reserves=reserves,
        roles=roles,
        naming=naming,
        mock_usd_price=str(data.get("mock_usd_price", base.mock_usd_price)),
        treasury=treasury,
        dropped_reserves=dropped_reserves,
        external_resources=external_resources,
    )


def _names(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if key not in data:
        return default
    value = data[key] if data[key] is not None else []
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a list, got {type(value).__name__}")
    return tuple(str(name) for name in value)


def _parse_tokens(
    raw: list[Any], reserves: tuple[ReserveParams, ...], native_wrapped: str
) -> tuple[TokenDescriptor, ...]:
    if all(isinstance(item, str) for item in raw):
        return build_token_catalog(raw, reserves, native_wrapped)

    tokens = []
    for item in raw:
        if isinstance(item, str):
            item = {"symbol": item}
        symbol = str(item["symbol"])
        default_kind = TokenKind.NATIVE_WRAPPED if symbol == native_wrapped else TokenKind.STANDARD
        kind = TokenKind(item.get("kind", default_kind))
        decimals = item.get("decimals")
        tokens.append(TokenDescriptor(symbol, int(decimals) if decimals is not None else None, kind))
    return tuple(tokens)


def _parse_reserves(raw: dict[str, dict[str, Any]]) -> tuple[ReserveParams, ...]:
    return tuple(ReserveParams(symbol=str(symbol), **params) for symbol, params in raw.items())


def validate_market(market: MarketConfig) -> MarketConfig:
    """Check that the catalogs reference each other consistently."""
    symbols = set(market.token_symbols)
    wrapped = [t.symbol for t in market.tokens if t.kind is TokenKind.NATIVE_WRAPPED]
    if len(wrapped) != 1:
        raise ConfigurationError(
            "Market needs exactly one native-wrapped token",
            details={"found": ", ".join(wrapped) or "none"},
        )

    roles = {r.role for r in market.roles}
    missing_roles = [r for r in REQUIRED_ROLES if r not in roles]
    if missing_roles:
        raise ConfigurationError("Market is missing roles", details={"roles": ", ".join(missing_roles)})

    referenced = (
        {p.symbol for p in market.prices if p.address is None}
        | {r.symbol for r in market.rates}
        | {r.symbol for r in market.reserves}
    )
    unknown = sorted(referenced - symbols)
    if unknown:
        raise ConfigurationError(
            "Catalog entries reference tokens the market does not deploy",
            details={"symbols": ", ".join(unknown)},
        )

    reserve_symbols = {r.symbol for r in market.reserves}
    not_reserves = [s for s in market.dropped_reserves if s not in reserve_symbols]
    if not_reserves:
        raise ConfigurationError(
            "Dropped reserves must be initialised first",
            details={"symbols": ", ".join(not_reserves)},
        )
    return market
