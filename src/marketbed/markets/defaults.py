"""
Default catalog for the simulated test market.

Token decimals come from the reserve configuration; tokens that are not
reserves have no configured precision and deploy with DEFAULT_DECIMALS.
"""

from __future__ import annotations

from marketbed.markets.models import (
    AssetPrice,
    MarketConfig,
    MarketRate,
    ReserveParams,
    RoleAccount,
    TokenDescriptor,
    TokenKind,
)

USD_ADDRESS = "0x10F7Fc1F91Ba351f9C629c5947AD69bD03C05b96"
MOCK_USD_PRICE_IN_WEI = "5848466240000000"
TREASURY_ADDRESS = "0x464C71f6c2F760DdA6093dCB91C24c39e5d6e18c"

NATIVE_WRAPPED_SYMBOL = "WETH"

TOKEN_SYMBOLS: tuple[str, ...] = (
    "WETH",
    "DAI",
    "TUSD",
    "USDC",
    "USDT",
    "SUSD",
    "AAVE",
    "BAT",
    "MKR",
    "LINK",
    "KNC",
    "WBTC",
    "MANA",
    "ZRX",
    "SNX",
    "BUSD",
    "YFI",
    "REN",
    "UNI",
    "ENJ",
    "USD",
)

# Initial prices, in wei
ASSET_PRICES: dict[str, str] = {
    "WETH": "1000000000000000000",
    "DAI": "3700000000000000",
    "TUSD": "4000000000000000",
    "USDC": "4000000000000000",
    "USDT": "4000000000000000",
    "SUSD": "4000000000000000",
    "AAVE": "3620000000000000000",
    "BAT": "367300000000000",
    "MKR": "2508581700000000000",
    "LINK": "17730000000000000",
    "KNC": "1940000000000000",
    "WBTC": "47332685440000000000",
    "MANA": "158100000000000",
    "ZRX": "244862500000000",
    "SNX": "3500000000000000",
    "BUSD": "4000000000000000",
    "YFI": "22407033000000000000",
    "REN": "1100000000000000",
    "UNI": "5440000000000000",
    "ENJ": "176040000000000",
    "USD": MOCK_USD_PRICE_IN_WEI,
}

# Initial market borrow rates, in ray
MARKET_BORROW_RATES: dict[str, str] = {
    "WETH": "30000000000000000000000000",
    "DAI": "39000000000000000000000000",
    "USDC": "39000000000000000000000000",
    "USDT": "35000000000000000000000000",
    "AAVE": "30000000000000000000000000",
    "LINK": "30000000000000000000000000",
    "WBTC": "30000000000000000000000000",
    "KNC": "30000000000000000000000000",
}

RESERVES: tuple[ReserveParams, ...] = (
    ReserveParams("DAI", 18, 7500, 8000, 10500, 1000, strategy="rateStrategyStableTwo"),
    ReserveParams("USDC", 6, 8000, 8500, 10500, 1000, strategy="rateStrategyStableThree"),
    ReserveParams("USDT", 6, 8000, 8500, 10500, 1000, strategy="rateStrategyStableThree"),
    ReserveParams(
        "AAVE",
        18,
        5000,
        6500,
        11000,
        0,
        borrowing_enabled=False,
        stable_borrow_enabled=False,
        strategy="rateStrategyAAVE",
    ),
    ReserveParams(
        "WBTC", 8, 7000, 7500, 11000, 2000, stable_borrow_enabled=False, strategy="rateStrategyWBTC"
    ),
    ReserveParams("WETH", 18, 8000, 8250, 10500, 1000, strategy="rateStrategyWETH"),
    ReserveParams("LINK", 18, 7000, 7500, 11000, 2000, strategy="rateStrategyVolatileOne"),
    ReserveParams("KNC", 18, 6000, 6500, 11000, 2000, strategy="rateStrategyVolatileTwo"),
)

# Signer index per role; index 1 is left free as a secondary test wallet
ROLES: tuple[RoleAccount, ...] = (
    RoleAccount("Deployer", 0),
    RoleAccount("EmergencyAdmin", 2),
    RoleAccount("RiskAdmin", 3),
)

DROPPED_RESERVES: tuple[str, ...] = ("KNC",)

EXTERNAL_RESOURCES: tuple[str, ...] = (
    "PoolAddressesProvider",
    "Pool",
    "PoolConfigurator",
    "AaveOracle",
    "AaveProtocolDataProvider",
)


def build_token_catalog(
    symbols: tuple[str, ...] | list[str],
    reserves: tuple[ReserveParams, ...],
    native_wrapped: str = NATIVE_WRAPPED_SYMBOL,
) -> tuple[TokenDescriptor, ...]:
    """Build token descriptors, taking decimals from matching reserves."""
    decimals = {r.symbol: r.decimals for r in reserves}
    return tuple(
        TokenDescriptor(
            symbol=symbol,
            decimals=decimals.get(symbol),
            kind=TokenKind.NATIVE_WRAPPED if symbol == native_wrapped else TokenKind.STANDARD,
        )
        for symbol in symbols
    )


def build_price_catalog(prices: dict[str, str], usd_address: str = USD_ADDRESS) -> tuple[AssetPrice, ...]:
    """Build price entries; the USD quote asset is pinned to its static address."""
    return tuple(
        AssetPrice(symbol, price, address=usd_address if symbol == "USD" else None)
        for symbol, price in prices.items()
    )


DEFAULT_MARKET = MarketConfig(
    market_id="Aave genesis market",
    tokens=build_token_catalog(TOKEN_SYMBOLS, RESERVES),
    prices=build_price_catalog(ASSET_PRICES),
    rates=tuple(MarketRate(symbol, rate) for symbol, rate in MARKET_BORROW_RATES.items()),
    reserves=RESERVES,
    roles=ROLES,
    mock_usd_price=MOCK_USD_PRICE_IN_WEI,
    treasury=TREASURY_ADDRESS,
    dropped_reserves=DROPPED_RESERVES,
    external_resources=EXTERNAL_RESOURCES,
)
