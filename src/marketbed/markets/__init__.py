"""
Market catalogs.

Static descriptions of the tokens, prices, rates and reserves a test
market is provisioned with.
"""

from marketbed.markets.defaults import DEFAULT_MARKET, build_token_catalog
from marketbed.markets.models import (
    DEFAULT_DECIMALS,
    ZERO_ADDRESS,
    AssetPrice,
    MarketConfig,
    MarketRate,
    ReserveParams,
    RoleAccount,
    TokenDescriptor,
    TokenKind,
    TokenNaming,
)

__all__ = [
    "DEFAULT_DECIMALS",
    "DEFAULT_MARKET",
    "ZERO_ADDRESS",
    "AssetPrice",
    "MarketConfig",
    "MarketRate",
    "ReserveParams",
    "RoleAccount",
    "TokenDescriptor",
    "TokenKind",
    "TokenNaming",
    "build_token_catalog",
]
