"""
Catalog types describing a simulated lending market.

Every catalog is a static list known before a run starts. Bulk
provisioners expand each entry into one provisioning step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

DEFAULT_DECIMALS = 18

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class TokenKind(StrEnum):
    """How a mock token is deployed."""

    STANDARD = "standard"  # mintable ERC20
    NATIVE_WRAPPED = "native_wrapped"  # WETH9-style wrapper


@dataclass(frozen=True)
class TokenDescriptor:
    """A mock token to deploy. Missing decimals fall back to DEFAULT_DECIMALS."""

    symbol: str
    decimals: int | None = None
    kind: TokenKind = TokenKind.STANDARD

    @property
    def effective_decimals(self) -> int:
        return self.decimals if self.decimals is not None else DEFAULT_DECIMALS


@dataclass(frozen=True)
class AssetPrice:
    """Initial price of an asset, in wei.

    ``address`` pins the asset to a static address instead of the
    deployed mock token (the USD quote asset has no token).
    """

    symbol: str
    price: str
    address: str | None = None


@dataclass(frozen=True)
class MarketRate:
    """Initial market borrow rate for an asset, in ray."""

    symbol: str
    borrow_rate: str


@dataclass(frozen=True)
class ReserveParams:
    """Risk parameters of a reserve, in basis points."""

    symbol: str
    decimals: int
    ltv: int
    liquidation_threshold: int
    liquidation_bonus: int
    reserve_factor: int
    borrowing_enabled: bool = True
    stable_borrow_enabled: bool = True
    strategy: str = "default"


@dataclass(frozen=True)
class RoleAccount:
    """A market role held by the signer at ``index``."""

    role: str
    index: int


@dataclass(frozen=True)
class TokenNaming:
    """Name prefixes used for the tokens minted per reserve."""

    a_token_prefix: str = "Aave interest bearing"
    stable_debt_prefix: str = "Aave stable debt bearing"
    variable_debt_prefix: str = "Aave variable debt bearing"
    symbol_prefix: str = ""


@dataclass(frozen=True)
class MarketConfig:
    """Everything the plan builder needs to provision one market."""

    market_id: str
    tokens: tuple[TokenDescriptor, ...]
    prices: tuple[AssetPrice, ...]
    rates: tuple[MarketRate, ...]
    reserves: tuple[ReserveParams, ...]
    roles: tuple[RoleAccount, ...]
    mock_usd_price: str
    treasury: str = ZERO_ADDRESS
    incentives_controller: str = ZERO_ADDRESS
    oracle_base_unit: str = "1000000000000000000"
    addresses_provider_id: int = 1
    naming: TokenNaming = field(default_factory=TokenNaming)
    dropped_reserves: tuple[str, ...] = ()
    external_resources: tuple[str, ...] = ()

    @property
    def token_symbols(self) -> list[str]:
        return [t.symbol for t in self.tokens]

    @property
    def native_wrapped_symbol(self) -> str:
        """Symbol of the single native-wrapped token."""
        for token in self.tokens:
            if token.kind is TokenKind.NATIVE_WRAPPED:
                return token.symbol
        raise LookupError("Market has no native-wrapped token")

    def reserve(self, symbol: str) -> ReserveParams | None:
        return next((r for r in self.reserves if r.symbol == symbol), None)
