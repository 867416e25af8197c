"""
Bulk resource provisioners.

A bulk provisioner expands one logical resource class ("all mock tokens",
"all price feeds") into one elementary step per catalog entry. The executor
runs the expanded steps one at a time and stops at the first failure, like
any other step.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, List, Sequence, TypeVar

from marketbed.markets.models import (
    AssetPrice,
    MarketRate,
    ReserveParams,
    RoleAccount,
    TokenDescriptor,
    TokenKind,
    TokenNaming,
)
from marketbed.orchestration.steps import ProvisioningStep

E = TypeVar("E")


def token(symbol: str) -> str:
    return f"token:{symbol}"


def aggregator(symbol: str) -> str:
    return f"aggregator:{symbol}"


def role(name: str) -> str:
    return f"role:{name}"


def reserve(symbol: str) -> str:
    return f"reserve:{symbol}"


class BulkProvisioner(ABC, Generic[E]):
    """Expands a static catalog into elementary provisioning steps."""

    def __init__(self, name: str, catalog: Sequence[E]) -> None:
        self._name = name
        self._catalog = tuple(catalog)

    @property
    def name(self) -> str:
        return self._name

    @property
    def catalog(self) -> tuple:
        return self._catalog

    def steps(self) -> List[ProvisioningStep]:
        return [self.step_for(entry) for entry in self._catalog]

    @abstractmethod
    def step_for(self, entry: E) -> ProvisioningStep:
        """Build the elementary step for one catalog entry."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, entries={len(self._catalog)})"


class AccountRolesProvisioner(BulkProvisioner[RoleAccount]):
    """Resolves the signer account backing each market role."""

    def step_for(self, entry: RoleAccount) -> ProvisioningStep:
        return ProvisioningStep(
            name=f"{self.name}:{entry.role}",
            action="account.resolve",
            output=role(entry.role),
            config={"index": entry.index},
        )


def _standard_token(name: str, entry: TokenDescriptor) -> ProvisioningStep:
    return ProvisioningStep(
        name=f"{name}:{entry.symbol}",
        action="mintable_erc20.deploy",
        output=token(entry.symbol),
        config={
            "name": entry.symbol,
            "symbol": entry.symbol,
            "decimals": entry.effective_decimals,
        },
    )


def _native_wrapped_token(name: str, entry: TokenDescriptor) -> ProvisioningStep:
    return ProvisioningStep(
        name=f"{name}:{entry.symbol}",
        action="weth9_mocked.deploy",
        output=token(entry.symbol),
    )


TOKEN_HANDLERS: Dict[TokenKind, Callable[[str, TokenDescriptor], ProvisioningStep]] = {
    TokenKind.STANDARD: _standard_token,
    TokenKind.NATIVE_WRAPPED: _native_wrapped_token,
}


class MockTokenProvisioner(BulkProvisioner[TokenDescriptor]):
    """Deploys every mock token in the catalog, dispatching on its kind.

    Tokens without a configured precision deploy with DEFAULT_DECIMALS.
    """

    def step_for(self, entry: TokenDescriptor) -> ProvisioningStep:
        return TOKEN_HANDLERS[entry.kind](self.name, entry)


class AssetPriceProvisioner(BulkProvisioner[AssetPrice]):
    """Sets the initial price of each asset in the fallback oracle."""

    def __init__(self, name: str, catalog: Sequence[AssetPrice], oracle: str) -> None:
        super().__init__(name, catalog)
        self._oracle = oracle

    def step_for(self, entry: AssetPrice) -> ProvisioningStep:
        inputs = (self._oracle,) if entry.address else (self._oracle, token(entry.symbol))
        config = {"symbol": entry.symbol, "price": entry.price}
        if entry.address:
            config["asset_address"] = entry.address
        return ProvisioningStep(
            name=f"{self.name}:{entry.symbol}",
            action="price_oracle.set_asset_price",
            inputs=inputs,
            config=config,
        )


class MockAggregatorProvisioner(BulkProvisioner[AssetPrice]):
    """Deploys one mock price feed per priced asset."""

    def step_for(self, entry: AssetPrice) -> ProvisioningStep:
        return ProvisioningStep(
            name=f"{self.name}:{entry.symbol}",
            action="mock_aggregator.deploy",
            output=aggregator(entry.symbol),
            config={"initial_answer": entry.price},
        )


class MarketRateProvisioner(BulkProvisioner[MarketRate]):
    """Sets the initial market borrow rate of each asset in the rate oracle."""

    def __init__(self, name: str, catalog: Sequence[MarketRate], oracle: str, owner: str) -> None:
        super().__init__(name, catalog)
        self._oracle = oracle
        self._owner = owner

    def step_for(self, entry: MarketRate) -> ProvisioningStep:
        return ProvisioningStep(
            name=f"{self.name}:{entry.symbol}",
            action="rate_oracle.set_market_borrow_rate",
            inputs=(self._oracle, token(entry.symbol), self._owner),
            config={"symbol": entry.symbol, "rate": entry.borrow_rate},
        )


class ReserveInitProvisioner(BulkProvisioner[ReserveParams]):
    """Initialises each reserve through the pool configurator."""

    def __init__(
        self,
        name: str,
        catalog: Sequence[ReserveParams],
        *,
        configurator: str,
        admin: str,
        naming: TokenNaming,
        treasury: str,
        incentives_controller: str,
    ) -> None:
        super().__init__(name, catalog)
        self._configurator = configurator
        self._admin = admin
        self._naming = naming
        self._treasury = treasury
        self._incentives_controller = incentives_controller

    def step_for(self, entry: ReserveParams) -> ProvisioningStep:
        naming = self._naming
        symbol = f"{naming.symbol_prefix}{entry.symbol}"
        return ProvisioningStep(
            name=f"{self.name}:{entry.symbol}",
            action="pool_configurator.init_reserve",
            inputs=(self._configurator, token(entry.symbol), self._admin),
            output=reserve(entry.symbol),
            config={
                "decimals": entry.decimals,
                "strategy": entry.strategy,
                "a_token_name": f"{naming.a_token_prefix} {symbol}",
                "a_token_symbol": f"a{symbol}",
                "stable_debt_token_name": f"{naming.stable_debt_prefix} {symbol}",
                "stable_debt_token_symbol": f"stableDebt{symbol}",
                "variable_debt_token_name": f"{naming.variable_debt_prefix} {symbol}",
                "variable_debt_token_symbol": f"variableDebt{symbol}",
                "treasury": self._treasury,
                "incentives_controller": self._incentives_controller,
            },
        )


class ReserveConfigProvisioner(BulkProvisioner[ReserveParams]):
    """Applies collateral and borrowing parameters to each reserve."""

    def __init__(
        self,
        name: str,
        catalog: Sequence[ReserveParams],
        *,
        helper: str,
        data_provider: str,
        admin: str,
    ) -> None:
        super().__init__(name, catalog)
        self._helper = helper
        self._data_provider = data_provider
        self._admin = admin

    def step_for(self, entry: ReserveParams) -> ProvisioningStep:
        return ProvisioningStep(
            name=f"{self.name}:{entry.symbol}",
            action="reserve.configure",
            inputs=(self._helper, self._data_provider, reserve(entry.symbol), self._admin),
            config={
                "ltv": entry.ltv,
                "liquidation_threshold": entry.liquidation_threshold,
                "liquidation_bonus": entry.liquidation_bonus,
                "reserve_factor": entry.reserve_factor,
                "borrowing_enabled": entry.borrowing_enabled,
                "stable_borrow_enabled": entry.stable_borrow_enabled,
            },
        )


class ReserveDropProvisioner(BulkProvisioner[str]):
    """Drops reserves that are initialised only to be removed again."""

    def __init__(self, name: str, catalog: Sequence[str], configurator: str) -> None:
        super().__init__(name, catalog)
        self._configurator = configurator

    def step_for(self, entry: str) -> ProvisioningStep:
        return ProvisioningStep(
            name=f"{self.name}:{entry}",
            action="pool_configurator.drop_reserve",
            inputs=(self._configurator, reserve(entry), token(entry)),
        )
