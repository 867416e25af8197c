"""
Environment selection.

Chooses once per run between provisioning a fresh market and attaching to
an externally supplied one (a fork or snapshot). Both paths run through
the same execution engine; the external path swaps the transport for a
read-only adapter over an environment probe.
"""

from __future__ import annotations

import uuid
from enum import StrEnum
from typing import Any, Mapping, Optional

import structlog

from marketbed.core.errors import ConfigurationError, EnvironmentMismatchError
from marketbed.logging import run_context
from marketbed.markets.models import MarketConfig
from marketbed.orchestration.engine import ExecutionEngine
from marketbed.orchestration.plan_builder import ATTACH_ACTION, PlanBuilder
from marketbed.orchestration.registry import ResourceRegistry
from marketbed.orchestration.results import RunResult
from marketbed.transport.base import EnvironmentProbe, Transport

logger = structlog.get_logger()


class EnvironmentMode(StrEnum):
    FRESH = "fresh"
    EXTERNAL = "external"


def select_mode(fork: bool) -> EnvironmentMode:
    """Map the fork switch to an environment mode."""
    return EnvironmentMode.EXTERNAL if fork else EnvironmentMode.FRESH


class ProbeTransport:
    """Serves attach steps from an environment probe; deploys nothing."""

    def __init__(self, probe: EnvironmentProbe) -> None:
        self._probe = probe

    async def provision(
        self,
        action: str,
        config: Mapping[str, Any],
        dependencies: Mapping[str, str],
    ) -> str:
        if action != ATTACH_ACTION:
            raise ConfigurationError(
                f"External environments are read-only; cannot run '{action}'",
                details={"action": action},
            )
        name = config["name"]
        handle = await self._probe.lookup(name)
        if handle is None:
            raise EnvironmentMismatchError(
                f"External environment has no resource '{name}'",
                details={"resource": name},
            )
        return handle


class EnvironmentOrchestrator:
    """Sets up a test environment in the selected mode.

    Args:
        market: Catalogs and parameters of the market to provision
        transport: Deployment transport, required in fresh mode
        probe: Lookup into the external environment, required in external mode
    """

    def __init__(
        self,
        market: MarketConfig,
        *,
        transport: Optional[Transport] = None,
        probe: Optional[EnvironmentProbe] = None,
    ) -> None:
        self._market = market
        self._transport = transport
        self._probe = probe
        self._builder = PlanBuilder(market)

    @property
    def builder(self) -> PlanBuilder:
        return self._builder

    async def setup(
        self,
        mode: EnvironmentMode,
        registry: Optional[ResourceRegistry] = None,
    ) -> RunResult:
        """Run the plan for ``mode`` and return the exported registry.

        On failure the error propagates and nothing is exported; a
        caller-supplied ``registry`` keeps whatever was registered before
        the failing step.
        """
        engine = ExecutionEngine(self._transport_for(mode))
        plan = self._builder.build(mode)

        with run_context(run_id=uuid.uuid4().hex[:12], mode=str(mode)):
            logger.info("environment_setup_started", market=self._market.market_id)
            result = await engine.execute(plan, registry=registry, mode=str(mode))
            logger.info(
                "environment_setup_finished",
                resources=result.total_resources,
                duration_seconds=round(result.duration_seconds, 3),
            )
        return result

    def _transport_for(self, mode: EnvironmentMode) -> Transport:
        if mode == EnvironmentMode.EXTERNAL:
            if self._probe is None:
                raise ConfigurationError("External mode requires an environment probe")
            return ProbeTransport(self._probe)
        if self._transport is None:
            raise ConfigurationError("Fresh mode requires a provisioning transport")
        return self._transport
