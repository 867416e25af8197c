"""
Wiring from settings to a configured orchestration run.

Used by the CLI and by the pytest hook; both call ``setup_environment``
once and consume the exported registry afterwards.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog

from marketbed.address_book import AddressBookProbe, save_address_book
from marketbed.config.loader import load_market_config
from marketbed.config.settings import Settings, get_settings
from marketbed.core.errors import ConfigurationError
from marketbed.markets.models import MarketConfig
from marketbed.orchestration.environment import EnvironmentMode, EnvironmentOrchestrator, select_mode
from marketbed.orchestration.results import RunResult
from marketbed.transport.base import EnvironmentProbe, Transport
from marketbed.transport.jsonrpc import JsonRpcTransport
from marketbed.transport.memory import InMemoryTransport

logger = structlog.get_logger()


def build_transport(settings: Settings) -> Transport:
    """Create the fresh-mode transport named in settings."""
    if settings.transport == "memory":
        return InMemoryTransport()
    if settings.transport == "jsonrpc":
        return JsonRpcTransport(settings.rpc_url, timeout=settings.rpc_timeout)
    raise ConfigurationError(
        f"Unknown transport '{settings.transport}'",
        details={"choices": "memory, jsonrpc"},
    )


def build_probe(settings: Settings) -> EnvironmentProbe:
    """Create the external-mode probe: an address book if set, else the node."""
    if settings.address_book:
        return AddressBookProbe.from_file(Path(settings.address_book))
    return JsonRpcTransport(settings.rpc_url, timeout=settings.rpc_timeout)


def build_orchestrator(
    settings: Settings,
    mode: EnvironmentMode,
    market: Optional[MarketConfig] = None,
    *,
    transport: Optional[Transport] = None,
    probe: Optional[EnvironmentProbe] = None,
) -> EnvironmentOrchestrator:
    """Create an orchestrator for ``mode``.

    The collaborator the mode needs is built from settings unless given
    explicitly; the other one is passed through as is.
    """
    market = market or load_market_config(settings.market_file)
    if mode == EnvironmentMode.EXTERNAL:
        probe = probe if probe is not None else build_probe(settings)
    else:
        transport = transport if transport is not None else build_transport(settings)
    return EnvironmentOrchestrator(market, transport=transport, probe=probe)


async def setup_environment(
    settings: Optional[Settings] = None,
    *,
    market: Optional[MarketConfig] = None,
    transport: Optional[Transport] = None,
    probe: Optional[EnvironmentProbe] = None,
) -> RunResult:
    """Select the mode once, run it, and persist the export if configured.

    Explicit ``transport``/``probe`` arguments take precedence over the ones
    settings would build; whichever the selected mode needs and was not
    given comes from settings.
    """
    settings = settings or get_settings()
    mode = select_mode(settings.fork)
    market = market or load_market_config(settings.market_file)

    orchestrator = build_orchestrator(settings, mode, market, transport=transport, probe=probe)

    result = await orchestrator.setup(mode)

    if settings.export_path:
        path = save_address_book(result.registry, Path(settings.export_path), market_id=market.market_id)
        logger.info("registry_exported", path=str(path), resources=result.total_resources)
    return result
