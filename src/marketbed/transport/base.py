from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """Submits provisioning actions and returns the produced handle."""

    async def provision(
        self,
        action: str,
        config: Mapping[str, Any],
        dependencies: Mapping[str, str],
    ) -> str:
        ...


@runtime_checkable
class EnvironmentProbe(Protocol):
    """Looks up resources in an already provisioned environment."""

    async def lookup(self, name: str) -> Optional[str]:
        ...
