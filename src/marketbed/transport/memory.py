from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping


@dataclass(frozen=True)
class ProvisionCall:
    """A provisioning request as the transport received it."""

    action: str
    config: Dict[str, Any]
    dependencies: Dict[str, str]


class InMemoryTransport:
    """Local transport handing out deterministic fake addresses.

    The n-th call of a transport seeded with ``seed`` always yields the
    same address, so two runs of the same plan produce identical registries.
    """

    def __init__(self, seed: str = "marketbed") -> None:
        self._seed = seed
        self._calls: List[ProvisionCall] = []

    async def provision(
        self,
        action: str,
        config: Mapping[str, Any],
        dependencies: Mapping[str, str],
    ) -> str:
        self._calls.append(ProvisionCall(action, dict(config), dict(dependencies)))
        return self._address(len(self._calls), action)

    @property
    def calls(self) -> List[ProvisionCall]:
        return list(self._calls)

    def _address(self, nonce: int, action: str) -> str:
        digest = hashlib.sha256(f"{self._seed}:{nonce}:{action}".encode()).hexdigest()
        return "0x" + digest[:40]
