from __future__ import annotations

import itertools
from typing import Any, Mapping, Optional

import httpx
import structlog

from marketbed.core.errors import TransportError

logger = structlog.get_logger()

PROVISION_METHOD = "marketbed_provision"
LOOKUP_METHOD = "marketbed_lookup"


class JsonRpcTransport:
    """JSON-RPC 2.0 client for a provisioning node.

    Serves as both the fresh-mode transport (``provision``) and the
    external-mode probe (``lookup``). Every failure surfaces as a
    ``TransportError``; retries are left to the node.
    """

    def __init__(self, url: str, *, timeout: float = 30.0) -> None:
        self._url = url
        self._timeout = timeout
        self._ids = itertools.count(1)

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    async def provision(
        self,
        action: str,
        config: Mapping[str, Any],
        dependencies: Mapping[str, str],
    ) -> str:
        result = await self._call(
            PROVISION_METHOD,
            {"action": action, "config": dict(config), "dependencies": dict(dependencies)},
        )
        if not isinstance(result, str) or not result:
            raise TransportError(
                f"Node returned no handle for '{action}'",
                details={"action": action, "result": repr(result)},
            )
        return result

    async def lookup(self, name: str) -> Optional[str]:
        result = await self._call(LOOKUP_METHOD, {"name": name})
        return result or None

    async def _call(self, method: str, params: dict[str, Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._url, json=payload, headers=self._headers())
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "rpc_http_error",
                status=exc.response.status_code,
                method=method,
                url=self._url,
            )
            raise TransportError(
                f"HTTP {exc.response.status_code} from provisioning node",
                details={"method": method, "status": exc.response.status_code},
            ) from exc
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            logger.warning("rpc_network_error", method=method, url=self._url, error=str(exc))
            raise TransportError(
                f"Provisioning node unreachable: {exc}",
                details={"method": method},
            ) from exc
        except ValueError as exc:
            raise TransportError(
                "Provisioning node returned invalid JSON",
                details={"method": method},
            ) from exc

        error = body.get("error")
        if error:
            logger.error("rpc_error", method=method, code=error.get("code"), message=error.get("message"))
            raise TransportError(
                error.get("message", "JSON-RPC error"),
                details={"method": method, "code": error.get("code")},
            )
        return body.get("result")
