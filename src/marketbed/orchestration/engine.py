"""Execution engine for provisioning plans."""

import time
from typing import Dict, Iterable, Optional

import structlog

from marketbed.core.errors import MarketbedError, TransportError, UnresolvedDependencyError
from marketbed.orchestration.registry import ResourceRegistry
from marketbed.orchestration.results import ResultCollector, RunResult
from marketbed.orchestration.steps import PlanEntry, ProvisioningStep, flatten
from marketbed.transport.base import Transport

logger = structlog.get_logger()


class ExecutionEngine:
    """Runs a plan's steps strictly in order over one transport.

    Each transport call is awaited before the next step starts. The first
    failure aborts the run: nothing is retried or rolled back, and the
    registry is left as it was when the failing step started.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def execute(
        self,
        plan: Iterable[PlanEntry],
        *,
        registry: Optional[ResourceRegistry] = None,
        mode: str = "fresh",
    ) -> RunResult:
        """Execute every step of ``plan`` and export the populated registry."""
        registry = registry if registry is not None else ResourceRegistry()
        collector = ResultCollector(mode)
        started = time.monotonic()
        steps = flatten(plan)
        total_steps = len(steps)

        for index, step in enumerate(steps, 1):
            logger.debug("step_started", step=step.name, action=step.action, index=index, total=total_steps)
            try:
                handle = await self._run_step(step, registry)
            except MarketbedError as e:
                e.details.setdefault("step", step.name)
                logger.error(
                    "run_aborted",
                    step=step.name,
                    error_type=type(e).__name__,
                    message=e.message,
                    completed=index - 1,
                    total=total_steps,
                )
                raise
            collector.record(step, handle)

        duration = time.monotonic() - started
        logger.info("run_completed", mode=mode, steps=total_steps, resources=len(registry))
        return collector.finalize(registry.export(), duration)

    async def _run_step(self, step: ProvisioningStep, registry: ResourceRegistry) -> str:
        dependencies = _resolve_inputs(step, registry)

        try:
            handle = await self._transport.provision(step.action, dict(step.config), dependencies)
        except MarketbedError:
            raise
        except Exception as e:
            raise TransportError(
                f"Action '{step.action}' failed: {e}",
                details={"step": step.name, "action": step.action},
            ) from e

        if step.output is not None:
            registry.register(step.output, handle)
            logger.debug("step_completed", step=step.name, output=step.output, handle=handle)
        else:
            logger.debug("step_receipt_discarded", step=step.name, receipt=handle)
        return handle


def _resolve_inputs(step: ProvisioningStep, registry: ResourceRegistry) -> Dict[str, str]:
    missing = [name for name in step.inputs if name not in registry]
    if missing:
        raise UnresolvedDependencyError(
            f"Step '{step.name}' ran before its inputs were provisioned",
            details={"step": step.name, "missing": ", ".join(missing)},
        )
    return {name: registry.resolve(name) for name in step.inputs}
