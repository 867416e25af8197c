"""Result types for orchestration runs."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from marketbed.orchestration.registry import RegistryExport
from marketbed.orchestration.steps import ProvisioningStep


@dataclass
class StepRecord:
    """One executed step and what it produced."""

    step: str
    action: str
    output: Optional[str] = None
    handle: Optional[str] = None


@dataclass
class RunResult:
    """Result of a successful orchestration run."""

    mode: str
    registry: RegistryExport
    steps: List[StepRecord] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total_resources(self) -> int:
        """Number of resources in the exported registry."""
        return len(self.registry)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "resources": dict(self.registry),
            "total_resources": self.total_resources,
            "steps_executed": len(self.steps),
            "duration_seconds": self.duration_seconds,
        }


@dataclass
class PlanPreview:
    """Dry-run preview of a plan: the elementary steps in execution order."""

    mode: str
    steps: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def outputs(self) -> List[str]:
        return [s["output"] for s in self.steps if s["output"]]


class ResultCollector:
    """Aggregates executed steps during a run."""

    def __init__(self, mode: str) -> None:
        self._mode = mode
        self._records: List[StepRecord] = []

    def record(self, step: ProvisioningStep, handle: str) -> None:
        """Record a completed step."""
        self._records.append(
            StepRecord(
                step=step.name,
                action=step.action,
                output=step.output,
                handle=handle if step.output else None,
            )
        )

    @property
    def records(self) -> List[StepRecord]:
        return list(self._records)

    def finalize(self, registry: RegistryExport, duration: float) -> RunResult:
        """Return the final result with the exported registry attached."""
        return RunResult(
            mode=self._mode,
            registry=registry,
            steps=list(self._records),
            duration_seconds=duration,
        )
