"""Provisioning step descriptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, runtime_checkable

from marketbed.core.errors import UnresolvedDependencyError


@dataclass(frozen=True)
class ProvisioningStep:
    """One provisioning action with declared inputs and at most one output.

    Steps are stateless: the handles they consume and produce live in the
    registry. A step without an ``output`` is a configuration call (setting
    an admin, registering a provider); the transport returns a receipt for
    it that is logged and not registered.
    """

    name: str
    action: str
    inputs: Tuple[str, ...] = ()
    output: Optional[str] = None
    config: Mapping[str, Any] = field(default_factory=dict)

    def steps(self) -> List["ProvisioningStep"]:
        return [self]

    def describe(self) -> Dict[str, Any]:
        return {
            "step": self.name,
            "action": self.action,
            "inputs": list(self.inputs),
            "output": self.output,
        }


@runtime_checkable
class PlanEntry(Protocol):
    """Anything the executor can run: a single step or a bulk provisioner."""

    @property
    def name(self) -> str:
        ...

    def steps(self) -> List[ProvisioningStep]:
        """Elementary steps, in execution order."""
        ...


def deploy(name: str, action: str, output: str, *inputs: str, **config: Any) -> ProvisioningStep:
    """Shorthand for a step that produces a resource."""
    return ProvisioningStep(
        name=name,
        action=action,
        inputs=tuple(str(i) for i in inputs),
        output=str(output),
        config=config,
    )


def configure(name: str, action: str, *inputs: str, **config: Any) -> ProvisioningStep:
    """Shorthand for a configuration call with no output."""
    return ProvisioningStep(name=name, action=action, inputs=tuple(str(i) for i in inputs), config=config)


def flatten(plan: Iterable[PlanEntry]) -> List[ProvisioningStep]:
    """Expand a plan into its elementary steps."""
    return [step for entry in plan for step in entry.steps()]


def verify_order(plan: Iterable[PlanEntry], provided: Iterable[str] = ()) -> None:
    """Check that each step's inputs are produced by an earlier step.

    Raises:
        UnresolvedDependencyError: naming the first step that reads an input
            no earlier step produces.
    """
    available = set(provided)
    for step in flatten(plan):
        missing = [name for name in step.inputs if name not in available]
        if missing:
            raise UnresolvedDependencyError(
                f"Step '{step.name}' reads resources no earlier step produces",
                details={"step": step.name, "missing": ", ".join(missing)},
            )
        if step.output is not None:
            available.add(step.output)
