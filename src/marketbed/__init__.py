"""marketbed: provisions simulated lending markets for integration tests."""

from marketbed.orchestration import (
    EnvironmentMode,
    EnvironmentOrchestrator,
    ExecutionEngine,
    PlanBuilder,
    RegistryExport,
    ResourceRegistry,
    RunResult,
    select_mode,
)
from marketbed.runner import setup_environment

__version__ = "0.1.0"

__all__ = [
    "EnvironmentMode",
    "EnvironmentOrchestrator",
    "ExecutionEngine",
    "PlanBuilder",
    "RegistryExport",
    "ResourceRegistry",
    "RunResult",
    "select_mode",
    "setup_environment",
]
