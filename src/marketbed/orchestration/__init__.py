"""Orchestration package: ordered provisioning of a test market."""

from marketbed.orchestration.bulk import (
    AccountRolesProvisioner,
    AssetPriceProvisioner,
    BulkProvisioner,
    MarketRateProvisioner,
    MockAggregatorProvisioner,
    MockTokenProvisioner,
    ReserveConfigProvisioner,
    ReserveDropProvisioner,
    ReserveInitProvisioner,
)
from marketbed.orchestration.engine import ExecutionEngine
from marketbed.orchestration.environment import (
    EnvironmentMode,
    EnvironmentOrchestrator,
    ProbeTransport,
    select_mode,
)
from marketbed.orchestration.plan_builder import (
    ContractId,
    PlanBuilder,
    build_external_plan,
    build_fresh_plan,
)
from marketbed.orchestration.registry import RegistryExport, ResourceRegistry
from marketbed.orchestration.results import PlanPreview, ResultCollector, RunResult, StepRecord
from marketbed.orchestration.steps import PlanEntry, ProvisioningStep, flatten, verify_order

__all__ = [
    "AccountRolesProvisioner",
    "AssetPriceProvisioner",
    "BulkProvisioner",
    "ContractId",
    "EnvironmentMode",
    "EnvironmentOrchestrator",
    "ExecutionEngine",
    "MarketRateProvisioner",
    "MockAggregatorProvisioner",
    "MockTokenProvisioner",
    "PlanBuilder",
    "PlanEntry",
    "PlanPreview",
    "ProbeTransport",
    "ProvisioningStep",
    "RegistryExport",
    "ReserveConfigProvisioner",
    "ReserveDropProvisioner",
    "ReserveInitProvisioner",
    "ResourceRegistry",
    "ResultCollector",
    "RunResult",
    "StepRecord",
    "build_external_plan",
    "build_fresh_plan",
    "flatten",
    "select_mode",
    "verify_order",
]
