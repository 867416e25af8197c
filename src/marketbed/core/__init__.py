"""Core error types shared across marketbed."""

from marketbed.core.errors import (
    ConfigurationError,
    DuplicateResourceError,
    EnvironmentMismatchError,
    ExitCode,
    MarketbedError,
    ProvisioningError,
    RegistrySealedError,
    TransportError,
    UnknownResourceError,
    UnresolvedDependencyError,
)

__all__ = [
    "ConfigurationError",
    "DuplicateResourceError",
    "EnvironmentMismatchError",
    "ExitCode",
    "MarketbedError",
    "ProvisioningError",
    "RegistrySealedError",
    "TransportError",
    "UnknownResourceError",
    "UnresolvedDependencyError",
]
