"""
Provisioning transports and environment probes.

Transports submit provisioning actions; probes look up resources in an
environment that already exists.
"""

from marketbed.transport.base import EnvironmentProbe, Transport
from marketbed.transport.jsonrpc import JsonRpcTransport
from marketbed.transport.memory import InMemoryTransport, ProvisionCall

__all__ = [
    "EnvironmentProbe",
    "InMemoryTransport",
    "JsonRpcTransport",
    "ProvisionCall",
    "Transport",
]
