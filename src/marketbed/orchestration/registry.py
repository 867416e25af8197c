"""Run-scoped registry of provisioned resources."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from marketbed.core.errors import (
    DuplicateResourceError,
    RegistrySealedError,
    UnknownResourceError,
)


class RegistryExport(Mapping[str, str]):
    """Read-only name → handle view handed to downstream consumers."""

    def __init__(self, entries: Mapping[str, str]) -> None:
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, name: str) -> str:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RegistryExport({dict(self._entries)!r})"

    def with_prefix(self, prefix: str) -> Dict[str, str]:
        """Entries under a ``kind:`` prefix, keyed without it."""
        return {
            name[len(prefix) :]: handle
            for name, handle in self._entries.items()
            if name.startswith(prefix)
        }


class ResourceRegistry:
    """Write-once-per-name store of resolved resource handles.

    Names are kept in registration order. The registry never shrinks; once
    exported it is sealed against further writes.
    """

    def __init__(self) -> None:
        self._handles: Dict[str, str] = {}
        self._sealed = False

    def register(self, name: str, handle: str) -> None:
        """Register a handle under a new name."""
        self._check_writable(name)
        if name in self._handles:
            raise DuplicateResourceError(
                f"Resource '{name}' is already registered",
                details={"resource": name, "existing": self._handles[name]},
            )
        self._handles[name] = handle

    def replace(self, name: str, handle: str) -> None:
        """Explicitly re-point an existing name at a new handle."""
        self._check_writable(name)
        if name not in self._handles:
            raise UnknownResourceError(
                f"Cannot replace unregistered resource '{name}'",
                details={"resource": name},
            )
        self._handles[name] = handle

    def resolve(self, name: str) -> str:
        """Return the handle registered under ``name``."""
        try:
            return self._handles[name]
        except KeyError:
            raise UnknownResourceError(
                f"Resource '{name}' is not registered",
                details={"resource": name},
            ) from None

    def get(self, name: str) -> Optional[str]:
        return self._handles.get(name)

    def names(self) -> List[str]:
        """List registered names in registration order."""
        return list(self._handles.keys())

    @property
    def sealed(self) -> bool:
        return self._sealed

    def export(self) -> RegistryExport:
        """Seal the registry and return a read-only view of it."""
        self._sealed = True
        return RegistryExport(self._handles)

    def _check_writable(self, name: str) -> None:
        if self._sealed:
            raise RegistrySealedError(
                f"Registry already exported; cannot write '{name}'",
                details={"resource": name},
            )

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._handles)
