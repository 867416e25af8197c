from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping

from marketbed.core.errors import ConfigurationError

DEFAULT_ADDRESS_BOOK_PATH = Path("deployed-contracts.json")


@dataclass
class AddressBook:
    """Persisted name → address map of a provisioned market."""

    addresses: Dict[str, str] = field(default_factory=dict)
    market_id: str | None = None

    def get(self, name: str) -> str | None:
        return self.addresses.get(name)


def load_address_book(path: Path | None = None) -> AddressBook:
    book_path = path or DEFAULT_ADDRESS_BOOK_PATH
    if not book_path.exists():
        raise ConfigurationError(
            f"Address book not found: {book_path}",
            details={"path": str(book_path)},
        )
    try:
        data = json.loads(book_path.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Address book is not valid JSON: {exc}",
            details={"path": str(book_path)},
        ) from exc
    return AddressBook(
        addresses=dict(data.get("addresses", {})),
        market_id=data.get("market_id"),
    )


def save_address_book(
    addresses: Mapping[str, str],
    path: Path | None = None,
    *,
    market_id: str | None = None,
) -> Path:
    book_path = path or DEFAULT_ADDRESS_BOOK_PATH
    book_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"market_id": market_id, "addresses": dict(addresses)}
    book_path.write_text(json.dumps(payload, indent=2) + "\n")
    return book_path


class AddressBookProbe:
    """Environment probe answering lookups from an address book."""

    def __init__(self, book: AddressBook) -> None:
        self._book = book

    @classmethod
    def from_file(cls, path: Path | None = None) -> "AddressBookProbe":
        return cls(load_address_book(path))

    async def lookup(self, name: str) -> str | None:
        return self._book.get(name)
