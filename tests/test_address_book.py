"""Tests for address_book.py."""

import json

import pytest
from marketbed.address_book import (
    AddressBook,
    AddressBookProbe,
    load_address_book,
    save_address_book,
)
from marketbed.core.errors import ConfigurationError
from marketbed.orchestration.registry import ResourceRegistry


def test_save_and_load(tmp_path):
    registry = ResourceRegistry()
    registry.register("Pool", "0xpool")
    registry.register("token:DAI", "0xdai")
    path = tmp_path / "out" / "deployed-contracts.json"

    written = save_address_book(registry.export(), path, market_id="Test market")
    book = load_address_book(written)

    assert book.market_id == "Test market"
    assert book.addresses == {"Pool": "0xpool", "token:DAI": "0xdai"}
    assert json.loads(path.read_text())["addresses"]["Pool"] == "0xpool"


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_address_book(tmp_path / "missing.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "book.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError):
        load_address_book(path)


class TestAddressBookProbe:
    """Tests for AddressBookProbe."""

    @pytest.mark.asyncio
    async def test_lookup(self):
        probe = AddressBookProbe(AddressBook({"Pool": "0xpool"}))

        assert await probe.lookup("Pool") == "0xpool"
        assert await probe.lookup("PoolConfigurator") is None

    @pytest.mark.asyncio
    async def test_from_file(self, tmp_path):
        path = save_address_book({"Pool": "0xpool"}, tmp_path / "book.json")

        probe = AddressBookProbe.from_file(path)

        assert await probe.lookup("Pool") == "0xpool"
