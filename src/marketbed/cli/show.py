"""
CLI command for inspecting an exported address book.
"""

import json
from pathlib import Path

from marketbed.address_book import load_address_book
from marketbed.cli.ux import print_table
from marketbed.core.errors import main_with_error_handling


@main_with_error_handling()
def show_command(path: str, output_format: str = "text") -> int:
    """Print the resources recorded in an address book."""
    book = load_address_book(Path(path))

    if output_format == "json":
        print(json.dumps({"market_id": book.market_id, "addresses": book.addresses}, indent=2))
        return 0

    rows = [[name, address] for name, address in book.addresses.items()]
    print_table(book.market_id or path, ["Resource", "Address"], rows)
    return 0
