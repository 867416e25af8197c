"""
CLI command for provisioning a test market.
"""

import asyncio
import json
from typing import Optional

from marketbed.cli.ux import console, print_resource_groups, success
from marketbed.config.settings import Settings, get_settings
from marketbed.core.errors import main_with_error_handling
from marketbed.orchestration.results import RunResult
from marketbed.runner import setup_environment


def print_run_summary(result: RunResult, verbose: bool = False) -> None:
    """Print a short summary of a finished run."""
    console.print()
    print_resource_groups(result.registry, verbose=verbose)
    console.print()
    success(
        f"{result.mode.capitalize()} environment ready: {result.total_resources} resources "
        f"in {result.duration_seconds:.1f}s"
    )


@main_with_error_handling()
def provision_command(
    fork: Optional[bool] = None,
    market_file: Optional[str] = None,
    transport: Optional[str] = None,
    rpc_url: Optional[str] = None,
    address_book: Optional[str] = None,
    export_path: Optional[str] = None,
    output_format: str = "text",
    verbose: bool = False,
    settings: Optional[Settings] = None,
) -> int:
    """
    Provision (or attach to) a test market and export its registry.

    Arguments left as None fall back to MARKETBED_* settings.

    Returns:
        Exit code (0 for success)
    """
    base = settings or get_settings()
    overrides = {
        "fork": fork,
        "market_file": market_file,
        "transport": transport,
        "rpc_url": rpc_url,
        "address_book": address_book,
        "export_path": export_path,
    }
    effective = base.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    result = asyncio.run(setup_environment(effective))

    if output_format == "json":
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_run_summary(result, verbose=verbose)
    return 0
