"""
CLI command for previewing (dry-run) the provisioning plan.
"""

import json
from typing import Optional

from marketbed.cli.ux import console, header, print_table
from marketbed.config.loader import load_market_config
from marketbed.config.settings import Settings, get_settings
from marketbed.core.errors import main_with_error_handling
from marketbed.orchestration.environment import select_mode
from marketbed.orchestration.plan_builder import PlanBuilder
from marketbed.orchestration.results import PlanPreview


def print_plan_summary(preview: PlanPreview, market_id: str) -> None:
    """Print the ordered step list as a table."""
    header(f"Plan: {market_id} ({preview.mode})")
    rows = [
        [str(index), step["step"], step["action"], step["output"] or "-", ", ".join(step["inputs"])]
        for index, step in enumerate(preview.steps, 1)
    ]
    print_table("Steps", ["#", "Step", "Action", "Produces", "Reads"], rows)
    console.print(
        f"\n[bold]{len(preview.steps)} steps[/bold], "
        f"[bold]{len(preview.outputs)} resources[/bold] would be registered\n"
    )


@main_with_error_handling()
def plan_command(
    fork: Optional[bool] = None,
    market_file: Optional[str] = None,
    output_format: str = "text",
    settings: Optional[Settings] = None,
) -> int:
    """
    Preview the steps a run would execute, in order.

    Args:
        fork: Preview the external-environment attach steps instead
            (MARKETBED_FORK when None)
        market_file: Optional YAML market file (MARKETBED_MARKET_FILE when None)
        output_format: Output format (text, json)

    Returns:
        Exit code (0 for success)
    """
    settings = settings or get_settings()
    if fork is None:
        fork = settings.fork
    market = load_market_config(market_file or settings.market_file)
    preview = PlanBuilder(market).preview(select_mode(fork))

    if output_format == "json":
        print(json.dumps({"mode": str(preview.mode), "steps": preview.steps}, indent=2))
    else:
        print_plan_summary(preview, market.market_id)
    return 0
