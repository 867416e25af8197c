"""
marketbed command line.

Usage:
    marketbed plan [--fork] [--market FILE] [--output text|json]
    marketbed provision [--fork] [--transport memory|jsonrpc] [--export FILE]
    marketbed show FILE
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from marketbed.config.settings import get_settings
from marketbed.core.errors import main_with_error_handling
from marketbed.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="marketbed", description="Provision simulated test markets")
    subparsers = parser.add_subparsers(dest="command")

    # plan command (dry-run)
    plan_parser = subparsers.add_parser("plan", help="Preview the provisioning steps in order")
    plan_parser.add_argument(
        "--fork",
        action="store_const",
        const=True,
        default=None,
        help="Preview external-environment attach steps (MARKETBED_FORK)",
    )
    plan_parser.add_argument("--market", help="Path to a YAML market file")
    plan_parser.add_argument("--output", choices=["text", "json"], default="text", help="Output format")

    # provision command
    provision_parser = subparsers.add_parser("provision", help="Provision a market or attach to a fork")
    provision_parser.add_argument(
        "--fork",
        action="store_const",
        const=True,
        default=None,
        help="Attach to an existing environment instead of provisioning (MARKETBED_FORK)",
    )
    provision_parser.add_argument("--market", help="Path to a YAML market file")
    provision_parser.add_argument("--transport", choices=["memory", "jsonrpc"], help="Provisioning transport")
    provision_parser.add_argument("--rpc-url", help="JSON-RPC provisioning node URL")
    provision_parser.add_argument("--address-book", help="Address book to attach from in fork mode")
    provision_parser.add_argument("--export", help="Write the exported registry to this JSON file")
    provision_parser.add_argument("--output", choices=["text", "json"], default="text", help="Output format")
    provision_parser.add_argument("-v", "--verbose", action="store_true", help="List every registered resource")

    # show command
    show_parser = subparsers.add_parser("show", help="Show an exported address book")
    show_parser.add_argument("path", help="Path to the address book JSON file")
    show_parser.add_argument("--output", choices=["text", "json"], default="text", help="Output format")

    return parser


@main_with_error_handling()
def setup_logging() -> int:
    """Configure logging from MARKETBED_* settings."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    exit_code = setup_logging()
    if exit_code:
        sys.exit(exit_code)

    if args.command == "plan":
        from marketbed.cli.plan import plan_command

        sys.exit(plan_command(fork=args.fork, market_file=args.market, output_format=args.output))

    if args.command == "provision":
        from marketbed.cli.provision import provision_command

        sys.exit(
            provision_command(
                fork=args.fork,
                market_file=args.market,
                transport=args.transport,
                rpc_url=args.rpc_url,
                address_book=args.address_book,
                export_path=args.export,
                output_format=args.output,
                verbose=args.verbose,
            )
        )

    if args.command == "show":
        from marketbed.cli.show import show_command

        sys.exit(show_command(args.path, output_format=args.output))

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()
