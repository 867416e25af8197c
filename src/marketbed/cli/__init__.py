"""
CLI commands for marketbed.
"""

from marketbed.cli.plan import plan_command
from marketbed.cli.provision import provision_command
from marketbed.cli.show import show_command

__all__ = [
    "plan_command",
    "provision_command",
    "show_command",
]
