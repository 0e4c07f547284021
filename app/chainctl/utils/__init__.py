"""Utility modules for chainctl.

This module exports commonly used utility functions.
"""

from chainctl.utils.formatting import (
    console,
    create_chain_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from chainctl.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_chain_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
