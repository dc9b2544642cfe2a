#!/usr/bin/env python3
# conshell/__main__.py
from __future__ import annotations
"""
Demo host: `python -m conshell`.

Loads configuration, sets up logging, registers the built-in commands (plus
PLUGIN_PACKAGE when configured) and runs the loop. Errors raised by a command
are reported and the loop restarts; end of input or `exit` leaves.
"""

import logging
import sys

from conshell.commands import builtin_commands
from conshell.commands.builtins import HELP_TEXT
from conshell.config import load_config
from conshell.errors import CommandInvocationFailure
from conshell.interface import Shell, load_commands
from conshell.ui import colorize, init_logger, print_line


def main() -> int:
    try:
        config = load_config()
    except ValueError as exc:
        print_line(colorize(f"[ WARN ] Invalid configuration: {exc}", "yellow"), file=sys.stderr)
        return 2

    logger = init_logger(
        "conshell",
        level=config.log_level or logging.WARNING,
        logfile=config.log_file_path,
    )

    shell = Shell(config=config)
    shell.add_commands(builtin_commands())
    if config.plugin_package:
        count = load_commands(shell, config.plugin_package)
        logger.info("Loaded %d plugin command(s) from %s", count, config.plugin_package)

    print_line(HELP_TEXT)
    while True:
        try:
            shell.run()
            return 0
        except CommandInvocationFailure as exc:
            print_line(colorize(f"[error] {exc}", "red"))
        except KeyboardInterrupt:
            print_line()
            return 130


if __name__ == "__main__":
    raise SystemExit(main())
