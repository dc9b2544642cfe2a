#!/usr/bin/env python3
# conshell/interface/loader.py
from __future__ import annotations

"""
Dynamic command loader.

Features:
- Imports all modules under a given package (e.g. 'plugins').
- Supports 'entrypoint.py' inside a subpackage exporting COMMAND/COMMANDS.
- Registers @command functions and exported Command objects into a shell.
- Derives categories from subpackage names if not explicitly set.
"""

import dataclasses
import importlib
import logging
import pkgutil
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING

from conshell.commands import Command, collect_commands

if TYPE_CHECKING:  # pragma: no cover
    from conshell.interface.shell import Shell

logger = logging.getLogger(__name__)


def _with_category(command_obj, category: str | None):
    """Derive category from the subpackage when still 'general'."""
    if category and isinstance(command_obj, Command) and command_obj.category == "general":
        return dataclasses.replace(command_obj, category=category)
    return command_obj


def _register_module(shell: "Shell", module: ModuleType, category: str | None) -> int:
    registered_count = 0
    for command_obj in collect_commands(module):
        shell.add_command(_with_category(command_obj, category))
        registered_count += 1
    return registered_count


def _iter_plugin_modules(commands_package: str):
    """Yield (module, category) for every public module of the package."""
    package = importlib.import_module(commands_package)
    package_paths = [str(p) for p in getattr(package, "__path__", [])]

    if not package_paths:
        raise RuntimeError(
            f"'{commands_package}' must be a package (folder) with modules.")

    yield package, None

    for base_path in package_paths:
        for modinfo in pkgutil.iter_modules([base_path]):
            module_name = modinfo.name
            if module_name.startswith("_"):
                # Ignore private modules
                continue

            if modinfo.ispkg:
                entrypoint_path = Path(base_path) / module_name / "entrypoint.py"
                target = f"{commands_package}.{module_name}"
                if entrypoint_path.exists():
                    target += ".entrypoint"
                yield importlib.import_module(target), module_name
            else:
                yield importlib.import_module(f"{commands_package}.{module_name}"), None


def load_commands(shell: "Shell", commands_package: str = "plugins") -> int:
    """
    Import all modules under `commands_package` and register their commands.

    Supported layouts:
      1) Plain modules: plugins/foo.py  -> import plugins.foo
      2) Packages with an entrypoint: plugins/bar/entrypoint.py
         -> import plugins.bar.entrypoint (category "bar")

    Returns the number of commands registered. Duplicate names raise
    DuplicateCommandError.
    """
    registered = 0
    for module, category in _iter_plugin_modules(commands_package):
        registered += _register_module(shell, module, category)
    logger.debug("Loaded %d command(s) from %s", registered, commands_package)
    return registered
