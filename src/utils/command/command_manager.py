import importlib
import inspect
import os
import pkgutil
from argparse import ArgumentParser, _SubParsersAction

from utils.command.base_command import BaseCommand
from utils.logging.logging_manager import LogManager

from .error import CommandLoadError, CommandManagerError, HierarchyConflictError


class CommandManager:
    """Discovers BaseCommand subclasses below a package and builds the argparse tree."""

    def __init__(self, base_path: str, package: str = "domains", prog: str = "kanban-metrics"):
        self._logger = LogManager.get_instance().get_logger("CommandManager")
        self.base_path = os.path.abspath(base_path)
        self.package = package
        self.prog = prog
        self.hierarchy: dict[str, dict] = {}

    def load_commands(self) -> None:
        """Imports every module below the base package and registers its commands."""
        self._logger.debug(f"Starting to load commands from base path: {self.base_path}")

        for root, _, _ in os.walk(self.base_path):
            if not os.path.isfile(os.path.join(root, "__init__.py")):
                self._logger.debug(f"Skipping non-package directory: {root}")
                continue

            for _, module_name, is_package in pkgutil.iter_modules([root]):
                if is_package:
                    continue
                module_path = self._module_path_from_root(root, module_name)
                try:
                    module = importlib.import_module(module_path, package=self.package)
                    self._process_module(module)
                except CommandManagerError as e:
                    self._logger.error(str(e), exc_info=True)
                except Exception as e:
                    self._logger.error(str(CommandLoadError(module_path, e)), exc_info=True)

        self._logger.debug("Finished loading commands.")

    def _module_path_from_root(self, root: str, module_name: str) -> str:
        """Builds the module path relative to the base package (e.g. '.kanban.x_command')."""
        relative_path = os.path.relpath(root, self.base_path)
        if relative_path == ".":
            return f".{module_name}"
        return f".{relative_path.replace(os.sep, '.')}.{module_name}"

    def _process_module(self, module):
        """Adds the BaseCommand subclasses defined in a module to the hierarchy."""
        for name, obj in inspect.getmembers(module, inspect.isclass):
            if not issubclass(obj, BaseCommand) or obj is BaseCommand:
                continue
            # Imported command classes are registered by their own module
            if obj.__module__ != module.__name__:
                continue
            if inspect.isabstract(obj):
                self._logger.debug(f"Command {name} is abstract and will be skipped.")
                continue
            self._add_to_hierarchy(obj)

    def _add_to_hierarchy(self, command: type[BaseCommand]):
        """Mounts a command under the sub-packages of its module."""
        name_parts = command.__module__.split(".")
        # Drop the base package and the module itself
        domain_parts = name_parts[1:-1]
        command_name = command.get_name()

        current_level = self.hierarchy
        for part in domain_parts:
            current_level = current_level.setdefault(part, {})

        if command_name in current_level:
            raise HierarchyConflictError(" ".join(domain_parts + [command_name]))

        current_level[command_name] = {
            "name": command_name,
            "description": command.get_description(),
            "help": command.get_help(),
            "class": command,
        }
        self._logger.debug(f"Command {command_name} added successfully.")

    def build_parser(self) -> ArgumentParser:
        """Builds the ArgumentParser hierarchy from the loaded command structure."""
        self._logger.debug("Building argument parser hierarchy")
        parser = ArgumentParser(
            prog=self.prog,
            description=f"{self.prog} - weekly flow metrics from board history",
        )
        subparsers = parser.add_subparsers(dest="domain", help="Available domains")

        for domain_name, substructure in sorted(self.hierarchy.items()):
            self._add_subparser(subparsers, domain_name, substructure)

        return parser

    def _add_subparser(self, subparsers: _SubParsersAction, name: str, substructure: dict):
        """Recursively adds subparsers for domains and commands."""
        if "class" in substructure:
            self._logger.debug(f"Registering command: {substructure['name']}")
            substructure["class"].register_command(subparsers)
            return

        parser = subparsers.add_parser(name, help=f"{name} commands")
        parser_subparsers = parser.add_subparsers(dest=f"{name}_command", help=f"{name} subcommands")
        for key, value in sorted(substructure.items()):
            self._add_subparser(parser_subparsers, key, value)
