from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace


class BaseCommand(ABC):
    """Abstract base class for all CLI commands.

    Commands live in modules under ``src/domains``; the package path of the module
    decides where the command is mounted (``domains/kanban/x_command.py`` is reached
    with ``kanban <name>``).
    """

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        """Returns the name used to invoke the command."""

    @staticmethod
    def get_description() -> str:
        return "No description provided."

    @staticmethod
    def get_help() -> str:
        return "No help available."

    @classmethod
    def register_command(cls, parent_parser):
        """Registers the command in the given subparsers action.

        Args:
            parent_parser (_SubParsersAction): The subparsers to add the command to.
        """
        parser = parent_parser.add_parser(
            cls.get_name(),
            description=cls.get_description(),
            help=cls.get_help(),
        )
        cls.get_arguments(parser)
        parser.set_defaults(func=cls.main)

    @staticmethod
    @abstractmethod
    def get_arguments(parser: ArgumentParser):
        """Adds arguments to the parser.

        Args:
            parser (ArgumentParser): The parser to which arguments are added.
        """

    @staticmethod
    @abstractmethod
    def main(args: Namespace):
        """Executes the command.

        Args:
            args (Namespace): Parsed arguments from the CLI.
        """
