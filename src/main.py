import os

from log_config import log_manager
from utils.command.command_manager import CommandManager
from utils.error.error_manager import handle_generic_exception

logger = log_manager.get_logger("CLI")

DOMAINS_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "domains")


def main(argv: list[str] | None = None):
    """Entry point of the ``kanban-metrics`` CLI.

    Commands are discovered under ``domains``; ``kanban-metrics kanban cfd-metrics``
    computes the series and ``kanban-metrics asana fetch`` refreshes the Asana snapshot.
    """
    command_manager = CommandManager(DOMAINS_PATH)
    command_manager.load_commands()
    parser = command_manager.build_parser()

    args = parser.parse_args(argv)
    if getattr(args, "func", None) is None:
        parser.print_help()
        return

    logger.debug(f"Running {args.domain} command")
    try:
        args.func(args)
    except SystemExit:
        raise
    except Exception as e:
        handle_generic_exception(e, f"Command '{args.domain}' failed", {"argv": argv})


if __name__ == "__main__":
    main()
