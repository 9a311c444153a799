from utils.error.base_custom_error import BaseCustomError


class CommandManagerError(BaseCustomError):
    """Base class for all CommandManager errors."""


class CommandLoadError(CommandManagerError):
    """Raised when a command module cannot be imported or inspected."""

    def __init__(self, module_path: str, error: Exception):
        super().__init__(
            f"Failed to load commands from module '{module_path}'",
            module_path=module_path,
            original_error=repr(error),
        )


class HierarchyConflictError(CommandManagerError):
    """Raised when two commands resolve to the same CLI path."""

    def __init__(self, command_path: str):
        super().__init__(f"Duplicate command detected: '{command_path}'", command_path=command_path)
