import os
from typing import Any, Optional

from config import Config
from utils.data.json_manager import JSONManager
from utils.file_manager import FileManager


class OutputManager:
    """Resolves where generated artifacts go and writes them.

    Unlike timestamped reports, renderer inputs keep stable names so a plotting
    script can refer to its data file by name.
    """

    @staticmethod
    def get_output_root(output_dir: Optional[str] = None) -> str:
        """Return the base output directory, creating it when needed."""
        return FileManager.validate_output_folder(output_dir or Config.OUTPUT_DIR)

    @staticmethod
    def get_output_path(output_dir: Optional[str], file_name: str, extension: str) -> str:
        """
        Constructs the path of an artifact inside the output directory.

        Args:
            output_dir (Optional[str]): Target folder; ``Config.OUTPUT_DIR`` when omitted.
            file_name (str): The base name of the file, without extension.
            extension (str): The file extension.
        """
        return os.path.join(OutputManager.get_output_root(output_dir), f"{file_name}.{extension}")

    @staticmethod
    def save_json_report(data: Any, file_basename: str, output_dir: Optional[str] = None) -> str:
        """
        Saves data as a JSON report.

        Returns:
            str: The path where the file was saved.
        """
        path = OutputManager.get_output_path(output_dir, file_basename, "json")
        JSONManager.write_json(data, path)
        return path

    @staticmethod
    def save_text_report(content: str, file_basename: str, extension: str, output_dir: Optional[str] = None) -> str:
        """Saves text content (CSV series, plotting scripts) and returns its path."""
        path = OutputManager.get_output_path(output_dir, file_basename, extension)
        FileManager.write_file(path, content)
        return path
