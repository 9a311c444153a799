import os
from typing import List, Optional


class FileManager:
    """
    General file operations shared by the loaders and writers.
    """

    @staticmethod
    def read_text(file_path: str) -> str:
        """
        Reads the whole content of a UTF-8 text file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        with open(file_path, "r", encoding="utf-8") as file:
            return file.read()

    @staticmethod
    def write_file(file_path: str, content: str) -> None:
        """
        Writes content to a file, creating the parent folder when needed.
        """
        FileManager.create_folder(os.path.dirname(file_path) or ".")
        with open(file_path, "w", encoding="utf-8", newline="") as file:
            file.write(content)

    @staticmethod
    def create_folder(folder_path: str, exist_ok: bool = True) -> None:
        """
        Creates a folder.

        Raises:
            OSError: If the folder cannot be created.
        """
        os.makedirs(folder_path, exist_ok=exist_ok)

    @staticmethod
    def validate_file(file_path: str, allowed_extensions: Optional[List[str]] = None) -> None:
        """
        Validates file existence and extension.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file extension is invalid.
        """
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        if allowed_extensions:
            _, ext = os.path.splitext(file_path)
            if ext.lower() not in allowed_extensions:
                raise ValueError(f"Invalid file extension: {ext}. Allowed: {allowed_extensions}")

    @staticmethod
    def validate_output_folder(folder_path: str) -> str:
        """
        Ensures a folder can hold output files and returns its absolute path.

        Raises:
            NotADirectoryError: If the path exists and is not a folder.
        """
        if os.path.exists(folder_path) and not os.path.isdir(folder_path):
            raise NotADirectoryError(f"Output path {folder_path} is not a folder")
        FileManager.create_folder(folder_path)
        return os.path.abspath(folder_path)
