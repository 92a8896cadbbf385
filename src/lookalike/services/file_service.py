"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File operations used when reclaiming space: size lookup, removal and trashing.
"""
import os
from pathlib import Path
from send2trash import send2trash


class FileService:
    """
    Thin wrapper over the filesystem so reclamation can be tested by patching
    a single class.
    """

    @staticmethod
    def get_file_size(file_path: str) -> int:
        """Size of the file in bytes. Raises OSError if it cannot be stat-ed."""
        return os.stat(file_path).st_size

    @staticmethod
    def remove_file(file_path: str):
        """Permanently removes a file. Raises OSError on failure."""
        os.remove(file_path)

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @classmethod
    def delete_file(cls, file_path: str, use_trash: bool = False):
        """Removes a file permanently, or moves it to trash when use_trash is set."""
        if use_trash:
            cls.move_to_trash(file_path)
        else:
            cls.remove_file(file_path)
