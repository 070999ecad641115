"""
Local-disk file store.

Uploaded files live in one folder per conversation under a root directory.
"""

import logging
import shutil
from pathlib import Path

from docrag.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class LocalFileStore:
    """Folders of uploaded files under a root directory."""

    def __init__(self, root_dir: str) -> None:
        self._root = Path(root_dir).resolve()

    def folder_path(self, folder: str) -> Path:
        """
        Resolve a folder name under the root.

        Raises:
            StorageError: If the name escapes the root directory
        """
        path = (self._root / folder).resolve()
        if path == self._root or self._root not in path.parents:
            raise StorageError(f"Invalid folder name: {folder!r}", operation="resolve")
        return path

    def save_file(self, folder: str, file_name: str, content: bytes) -> str:
        """Write a file into a folder and return its path."""
        target_dir = self.folder_path(folder)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / Path(file_name).name
        target.write_bytes(content)
        return str(target)

    def delete_files_by_folder(self, folder: str) -> int:
        """
        Delete a folder and everything in it.

        Returns:
            int: Number of files removed (0 when the folder does not exist)
        """
        path = self.folder_path(folder)
        if not path.exists():
            return 0

        count = sum(1 for item in path.rglob("*") if item.is_file())
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise StorageError(f"Failed to delete folder {folder}: {e}", operation="delete") from e

        logger.info(f"{__name__}:delete_files_by_folder - folder={folder}, deleted={count}")
        return count
