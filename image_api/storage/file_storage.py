"""Filesystem blob storage for uploaded images."""

import uuid
from pathlib import Path

from ..exceptions import StorageError


class FileStorage:
    """Blob storage rooted at a local directory (the public disk)."""

    def __init__(self, root: Path) -> None:
        """Initialize file storage.

        Args:
            root: Directory that all storage-relative paths resolve against
        """
        self.root = Path(root)

    def ensure_root(self) -> None:
        """Ensure the storage root exists."""
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, relative_path: str) -> Path:
        """
        Resolve a storage-relative path to an absolute path.

        Args:
            relative_path: Path like 'images/3f2a9c.jpg'

        Raises:
            StorageError: If the path escapes the storage root.
        """
        full_path = (self.root / relative_path).resolve()
        try:
            full_path.relative_to(self.root.resolve())
        except ValueError:
            raise StorageError(f"Path escapes storage root: {relative_path}") from None
        return full_path

    def put(self, directory: str, content: bytes, extension: str) -> str:
        """Write content to a new uniquely named file and return its relative path."""
        relative_path = f"{directory}/{uuid.uuid4().hex}{extension}"
        full_path = self.resolve(relative_path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            # "xb" refuses to overwrite an existing blob
            with open(full_path, "xb") as f:
                f.write(content)
        except OSError as e:
            raise StorageError(f"Failed to store file: {e}") from e
        return relative_path

    def exists(self, path: str) -> bool:
        """Check if a blob exists at the relative path."""
        return self.resolve(path).is_file()

    def delete(self, path: str) -> bool:
        """Delete the blob at the relative path; False if it was already gone."""
        full_path = self.resolve(path)
        try:
            full_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete file: {e}") from e
        return True
