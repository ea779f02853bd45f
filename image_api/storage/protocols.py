"""Blob store protocol.

Lets the service layer depend on an interface rather than the filesystem
adapter, so tests and alternative backends can swap the implementation.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class BlobStoreProtocol(Protocol):
    """Binary file storage addressed by storage-relative paths."""

    def put(self, directory: str, content: bytes, extension: str) -> str:
        """Store content under a generated unique name.

        Args:
            directory: Storage area, e.g. ``"images"``
            content: File bytes
            extension: File extension including the dot, e.g. ``".jpg"``

        Returns:
            Storage-relative path of the new blob
        """
        ...

    def exists(self, path: str) -> bool:
        """Check whether a blob exists at path."""
        ...

    def delete(self, path: str) -> bool:
        """Delete the blob at path.

        Returns:
            True if a blob was removed, False if it was already absent
        """
        ...
