"""Blob storage layer."""

from .file_storage import FileStorage
from .protocols import BlobStoreProtocol

__all__ = ["BlobStoreProtocol", "FileStorage"]
