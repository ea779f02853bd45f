"""Image API: upload, search, fetch and delete images with metadata."""

__version__ = "0.1.0"
