"""Data sources for the pipeline."""

from .local_source import DirectorySource, DocumentSource

__all__ = ["DirectorySource", "DocumentSource"]
