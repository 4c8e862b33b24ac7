"""Document sources: where raw office markup comes from."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class DocumentSource(ABC):
    """Retrieval interface consumed by the pipeline.

    The engine does not care whether documents come from the network or
    from disk.
    """

    @abstractmethod
    def fetch_document(self, date_key: str, params: Optional[dict] = None) -> str:
        """Return the raw markup of the office for ``date_key``."""
        pass

    @abstractmethod
    def fetch_expand(self, identifier: str, params: Optional[dict] = None) -> str:
        """Return the raw markup of the popup for an expand identifier."""
        pass


class DirectorySource(DocumentSource):
    """Reads previously downloaded documents from a directory.

    Layout::

        <root>/<date_key>.html
        <root>/expands/<identifier without prefix>.html
    """

    def __init__(self, root: Path, encoding: str = "utf-8"):
        self.root = Path(root)
        self.encoding = encoding

    def date_keys(self) -> list[str]:
        """Date keys of all documents in the directory, sorted."""
        return sorted(path.stem for path in self.root.glob("*.html"))

    def document_path(self, date_key: str) -> Path:
        return self.root / f"{date_key}.html"

    def expand_path(self, identifier: str) -> Path:
        name = identifier[1:] if identifier[:1] in ("$", "&") else identifier
        path = self.root / "expands" / f"{name}.html"
        if not path.exists():
            underscored = path.with_name(f"{name.replace(' ', '_')}.html")
            if underscored.exists():
                return underscored
        return path

    def fetch_document(self, date_key: str, params: Optional[dict] = None) -> str:
        path = self.document_path(date_key)
        logger.debug(f"Reading {path}")
        return path.read_text(encoding=self.encoding)

    def fetch_expand(self, identifier: str, params: Optional[dict] = None) -> str:
        path = self.expand_path(identifier)
        logger.debug(f"Reading {path}")
        return path.read_text(encoding=self.encoding)
