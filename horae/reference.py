"""Run-scoped collector for expand/reference identifiers."""

import logging
from typing import Optional

from .errors import CollectorStateError

logger = logging.getLogger(__name__)


def expand_anchor(identifier: str) -> str:
    """Return the expands.html link target for an identifier like ``$Pater noster``."""
    return "expands.html#" + identifier[1:].replace(" ", "_")


class ReferenceCollector:
    """Accumulates reference identifiers found while processing one document.

    A collector belongs to exactly one run. Reusing it for another document
    without calling ``reset()`` raises ``CollectorStateError``.
    """

    def __init__(self):
        self._ids: list[str] = []
        self.date_key: Optional[str] = None

    def begin_run(self, date_key: str) -> None:
        """Bind the collector to a document run."""
        if self._ids and self.date_key != date_key:
            raise CollectorStateError(
                f"Collector still holds {len(self._ids)} identifiers from run "
                f"{self.date_key!r}; call reset() before processing {date_key!r}"
            )
        self.date_key = date_key

    def add(self, identifier: str) -> None:
        """Record an identifier."""
        logger.debug(f"Collected reference {identifier!r} ({self.date_key})")
        self._ids.append(identifier)

    @property
    def identifiers(self) -> tuple[str, ...]:
        """Collected identifiers, in first-seen order, without duplicates."""
        return tuple(dict.fromkeys(self._ids))

    def reset(self) -> None:
        """Forget everything collected so far."""
        self._ids = []
        self.date_key = None

    def __len__(self) -> int:
        return len(self.identifiers)
