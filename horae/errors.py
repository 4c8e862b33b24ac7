"""Exceptions raised by the transformation pipeline."""

from typing import Optional


class MalformedMarkupError(ValueError):
    """Raised when source markup cannot be interpreted without losing content.

    Aborts the whole document run.
    """

    def __init__(self, message: str, fragment: str = "", date_key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.fragment = fragment
        self.date_key = date_key

    def with_date_key(self, date_key: str) -> "MalformedMarkupError":
        """Return a copy of this error bound to a document."""
        return MalformedMarkupError(self.message, fragment=self.fragment, date_key=date_key)

    def __reduce__(self):
        # keep context when raised inside a worker process
        return (self.__class__, (self.message, self.fragment, self.date_key))

    def __str__(self) -> str:
        parts = [self.message]
        if self.date_key:
            parts.append(f"date={self.date_key}")
        if self.fragment:
            parts.append(f"fragment={self.fragment[:120]!r}")
        return " | ".join(parts)


class CollectorStateError(RuntimeError):
    """Raised when a reference collector is reused without being reset."""
