"""Language metadata: known language names and their display codes."""

import re
from pathlib import Path
from typing import Iterable, Mapping, Optional

DEFAULT_LANGUAGES = [
    "Latin",
    "English",
    "Deutsch",
    "Francais",
    "Italiano",
    "Espanol",
    "Portugues",
    "Nederlands",
    "Magyar",
    "Polski",
    "Polski-New",
    "Čeština/Bohemice",
    "Vietnamice",
    "Latin-Bea",
]

# Names whose first two letters are not their display code
CODE_OVERRIDES = {
    "Polski": "pl",
    "Polski-New": "pl",
    "Magyar": "hu",
    "Čeština/Bohemice": "cs",
}


class LanguageCatalog:
    """Known language names and the two-letter codes used to tag output cells."""

    def __init__(self, names: Optional[Iterable[str]] = None, codes: Optional[Mapping[str, str]] = None):
        """Initialize the catalog.

        Args:
            names: Known language names (defaults to the built-in list)
            codes: Extra name -> display code mappings, applied over the
                built-in overrides
        """
        self.names = list(names) if names is not None else list(DEFAULT_LANGUAGES)
        self._codes = {name: name[:2].lower() for name in self.names}
        self._codes.update(CODE_OVERRIDES)
        self._codes.update(codes or {})

    @property
    def codes(self) -> dict[str, str]:
        """Display code of every known or overridden language."""
        return dict(self._codes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, LanguageCatalog):
            return NotImplemented
        return self.names == other.names and self._codes == other._codes

    def code(self, name: str) -> str:
        """Return the display code for a language name.

        Unknown names fall back to their first two letters, lowercased.
        """
        return self._codes.get(name) or name[:2].lower()

    def __contains__(self, name: str) -> bool:
        return name in self.names

    @classmethod
    def from_dialog(cls, text: str, codes: Optional[Mapping[str, str]] = None) -> "LanguageCatalog":
        """Parse the ``[languages]`` block of a horas.dialog file.

        Args:
            text: Contents of the dialog file
            codes: Extra display code mappings

        Returns:
            Catalog with the listed languages, or the defaults if the block is missing
        """
        match = re.search(r"\[languages\].(.*?)\n\n", text, re.S)
        if not match:
            return cls(codes=codes)
        names = [n.strip() for n in match.group(1).split(",") if n.strip()]
        return cls(names, codes)

    @classmethod
    def from_settings(
        cls,
        names: Optional[Iterable[str]] = None,
        codes: Optional[Mapping[str, str]] = None,
        dialog_path: Optional[Path] = None,
    ) -> "LanguageCatalog":
        """Build a catalog from configuration values.

        An explicit name list wins over the dialog file.

        Args:
            names: Language names
            codes: Extra display code mappings
            dialog_path: horas.dialog file to read names from

        Returns:
            LanguageCatalog
        """
        if names:
            return cls(names, codes)
        if dialog_path is not None:
            text = Path(dialog_path).read_text(encoding="utf-8")
            return cls.from_dialog(text, codes)
        return cls(codes=codes)
