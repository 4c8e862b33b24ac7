"""Text normalization utilities for office markup."""

import re


# Diacritic and typographic substitutions for the ASCII rewrite
ASCII_TABLE = {
    # Vowels with macrons, breves, etc.
    "ā": "a", "ă": "a", "à": "a", "á": "a", "â": "a", "ã": "a", "ä": "a", "å": "a", "æ": "ae", "ǽ": "ae",
    "ē": "e", "ĕ": "e", "è": "e", "é": "e", "ê": "e", "ë": "e",
    "ī": "i", "ĭ": "i", "ì": "i", "í": "i", "î": "i", "ï": "i",
    "ō": "o", "ŏ": "o", "ò": "o", "ó": "o", "ô": "o", "õ": "o", "ö": "o", "ø": "o", "œ": "oe",
    "ū": "u", "ŭ": "u", "ù": "u", "ú": "u", "û": "u", "ü": "u",
    "ȳ": "y", "ỳ": "y", "ý": "y", "ŷ": "y", "ÿ": "y",
    # Uppercase versions
    "Ā": "A", "Ă": "A", "À": "A", "Á": "A", "Â": "A", "Ã": "A", "Ä": "A", "Å": "A", "Æ": "AE", "Ǽ": "AE",
    "Ē": "E", "Ĕ": "E", "È": "E", "É": "E", "Ê": "E", "Ë": "E",
    "Ī": "I", "Ĭ": "I", "Ì": "I", "Í": "I", "Î": "I", "Ï": "I",
    "Ō": "O", "Ŏ": "O", "Ò": "O", "Ó": "O", "Ô": "O", "Õ": "O", "Ö": "O", "Ø": "O", "Œ": "OE",
    "Ū": "U", "Ŭ": "U", "Ù": "U", "Ú": "U", "Û": "U", "Ü": "U",
    "Ȳ": "Y", "Ỳ": "Y", "Ý": "Y", "Ŷ": "Y", "Ÿ": "Y",
    # Consonants
    "ç": "c", "Ç": "C",
    "ñ": "n", "Ñ": "N",
    "ß": "ss",
    # Typographic punctuation
    "‘": "'", "’": "'", "“": '"', "”": '"', "–": "-", "—": "-",
    "…": "...", "€": "EUR", "£": "GBP", "©": "(c)", "®": "(r)",
    # Math symbols
    "×": "x", "÷": "/", "±": "+/-", "≤": "<=", "≥": ">=",
}

_ASCII_TRANSLATION = str.maketrans(ASCII_TABLE)


def to_ascii(text: str) -> str:
    """Replace accented letters and typographic symbols with ASCII equivalents.

    Args:
        text: Input text

    Returns:
        Text with every ASCII_TABLE key substituted. Idempotent.
    """
    if not text:
        return text
    return text.translate(_ASCII_TRANSLATION)


def clean_string(html: str) -> str:
    """Apply string-level cleanup to raw office markup before parsing.

    - FONT elements become spans (their attributes are handled later)
    - FORM tags are dropped
    - ``&nbsp;`` runs are removed
    - single-letter ``<B><I>x</I></B>`` drop caps are unwrapped
    - ``~`` line joiners become line breaks
    - blank lines are deleted

    Args:
        html: Raw markup

    Returns:
        Cleaned markup
    """
    if not html:
        return html
    html = re.sub(r"(</?)FONT", r"\1span", html, flags=re.I)
    html = re.sub(r"</?FORM.*?>\n?", "", html, flags=re.I)
    html = re.sub(r"(?:&nbsp;)+", "", html)
    html = re.sub(r"<B><I>(.)</I></B>", r"\1", html)
    html = re.sub(r"\s*~\s*", "<BR>", html)
    html = re.sub(r"^\s*\n+", "", html, flags=re.M)
    return html
