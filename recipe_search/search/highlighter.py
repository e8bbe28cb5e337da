"""
Keyword highlighting for search result snippets.

Keywords arrive normalized (lower-case, no accents) while field text is
shown as stored, so each keyword is compiled into a pattern that also
matches the accented spellings of its letters ("facil" marks "Fácil").
"""

import re
from typing import Dict, Iterable, Optional, Pattern

ACCENT_VARIANTS: Dict[str, str] = {
    "a": "aáàâãä",
    "e": "eéèêë",
    "i": "iíìîï",
    "o": "oóòôõö",
    "u": "uúùûü",
    "c": "cç",
    "n": "nñ",
}

ELLIPSIS = "..."


def _keyword_pattern(keyword: str) -> str:
    parts = []
    for ch in keyword:
        variants = ACCENT_VARIANTS.get(ch)
        parts.append(f"[{variants}]" if variants else re.escape(ch))
    return "".join(parts)


def build_highlight_pattern(keywords: Iterable[str]) -> Optional[Pattern[str]]:
    """
    Compile one case-insensitive alternation for all keywords.

    Longer keywords come first so "chocolate" wins over "choc" when both
    start at the same position. Returns None for an empty keyword list.
    """
    unique = sorted({k for k in keywords if k}, key=lambda k: (-len(k), k))
    if not unique:
        return None
    return re.compile("|".join(_keyword_pattern(k) for k in unique), re.IGNORECASE)


def highlight(
    text: str,
    keywords: Iterable[str],
    open_tag: str = "<mark>",
    close_tag: str = "</mark>",
) -> str:
    """
    Wrap every keyword occurrence in text with the highlight markers.

    Examples:
        highlight("Bolo de Chocolate", ["chocolate"])
            -> "Bolo de <mark>Chocolate</mark>"
    """
    if not text:
        return ""

    pattern = build_highlight_pattern(keywords)
    if pattern is None:
        return text

    return pattern.sub(lambda m: f"{open_tag}{m.group(0)}{close_tag}", text)


def truncate(text: str, max_length: int) -> str:
    """Cut text to max_length characters, appending an ellipsis when cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS
