"""
Text normalization shared by every search component.

Case-folds, strips diacritics and punctuation, and collapses whitespace so
that "BÔLO", "Bolo" and "bolo" compare equal.
"""

import re
import unicodedata
from typing import Any, List

NON_WORD_PATTERN = re.compile(r"[^\w\s]")
WHITESPACE_PATTERN = re.compile(r"\s+")


def strip_diacritics(text: str) -> str:
    """Decompose text and drop combining marks ("ção" -> "cao")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: Any) -> str:
    """
    Normalize text for matching.

    Non-string input (including None) yields an empty string.

    Examples:
        "  Bolo de Cenoura! " -> "bolo de cenoura"
        "Pão-de-Açúcar"       -> "paodeacucar"
    """
    if not isinstance(text, str):
        return ""

    normalized = strip_diacritics(text.strip().lower())
    normalized = NON_WORD_PATTERN.sub("", normalized)
    return WHITESPACE_PATTERN.sub(" ", normalized).strip()


def tokenize(text: str) -> List[str]:
    """Split already-normalized text into whitespace tokens."""
    return text.split() if text else []
