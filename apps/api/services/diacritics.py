"""
Diacritic folding for keyword matching.
Maps Turkish letters to ASCII so OCR output with or without diacritics compares equal.
"""
import re

_TURKISH_TO_ASCII = str.maketrans(
    {
        "ç": "c",
        "ğ": "g",
        "ı": "i",
        "ö": "o",
        "ş": "s",
        "ü": "u",
    }
)
_NON_ASCII_LETTER = re.compile(r"[^a-z]+")


def normalize(text: str) -> str:
    """
    Fold text into a lowercase ASCII-letter key.

    Examples:
        "YAPILIŞI:" -> "yapilisi"
        "İçindekiler" -> "icindekiler"
        "2 su bardağı" -> "subardagi"

    Only used for comparisons; draft data keeps its original spelling.
    """
    if not text:
        return ""
    # "İ".lower() yields "i" + combining dot, so fold it first
    lowered = text.replace("İ", "i").lower()
    return _NON_ASCII_LETTER.sub("", lowered.translate(_TURKISH_TO_ASCII))


def contains_any(text: str, keywords) -> bool:
    """True when the normalized text contains one of the (normalized) keywords."""
    key = normalize(text)
    return bool(key) and any(keyword in key for keyword in keywords)
