"""
Heuristic vocabulary shared by the section classifier and line parsers.
All entries are diacritic-normalized (see services.diacritics.normalize).
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

from services.diacritics import normalize

INGREDIENT_KEYWORDS = ("malzeme", "icindekiler", "listesi", "gerekli", "ihtiyac", "bilesenler")
STEP_KEYWORDS = (
    "yapilisi",
    "hazirlanisi",
    "tarif",
    "yapim",
    "nasil",
    "hazirlama",
    "adimlar",
    "pisirme",
    "uygulama",
    "yontem",
)
UNIT_WORDS = (
    "gr",
    "g",
    "kg",
    "ml",
    "cl",
    "l",
    "lt",
    "kasik",
    "bardak",
    "fincan",
    "adet",
    "tane",
    "kase",
    "tutam",
    "demet",
    "dilim",
    "paket",
    "cay",
    "su",
    "yemek",
    "tatli",
    "kutu",
    "kavanoz",
    "dis",
)
MODIFIER_WORDS = ("orta", "boy", "buyuk", "kucuk", "yarim", "ceyrek", "tam")
NUMBER_WORDS = ("bir", "iki", "uc", "dort", "bes", "alti", "yedi", "sekiz", "dokuz", "on")
PREPARATION_WORDS = (
    "rende",
    "dogranmis",
    "kiyilmis",
    "ezilmis",
    "haslanmis",
    "rendelenmis",
    "soyulmus",
    "eritilmis",
    "kizarmis",
)

# "for" marker of sub-group labels ("Sos için")
GROUP_MARKER = "icin"

# Units shorter than this only match exactly ("g" must not match "gul")
MIN_STEM_LENGTH = 3
# Possessive/plural endings accepted after a unit stem ("bardağı", "kaşıkları", "kutusu")
INFLECTION_SUFFIXES = ("i", "u", "si", "su", "lar", "ler", "lari", "leri")


def _normalized(words: Iterable[str]) -> FrozenSet[str]:
    return frozenset(key for key in (normalize(word) for word in words) if key)


@dataclass(frozen=True)
class ParserVocabulary:
    """Keyword/unit/modifier lists driving the heuristics."""

    ingredient_keywords: FrozenSet[str] = field(default_factory=lambda: _normalized(INGREDIENT_KEYWORDS))
    step_keywords: FrozenSet[str] = field(default_factory=lambda: _normalized(STEP_KEYWORDS))
    unit_words: FrozenSet[str] = field(default_factory=lambda: _normalized(UNIT_WORDS))
    modifier_words: FrozenSet[str] = field(default_factory=lambda: _normalized(MODIFIER_WORDS))
    number_words: FrozenSet[str] = field(default_factory=lambda: _normalized(NUMBER_WORDS))
    preparation_words: FrozenSet[str] = field(default_factory=lambda: _normalized(PREPARATION_WORDS))

    @classmethod
    def from_settings(cls, settings) -> "ParserVocabulary":
        """Build the vocabulary from application settings (comma-separated env values)."""
        return cls(
            ingredient_keywords=_normalized(settings.ingredient_keywords),
            step_keywords=_normalized(settings.step_keywords),
            unit_words=_normalized(settings.unit_words),
            modifier_words=_normalized(settings.modifier_words),
            number_words=_normalized(settings.number_words),
            preparation_words=_normalized(settings.preparation_words),
        )

    def is_unit(self, token: str) -> bool:
        """
        Unit match, tolerant of Turkish inflection.

        "bardağı" matches "bardak" through the softened stem "bardag";
        "kaşıkları" matches "kasik" plus a plural ending; "yemeklik" is not a unit.
        """
        key = normalize(token)
        if not key:
            return False
        if key in self.unit_words:
            return True
        for unit in self.unit_words:
            if len(unit) < MIN_STEM_LENGTH:
                continue
            stems = [unit]
            if unit.endswith("k"):
                stems.append(unit[:-1] + "g")
            for stem in stems:
                if key.startswith(stem) and key[len(stem):] in INFLECTION_SUFFIXES:
                    return True
        return False

    def is_modifier(self, token: str) -> bool:
        key = normalize(token)
        return key in self.modifier_words or key in self.number_words

    def is_preparation(self, token: str) -> bool:
        return normalize(token) in self.preparation_words


def has_group_marker(text: str) -> bool:
    """True when a token of the text is "için" ("İçindekiler" is not a group)."""
    return any(normalize(token) == GROUP_MARKER for token in text.split())
