"""
Ingredient line parsing.
Splits a line into quantity prefix and ingredient name, using bold/regular
word weight when the OCR provider reported it, and a token heuristic otherwise.
"""
import logging
import re
from typing import List, Optional, Tuple

from models import IngredientDraft, Line, Word
from services.parser_context import ParserContext
from services.vocabulary import ParserVocabulary, has_group_marker

logger = logging.getLogger(__name__)

BULLET_PATTERN = re.compile(r"^[\s\-\*•·–]+")
LIST_MARKER_PATTERN = re.compile(r"^\d+[.)]\s+")
MARKER_TOKEN_PATTERN = re.compile(r"^(?:\d+[.)]|[\-\*•·–]+)$")
NUMBER_TOKEN_PATTERN = re.compile(r"^[\d½¼¾⅓⅔⅛]")
LEADING_BULLET_OR_DIGIT = re.compile(r"^[\-\*•·–\d]")

GROUP_MAX_LENGTH = 30


def strip_markers(text: str) -> str:
    """Remove leading bullets and numeric list markers ("1.", "1)")."""
    text = BULLET_PATTERN.sub("", text.strip())
    text = LIST_MARKER_PATTERN.sub("", text)
    return text.strip()


def group_label(text: str) -> str:
    return text.strip().rstrip(":").strip()


def is_ingredient_group_header(text: str) -> bool:
    """
    Detect sub-group headers such as "Sos için:" or "HAMURU".

    Examples:
        "Sosu için" -> True
        "Üzeri:" -> True
        "KREMA" -> True
        "2 yumurta" -> False
    """
    stripped = text.strip()
    if stripped.endswith(":"):
        return True
    if LEADING_BULLET_OR_DIGIT.match(stripped):
        return False
    if len(stripped) >= GROUP_MAX_LENGTH:
        return False
    return stripped.isupper() or has_group_marker(stripped)


def split_by_emphasis(words: List[Word]) -> Optional[Tuple[str, str]]:
    """
    Regular-weight words form the amount, bold words the name.

    Returns None when the line does not mix both weights.
    """
    tokens = [word for word in words if not MARKER_TOKEN_PATTERN.match(word.text)]
    emphasized = [word.text for word in tokens if word.emphasized]
    regular = [word.text for word in tokens if not word.emphasized]
    if not emphasized or not regular:
        return None
    return " ".join(regular), " ".join(emphasized)


class IngredientLineParser:
    """Parser for lines inside the ingredients section."""

    def __init__(self, vocabulary: Optional[ParserVocabulary] = None):
        self.vocabulary = vocabulary or ParserVocabulary()

    def handle(self, line: Line, context: ParserContext) -> None:
        """Consume one line: update the current group or append an ingredient."""
        if is_ingredient_group_header(line.text):
            context.ingredient_group = group_label(strip_markers(line.text)) or None
            logger.debug(f"Ingredient group: {context.ingredient_group!r}")
            return

        ingredient = self.parse_line(line, context.ingredient_group)
        if ingredient is not None:
            context.ingredients.append(ingredient)

    def parse_line(self, line: Line, group: Optional[str] = None) -> Optional[IngredientDraft]:
        """
        Parse a single ingredient line.

        Returns:
            IngredientDraft, or None when no name is left after splitting
        """
        split = split_by_emphasis(line.words) if line.words else None
        if split is None:
            split = self.split_by_tokens(strip_markers(line.text))

        amount, name = (part.strip() for part in split)
        if not name:
            return None
        return IngredientDraft(amount=amount, name=name, group=group)

    def split_by_tokens(self, text: str) -> Tuple[str, str]:
        """
        Consume a leading quantity/unit run into the amount.

        Examples:
            "3 adet Yumurta" -> ("3 adet", "Yumurta")
            "Yarım çay kaşığı tuz" -> ("Yarım çay kaşığı", "tuz")
            "Tuz" -> ("", "Tuz")
        """
        tokens = text.split()
        if not tokens:
            return "", ""
        if not self._starts_amount(tokens[0]):
            return "", " ".join(tokens)

        consumed = 1
        for token in tokens[1:]:
            if not self._continues_amount(token):
                break
            consumed += 1
        return " ".join(tokens[:consumed]), " ".join(tokens[consumed:])

    def _starts_amount(self, token: str) -> bool:
        return (
            bool(NUMBER_TOKEN_PATTERN.match(token))
            or self.vocabulary.is_modifier(token)
            or self.vocabulary.is_preparation(token)
        )

    def _continues_amount(self, token: str) -> bool:
        return self._starts_amount(token) or self.vocabulary.is_unit(token)
