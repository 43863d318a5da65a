"""
Deterministic recipe parser for OCR and PDF text.
Classifies lines into title, ingredient and step sections with keyword and
shape heuristics, then hands each line to the matching line parser.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence

from models import Line, RecipeDraft, Section, SourceKind, StepDraft
from services.diacritics import contains_any
from services.ingredient_utils import IngredientLineParser, group_label, strip_markers
from services.lines import LineSource, normalize_lines, source_text
from services.parser_context import ParserContext
from services.step_utils import StepLineParser
from services.vocabulary import ParserVocabulary, has_group_marker

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Taranan Tarif"
DEFAULT_CATEGORY = "Genel"

HEADER_MAX_LENGTH = 40
FAILSAFE_MIN_LENGTH = 20
NOISE_MIN_CHARS = 3


class Transition(NamedTuple):
    section: Section
    is_header: bool


class SectionClassifier:
    """
    Line-by-line section state machine: UNKNOWN -> INGREDIENTS -> STEPS.

    Header lines are detected by normalized keyword containment on short lines.
    A long numbered line inside the ingredients forces the steps section, which
    recovers from OCR garbling the literal steps header.
    """

    numbered_pattern = re.compile(r"^\d+[.)]\s")
    bullet_pattern = re.compile(r"^[\-\*•·]")

    def __init__(
        self,
        vocabulary: Optional[ParserVocabulary] = None,
        header_max_length: int = HEADER_MAX_LENGTH,
        failsafe_min_length: int = FAILSAFE_MIN_LENGTH,
    ):
        self.vocabulary = vocabulary or ParserVocabulary()
        self.header_max_length = header_max_length
        self.failsafe_min_length = failsafe_min_length

    @staticmethod
    def is_noise(text: str) -> bool:
        """Scan noise: fewer than 3 non-whitespace characters."""
        return len(re.sub(r"\s", "", text)) < NOISE_MIN_CHARS

    def is_header(self, text: str, keywords) -> bool:
        return len(text) <= self.header_max_length and contains_any(text, keywords)

    def is_ingredient_header(self, text: str) -> bool:
        return self.is_header(text, self.vocabulary.ingredient_keywords)

    def is_step_header(self, text: str) -> bool:
        return self.is_header(text, self.vocabulary.step_keywords)

    def is_any_header(self, text: str) -> bool:
        return self.is_ingredient_header(text) or self.is_step_header(text)

    def is_list_item(self, text: str) -> bool:
        return bool(self.numbered_pattern.match(text) or self.bullet_pattern.match(text))

    def classify(self, text: str, current: Section) -> Transition:
        """
        Decide the section a line belongs to.

        Returns:
            Transition with the (possibly new) section and whether the line
            is a header to be consumed rather than parsed
        """
        if current != Section.STEPS and self.is_ingredient_header(text):
            return Transition(Section.INGREDIENTS, True)
        if self.is_step_header(text):
            return Transition(Section.STEPS, True)

        numbered = bool(self.numbered_pattern.match(text))
        if current == Section.INGREDIENTS and numbered and len(text) > self.failsafe_min_length:
            return Transition(Section.STEPS, False)
        if current == Section.UNKNOWN:
            if numbered:
                return Transition(Section.STEPS, False)
            if self.bullet_pattern.match(text):
                return Transition(Section.INGREDIENTS, False)
        return Transition(current, False)


@dataclass
class RecognizedSource:
    """Provider output for one batch item: one entry per page (images have one)."""

    kind: SourceKind
    pages: List[LineSource] = field(default_factory=list)
    label: Optional[str] = None


class RecipeParser:
    """
    Heuristic parser producing a RecipeDraft from one page of text.
    Never raises on malformed content; unclassifiable input becomes one step.
    """

    time_pattern = re.compile(
        r"(\d+(?:[.,]\d+)?(?:\s*[-–]\s*\d+)?)\s*(dk|dakika|sa|saat)\b\.?", re.IGNORECASE
    )
    # "İ" has no single-character lower case, so it is listed explicitly
    servings_pattern = re.compile(r"(\d+(?:\s*[-–]\s*\d+)?)\s*k[iıİI][şs][iıİI]l[iıİI]k", re.IGNORECASE)
    title_noise_pattern = re.compile(r"[^\w\s]")

    def __init__(
        self,
        vocabulary: Optional[ParserVocabulary] = None,
        placeholder_title: str = PLACEHOLDER_TITLE,
        default_category: str = DEFAULT_CATEGORY,
    ):
        self.vocabulary = vocabulary or ParserVocabulary()
        self.placeholder_title = placeholder_title or PLACEHOLDER_TITLE
        self.default_category = default_category
        self.classifier = SectionClassifier(self.vocabulary)
        self.ingredient_parser = IngredientLineParser(self.vocabulary)
        self.step_parser = StepLineParser()

    def parse(self, source: LineSource) -> RecipeDraft:
        """
        Parse a plain string or OCR result into a draft.

        Args:
            source: Document page text or OCR result (object or raw dict)

        Returns:
            RecipeDraft; ingredients/steps fall back to a single step holding
            the whole text when nothing could be classified
        """
        original_text = source_text(source)
        lines = normalize_lines(source)
        context = ParserContext()

        name, title_index = self._extract_title(lines)

        for index, line in enumerate(lines):
            if index == title_index:
                continue
            self._process_line(line, context)
        context.flush_step()

        ingredients = context.ingredients
        steps = context.steps
        if not ingredients and not steps:
            logger.info("No sections detected; keeping the full text as a single step")
            steps = [StepDraft(description=original_text)]

        logger.info(
            f"Parsed {len(lines)} lines into {len(ingredients)} ingredients and {len(steps)} steps"
        )
        return RecipeDraft(
            name=name,
            ingredients=ingredients,
            steps=steps,
            original_text=original_text,
            category=self.default_category,
            time=self._extract_time(lines),
            servings=self._extract_servings(lines),
        )

    def _process_line(self, line: Line, context: ParserContext) -> None:
        text = line.text
        if self.classifier.is_noise(text):
            return

        transition = self.classifier.classify(text, context.section)
        if transition.section != context.section:
            logger.debug(
                f"Section {context.section.value} -> {transition.section.value} at '{text[:50]}'"
            )
            context.flush_step()
            context.section = transition.section

        if transition.is_header:
            context.flush_step()
            # "Sos için malzemeler:" is both a section header and a group label
            if has_group_marker(text):
                label = group_label(strip_markers(text)) or None
                if context.section == Section.INGREDIENTS:
                    context.ingredient_group = label
                else:
                    context.step_group = label
            return

        if context.section == Section.INGREDIENTS:
            self.ingredient_parser.handle(line, context)
        elif context.section == Section.STEPS:
            self.step_parser.handle(line, context)

    def _extract_title(self, lines: List[Line]):
        """
        Take the first non-noise line as the title unless it is a header
        or a list item ("1. ...", "- ..."), which stay content.

        Returns:
            (title, index of the consumed line or None)
        """
        for index, line in enumerate(lines):
            if self.classifier.is_noise(line.text):
                continue
            if self.classifier.is_any_header(line.text) or self.classifier.is_list_item(line.text):
                return self.placeholder_title, None
            title = " ".join(self.title_noise_pattern.sub(" ", line.text).split())
            return title or self.placeholder_title, index
        return self.placeholder_title, None

    def _extract_time(self, lines: List[Line]) -> Optional[str]:
        for line in lines:
            match = self.time_pattern.search(line.text)
            if match:
                return f"{match.group(1)} {match.group(2)}"
        return None

    def _extract_servings(self, lines: List[Line]) -> Optional[str]:
        for line in lines:
            match = self.servings_pattern.search(line.text)
            if match:
                return " ".join(match.group(0).split())
        return None


def extract_from_single_source(
    source: Optional[LineSource], parser: Optional[RecipeParser] = None
) -> Optional[RecipeDraft]:
    """
    Parse one recognized source.

    Returns:
        None only when the provider produced no text at all
    """
    if source is None or not source_text(source).strip():
        return None
    return (parser or RecipeParser()).parse(source)


def extract_from_multiple_sources(
    sources: Sequence[Optional[RecognizedSource]], parser: Optional[RecipeParser] = None
) -> List[RecipeDraft]:
    """
    Parse recognized batch items in order.

    Document pages are parsed independently and kept only when they yield an
    ingredient or a step; image drafts are kept whenever text was recognized.
    Items that failed upstream are passed as None and skipped.
    """
    parser = parser or RecipeParser()
    drafts: List[RecipeDraft] = []
    for source in sources:
        if source is None:
            continue
        if source.kind == SourceKind.DOCUMENT:
            for page in source.pages:
                draft = extract_from_single_source(page, parser)
                if draft is not None and draft.has_content:
                    drafts.append(draft)
        else:
            for page in source.pages:
                draft = extract_from_single_source(page, parser)
                if draft is not None:
                    drafts.append(draft)
    return drafts
