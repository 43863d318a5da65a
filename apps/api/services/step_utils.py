"""
Step line parsing.
Merges continuation lines into the pending step, relocates parenthetical
notes and tracks the current step sub-group label.
"""
import logging
import re
from typing import List, Tuple

from models import Line
from services.ingredient_utils import group_label, strip_markers
from services.parser_context import ParserContext, PendingStep
from services.vocabulary import has_group_marker

logger = logging.getLogger(__name__)

NUMBERED_STEP_PATTERN = re.compile(r"^\d+[.)]\s")
PARENTHETICAL_PATTERN = re.compile(r"\(([^()]*)\)")
SPACE_BEFORE_PUNCTUATION = re.compile(r"\s+([.,;:!?])")
MULTI_SPACE = re.compile(r"\s{2,}")

STEP_GROUP_MAX_LENGTH = 40


def is_numbered_step(text: str) -> bool:
    """True for lines opening a new step: "1. ...", "2) ..."."""
    return bool(NUMBERED_STEP_PATTERN.match(text.strip()))


def is_step_group_header(text: str) -> bool:
    stripped = text.strip()
    if len(stripped) >= STEP_GROUP_MAX_LENGTH or stripped[:1].isdigit():
        return False
    return stripped.endswith(":") or has_group_marker(stripped)


def extract_notes(text: str) -> Tuple[str, List[str]]:
    """
    Pull "(...)" parentheticals out of a line.

    Example:
        "Fırını 180 derecede ısıtın (önceden)." -> ("Fırını 180 derecede ısıtın.", ["önceden"])
    """
    if "(" not in text:
        return text.strip(), []

    # Innermost pairs go first; repeat so "((x))" leaves no empty "( )"
    notes: List[str] = []
    cleaned = text
    while PARENTHETICAL_PATTERN.search(cleaned):
        for note in PARENTHETICAL_PATTERN.findall(cleaned):
            note = " ".join(note.split())
            if note:
                notes.append(note)
        cleaned = PARENTHETICAL_PATTERN.sub(" ", cleaned)
    cleaned = SPACE_BEFORE_PUNCTUATION.sub(r"\1", cleaned)
    cleaned = MULTI_SPACE.sub(" ", cleaned)
    return cleaned.strip(), notes


class StepLineParser:
    """Parser for lines inside the steps section."""

    def handle(self, line: Line, context: ParserContext) -> None:
        text = line.text
        if is_step_group_header(text):
            context.flush_step()
            context.step_group = group_label(strip_markers(text)) or None
            logger.debug(f"Step group: {context.step_group!r}")
            return

        starts_new = is_numbered_step(text)
        body, notes = extract_notes(strip_markers(text))

        if starts_new or context.pending_step is None:
            context.flush_step()
            context.pending_step = PendingStep(title=context.step_group)

        if body:
            context.pending_step.parts.append(body)
        context.pending_step.notes.extend(notes)
