"""
Per-run parser state threaded through the line loop.
A fresh ParserContext is created for every parse; nothing is shared across runs.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from models import IngredientDraft, Section, StepDraft


@dataclass
class PendingStep:
    """Step being assembled from one or more physical lines."""

    parts: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    # Sub-group label current when the step started
    title: Optional[str] = None

    def render(self) -> str:
        description = " ".join(part for part in self.parts if part).strip()
        if self.notes:
            note = "; ".join(self.notes)
            description = f"{description} (Not: {note})".strip()
        return description


@dataclass
class ParserContext:
    section: Section = Section.UNKNOWN
    ingredient_group: Optional[str] = None
    step_group: Optional[str] = None
    pending_step: Optional[PendingStep] = None
    ingredients: List[IngredientDraft] = field(default_factory=list)
    steps: List[StepDraft] = field(default_factory=list)

    def flush_step(self) -> None:
        """Commit the pending step, if any, with the title it started under."""
        pending = self.pending_step
        self.pending_step = None
        if pending is None:
            return
        description = pending.render()
        if description:
            self.steps.append(StepDraft(description=description, title=pending.title))
