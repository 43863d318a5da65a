"""
RecipeScan Pydantic models: canonical schema for OCR input and recipe drafts.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field


class Section(str, Enum):
    """Parsing state of the section classifier. Never persisted."""

    UNKNOWN = "unknown"
    INGREDIENTS = "ingredients"
    STEPS = "steps"


class SourceKind(str, Enum):
    """Upstream provider selected for a batch item."""

    DOCUMENT = "document"
    IMAGE = "image"


class Word(BaseModel):
    """Recognized token with collapsed font-weight information."""
    text: str
    emphasized: bool = False

    class Config:
        frozen = True


class Line(BaseModel):
    """Normalized input line; `words` is only set for rich (OCR) sources."""
    text: str
    words: Optional[List[Word]] = None

    class Config:
        frozen = True


class OcrWord(BaseModel):
    """Word as reported by an OCR provider. Font metadata arrives as extra fields."""
    text: str = ""
    emphasized: Optional[bool] = None

    class Config:
        extra = "allow"


class OcrLine(BaseModel):
    """Line as reported by an OCR provider."""
    text: str = ""
    words: Optional[List[OcrWord]] = None

    class Config:
        extra = "allow"


class OcrResult(BaseModel):
    """Output of an OCR provider: full text plus optional line/word segmentation."""
    text: str = ""
    lines: Optional[List[OcrLine]] = None

    class Config:
        extra = "allow"


class IngredientDraft(BaseModel):
    """Ingredient split into quantity prefix and name."""
    amount: str = Field("", description="Quantity/unit prefix, empty when unparsed")
    name: str
    group: Optional[str] = Field(None, description="e.g. 'Sos için'")


class StepDraft(BaseModel):
    """One logical preparation step, possibly merged from several lines."""
    description: str
    title: Optional[str] = Field(None, description="Step sub-group label")


class RecipeDraft(BaseModel):
    """Structured but unverified recipe produced by extraction."""
    name: str
    ingredients: List[IngredientDraft] = Field(default_factory=list)
    steps: List[StepDraft] = Field(default_factory=list)
    original_text: str = Field(..., alias="originalText", description="Unmodified input text")
    category: str = "Genel"
    time: Optional[str] = Field(None, description="e.g. '30 dk'")
    servings: Optional[str] = Field(None, description="e.g. '4 kişilik'")

    class Config:
        populate_by_name = True

    @property
    def has_content(self) -> bool:
        return bool(self.ingredients or self.steps)


class SourceFile(BaseModel):
    """Batch input item. Payload is base64 text (optionally a data URL) or raw bytes."""
    kind: SourceKind
    payload: Union[bytes, str]
    filename: Optional[str] = None
