"""
Line normalization for the extraction engine.
Turns plain text or an OCR provider result into an ordered list of Line records,
collapsing provider-specific font metadata into a single `emphasized` flag.
"""
import logging
import re
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from models import Line, OcrResult, Word

logger = logging.getLogger(__name__)

# PyMuPDF span flag bit for bold text
BOLD_FLAG = 16
BOLD_MIN_WEIGHT = 600
BOLD_FONT_MARKERS = ("bold", "black", "heavy")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

LineSource = Union[str, OcrResult, Dict[str, Any]]


def split_plain_text(text: Optional[str]) -> List[Line]:
    """Split on line breaks, trim, drop blank lines."""
    if not text:
        return []
    lines = []
    for raw in _LINE_BREAK.split(text):
        stripped = raw.strip()
        if stripped:
            lines.append(Line(text=stripped))
    return lines


def to_ocr_result(source: Union[OcrResult, Dict[str, Any]]) -> OcrResult:
    """Validate a raw provider payload into an OcrResult."""
    if isinstance(source, OcrResult):
        return source
    if isinstance(source, dict):
        return OcrResult.model_validate(source)
    raise TypeError(f"Unsupported OCR source type: {type(source).__name__}")


def source_text(source: Optional[LineSource]) -> str:
    """Full unmodified text carried by a source."""
    if source is None:
        return ""
    if isinstance(source, str):
        return source
    result = to_ocr_result(source)
    if result.text and result.text.strip():
        return result.text
    return "\n".join(line.text for line in normalize_lines(result))


def normalize_lines(source: Optional[LineSource]) -> List[Line]:
    """
    Convert a raw source into Line records in top-to-bottom order.

    Args:
        source: Plain text (document page) or an OCR result/dict

    Returns:
        List of Line; `words` is set only for rich lines that carried words
    """
    if source is None:
        return []
    if isinstance(source, str):
        return split_plain_text(source)

    result = to_ocr_result(source)
    if not result.lines:
        return split_plain_text(result.text)

    lines: List[Line] = []
    for ocr_line in result.lines:
        words = [
            Word(text=word.text.strip(), emphasized=is_emphasized(word))
            for word in ocr_line.words or []
            if word.text and word.text.strip()
        ]
        text = ocr_line.text.strip() if ocr_line.text else ""
        if not text and words:
            text = " ".join(word.text for word in words)
        if not text:
            continue
        lines.append(Line(text=text, words=words or None))

    logger.debug(f"Normalized {len(lines)} rich lines from OCR result")
    return lines


def _word_metadata(word: Any) -> Dict[str, Any]:
    if isinstance(word, dict):
        return word
    if isinstance(word, BaseModel):
        return word.model_dump(exclude_none=True)
    return dict(getattr(word, "__dict__", {}))


def _weight_is_bold(weight: Any) -> bool:
    if isinstance(weight, bool):
        return weight
    if isinstance(weight, (int, float)):
        return weight >= BOLD_MIN_WEIGHT
    if isinstance(weight, str):
        value = weight.strip().lower()
        if value.isdigit():
            return int(value) >= BOLD_MIN_WEIGHT
        return any(marker in value for marker in BOLD_FONT_MARKERS)
    return False


def is_emphasized(word: Any) -> bool:
    """
    Collapse provider font metadata into a boolean.

    Recognized shapes:
        {"emphasized": true} / {"is_bold": true} / {"bold": true}
        {"font_weight": 700} / {"fontWeight": "bold"} / {"weight": "600"}
        {"font_attributes": {"bold": true}}
        {"flags": 16}  (PyMuPDF span flags)
        {"font": "Arial-BoldMT"} / {"fontname": "Helvetica-Black"}
    """
    data = _word_metadata(word)

    for key in ("emphasized", "is_bold", "bold"):
        value = data.get(key)
        if isinstance(value, bool):
            return value

    for key in ("font_weight", "fontWeight", "weight"):
        if key in data:
            return _weight_is_bold(data[key])

    for key in ("font_attributes", "fontAttributes"):
        attributes = data.get(key)
        if isinstance(attributes, dict):
            return bool(attributes.get("bold") or attributes.get("is_bold"))

    flags = data.get("flags")
    if isinstance(flags, int) and not isinstance(flags, bool):
        return bool(flags & BOLD_FLAG)

    for key in ("font", "fontname", "font_name", "fontName"):
        name = data.get(key)
        if isinstance(name, str):
            return any(marker in name.lower() for marker in BOLD_FONT_MARKERS)

    return False
