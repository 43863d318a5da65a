"""
OCR service using PaddleOCR for text extraction.
Uses the Turkish recognition model and falls back to English when it cannot
be loaded. Returns an OcrResult with one entry per recognized line.
"""
import logging
import os
import tempfile
import threading
from functools import lru_cache
from typing import Any, List, Optional

from models import OcrLine, OcrResult
from services.errors import OCRError, OCRUnavailableError

logger = logging.getLogger(__name__)

_RESULT_KEYS = ["data", "res", "lines", "result", "results", "ocr_result", "outputs"]


class OCRService:
    """Service for OCR processing using PaddleOCR."""

    def __init__(self, use_gpu: bool = False, lang: str = "tr", fallback_lang: Optional[str] = "en"):
        """
        Initialize OCR service.
        Args:
            use_gpu: Use GPU acceleration (requires CUDA)
            lang: Recognition language (default: 'tr')
            fallback_lang: Language used when `lang` cannot be loaded
        """
        try:
            from paddleocr import PaddleOCR
        except ImportError as exc:
            raise OCRUnavailableError("Install PaddleOCR with: pip install paddleocr[all]") from exc

        self.use_gpu = use_gpu
        self._lock = threading.Lock()
        try:
            self.ocr = self._create(PaddleOCR, lang)
            self.lang = lang
        except Exception as exc:
            if not fallback_lang or fallback_lang == lang:
                raise OCRUnavailableError(f"PaddleOCR init failed for '{lang}': {exc}") from exc
            logger.warning(f"PaddleOCR init failed for '{lang}' ({exc}); falling back to '{fallback_lang}'")
            try:
                self.ocr = self._create(PaddleOCR, fallback_lang)
            except Exception as fallback_exc:
                raise OCRUnavailableError(f"PaddleOCR init failed: {fallback_exc}") from fallback_exc
            self.lang = fallback_lang

    def _create(self, factory, lang: str):
        try:
            return factory(use_gpu=self.use_gpu, lang=lang)
        except (TypeError, ValueError) as exc:
            # Newer PaddleOCR releases dropped the use_gpu argument
            logger.warning("PaddleOCR init without use_gpu due to error: %s", exc)
            return factory(lang=lang)

    def recognize(self, image_data: bytes) -> Optional[OcrResult]:
        """
        Run OCR on an image.

        Args:
            image_data: Encoded image bytes (JPEG/PNG)

        Returns:
            OcrResult, or None when no text was recognized

        Raises:
            OCRError: If the provider fails
        """
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(delete=False, suffix=".jpg") as tmp:
                tmp_path = tmp.name
                tmp.write(image_data)

            logger.debug(f"Running OCR ({self.lang}) on {tmp_path}")
            with self._lock:
                raw = self.ocr.ocr(tmp_path, cls=True)

            texts = _texts_from_result(raw)
            logger.info(f"OCR extracted {len(texts)} lines")
            if not texts:
                logger.warning("OCR returned no text; sample result: %s", _short_repr(raw))
                return None

            return OcrResult(
                text="\n".join(texts),
                lines=[OcrLine(text=text) for text in texts],
            )

        except OCRError:
            raise
        except Exception as e:
            logger.error(f"OCR failed: {e}", exc_info=True)
            raise OCRError(str(e)) from e

        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)


def _unwrap(result: Any) -> Any:
    if isinstance(result, dict) and "rec_texts" not in result:
        for key in _RESULT_KEYS:
            if result.get(key):
                return result[key]
        return [result]
    return result


def _texts_from_result(result: Any) -> List[str]:
    """Collect line texts from the several PaddleOCR output shapes, page by page."""
    if isinstance(result, tuple) and result:
        result = result[0]
    result = _unwrap(result)
    if isinstance(result, dict):
        result = [result]
    if not isinstance(result, list):
        logger.warning("Unexpected OCR result type: %s", type(result))
        return []

    texts: List[str] = []
    for page_result in result:
        if page_result is None:
            continue
        if isinstance(page_result, dict) and "rec_texts" in page_result:
            texts.extend(str(text).strip() for text in page_result.get("rec_texts") or [] if text)
            continue
        for line_result in _unwrap(page_result):
            text = _parse_ocr_line(line_result)
            if text:
                texts.append(text)
    return [text for text in texts if text]


def _get_line_value(line_result, keys: List[str]):
    for key in keys:
        if isinstance(line_result, dict) and key in line_result:
            return line_result.get(key)
        if hasattr(line_result, key):
            return getattr(line_result, key)
    return None


def _parse_ocr_line(line_result) -> Optional[str]:
    # Legacy PaddleOCR output: [bbox_coords, (text, confidence)]
    if isinstance(line_result, (list, tuple)) and len(line_result) >= 2:
        text_conf = line_result[1]
        if isinstance(text_conf, (list, tuple)) and text_conf and isinstance(text_conf[0], str):
            return text_conf[0].strip()

    text = _get_line_value(line_result, ["text", "rec_text", "ocr_text", "value"])
    if isinstance(text, str):
        return text.strip()
    return None


def _short_repr(value, limit: int = 800) -> str:
    try:
        text = repr(value)
    except Exception:
        return "<unrepresentable>"
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


@lru_cache(maxsize=2)
def get_ocr_service(use_gpu: bool = False, lang: str = "tr", fallback_lang: Optional[str] = "en") -> OCRService:
    """Factory function to get a cached OCRService instance."""
    return OCRService(use_gpu=use_gpu, lang=lang, fallback_lang=fallback_lang)
