"""
Recipe extraction service: single-image analysis and multi-file batch analysis.
Runs the blocking OCR/document providers in a thread pool with a timeout,
isolates failures per item and returns drafts in input order.
"""
import asyncio
import base64
import binascii
import logging
from functools import lru_cache
from io import BytesIO
from typing import Callable, List, Optional, Sequence, Union

from config import settings
from models import OcrResult, RecipeDraft, SourceFile, SourceKind
from services.documents import DocumentTextService
from services.errors import ExtractionError, OCRUnavailableError
from services.image_utils import resize_image_for_processing
from services.ocr import OCRService, get_ocr_service
from services.parser import (
    RecipeParser,
    RecognizedSource,
    extract_from_multiple_sources,
    extract_from_single_source,
)
from services.vocabulary import ParserVocabulary

logger = logging.getLogger(__name__)

# OCRService serializes engine calls behind a lock
OCR_CONCURRENCY = 1


def decode_payload(payload: Union[bytes, str]) -> bytes:
    """
    Decode a batch payload: raw bytes pass through, text is base64
    (a "data:<mime>;base64," prefix is accepted).
    """
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    data = payload.strip()
    if data.startswith("data:"):
        data = data.split(",", 1)[1] if "," in data else ""
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ExtractionError(f"Invalid base64 payload: {exc}") from exc


def _default_ocr_factory() -> OCRService:
    return get_ocr_service(
        use_gpu=settings.OCR_USE_GPU,
        lang=settings.OCR_LANG,
        fallback_lang=settings.OCR_FALLBACK_LANG,
    )


class RecipeExtractionService:
    """Drives the providers and the parser for one or many uploaded files."""

    def __init__(
        self,
        ocr_factory: Optional[Callable[[], OCRService]] = None,
        document_service: Optional[DocumentTextService] = None,
        parser: Optional[RecipeParser] = None,
        timeout: float = settings.OCR_TIMEOUT_SECONDS,
        max_image_dimension: int = settings.IMAGE_MAX_DIMENSION,
        ocr_concurrency: int = OCR_CONCURRENCY,
    ):
        # OCR is created lazily so document-only batches never load the model
        self.ocr_factory = ocr_factory or _default_ocr_factory
        self.document_service = document_service or DocumentTextService(
            max_pages=settings.MAX_PDF_PAGES,
            min_page_chars=settings.MIN_PAGE_TEXT_CHARS,
        )
        self.parser = parser or RecipeParser()
        self.timeout = timeout
        self.max_image_dimension = max_image_dimension
        self.ocr_concurrency = ocr_concurrency

    def recognize_image(self, payload: Union[bytes, str]) -> Optional[OcrResult]:
        """Decode, bound the image size and run OCR (blocking)."""
        data = decode_payload(payload)
        image, metadata = resize_image_for_processing(BytesIO(data), max_dimension=self.max_image_dimension)
        logger.debug(f"Image prepared for OCR: {metadata}")
        return self.ocr_factory().recognize(image.getvalue())

    def recognize_file(self, source: SourceFile) -> RecognizedSource:
        """Run the provider selected by `source.kind` (blocking)."""
        if source.kind == SourceKind.DOCUMENT:
            pages = self.document_service.extract_pages(decode_payload(source.payload))
            return RecognizedSource(kind=source.kind, pages=list(pages), label=source.filename)

        result = self.recognize_image(source.payload)
        return RecognizedSource(
            kind=source.kind,
            pages=[result] if result is not None else [],
            label=source.filename,
        )

    async def _run_with_timeout(self, func, *args):
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(loop.run_in_executor(None, func, *args), timeout=self.timeout)

    async def _run_queued(self, slots: asyncio.Semaphore, func, *args):
        """
        Wait for a free OCR slot, then run with the timeout.

        The timeout starts once the slot is taken, so time spent queued behind
        other images does not count. The slot is released when the worker
        thread finishes, even after a timeout.
        """
        await slots.acquire()
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, func, *args)

        def _release(done: asyncio.Future) -> None:
            slots.release()
            if not done.cancelled():
                done.exception()

        future.add_done_callback(_release)
        return await asyncio.wait_for(asyncio.shield(future), timeout=self.timeout)

    async def analyze_image(self, payload: Union[bytes, str]) -> Optional[RecipeDraft]:
        """
        OCR one image and parse it.

        Returns:
            RecipeDraft, or None when OCR failed or recognized no text

        Raises:
            OCRUnavailableError: If no OCR provider can be loaded
        """
        try:
            result = await self._run_with_timeout(self.recognize_image, payload)
        except OCRUnavailableError:
            raise
        except asyncio.TimeoutError:
            logger.error(f"OCR timeout after {self.timeout}s")
            return None
        except ExtractionError as e:
            logger.error(f"Image analysis failed: {e}")
            return None

        return extract_from_single_source(result, self.parser)

    async def _recognize_safely(
        self, index: int, source: SourceFile, ocr_slots: asyncio.Semaphore
    ) -> Optional[RecognizedSource]:
        label = source.filename or f"#{index}"
        try:
            if source.kind == SourceKind.IMAGE:
                return await self._run_queued(ocr_slots, self.recognize_file, source)
            return await self._run_with_timeout(self.recognize_file, source)
        except asyncio.TimeoutError:
            logger.error(f"Batch item {label} timed out after {self.timeout}s")
        except ExtractionError as e:
            logger.error(f"Batch item {label} failed: {e}")
        except Exception as e:
            logger.error(f"Batch item {label} failed unexpectedly: {e}", exc_info=True)
        return None

    async def analyze_files(self, files: Sequence[SourceFile]) -> List[RecipeDraft]:
        """
        Analyze documents and images concurrently.

        Failed items are logged and dropped; drafts keep input file order and,
        within a document, page order.
        """
        ocr_slots = asyncio.Semaphore(self.ocr_concurrency)
        recognized = await asyncio.gather(
            *(self._recognize_safely(index, source, ocr_slots) for index, source in enumerate(files))
        )
        drafts = extract_from_multiple_sources(recognized, self.parser)
        failed = sum(1 for item in recognized if item is None)
        logger.info(f"Batch of {len(files)} files produced {len(drafts)} drafts ({failed} failed)")
        return drafts


def build_recipe_parser() -> RecipeParser:
    return RecipeParser(
        vocabulary=ParserVocabulary.from_settings(settings),
        placeholder_title=settings.PLACEHOLDER_TITLE,
        default_category=settings.DEFAULT_CATEGORY,
    )


@lru_cache(maxsize=1)
def get_extraction_service() -> RecipeExtractionService:
    """Factory function to get the shared extraction service."""
    return RecipeExtractionService(parser=build_recipe_parser())
