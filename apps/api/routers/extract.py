"""
Extraction router: turn uploaded recipe photos, PDFs, raw text or OCR output
into recipe drafts for review.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from error_handler import APIError
from models import OcrResult, RecipeDraft, SourceFile, SourceKind
from services.errors import OCRUnavailableError
from services.extraction import RecipeExtractionService, get_extraction_service
from services.parser import extract_from_single_source

logger = logging.getLogger(__name__)
router = APIRouter()

PDF_CONTENT_TYPE = "application/pdf"


class TextExtractionRequest(BaseModel):
    """Plain text, e.g. copied from a web page or a PDF text layer."""

    text: str


def _source_kind(upload: UploadFile) -> Optional[SourceKind]:
    content_type = (upload.content_type or "").lower()
    if content_type == PDF_CONTENT_TYPE:
        return SourceKind.DOCUMENT
    if content_type.startswith("image/"):
        return SourceKind.IMAGE
    return None


@router.post("/image", response_model=RecipeDraft)
async def extract_image(
    file: UploadFile = File(...),
    service: RecipeExtractionService = Depends(get_extraction_service),
) -> RecipeDraft:
    """
    Scan a single recipe photo.
    Returns:
        RecipeDraft; 422 when no text could be recognized
    """
    if not (file.content_type or "").lower().startswith("image/"):
        raise APIError.handle_validation_error(
            "image scan", ValueError("Invalid file type. Use an image (JPEG/PNG).")
        )

    APIError.log_operation_start("image scan", {"upload": file.filename})
    content = await file.read()
    try:
        draft = await service.analyze_image(content)
    except OCRUnavailableError as e:
        raise APIError.handle_unavailable_error("OCR", e)
    except Exception as e:
        raise APIError.handle_generic_error("image scan", e, {"upload": file.filename})

    if draft is None:
        raise APIError.handle_no_text_error(file.filename or "image")

    APIError.log_operation_success(
        "image scan",
        {"ingredients": len(draft.ingredients), "steps": len(draft.steps)},
    )
    return draft


@router.post("/batch", response_model=List[RecipeDraft])
async def extract_batch(
    files: List[UploadFile] = File(...),
    service: RecipeExtractionService = Depends(get_extraction_service),
) -> List[RecipeDraft]:
    """
    Scan several photos and PDFs at once.
    Each PDF page becomes its own draft; files that fail or are neither
    images nor PDFs are skipped.
    """
    sources = []
    for upload in files:
        kind = _source_kind(upload)
        if kind is None:
            logger.warning(f"Skipping {upload.filename}: unsupported file type '{upload.content_type}'")
            continue
        sources.append(SourceFile(kind=kind, payload=await upload.read(), filename=upload.filename))

    if not sources:
        raise APIError.handle_validation_error(
            "batch scan", ValueError("No supported files. Use images or PDF.")
        )

    APIError.log_operation_start("batch scan", {"files": len(sources)})
    drafts = await service.analyze_files(sources)
    APIError.log_operation_success("batch scan", {"drafts": len(drafts)})
    return drafts


@router.post("/text", response_model=RecipeDraft)
def extract_text(
    request: TextExtractionRequest,
    service: RecipeExtractionService = Depends(get_extraction_service),
) -> RecipeDraft:
    """Parse plain text (no emphasis information)."""
    draft = extract_from_single_source(request.text, service.parser)
    if draft is None:
        raise APIError.handle_no_text_error("text body")
    return draft


@router.post("/ocr", response_model=RecipeDraft)
def extract_ocr_result(
    result: OcrResult,
    service: RecipeExtractionService = Depends(get_extraction_service),
) -> RecipeDraft:
    """
    Parse output from an external OCR provider.
    Word-level font metadata (bold flags, weights, font names) drives the
    amount/name split of ingredient lines.
    """
    draft = extract_from_single_source(result, service.parser)
    if draft is None:
        raise APIError.handle_no_text_error("OCR result")
    return draft
