"""
Image processing utilities for RecipeScan.
Handles resizing and optimization before OCR.
"""
import logging
from io import BytesIO
from typing import Tuple

from PIL import Image

logger = logging.getLogger(__name__)

# Configuration - these values balance quality with memory usage
MAX_DIMENSION = 2048  # Max width or height in pixels
JPEG_QUALITY = 85     # JPEG quality (1-100)


def resize_image_for_processing(
    file_bytes: BytesIO,
    max_dimension: int = MAX_DIMENSION,
    quality: int = JPEG_QUALITY,
) -> Tuple[BytesIO, dict]:
    """
    Resize image to reduce memory usage while retaining detail for OCR.

    Args:
        file_bytes: Input image as BytesIO
        max_dimension: Maximum width or height in pixels
        quality: JPEG quality (1-100)

    Returns:
        Tuple of (processed BytesIO, metadata dict)
        Metadata includes: original_size, new_size, was_resized
    """
    file_bytes.seek(0)

    try:
        img = Image.open(file_bytes)
        original_size = img.size

        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")

        # thumbnail keeps aspect ratio and only ever shrinks
        img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
        was_resized = img.size != original_size
        if was_resized:
            logger.info(f"Resized image from {original_size} to {img.size}")

        output = BytesIO()
        img.save(output, format="JPEG", quality=quality, optimize=True)
        output.seek(0)

        return output, {
            "original_size": original_size,
            "new_size": img.size,
            "was_resized": was_resized,
        }

    except Exception as e:
        logger.error(f"Image resize failed: {e}")
        # Return original on failure; the OCR provider decides whether it can read it
        file_bytes.seek(0)
        return file_bytes, {
            "error": str(e),
            "was_resized": False,
        }
