"""
Document text-layer extraction with PyMuPDF.
Returns one plain string per page; no layout or weight metadata is kept.
"""
import logging
from typing import List

import pymupdf

from services.errors import DocumentError

logger = logging.getLogger(__name__)

MAX_PDF_PAGES = 20
MIN_PAGE_TEXT_CHARS = 50


class DocumentTextService:
    """Reads the text layer of PDF pages."""

    def __init__(self, max_pages: int = MAX_PDF_PAGES, min_page_chars: int = MIN_PAGE_TEXT_CHARS):
        self.max_pages = max_pages
        self.min_page_chars = min_page_chars

    def extract_pages(self, data: bytes) -> List[str]:
        """
        Extract text of up to `max_pages` pages.

        Pages with too little text (scanned pages without a text layer) are
        dropped. A page that fails to extract is logged and skipped.

        Args:
            data: Raw PDF bytes

        Returns:
            Page texts in page order

        Raises:
            DocumentError: If the document cannot be opened
        """
        try:
            doc = pymupdf.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentError(f"Could not open document: {e}") from e

        pages: List[str] = []
        try:
            page_count = min(doc.page_count, self.max_pages)
            if doc.page_count > self.max_pages:
                logger.info(f"Document has {doc.page_count} pages; reading the first {self.max_pages}")

            for index in range(page_count):
                try:
                    text = doc[index].get_text()
                except Exception as e:
                    logger.warning(f"Text extraction failed on page {index + 1}: {e}")
                    continue

                if len(text.strip()) <= self.min_page_chars:
                    logger.debug(f"Skipping page {index + 1}: no usable text layer")
                    continue
                pages.append(text)
        finally:
            doc.close()

        logger.info(f"Extracted text from {len(pages)} of {page_count} pages")
        return pages
