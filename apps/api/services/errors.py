"""
Upstream failures raised by the OCR and document providers.
Content problems never raise; only provider boundaries do.
"""


class ExtractionError(Exception):
    """Base class for failures outside the parsing core."""


class OCRError(ExtractionError):
    """OCR provider failed on an image."""


class OCRUnavailableError(OCRError):
    """OCR provider is not installed or could not be initialised."""


class DocumentError(ExtractionError):
    """Document could not be opened or read."""
