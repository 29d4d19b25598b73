"""
Validation error kinds reported for a PDF document.

Each kind maps to a fixed English message. Only the dimension message is
parameterized, by the bleed-adjusted A4 bounds.
"""

from enum import Enum

from .geometry import BARCODE_AREA_WIDTH_MM, a4_bounds
from .settings import DEFAULT_BLEED, Bleed

PDF_VERSIONS_SUPPORTED_FOR_PRINT = ("1.0", "1.1", "1.2", "1.3", "1.4", "1.5", "1.6", "1.7")


class PdfValidationError(Enum):
    PDF_IS_ENCRYPTED = "PDF_IS_ENCRYPTED"
    TOO_MANY_PAGES_FOR_AUTOMATED_PRINT = "TOO_MANY_PAGES_FOR_AUTOMATED_PRINT"
    UNSUPPORTED_PDF_VERSION_FOR_PRINT = "UNSUPPORTED_PDF_VERSION_FOR_PRINT"
    INSUFFICIENT_MARGIN_FOR_PRINT = "INSUFFICIENT_MARGIN_FOR_PRINT"
    UNABLE_TO_VERIFY_SUITABLE_MARGIN_FOR_PRINT = "UNABLE_TO_VERIFY_SUITABLE_MARGIN_FOR_PRINT"
    PDF_PARSE_ERROR = "PDF_PARSE_ERROR"
    PDF_PARSE_PAGE_ERROR = "PDF_PARSE_PAGE_ERROR"
    UNSUPPORTED_DIMENSIONS = "UNSUPPORTED_DIMENSIONS"
    REFERENCES_INVALID_FONT = "REFERENCES_INVALID_FONT"
    DOCUMENT_TOO_SMALL = "DOCUMENT_TOO_SMALL"
    INVALID_PDF = "INVALID_PDF"
    DOCUMENT_HAS_NO_PAGES = "DOCUMENT_HAS_NO_PAGES"

    @property
    def code(self) -> str:
        return self.value

    @property
    def message(self) -> str:
        """Message template; use format_message() for the final text."""
        return MESSAGES[self]

    @property
    def ok_for_print(self) -> bool:
        return self in OK_FOR_PRINT

    @property
    def ok_for_web(self) -> bool:
        return self in OK_FOR_WEB

    def format_message(self, bleed: Bleed = DEFAULT_BLEED) -> str:
        if self is PdfValidationError.UNSUPPORTED_DIMENSIONS:
            bounds = a4_bounds(bleed)
            return self.message.format(
                min_width=bounds.min_width,
                max_width=bounds.max_width,
                min_height=bounds.min_height,
                max_height=bounds.max_height,
            )
        return self.message

    def __str__(self) -> str:
        return self.format_message()


MESSAGES = {
    PdfValidationError.PDF_IS_ENCRYPTED: "The PDF document is encrypted.",
    PdfValidationError.TOO_MANY_PAGES_FOR_AUTOMATED_PRINT: "The PDF document contains too many pages.",
    PdfValidationError.UNSUPPORTED_PDF_VERSION_FOR_PRINT: (
        "The version of the PDF document is not supported. Supported versions are "
        f"{', '.join(PDF_VERSIONS_SUPPORTED_FOR_PRINT)}."
    ),
    PdfValidationError.INSUFFICIENT_MARGIN_FOR_PRINT: (
        f"The left margin of the PDF document is too narrow. Minimum left margin is {BARCODE_AREA_WIDTH_MM} mm."
    ),
    PdfValidationError.UNABLE_TO_VERIFY_SUITABLE_MARGIN_FOR_PRINT: (
        f"Could not verify the left margin of the PDF document. Minimum left margin is {BARCODE_AREA_WIDTH_MM} mm."
    ),
    PdfValidationError.PDF_PARSE_ERROR: "Could not parse the PDF document.",
    PdfValidationError.PDF_PARSE_PAGE_ERROR: "Could not parse at least one of the pages in the PDF document.",
    PdfValidationError.UNSUPPORTED_DIMENSIONS: (
        "The dimensions of the PDF document are not supported. Supported dimensions are width between "
        "{min_width}—{max_width} mm and height between {min_height}—{max_height} mm. "
        "If these limits should be changed, contact support."
    ),
    PdfValidationError.REFERENCES_INVALID_FONT: (
        "The document refers to a non-standard font that is not included in the PDF."
    ),
    PdfValidationError.DOCUMENT_TOO_SMALL: "The PDF document size is too small.",
    PdfValidationError.INVALID_PDF: "The PDF document is invalid.",
    PdfValidationError.DOCUMENT_HAS_NO_PAGES: "The PDF document does not contain any pages. The file may be corrupt.",
}

# No single error is acceptable for print
OK_FOR_PRINT = frozenset()

OK_FOR_WEB = frozenset({
    PdfValidationError.PDF_IS_ENCRYPTED,
    PdfValidationError.TOO_MANY_PAGES_FOR_AUTOMATED_PRINT,
    PdfValidationError.UNSUPPORTED_PDF_VERSION_FOR_PRINT,
    PdfValidationError.INSUFFICIENT_MARGIN_FOR_PRINT,
    PdfValidationError.UNABLE_TO_VERIFY_SUITABLE_MARGIN_FOR_PRINT,
    PdfValidationError.UNSUPPORTED_DIMENSIONS,
    PdfValidationError.PDF_PARSE_PAGE_ERROR,
})
