"""
Document validation for automated print.

Checks encryption, page count, PDF version, page dimensions, the barcode
silent zone in the left margin and font embedding, and collects the
findings into a ValidationResult.
"""

import logging
import os
from io import BytesIO
from typing import BinaryIO, Optional, Union

from pypdf.errors import FileNotDecryptedError, WrongPasswordError

from .errors import PDF_VERSIONS_SUPPORTED_FOR_PRINT, PdfValidationError
from .fonts import find_unsupported_fonts
from .geometry import A4_HEIGHT_MM, A4_WIDTH_MM, SilentZone, is_valid_a4, points_to_mm
from .pages import PageGeometryError, PageSource, PdfPage, open_page_source
from .result import ValidationResult
from .settings import CHECK_ALL, Bleed, ReaderConfig, ReadStrategy, ValidationSettings

logger = logging.getLogger(__name__)


# =============================================================================
# Page checks
# =============================================================================

def has_invalid_dimensions(page: PdfPage, bleed: Bleed) -> bool:
    """
    True if the page's crop box is neither portrait nor landscape A4.

    A page whose crop box cannot be read counts as invalid.
    """
    try:
        width_pt, height_pt = page.crop_box_size()
    except PageGeometryError as e:
        logger.info(f"Could not determine the dimensions of page {page.number}: {e}")
        return True

    width_mm = points_to_mm(width_pt)
    height_mm = points_to_mm(height_pt)
    if is_valid_a4(width_mm, height_mm, bleed):
        return False

    logger.info(
        f"Page {page.number} has invalid dimensions. Valid dimensions are width {A4_WIDTH_MM} mm and "
        f"height {A4_HEIGHT_MM} mm, or width {A4_HEIGHT_MM} mm and height {A4_WIDTH_MM} mm, with "
        f"{bleed.negative_mm} mm lower and {bleed.positive_mm} mm upper flexibility. "
        f"Actual dimensions are width {width_mm} mm and height {height_mm} mm."
    )
    return True


def has_text_in_barcode_area(page: PdfPage, bleed: Bleed) -> bool:
    """
    True if any text is placed in the page's barcode silent zone.

    Raises PageGeometryError when the zone cannot be computed, which is
    not the same as the zone being empty.
    """
    width_pt, height_pt = page.crop_box_size()
    zone = SilentZone.for_page(width_pt, height_pt, bleed)
    text = page.text_in_area(zone)
    return bool(text and text.strip())


def unsupported_page_fonts(page: PdfPage) -> list:
    return find_unsupported_fonts(page.fonts())


# =============================================================================
# Document validation
# =============================================================================

class PdfValidator:
    """
    Validates PDF documents for automated print.

    Holds only its reader configuration, so one instance can be shared
    between threads.
    """

    def __init__(self, reader_config: Optional[ReaderConfig] = None):
        self.reader_config = reader_config or ReaderConfig()

    def validate_bytes(
        self,
        data: bytes,
        settings: ValidationSettings = CHECK_ALL,
        strategy: ReadStrategy = ReadStrategy.IN_MEMORY
    ) -> ValidationResult:
        """
        Validate PDF content held in memory.

        Args:
            data: Raw PDF bytes
            settings: Which checks to run
            strategy: How pages are read

        Returns:
            ValidationResult; never raises for malformed content
        """
        with BytesIO(data) as stream:
            return self.validate_stream(stream, settings, strategy)

    def validate_file(
        self,
        path: Union[str, os.PathLike],
        settings: ValidationSettings = CHECK_ALL,
        strategy: ReadStrategy = ReadStrategy.IN_MEMORY
    ) -> ValidationResult:
        """
        Validate a PDF file.

        Raises OSError if the file cannot be opened or read.
        """
        with open(path, "rb") as stream:
            return self.validate_stream(stream, settings, strategy)

    def validate_stream(
        self,
        stream: BinaryIO,
        settings: ValidationSettings = CHECK_ALL,
        strategy: ReadStrategy = ReadStrategy.IN_MEMORY
    ) -> ValidationResult:
        """Validate a PDF from a seekable binary stream. The stream is not closed."""
        page_count = -1
        try:
            with open_page_source(stream, strategy, self.reader_config) as source:
                if source.is_encrypted:
                    page_count = self._encrypted_page_count(source)
                    errors = self._fail_encrypted()
                else:
                    page_count = source.page_count
                    errors = self.validate_document(source, settings)
        except (FileNotDecryptedError, WrongPasswordError):
            errors = self._fail_encrypted()
        except Exception as e:
            page_count = -1
            errors = [PdfValidationError.PDF_PARSE_ERROR]
            logger.info(f"PDF could not be parsed. ({type(e).__name__}: '{e}')")
            logger.debug(str(e), exc_info=True)

        return ValidationResult(tuple(errors), page_count, settings.bleed)

    def validate_document(self, source: PageSource, settings: ValidationSettings) -> list[PdfValidationError]:
        """Run all enabled checks on an opened document and return errors in report order."""
        if source.is_encrypted:
            return self._fail_encrypted()

        errors = []

        if settings.check_page_count:
            errors.extend(self._check_page_count(source.page_count, settings.max_page_count))

        if settings.check_pdf_version:
            errors.extend(self._check_pdf_version(source.pdf_version))

        invalid_dimensions = False
        unparseable_pages = False
        unverifiable_margin = False
        text_in_barcode_area = False
        unsupported_fonts = []

        for page in source.pages():
            if page is None:
                unparseable_pages = True
                continue

            if not invalid_dimensions and has_invalid_dimensions(page, settings.bleed):
                invalid_dimensions = True

            if settings.check_left_margin and not text_in_barcode_area:
                try:
                    text_in_barcode_area = has_text_in_barcode_area(page, settings.bleed)
                except PageGeometryError:
                    unverifiable_margin = True
                    logger.info(f"Could not verify the margin on page {page.number}")

            if settings.check_fonts:
                unsupported_fonts.extend(unsupported_page_fonts(page))

        if invalid_dimensions:
            errors.append(PdfValidationError.UNSUPPORTED_DIMENSIONS)
        if unparseable_pages:
            errors.append(PdfValidationError.PDF_PARSE_PAGE_ERROR)
        if unverifiable_margin:
            errors.append(PdfValidationError.UNABLE_TO_VERIFY_SUITABLE_MARGIN_FOR_PRINT)
        if text_in_barcode_area:
            errors.append(PdfValidationError.INSUFFICIENT_MARGIN_FOR_PRINT)
        if unsupported_fonts:
            errors.append(PdfValidationError.REFERENCES_INVALID_FONT)
            described = ", ".join(font.describe() for font in unsupported_fonts)
            logger.info(f"The PDF has references to invalid fonts: [{described}]")

        return errors

    def _encrypted_page_count(self, source: PageSource) -> int:
        """Page count of an encrypted document, or -1 when it needs a password to read."""
        try:
            return source.page_count
        except Exception as e:
            logger.debug(f"Page count of encrypted PDF unavailable ({type(e).__name__}: {e})")
            return -1

    def _fail_encrypted(self) -> list[PdfValidationError]:
        logger.info("The PDF is encrypted.")
        return [PdfValidationError.PDF_IS_ENCRYPTED]

    def _check_page_count(self, page_count: int, max_pages: int) -> list[PdfValidationError]:
        errors = []
        if page_count > max_pages:
            errors.append(PdfValidationError.TOO_MANY_PAGES_FOR_AUTOMATED_PRINT)
            logger.info(
                f"The PDF has too many pages. Max number of pages is {max_pages}. "
                f"Actual number of pages is {page_count}"
            )
        if page_count == 0:
            errors.append(PdfValidationError.DOCUMENT_HAS_NO_PAGES)
            logger.info("The PDF document does not contain any pages. The file may be corrupt.")
        return errors

    def _check_pdf_version(self, version: Optional[str]) -> list[PdfValidationError]:
        if version in PDF_VERSIONS_SUPPORTED_FOR_PRINT:
            return []
        logger.info(
            f"The PDF is not in a valid version. Valid versions are "
            f"{', '.join(PDF_VERSIONS_SUPPORTED_FOR_PRINT)}. Actual version is {version}"
        )
        return [PdfValidationError.UNSUPPORTED_PDF_VERSION_FOR_PRINT]


def validate_pdf(
    data: bytes,
    settings: ValidationSettings = CHECK_ALL,
    strategy: ReadStrategy = ReadStrategy.IN_MEMORY
) -> ValidationResult:
    """Validate PDF bytes with a default validator."""
    return PdfValidator().validate_bytes(data, settings, strategy)
