from .document import PdfValidator, validate_pdf
from .errors import PdfValidationError
from .result import EVERYTHING_OK, ValidationResult
from .settings import CHECK_ALL, Bleed, ReaderConfig, ReadStrategy, ValidationSettings

__all__ = [
    "PdfValidator",
    "validate_pdf",
    "PdfValidationError",
    "ValidationResult",
    "EVERYTHING_OK",
    "ValidationSettings",
    "Bleed",
    "CHECK_ALL",
    "ReadStrategy",
    "ReaderConfig",
]
