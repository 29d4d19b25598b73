"""
Outcome of validating one PDF document.
"""

from dataclasses import dataclass

from .errors import OK_FOR_PRINT, OK_FOR_WEB, PdfValidationError
from .settings import DEFAULT_BLEED, Bleed


@dataclass(frozen=True)
class ValidationResult:
    """
    Errors found in a document, in the order the checks ran.

    pages is -1 when the document could not be parsed at all. The bleed is
    the one the checks used, and is needed to format the dimension message.
    """

    errors: tuple = ()
    pages: int = -1
    bleed: Bleed = DEFAULT_BLEED

    def __post_init__(self):
        # Keep first occurrence of each kind
        object.__setattr__(self, "errors", tuple(dict.fromkeys(self.errors)))

    @property
    def ok_for_print(self) -> bool:
        return all(error in OK_FOR_PRINT for error in self.errors)

    @property
    def ok_for_web(self) -> bool:
        return all(error in OK_FOR_WEB for error in self.errors)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def formatted_message(self, error: PdfValidationError) -> str:
        return error.format_message(self.bleed)

    def messages(self) -> list[str]:
        return [self.formatted_message(error) for error in self.errors]

    def to_dict(self) -> dict:
        """Return result as dict for API responses."""
        return {
            "errors": [
                {"code": error.code, "message": self.formatted_message(error)}
                for error in self.errors
            ],
            "pages": self.pages,
            "ok_for_print": self.ok_for_print,
            "ok_for_web": self.ok_for_web,
            "bleed": {
                "positive_mm": self.bleed.positive_mm,
                "negative_mm": self.bleed.negative_mm,
            },
        }

    def __str__(self) -> str:
        parts = [type(self).__name__] + self.messages()
        return "[" + " ".join(parts) + "]"


EVERYTHING_OK = ValidationResult()
