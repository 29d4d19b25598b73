"""
Settings for print validation.

Settings are immutable and passed into every validation call; the validator
itself keeps no state between calls.
"""

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_MAX_PAGES_FOR_AUTOMATED_PRINT = 14
DEFAULT_POSITIVE_BLEED_MM = 0
DEFAULT_NEGATIVE_BLEED_MM = 10

# Incremental reading drops resolved objects every this many pages
DEFAULT_RELEASE_INTERVAL = 5


@dataclass(frozen=True)
class Bleed:
    """
    Tolerance in millimeters around the nominal A4 size.

    positive_mm widens the upper size bound, negative_mm the lower one.
    """

    positive_mm: int = DEFAULT_POSITIVE_BLEED_MM
    negative_mm: int = DEFAULT_NEGATIVE_BLEED_MM

    def __post_init__(self):
        if self.positive_mm < 0 or self.negative_mm < 0:
            raise ValueError(
                f"Bleed must be non-negative (got positive={self.positive_mm}, negative={self.negative_mm})"
            )


DEFAULT_BLEED = Bleed()


@dataclass(frozen=True)
class ValidationSettings:
    """Which checks to run, and the limits they use."""

    check_left_margin: bool = True
    check_fonts: bool = True
    check_page_count: bool = True
    check_pdf_version: bool = True
    max_page_count: int = DEFAULT_MAX_PAGES_FOR_AUTOMATED_PRINT
    bleed: Bleed = field(default_factory=Bleed)


CHECK_ALL = ValidationSettings()


class ReadStrategy(Enum):
    IN_MEMORY = "in_memory"
    INCREMENTAL = "incremental"


@dataclass(frozen=True)
class ReaderConfig:
    """
    How the PDF library is driven.

    Set once when the validator is constructed.
    """

    strict: bool = False
    release_interval: int = DEFAULT_RELEASE_INTERVAL

    def __post_init__(self):
        if self.release_interval < 1:
            raise ValueError(f"release_interval must be at least 1 (got {self.release_interval})")
