"""
Page access for the validator.

The rule engine only sees PageSource and PdfPage. Two sources exist: one
materializes every page before checks run, the other loads pages one at a
time and tolerates pages that fail to load. Both read structure with pypdf
and character positions with MuPDF.
"""

import logging
import re
from abc import ABC, abstractmethod
from functools import partial
from typing import BinaryIO, Callable, Iterator, Optional

import fitz  # PyMuPDF
from pypdf import PageObject, PdfReader
from pypdf.generic import ArrayObject, NullObject, StreamObject

from .fonts import FontInfo, get_page_fonts
from .geometry import SilentZone
from .settings import ReaderConfig, ReadStrategy
from .text import extract_text_in_area

logger = logging.getLogger(__name__)

# Readers accept leading junk before the header within this many bytes
HEADER_SEARCH_SIZE = 1024

_VERSION_RE = re.compile(rb"%PDF-(\d+\.\d+)")


class PdfAccessError(Exception):
    """Raised when part of a PDF cannot be read."""
    pass


class PageGeometryError(PdfAccessError):
    """Raised when a page's crop box cannot be determined."""

    def __init__(self, message: str, page_number: int):
        super().__init__(message)
        self.page_number = page_number


class PdfPage(ABC):
    """One page, as seen by the page checks."""

    number: int

    @abstractmethod
    def crop_box_size(self) -> tuple[float, float]:
        """(width, height) of the crop box in points. Raises PageGeometryError."""
        pass

    @abstractmethod
    def fonts(self) -> list[FontInfo]:
        """Fonts referenced by the page's resources."""
        pass

    @abstractmethod
    def text_in_area(self, area: SilentZone) -> str:
        """Text positioned inside area."""
        pass


class PageSource(ABC):
    """A parsed document whose pages can be walked once."""

    @property
    @abstractmethod
    def is_encrypted(self) -> bool:
        pass

    @property
    @abstractmethod
    def page_count(self) -> int:
        pass

    @property
    @abstractmethod
    def pdf_version(self) -> Optional[str]:
        """Declared version such as "1.4", or None if the header is unreadable."""
        pass

    @abstractmethod
    def pages(self) -> Iterator[Optional[PdfPage]]:
        """
        Yield pages in order.

        None stands for a page that could not be loaded.
        """
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


# =============================================================================
# pypdf implementations
# =============================================================================

def _check_contents(page: PageObject, number: int) -> None:
    """Raise PdfAccessError unless /Contents is absent, a stream or an array of streams."""
    contents = page.get("/Contents")
    if contents is None:
        return
    contents = contents.get_object()
    if isinstance(contents, NullObject):
        return
    parts = contents if isinstance(contents, ArrayObject) else [contents]
    for part in parts:
        if not isinstance(part.get_object(), StreamObject):
            raise PdfAccessError(f"Page {number} has a content entry that is not a stream")


class PypdfPage(PdfPage):
    def __init__(self, page: PageObject, number: int, layout: Callable[[], fitz.Page]):
        self._page = page
        self.number = number
        self._layout = layout
        self._fonts: Optional[list[FontInfo]] = None

    def load(self) -> "PypdfPage":
        """Resolve resources and content streams, raising if they are broken."""
        self._fonts = get_page_fonts(self._page)
        _check_contents(self._page, self.number)
        self._page.get_contents()
        return self

    def crop_box_size(self) -> tuple[float, float]:
        try:
            crop_box = self._page.cropbox
            return float(crop_box.width), float(crop_box.height)
        except (KeyError, TypeError, ValueError) as e:
            raise PageGeometryError(f"No usable crop box on page {self.number}: {e}", self.number) from e

    def fonts(self) -> list[FontInfo]:
        if self._fonts is None:
            self._fonts = get_page_fonts(self._page)
        return self._fonts

    def text_in_area(self, area: SilentZone) -> str:
        self.crop_box_size()
        return extract_text_in_area(self._layout(), area)


class _PypdfSource(PageSource):
    """
    pypdf reads structure, fonts and boxes; MuPDF is opened on first use
    for character positions.
    """

    def __init__(self, stream: BinaryIO, config: ReaderConfig):
        self._stream = stream
        self._config = config
        self._reader: Optional[PdfReader] = PdfReader(stream, strict=config.strict)
        self._layout: Optional[fitz.Document] = None

    @property
    def is_encrypted(self) -> bool:
        return self._reader.is_encrypted

    @property
    def page_count(self) -> int:
        return len(self._reader.pages)

    @property
    def pdf_version(self) -> Optional[str]:
        """Version from the first %PDF- marker within the leading HEADER_SEARCH_SIZE bytes."""
        position = self._stream.tell()
        try:
            self._stream.seek(0)
            head = self._stream.read(HEADER_SEARCH_SIZE)
        finally:
            self._stream.seek(position)
        match = _VERSION_RE.search(head)
        return match.group(1).decode("ascii") if match else None

    def _page(self, index: int) -> PypdfPage:
        return PypdfPage(self._reader.pages[index], index + 1, partial(self._layout_page, index))

    def _layout_page(self, index: int) -> fitz.Page:
        if self._layout is None:
            position = self._stream.tell()
            try:
                self._stream.seek(0)
                data = self._stream.read()
            finally:
                self._stream.seek(position)
            self._layout = fitz.open(stream=data, filetype="pdf")
        return self._layout[index]

    def close(self) -> None:
        if self._layout is not None:
            self._layout.close()
            self._layout = None
        if self._reader is not None:
            self._reader.resolved_objects.clear()
            self._reader = None


class InMemoryPageSource(_PypdfSource):
    """Loads every page before yielding any; a broken page fails the document."""

    def pages(self) -> Iterator[Optional[PdfPage]]:
        loaded = [self._page(index).load() for index in range(self.page_count)]
        yield from loaded


class IncrementalPageSource(_PypdfSource):
    """
    Loads one page at a time.

    Resolved objects are dropped every release_interval pages to bound
    memory use on large documents.
    """

    def _release_resolved_objects(self) -> None:
        released = len(self._reader.resolved_objects)
        self._reader.resolved_objects.clear()
        logger.debug(f"Released {released} resolved PDF objects")

    def pages(self) -> Iterator[Optional[PdfPage]]:
        for index in range(self.page_count):
            number = index + 1
            if number % self._config.release_interval == 0:
                self._release_resolved_objects()
            try:
                page = self._page(index).load()
            except Exception as e:
                logger.warning(f"Could not read page {number} of the PDF ({type(e).__name__}: {e})")
                yield None
                continue
            yield page


SOURCE_TYPES = {
    ReadStrategy.IN_MEMORY: InMemoryPageSource,
    ReadStrategy.INCREMENTAL: IncrementalPageSource,
}


def open_page_source(
    stream: BinaryIO,
    strategy: ReadStrategy = ReadStrategy.IN_MEMORY,
    config: Optional[ReaderConfig] = None
) -> PageSource:
    """
    Parse a PDF from stream.

    The caller keeps ownership of stream and must keep it open until the
    source is closed.
    """
    if config is None:
        config = ReaderConfig()
    return SOURCE_TYPES[strategy](stream, config)
