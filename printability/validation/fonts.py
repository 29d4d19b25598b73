"""
Font acceptability for print.

A font is acceptable when the document embeds its program, or when it is one
of the standard PDF base fonts (or whitelisted) so the print line can
substitute it.
"""

import re
from dataclasses import dataclass
from typing import Optional

from pypdf import PageObject
from pypdf.generic import ArrayObject, DictionaryObject, NullObject, StreamObject

# Standard 14 fonts: Times, Courier and Helvetica in four styles each,
# Symbol and Zapf Dingbats
STANDARD_14_FONTS = frozenset({"TIMES", "COURIER", "HELVETICA", "SYMBOL", "ZAPFDINGBATS"})

WHITE_LISTED_FONTS = frozenset({"ARIAL"})

SUPPORTED_FONTS = STANDARD_14_FONTS | WHITE_LISTED_FONTS

FONT_FILE_KEYS = ("/FontFile", "/FontFile2", "/FontFile3")

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class FontDescriptorInfo:
    font_name: Optional[str] = None
    has_font_file: bool = False
    has_font_file2: bool = False
    has_font_file3: bool = False

    @property
    def embedded(self) -> bool:
        return self.has_font_file or self.has_font_file2 or self.has_font_file3


@dataclass(frozen=True)
class FontInfo:
    """What the print check needs to know about one font resource."""

    name: Optional[str] = None
    subtype: Optional[str] = None
    damaged: bool = False
    descriptor: Optional[FontDescriptorInfo] = None
    # Type0 fonts carry their glyphs in descendant fonts
    composite: bool = False

    def describe(self) -> str:
        return f"{self.subtype} '{self.name}'"


def normalize_font_name(name: str) -> str:
    return _WHITESPACE.sub("", name.replace("-", "")).upper()


def is_supported_font_name(name: Optional[str]) -> bool:
    """True if the name contains one of the supported font names."""
    if name is None:
        return False
    normalized = normalize_font_name(name)
    return any(supported in normalized for supported in SUPPORTED_FONTS)


def is_supported_font(font: FontInfo) -> bool:
    if font.damaged:
        return False

    if font.descriptor is not None:
        if font.descriptor.embedded:
            return True
        return is_supported_font_name(font.descriptor.font_name)

    if font.composite:
        return True
    return is_supported_font_name(font.name)


def find_unsupported_fonts(fonts) -> list[FontInfo]:
    return [font for font in fonts if not is_supported_font(font)]


# =============================================================================
# Reading fonts from pypdf resources
# =============================================================================

def _name(value) -> Optional[str]:
    if value is not None:
        value = value.get_object()
    if value is None or isinstance(value, NullObject):
        return None
    value = str(value)
    return value[1:] if value.startswith("/") else value


def _read_descriptor(descriptor) -> tuple[Optional[FontDescriptorInfo], bool]:
    """Returns (descriptor, damaged)."""
    if descriptor is None:
        return None, False
    descriptor = descriptor.get_object()
    if not isinstance(descriptor, DictionaryObject):
        return None, True

    present = {}
    for key in FONT_FILE_KEYS:
        font_file = descriptor.get(key)
        if font_file is None:
            present[key] = False
            continue
        if not isinstance(font_file.get_object(), StreamObject):
            # Declared font program that cannot be read
            return None, True
        present[key] = True

    info = FontDescriptorInfo(
        font_name=_name(descriptor.get("/FontName")),
        has_font_file=present["/FontFile"],
        has_font_file2=present["/FontFile2"],
        has_font_file3=present["/FontFile3"],
    )
    return info, False


def read_font(reference) -> FontInfo:
    """Build a FontInfo from a font dictionary (or a reference to one)."""
    font = reference.get_object() if reference is not None else None
    if not isinstance(font, DictionaryObject):
        return FontInfo(damaged=True)

    subtype = _name(font.get("/Subtype"))
    name = _name(font.get("/BaseFont"))
    composite = subtype == "Type0"

    descriptor_ref = font.get("/FontDescriptor")
    if composite:
        descendants = font.get("/DescendantFonts")
        descendants = descendants.get_object() if descendants is not None else None
        if isinstance(descendants, ArrayObject) and len(descendants) > 0:
            descendant = descendants[0].get_object()
            if isinstance(descendant, DictionaryObject):
                descriptor_ref = descendant.get("/FontDescriptor")

    descriptor, damaged = _read_descriptor(descriptor_ref)
    return FontInfo(
        name=name,
        subtype=subtype,
        damaged=damaged,
        descriptor=descriptor,
        composite=composite,
    )


def get_page_fonts(page: PageObject) -> list[FontInfo]:
    """All fonts in the page's resource dictionary (none if it has no resources)."""
    resources = page.get("/Resources")
    if resources is None:
        return []
    resources = resources.get_object()
    if not isinstance(resources, DictionaryObject):
        return []

    font_dict = resources.get("/Font")
    if font_dict is None:
        return []
    font_dict = font_dict.get_object()
    if not isinstance(font_dict, DictionaryObject):
        return []

    return [read_font(reference) for reference in font_dict.values()]
