"""Tests for the building blocks of validation: geometry, error kinds, results, fonts and the rule engine."""

import pytest
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    NullObject,
    NumberObject,
)

from printability.validation import (
    CHECK_ALL,
    EVERYTHING_OK,
    Bleed,
    PdfValidationError,
    PdfValidator,
    ReaderConfig,
    ValidationResult,
    ValidationSettings,
)
from printability.validation.document import has_invalid_dimensions, has_text_in_barcode_area
from printability.validation.fonts import (
    FontDescriptorInfo,
    FontInfo,
    find_unsupported_fonts,
    is_supported_font,
    is_supported_font_name,
    read_font,
)
from printability.validation.geometry import (
    SilentZone,
    is_landscape_a4,
    is_portrait_a4,
    is_valid_a4,
    mm_to_points,
    points_to_mm,
)
from printability.validation.pages import PageGeometryError, PageSource, PdfPage

E = PdfValidationError

A4_PT = (595.28, 841.89)


# =============================================================================
# Fakes
# =============================================================================

class FakePage(PdfPage):
    def __init__(self, number=1, size=A4_PT, fonts=None, zone_text=""):
        self.number = number
        self.size = size
        self._fonts = fonts or []
        self.zone_text = zone_text
        self.zones = []

    def crop_box_size(self):
        if self.size is None:
            raise PageGeometryError("no crop box", self.number)
        return self.size

    def fonts(self):
        return self._fonts

    def text_in_area(self, area):
        if self.size is None:
            raise PageGeometryError("no crop box", self.number)
        self.zones.append(area)
        return self.zone_text


class FakeSource(PageSource):
    def __init__(self, pages, encrypted=False, version="1.4", page_count=None):
        self._pages = pages
        self._encrypted = encrypted
        self._version = version
        self._page_count = len(pages) if page_count is None else page_count
        self.walked = 0

    @property
    def is_encrypted(self):
        return self._encrypted

    @property
    def page_count(self):
        return self._page_count

    @property
    def pdf_version(self):
        return self._version

    def pages(self):
        for page in self._pages:
            self.walked += 1
            yield page


UNEMBEDDED = FontInfo(name="Verdana", subtype="TrueType", descriptor=FontDescriptorInfo(font_name="Verdana"))


# =============================================================================
# Geometry
# =============================================================================

class TestUnitConversion:
    @pytest.mark.parametrize("millimeters,points", [
        (15, 42.5),
        (80, 226.7),
        (95, 269.2),
        (195, 552.7),
    ])
    def test_mm_to_points_truncates(self, millimeters, points):
        assert mm_to_points(millimeters) == points

    def test_a4_points_round_to_a4_mm(self):
        assert points_to_mm(595.28) == 210
        assert points_to_mm(841.89) == 297

    def test_points_round_to_nearest(self):
        assert points_to_mm(72 / 25.4 * 10.6) == 11
        assert points_to_mm(72 / 25.4 * 10.4) == 10
        assert points_to_mm(612) == 216
        assert points_to_mm(792) == 279


class TestA4Bounds:
    def test_exact_a4(self):
        bleed = Bleed(0, 0)
        assert is_portrait_a4(210, 297, bleed)
        assert is_landscape_a4(297, 210, bleed)
        assert not is_landscape_a4(210, 297, bleed)

    def test_bounds_are_inclusive(self):
        bleed = Bleed(positive_mm=3, negative_mm=5)
        assert is_valid_a4(205, 292, bleed)
        assert is_valid_a4(213, 300, bleed)
        assert not is_valid_a4(204, 297, bleed)
        assert not is_valid_a4(210, 301, bleed)

    def test_letter_rejected_by_default(self):
        assert not is_valid_a4(216, 279, Bleed())


class TestSilentZone:
    def test_portrait_zone(self):
        zone = SilentZone.for_page(*A4_PT, Bleed())
        assert zone == SilentZone(x=0, y=269.2, width=42.5, height=226.7)

    def test_landscape_zone(self):
        zone = SilentZone.for_page(841.89, 595.28, Bleed())
        assert zone == SilentZone(x=269.2, y=552.7, width=226.7, height=42.5)

    def test_non_a4_page_gets_portrait_zone(self):
        zone = SilentZone.for_page(612, 792, Bleed())
        assert zone.x == 0
        assert zone.y == 269.2

    def test_contains(self):
        zone = SilentZone(x=0, y=269.2, width=42.5, height=226.7)
        assert zone.contains(10, 300)
        assert zone.contains(0, 269.2)
        assert not zone.contains(50, 300)
        assert not zone.contains(10, 100)


# =============================================================================
# Error kinds and results
# =============================================================================

class TestErrorKinds:
    def test_code_is_name(self):
        for error in PdfValidationError:
            assert error.code == error.name

    def test_nothing_is_ok_for_print(self):
        assert not any(error.ok_for_print for error in PdfValidationError)

    @pytest.mark.parametrize("error", [
        E.PDF_PARSE_ERROR,
        E.REFERENCES_INVALID_FONT,
        E.DOCUMENT_TOO_SMALL,
        E.INVALID_PDF,
        E.DOCUMENT_HAS_NO_PAGES,
    ])
    def test_not_ok_for_web(self, error):
        assert not error.ok_for_web

    def test_dimension_message_uses_bleed(self):
        message = E.UNSUPPORTED_DIMENSIONS.format_message(Bleed(positive_mm=2, negative_mm=3))
        assert "207—212 mm" in message
        assert "294—299 mm" in message

    def test_dimension_message_default_bleed(self):
        assert "200—210 mm" in str(E.UNSUPPORTED_DIMENSIONS)

    def test_version_message_lists_versions(self):
        assert "1.0, 1.1, 1.2, 1.3, 1.4, 1.5, 1.6, 1.7" in E.UNSUPPORTED_PDF_VERSION_FOR_PRINT.format_message()


class TestValidationResult:
    def test_everything_ok(self):
        assert EVERYTHING_OK.ok_for_print
        assert EVERYTHING_OK.ok_for_web
        assert not EVERYTHING_OK.has_errors

    def test_duplicates_removed_in_order(self):
        result = ValidationResult((E.UNSUPPORTED_DIMENSIONS, E.PDF_IS_ENCRYPTED, E.UNSUPPORTED_DIMENSIONS), 1)
        assert result.errors == (E.UNSUPPORTED_DIMENSIONS, E.PDF_IS_ENCRYPTED)

    def test_ok_for_web_needs_every_error_acceptable(self):
        web_only = ValidationResult((E.INSUFFICIENT_MARGIN_FOR_PRINT, E.TOO_MANY_PAGES_FOR_AUTOMATED_PRINT), 20)
        assert web_only.ok_for_web
        assert not web_only.ok_for_print

        mixed = ValidationResult((E.INSUFFICIENT_MARGIN_FOR_PRINT, E.REFERENCES_INVALID_FONT), 2)
        assert not mixed.ok_for_web

    def test_str(self):
        result = ValidationResult((E.PDF_IS_ENCRYPTED, E.PDF_PARSE_ERROR))
        assert str(result) == (
            "[ValidationResult The PDF document is encrypted. Could not parse the PDF document.]"
        )

    def test_str_without_errors(self):
        assert str(EVERYTHING_OK) == "[ValidationResult]"

    def test_to_dict(self):
        result = ValidationResult((E.UNSUPPORTED_DIMENSIONS,), 3, Bleed(positive_mm=2, negative_mm=3))
        data = result.to_dict()
        assert data["pages"] == 3
        assert data["ok_for_print"] is False
        assert data["ok_for_web"] is True
        assert data["bleed"] == {"positive_mm": 2, "negative_mm": 3}
        assert data["errors"][0]["code"] == "UNSUPPORTED_DIMENSIONS"
        assert "207—212" in data["errors"][0]["message"]


class TestSettings:
    def test_defaults(self):
        assert CHECK_ALL.max_page_count == 14
        assert CHECK_ALL.bleed == Bleed(positive_mm=0, negative_mm=10)
        assert all([
            CHECK_ALL.check_left_margin,
            CHECK_ALL.check_fonts,
            CHECK_ALL.check_page_count,
            CHECK_ALL.check_pdf_version,
        ])

    def test_negative_bleed_rejected(self):
        with pytest.raises(ValueError):
            Bleed(positive_mm=-1, negative_mm=0)

    def test_release_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            ReaderConfig(release_interval=0)


# =============================================================================
# Fonts
# =============================================================================

class TestFontClassification:
    @pytest.mark.parametrize("name", [
        "Helvetica", "Helvetica-Bold", "Times-Roman", "Courier-Oblique",
        "Symbol", "ZapfDingbats", "Zapf Dingbats", "ABCDEF+Arial-BoldMT", "Times New Roman",
    ])
    def test_supported_names(self, name):
        assert is_supported_font_name(name)

    @pytest.mark.parametrize("name", ["Verdana", "Calibri", "", None])
    def test_unsupported_names(self, name):
        assert not is_supported_font_name(name)

    def test_embedded_font_is_supported(self):
        font = FontInfo(name="Verdana", descriptor=FontDescriptorInfo(font_name="Verdana", has_font_file2=True))
        assert is_supported_font(font)

    def test_descriptor_name_decides_when_not_embedded(self):
        assert not is_supported_font(UNEMBEDDED)
        font = FontInfo(name="Verdana", descriptor=FontDescriptorInfo(font_name="Helvetica"))
        assert is_supported_font(font)

    def test_standard_font_without_descriptor(self):
        assert is_supported_font(FontInfo(name="Helvetica", subtype="Type1"))

    def test_composite_without_descriptor(self):
        assert is_supported_font(FontInfo(name="Anything", subtype="Type0", composite=True))

    def test_damaged_font(self):
        assert not is_supported_font(FontInfo(name="Helvetica", damaged=True))

    def test_find_unsupported_fonts(self):
        fonts = [FontInfo(name="Helvetica"), UNEMBEDDED]
        assert find_unsupported_fonts(fonts) == [UNEMBEDDED]

    def test_describe(self):
        assert UNEMBEDDED.describe() == "TrueType 'Verdana'"


def _font_dict(**entries):
    return DictionaryObject({NameObject(f"/{key}"): value for key, value in entries.items()})


class TestReadFont:
    def test_simple_font(self):
        font = read_font(_font_dict(Type=NameObject("/Font"), Subtype=NameObject("/Type1"),
                                    BaseFont=NameObject("/Helvetica")))
        assert font == FontInfo(name="Helvetica", subtype="Type1")

    def test_embedded_descriptor(self):
        font_file = DecodedStreamObject()
        font_file.set_data(b"\x00")
        descriptor = _font_dict(FontName=NameObject("/Verdana"), FontFile2=font_file)
        font = read_font(_font_dict(Subtype=NameObject("/TrueType"), BaseFont=NameObject("/Verdana"),
                                    FontDescriptor=descriptor))
        assert font.descriptor.has_font_file2
        assert font.descriptor.embedded
        assert not font.damaged

    def test_font_file_that_is_not_a_stream(self):
        descriptor = _font_dict(FontName=NameObject("/Verdana"), FontFile=NumberObject(3))
        font = read_font(_font_dict(Subtype=NameObject("/TrueType"), BaseFont=NameObject("/Verdana"),
                                    FontDescriptor=descriptor))
        assert font.damaged
        assert not is_supported_font(font)

    def test_descriptor_that_is_not_a_dictionary(self):
        font = read_font(_font_dict(Subtype=NameObject("/TrueType"), FontDescriptor=NumberObject(1)))
        assert font.damaged

    def test_not_a_dictionary(self):
        assert read_font(NumberObject(1)).damaged
        assert read_font(None).damaged

    def test_missing_base_font(self):
        font = read_font(_font_dict(Subtype=NameObject("/Type1"), BaseFont=NullObject()))
        assert font.name is None
        assert not is_supported_font(font)

    def test_type0_uses_descendant_descriptor(self):
        descriptor = _font_dict(FontName=NameObject("/Verdana"))
        descendant = _font_dict(Subtype=NameObject("/CIDFontType2"), FontDescriptor=descriptor)
        font = read_font(_font_dict(Subtype=NameObject("/Type0"), BaseFont=NameObject("/Verdana"),
                                    DescendantFonts=ArrayObject([descendant])))
        assert font.composite
        assert font.descriptor == FontDescriptorInfo(font_name="Verdana")
        assert not is_supported_font(font)

    def test_type0_without_descendants(self):
        font = read_font(_font_dict(Subtype=NameObject("/Type0"), BaseFont=NameObject("/Custom")))
        assert font.composite
        assert font.descriptor is None
        assert is_supported_font(font)


# =============================================================================
# Rule engine
# =============================================================================

class TestPageChecks:
    def test_unreadable_crop_box_has_invalid_dimensions(self):
        assert has_invalid_dimensions(FakePage(size=None), Bleed())

    def test_unreadable_crop_box_margin_raises(self):
        with pytest.raises(PageGeometryError) as exc_info:
            has_text_in_barcode_area(FakePage(number=4, size=None), Bleed())
        assert exc_info.value.page_number == 4

    def test_whitespace_in_zone_is_not_text(self):
        assert not has_text_in_barcode_area(FakePage(zone_text=" \n "), Bleed())

    def test_zone_passed_to_page(self):
        page = FakePage(size=(841.89, 595.28), zone_text="x")
        assert has_text_in_barcode_area(page, Bleed())
        assert page.zones == [SilentZone(x=269.2, y=552.7, width=226.7, height=42.5)]


class TestRuleEngine:
    @pytest.fixture
    def validator(self):
        return PdfValidator()

    def test_clean_document(self, validator):
        source = FakeSource([FakePage(1), FakePage(2)])
        assert validator.validate_document(source, CHECK_ALL) == []

    def test_encrypted_short_circuits(self, validator):
        source = FakeSource([FakePage(size=(100, 100))] * 20, encrypted=True, version="2.0")
        assert validator.validate_document(source, CHECK_ALL) == [E.PDF_IS_ENCRYPTED]
        assert source.walked == 0

    def test_error_order(self, validator):
        pages = [
            FakePage(1, size=(612, 792)),
            None,
            FakePage(3, size=None),
            FakePage(4, zone_text="barcode", fonts=[UNEMBEDDED]),
        ]
        source = FakeSource(pages, version="2.0", page_count=15)
        assert validator.validate_document(source, CHECK_ALL) == [
            E.TOO_MANY_PAGES_FOR_AUTOMATED_PRINT,
            E.UNSUPPORTED_PDF_VERSION_FOR_PRINT,
            E.UNSUPPORTED_DIMENSIONS,
            E.PDF_PARSE_PAGE_ERROR,
            E.UNABLE_TO_VERIFY_SUITABLE_MARGIN_FOR_PRINT,
            E.INSUFFICIENT_MARGIN_FOR_PRINT,
            E.REFERENCES_INVALID_FONT,
        ]

    def test_unparseable_page(self, validator):
        source = FakeSource([FakePage(1), None, FakePage(3)])
        assert validator.validate_document(source, CHECK_ALL) == [E.PDF_PARSE_PAGE_ERROR]

    def test_missing_crop_box(self, validator):
        """Without a crop box the page is both mis-sized and unverifiable."""
        source = FakeSource([FakePage(1, size=None)])
        assert validator.validate_document(source, CHECK_ALL) == [
            E.UNSUPPORTED_DIMENSIONS,
            E.UNABLE_TO_VERIFY_SUITABLE_MARGIN_FOR_PRINT,
        ]

    def test_missing_crop_box_without_margin_check(self, validator):
        source = FakeSource([FakePage(1, size=None)])
        settings = ValidationSettings(check_left_margin=False)
        assert validator.validate_document(source, settings) == [E.UNSUPPORTED_DIMENSIONS]

    def test_margin_stops_checking_after_first_hit(self, validator):
        later = FakePage(2, zone_text="more")
        source = FakeSource([FakePage(1, zone_text="first"), later])
        assert validator.validate_document(source, CHECK_ALL) == [E.INSUFFICIENT_MARGIN_FOR_PRINT]
        assert later.zones == []
        assert source.walked == 2

    def test_no_pages(self, validator):
        assert validator.validate_document(FakeSource([]), CHECK_ALL) == [E.DOCUMENT_HAS_NO_PAGES]

    def test_no_pages_with_page_count_check_disabled(self, validator):
        settings = ValidationSettings(check_page_count=False)
        assert validator.validate_document(FakeSource([]), settings) == []

    def test_unreadable_version(self, validator):
        source = FakeSource([FakePage()], version=None)
        assert validator.validate_document(source, CHECK_ALL) == [E.UNSUPPORTED_PDF_VERSION_FOR_PRINT]

    def test_page_count_at_limit(self, validator):
        source = FakeSource([FakePage()], page_count=14)
        assert validator.validate_document(source, CHECK_ALL) == []
