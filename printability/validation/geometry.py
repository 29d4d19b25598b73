"""
Page geometry for automated print.

All page sizes are compared in whole millimeters against A4, widened by the
configured bleed. The barcode silent zone is the strip along the left edge
(portrait) or bottom edge (landscape) where the print line puts its barcode.
"""

import math
from dataclasses import dataclass

from .settings import Bleed

A4_WIDTH_MM = 210
A4_HEIGHT_MM = 297

BARCODE_AREA_WIDTH_MM = 15
BARCODE_AREA_HEIGHT_MM = 80
BARCODE_AREA_X_POS_MM = 0
BARCODE_AREA_Y_POS_MM = 95

POINTS_PER_MM = 72 / 25.4


def points_to_mm(points: float) -> int:
    """Convert PDF points to whole millimeters, rounding half up."""
    return math.floor(points / POINTS_PER_MM + 0.5)


def mm_to_points(millimeters: int) -> float:
    """
    Convert millimeters to PDF points, truncated to one decimal.

    Truncation keeps the silent zone on the inside of its nominal boundary.
    """
    return math.floor(millimeters * POINTS_PER_MM * 10) / 10


@dataclass(frozen=True)
class DimensionBounds:
    """Accepted page size range in millimeters for one orientation."""

    min_width: int
    max_width: int
    min_height: int
    max_height: int

    def accepts(self, width_mm: int, height_mm: int) -> bool:
        return (self.min_width <= width_mm <= self.max_width
                and self.min_height <= height_mm <= self.max_height)


def a4_bounds(bleed: Bleed) -> DimensionBounds:
    """Portrait A4 bounds widened by the bleed."""
    return DimensionBounds(
        min_width=A4_WIDTH_MM - bleed.negative_mm,
        max_width=A4_WIDTH_MM + bleed.positive_mm,
        min_height=A4_HEIGHT_MM - bleed.negative_mm,
        max_height=A4_HEIGHT_MM + bleed.positive_mm,
    )


def is_portrait_a4(width_mm: int, height_mm: int, bleed: Bleed) -> bool:
    return a4_bounds(bleed).accepts(width_mm, height_mm)


def is_landscape_a4(width_mm: int, height_mm: int, bleed: Bleed) -> bool:
    return is_portrait_a4(height_mm, width_mm, bleed)


def is_valid_a4(width_mm: int, height_mm: int, bleed: Bleed) -> bool:
    return is_portrait_a4(width_mm, height_mm, bleed) or is_landscape_a4(width_mm, height_mm, bleed)


@dataclass(frozen=True)
class SilentZone:
    """
    Barcode reservation area in points.

    Coordinates use a top-left origin relative to the page's crop box, with
    y growing downwards.
    """

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def for_page(cls, width_pt: float, height_pt: float, bleed: Bleed) -> "SilentZone":
        """
        Compute the silent zone for a page of the given crop box size.

        Landscape pages get the zone transposed, so the barcode strip stays
        on the same physical paper edge.
        """
        width_mm = points_to_mm(width_pt)
        height_mm = points_to_mm(height_pt)

        if is_landscape_a4(width_mm, height_mm, bleed):
            return cls(
                x=mm_to_points(BARCODE_AREA_Y_POS_MM),
                y=mm_to_points(height_mm - BARCODE_AREA_WIDTH_MM),
                width=mm_to_points(BARCODE_AREA_HEIGHT_MM),
                height=mm_to_points(BARCODE_AREA_WIDTH_MM),
            )

        return cls(
            x=mm_to_points(BARCODE_AREA_X_POS_MM),
            y=mm_to_points(BARCODE_AREA_Y_POS_MM),
            width=mm_to_points(BARCODE_AREA_WIDTH_MM),
            height=mm_to_points(BARCODE_AREA_HEIGHT_MM),
        )

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height
