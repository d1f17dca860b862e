"""
Card Layout Service

Geometry and overlay rendering for holiday cards:
- Display size computation (uniform downscale into a fixed bound, never upscale)
- Card geometry (display size + padding + text band)
- Holiday-dependent styling lookup (colors, greeting, year)
- Overlay rendering: borders, corner ornaments, drop-shadowed greeting and year

The overlay is an RGBA image that is fully transparent everywhere except the
drawn shapes, so it can be alpha-composited over the photo.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

# Card template
MAX_DISPLAY_WIDTH = 1200
MAX_DISPLAY_HEIGHT = 1600
CARD_PADDING = 50
TEXT_BAND_HEIGHT = 150

# Overlay template
OUTER_BORDER_WIDTH = 8
INNER_BORDER_INSET = 20
INNER_BORDER_WIDTH = 2
INNER_BORDER_COLOR = "#c8c8c8"
CORNER_SIZE = 30
CORNER_MARGIN = 10
SHADOW_OFFSET = 2
SHADOW_COLOR = "#646464"
YEAR_COLOR = "#969696"
GREETING_FONT_SIZE = 40
YEAR_FONT_SIZE = 24
GREETING_BASELINE_OFFSET = 100
YEAR_BASELINE_OFFSET = 50

GENERIC_HOLIDAY = "generic"

GREETINGS: Mapping[str, str] = MappingProxyType({
    "christmas": "Merry Christmas!",
    "newyear": "Happy New Year!",
    "hanukkah": "Happy Hanukkah!",
    GENERIC_HOLIDAY: "Season's Greetings!",
})

# (border/text color, corner accent color)
CHRISTMAS_PALETTE = ("#8b4513", "#dc143c")
DEFAULT_PALETTE = ("#4b0082", "#ff8c00")

PALETTES: Mapping[str, Tuple[str, str]] = MappingProxyType({
    "christmas": CHRISTMAS_PALETTE,
})

BOLD_FONT_PATHS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "arialbd.ttf",
)
REGULAR_FONT_PATHS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "arial.ttf",
)


@dataclass(frozen=True)
class CardGeometry:
    display_width: int
    display_height: int
    padding: int
    card_width: int
    card_height: int

    @property
    def display_size(self) -> Tuple[int, int]:
        return (self.display_width, self.display_height)

    @property
    def card_size(self) -> Tuple[int, int]:
        return (self.card_width, self.card_height)

    @property
    def photo_offset(self) -> Tuple[int, int]:
        return (self.padding, self.padding)


@dataclass(frozen=True)
class OverlaySpec:
    border_color: str
    accent_color: str
    text_color: str
    greeting: str
    year: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_display_size(width: int, height: int) -> Tuple[int, int]:
    """
    Fit (width, height) inside MAX_DISPLAY_WIDTH x MAX_DISPLAY_HEIGHT.

    Scales uniformly by the smaller of the two required ratios when either
    dimension is over its bound. Images already inside the bound are
    returned unchanged.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    if width > MAX_DISPLAY_WIDTH or height > MAX_DISPLAY_HEIGHT:
        ratio = min(MAX_DISPLAY_WIDTH / width, MAX_DISPLAY_HEIGHT / height)
        width = max(1, _round_half_up(width * ratio))
        height = max(1, _round_half_up(height * ratio))

    return width, height


def compute_card_geometry(width: int, height: int) -> CardGeometry:
    """Card geometry for a source image of the given intrinsic size."""
    display_width, display_height = compute_display_size(width, height)
    return CardGeometry(
        display_width=display_width,
        display_height=display_height,
        padding=CARD_PADDING,
        card_width=display_width + CARD_PADDING * 2,
        card_height=display_height + CARD_PADDING * 2 + TEXT_BAND_HEIGHT,
    )


def get_greeting(holiday_type: Optional[str]) -> str:
    return GREETINGS.get(holiday_type or "", GREETINGS[GENERIC_HOLIDAY])


def get_overlay_spec(holiday_type: Optional[str], today: Optional[date] = None) -> OverlaySpec:
    """Styling for a holiday type; unknown types get the generic greeting."""
    border_color, accent_color = PALETTES.get(holiday_type or "", DEFAULT_PALETTE)
    return OverlaySpec(
        border_color=border_color,
        accent_color=accent_color,
        text_color=border_color,
        greeting=get_greeting(holiday_type),
        year=(today or date.today()).year,
    )


def load_font(size: int, bold: bool = False) -> ImageFont.ImageFont:
    """Try common TrueType fonts, fall back to Pillow's scalable default."""
    for font_path in BOLD_FONT_PATHS if bold else REGULAR_FONT_PATHS:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            continue

    logger.debug("No TrueType font found, using Pillow default font")
    return ImageFont.load_default(size=size)


def _rgba(color: str) -> Tuple[int, int, int, int]:
    return ImageColor.getcolor(color, "RGBA")


def _corner_centers(card_width: int, card_height: int) -> Tuple[Tuple[int, int], ...]:
    near = OUTER_BORDER_WIDTH + CORNER_MARGIN + CORNER_SIZE // 2
    far_x = card_width - near
    far_y = card_height - near
    return ((near, near), (far_x, near), (near, far_y), (far_x, far_y))


def render_overlay(
    card_width: int,
    card_height: int,
    holiday_type: Optional[str],
    today: Optional[date] = None,
) -> Image.Image:
    """
    Draw the card overlay for a card of the given size.

    Args:
        card_width: Card width in pixels
        card_height: Card height in pixels
        holiday_type: Holiday-type tag selecting colors and greeting
        today: Date used for the year line (default: today)

    Returns:
        RGBA image of size (card_width, card_height)
    """
    spec = get_overlay_spec(holiday_type, today)
    overlay = Image.new("RGBA", (card_width, card_height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    # Outer border, stroke fully inside the card edge
    draw.rectangle(
        (0, 0, card_width - 1, card_height - 1),
        outline=_rgba(spec.border_color),
        width=OUTER_BORDER_WIDTH,
    )

    # Inner decorative border
    inset = OUTER_BORDER_WIDTH + INNER_BORDER_INSET - INNER_BORDER_WIDTH // 2
    draw.rectangle(
        (inset, inset, card_width - 1 - inset, card_height - 1 - inset),
        outline=_rgba(INNER_BORDER_COLOR),
        width=INNER_BORDER_WIDTH,
    )

    radius = CORNER_SIZE // 2
    for cx, cy in _corner_centers(card_width, card_height):
        draw.ellipse(
            (cx - radius, cy - radius, cx + radius, cy + radius),
            fill=_rgba(spec.accent_color),
        )

    greeting_font = load_font(GREETING_FONT_SIZE, bold=True)
    year_font = load_font(YEAR_FONT_SIZE)

    text_x = card_width / 2
    text_y = card_height - GREETING_BASELINE_OFFSET
    year_y = card_height - YEAR_BASELINE_OFFSET

    draw.text(
        (text_x + SHADOW_OFFSET, text_y + SHADOW_OFFSET),
        spec.greeting,
        font=greeting_font,
        fill=_rgba(SHADOW_COLOR),
        anchor="mm",
    )
    draw.text((text_x, text_y), spec.greeting, font=greeting_font, fill=_rgba(spec.text_color), anchor="mm")
    draw.text((text_x, year_y), str(spec.year), font=year_font, fill=_rgba(YEAR_COLOR), anchor="mm")

    return overlay
