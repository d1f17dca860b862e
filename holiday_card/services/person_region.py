"""
Person region heuristics and sweater pattern.

A rough skin-tone classifier that locates a face/neck area and extrapolates
a torso box below it, plus a synthetic knitted-sweater pattern that can be
pasted over that box. Not used by the card pipeline (style transfer replaced
it); kept as standalone helpers.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from PIL import Image, ImageDraw

Region = Tuple[int, int, int, int]  # (left, top, right, bottom)

SAMPLE_STRIDE = 10
MIN_SKIN_SAMPLES = 5

TORSO_WIDTH_FACTOR = 2.0
TORSO_HEIGHT_FACTOR = 2.5

STRIPE_HEIGHT = 20
STRIPE_COLORS = ((178, 34, 34), (0, 100, 0))  # firebrick, dark green
DOT_COLOR = (255, 255, 255)
DOT_SPACING = 24
DOT_RADIUS = 4
PATTERN_ALPHA = 150


def skin_mask(pixels: np.ndarray) -> np.ndarray:
    """Boolean mask of skin-like pixels for an (..., 3) uint8 RGB array."""
    rgb = pixels.astype(np.int16)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    spread = rgb.max(axis=-1) - rgb.min(axis=-1)
    return (
        (r > 95) & (g > 40) & (b > 20)
        & (spread > 15)
        & (np.abs(r - g) > 15)
        & (r > g) & (r > b)
    )


def _fallback_region(width: int, height: int) -> Region:
    return (int(width * 0.25), int(height * 0.4), int(width * 0.75), int(height * 0.9))


def detect_person_region(image: Image.Image, stride: int = SAMPLE_STRIDE) -> Region:
    """
    Estimate the torso bounding box of the person in a photo.

    Samples every `stride`-th pixel, bounds the skin-tone samples as the
    face/neck box and extends it downward. Falls back to a centered region
    when too few skin samples are found.
    """
    width, height = image.size
    if stride < 1:
        raise ValueError("stride must be >= 1")

    pixels = np.asarray(image.convert("RGB"))[::stride, ::stride]
    ys, xs = np.nonzero(skin_mask(pixels))
    if len(xs) < MIN_SKIN_SAMPLES:
        return _fallback_region(width, height)

    face_left = int(xs.min()) * stride
    face_right = int(xs.max()) * stride
    face_top = int(ys.min()) * stride
    face_bottom = int(ys.max()) * stride
    face_width = max(face_right - face_left, stride)
    face_height = max(face_bottom - face_top, stride)

    center_x = (face_left + face_right) / 2
    torso_half_width = face_width * TORSO_WIDTH_FACTOR / 2

    left = int(max(0, center_x - torso_half_width))
    right = int(min(width, center_x + torso_half_width))
    top = int(min(height - 1, face_bottom))
    bottom = int(min(height, face_bottom + face_height * TORSO_HEIGHT_FACTOR))

    if right <= left or bottom <= top:
        return _fallback_region(width, height)
    return (left, top, right, bottom)


def create_sweater_pattern(width: int, height: int) -> Image.Image:
    """Semi-transparent red/green striped pattern with rows of white dots."""
    width = max(1, width)
    height = max(1, height)
    pattern = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(pattern)

    for index, y in enumerate(range(0, height, STRIPE_HEIGHT)):
        color = STRIPE_COLORS[index % len(STRIPE_COLORS)]
        draw.rectangle((0, y, width, y + STRIPE_HEIGHT - 1), fill=color + (PATTERN_ALPHA,))

        # dots on every other stripe
        if index % 2 == 0:
            cy = y + STRIPE_HEIGHT // 2
            for cx in range(DOT_SPACING // 2, width, DOT_SPACING):
                draw.ellipse(
                    (cx - DOT_RADIUS, cy - DOT_RADIUS, cx + DOT_RADIUS, cy + DOT_RADIUS),
                    fill=DOT_COLOR + (PATTERN_ALPHA,),
                )

    return pattern


def apply_sweater_overlay(image: Image.Image, region: Region) -> Image.Image:
    """Return a copy of `image` with the sweater pattern blended over `region`."""
    width, height = image.size
    left, top, right, bottom = region
    left, top = max(0, left), max(0, top)
    right, bottom = min(width, right), min(height, bottom)

    base = image.convert("RGBA")
    if right <= left or bottom <= top:
        return base.convert(image.mode if image.mode in ("RGB", "RGBA") else "RGB")

    pattern = create_sweater_pattern(right - left, bottom - top)
    base.alpha_composite(pattern, dest=(left, top))
    return base.convert(image.mode if image.mode in ("RGB", "RGBA") else "RGB")
