"""
Card Compositor Service

Turns an uploaded photo into a finished holiday card:
1. Decode the photo and compute the card geometry
2. Render the overlay for the card size
3. Resize the photo to the display size
4. Optionally replace it with a style-transferred version (christmas only)
5. Flatten cream background + photo + overlay and encode as JPEG

Style transfer is best effort: any failure there falls back to the resized
photo. Every other failure is raised as CardCompositionError.
"""

from __future__ import annotations

import io
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from PIL import Image

from ..core.config import Settings, settings as default_settings
from .card_layout import CardGeometry, compute_card_geometry, render_overlay
from .style_transfer import StyleTransferClient

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = (255, 250, 240)  # cream
JPEG_QUALITY = 95
STYLE_TRANSFER_HOLIDAY = "christmas"


class CardCompositionError(RuntimeError):
    """Raised when a card cannot be produced from the uploaded image."""


def decode_image(image_bytes: bytes) -> Image.Image:
    """
    Decode uploaded bytes into a fully loaded PIL image.

    Raises:
        CardCompositionError: If the bytes are empty or not a decodable image
    """
    if not image_bytes:
        raise CardCompositionError("Image data is empty")
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except Exception as exc:
        raise CardCompositionError(f"Invalid image data or unsupported format: {exc}") from exc
    return image


def _flatten_to_rgb(image: Image.Image) -> Image.Image:
    """Convert to RGB, flattening any transparency onto the card background."""
    if image.mode in ("RGBA", "LA", "P"):
        rgba = image.convert("RGBA")
        background = Image.new("RGBA", rgba.size, BACKGROUND_COLOR + (255,))
        return Image.alpha_composite(background, rgba).convert("RGB")
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def encode_jpeg(image: Image.Image, quality: int = JPEG_QUALITY) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


class CardComposer:
    """Composes holiday cards; one instance is shared across requests."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        style_client: Optional[StyleTransferClient] = None,
    ) -> None:
        self.settings = settings or default_settings
        self._style_client = style_client

    def _get_style_client(self) -> StyleTransferClient:
        if self._style_client is None:
            self._style_client = StyleTransferClient(
                api_token=self.settings.huggingface_api_token or "",
                base_url=self.settings.style_transfer_base_url,
                timeout=self.settings.style_transfer_timeout_seconds,
            )
        return self._style_client

    def should_stylize(self, holiday_type: str) -> bool:
        return holiday_type == STYLE_TRANSFER_HOLIDAY and self.settings.style_transfer_enabled

    def _apply_style_transfer(self, photo: Image.Image, geometry: CardGeometry) -> Image.Image:
        """Return the style-transferred photo, or the input photo on any failure."""
        try:
            result_bytes = self._get_style_client().stylize(encode_jpeg(photo))
            stylized = _flatten_to_rgb(decode_image(result_bytes))
            if stylized.size != geometry.display_size:
                stylized = stylized.resize(geometry.display_size, Image.Resampling.LANCZOS)
            logger.info("🎄 Style transfer applied")
            return stylized
        except Exception as e:
            logger.warning(f"⚠️ Style transfer failed, using original photo: {e}")
            return photo

    def compose(
        self,
        image_bytes: bytes,
        holiday_type: str = "christmas",
        today: Optional[date] = None,
    ) -> bytes:
        """
        Build a holiday card from an uploaded photo.

        Args:
            image_bytes: Encoded photo (JPEG, PNG, ...)
            holiday_type: Holiday-type tag selecting greeting and colors
            today: Date used for the year line (default: today)

        Returns:
            JPEG encoded card bytes

        Raises:
            CardCompositionError: If decoding, compositing or encoding fails
        """
        logger.info("🖼️ Starting card creation...")
        image = decode_image(image_bytes)
        logger.info(f"📐 Image metadata: size={image.size}, format={image.format}, mode={image.mode}")

        try:
            geometry = compute_card_geometry(*image.size)
            logger.info(
                f"📐 Display size: {geometry.display_size}, card size: {geometry.card_size}"
            )

            overlay = render_overlay(geometry.card_width, geometry.card_height, holiday_type, today)

            photo = _flatten_to_rgb(image)
            if photo.size != geometry.display_size:
                photo = photo.resize(geometry.display_size, Image.Resampling.LANCZOS)

            if self.should_stylize(holiday_type):
                photo = self._apply_style_transfer(photo, geometry)

            card = Image.new("RGB", geometry.card_size, BACKGROUND_COLOR)
            card.paste(photo, geometry.photo_offset)
            card = Image.alpha_composite(card.convert("RGBA"), overlay).convert("RGB")

            card_bytes = encode_jpeg(card)
        except CardCompositionError:
            raise
        except Exception as exc:
            raise CardCompositionError(f"Failed to composite holiday card: {exc}") from exc

        logger.info(f"✅ Card buffer created, size: {len(card_bytes)} bytes")
        return card_bytes

    def compose_file(self, image_path: Path, holiday_type: str = "christmas") -> bytes:
        """Read a staged upload from disk and compose a card from it."""
        try:
            image_bytes = Path(image_path).read_bytes()
        except OSError as exc:
            raise CardCompositionError(f"Could not read uploaded image: {exc}") from exc
        return self.compose(image_bytes, holiday_type)
