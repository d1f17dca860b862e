from __future__ import annotations

import io
from typing import Callable

import numpy as np
import pytest
from PIL import Image

from holiday_card.core.config import Settings


def encode_image(image: Image.Image, format: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=format)
    return buffer.getvalue()


@pytest.fixture
def offline_settings() -> Settings:
    """Settings with style transfer disabled, independent of the environment."""
    return Settings(_env_file=None, HUGGINGFACE_API_TOKEN=None)


@pytest.fixture
def online_settings() -> Settings:
    """Settings with a (fake) real-looking inference token."""
    return Settings(_env_file=None, HUGGINGFACE_API_TOKEN="hf_test_token_123")


@pytest.fixture
def sample_rgb_image() -> Image.Image:
    """200x100 RGB image with a horizontal gradient."""
    img_array = np.zeros((100, 200, 3), dtype=np.uint8)
    img_array[:, :, 0] = np.linspace(0, 255, 200, dtype=np.uint8)
    img_array[:, :, 1] = 128
    img_array[:, :, 2] = 64
    return Image.fromarray(img_array, mode="RGB")


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    """Factory for encoded solid-color images of a given size."""
    def _make(width: int, height: int, color=(200, 30, 30), format: str = "JPEG", mode: str = "RGB") -> bytes:
        if mode == "RGBA" and len(color) == 3:
            color = tuple(color) + (255,)
        return encode_image(Image.new(mode, (width, height), color), format=format)
    return _make
