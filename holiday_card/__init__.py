"""Holiday card backend package (card layout, compositing, style transfer)."""

from __future__ import annotations

from .main import create_app

__all__ = ["create_app"]
