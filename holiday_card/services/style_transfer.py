"""
Style Transfer Client

Sends a photo to a hosted image-to-image model to add a festive sweater to
the subject. Candidate models are tried in a fixed priority order until one
returns an image; there is no retry or backoff beyond that list.
"""

from __future__ import annotations

import base64
import io
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_MODELS: Tuple[str, ...] = (
    "timbrooks/instruct-pix2pix",
    "stabilityai/stable-diffusion-xl-refiner-1.0",
    "runwayml/stable-diffusion-v1-5",
)

SWEATER_PROMPT = (
    "the same person wearing a cozy knitted christmas sweater with red and green "
    "festive patterns, snowflakes and reindeer, photorealistic, keep the face unchanged"
)
SWEATER_NEGATIVE_PROMPT = (
    "blurry, distorted face, extra limbs, deformed, low quality, cartoon, text, watermark"
)

DEFAULT_PARAMETERS: Dict[str, Any] = {
    "num_inference_steps": 20,
    "guidance_scale": 7.5,
    # Low strength keeps most of the original photo
    "strength": 0.7,
}


class StyleTransferError(RuntimeError):
    """Raised when every candidate model failed."""

    def __init__(self, errors: List[Tuple[str, str]]) -> None:
        self.errors = errors
        summary = "; ".join(f"{model}: {reason}" for model, reason in errors) or "no models configured"
        super().__init__(f"All style transfer models failed ({summary})")


class StyleTransferClient:
    """
    HTTP client for the hosted inference API.

    Handles:
    - Ordered fallback across candidate models
    - Explicit per-request timeout
    - Validation that the response body is an image
    """

    def __init__(
        self,
        api_token: str,
        base_url: str,
        models: Sequence[str] = DEFAULT_MODELS,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize style transfer client.

        Args:
            api_token: Bearer token for the inference API
            base_url: Base URL; the model id is appended as a path segment
            models: Candidate model ids in priority order
            timeout: Request timeout in seconds (applied to all timeout types)
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.models = tuple(models)
        self.timeout = timeout
        self._headers = {"Authorization": f"Bearer {api_token}"}
        self._transport = transport

    def _build_payload(self, image_bytes: bytes) -> Dict[str, Any]:
        return {
            "inputs": base64.b64encode(image_bytes).decode(),
            "parameters": {
                "prompt": SWEATER_PROMPT,
                "negative_prompt": SWEATER_NEGATIVE_PROMPT,
                **DEFAULT_PARAMETERS,
            },
        }

    def _request_model(self, client: httpx.Client, model: str, payload: Dict[str, Any]) -> bytes:
        url = f"{self.base_url}/{model}"
        response = client.post(url, json=payload, headers=self._headers)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            # The API answers 200 with a JSON error while a model is loading
            raise ValueError(f"Model returned JSON instead of an image: {response.text[:200]}")

        body = response.content
        if not body:
            raise ValueError("Model returned an empty body")

        try:
            with Image.open(io.BytesIO(body)) as probe:
                probe.verify()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError(f"Model returned undecodable image data: {exc}") from exc

        return body

    def stylize(self, image_bytes: bytes) -> bytes:
        """
        Run the sweater style transfer on an encoded image.

        Args:
            image_bytes: Encoded input image (JPEG/PNG)

        Returns:
            Encoded image bytes from the first model that succeeded

        Raises:
            StyleTransferError: If every candidate model failed
        """
        payload = self._build_payload(image_bytes)
        timeout_obj = httpx.Timeout(self.timeout)
        errors: List[Tuple[str, str]] = []

        with httpx.Client(timeout=timeout_obj, follow_redirects=True, transport=self._transport) as client:
            for model in self.models:
                logger.info(f"🎄 [StyleTransfer] Trying model {model}")
                try:
                    result = self._request_model(client, model, payload)
                except httpx.HTTPStatusError as e:
                    reason = f"HTTP {e.response.status_code}"
                except httpx.RequestError as e:
                    reason = f"{type(e).__name__}: {e}"
                except ValueError as e:
                    reason = str(e)
                else:
                    logger.info(f"✅ [StyleTransfer] {model} returned {len(result)} bytes")
                    return result

                logger.warning(f"⚠️ [StyleTransfer] {model} failed: {reason}")
                errors.append((model, reason))

        raise StyleTransferError(errors)
