"""
HTTP surface tests using FastAPI's TestClient.
"""

from __future__ import annotations

import io
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from holiday_card import create_app
from holiday_card.api.endpoints import cards
from holiday_card.core.config import settings
from holiday_card.services.card_compositor import CardComposer
from holiday_card.services.card_layout import compute_card_geometry


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", path)
    return path


@pytest.fixture
def composer(offline_settings, monkeypatch) -> CardComposer:
    instance = CardComposer(settings=offline_settings)
    monkeypatch.setattr(cards, "composer", instance)
    return instance


@pytest.fixture
def client(upload_dir, composer):
    with TestClient(create_app()) as test_client:
        yield test_client


def _staged_files(upload_dir):
    return list(upload_dir.iterdir()) if upload_dir.exists() else []


class TestSystemEndpoints:

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_index_page(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "/api/generate-card" in response.text

    def test_unknown_route_uses_error_body(self, client: TestClient):
        response = client.get("/nope")
        assert response.status_code == 404
        assert "error" in response.json()


class TestGenerateCard:

    def test_missing_file(self, client: TestClient, composer: CardComposer):
        with patch.object(composer, "compose_file") as compose_file:
            response = client.post("/api/generate-card", data={"holiday_type": "newyear"})

        assert response.status_code == 400
        assert response.json() == {"error": "No image file provided"}
        compose_file.assert_not_called()

    def test_text_field_instead_of_file(self, client: TestClient, composer: CardComposer):
        with patch.object(composer, "compose_file") as compose_file:
            response = client.post(
                "/api/generate-card",
                data={"image": "not-a-file", "holiday_type": "newyear"},
            )

        assert response.status_code == 400
        assert response.json() == {"error": "No image file provided"}
        compose_file.assert_not_called()

    def test_empty_file(self, client: TestClient, composer: CardComposer):
        with patch.object(composer, "compose_file") as compose_file:
            response = client.post(
                "/api/generate-card",
                files={"image": ("empty.jpg", b"", "image/jpeg")},
            )

        assert response.status_code == 400
        compose_file.assert_not_called()

    def test_new_year_card(self, client: TestClient, make_image_bytes, upload_dir):
        response = client.post(
            "/api/generate-card",
            files={"image": ("photo.png", make_image_bytes(320, 240, format="PNG"), "image/png")},
            data={"holiday_type": "newyear"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        card = Image.open(io.BytesIO(response.content))
        assert card.format == "JPEG"
        assert card.size == compute_card_geometry(320, 240).card_size
        assert _staged_files(upload_dir) == []

    def test_default_holiday_is_christmas(self, client: TestClient, composer: CardComposer, make_image_bytes):
        with patch.object(composer, "compose_file", wraps=composer.compose_file) as compose_file:
            response = client.post(
                "/api/generate-card",
                files={"image": ("photo.jpg", make_image_bytes(100, 100), "image/jpeg")},
            )

        assert response.status_code == 200
        assert compose_file.call_args.args[1] == "christmas"

    def test_christmas_without_credential_makes_no_external_call(
        self, client: TestClient, composer: CardComposer, make_image_bytes
    ):
        style_client = MagicMock()
        composer._style_client = style_client

        response = client.post(
            "/api/generate-card",
            files={"image": ("photo.jpg", make_image_bytes(150, 120), "image/jpeg")},
            data={"holiday_type": "christmas"},
        )

        assert response.status_code == 200
        style_client.stylize.assert_not_called()

    def test_processing_failure(self, client: TestClient, upload_dir):
        response = client.post(
            "/api/generate-card",
            files={"image": ("photo.jpg", b"this is not an image", "image/jpeg")},
            data={"holiday_type": "generic"},
        )

        assert response.status_code == 500
        assert "Invalid image data" in response.json()["error"]
        assert _staged_files(upload_dir) == []

    def test_unexpected_error_message(self, client: TestClient, composer: CardComposer, make_image_bytes, upload_dir):
        with patch.object(composer, "compose_file", side_effect=RuntimeError()):
            response = client.post(
                "/api/generate-card",
                files={"image": ("photo.jpg", make_image_bytes(10, 10), "image/jpeg")},
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate holiday card"}
        assert _staged_files(upload_dir) == []

    def test_staged_file_exists_during_processing(self, client: TestClient, composer: CardComposer, make_image_bytes):
        seen = {}

        def fake_compose(path, holiday_type):
            seen["exists"] = path.exists()
            seen["path"] = path
            return b"jpeg-bytes"

        with patch.object(composer, "compose_file", side_effect=fake_compose):
            response = client.post(
                "/api/generate-card",
                files={"image": ("photo.jpg", make_image_bytes(10, 10), "image/jpeg")},
            )

        assert response.status_code == 200
        assert response.content == b"jpeg-bytes"
        assert seen["exists"] is True
        assert not seen["path"].exists()

    def test_oversized_upload(self, client: TestClient, composer: CardComposer, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 1024)

        with patch.object(composer, "compose_file") as compose_file:
            response = client.post(
                "/api/generate-card",
                files={"image": ("big.jpg", b"x" * 2048, "image/jpeg")},
            )

        assert response.status_code == 413
        assert "too large" in response.json()["error"]
        compose_file.assert_not_called()
