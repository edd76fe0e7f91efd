import base64
from io import BytesIO

import pytest
from PIL import Image as PILImage

import api_server
from api_server import app
from models.errors import EncodeFailure
from services.image_service import ImageService


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def post_sprite(client, data: bytes, filename: str = "source.png", **form):
    payload = {"image": (BytesIO(data), filename)}
    payload.update(form)
    return client.post("/api/sprite", data=payload, content_type="multipart/form-data")


def decode_sprite(data_url: str) -> PILImage.Image:
    raw = base64.b64decode(data_url.split(",", 1)[1])
    return PILImage.open(BytesIO(raw))


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_make_sprite(client, png_bytes):
    response = post_sprite(client, png_bytes, target_size="16", prompt="Gray Box")

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["width"] == body["height"] == 16
    assert body["filename"] == "gray_box_16x16.png"
    assert body["background_removed"] is True

    img = decode_sprite(body["sprite"])
    assert img.size == (16, 16)
    assert img.getpixel((0, 0))[3] == 0


def test_keep_background(client, png_bytes):
    response = post_sprite(client, png_bytes, target_size="8", remove_background="false")

    body = response.get_json()
    assert body["background_removed"] is False
    assert decode_sprite(body["sprite"]).getpixel((0, 0)) == (200, 200, 200, 255)


def test_default_size(client, png_bytes):
    body = post_sprite(client, png_bytes).get_json()
    assert body["width"] == 64
    assert body["filename"] == "sprite_64x64.png"


def test_missing_image(client):
    response = client.post("/api/sprite", data={}, content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_disallowed_extension(client, png_bytes):
    response = post_sprite(client, png_bytes, filename="source.txt")
    assert response.status_code == 400


@pytest.mark.parametrize("form", [
    {"target_size": "0"},
    {"target_size": "-4"},
    {"target_size": "big"},
    {"remove_background": "maybe"},
])
def test_bad_options(client, png_bytes, form):
    response = post_sprite(client, png_bytes, **form)
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_undecodable_upload(client):
    response = post_sprite(client, b"not really a png")
    assert response.status_code == 422
    assert "decode" in response.get_json()["message"].lower()


def test_target_size_above_limit(client, png_bytes):
    response = post_sprite(client, png_bytes, target_size="1000000")

    assert response.status_code == 400
    assert response.is_json
    body = response.get_json()
    assert body["success"] is False
    assert str(api_server.MAX_SPRITE_SIZE) in body["message"]


def test_target_size_at_limit_is_accepted(monkeypatch):
    monkeypatch.setattr(api_server, "MAX_SPRITE_SIZE", 32)
    options = api_server.parse_options({"target_size": "32"})
    assert options.target_size == 32


def test_upload_too_large(client, png_bytes, monkeypatch):
    monkeypatch.setitem(app.config, "MAX_CONTENT_LENGTH", 64)

    response = post_sprite(client, png_bytes)

    assert response.status_code == 413
    assert response.is_json
    assert response.get_json()["success"] is False


class FailingEncodeService(ImageService):
    def to_data_url(self, buf):
        raise EncodeFailure("disk full")


def test_encode_failure(client, png_bytes, monkeypatch):
    monkeypatch.setattr(api_server, "image_service", FailingEncodeService())

    response = post_sprite(client, png_bytes, target_size="8")

    assert response.status_code == 500
    assert response.is_json
    body = response.get_json()
    assert body["success"] is False
    assert body["message"] == "Error encoding sprite"
