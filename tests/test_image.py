"""Tests for qr.image and the OTPKey image accessors."""

import io

import pytest
from PIL import Image

from core import totp
from qr.image import QRImageError, render_image, render_png
from qr.parser import OTPKey

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
URI = "otpauth://hotp/foobar@example.com"


def test_render_png_default_size() -> None:
    png = render_png(URI)
    assert png.startswith(PNG_SIGNATURE)
    with Image.open(io.BytesIO(png)) as img:
        assert img.size == (512, 512)


@pytest.mark.parametrize("size", [64, 200, 300])
def test_render_png_exact_size(size: int) -> None:
    with Image.open(io.BytesIO(render_png(URI, size))) as img:
        assert img.size == (size, size)


def test_render_image_decodes() -> None:
    img = render_image(URI, 256)
    assert isinstance(img, Image.Image)
    assert img.size == (256, 256)
    assert img.format == "PNG"


def test_render_empty_content_raises() -> None:
    with pytest.raises(QRImageError):
        render_png("")


def test_render_bad_size_raises() -> None:
    with pytest.raises(QRImageError):
        render_png(URI, 0)


def test_render_overflow_raises() -> None:
    with pytest.raises(QRImageError):
        render_png("A" * 5000)


def test_key_png() -> None:
    png = OTPKey(URI).png()
    assert png.startswith(PNG_SIGNATURE)


def test_key_image() -> None:
    key = totp.generate_default_key("foobar", "foobar@example.com")
    img = key.image()
    assert img.size == (512, 512)


def test_empty_key_png_raises() -> None:
    with pytest.raises(QRImageError):
        OTPKey().png()


def test_empty_key_image_raises() -> None:
    with pytest.raises(QRImageError):
        OTPKey("").image()
