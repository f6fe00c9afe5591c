"""
QR code rendering for provisioning URIs.

Uses ``qrcode`` for the symbol and Pillow for the raster image.
"""

import io
import logging

import qrcode
from PIL import Image
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage

from core.common import DEFAULT_IMAGE_SIZE

logger = logging.getLogger(__name__)

QR_BORDER = 4   # quiet zone, in modules


class QRImageError(RuntimeError):
    """Raised when content cannot be rendered as a QR code."""


def render_png(content: str, size: int = DEFAULT_IMAGE_SIZE) -> bytes:
    """
    Encode *content* as a QR code PNG at the highest error-correction level.

    Args:
        content: Text to encode, usually an otpauth:// URI.
        size:    Edge length of the square image in pixels.

    Returns:
        PNG file bytes.

    Raises:
        QRImageError: If *content* is empty, *size* is not positive, or the
            data does not fit in a QR symbol.
    """
    if not content:
        raise QRImageError("No content to encode")
    if size <= 0:
        raise QRImageError(f"Image size must be positive, got {size}")

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=1,
        border=QR_BORDER,
    )
    qr.add_data(content)
    try:
        qr.make(fit=True)
    except DataOverflowError as exc:
        raise QRImageError("Content too long for a QR code") from exc

    # Use the largest whole box size that fits, then stretch to the exact size.
    modules = qr.modules_count + 2 * QR_BORDER
    qr.box_size = max(1, size // modules)
    img = qr.make_image(image_factory=PilImage).get_image()
    if img.size != (size, size):
        img = img.resize((size, size), Image.Resampling.NEAREST)

    logger.debug("Rendered QR version %d at %dpx", qr.version, size)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_image(content: str, size: int = DEFAULT_IMAGE_SIZE) -> Image.Image:
    """Render *content* as with :func:`render_png` and decode the PNG."""
    img = Image.open(io.BytesIO(render_png(content, size)))
    img.load()
    return img
