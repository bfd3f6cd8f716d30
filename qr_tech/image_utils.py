"""Image checks for generated QR codes."""

import logging
from enum import Enum

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)


class VerifyResult(Enum):
    """Result of QR scannability verification."""
    SCANNABLE = "scannable"
    NOT_SCANNABLE = "not_scannable"
    SKIPPED = "skipped"  # pyzbar not installed


def verify_qr_scannable(image: Image.Image) -> tuple[VerifyResult, str | None]:
    """Attempt to decode a QR code from a generated image.

    Uses pyzbar if available, otherwise returns SKIPPED. The default palette
    is light-on-dark, which zbar does not read, so a second attempt is made
    on the inverted greyscale image.

    Args:
        image: The image to verify.

    Returns:
        Tuple of (VerifyResult, decoded_data: str | None).
    """
    try:
        from pyzbar.pyzbar import decode as pyzbar_decode
    except ImportError:
        return VerifyResult.SKIPPED, None

    try:
        grey = image.convert("L")
        for candidate in (grey, ImageOps.invert(grey)):
            results = pyzbar_decode(candidate)
            if results:
                decoded = results[0].data.decode("utf-8")
                return VerifyResult.SCANNABLE, decoded
        return VerifyResult.NOT_SCANNABLE, None
    except Exception as e:
        logger.debug("QR verification failed: %s", e)
        return VerifyResult.NOT_SCANNABLE, None
