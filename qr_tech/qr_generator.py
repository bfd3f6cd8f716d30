"""Generate QR code artifacts using an external encoding library."""

import io
import logging
import time
from dataclasses import dataclass, field

import qrcode
from PIL import Image, ImageColor

from qr_tech import (
    DEFAULT_DARK,
    DEFAULT_LIGHT,
    DEFAULT_MARGIN,
    DEFAULT_WIDTH,
    MAX_QR_DATA_BYTES,
)

logger = logging.getLogger(__name__)

BACKENDS = ("qrcode", "segno")

_ERROR_CORRECTION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}

# Module size before scaling to the target width
_BOX_SIZE = 10


@dataclass(frozen=True)
class RenderConfig:
    """Fixed rendering configuration handed to the encoding library."""

    width: int = DEFAULT_WIDTH
    margin: int = DEFAULT_MARGIN
    dark: str = DEFAULT_DARK
    light: str = DEFAULT_LIGHT
    error_correction: str = "M"
    backend: str = "qrcode"

    def __post_init__(self):
        if self.width <= 0:
            raise ValueError(f"width must be positive, got {self.width}")
        if self.margin < 0:
            raise ValueError(f"margin cannot be negative, got {self.margin}")
        for name in ("dark", "light"):
            try:
                ImageColor.getrgb(getattr(self, name))
            except ValueError:
                raise ValueError(f"Unknown {name} colour '{getattr(self, name)}'")
        if self.error_correction not in _ERROR_CORRECTION:
            raise ValueError(
                f"Unknown error correction '{self.error_correction}'. "
                f"Choose from: {', '.join(_ERROR_CORRECTION)}"
            )
        if self.backend not in BACKENDS:
            raise ValueError(
                f"Unknown backend '{self.backend}'. Choose from: {', '.join(BACKENDS)}"
            )


@dataclass(frozen=True)
class QRArtifact:
    """A generated QR code held in memory until it is exported."""

    url: str
    image: Image.Image = field(compare=False)
    preview: str = field(default="", compare=False)
    created_at: float = field(default_factory=time.time)


def generate_qr_code(data: str, config: RenderConfig | None = None) -> QRArtifact:
    """Encode ``data`` into a QR code artifact.

    The symbol is rendered with the configured colours and quiet zone, then
    scaled to ``config.width`` pixels square. Nearest-neighbour resampling
    keeps module edges sharp.

    Args:
        data: The URL to encode.
        config: Rendering configuration. Defaults to ``RenderConfig()``.

    Returns:
        QRArtifact holding an RGB image and a terminal preview.

    Raises:
        ValueError: If the data is empty or exceeds QR code capacity.
    """
    config = config or RenderConfig()

    if not data.strip():
        raise ValueError("QR data cannot be empty.")

    size = len(data.encode("utf-8"))
    limit = MAX_QR_DATA_BYTES[config.error_correction]
    if size > limit:
        raise ValueError(
            f"QR data too long ({size} bytes). "
            f"Maximum is {limit} bytes at error correction level {config.error_correction}."
        )

    if config.backend == "segno":
        image, preview = _render_segno(data, config)
    else:
        image, preview = _render_qrcode(data, config)

    image = image.resize((config.width, config.width), Image.NEAREST)
    logger.debug("Encoded %d bytes with %s at %dpx", size, config.backend, config.width)
    return QRArtifact(url=data, image=image, preview=preview)


def _render_qrcode(data: str, config: RenderConfig) -> tuple[Image.Image, str]:
    qr = qrcode.QRCode(
        error_correction=_ERROR_CORRECTION[config.error_correction],
        box_size=_BOX_SIZE,
        border=config.margin,
    )
    qr.add_data(data)
    qr.make(fit=True)

    qr_image = qr.make_image(fill_color=config.dark, back_color=config.light)
    qr_image = qr_image.convert("RGB")

    out = io.StringIO()
    qr.print_ascii(out=out)
    return qr_image, out.getvalue()


def _render_segno(data: str, config: RenderConfig) -> tuple[Image.Image, str]:
    import segno

    qr = segno.make(data, error=config.error_correction.lower(), micro=False)

    buf = io.BytesIO()
    qr.save(
        buf,
        kind="png",
        scale=_BOX_SIZE,
        border=config.margin,
        dark=_hex(config.dark),
        light=_hex(config.light),
    )
    buf.seek(0)
    qr_image = Image.open(buf).convert("RGB")

    out = io.StringIO()
    qr.terminal(out=out, border=config.margin, compact=True)
    return qr_image, out.getvalue()


def image_to_png_bytes(image: Image.Image) -> bytes:
    """Serialize an image to PNG bytes."""
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def _hex(colour: str) -> str:
    # segno only understands hex and a subset of colour names
    return "#{:02x}{:02x}{:02x}".format(*ImageColor.getrgb(colour)[:3])
