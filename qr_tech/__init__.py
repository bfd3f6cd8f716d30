"""QR Tech Generator: turn URLs into downloadable, copyable QR codes."""

__version__ = "1.0.0"

# Shared constants
DEFAULT_WIDTH = 300  # Output image width in pixels
DEFAULT_MARGIN = 2  # Quiet zone in modules
DEFAULT_DARK = "#00f5ff"
DEFAULT_LIGHT = "#1a1a2e"
# Byte-mode capacity at QR version 40, per error correction level
MAX_QR_DATA_BYTES = {"L": 2953, "M": 2331, "Q": 1663, "H": 1273}
FILENAME_PREFIX = "qr-tech"
