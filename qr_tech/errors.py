"""Error taxonomy for QR Tech Generator."""


class QRTechError(Exception):
    """Base exception. ``user_message`` is safe to show to the user."""

    user_message = "Something went wrong."

    def __init__(self, user_message: str | None = None):
        if user_message is not None:
            self.user_message = user_message
        super().__init__(self.user_message)


class ValidationError(QRTechError):
    """Raised when the input URL is rejected before generation."""


class EmptyInput(ValidationError):
    user_message = "Please enter a valid URL"


class MalformedUrl(ValidationError):
    user_message = "Please enter a valid URL (starting with http:// or https://)"


class GenerationError(QRTechError):
    """Raised when the encoding collaborator fails."""


class EncodingFailed(GenerationError):
    user_message = "Failed to generate QR code. Please try again."


class ExportError(QRTechError):
    """Raised by the download and copy actions."""


class NothingToExport(ExportError):
    user_message = "Generate a QR code first."


class ClipboardUnavailable(ExportError):
    user_message = "Failed to copy QR code"
