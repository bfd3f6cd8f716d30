"""Generator controller: validate, generate and export QR codes."""

import asyncio
import logging
from pathlib import Path
from typing import Callable
from urllib.parse import urlsplit

from qr_tech.config import ControllerConfig
from qr_tech.errors import (
    ClipboardUnavailable,
    EmptyInput,
    EncodingFailed,
    ExportError,
    MalformedUrl,
    NothingToExport,
    ValidationError,
)
from qr_tech.export import ClipboardBackend, export_filename, get_clipboard, save_png
from qr_tech.qr_generator import QRArtifact, RenderConfig, generate_qr_code, image_to_png_bytes
from qr_tech.state import (
    GeneratorState,
    finish_error,
    finish_ready,
    is_stale,
    start_loading,
)

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")

# Sentinel: detect the platform clipboard on first use
_DETECT_CLIPBOARD = object()

Encoder = Callable[[str, RenderConfig], QRArtifact]


def validate_url(text: str) -> str:
    """Trim ``text`` and check it is an absolute http(s) URL.

    Returns:
        The trimmed URL, otherwise unchanged.

    Raises:
        EmptyInput: If the input is blank.
        MalformedUrl: If it is not an absolute http:// or https:// URL.
    """
    url = text.strip()
    if not url:
        raise EmptyInput()

    if any(ch.isspace() for ch in url):
        raise MalformedUrl()

    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError for a non-numeric or out-of-range port
    except ValueError:
        raise MalformedUrl()

    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.hostname:
        raise MalformedUrl()

    return url


class GeneratorController:
    """Owns the generator state and the generate/download/copy actions.

    Args:
        config: Controller configuration. Defaults to ``ControllerConfig()``.
        encoder: Encoding collaborator; called in a worker thread.
        clipboard: Clipboard backend. ``None`` means no clipboard is
            available; by default the platform clipboard is detected on
            first copy.
        clock_ms: Returns the current unix time in milliseconds, used for
            export filenames.
    """

    def __init__(
        self,
        config: ControllerConfig | None = None,
        encoder: Encoder = generate_qr_code,
        clipboard=_DETECT_CLIPBOARD,
        clock_ms: Callable[[], int] | None = None,
    ):
        self.config = config or ControllerConfig()
        self._encoder = encoder
        self._clipboard = clipboard
        self._clock_ms = clock_ms
        self._state = GeneratorState()

    @property
    def state(self) -> GeneratorState:
        return self._state

    def validate(self, text: str) -> str:
        return validate_url(text)

    async def submit(self, text: str) -> QRArtifact:
        """Validate the raw input, then generate. Backs the generate action."""
        try:
            url = self.validate(text)
        except ValidationError as e:
            self._state = finish_error(self._state, e.user_message)
            raise
        return await self.generate(url)

    async def generate(self, url: str) -> QRArtifact:
        """Encode ``url`` and store the result as the exportable artifact.

        Overlapping calls are not cancelled. Unless ``drop_stale`` is set,
        whichever call resolves last determines the final state.

        Raises:
            EncodingFailed: If the encoding collaborator fails. The cause is
                chained and logged, never shown to the user.
        """
        self._state = start_loading(self._state)
        request_id = self._state.request_seq

        try:
            artifact = await asyncio.to_thread(self._encoder, url, self.config.render)
        except Exception as e:
            logger.debug(
                "QR generation error for request %d: %s", request_id, e, exc_info=True
            )
            if not self._superseded(request_id):
                self._state = finish_error(self._state, EncodingFailed.user_message)
            raise EncodingFailed() from e

        if self._superseded(request_id):
            logger.info(
                "Discarding result of request %d; request %d is newer",
                request_id, self._state.request_seq,
            )
            return artifact

        self._state = finish_ready(self._state, artifact)
        return artifact

    def _superseded(self, request_id: int) -> bool:
        return self.config.drop_stale and is_stale(self._state, request_id)

    def _require_artifact(self) -> QRArtifact:
        if not self._state.can_export:
            raise NothingToExport()
        return self._state.artifact

    def export_download(self, directory: str | None = None) -> Path:
        """Save the current artifact as ``qr-tech-<millis>.png``.

        Args:
            directory: Target directory. Defaults to ``config.output_dir``.

        Returns:
            Path of the written file.

        Raises:
            NothingToExport: If no QR code is ready.
            ExportError: If the file cannot be written.
        """
        artifact = self._require_artifact()
        now_ms = self._clock_ms() if self._clock_ms else None
        filename = export_filename(now_ms)
        try:
            path = save_png(artifact.image, directory or self.config.output_dir, filename)
        except OSError as e:
            logger.debug("Download error: %s", e, exc_info=True)
            raise ExportError("Failed to save QR code") from e
        logger.debug("Saved %s", path)
        return path

    async def export_clipboard(self) -> None:
        """Copy the current artifact to the clipboard as ``image/png``.

        Raises:
            NothingToExport: If no QR code is ready.
            ClipboardUnavailable: If the platform rejects the write.
        """
        artifact = self._require_artifact()
        data = image_to_png_bytes(artifact.image)

        clipboard = self._resolve_clipboard()
        if clipboard is None:
            logger.warning("No clipboard backend available")
            raise ClipboardUnavailable()

        try:
            await clipboard.write_png(data)
        except (OSError, RuntimeError) as e:
            logger.debug("Copy error via %s: %s", clipboard.name(), e, exc_info=True)
            raise ClipboardUnavailable() from e

    def _resolve_clipboard(self) -> ClipboardBackend | None:
        if self._clipboard is _DETECT_CLIPBOARD:
            self._clipboard = get_clipboard(timeout=self.config.clipboard_timeout)
        return self._clipboard
