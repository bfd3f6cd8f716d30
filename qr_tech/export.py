"""Export generated QR codes to files and the system clipboard."""

import asyncio
import logging
import os
import shutil
import sys
import tempfile
import time
from abc import ABC, abstractmethod
from pathlib import Path

from PIL import Image

from qr_tech import FILENAME_PREFIX

logger = logging.getLogger(__name__)

PNG_MIME_TYPE = "image/png"
DEFAULT_CLIPBOARD_TIMEOUT = 10.0  # seconds


def export_filename(now_ms: int | None = None) -> str:
    """Return ``qr-tech-<unix-timestamp-millis>.png``."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{FILENAME_PREFIX}-{now_ms}.png"


def save_png(image: Image.Image, directory: str | os.PathLike, filename: str) -> Path:
    """Save ``image`` as PNG into ``directory``, creating it if needed."""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    image.save(path, "PNG")
    return path


# ---------------------------------------------------------------------------
# Clipboard backends
# ---------------------------------------------------------------------------

class ClipboardBackend(ABC):
    """Abstract base class for writing PNG images to the system clipboard."""

    @abstractmethod
    async def write_png(self, data: bytes) -> None:
        """Place ``data`` on the clipboard as ``image/png``.

        Raises:
            OSError: If the platform tool cannot be started or times out.
            RuntimeError: If the platform tool rejects the write.
        """
        ...

    @abstractmethod
    def name(self) -> str:
        ...


class CommandClipboard(ClipboardBackend):
    """Pipe PNG bytes into a clipboard command such as ``wl-copy`` or ``xclip``."""

    def __init__(self, command: list[str], timeout: float = DEFAULT_CLIPBOARD_TIMEOUT):
        self._command = command
        self._timeout = timeout

    def name(self) -> str:
        return self._command[0]

    async def write_png(self, data: bytes) -> None:
        await self._run(self._command, data)

    async def _run(self, command: list[str], stdin_data: bytes | None) -> None:
        # xclip and wl-copy fork to serve the selection; inherited pipes on
        # stdout/stderr would keep communicate() waiting until the timeout.
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        try:
            await asyncio.wait_for(proc.communicate(stdin_data), timeout=self._timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise TimeoutError(f"{command[0]} did not finish within {self._timeout}s")

        if proc.returncode != 0:
            raise RuntimeError(f"{command[0]} exited with status {proc.returncode}")


class MacClipboard(CommandClipboard):
    """macOS clipboard via ``osascript``, which reads the PNG from a file."""

    def __init__(self, timeout: float = DEFAULT_CLIPBOARD_TIMEOUT):
        super().__init__(["osascript"], timeout=timeout)

    async def write_png(self, data: bytes) -> None:
        tmp = tempfile.NamedTemporaryFile(suffix=".png", prefix="qr_tech_clip_", delete=False)
        try:
            tmp.write(data)
            tmp.close()
            script = f'set the clipboard to (read (POSIX file "{tmp.name}") as «class PNGf»)'
            await self._run(["osascript", "-e", script], None)
        finally:
            tmp.close()
            try:
                os.unlink(tmp.name)
            except OSError:
                pass


def get_clipboard(timeout: float = DEFAULT_CLIPBOARD_TIMEOUT) -> ClipboardBackend | None:
    """Return a clipboard backend for the current platform, or None.

    Prefers ``wl-copy`` on Wayland sessions, then ``xclip``. On macOS uses
    ``osascript``.
    """
    if sys.platform == "darwin":
        if shutil.which("osascript"):
            return MacClipboard(timeout=timeout)
        return None

    if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
        return CommandClipboard(["wl-copy", "--type", PNG_MIME_TYPE], timeout=timeout)

    if shutil.which("xclip"):
        return CommandClipboard(
            ["xclip", "-selection", "clipboard", "-t", PNG_MIME_TYPE, "-i"],
            timeout=timeout,
        )

    logger.debug("No clipboard tool found (tried wl-copy, xclip)")
    return None
