import pytest
from PIL import Image

from qr_tech.config import ControllerConfig
from qr_tech.controller import GeneratorController
from qr_tech.export import ClipboardBackend
from qr_tech.qr_generator import QRArtifact


class FakeClipboard(ClipboardBackend):
    """Records every payload written to it."""

    def __init__(self, error: Exception | None = None):
        self.writes: list[bytes] = []
        self._error = error

    def name(self) -> str:
        return "fake"

    async def write_png(self, data: bytes) -> None:
        if self._error is not None:
            raise self._error
        self.writes.append(data)


def make_artifact(url: str = "https://example.com") -> QRArtifact:
    return QRArtifact(url=url, image=Image.new("RGB", (30, 30), "#1a1a2e"), preview="##")


@pytest.fixture
def encoder_calls():
    return []


@pytest.fixture
def fake_encoder(encoder_calls):
    """Encoder that records its calls and returns a tiny artifact."""
    def _encode(url, config):
        encoder_calls.append((url, config))
        return make_artifact(url)
    return _encode


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def controller(fake_encoder, clipboard, tmp_path):
    return GeneratorController(
        ControllerConfig(output_dir=str(tmp_path)),
        encoder=fake_encoder,
        clipboard=clipboard,
        clock_ms=lambda: 1700000000000,
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("QR_TECH_OUTPUT_DIR", raising=False)
    monkeypatch.delenv("QR_TECH_BACKEND", raising=False)
