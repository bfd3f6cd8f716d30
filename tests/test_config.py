import pytest

from qr_tech.config import ControllerConfig, load_config_from_env


def test_defaults_without_environment():
    config = load_config_from_env({})
    assert config == ControllerConfig()
    assert config.output_dir == "."
    assert config.render.backend == "qrcode"
    assert not config.drop_stale


def test_environment_overrides():
    config = load_config_from_env(
        {"QR_TECH_OUTPUT_DIR": "/tmp/codes", "QR_TECH_BACKEND": "SEGNO"}
    )
    assert config.output_dir == "/tmp/codes"
    assert config.render.backend == "segno"


def test_unknown_backend_rejected():
    with pytest.raises(ValueError, match="Unknown backend"):
        load_config_from_env({"QR_TECH_BACKEND": "zxing"})
