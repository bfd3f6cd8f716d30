"""Configuration for the generator controller."""

import os
from dataclasses import dataclass, field, replace

from qr_tech.export import DEFAULT_CLIPBOARD_TIMEOUT
from qr_tech.qr_generator import RenderConfig

ENV_OUTPUT_DIR = "QR_TECH_OUTPUT_DIR"
ENV_BACKEND = "QR_TECH_BACKEND"


@dataclass(frozen=True)
class ControllerConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    output_dir: str = "."
    # Discard results of generate calls superseded by a newer one
    drop_stale: bool = False
    clipboard_timeout: float = DEFAULT_CLIPBOARD_TIMEOUT


def load_config_from_env(environ=None) -> ControllerConfig:
    """Build a ControllerConfig, honouring QR_TECH_* environment variables.

    Raises:
        ValueError: If QR_TECH_BACKEND names an unknown backend.
    """
    environ = os.environ if environ is None else environ
    config = ControllerConfig()

    backend = environ.get(ENV_BACKEND)
    if backend:
        config = replace(config, render=replace(config.render, backend=backend.lower()))

    output_dir = environ.get(ENV_OUTPUT_DIR)
    if output_dir:
        config = replace(config, output_dir=output_dir)

    return config
