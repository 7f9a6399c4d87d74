"""Logging setup shared by the API and the export worker."""
from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import yaml  # type: ignore[import-untyped]

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"


def configure_logging(config_path: str | Path | None = None) -> None:
    """Apply the YAML ``dictConfig`` at ``config_path``, or INFO to stderr when it is missing."""
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not path.exists():
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
        return
    with path.open("r", encoding="utf-8") as config_file:
        logging.config.dictConfig(yaml.safe_load(config_file))


__all__ = ["DEFAULT_CONFIG_PATH", "configure_logging"]
