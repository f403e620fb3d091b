"""Environment-driven settings shared by the CLI and the web app."""

import logging
import os
from pathlib import Path

DEFAULT_PORT = 8080


def site_dir() -> Path:
    """Root directory for static pages (``dist/`` inside it wins when present)."""
    return Path(os.environ.get("KNOWCARDS_SITE_DIR", Path.cwd()))


def data_file() -> Path:
    """Path of the JSON file holding the card collection."""
    default = site_dir() / "data" / "cards.json"
    return Path(os.environ.get("KNOWCARDS_DATA_FILE", default))


def port() -> int:
    """Port the server listens on."""
    return int(os.environ.get("PORT", DEFAULT_PORT))


def configure_logging(level_name: str | None = None) -> None:
    """Install a basic log handler.

    The level defaults to KNOWCARDS_LOG_LEVEL, then INFO.
    """
    level_name = (level_name or os.environ.get("KNOWCARDS_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
