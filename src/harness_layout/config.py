"""Runtime configuration for harness-layout, read from the environment."""

from __future__ import annotations

import logging
import os
from pathlib import Path


SERVICE_NAME = "layout-service"
VERSION = "1.0.0"

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3003"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Relaxation is O(n^2) per pass; larger requests are rejected up front.
MAX_NODES = int(os.environ.get("HARNESS_LAYOUT_MAX_NODES", "2000"))

OUTPUT_DIR = Path(os.environ.get("HARNESS_LAYOUT_OUTPUT_DIR", Path.home() / ".harness-layout"))
TEMPLATES_DIR = Path(__file__).parent.parent.parent / "templates"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for the service entry points."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
