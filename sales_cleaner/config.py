from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()


def _get_int(name: str, default: int, minimum: int = 0) -> int:
    try:
        value = int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


PREVIEW_ROWS = _get_int("SALES_PREVIEW_ROWS", 10)
TOP_PRODUCTS = _get_int("SALES_TOP_PRODUCTS", 5)
LOG_LEVEL = os.getenv("SALES_LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once for the service."""
    logging.basicConfig(
        level=getattr(logging, level or LOG_LEVEL, logging.INFO),
        format=LOG_FORMAT,
    )
