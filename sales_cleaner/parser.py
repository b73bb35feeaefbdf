from __future__ import annotations

import logging
from typing import List

from .errors import EmptyInputError, MissingHeaderError
from .models import RawRecord
from .normalize import normalize_newlines
from .rules import DELIMITER

logger = logging.getLogger(__name__)


def parse(text: str) -> List[RawRecord]:
    """
    Split delimited text into raw records keyed by the header line.

    Short lines map the missing columns to None, extra values are dropped.
    No quoting is supported.
    """
    text = normalize_newlines(text or "").lstrip("\ufeff").strip()
    if not text:
        raise EmptyInputError("Input is empty")

    lines = text.split("\n")
    headers = lines[0].split(DELIMITER)
    if not any(h.strip() for h in headers):
        raise MissingHeaderError("First line has no column names")

    records: List[RawRecord] = []
    for line in lines[1:]:
        values = line.split(DELIMITER)
        records.append({
            h: (values[i] if i < len(values) else None)
            for i, h in enumerate(headers)
        })

    logger.debug("Parsed %d records with %d columns", len(records), len(headers))
    return records
