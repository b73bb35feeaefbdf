from __future__ import annotations

import base64
import hashlib
from typing import Sequence

from .models import CleanRecord, NormalizedCsv
from .rules import CLEAN_COLUMNS, DELIMITER, EXPORT_FILENAME, TARGET_ENCODING


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def to_csv(records: Sequence[CleanRecord]) -> str:
    """
    Serialize clean records back to the input format.

    Values are joined as-is without quoting, so the output re-parses to the
    same records.
    """
    lines = [DELIMITER.join(CLEAN_COLUMNS)]
    for record in records:
        row = record.as_row()
        lines.append(DELIMITER.join(row[c] for c in CLEAN_COLUMNS))
    return "\n".join(lines) + "\n"


def to_csv_bytes(records: Sequence[CleanRecord]) -> bytes:
    return to_csv(records).encode(TARGET_ENCODING)


def to_normalized_csv(records: Sequence[CleanRecord]) -> NormalizedCsv:
    data = to_csv_bytes(records)
    return NormalizedCsv(
        sha256=sha256_hex(data),
        encoding=TARGET_ENCODING,
        filename=EXPORT_FILENAME,
        content_b64=base64.b64encode(data).decode("ascii"),
    )
