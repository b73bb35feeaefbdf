"""
Text and field normalization helpers.

Responsibilities:
- byte decoding to text (encoding detection + newline normalization)
- label casing for enumerated fields
- locale-independent date parsing
- positive number parsing and exact decimal arithmetic
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Optional

from charset_normalizer import from_bytes

from .rules import MAX_NUMBER_EXPONENT

logger = logging.getLogger(__name__)

_BOM = "\ufeff"
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def decode_csv_bytes(raw: bytes) -> tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to text with LF newlines and no BOM.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - If decode with the detected encoding fails, try UTF-8.
    - Last resort: UTF-8 with replacement characters, reported as a fallback.
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    # UTF-8 input with a BOM decodes through utf-8-sig so the BOM does not reach the header.
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    decode_fallback = False
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        decode_fallback = True
        try:
            text = raw.decode("utf-8")
            decode_used = "utf-8"
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"
        logger.warning("Decoding with %s failed, fell back to %s", detected, decode_used)

    text = normalize_newlines(text).lstrip(_BOM)

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
    }
    return text, report


def normalize_label(value: Optional[str]) -> str:
    """Trim, then upper-case the first character and lower-case the rest."""
    value = (value or "").strip()
    return value[:1].upper() + value[1:].lower()


def parse_date(value: Optional[str]) -> Optional[dt.date]:
    """
    Parse an ISO 8601 date or date-time into a calendar date.

    Date-times with an offset are moved to UTC first; naive ones keep their day.
    Returns None when the value is not a date.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        pass
    try:
        stamp = dt.datetime.fromisoformat(value)
    except ValueError:
        return None
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone(dt.timezone.utc)
    return stamp.date()


def parse_positive_number(value: Optional[str]) -> Optional[Decimal]:
    """Return the value as a Decimal when it is a plain number > 0, else None."""
    if value is None:
        return None
    value = value.strip()
    if not _NUMBER_RE.fullmatch(value):
        return None
    try:
        number = Decimal(value)
    except InvalidOperation:
        return None
    if number <= 0:
        return None
    if abs(number.adjusted()) > MAX_NUMBER_EXPONENT:
        return None
    return number


def exact_arithmetic():
    """Decimal context for amounts and totals: no rounding, no overflow."""
    return localcontext(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)
