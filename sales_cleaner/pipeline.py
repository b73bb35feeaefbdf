"""
One pipeline run: parse, clean, summarize.

Each run builds its own sequences and shares nothing with other runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .aggregate import summarize
from .cleaner import clean_with_report
from .models import CleaningReport, CleanRecord, RawRecord, Summary
from .parser import parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    raw: List[RawRecord]
    clean: List[CleanRecord]
    report: CleaningReport
    summary: Summary


def run_pipeline(text: str) -> PipelineResult:
    """Raises SalesPipelineError when the text itself is unusable."""
    raw = parse(text)
    cleaned, report = clean_with_report(raw)
    summary = summarize(cleaned)
    logger.info("Pipeline run: %d rows before cleaning, %d after", report.rows_before, report.rows_after)
    return PipelineResult(raw=raw, clean=cleaned, report=report, summary=summary)
