"""Pipeline-level failures.

Row-level problems never raise; they only shorten the cleaned sequence.
These errors mean the input itself cannot be processed.
"""

from __future__ import annotations


class SalesPipelineError(Exception):
    """Base exception for all pipeline failures."""


class EmptyInputError(SalesPipelineError):
    """Raised when the input holds no text at all."""


class MissingHeaderError(SalesPipelineError):
    """Raised when the first line carries no column names."""
