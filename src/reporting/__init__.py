"""Reporting module -- per-attempt and per-run JSON reports."""

from .report import (
    AttemptReport,
    RunReport,
    RunReportBuilder,
)

__all__ = [
    "AttemptReport",
    "RunReport",
    "RunReportBuilder",
]
