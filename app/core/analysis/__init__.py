"""
Passenger EDA — Analysis Engine
=================================
Statistical summarization and correlation analysis over a merged
train + test passenger dataset.

Components:
  ┌──────────────────────────────────────────────────────┐
  │ schema        — Column roles, bins, encoding table   │
  │ records       — Immutable records + AnalysisSession  │
  │ loader        — Delimited text → AnalysisSession     │
  │ statistics    — mean / median / SD / Pearson r       │
  │ aggregators   — Missing, numeric, categorical, bins  │
  │ correlation   — Encoded feature correlation table    │
  │ report        — Runs every section for a session     │
  │ export        — Merged CSV + JSON summary            │
  └──────────────────────────────────────────────────────┘

Usage:
  from app.core.analysis import load_session, build_report
  session = load_session(train_bytes, test_bytes)
  report = build_report(session)
"""

from .schema import (
    DatasetSchema, CategoryEncoding, TITANIC_SCHEMA, TITANIC_ENCODING,
    ORIGIN_COLUMN, UNKNOWN_LABEL,
)
from .errors import (
    EDAError, EmptyInputError, MissingInputFile, ParseFailure,
    SchemaMismatchError, EmptyDatasetError, AnalysisComputationError, ExportError,
)
from .records import Record, AnalysisSession, is_missing, to_number
from .loader import ParseOptions, parse_delimited, load_session
from .statistics import mean, median, standard_deviation, pearson_correlation
from .aggregators import (
    analyze_missing_values, summarize_numeric, summarize_categorical,
    bin_values, build_histograms, survival_by_group,
)
from .correlation import CorrelationTable, build_correlation_table
from .report import AnalysisReport, build_report
from .export import export_csv, export_json, build_json_summary

__all__ = [
    # ── Schema ──
    "DatasetSchema", "CategoryEncoding", "TITANIC_SCHEMA", "TITANIC_ENCODING",
    "ORIGIN_COLUMN", "UNKNOWN_LABEL",
    # ── Errors ──
    "EDAError", "EmptyInputError", "MissingInputFile", "ParseFailure",
    "SchemaMismatchError", "EmptyDatasetError", "AnalysisComputationError", "ExportError",
    # ── Records & loading ──
    "Record", "AnalysisSession", "is_missing", "to_number",
    "ParseOptions", "parse_delimited", "load_session",
    # ── Engine ──
    "mean", "median", "standard_deviation", "pearson_correlation",
    "analyze_missing_values", "summarize_numeric", "summarize_categorical",
    "bin_values", "build_histograms", "survival_by_group",
    "CorrelationTable", "build_correlation_table",
    "AnalysisReport", "build_report",
    "export_csv", "export_json", "build_json_summary",
]
