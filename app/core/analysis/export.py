"""
Export Formatter — Merged CSV and JSON summary
================================================
  export_csv(session)          — merged records as CSV text, origin column last
  build_json_summary(session)  — fixed-shape summary dict, numbers rounded to 2 dp
  export_json(session)         — the summary serialised as indented JSON

Both exports refuse an empty session and wrap serialisation failures in
`ExportError`.
"""

import json
import logging
from typing import Any, Dict

import pandas as pd

from .aggregators import analyze_missing_values, count_values, summarize_numeric
from .errors import ExportError
from .records import AnalysisSession
from .report import require_data
from .schema import ORIGIN_COLUMN

logger = logging.getLogger(__name__)

CSV_FILENAME = "titanic_merged_data.csv"
JSON_FILENAME = "titanic_summary.json"


def _round(value: float, digits: int = 2) -> float:
    return round(float(value), digits)


def export_csv(session: AnalysisSession) -> str:
    """Header row plus one line per merged record; missing values are empty."""
    require_data(session)
    try:
        columns = [c for c in session.columns() if c != ORIGIN_COLUMN]
        for record in session.merged:
            for col in record.values:
                if col not in columns:
                    columns.append(col)
        columns.append(ORIGIN_COLUMN)
        df = pd.DataFrame(
            [record.to_dict() for record in session.merged], columns=columns, dtype=object,
        )
        text = df.to_csv(index=False, lineterminator="\n")
    except Exception as e:
        logger.error(f"CSV export failed: {e}", exc_info=True)
        raise ExportError("csv", e) from e
    logger.info(f"Exported {session.total_records} records as CSV")
    return text


def build_json_summary(session: AnalysisSession) -> Dict[str, Any]:
    """
    {datasetInfo, missingValues, numericStats, categoricalStats} with every
    number a real JSON number rounded to 2 decimals.
    """
    require_data(session)
    schema = session.schema
    records = session.merged
    return {
        "datasetInfo": {
            "totalRecords": session.total_records,
            "trainRecords": len(session.train),
            "testRecords": len(session.test),
            "features": list(schema.feature_columns),
        },
        "missingValues": {
            col: _round(pct) for col, pct in analyze_missing_values(records, schema).items()
        },
        "numericStats": {
            col: {
                "mean": _round(stats.mean),
                "median": _round(stats.median),
                "stdDev": _round(stats.std_dev),
            }
            for col, stats in summarize_numeric(records, schema).items()
        },
        "categoricalStats": {
            col: count_values(records, col) for col in schema.categorical_columns
        },
    }


def export_json(session: AnalysisSession) -> str:
    summary = build_json_summary(session)
    try:
        text = json.dumps(summary, indent=2)
    except (TypeError, ValueError) as e:
        logger.error(f"JSON export failed: {e}", exc_info=True)
        raise ExportError("json", e) from e
    logger.info(f"Exported JSON summary for {session.total_records} records")
    return text
