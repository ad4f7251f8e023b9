"""
Summary Assembler — Runs every analysis view over one session
===============================================================
`build_report()` computes the sections in display order. Sections that
complete are kept; the first unexpected failure is wrapped in an
`AnalysisComputationError` that names the section and carries what was
already computed.

Sections:
  overview → preview → missing_values → numeric_stats → categorical_stats
  → histograms → survival → correlations
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from .aggregators import (
    analyze_missing_values, build_histograms, summarize_categorical,
    summarize_numeric, survival_by_group,
)
from .correlation import SHAPE_FULL, build_correlation_table
from .errors import AnalysisComputationError, EmptyDatasetError
from .records import AnalysisSession
from .schema import CategoryEncoding, TITANIC_ENCODING

logger = logging.getLogger(__name__)


@dataclass
class AnalysisReport:
    sections: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.sections)


def require_data(session: AnalysisSession) -> None:
    if session is None or session.is_empty:
        raise EmptyDatasetError()


def _serialize_list_map(data: Dict[str, List[Any]]) -> Dict[str, List[Dict[str, Any]]]:
    return {key: [item.to_dict() for item in items] for key, items in data.items()}


def build_report(
    session: AnalysisSession,
    encoding: CategoryEncoding = TITANIC_ENCODING,
    correlation_shape: str = SHAPE_FULL,
    preview_rows: int = 5,
) -> AnalysisReport:
    """Compute every analysis section for the session."""
    require_data(session)
    schema = session.schema
    records = session.merged

    steps: List[Tuple[str, Callable[[], Any]]] = [
        ("overview", session.overview),
        ("preview", lambda: session.preview(preview_rows)),
        ("missing_values", lambda: analyze_missing_values(records, schema)),
        ("numeric_stats", lambda: {
            col: stats.to_dict() for col, stats in summarize_numeric(records, schema).items()
        }),
        ("categorical_stats", lambda: _serialize_list_map(summarize_categorical(records, schema))),
        ("histograms", lambda: _serialize_list_map(build_histograms(records, schema))),
        ("survival", lambda: {
            col: survival_by_group(session.train, col, schema).to_dict()
            for col in schema.survival_group_columns
        }),
        ("correlations", lambda: build_correlation_table(
            session.train, schema, encoding, correlation_shape,
        ).to_dict()),
    ]

    report = AnalysisReport()
    for name, compute in steps:
        try:
            report.sections[name] = compute()
        except Exception as e:
            logger.error(f"Analysis section '{name}' failed: {e}", exc_info=True)
            raise AnalysisComputationError(name, e, partial=report.sections) from e

    logger.info(
        f"Analysis complete: {len(report.sections)} sections over "
        f"{session.total_records} records"
    )
    return report
