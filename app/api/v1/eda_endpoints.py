"""
EDA Endpoints
==============
Load a train/test pair and serve every analysis view of the merged dataset:

  POST /eda/load               — Upload train_file + test_file, replace the session
  GET  /eda/overview           — Record counts + feature list
  GET  /eda/sample             — First N merged rows (df.head())
  GET  /eda/missing-values     — % missing per column
  GET  /eda/numeric-stats      — mean / median / std_dev per numeric column
  GET  /eda/categorical-stats  — value counts + percentages
  GET  /eda/histograms         — Age / Fare fixed-bin histograms
  GET  /eda/survival           — Survived vs died per Sex or Pclass
  GET  /eda/correlations       — Full matrix or correlation-with-outcome vector
  GET  /eda/report             — Every section at once
  GET  /eda/export/csv         — Merged dataset download
  GET  /eda/export/json        — Summary download
  GET  /eda/health             — Service status
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from app.config import settings
from app.core.analysis import (
    TITANIC_ENCODING, AnalysisSession, EDAError, EmptyDatasetError,
    analyze_missing_values, build_correlation_table, build_histograms,
    build_report, export_csv, export_json, load_session,
    summarize_categorical, summarize_numeric, survival_by_group,
)
from app.core.analysis.export import CSV_FILENAME, JSON_FILENAME

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/eda", tags=["EDA"])


# ═══════════════════════════════════════════════════════════════
# SESSION SLOT (replaced wholesale by each successful load)
# ═══════════════════════════════════════════════════════════════

_state: Dict[str, Any] = {}


def _current_session() -> AnalysisSession:
    session = _state.get("session")
    if session is None or session.is_empty:
        raise EmptyDatasetError()
    return session


def reset_session() -> None:
    _state.clear()


def _http_error(e: EDAError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_detail())


def _unexpected(action: str, e: Exception) -> HTTPException:
    logger.error(f"{action} error: {e}", exc_info=True)
    return HTTPException(
        status_code=500,
        detail={"error": "internal_error", "message": f"{action} failed: {e}"},
    )


# ═══════════════════════════════════════════════════════════════
# RESPONSE SCHEMAS
# ═══════════════════════════════════════════════════════════════

class OverviewResponse(BaseModel):
    total_records: int = 0
    train_records: int = 0
    test_records: int = 0
    features: List[str] = []


class SampleDataResponse(BaseModel):
    columns: List[str] = []
    rows: List[Dict[str, Any]] = []
    total_rows: int = 0
    total_columns: int = 0


class HealthResponse(BaseModel):
    status: str = "healthy"
    dataset_loaded: bool = False
    total_records: int = 0
    encoding_version: str = TITANIC_ENCODING.version


# ═══════════════════════════════════════════════════════════════
# 1. LOAD
# ═══════════════════════════════════════════════════════════════

async def _read_upload(upload: Optional[UploadFile]) -> Optional[bytes]:
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    limit = settings.MAX_UPLOAD_MB * 1024 * 1024
    if len(data) > limit:
        raise HTTPException(
            status_code=413,
            detail={
                "error": "file_too_large",
                "message": f"{upload.filename} exceeds {settings.MAX_UPLOAD_MB} MB",
            },
        )
    return data


@router.post("/load", response_model=OverviewResponse)
async def load_dataset(
        train_file: Optional[UploadFile] = File(None, description="Training CSV (with outcome)"),
        test_file: Optional[UploadFile] = File(None, description="Test CSV (no outcome)"),
):
    """
    Parse train then test, merge, and make the result the current session.
    On any failure the previous session stays in place.
    """
    try:
        train_data = await _read_upload(train_file)
        test_data = await _read_upload(test_file)
        session = load_session(train_data, test_data)
    except EDAError as e:
        logger.warning(f"Load rejected: {e.message}")
        raise _http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("Load", e)

    _state["session"] = session
    return OverviewResponse(**session.overview())


# ═══════════════════════════════════════════════════════════════
# 2. OVERVIEW & SAMPLE
# ═══════════════════════════════════════════════════════════════

@router.get("/overview", response_model=OverviewResponse)
async def get_overview():
    try:
        return OverviewResponse(**_current_session().overview())
    except EDAError as e:
        raise _http_error(e)


@router.get("/sample", response_model=SampleDataResponse)
async def get_sample_data(
        n: int = Query(settings.PREVIEW_ROWS, ge=1, le=50, description="Number of sample rows"),
):
    """First N rows of the merged dataset for preview."""
    try:
        session = _current_session()
    except EDAError as e:
        raise _http_error(e)
    columns = session.columns()
    return SampleDataResponse(
        columns=columns,
        rows=session.preview(n),
        total_rows=session.total_records,
        total_columns=len(columns),
    )


# ═══════════════════════════════════════════════════════════════
# 3. SUMMARIES
# ═══════════════════════════════════════════════════════════════

@router.get("/missing-values")
async def get_missing_values():
    try:
        session = _current_session()
        return {"missing_values": analyze_missing_values(session.merged, session.schema)}
    except EDAError as e:
        raise _http_error(e)
    except Exception as e:
        raise _unexpected("Missing-value analysis", e)


@router.get("/numeric-stats")
async def get_numeric_stats():
    try:
        session = _current_session()
        stats = summarize_numeric(session.merged, session.schema)
        return {"numeric_stats": {col: s.to_dict() for col, s in stats.items()}}
    except EDAError as e:
        raise _http_error(e)
    except Exception as e:
        raise _unexpected("Numeric summary", e)


@router.get("/categorical-stats")
async def get_categorical_stats():
    try:
        session = _current_session()
        stats = summarize_categorical(session.merged, session.schema)
        return {
            "categorical_stats": {
                col: [c.to_dict() for c in counts] for col, counts in stats.items()
            },
        }
    except EDAError as e:
        raise _http_error(e)
    except Exception as e:
        raise _unexpected("Categorical summary", e)


@router.get("/histograms")
async def get_histograms():
    try:
        session = _current_session()
        hists = build_histograms(session.merged, session.schema)
        return {"histograms": {col: [b.to_dict() for b in bins] for col, bins in hists.items()}}
    except EDAError as e:
        raise _http_error(e)
    except Exception as e:
        raise _unexpected("Histogram", e)


# ═══════════════════════════════════════════════════════════════
# 4. OUTCOME VIEWS
# ═══════════════════════════════════════════════════════════════

@router.get("/survival")
async def get_survival(
        group_by: str = Query("Sex", description="Grouping column: Sex | Pclass"),
):
    """Survived vs died per group value, train records only."""
    try:
        session = _current_session()
    except EDAError as e:
        raise _http_error(e)
    if group_by not in session.schema.survival_group_columns:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "invalid_group",
                "message": f"group_by must be one of {list(session.schema.survival_group_columns)}",
            },
        )
    try:
        report = survival_by_group(session.train, group_by, session.schema)
        return {"group_by": group_by, "groups": report.to_dict()}
    except Exception as e:
        raise _unexpected("Survival analysis", e)


@router.get("/correlations")
async def get_correlations(
        shape: str = Query(settings.CORRELATION_SHAPE, pattern="^(full|outcome)$",
                           description="full (N×N matrix) | outcome (vs. outcome column)"),
):
    try:
        session = _current_session()
        table = build_correlation_table(session.train, session.schema, TITANIC_ENCODING, shape)
        return table.to_dict()
    except EDAError as e:
        raise _http_error(e)
    except Exception as e:
        raise _unexpected("Correlation analysis", e)


@router.get("/report")
async def get_report(
        shape: str = Query(settings.CORRELATION_SHAPE, pattern="^(full|outcome)$"),
        n: int = Query(settings.PREVIEW_ROWS, ge=1, le=50),
):
    """All analysis sections in one response."""
    try:
        report = build_report(
            _current_session(),
            encoding=TITANIC_ENCODING,
            correlation_shape=shape,
            preview_rows=n,
        )
        return report.to_dict()
    except EDAError as e:
        raise _http_error(e)


# ═══════════════════════════════════════════════════════════════
# 5. EXPORT
# ═══════════════════════════════════════════════════════════════

def _attachment(content: str, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/csv")
async def export_merged_csv():
    try:
        return _attachment(export_csv(_current_session()), "text/csv; charset=utf-8", CSV_FILENAME)
    except EDAError as e:
        raise _http_error(e)


@router.get("/export/json")
async def export_summary_json():
    try:
        return _attachment(export_json(_current_session()), "application/json", JSON_FILENAME)
    except EDAError as e:
        raise _http_error(e)


# ═══════════════════════════════════════════════════════════════
# 6. HEALTH
# ═══════════════════════════════════════════════════════════════

@router.get("/health", response_model=HealthResponse)
async def health():
    session = _state.get("session")
    return HealthResponse(
        dataset_loaded=session is not None and not session.is_empty,
        total_records=session.total_records if session is not None else 0,
    )
