"""
Passenger EDA Engine — FastAPI Server (Port 8001)
===================================================
Upload a train and a test CSV, get back missing-value rates, numeric and
categorical summaries, histograms, survival breakdowns and a correlation
table; export the merged data as CSV or the summary as JSON.

Run:
  uvicorn main:app --host 0.0.0.0 --port 8001 --reload
  # or
  python main.py
"""

import logging
import os
from contextlib import asynccontextmanager

# Load .env file BEFORE anything reads os.getenv()
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from app.config import settings  # noqa: E402

# ── Logging ──
logging.basicConfig(
    level="DEBUG" if settings.DEBUG else settings.LOG_LEVEL,
    format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("passenger_eda")


@asynccontextmanager
async def lifespan(app: FastAPI):
    from app.core.analysis import TITANIC_SCHEMA, TITANIC_ENCODING

    logger.info(
        f"Engine ready: {len(TITANIC_SCHEMA.numeric_columns)} numeric, "
        f"{len(TITANIC_SCHEMA.categorical_columns)} categorical columns, "
        f"encoding v{TITANIC_ENCODING.version}, correlation shape '{settings.CORRELATION_SHAPE}'"
    )
    yield
    logger.info("Shutting down Passenger EDA Engine")


# ── Create FastAPI app ──
app = FastAPI(
    title="Passenger EDA Engine",
    description=(
        "Exploratory data analysis for a train/test passenger dataset: "
        "missing values, descriptive statistics, categorical frequencies, "
        "histograms, survival by group and feature correlations, "
        "plus CSV / JSON export."
    ),
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Mount all API routes ──
from app.api.router import api_router  # noqa: E402
app.include_router(api_router, prefix="/api/v1")


# ── Root ──
@app.get("/", tags=["Root"])
async def root():
    return {
        "service": "Passenger EDA Engine",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "load": "POST /api/v1/eda/load",
            "analysis": "/api/v1/eda/ (overview, sample, missing-values, numeric-stats, "
                        "categorical-stats, histograms, survival, correlations, report)",
            "export": "/api/v1/eda/export/{csv,json}",
        },
        "health": "/api/v1/eda/health",
    }


# ── Direct run ──
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=os.getenv("RELOAD", "true").lower() == "true",
        log_level="debug" if settings.DEBUG else "info",
    )
