"""
Application Settings — All via environment variables with sensible defaults.

Dataset column roles live in app.core.analysis.schema, not here.
"""
import os


class Settings:
    # ── Server ──
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8001"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # ── CORS ──
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:8000,http://localhost:3000,*")

    # ── Analysis ──
    PREVIEW_ROWS: int = int(os.getenv("PREVIEW_ROWS", "5"))
    CORRELATION_SHAPE: str = os.getenv("CORRELATION_SHAPE", "full")  # full | outcome

    # ── Uploads ──
    MAX_UPLOAD_MB: int = int(os.getenv("MAX_UPLOAD_MB", "10"))


settings = Settings()
