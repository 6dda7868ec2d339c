# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine, built only when DATABASE_URL is set."""
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from selection_service.core.config import settings


def build_engine(url: Optional[str] = None) -> Engine:
    """Create an engine for *url* (defaults to settings.DATABASE_URL)."""
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        # Single shared connection so in-memory SQLite survives across calls
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )


engine: Optional[Engine] = build_engine() if settings.DATABASE_URL else None
