"""
Liveness and readiness endpoints.

`/health` answers without touching the database and reports how newsletters
will be delivered and whether scheduled posts are being published.
`/health/db` additionally runs a trivial query against the content database.
"""

import asyncio
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.config import get_settings
from infrastructure.database import get_db
from services.scheduled_publisher import scheduled_publisher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])
settings = get_settings()

DB_CHECK_TIMEOUT_SECONDS = 5.0


def _delivery_status() -> dict:
    return {
        "email_provider": "resend" if settings.resend_api_key else "dev",
        "newsletter_batch_size": settings.newsletter_batch_size,
        "scheduled_publisher": "running" if scheduled_publisher.is_running else "stopped",
    }


async def _check_database(db: AsyncSession) -> str:
    try:
        await asyncio.wait_for(db.execute(text("SELECT 1")), timeout=DB_CHECK_TIMEOUT_SECONDS)
    except TimeoutError:
        logger.error("Content database did not answer within %.0fs", DB_CHECK_TIMEOUT_SECONDS)
        return "error: database timeout"
    except Exception as e:
        logger.error("Content database check failed: %s", e)
        return "error: database check failed"
    return "connected"


@router.get("/health")
async def health_check():
    """Service liveness plus delivery configuration."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "delivery": _delivery_status(),
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    database = await _check_database(db)
    return {
        "status": "healthy" if database == "connected" else "degraded",
        "database": database,
        "timestamp": datetime.now(UTC).isoformat(),
    }
