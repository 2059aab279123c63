"""
Health Check Endpoints

Endpoints:
- /health/live  - Basic liveness (app is running)
- /health/ready - Readiness check (database reachable)
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Any
import time

from app.core.config import settings
from app.core.database import get_session_local
from app.core.logging_config import logger
from app.core.types import utcnow


router = APIRouter(prefix="/health", tags=["Health Checks"])


async def check_database() -> Dict[str, Any]:
    """Check database connectivity"""
    start = time.time()
    try:
        session_factory = get_session_local()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "error": str(e),
        }

    return {
        "status": "healthy",
        "latency_ms": round((time.time() - start) * 1000, 2),
    }


@router.get("/live")
async def liveness():
    return {"status": "alive", "timestamp": utcnow().isoformat()}


@router.get("/ready")
async def readiness():
    """503 until the database answers"""
    database = await check_database()
    body = {
        "status": "ready" if database["status"] == "healthy" else "not_ready",
        "timestamp": utcnow().isoformat(),
        "checks": {
            "database": database,
            "email": {"configured": settings.is_email_configured()},
        },
    }
    return JSONResponse(status_code=200 if database["status"] == "healthy" else 503, content=body)
