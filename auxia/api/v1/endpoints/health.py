"""
Health Check Endpoints

- /health/live  - Basic liveness (app is running)
- /health/ready - Readiness check (database reachable, tables created)
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Dict, Any
import time

from auxia.core.config import settings
from auxia.core.database import get_db
from auxia.core.logging_config import logger


router = APIRouter(prefix="/health", tags=["Health Checks"])


async def check_database(db: AsyncSession) -> Dict[str, Any]:
    """Check database connectivity and that the schema exists"""
    start = time.time()
    try:
        await db.execute(text("SELECT 1"))
        try:
            await db.execute(text("SELECT COUNT(*) FROM courses"))
            tables_ok = True
        except Exception:
            tables_ok = False

        return {
            "status": "healthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "tables_ready": tables_ok,
        }
    except Exception as e:
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "tables_ready": False,
            "error": str(e),
        }


@router.get("/live")
async def liveness():
    return {"status": "alive", "timestamp": datetime.utcnow().isoformat()}


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    database = await check_database(db)
    ready = database["status"] == "healthy" and database["tables_ready"]
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "environment": settings.ENVIRONMENT,
            "checks": {"database": database},
        },
    )
