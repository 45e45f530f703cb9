"""Liveness and database readiness."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from peer360.api.deps import DbDep

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health(db: DbDep):
    """Report ok when the database answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        return JSONResponse(status_code=503, content={"status": "degraded", "database": "error"})
    return {"status": "ok", "database": "ok"}
