import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from arthavidhi.core.db import Database, get_database

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health(request: Request, database: Database = Depends(get_database)):
    try:
        database.ping()
    except SQLAlchemyError:
        logger.exception("Health check: database unreachable")
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "database": "unreachable"},
        )

    return {"status": "ok", "database": "ok", "version": request.app.version}
