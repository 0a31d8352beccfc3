"""
MapIt Backend: Database Check Route
=====================================

What:  GET /test-db reports whether the database is configured and reachable.
How:   Runs `SELECT now()` through the process-wide pool.
Who:   Operators and deployment smoke tests.

Unlike the other routes, this one formats its own failure body, because the
response always carries `hasDbUrl`:

    200 {"success": true,  "message": "...", "hasDbUrl": true, "currentTime": "..."}
    500 {"success": false, "error": "<reason>", "hasDbUrl": false}
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from mapit.config import settings
from mapit.database import get_database
from mapit.schemas.common import DatabaseCheckError, DatabaseCheckResponse
from mapit.services.base import describe_store_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/test-db",
    response_model=DatabaseCheckResponse,
    responses={500: {"description": "Not configured or unreachable", "model": DatabaseCheckError}},
    summary="Database connectivity check",
)
async def test_database(request: Request):
    has_db_url = settings.has_database_config

    try:
        database = get_database(request)
        current_time = await database.current_time()
    except Exception as e:
        reason = describe_store_error(e)
        logger.warning("Database check failed: %s", reason)
        body = DatabaseCheckError(error=reason, has_db_url=has_db_url)
        return JSONResponse(status_code=500, content=body.model_dump(by_alias=True))

    return DatabaseCheckResponse(has_db_url=True, current_time=current_time)
