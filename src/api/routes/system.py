from __future__ import annotations

from fastapi import APIRouter

from core.config import settings
from db.database import check_db_connection, get_db_info
from schemas.responses import HealthCheckResponse, RootResponse

router = APIRouter(tags=["System"])


@router.get("/health", tags=["Health"], response_model=HealthCheckResponse)
async def health() -> HealthCheckResponse:
    ok = await check_db_connection()
    return HealthCheckResponse(
        success=ok,
        status="ok" if ok else "degraded",
        version=settings.api_version,
        database=await get_db_info(),
    )


@router.get("/", tags=["Root"], response_model=RootResponse)
async def root() -> RootResponse:
    return RootResponse(
        success=True,
        message=f"Welcome to {settings.api_title}",
        version=settings.api_version,
        docs="/docs" if settings.environment != "production" else None,
        health="/health",
    )
