# -*- coding: utf-8 -*-
"""
Redis Cache Service - Main Application

FastAPI 애플리케이션 진입점
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.cache.redis_client import close_redis_client, get_redis_client
from src.application.common.dependencies import RedisDep, SettingsDep
from src.application.common.exceptions import ApplicationError
from src.settings.config import settings
from src.settings.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    애플리케이션 생명주기 관리

    시작 시: 로깅 설정, Redis 연결 확인 (실패 시 기동 중단)
    종료 시: Redis 커넥션 풀 해제
    """
    setup_logging(settings)

    # Startup
    print("=" * 60)
    print(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    print("=" * 60)
    print(f"📍 Environment: {settings.env}")
    print(f"📦 Redis: {settings.redis.address} (db={settings.redis.db})")
    print("=" * 60)

    try:
        await get_redis_client()
        print("✅ Redis connection established")
    except ApplicationError as e:
        print(f"❌ Redis connection failed: {e}")
        raise

    yield

    # Shutdown
    print("=" * 60)
    print(f"🛑 Shutting down {settings.app_name}")
    print("=" * 60)

    try:
        await close_redis_client()
        print("✅ Redis connection closed")
    except ApplicationError as e:
        logger.warning(f"Redis close error: {e}")


# FastAPI 애플리케이션 생성
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Redis 캐시 어댑터 서비스",
    debug=settings.debug,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    openapi_url="/openapi.json" if not settings.is_production else None,
    lifespan=lifespan,
)


# ==================== Root Endpoint ====================


@app.get("/", tags=["Root"])
async def root(app_settings: SettingsDep) -> dict[str, str]:
    """루트 엔드포인트 - 서비스 정보"""
    return {
        "service": app_settings.app_name,
        "version": app_settings.app_version,
        "environment": app_settings.env,
        "status": "running",
    }


@app.get("/health", tags=["Health"])
async def health_check(redis: RedisDep) -> JSONResponse:
    """헬스체크 엔드포인트 (Redis ping 실패 시 503)"""
    if await redis.is_connected():
        return JSONResponse(status_code=200, content={"status": "healthy", "redis": "connected"})
    return JSONResponse(
        status_code=503, content={"status": "degraded", "redis": "disconnected"}
    )


# ==================== Error Handlers ====================


@app.exception_handler(ApplicationError)
async def application_exception_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """애플리케이션 예외 핸들러"""
    logger.warning(f"{request.method} {request.url.path} -> {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.uvicorn_reload,
        log_level=settings.log_level.lower(),
    )
