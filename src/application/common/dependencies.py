# -*- coding: utf-8 -*-
"""
Dependencies - 의존성 주입 중앙 관리

FastAPI Dependency Injection을 위한 공통 의존성 함수 정의
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.adapters.cache.redis_client import RedisClient, get_redis_client
from src.settings.config import Settings, get_settings

# ==================== Redis Cache ====================


async def get_redis_dependency() -> RedisClient:
    """
    Redis Client Dependency

    Returns:
        RedisClient: Redis 클라이언트 인스턴스
    """
    return await get_redis_client()


# Type alias for Redis
RedisDep = Annotated[RedisClient, Depends(get_redis_dependency)]


# ==================== Settings ====================


@lru_cache
def get_settings_dependency() -> Settings:
    """
    Settings Dependency (Singleton)

    Returns:
        Settings: 애플리케이션 설정
    """
    return get_settings()


# Type alias for Settings
SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]
