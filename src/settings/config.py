# -*- coding: utf-8 -*-
"""
환경 설정 모듈

Pydantic Settings를 사용한 타입 안전 환경 변수 관리
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.application.common.exceptions import ConfigurationError


class RedisSettings(BaseSettings):
    """
    Redis 연결 설정

    REDIS_ 접두사 환경 변수에서 로드되며, 생성 후 변경 불가.
    캐시 어댑터는 이 객체만 전달받고 환경 변수를 직접 읽지 않는다.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ==================== 접속 정보 ====================
    host: str = Field(default="localhost", description="Redis 호스트")
    port: int = Field(default=6379, ge=1, le=65535, description="Redis 포트")
    password: str = Field(default="", description="Redis 비밀번호 (빈 값이면 인증 없음)")
    db: int = Field(default=0, ge=0, description="Redis DB 인덱스")

    # ==================== 타임아웃 (초) ====================
    dial_timeout: float = Field(default=5.0, gt=0, description="연결 타임아웃")
    read_timeout: float = Field(default=3.0, gt=0, description="읽기 타임아웃")
    write_timeout: float = Field(default=3.0, gt=0, description="쓰기 타임아웃")

    # ==================== 커넥션 풀 ====================
    pool_size: int = Field(default=10, ge=1, le=1000, description="최대 연결 수")
    min_idle_conns: int = Field(default=5, ge=0, description="connect() 시 미리 여는 연결 수")
    pool_timeout: float = Field(
        default=4.0, gt=0, description="풀에서 유휴 연결을 기다리는 최대 시간"
    )

    @property
    def address(self) -> str:
        """host:port 형식 주소"""
        return f"{self.host}:{self.port}"

    @property
    def socket_timeout(self) -> float:
        """소켓 읽기/쓰기 공통 타임아웃"""
        return max(self.read_timeout, self.write_timeout)

    @model_validator(mode="after")
    def validate_pool(self) -> "RedisSettings":
        """유휴 연결 수는 풀 크기를 넘을 수 없음"""
        if self.min_idle_conns > self.pool_size:
            raise ValueError("min_idle_conns는 pool_size 이하여야 합니다")
        return self


class Settings(BaseSettings):
    """애플리케이션 환경 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== 애플리케이션 설정 ====================
    app_name: str = Field(default="Redis Cache Service", description="애플리케이션 이름")
    app_version: str = Field(default="0.1.0", description="애플리케이션 버전")
    env: Literal["development", "staging", "production"] = Field(
        default="development", description="실행 환경"
    )
    debug: bool = Field(default=True, description="디버그 모드")

    # ==================== 서버 설정 ====================
    host: str = Field(default="0.0.0.0", description="서버 호스트")
    port: int = Field(default=8000, ge=1, le=65535, description="서버 포트")
    uvicorn_reload: bool = Field(default=True, description="Uvicorn 자동 리로드")

    # ==================== Redis 설정 ====================
    redis: RedisSettings = Field(default_factory=RedisSettings, description="Redis 연결 설정")

    # ==================== 로깅 설정 ====================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="로그 레벨"
    )
    log_file: str | None = Field(default="logs/cache_service.log", description="로그 파일 경로")
    log_max_bytes: int = Field(default=10485760, ge=1, description="로그 파일 최대 크기 (바이트)")
    log_backup_count: int = Field(default=5, ge=0, description="로그 파일 백업 개수")

    # ==================== Computed Properties ====================

    @property
    def is_production(self) -> bool:
        """운영 환경 여부"""
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        """개발 환경 여부"""
        return self.env == "development"


@lru_cache
def get_settings() -> Settings:
    """
    설정 싱글톤 인스턴스 반환

    @lru_cache 데코레이터를 사용하여 싱글톤 패턴 구현

    Raises:
        ConfigurationError: 환경 변수 값이 유효하지 않은 경우
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


# 전역 설정 인스턴스
settings = get_settings()
