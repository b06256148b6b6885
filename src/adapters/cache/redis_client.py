# -*- coding: utf-8 -*-
"""
Redis Cache Client - Redis 캐싱 클라이언트

커넥션 풀 기반 Redis 어댑터: 연결 확인/종료와 단일 명령(set/get/delete/exists/
expire/incr/decr/ttl) 래핑. 값은 가공하지 않고 그대로 저장/반환한다.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any, TypeVar

import redis.asyncio as aioredis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import RedisError, ResponseError

from src.application.common.exceptions import (
    CacheConnectionError,
    CacheKeyNotFoundError,
    CacheSerializationError,
    CacheStoreError,
    CacheValueTypeError,
    InvalidInputError,
)
from src.settings.config import RedisSettings, settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheValue = str | bytes | int | float
Expiration = int | float | timedelta

# 전송 계층 오류 (redis-py가 감싸지 못한 소켓 오류 포함)
_REDIS_ERRORS = (RedisError, OSError)

# INCR/DECR 대상 값이 숫자가 아닐 때의 서버 응답
_NUMERIC_ERROR_MARKERS = ("not an integer", "WRONGTYPE")


def _to_milliseconds(expiration: Expiration) -> int:
    """만료 시간을 밀리초로 변환 (0보다 크면 최소 1ms)"""
    if isinstance(expiration, timedelta):
        seconds = expiration.total_seconds()
    elif isinstance(expiration, bool) or not isinstance(expiration, (int, float)):
        raise InvalidInputError("expiration", "must be seconds (int/float) or timedelta")
    else:
        seconds = float(expiration)

    if seconds < 0:
        raise InvalidInputError("expiration", "must not be negative")

    milliseconds = round(seconds * 1000)
    if seconds > 0 and milliseconds == 0:
        return 1
    return milliseconds


class RedisClient:
    """
    Redis 비동기 클라이언트

    단일 커넥션 풀 핸들을 소유하며, 동시 호출의 안전성은 풀에 위임한다.
    생성 시에는 네트워크 I/O가 없고, 설정 오류는 connect() 또는 첫 연산에서 드러난다.
    """

    def __init__(self, config: RedisSettings, redis: aioredis.Redis | None = None) -> None:
        """
        Args:
            config: Redis 연결 설정
            redis: 이미 생성된 클라이언트 (None이면 설정으로 커넥션 풀 생성).
                전달된 클라이언트도 close() 시 함께 종료된다.
        """
        self.config = config
        self.redis: aioredis.Redis | None = (
            redis if redis is not None else self._create_client(config)
        )
        self._connected = False

    @staticmethod
    def _create_client(config: RedisSettings) -> aioredis.Redis:
        """설정으로 커넥션 풀과 클라이언트 생성 (연결은 지연 생성)"""
        pool = aioredis.BlockingConnectionPool(
            host=config.host,
            port=config.port,
            db=config.db,
            password=config.password or None,
            socket_connect_timeout=config.dial_timeout,
            socket_timeout=config.socket_timeout,
            max_connections=config.pool_size,
            timeout=config.pool_timeout,
            retry=Retry(NoBackoff(), 0),  # 재시도는 호출자 책임
            decode_responses=True,  # 자동 UTF-8 디코딩
            # UTF-8이 아닌 bytes 값도 손실 없이 str로 왕복
            encoding_errors="surrogateescape",
        )
        return aioredis.Redis.from_pool(pool)

    # ==================== 연결 관리 ====================

    @property
    def connected(self) -> bool:
        """connect() 또는 연산이 한 번이라도 성공했는지 여부"""
        return self._connected

    async def connect(self) -> None:
        """
        Redis 연결 확인

        ping으로 접속/인증을 확인한 뒤 min_idle_conns 개수만큼 연결을 미리 연다.
        재시도하지 않는다.

        Raises:
            CacheConnectionError: 서버에 접속할 수 없거나 인증에 실패한 경우
        """
        client = self._require_client()
        try:
            await client.ping()
            warmup = self.config.min_idle_conns - 1
            if warmup > 0:
                # 모든 ping이 끝난 뒤 첫 오류를 전달
                results = await asyncio.gather(
                    *(client.ping() for _ in range(warmup)), return_exceptions=True
                )
                for result in results:
                    if isinstance(result, BaseException):
                        raise result
        except _REDIS_ERRORS as e:
            logger.error(f"Redis connection failed ({self.config.address}): {e}")
            raise CacheConnectionError(
                f"failed to connect to Redis: {e}",
                details={"host": self.config.host, "port": self.config.port},
            ) from e

        self._connected = True
        logger.info(f"Successfully connected to Redis at {self.config.address}")

    async def close(self) -> None:
        """
        Redis 연결 종료

        풀의 모든 연결을 해제한다. 핸들이 없으면 아무 것도 하지 않는다.

        Raises:
            CacheStoreError: 연결 해제 중 오류가 난 경우
        """
        if self.redis is None:
            return

        client, self.redis = self.redis, None
        self._connected = False
        try:
            await client.aclose()
        except _REDIS_ERRORS as e:
            raise CacheStoreError("close", str(e)) from e
        logger.info(f"Redis connection closed ({self.config.address})")

    def get_client(self) -> aioredis.Redis:
        """
        내부 Redis 클라이언트 반환

        래핑되지 않은 명령이 필요한 경우에만 사용한다. 수명은 이 어댑터에 묶여 있으므로
        호출자가 직접 close/aclose 해서는 안 된다.
        """
        return self._require_client()

    async def is_connected(self) -> bool:
        """
        연결 상태 확인

        ping 실패는 예외 대신 False로 반환한다. 이후 연산의 성공을 보장하지는 않는다.
        """
        if self.redis is None:
            return False
        try:
            await self.redis.ping()
        except _REDIS_ERRORS as e:
            logger.debug(f"Redis ping failed ({self.config.address}): {e}")
            return False
        return True

    # ==================== 기본 연산 ====================

    async def set(self, key: str, value: CacheValue, expiration: Expiration | None = None) -> None:
        """
        캐시 저장

        Args:
            key: 키 (빈 문자열 불가)
            value: 값 (str, bytes, int, float)
            expiration: 만료 시간 (초 또는 timedelta), None 또는 0이면 만료 없음.
                1초 단위가 아니면 밀리초 정밀도(PX)로 저장

        Raises:
            CacheSerializationError: 지원하지 않는 값 타입
            CacheStoreError: 전송/서버 오류
        """
        self._validate_key(key)
        if isinstance(value, bool) or not isinstance(value, (str, bytes, int, float)):
            raise CacheSerializationError(key, type(value).__name__)

        options: dict[str, int] = {}
        if expiration is not None:
            milliseconds = _to_milliseconds(expiration)
            if milliseconds % 1000 == 0:
                if milliseconds:
                    options["ex"] = milliseconds // 1000
            else:
                options["px"] = milliseconds

        await self._run("set", lambda r: r.set(key, value, **options), key=key)

    async def get(self, key: str) -> str:
        """
        캐시 조회

        Returns:
            str: 저장된 값 그대로

        Raises:
            CacheKeyNotFoundError: 키가 없는 경우
            CacheStoreError: 전송/서버 오류
        """
        self._validate_key(key)
        value = await self._run("get", lambda r: r.get(key), key=key)
        if value is None:
            raise CacheKeyNotFoundError(key)
        return value

    async def delete(self, *keys: str) -> None:
        """
        캐시 삭제 (키가 없으면 아무 것도 하지 않음)

        Raises:
            CacheStoreError: 전송/서버 오류
        """
        if not keys:
            return
        for key in keys:
            self._validate_key(key)
        await self._run("delete", lambda r: r.delete(*keys))

    async def exists(self, *keys: str) -> int:
        """
        존재하는 키 개수

        Returns:
            int: 주어진 키 중 현재 존재하는 개수

        Raises:
            CacheStoreError: 전송/서버 오류
        """
        if not keys:
            return 0
        for key in keys:
            self._validate_key(key)
        return int(await self._run("exists", lambda r: r.exists(*keys)))

    async def expire(self, key: str, expiration: Expiration) -> bool:
        """
        TTL 설정

        Args:
            key: 키
            expiration: 만료 시간 (초 또는 timedelta). 0이면 키가 즉시 만료됨

        Returns:
            bool: 적용 여부 (키가 없으면 False)

        Raises:
            CacheStoreError: 전송/서버 오류
        """
        self._validate_key(key)
        milliseconds = _to_milliseconds(expiration)
        if milliseconds % 1000 == 0:
            applied = await self._run(
                "expire", lambda r: r.expire(key, milliseconds // 1000), key=key
            )
        else:
            applied = await self._run("expire", lambda r: r.pexpire(key, milliseconds), key=key)
        return bool(applied)

    async def ttl(self, key: str) -> int:
        """
        남은 TTL 조회

        Returns:
            int: 남은 TTL (초), -1: 만료 없음, -2: 키 없음
        """
        self._validate_key(key)
        return int(await self._run("ttl", lambda r: r.ttl(key), key=key))

    # ==================== 카운터 ====================

    async def increment(self, key: str) -> int:
        """
        값 1 증가 (키가 없으면 0에서 시작)

        Raises:
            CacheValueTypeError: 저장된 값이 정수가 아닌 경우
            CacheStoreError: 전송/서버 오류
        """
        self._validate_key(key)
        return int(await self._run("increment", lambda r: r.incr(key), key=key, numeric=True))

    async def decrement(self, key: str) -> int:
        """
        값 1 감소 (키가 없으면 0에서 시작)

        Raises:
            CacheValueTypeError: 저장된 값이 정수가 아닌 경우
            CacheStoreError: 전송/서버 오류
        """
        self._validate_key(key)
        return int(await self._run("decrement", lambda r: r.decr(key), key=key, numeric=True))

    # ==================== 내부 헬퍼 ====================

    def _require_client(self) -> aioredis.Redis:
        if self.redis is None:
            raise CacheConnectionError(
                "Redis client is closed",
                details={"host": self.config.host, "port": self.config.port},
            )
        return self.redis

    @staticmethod
    def _validate_key(key: str) -> None:
        if not isinstance(key, str) or not key:
            raise InvalidInputError("key", "must be a non-empty string")

    async def _run(
        self,
        operation: str,
        command: Callable[[aioredis.Redis], Awaitable[T]],
        key: str | None = None,
        numeric: bool = False,
    ) -> T:
        """명령 실행 후 redis 예외를 캐시 예외로 변환"""
        client = self._require_client()
        details: dict[str, Any] = {"key": key} if key is not None else {}
        try:
            result = await command(client)
        except ResponseError as e:
            if numeric and key is not None and any(m in str(e) for m in _NUMERIC_ERROR_MARKERS):
                raise CacheValueTypeError(key, str(e)) from e
            logger.debug(f"Redis {operation} rejected: {e}")
            raise CacheStoreError(operation, str(e), details=details) from e
        except _REDIS_ERRORS as e:
            logger.debug(f"Redis {operation} failed: {e}")
            raise CacheStoreError(operation, str(e), details=details) from e

        self._connected = True
        return result


# ==================== 싱글톤 인스턴스 ====================

_redis_client_instance: RedisClient | None = None
_redis_client_lock = asyncio.Lock()


async def get_redis_client() -> RedisClient:
    """
    RedisClient 싱글톤 인스턴스 반환

    최초 호출 시 전역 설정(settings.redis)으로 생성 후 connect()까지 수행한다.
    동시 최초 호출에도 클라이언트는 하나만 생성된다.

    Returns:
        RedisClient: Redis 클라이언트 인스턴스

    Raises:
        CacheConnectionError: 최초 연결 확인에 실패한 경우
    """
    global _redis_client_instance
    if _redis_client_instance is not None:
        return _redis_client_instance

    async with _redis_client_lock:
        if _redis_client_instance is None:
            client = RedisClient(settings.redis)
            try:
                await client.connect()
            except CacheConnectionError:
                await client.close()
                raise
            _redis_client_instance = client
    return _redis_client_instance


async def close_redis_client() -> None:
    """싱글톤 인스턴스 종료 (생성되지 않았으면 무시)"""
    global _redis_client_instance
    if _redis_client_instance is not None:
        client, _redis_client_instance = _redis_client_instance, None
        await client.close()
