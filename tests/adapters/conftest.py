# -*- coding: utf-8 -*-
"""
캐시 어댑터 테스트 공용 픽스처

redis.asyncio.Redis 대신 메모리 저장소 대역을 사용한다.
"""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from src.adapters.cache.redis_client import RedisClient
from src.settings.config import RedisSettings


class FakeRedis:
    """
    redis.asyncio.Redis 대역

    - decode_responses=True 와 같이 문자열로 저장/반환
    - advance()로 시계를 움직여 만료 시뮬레이션
    - down=True 이면 모든 명령이 ConnectionError
    """

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.expires_at: dict[str, float] = {}
        self.now = 0.0
        self.down = False
        self.ping_count = 0
        self.closed = False

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def _check(self) -> None:
        if self.down:
            raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    def _purge(self, name: str) -> None:
        deadline = self.expires_at.get(name)
        if deadline is not None and deadline <= self.now:
            self.store.pop(name, None)
            self.expires_at.pop(name, None)

    @staticmethod
    def _encode(value) -> str:
        if isinstance(value, bytes):
            # decode_responses + surrogateescape 와 동일한 디코딩
            return value.decode("utf-8", "surrogateescape")
        if isinstance(value, float):
            return repr(value)
        return str(value)

    async def ping(self) -> bool:
        self._check()
        self.ping_count += 1
        return True

    async def set(self, name, value, ex=None, px=None) -> bool:
        self._check()
        self.store[name] = self._encode(value)
        self.expires_at.pop(name, None)
        if ex is not None:
            self.expires_at[name] = self.now + ex
        elif px is not None:
            self.expires_at[name] = self.now + px / 1000
        return True

    async def get(self, name):
        self._check()
        self._purge(name)
        return self.store.get(name)

    async def delete(self, *names) -> int:
        self._check()
        removed = 0
        for name in names:
            self._purge(name)
            if self.store.pop(name, None) is not None:
                self.expires_at.pop(name, None)
                removed += 1
        return removed

    async def exists(self, *names) -> int:
        self._check()
        count = 0
        for name in names:
            self._purge(name)
            if name in self.store:
                count += 1
        return count

    async def expire(self, name, time) -> bool:
        return self._set_expiry(name, float(time))

    async def pexpire(self, name, time) -> bool:
        return self._set_expiry(name, time / 1000)

    def _set_expiry(self, name: str, seconds: float) -> bool:
        self._check()
        self._purge(name)
        if name not in self.store:
            return False
        if seconds <= 0:
            self.store.pop(name)
            self.expires_at.pop(name, None)
        else:
            self.expires_at[name] = self.now + seconds
        return True

    async def ttl(self, name) -> int:
        self._check()
        self._purge(name)
        if name not in self.store:
            return -2
        if name not in self.expires_at:
            return -1
        return round(self.expires_at[name] - self.now)

    async def incr(self, name) -> int:
        return self._incrby(name, 1)

    async def decr(self, name) -> int:
        return self._incrby(name, -1)

    def _incrby(self, name: str, amount: int) -> int:
        self._check()
        self._purge(name)
        try:
            value = int(self.store.get(name, "0")) + amount
        except ValueError:
            raise ResponseError("value is not an integer or out of range")
        self.store[name] = str(value)
        return value

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def redis_config():
    """환경 변수/.env 영향을 받지 않는 기본 설정"""
    return RedisSettings(_env_file=None, host="localhost", port=6379, password="")


@pytest.fixture
def fake_redis():
    """메모리 Redis 대역"""
    return FakeRedis()


@pytest.fixture
def client(redis_config, fake_redis):
    """대역을 주입한 RedisClient"""
    return RedisClient(redis_config, redis=fake_redis)
