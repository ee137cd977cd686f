"""
Redis 연결 모듈 (redis.asyncio)
트랜잭션 수 캐시 전용. 미설치/미설정/연결 실패 시 None 상태로 남아 캐시 없이 동작
"""
import asyncio
from typing import Optional
from tiercheck.utils.logger import logger

# redis는 선택적 의존성
try:
    import redis.asyncio as aioredis
except ImportError:
    aioredis = None  # type: ignore

_redis: Optional["aioredis.Redis"] = None  # type: ignore


async def _connect(redis_url: str, connect_timeout: float) -> "aioredis.Redis":  # type: ignore
    client = aioredis.from_url(
        redis_url,
        decode_responses=True,
        socket_connect_timeout=connect_timeout,
    )
    try:
        await asyncio.wait_for(client.ping(), timeout=connect_timeout)
    except BaseException:
        await client.aclose()
        raise
    return client


async def init_redis(redis_url: str, connect_timeout: float = 10.0) -> None:
    global _redis

    if aioredis is None:
        logger.warning("redis 패키지 미설치 -- tx 수 캐시 비활성화")
        return
    if not redis_url:
        logger.info("REDIS_URL 미설정 -- tx 수 캐시 없이 동작")
        return

    try:
        _redis = await _connect(redis_url, connect_timeout)
        logger.info("Redis 연결 완료 (tx 수 캐시 활성화)")
    except asyncio.TimeoutError:
        logger.error(f"Redis 연결 타임아웃 ({connect_timeout}초) -- 캐시 없이 동작")
        _redis = None
    except Exception as e:
        logger.error(f"Redis 연결 실패 -- 캐시 없이 동작: {e}")
        _redis = None


async def close_redis() -> None:
    global _redis
    client, _redis = _redis, None
    if client is not None:
        await client.aclose()
        logger.info("Redis 연결 종료")


def get_redis() -> Optional["aioredis.Redis"]:  # type: ignore
    return _redis
