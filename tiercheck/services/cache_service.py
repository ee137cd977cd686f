"""
트랜잭션 수 캐시 -- Redis 기반
성공한 히스토리 집계만 저장. Redis 미연결/장애 시 조회는 미스, 저장은 no-op
"""
from typing import Optional
from tiercheck.cache import get_redis
from tiercheck.utils.logger import logger, short_wallet

TX_COUNT_PREFIX = "tiercheck:txcount:"


def tx_count_key(wallet: str) -> str:
    return f"{TX_COUNT_PREFIX}{wallet}"


def _parse_count(raw: Optional[str]) -> Optional[int]:
    """음이 아닌 정수 문자열만 유효 (bool/실수/JSON 등은 미스)"""
    if raw is None:
        return None
    raw = raw.strip()
    if not raw.isdigit():
        return None
    return int(raw)


async def get_tx_count(wallet: str) -> Optional[int]:
    r = get_redis()
    if r is None:
        return None

    try:
        raw = await r.get(tx_count_key(wallet))
    except Exception as e:
        logger.warning(f"tx 수 캐시 조회 실패 (wallet={short_wallet(wallet)}): {e}")
        return None

    count = _parse_count(raw)
    if raw is not None and count is None:
        logger.warning(f"tx 수 캐시 값 무시 (wallet={short_wallet(wallet)}): {raw!r}")
    return count


async def set_tx_count(wallet: str, total: int, ttl: int) -> bool:
    r = get_redis()
    if r is None or ttl <= 0:
        return False
    if isinstance(total, bool) or not isinstance(total, int) or total < 0:
        raise ValueError(f"tx count must be a non-negative integer, got {total!r}")

    try:
        await r.set(tx_count_key(wallet), str(total), ex=ttl)
        return True
    except Exception as e:
        logger.warning(f"tx 수 캐시 저장 실패 (wallet={short_wallet(wallet)}): {e}")
        return False
